from fastapi import APIRouter, Request, status

from server.models.requests import AddDocumentRequest, SearchRequest, UpdateDocumentRequest
from server.models.responses import CountResponse, DeleteResponse, ErrorResponse
from shared.models.document import Document, SearchResult

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a new document")
async def add_document(request: Request, body: AddDocumentRequest) -> Document:
    """Embed and store a new document.

    Args:
        request (Request): FastAPI request (provides app.state.document_service).
        body (AddDocumentRequest): JSON body with content and optional title.

    Returns:
        Document: The stored document with generated id and metadata.
    """
    return await request.app.state.document_service.add(body.content, body.title)


@router.get("", summary="Get all documents")
async def list_documents(request: Request) -> list[Document]:
    return await request.app.state.document_service.list()


@router.get("/count", summary="Get document count")
async def count_documents(request: Request) -> CountResponse:
    count = await request.app.state.document_service.count()
    return CountResponse(count=count)


@router.post("/search", summary="Search documents by semantic similarity")
async def search_documents(request: Request, body: SearchRequest) -> list[SearchResult]:
    """Return the documents closest to the query text, most similar first.

    Args:
        request (Request): FastAPI request (provides app.state.document_service).
        body (SearchRequest): JSON body with query and optional limit (default 5).

    Returns:
        list[SearchResult]: Documents with their distance to the query.
    """
    return await request.app.state.document_service.search(body.query, body.limit)


@router.put(
    "/{document_id}",
    summary="Update a document by ID",
    responses={404: {"model": ErrorResponse}},
)
async def update_document(request: Request, document_id: str, body: UpdateDocumentRequest) -> Document:
    """Replace the content and/or title of a document and re-embed it.

    Args:
        request (Request): FastAPI request (provides app.state.document_service).
        document_id (str): The id of the document to update.
        body (UpdateDocumentRequest): JSON body with optional content and title.

    Returns:
        Document: The updated document.
    """
    return await request.app.state.document_service.update(document_id, body.content, body.title)


@router.delete("/{document_id}", summary="Delete a document by ID")
async def delete_document(request: Request, document_id: str) -> DeleteResponse:
    result = await request.app.state.document_service.delete(document_id)
    return DeleteResponse(**result)
