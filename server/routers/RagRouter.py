from fastapi import APIRouter, Request

from server.models.requests import RagQueryRequest
from server.models.responses import ErrorResponse
from shared.models.rag import RagQueryResult

router = APIRouter(prefix="/rag", tags=["rag"])


@router.post(
    "/query",
    summary="Query an LLM (OpenAI or Llama) with RAG context",
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def query(request: Request, body: RagQueryRequest) -> RagQueryResult:
    """Answer a question with the selected provider, using stored documents as context.

    Args:
        request (Request): FastAPI request (provides app.state.rag_service).
        body (RagQueryRequest): JSON body with question, contextLimit, provider and conversationHistory.

    Returns:
        RagQueryResult: Answer with sources, mode, token usage and the prompts sent.
    """
    rag_service = request.app.state.rag_service
    return await rag_service.query(
        question=body.question,
        context_limit=body.context_limit,
        provider=body.provider,
        conversation_history=body.conversation_history,
    )
