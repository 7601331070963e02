"""Document catalog: CRUD and similarity search over the vector collection.

Assigns ids, titles and timestamps to raw text, computes embeddings through
the embed client and stores everything through the vector store client.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.vector.VectorStoreClientInterface import VectorStoreClientInterface
from shared.errors import DocumentNotFoundError
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import Document, SearchResult


def _now_iso() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DocumentService:
    """Manages the documents stored in the vector collection."""

    def __init__(
        self,
        helper_config: HelperConfig,
        vector_client: VectorStoreClientInterface,
        embed_client: EmbedClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._vector = vector_client
        self._embed = embed_client

    ##########################################
    ################ WRITE ###################
    ##########################################

    async def add(self, content: str, title: str | None = None) -> Document:
        """Store a new document.

        Args:
            content (str): The document text.
            title (str | None): Optional title. Defaults to "Document <first 8 chars of id>".

        Returns:
            Document: The stored document with its generated id and metadata.
        """
        doc_id = str(uuid.uuid4())
        metadata = {
            "title": title or f"Document {doc_id[:8]}",
            "createdAt": _now_iso(),
        }
        vector = await self._embed.embed(content)
        await self._vector.do_add(doc_id, content, vector, metadata)
        self.logging.info("Added document %s ('%s', %d chars).", doc_id, metadata["title"], len(content))
        return Document(id=doc_id, content=content, metadata=metadata)

    async def delete(self, doc_id: str) -> dict:
        """Delete a document by id.

        Args:
            doc_id (str): The document id.

        Returns:
            dict: {"success": True, "id": doc_id}
        """
        await self._vector.do_delete(doc_id)
        self.logging.info("Deleted document %s.", doc_id)
        return {"success": True, "id": doc_id}

    async def update(self, doc_id: str, content: str | None = None, title: str | None = None) -> Document:
        """Change the content and/or title of a document.

        The embedding is computed exactly once, from the content the document
        has after the update, and the record is replaced with a single upsert.

        Args:
            doc_id (str): The document id.
            content (str | None): New content, or None to keep the current one.
            title (str | None): New title, or None to keep the current one.

        Returns:
            Document: The updated document.

        Raises:
            DocumentNotFoundError: If no document with this id exists.
        """
        existing = await self._vector.do_get([doc_id])
        if doc_id not in existing.ids:
            raise DocumentNotFoundError(doc_id)
        index = existing.ids.index(doc_id)

        new_content = content if content is not None else (existing.documents[index] or "")
        metadata = dict(existing.metadatas[index] or {})
        if title is not None:
            metadata["title"] = title
        metadata["updatedAt"] = _now_iso()

        vector = await self._embed.embed(new_content)
        await self._vector.do_upsert(doc_id, new_content, vector, metadata)
        self.logging.info("Updated document %s (content changed: %s).", doc_id, content is not None)
        return Document(id=doc_id, content=new_content, metadata=metadata)

    ##########################################
    ################ READ ####################
    ##########################################

    async def list(self) -> list[Document]:
        """Return every stored document."""
        result = await self._vector.do_get_all()
        return [
            Document(
                id=doc_id,
                content=result.documents[i] or "",
                metadata=result.metadatas[i] or {},
            )
            for i, doc_id in enumerate(result.ids)
        ]

    async def count(self) -> int:
        """Return the number of stored documents, 0 if the vector store is unavailable."""
        return await self._vector.do_count()

    async def search(self, query: str, k: int = 5) -> list[SearchResult]:
        """Return the k documents closest to the query text.

        Args:
            query (str): The search text.
            k (int): Maximum number of results.

        Returns:
            list[SearchResult]: Results ordered by ascending distance.
        """
        vector = await self._embed.embed(query)
        result = await self._vector.do_query(vector, k)
        self.logging.debug("Search for %r returned %d hit(s).", query[:80], len(result.ids))
        return [
            SearchResult(
                id=doc_id,
                content=result.documents[i] or "",
                metadata=result.metadatas[i] or {},
                distance=result.distances[i],
            )
            for i, doc_id in enumerate(result.ids)
        ]
