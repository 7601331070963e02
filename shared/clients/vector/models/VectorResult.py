"""Result models returned by vector store clients."""

from typing import Any

from pydantic import BaseModel


class VectorGetResult(BaseModel):
    """Records fetched from a collection, as parallel lists.

    Attributes:
        ids:       Record identifiers.
        documents: Stored text of each record (None if the store has none).
        metadatas: Metadata of each record (None if the store has none).
    """

    ids: list[str] = []
    documents: list[str | None] = []
    metadatas: list[dict[str, Any] | None] = []


class VectorQueryResult(VectorGetResult):
    """Nearest neighbours of a query vector, ordered by ascending distance.

    Attributes:
        distances: Distance of each hit to the query vector (lower = more similar).
    """

    distances: list[float] = []
