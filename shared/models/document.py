"""Pydantic models for stored documents.

Hierarchy:
  Document: a text stored in the vector collection with its metadata.
  SearchResult: a Document plus its distance to a search query.
"""

from typing import Any

from pydantic import BaseModel


class Document(BaseModel):
    """A text document stored alongside its embedding.

    The metadata dict is free-form. The catalog always sets "title" and
    "createdAt"; updates add "updatedAt". Timestamps are ISO-8601 strings.
    """

    id: str
    content: str
    metadata: dict[str, Any] = {}


class SearchResult(Document):
    """A document returned by a similarity search. Lower distance means more similar."""

    distance: float
