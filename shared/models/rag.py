"""Pydantic models for the retrieval-augmented query pipeline."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LLMProvider(str, Enum):
    """LLM backends a query can be routed to."""

    OPENAI = "openai"
    LLAMA = "llama"


class RagMode(str, Enum):
    """Whether an answer was produced with retrieved context or from general knowledge only."""

    RAG = "rag"
    GENERAL = "general"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting both spellings on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(CamelModel):
    """A previous turn of the conversation, held by the client."""

    role: Literal["user", "assistant"]
    content: str


class RagSource(CamelModel):
    """A document used as context, with its content shortened for display."""

    id: str
    content: str
    title: str | None = None
    distance: float


class RagQueryResult(CamelModel):
    """Answer of a RAG query together with the sources and prompts that produced it."""

    answer: str
    question: str
    provider: LLMProvider
    sources: list[RagSource]
    tokens_used: int
    mode: RagMode
    system_prompt: str
    user_prompt: str
