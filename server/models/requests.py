from pydantic import BaseModel, Field, field_validator

from shared.models.rag import CamelModel, ChatMessage, LLMProvider


class AddDocumentRequest(BaseModel):
    content: str = Field(min_length=1)
    title: str | None = None


class UpdateDocumentRequest(BaseModel):
    content: str | None = Field(default=None, min_length=1)
    title: str | None = None


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    limit: int = Field(default=5, ge=1)


class RagQueryRequest(CamelModel):
    """Body of POST /rag/query. Null or zero values fall back to the defaults."""

    question: str = Field(min_length=1)
    context_limit: int | None = Field(default=None, ge=1)
    provider: LLMProvider = LLMProvider.OPENAI
    conversation_history: list[ChatMessage] = []

    @field_validator("context_limit", mode="before")
    @classmethod
    def _zero_limit_means_default(cls, value):
        return None if value in (None, 0) else value

    @field_validator("provider", mode="before")
    @classmethod
    def _null_provider_means_default(cls, value):
        return LLMProvider.OPENAI if value in (None, "") else value

    @field_validator("conversation_history", mode="before")
    @classmethod
    def _null_history_means_empty(cls, value):
        return [] if value is None else value
