"""Error taxonomy shared by clients, services and the API layer."""


class RagBridgeError(Exception):
    """Base class for all application errors."""


class UpstreamUnavailableError(RagBridgeError):
    """Raised when an external service cannot be reached or answers with a non-2xx status.

    Attributes:
        status_code (int | None): The HTTP status returned by the upstream service, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmbeddingError(UpstreamUnavailableError):
    """Raised when the embedding service fails."""


class VectorStoreError(UpstreamUnavailableError):
    """Raised when the vector database fails."""


class LLMError(UpstreamUnavailableError):
    """Raised when an LLM provider fails."""


class DocumentNotFoundError(RagBridgeError):
    """Raised when a document id does not exist in the collection."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document with id '{document_id}' not found.")
        self.document_id = document_id


class MisconfigurationError(RagBridgeError):
    """Raised on first use of a client whose required settings are missing."""


class RagQueryError(RagBridgeError):
    """Raised when any step of the RAG query pipeline fails."""
