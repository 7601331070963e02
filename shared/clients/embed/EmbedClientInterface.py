from abc import abstractmethod
from typing import Any

from shared.clients.ClientInterface import ClientInterface
from shared.errors import EmbeddingError, UpstreamUnavailableError
from shared.helper.HelperConfig import HelperConfig


class EmbedClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "embed"
        """
        return "embed"

    def _get_error_class(self) -> type[UpstreamUnavailableError]:
        return EmbeddingError

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """
        Returns the endpoint path for embedding requests.

        Returns:
            str: The endpoint path for embedding requests (e.g. "/embed")

        Raises:
            NotImplementedError: If the method is not implemented in a subclass.
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the backend-specific request body for an embedding request.

        Args:
            texts (list[str]): The texts to embed. Never empty.

        Returns:
            dict: JSON-serialisable request body (e.g. {"inputs": [...]}).

        Raises:
            NotImplementedError: If the method is not implemented in a subclass.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_embeddings_from_response(self, response_data: Any) -> list[list[float]]:
        """Extract embedding vectors from a raw embedding API response.

        Response format differs by backend:
        - text-embeddings-inference /embed: [[...], [...]] (or [...] for a single input)
        - Ollama /api/embed: {"embeddings": [[...], [...]]}

        Args:
            response_data (Any): The parsed JSON response body.

        Returns:
            list[list[float]]: Embedding vectors in the same order as the input texts.

        Raises:
            ValueError: If the response format is invalid or embeddings are empty.
            NotImplementedError: If the method is not implemented in a subclass.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Args:
            text (str): The text to embed.

        Returns:
            list[float]: The embedding vector.
        """
        vectors = await self.do_embed([text])
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts in one request.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            list[list[float]]: One vector per text, in input order.
        """
        return await self.do_embed(texts)

    async def do_embed(self, texts: list[str] | str) -> list[list[float]]:
        """Send an embedding request and return the extracted vectors.

        A single string is treated as a one-element batch. The backend decides the
        payload shape (get_embed_payload) and the response shape
        (extract_embeddings_from_response); every input must yield exactly one vector.

        Args:
            texts (list[str] | str): One or more texts to embed.

        Returns:
            list[list[float]]: Embedding vectors in the same order as the inputs.

        Raises:
            ValueError: If no text or an empty text is given.
            EmbeddingError: If the request fails or the response does not contain
                one valid vector per input.
        """
        texts = [texts] if isinstance(texts, str) else list(texts)
        if not texts or any(not text for text in texts):
            raise ValueError("Embedding input must be one or more non-empty strings.")

        body = self.get_embed_payload(texts)
        try:
            response = await self.do_request(
                method="POST",
                endpoint=self.get_endpoint_embedding(),
                json=body,
                raise_on_error=True,
            )
            vectors = self.extract_embeddings_from_response(response.json())
        except (EmbeddingError, ValueError) as e:
            raise EmbeddingError(
                f"Failed to generate embedding: {e}",
                status_code=getattr(e, "status_code", None),
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Failed to generate embedding: expected {len(texts)} vector(s), got {len(vectors)}."
            )
        self.logging.debug("Embedded %d text(s) with '%s', dimension %d", len(texts), self.get_engine_name(), len(vectors[0]))
        return vectors
