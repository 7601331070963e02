from typing import Any

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class EmbedClientTei(EmbedClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("EMBEDDING_SERVICE_URL", default="http://localhost:8001", val_type="string")
        self._api_key = self.get_config_val("EMBEDDING_SERVICE_API_KEY", default="", val_type="string")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Tei"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="EMBEDDING_SERVICE_URL", val_type="string", default="http://localhost:8001"),
            EnvConfig(env_key="EMBEDDING_SERVICE_API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/health"

    def get_endpoint_embedding(self) -> str:
        return "/embed"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, texts: list[str]) -> dict:
        """Build the text-embeddings-inference request body.

        A single text is sent as a plain string, several texts as a list.

        Args:
            texts (list[str]): The texts to embed.

        Returns:
            dict: {"inputs": "..."} or {"inputs": [...]}
        """
        return {"inputs": texts[0] if len(texts) == 1 else texts}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embeddings_from_response(self, response_data: Any) -> list[list[float]]:
        """Extract embedding vectors from a /embed response.

        The service answers with a list of vectors. Some deployments return a
        flat vector for a single string input; that is wrapped into a list.

        Args:
            response_data (Any): The parsed JSON response body.

        Returns:
            list[list[float]]: Embedding vectors in input order.

        Raises:
            ValueError: If the response is not a non-empty list of numbers or of number lists.
        """
        if not isinstance(response_data, list) or not response_data:
            raise ValueError(f"Embedding service returned an unexpected payload of type {type(response_data).__name__}.")
        if all(isinstance(value, (int, float)) for value in response_data):
            return [[float(value) for value in response_data]]
        if all(isinstance(vector, list) and vector for vector in response_data):
            return response_data
        raise ValueError("Embedding service response does not contain valid embeddings.")
