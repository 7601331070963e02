from typing import Any

from shared.clients.vector.VectorStoreClientInterface import VectorStoreClientInterface
from shared.clients.vector.models.VectorResult import VectorGetResult, VectorQueryResult
from shared.errors import VectorStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class VectorStoreClientChroma(VectorStoreClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("CHROMA_URL", default="http://localhost:8000", val_type="string")
        self._api_key = self.get_config_val("CHROMA_API_KEY", default="", val_type="string")
        self._tenant = self.get_config_val("CHROMA_TENANT", default="default_tenant", val_type="string")
        self._database = self.get_config_val("CHROMA_DATABASE", default="default_database", val_type="string")
        self._collection_name = self.get_config_val("CHROMA_COLLECTION", default="documents", val_type="string")
        self._collection_id: str | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Chroma"

    def get_collection_name(self) -> str:
        return self._collection_name

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="CHROMA_URL", val_type="string", default="http://localhost:8000"),
            EnvConfig(env_key="CHROMA_API_KEY", val_type="string", default=""),
            EnvConfig(env_key="CHROMA_TENANT", val_type="string", default="default_tenant"),
            EnvConfig(env_key="CHROMA_DATABASE", val_type="string", default="default_database"),
            EnvConfig(env_key="CHROMA_COLLECTION", val_type="string", default="documents"),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"x-chroma-token": self._api_key}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/v2/heartbeat"

    def _get_collections_path(self) -> str:
        return f"/api/v2/tenants/{self._tenant}/databases/{self._database}/collections"

    def _get_collection_path(self) -> str:
        if self._collection_id is None:
            raise VectorStoreError(
                f"Chroma collection '{self._collection_name}' is not initialised. Call do_ensure_collection() first."
            )
        return f"{self._get_collections_path()}/{self._collection_id}"

    def _get_endpoint_create_collection(self) -> str:
        return self._get_collections_path()

    def _get_endpoint_add(self) -> str:
        return f"{self._get_collection_path()}/add"

    def _get_endpoint_upsert(self) -> str:
        return f"{self._get_collection_path()}/upsert"

    def _get_endpoint_delete(self) -> str:
        return f"{self._get_collection_path()}/delete"

    def _get_endpoint_query(self) -> str:
        return f"{self._get_collection_path()}/query"

    def _get_endpoint_get(self) -> str:
        return f"{self._get_collection_path()}/get"

    def _get_endpoint_count(self) -> str:
        return f"{self._get_collection_path()}/count"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_create_collection_payload(self) -> dict:
        return {
            "name": self._collection_name,
            "get_or_create": True,
            "metadata": {"description": "RAG documents collection"},
        }

    def get_write_payload(self, ids: list[str], texts: list[str], vectors: list[list[float]], metadatas: list[dict]) -> dict:
        return {
            "ids": ids,
            "embeddings": vectors,
            "documents": texts,
            "metadatas": metadatas,
        }

    def get_delete_payload(self, ids: list[str]) -> dict:
        return {"ids": ids}

    def get_query_payload(self, vector: list[float], k: int) -> dict:
        return {
            "query_embeddings": [vector],
            "n_results": k,
            "include": ["documents", "metadatas", "distances"],
        }

    def get_get_payload(self, ids: list[str] | None) -> dict:
        payload: dict = {"include": ["documents", "metadatas"]}
        if ids is not None:
            payload["ids"] = ids
        return payload

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def extract_collection_id(self, raw_response: dict) -> str:
        collection_id = raw_response.get("id")
        if not collection_id:
            raise VectorStoreError(f"Chroma did not return an id for collection '{self._collection_name}'.")
        self._collection_id = str(collection_id)
        return self._collection_id

    def extract_query_result(self, raw_response: dict) -> VectorQueryResult:
        # chroma answers with one inner list per query embedding; we always send exactly one
        def first(key: str) -> list:
            outer = raw_response.get(key) or []
            return (outer[0] if outer else None) or []

        ids = first("ids")
        return VectorQueryResult(
            ids=ids,
            documents=first("documents") or [None] * len(ids),
            metadatas=first("metadatas") or [None] * len(ids),
            distances=first("distances"),
        )

    def extract_get_result(self, raw_response: dict) -> VectorGetResult:
        ids = raw_response.get("ids") or []
        return VectorGetResult(
            ids=ids,
            documents=raw_response.get("documents") or [None] * len(ids),
            metadatas=raw_response.get("metadatas") or [None] * len(ids),
        )

    def extract_count(self, raw_response: Any) -> int:
        if isinstance(raw_response, bool) or not isinstance(raw_response, (int, str)):
            raise ValueError(f"Unexpected count response from Chroma: {raw_response!r}")
        return int(raw_response)
