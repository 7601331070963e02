from abc import abstractmethod
from typing import Any

from shared.clients.ClientInterface import ClientInterface
from shared.clients.vector.models.VectorResult import VectorGetResult, VectorQueryResult
from shared.errors import UpstreamUnavailableError, VectorStoreError
from shared.helper.HelperConfig import HelperConfig


class VectorStoreClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "vector"
        """
        return "vector"

    def _get_error_class(self) -> type[UpstreamUnavailableError]:
        return VectorStoreError

    @abstractmethod
    def get_collection_name(self) -> str:
        """Returns the name of the collection holding the documents."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_create_collection(self) -> str:
        """
        Returns the endpoint path for create-or-get collection requests.

        Raises:
            NotImplementedError: If the method is not implemented in a subclass.
        """
        pass

    @abstractmethod
    def _get_endpoint_add(self) -> str:
        """Returns the endpoint path for adding records."""
        pass

    @abstractmethod
    def _get_endpoint_upsert(self) -> str:
        """Returns the endpoint path for inserting or replacing records by id."""
        pass

    @abstractmethod
    def _get_endpoint_delete(self) -> str:
        """Returns the endpoint path for deleting records by id."""
        pass

    @abstractmethod
    def _get_endpoint_query(self) -> str:
        """Returns the endpoint path for nearest-neighbour queries."""
        pass

    @abstractmethod
    def _get_endpoint_get(self) -> str:
        """Returns the endpoint path for fetching records."""
        pass

    @abstractmethod
    def _get_endpoint_count(self) -> str:
        """Returns the endpoint path for counting the records of the collection."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_create_collection_payload(self) -> dict:
        """Builds the backend-specific payload for a create-or-get collection request."""
        pass

    @abstractmethod
    def get_write_payload(self, ids: list[str], texts: list[str], vectors: list[list[float]], metadatas: list[dict]) -> dict:
        """Builds the backend-specific payload for add and upsert requests.

        Args:
            ids (list[str]): Record identifiers.
            texts (list[str]): Text of each record.
            vectors (list[list[float]]): Embedding of each record.
            metadatas (list[dict]): Metadata of each record.

        Returns:
            dict: The payload for the write request.
        """
        pass

    @abstractmethod
    def get_delete_payload(self, ids: list[str]) -> dict:
        """Builds the backend-specific payload for deleting records by id."""
        pass

    @abstractmethod
    def get_query_payload(self, vector: list[float], k: int) -> dict:
        """Builds the backend-specific payload for a nearest-neighbour query.

        Args:
            vector (list[float]): The query embedding.
            k (int): Maximum number of hits.

        Returns:
            dict: The payload for the query request.
        """
        pass

    @abstractmethod
    def get_get_payload(self, ids: list[str] | None) -> dict:
        """Builds the backend-specific payload for fetching records.

        Args:
            ids (list[str] | None): Records to fetch, or None for the whole collection.
        """
        pass

    ################ RESPONSE PARSER ##################
    @abstractmethod
    def extract_collection_id(self, raw_response: dict) -> str:
        """Extracts the identifier of the collection from a create-or-get response."""
        pass

    @abstractmethod
    def extract_query_result(self, raw_response: dict) -> VectorQueryResult:
        """Extracts the hits of a single-vector query response."""
        pass

    @abstractmethod
    def extract_get_result(self, raw_response: dict) -> VectorGetResult:
        """Extracts the records from a get response."""
        pass

    @abstractmethod
    def extract_count(self, raw_response: Any) -> int:
        """Extracts the record count from a count response."""
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_ensure_collection(self) -> str:
        """Create the collection if it does not exist yet, otherwise fetch it.

        Returns:
            str: The backend identifier of the collection.

        Raises:
            VectorStoreError: If the backend cannot create or return the collection.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_create_collection_payload(),
            endpoint=self._get_endpoint_create_collection(),
            raise_on_error=True,
        )
        collection_id = self.extract_collection_id(resp.json())
        self.logging.info("Connected to %s collection '%s' (%s).", self.get_engine_name(), self.get_collection_name(), collection_id)
        return collection_id

    async def do_add(self, id: str, text: str, vector: list[float], metadata: dict) -> None:
        """Add a single record to the collection.

        Args:
            id (str): Record identifier.
            text (str): Record text.
            vector (list[float]): Record embedding.
            metadata (dict): Record metadata.
        """
        await self.do_request(
            method="POST",
            json=self.get_write_payload([id], [text], [vector], [metadata]),
            endpoint=self._get_endpoint_add(),
            raise_on_error=True,
        )

    async def do_upsert(self, id: str, text: str, vector: list[float], metadata: dict) -> None:
        """Insert a record, or replace the existing record with the same id, in one request.

        Args:
            id (str): Record identifier.
            text (str): Record text.
            vector (list[float]): Record embedding.
            metadata (dict): Record metadata.
        """
        await self.do_request(
            method="POST",
            json=self.get_write_payload([id], [text], [vector], [metadata]),
            endpoint=self._get_endpoint_upsert(),
            raise_on_error=True,
        )

    async def do_delete(self, id: str) -> None:
        """Delete a record by id.

        Args:
            id (str): Record identifier.
        """
        await self.do_request(
            method="POST",
            json=self.get_delete_payload([id]),
            endpoint=self._get_endpoint_delete(),
            raise_on_error=True,
        )

    async def do_query(self, vector: list[float], k: int) -> VectorQueryResult:
        """Return the k records closest to the given vector.

        Args:
            vector (list[float]): The query embedding.
            k (int): Maximum number of hits.

        Returns:
            VectorQueryResult: Hits ordered by ascending distance, at most k.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_query_payload(vector, k),
            endpoint=self._get_endpoint_query(),
            raise_on_error=True,
        )
        result = self.extract_query_result(resp.json())
        # order and truncation are enforced here, independent of the backend
        order = sorted(range(len(result.ids)), key=lambda i: result.distances[i])[:k]
        return VectorQueryResult(
            ids=[result.ids[i] for i in order],
            documents=[result.documents[i] for i in order],
            metadatas=[result.metadatas[i] for i in order],
            distances=[result.distances[i] for i in order],
        )

    async def do_get(self, ids: list[str]) -> VectorGetResult:
        """Fetch the records with the given ids. Unknown ids are omitted.

        Args:
            ids (list[str]): Record identifiers.

        Returns:
            VectorGetResult: The found records.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_get_payload(ids),
            endpoint=self._get_endpoint_get(),
            raise_on_error=True,
        )
        return self.extract_get_result(resp.json())

    async def do_get_all(self) -> VectorGetResult:
        """Fetch every record of the collection.

        Returns:
            VectorGetResult: All records.
        """
        resp = await self.do_request(
            method="POST",
            json=self.get_get_payload(None),
            endpoint=self._get_endpoint_get(),
            raise_on_error=True,
        )
        return self.extract_get_result(resp.json())

    async def do_count(self) -> int:
        """Count the records of the collection.

        Any failure is logged and reported as 0, so callers must tolerate undercounting.

        Returns:
            int: The number of records, or 0 if the backend failed.
        """
        try:
            resp = await self.do_request(
                method="GET",
                endpoint=self._get_endpoint_count(),
                raise_on_error=True,
            )
            return self.extract_count(resp.json())
        except (VectorStoreError, ValueError, TypeError) as e:
            self.logging.error("Error counting documents in '%s': %s", self.get_collection_name(), e)
            return 0
