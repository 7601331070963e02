from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes

from shared.errors import UpstreamUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class ClientInterface(ABC):
    """Base class of every outbound HTTP client (embed, vector, llm).

    Subclasses describe their backend through the abstract getters; this class
    owns the httpx.AsyncClient lifecycle and turns transport failures into the
    client's own error type.
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        # e.g. EMBED_TIMEOUT, VECTOR_TIMEOUT, LLM_TIMEOUT
        self.timeout = helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=self._get_default_timeout())

        self._client: httpx.AsyncClient | None = None
        self.validate_full_configuration()

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def validate_full_configuration(self) -> None:
        """
        Reads every value listed by _get_required_config() once, so that a missing
        or malformed variable fails at construction time.

        Raises:
            ValueError: If a required value is missing or cannot be parsed.
        """
        for config in self._get_required_config():
            self.get_config_val(raw_key=config.env_key, default=config.default, val_type=config.val_type)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "vector"
        """
        pass

    def get_engine_name(self) -> str:
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the name of the backend engine. E.g. "Chroma"
        """
        pass

    def _get_default_timeout(self) -> float:
        """Seconds to wait for a response when <TYPE>_TIMEOUT is not set."""
        return 30.0

    def _get_error_class(self) -> type[UpstreamUnavailableError]:
        """Exception type raised when a request of this client fails."""
        return UpstreamUnavailableError

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns:
            list[EnvConfig]: Every environment variable the client reads, with type and default.
        """
        pass

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """
        Reads a configuration value of the given type from the environment.

        Args:
            raw_key (str): The environment variable name (e.g. "CHROMA_URL")
            default (Any): Returned if the variable is not set
            val_type (str): One of "string", "number", "bool", "list"
        """
        readers = {
            "string": self._helper_config.get_string_val,
            "number": self._helper_config.get_number_val,
            "bool": self._helper_config.get_bool_val,
            "list": self._helper_config.get_list_val,
        }
        reader = readers.get(val_type)
        if reader is None:
            raise ValueError(f"Unsupported config value type '{val_type}' for env key '{raw_key}' in {self.get_client_type().upper()} client '{self.get_engine_name()}'.")
        return reader(raw_key.upper(), default=default)

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns:
            dict: Headers that authenticate against the backend, empty if no key is configured.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns:
            str: The backend base URL (e.g. "http://localhost:8000")
        """
        pass

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns:
            str: Path probed by do_healthcheck() (e.g. "/health")
        """
        pass

    def _build_url(self, endpoint: str) -> str:
        endpoint = endpoint.strip()
        path = "/" + endpoint.lstrip("/") if endpoint else ""
        return f"{self._get_base_url().rstrip('/')}{path}"

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> bool:
        """Probe the backend.

        Returns:
            bool: True if the backend answered with a 2xx status, False otherwise.
        """
        try:
            response = await self.do_request(method="GET", endpoint=self._get_endpoint_healthcheck())
        except UpstreamUnavailableError as e:
            self.logging.warning("Healthcheck of %s client '%s' failed: %s", self.get_client_type(), self.get_engine_name(), e)
            return False
        return response.is_success

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        """Create the shared HTTP client. Must be called before any request."""
        self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        endpoint: str = "",
        json: dict | list | None = None,
        params: QueryParamTypes | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, ...).
            endpoint: Path appended to the base URL, leading slash optional.
            json: JSON body, sent only when not None.
            params: URL query parameters.
            raise_on_error: Raise if the backend answers with a non-2xx status.

        Returns:
            The raw httpx.Response.

        Raises:
            UpstreamUnavailableError: The subtype from _get_error_class(), if the
                client is not booted, the backend cannot be reached, or (with
                raise_on_error) the status is not 2xx.
        """
        error_class = self._get_error_class()
        if self._client is None:
            raise error_class(f"HTTP client of {self.get_client_type()} client '{self.get_engine_name()}' not initialised. Call boot() before making requests.")

        url = self._build_url(endpoint)
        kwargs: dict = {"headers": self._get_auth_header(), "params": params, "timeout": self.timeout}
        if json is not None:
            kwargs["json"] = json

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self.logging.error("Request to %s failed: %s", url, e)
            raise error_class(f"Request to {url} failed: {e}") from e

        if raise_on_error and not response.is_success:
            self.logging.error("Request to %s failed with status %d: %s", url, response.status_code, response.text[:200])
            raise error_class(f"Request to {url} failed with status {response.status_code}", status_code=response.status_code)

        return response
