from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.clients.llm.models.LLMCompletion import LLMCompletion
from shared.errors import LLMError, UpstreamUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.rag import ChatMessage, LLMProvider

NO_ANSWER = "No answer generated."


class LLMClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def check_configuration(self) -> None:
        """Raise if the client cannot be used with the current settings.

        Called before every completion request. Clients whose settings are
        always complete keep this no-op.

        Raises:
            MisconfigurationError: If a required setting is missing.
        """
        return None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "llm"

    def _get_default_timeout(self) -> float:
        # generation is much slower than the other backends
        return 120.0

    def _get_error_class(self) -> type[UpstreamUnavailableError]:
        return LLMError

    @abstractmethod
    def get_provider(self) -> LLMProvider:
        """Returns the provider this client serves (e.g. LLMProvider.OPENAI)."""
        pass

    @abstractmethod
    def get_model(self) -> str:
        """Returns the model name sent to the backend."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_completion(self) -> str:
        """Returns the endpoint path for generation requests (e.g. "/chat/completions")."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_completion_payload(self, system_prompt: str, user_prompt: str, history: list[ChatMessage]) -> dict:
        """Build the backend-specific request body for a completion.

        Args:
            system_prompt (str): Instructions for the model.
            user_prompt (str): The question, possibly with retrieved context.
            history (list[ChatMessage]): Previous turns, already windowed, oldest first.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_completion(self, response_data: dict) -> LLMCompletion:
        """Extract the answer and token usage from a raw completion response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            LLMCompletion: The answer, falling back to NO_ANSWER if the backend returned none.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_complete(self, system_prompt: str, user_prompt: str, history: list[ChatMessage]) -> LLMCompletion:
        """Send a completion request and return the normalised reply.

        Args:
            system_prompt (str): Instructions for the model.
            user_prompt (str): The question, possibly with retrieved context.
            history (list[ChatMessage]): Previous turns, already windowed, oldest first.

        Returns:
            LLMCompletion: The answer and token usage.

        Raises:
            MisconfigurationError: If the client is missing a required setting.
            LLMError: If the HTTP request fails.
        """
        self.check_configuration()
        body = self.get_completion_payload(system_prompt, user_prompt, history)
        self.logging.debug(
            "Sending completion to '%s' (model %s) with %d history message(s).",
            self.get_provider().value, self.get_model(), len(history),
        )
        response = await self.do_request(
            method="POST",
            endpoint=self._get_endpoint_completion(),
            json=body,
            raise_on_error=True,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise LLMError(f"{self.get_engine_name()} returned a non-JSON response: {e}") from e
        return self.extract_completion(data if isinstance(data, dict) else {})
