from shared.clients.llm.LLMClientInterface import NO_ANSWER, LLMClientInterface
from shared.clients.llm.models.LLMCompletion import LLMCompletion
from shared.errors import MisconfigurationError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.rag import ChatMessage, LLMProvider

TEMPERATURE = 0.7
MAX_TOKENS = 800


class LLMClientOpenai(LLMClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("OPENAI_BASE_URL", default="https://api.openai.com/v1", val_type="string")
        self._api_key = self.get_config_val("OPENAI_API_KEY", default="", val_type="string")
        self._model = self.get_config_val("OPENAI_MODEL", default="gpt-4o-mini", val_type="string")
        if not self._api_key:
            self.logging.warning("OPENAI_API_KEY not set. OpenAI queries will fail.")
        self.logging.info("OpenAI client initialized with model: %s", self._model)

    ##########################################
    ############### CHECKER ##################
    ##########################################

    def check_configuration(self) -> None:
        if not self._api_key:
            raise MisconfigurationError("OPENAI_API_KEY is not set; the openai provider is unavailable.")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Openai"

    def get_provider(self) -> LLMProvider:
        return LLMProvider.OPENAI

    def get_model(self) -> str:
        return self._model

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="OPENAI_BASE_URL", val_type="string", default="https://api.openai.com/v1"),
            EnvConfig(env_key="OPENAI_API_KEY", val_type="string", default=""),
            EnvConfig(env_key="OPENAI_MODEL", val_type="string", default="gpt-4o-mini"),
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
        return "/models"

    def _get_endpoint_completion(self) -> str:
        return "/chat/completions"

    ################ PAYLOAD BUILDER ##################
    def get_completion_payload(self, system_prompt: str, user_prompt: str, history: list[ChatMessage]) -> dict:
        """Build the chat-completion request body.

        Messages are [system, ...history, user].

        Returns:
            dict: {"model", "messages", "temperature", "max_tokens"}
        """
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": msg.role, "content": msg.content} for msg in history)
        messages.append({"role": "user", "content": user_prompt})
        return {
            "model": self._model,
            "messages": messages,
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_completion(self, response_data: dict) -> LLMCompletion:
        choices = response_data.get("choices") or []
        first_choice = (choices[0] if choices else None) or {}
        message = first_choice.get("message") or {}
        usage = response_data.get("usage") or {}
        return LLMCompletion(
            answer=message.get("content") or NO_ANSWER,
            tokens_used=usage.get("total_tokens") or 0,
        )
