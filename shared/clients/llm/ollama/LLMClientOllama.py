from shared.clients.llm.LLMClientInterface import NO_ANSWER, LLMClientInterface
from shared.clients.llm.models.LLMCompletion import LLMCompletion
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig
from shared.models.rag import ChatMessage, LLMProvider

# sampling options tuned for fast local generation
GENERATE_OPTIONS = {
    "temperature": 0.5,
    "num_predict": 500,
    "num_ctx": 2048,
    "top_k": 20,
    "top_p": 0.9,
}


class LLMClientOllama(LLMClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("OLLAMA_URL", default="http://localhost:11434", val_type="string")
        self._api_key = self.get_config_val("OLLAMA_API_KEY", default="", val_type="string")
        self._model = self.get_config_val("OLLAMA_MODEL", default="llama3.2", val_type="string")
        self.logging.info("Ollama client initialized at %s with model: %s", self._base_url, self._model)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Ollama"

    def get_provider(self) -> LLMProvider:
        return LLMProvider.LLAMA

    def get_model(self) -> str:
        return self._model

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="OLLAMA_URL", val_type="string", default="http://localhost:11434"),
            EnvConfig(env_key="OLLAMA_API_KEY", val_type="string", default=""),
            EnvConfig(env_key="OLLAMA_MODEL", val_type="string", default="llama3.2"),
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
        return ""

    def _get_endpoint_completion(self) -> str:
        return "/api/generate"

    ################ PAYLOAD BUILDER ##################
    def build_prompt(self, system_prompt: str, user_prompt: str, history: list[ChatMessage]) -> str:
        """Flatten system prompt, history and user prompt into one generation prompt.

        History turns are rendered as "User: ..." / "Assistant: ..." blocks
        separated by blank lines.

        Returns:
            str: The prompt sent to /api/generate.
        """
        conversation = ""
        if history:
            conversation = "\n\n".join(
                f"{'User' if msg.role == 'user' else 'Assistant'}: {msg.content}" for msg in history
            ) + "\n\n"
        return f"{system_prompt}\n\nConversation History:\n{conversation}{user_prompt}"

    def get_completion_payload(self, system_prompt: str, user_prompt: str, history: list[ChatMessage]) -> dict:
        """Build the Ollama generate request body.

        Returns:
            dict: {"model", "prompt", "stream": False, "options": {...}}
        """
        return {
            "model": self._model,
            "prompt": self.build_prompt(system_prompt, user_prompt, history),
            "stream": False,
            "options": dict(GENERATE_OPTIONS),
        }

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_completion(self, response_data: dict) -> LLMCompletion:
        # /api/generate does not report usage in a comparable way
        return LLMCompletion(answer=response_data.get("response") or NO_ANSWER, tokens_used=0)
