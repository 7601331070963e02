from shared.clients.ClientManager import ClientManager
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.rag import LLMProvider

# engine implementing each provider
PROVIDER_ENGINES: dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "Openai",
    LLMProvider.LLAMA: "Ollama",
}


class LLMClientManager(ClientManager):
    """Instantiates one LLM client per supported provider."""

    client_type = "llm"
    class_prefix = "LLMClient"
    label = "LLM"

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.clients: dict[LLMProvider, LLMClientInterface] = {
            provider: self._load_client(engine) for provider, engine in PROVIDER_ENGINES.items()
        }

    def get_clients(self) -> dict[LLMProvider, LLMClientInterface]:
        """Return the LLM clients keyed by provider."""
        return self.clients
