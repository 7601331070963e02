from shared.clients.ClientManager import ClientManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.HelperConfig import HelperConfig


class EmbedClientManager(ClientManager):
    """Instantiates the embedding client selected by EMBED_ENGINE (default "tei")."""

    client_type = "embed"
    class_prefix = "EmbedClient"
    label = "Embed"

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.client: EmbedClientInterface = self._load_client(self._read_engine("EMBED_ENGINE", default="tei"))

    def get_client(self) -> EmbedClientInterface:
        return self.client
