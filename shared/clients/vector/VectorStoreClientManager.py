from shared.clients.ClientManager import ClientManager
from shared.clients.vector.VectorStoreClientInterface import VectorStoreClientInterface
from shared.helper.HelperConfig import HelperConfig


class VectorStoreClientManager(ClientManager):
    """Instantiates the vector store client selected by VECTOR_ENGINE (default "chroma")."""

    client_type = "vector"
    class_prefix = "VectorStoreClient"
    label = "vector store"

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.client: VectorStoreClientInterface = self._load_client(self._read_engine("VECTOR_ENGINE", default="chroma"))

    def get_client(self) -> VectorStoreClientInterface:
        return self.client
