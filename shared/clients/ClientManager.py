from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig


class ClientManager:
    """
    Base class for the managers that pick a client implementation by engine name.

    Implementations are looked up as shared.clients.<client_type>.<engine>.<class_prefix><Engine>,
    e.g. shared.clients.vector.chroma.VectorStoreClientChroma.
    """

    client_type: str = ""
    class_prefix: str = ""
    label: str = ""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()

    def _read_engine(self, env_key: str, default: str) -> str:
        """
        Returns:
            str: The engine name from env_key, capitalised (e.g. "Chroma").
        """
        return self.helper_config.get_string_val(env_key, default=default).lower().capitalize()

    def _load_client(self, engine: str) -> ClientInterface:
        """
        Imports and instantiates the client class for an engine.

        Raises:
            ValueError: If no implementation exists for the engine.
        """
        class_name = f"{self.class_prefix}{engine}"
        try:
            module = __import__(
                f"shared.clients.{self.client_type}.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported {self.label} engine specified: '{engine}'. Error: {e}")

        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated %s client for engine: %s", self.label, engine)
        return client
