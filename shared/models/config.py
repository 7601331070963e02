from pydantic import BaseModel, ConfigDict

from shared.helper.HelperConfig import HelperConfig


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The full name of the environment variable to read (e.g. "CHROMA_URL").
        val_type (str): The expected type of the environment variable's value. Supported types are "string", "number", "bool", and "list".
        default (str | int | float | bool | list | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | list | None = None


class AppSettings(BaseModel):
    """Application-wide settings, read once at startup and injected into services.

    Attributes:
        app_version (str): Version string reported by /health and the OpenAPI doc.
        cors_origin (str): The single origin allowed by CORS.
        relevance_threshold (float): Search hits must have a distance strictly below this value to be used as context.
        history_window (int): Number of most recent conversation messages forwarded to the LLM.
        default_context_limit (int): Candidates fetched from the vector store when a query does not specify contextLimit.
        host (str): Bind address of the API server.
        port (int): Listen port of the API server.
    """

    model_config = ConfigDict(frozen=True)

    app_version: str = "unknown"
    cors_origin: str = "http://localhost:4200"
    relevance_threshold: float = 1.2
    history_window: int = 10
    default_context_limit: int = 3
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_helper_config(cls, helper_config: HelperConfig) -> "AppSettings":
        """Build the settings from environment variables.

        Args:
            helper_config (HelperConfig): The configuration reader.

        Returns:
            AppSettings: The frozen settings.
        """
        defaults = cls()
        return cls(
            app_version=helper_config.get_string_val("APP_VERSION", default=defaults.app_version),
            cors_origin=helper_config.get_string_val("CORS_ORIGIN", default=defaults.cors_origin),
            relevance_threshold=helper_config.get_number_val("RAG_RELEVANCE_THRESHOLD", default=defaults.relevance_threshold),
            history_window=helper_config.get_number_val("RAG_HISTORY_WINDOW", default=defaults.history_window),
            default_context_limit=helper_config.get_number_val("RAG_DEFAULT_CONTEXT_LIMIT", default=defaults.default_context_limit),
            host=helper_config.get_string_val("APP_HOST", default=defaults.host),
            port=helper_config.get_number_val("APP_PORT", default=defaults.port),
        )
