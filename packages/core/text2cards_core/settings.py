"""Runtime configuration.

Settings are read from environment variables (and an optional ``.env``
file) once at process start and passed explicitly to the components that
need them.
"""

from pydantic_settings import BaseSettings

DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_OPENROUTER_MODEL = "meta-llama/llama-4-scout:free"
DEFAULT_REQUEST_TIMEOUT = 60.0


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Model provider
    use_ai_mock: bool = False
    openrouter_api_key: str | None = None
    openrouter_api_url: str = DEFAULT_OPENROUTER_URL
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    public_site_url: str = "https://10xcards.app"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Persistence; the in-memory store is used when unset
    database_url: str | None = None
    debug: bool = False

    # Used when the request carries no user header
    default_user_id: str = "00000000-0000-4000-8000-000000000001"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
