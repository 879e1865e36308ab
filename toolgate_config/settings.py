"""
Application Settings (Pydantic Settings).

Loads configuration from environment variables (.env file or system env).

Collaborator services (secret store, OAuth backend) are addressed by base
URL. An empty URL means the collaborator is not configured; the engine then
reports a collaborator communication failure instead of guessing.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ========================================================================
    # COLLABORATORS (secret store + OAuth backend)
    # ========================================================================
    SECRET_SERVICE_URL: str = Field(default="", description="Secret service base URL")
    SECRET_SERVICE_API_KEY: str = Field(default="", description="Sent as X-API-KEY when set")
    TOOL_AUTH_SERVICE_URL: str = Field(default="", description="OAuth backend base URL")
    TOOL_AUTH_SERVICE_API_KEY: str = Field(default="", description="Sent as X-API-KEY when set")
    COLLABORATOR_TIMEOUT_SECONDS: int = Field(default=30, gt=0)

    # ========================================================================
    # TOOL EXECUTION
    # ========================================================================
    TOOL_HTTP_TIMEOUT_SECONDS: float = Field(
        default=120.0,
        gt=0,
        description="Timeout for the single outbound API call of a tool",
    )
    TOOL_CATALOG_PATH: str = Field(
        default="data/tools.json",
        description="JSON file holding the tool configuration catalog",
    )

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # OPENTELEMETRY
    # ========================================================================
    OTEL_TRACES_ENABLED: bool = Field(default=False)
    OTEL_SERVICE_NAME: str = Field(default="toolgate")
    OTEL_EXPORTER_OTLP_ENDPOINT: str = Field(default="http://localhost:4317")

    # ========================================================================
    # API SERVER
    # ========================================================================
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000)
    API_CORS_ORIGINS: str = Field(default="*")

    # ========================================================================
    # DEPLOYMENT
    # ========================================================================
    ENVIRONMENT: str = Field(
        default="development", pattern="^(development|staging|production)$"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
