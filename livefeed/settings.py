"""Application settings using pydantic-settings.

Loads configuration from environment variables with .env file support.
Every variable is prefixed with ``LIVEFEED_`` (e.g. ``LIVEFEED_POLL_INTERVAL=5``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Live-update configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LIVEFEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production", "testing"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for livefeed loggers",
    )

    # Backend
    base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL that relative push/poll paths are resolved against",
    )

    # Push transport
    transport: Literal["sse", "websocket", "none"] = Field(
        default="sse",
        description="Push transport (none = polling only)",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Seconds between a push connection error and the next attempt",
    )
    connect_timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds allowed for establishing a push or poll connection",
    )

    # Polling
    poll_interval: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds between polls while push delivery is unavailable",
    )
    http_timeout: float = Field(
        default=10.0,
        gt=0.0,
        description="Total timeout in seconds for a single poll request",
    )

    def resolve_url(self, path: str) -> str:
        """Resolve a path against ``base_url``; absolute URLs pass through."""
        if "://" in path:
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance (cached after first call)
    """
    return Settings()
