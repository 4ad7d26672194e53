"""Application settings using pydantic-settings.

Settings are loaded from environment variables (or a local ``.env`` file).
The connection target has no default: a process without ``MONGODB_URI``
refuses to start.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        MONGODB_URI: Connection target, e.g. mongodb://host:27017/app (required)
        MONGODB_SERVER_SELECTION_TIMEOUT_MS: Server selection timeout (default: 30000)
        MONGODB_CONNECT_TIMEOUT_MS: Socket connect timeout (default: 20000)
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGODB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    uri: str = Field(
        min_length=1,
        description="Connection target for the database driver",
    )
    server_selection_timeout_ms: int = Field(
        default=30000,
        description="Server selection timeout in milliseconds",
        ge=1,
    )
    connect_timeout_ms: int = Field(
        default=20000,
        description="Connect timeout in milliseconds",
        ge=1,
    )

    @model_validator(mode="after")
    def validate_uri(self) -> "DatabaseSettings":
        """Reject a target made of whitespace only."""
        if not self.uri.strip():
            raise ValueError(
                "Please define the MONGODB_URI environment variable inside .env"
            )
        return self


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()
