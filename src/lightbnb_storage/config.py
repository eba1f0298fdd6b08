"""
Database configuration for lightbnb-storage.

Settings are read from ``LIGHTBNB_DB_*`` environment variables or a ``.env``
file, with defaults matching the local development database.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """PostgreSQL connection and pool settings."""

    model_config = SettingsConfigDict(
        env_prefix="LIGHTBNB_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 5432
    database: str = "lightbnb"
    user: str = "vagrant"
    password: SecretStr = SecretStr("123")

    # Pool settings
    min_pool_size: int = 1
    max_pool_size: int = 10
    command_timeout: float = 30.0

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "DatabaseSettings":
        if self.min_pool_size < 0:
            raise ValueError("min_pool_size must be >= 0")
        if self.max_pool_size < 1:
            raise ValueError("max_pool_size must be >= 1")
        if self.min_pool_size > self.max_pool_size:
            raise ValueError(
                f"min_pool_size ({self.min_pool_size}) exceeds max_pool_size ({self.max_pool_size})"
            )
        return self

    @property
    def dsn(self) -> str:
        """Get PostgreSQL connection URL."""
        password = self.password.get_secret_value()
        return f"postgresql://{self.user}:{password}@{self.host}:{self.port}/{self.database}"

    def __repr__(self) -> str:
        return (
            f"DatabaseSettings(host={self.host!r}, port={self.port}, "
            f"database={self.database!r}, user={self.user!r})"
        )


@lru_cache
def get_settings() -> DatabaseSettings:
    """Get the process-wide settings, loaded once."""
    return DatabaseSettings()
