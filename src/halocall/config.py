"""HaloCall configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .errors import ConfigurationError

# Plain libpq-style URLs are what the web app and hosting providers hand out.
_ASYNC_DRIVER_PREFIXES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


class HaloCallSettings(BaseSettings):
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    echo_sql: bool = False
    log_level: str = "WARNING"
    customer_list_limit: int = 20

    model_config = {"env_prefix": "HALOCALL_", "env_file": ".env", "extra": "ignore", "populate_by_name": True}

    @property
    def async_database_url(self) -> str:
        """Connection string with an async driver, or ConfigurationError."""
        url = (self.database_url or "").strip()
        if not url:
            raise ConfigurationError("DATABASE_URL environment variable is not set")
        for prefix, replacement in _ASYNC_DRIVER_PREFIXES.items():
            if url.startswith(prefix):
                return replacement + url[len(prefix):]
        return url


settings = HaloCallSettings()
