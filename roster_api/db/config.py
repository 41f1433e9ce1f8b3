from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database settings for the user store.

    Reads from environment variables (or .env via pydantic-settings):
      - ROSTER_DATABASE_URL (full URL, takes precedence)
      - POSTGRES_USER / POSTGRES_PASSWORD / POSTGRES_DB / POSTGRES_HOST / POSTGRES_PORT
    """

    ROSTER_DATABASE_URL: Optional[str] = Field(
        default=None, description="If provided, full PostgreSQL connection URL."
    )
    POSTGRES_USER: Optional[str] = Field(default=None, description="DB username")
    POSTGRES_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    POSTGRES_DB: Optional[str] = Field(default=None, description="Database name")
    POSTGRES_PORT: int = Field(default=5432, description="Database port")
    POSTGRES_HOST: str = Field(default="localhost", description="Database host")

    SQL_ECHO: bool = Field(default=False, description="Echo SQL statements for debugging")
    SQL_POOL_SIZE: int = Field(default=5, ge=1, description="Connection pool size")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Base database URL. Prefers ROSTER_DATABASE_URL, otherwise builds one from
        the POSTGRES_* variables.
        """
        if self.ROSTER_DATABASE_URL:
            return self.ROSTER_DATABASE_URL

        if not all([self.POSTGRES_USER, self.POSTGRES_PASSWORD, self.POSTGRES_DB]):
            raise ValueError(
                "Database configuration missing. Set ROSTER_DATABASE_URL or "
                "POSTGRES_USER, POSTGRES_PASSWORD and POSTGRES_DB."
            )
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def async_database_url(self) -> str:
        """URL rewritten to the asyncpg driver, required for AsyncEngine."""
        url = self.database_url
        if url.startswith("postgresql+asyncpg://"):
            return url
        return re.sub(r"^postgresql(\+\w+)?://", "postgresql+asyncpg://", url)

    @property
    def sync_database_url(self) -> str:
        """Driverless postgresql:// URL used by Alembic offline mode."""
        return re.sub(r"^postgresql\+\w+://", "postgresql://", self.database_url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return database settings read from the environment."""
    return Settings()
