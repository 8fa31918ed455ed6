"""
Configuration and settings for the film community backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Database (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="FILMHUB_USE_IN_MEMORY_BACKENDS"
    )

    log_level: str = Field(default="INFO", alias="FILMHUB_LOG_LEVEL")

    # Used by the API client and form controllers
    api_base_url: str = Field(
        default="http://localhost:8000", alias="FILMHUB_API_BASE_URL"
    )
    request_timeout: float = Field(default=30.0, alias="FILMHUB_REQUEST_TIMEOUT")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
