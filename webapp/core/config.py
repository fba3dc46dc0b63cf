"""Centralized adapter configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Adapter settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WEBAPP_", env_file=".env", extra="ignore"
    )

    # Logging
    log_level: str = "INFO"

    # Include the wrapped cause ("OrigError") in client-visible error bodies
    expose_error_cause: bool = True

    # Demo server binding
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
