"""Application settings via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Load from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "ClauseGuard API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    valkey_host: str = "localhost"
    valkey_port: int = 6379
    valkey_password: str | None = None

    # Fallback LLM settings, used for any field the stored settings record leaves empty.
    llm_endpoint: str | None = None
    llm_model: str | None = None
    llm_api_key: str | None = None
    llm_timeout_seconds: float | None = None

    # Documents longer than max_text_length are split into chunks of
    # (max_text_length - chunk_reserve) characters.
    max_text_length: int = 50_000
    chunk_reserve: int = 5_000

    analysis_cache_ttl_seconds: int | None = 86_400


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
