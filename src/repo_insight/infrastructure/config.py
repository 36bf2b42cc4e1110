"""Application configuration: loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_USERNAME", "GITHUB_USERNAME_1"),
    )
    github_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "GITHUB_TOKEN_1"),
    )
    github_identity: str = "account1"
    github_api_url: str = "https://api.github.com"
    cache_ttl_seconds: float = 300.0
    max_depth: int = 3
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    request_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
