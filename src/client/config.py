"""Client configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client settings loaded from ``PROFILES_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROFILES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(
        default="http://localhost:5000",
        description="Server root; profile routes live under /api",
    )
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")
    cache_path: Path = Field(
        default=Path("~/.profile-manager/cache.json"),
        validate_default=True,
        description="JSON document holding the offline profile cache",
    )
    sync_interval: float = Field(
        default=30.0,
        description="Seconds between connectivity probes in watch mode",
    )

    @field_validator("cache_path")
    @classmethod
    def expand_cache_path(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
