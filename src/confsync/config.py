"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    api_base_url: str = "https://api.kotlinconf.com"
    api_timeout_seconds: float = 10.0
    storage_path: Path = Path.home() / ".confsync" / "cache.json"
    cache_namespace: str = "default"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="CONFSYNC_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def cache_key(namespace: str, name: str) -> str:
    """Return the store key for a cached field within an installation namespace."""
    cleaned = namespace.strip()
    if not cleaned:
        return name
    return f"{cleaned}.{name}"
