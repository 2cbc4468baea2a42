"""Tests for container wiring and settings."""

import asyncio
import logging

from confsync.config import Settings, cache_key
from confsync.containers import build_container


def test_build_container_creates_repository(settings) -> None:
    container = build_container(settings)

    assert container.repository.namespace == "test"
    assert container.repository.sessions is None
    container.repository.accept_privacy_policy()
    assert settings.storage_path.exists()
    asyncio.run(container.close_resources())


def test_build_container_configures_logging(settings) -> None:
    logger = logging.getLogger("confsync")
    logger.handlers.clear()
    container = build_container(settings.model_copy(update={"log_level": "WARNING"}))

    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    asyncio.run(container.close_resources())
    logger.handlers.clear()
    logger.propagate = True


def test_settings_read_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("CONFSYNC_API_BASE_URL", "https://conf.example")
    monkeypatch.setenv("CONFSYNC_CACHE_NAMESPACE", "install-1")

    resolved = Settings(storage_path=tmp_path / "cache.json")

    assert resolved.api_base_url == "https://conf.example"
    assert resolved.cache_namespace == "install-1"


def test_cache_key_namespacing() -> None:
    assert cache_key("install-1", "votes") == "install-1.votes"
    assert cache_key("  ", "votes") == "votes"
