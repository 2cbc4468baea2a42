"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from confsync.adapters.conference_api import ConferenceApi, HttpxConferenceApi
from confsync.adapters.key_value_store import JsonFileKeyValueStore, KeyValueStore
from confsync.app_logging import configure_logging
from confsync.config import Settings
from confsync.services.repository import ConferenceDataRepository


@dataclass
class AppContainer:
    """Holds client-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    api: ConferenceApi
    repository: ConferenceDataRepository
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    store = JsonFileKeyValueStore.open(resolved_settings.storage_path)
    api = HttpxConferenceApi.create(
        base_url=resolved_settings.api_base_url,
        timeout=resolved_settings.api_timeout_seconds,
    )
    repository = ConferenceDataRepository(
        api=api,
        store=store,
        namespace=resolved_settings.cache_namespace,
    )

    async def close_resources() -> None:
        await api.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        api=api,
        repository=repository,
        close_resources=close_resources,
    )
