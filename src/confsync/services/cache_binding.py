"""Typed values bound to keys of a key-value store."""

import logging
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from confsync.adapters.key_value_store import KeyValueStore

T = TypeVar("T")

_EMPTY = ""

_logger = logging.getLogger(__name__)


class CachedField(Generic[T]):
    """In-memory value loaded once from storage and persisted on every write.

    An empty or missing stored string reads as ``None``. A stored string that
    fails to decode also reads as ``None``; the corrupt value stays in storage
    until the next write replaces it.
    """

    def __init__(self, store: KeyValueStore, key: str, value_type: type[T]) -> None:
        self._store = store
        self._key = key
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)
        self._value = self._read()

    @property
    def key(self) -> str:
        return self._key

    def get(self) -> T | None:
        """Return the in-memory value."""
        return self._value

    def set(self, value: T | None) -> None:
        """Persist the value, then replace the in-memory copy.

        A failed write leaves the in-memory value unchanged.
        """
        self._write(value)
        self._value = value

    def _read(self) -> T | None:
        raw = self._store.get_string(self._key, _EMPTY)
        if not raw.strip():
            return None
        try:
            return self._adapter.validate_json(raw)
        except (ValidationError, ValueError):
            _logger.warning("Discarding unreadable cache entry %s", self._key)
            return None

    def _write(self, value: T | None) -> None:
        if value is None:
            self._store.put_string(self._key, _EMPTY)
            return
        raw = self._adapter.dump_json(value, by_alias=True).decode()
        self._store.put_string(self._key, raw)
