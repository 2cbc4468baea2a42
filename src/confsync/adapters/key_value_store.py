"""Key-value storage backing the local cache."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Interface for a string/boolean preference store."""

    def get_string(self, key: str, default: str = "") -> str:
        """Return the string stored under key, or default."""

    def put_string(self, key: str, value: str) -> None:
        """Store a string under key."""

    def get_boolean(self, key: str, default: bool) -> bool:
        """Return the boolean stored under key, or default."""

    def put_boolean(self, key: str, value: bool) -> None:
        """Store a boolean under key."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store, lost when the process exits."""

    values: dict[str, str | bool] = field(default_factory=dict)

    def get_string(self, key: str, default: str = "") -> str:
        value = self.values.get(key)
        return value if isinstance(value, str) else default

    def put_string(self, key: str, value: str) -> None:
        self.values[key] = value

    def get_boolean(self, key: str, default: bool) -> bool:
        value = self.values.get(key)
        return value if isinstance(value, bool) else default

    def put_boolean(self, key: str, value: bool) -> None:
        self.values[key] = value


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Store persisted as a single JSON object on disk."""

    path: Path
    values: dict[str, str | bool] = field(default_factory=dict)

    @classmethod
    def open(cls, path: Path) -> "JsonFileKeyValueStore":
        """Load the store from path, starting empty if it is missing or corrupt."""
        values: dict[str, str | bool] = {}
        if path.exists():
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                _logger.warning("Ignoring unreadable cache file %s", path)
            else:
                if isinstance(loaded, dict):
                    values = {
                        key: value
                        for key, value in loaded.items()
                        if isinstance(value, (str, bool))
                    }
        return cls(path=path, values=values)

    def get_string(self, key: str, default: str = "") -> str:
        value = self.values.get(key)
        return value if isinstance(value, str) else default

    def put_string(self, key: str, value: str) -> None:
        self.values[key] = value
        self._flush()

    def get_boolean(self, key: str, default: bool) -> bool:
        value = self.values.get(key)
        return value if isinstance(value, bool) else default

    def put_boolean(self, key: str, value: bool) -> None:
        self.values[key] = value
        self._flush()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self.values), encoding="utf-8")
        tmp_path.replace(self.path)
