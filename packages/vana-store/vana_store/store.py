"""Key-value stores for persisted app state."""
from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Loads and saves JSON-compatible values by key."""

    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> bool: ...


class MemoryStore:
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> bool:
        self._data[key] = copy.deepcopy(value)
        return True

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """All keys in one JSON document on disk.

    A missing or unreadable file loads as empty. Writes go to a temporary
    file that then replaces the document.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read store %s, starting empty: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store %s is not a JSON object, starting empty", self._path)
            return {}
        return data

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def save(self, key: str, value: Any) -> bool:
        """Persist ``value`` under ``key``. Returns False if the write failed."""
        data = {**self._data, key: copy.deepcopy(value)}
        try:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning("Value for %r is not JSON-serializable: %s", key, exc)
            return False

        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(text, encoding="utf-8")
            temp_path.replace(self._path)
        except OSError as exc:
            logger.warning("Could not write store %s: %s", self._path, exc)
            return False
        self._data = data
        return True
