"""Small string key-value stores used to persist the alternates table."""

from __future__ import annotations

import json
import logging
import os
import threading
from typing import Dict, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal ``localStorage``-like contract."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Process-local store; forgets everything on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value


class JsonFileStore:
    """Store every key in a single JSON object on disk.

    The file is read lazily on first access and rewritten on every ``set``.
    An unreadable or malformed file is treated as empty.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._cache: Optional[Dict[str, str]] = None

    @property
    def path(self) -> str:
        return self._path

    def _load(self) -> Dict[str, str]:
        if self._cache is not None:
            return self._cache

        data: Dict[str, str] = {}
        if os.path.exists(self._path):
            try:
                with open(self._path, "r", encoding="utf-8") as fp:
                    raw = json.load(fp)
            except (OSError, ValueError) as exc:
                LOGGER.warning("Ignoring unreadable store file %s: %s", self._path, exc)
            else:
                if isinstance(raw, dict):
                    data = {str(k): str(v) for k, v in raw.items()}
                else:
                    LOGGER.warning("Ignoring store file %s: top level is not an object", self._path)

        self._cache = data
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = f"{self._path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as fp:
                json.dump(data, fp, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path)


__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]
