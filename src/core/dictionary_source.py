"""Where dictionary bytes come from."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from src.core.errors import DictionaryNotFound

LOGGER = logging.getLogger(__name__)


class DictionarySource(Protocol):
    """Loads the raw dictionary for one exact locale."""

    async def load(self, locale: str) -> bytes:
        ...


class DirectoryDictionarySource:
    """Read ``<root>/<locale>.json.gz`` (or ``.json``) from a local directory."""

    SUFFIXES = (".json.gz", ".json")

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, locale: str) -> Optional[Path]:
        """Return the first existing dictionary file for ``locale``."""

        for suffix in self.SUFFIXES:
            candidate = self.root / f"{locale}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    async def load(self, locale: str) -> bytes:
        # Never let a locale escape the dictionary directory
        if not locale or "/" in locale or "\\" in locale or locale.startswith("."):
            raise DictionaryNotFound(locale)

        path = self.path_for(locale)
        if path is None:
            raise DictionaryNotFound(locale)

        LOGGER.debug("Reading dictionary %s", path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise DictionaryNotFound(locale) from exc


__all__ = ["DictionarySource", "DirectoryDictionarySource"]
