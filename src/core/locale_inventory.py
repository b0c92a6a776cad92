"""Enumerate the locales a user's machine is configured for."""

from __future__ import annotations

import logging
import subprocess
from typing import Iterable, List, Optional, Protocol

from src.core.spelling_engine import SpellingEngine
from src.utils.config import HostPlatform
from src.utils.locale_codes import FALLBACK_LOCALES, extract_posix_locale

LOGGER = logging.getLogger(__name__)


class LocaleInventory(Protocol):
    """Returns locale names in whatever format the platform uses."""

    def list_configured_locales(self) -> List[str]:
        ...


class StaticLocaleInventory:
    """A fixed list of locales, for embedding hosts and tests."""

    def __init__(self, locales: Iterable[str]) -> None:
        self._locales = list(locales)

    def list_configured_locales(self) -> List[str]:
        return list(self._locales)


class LinuxLocaleInventory:
    """Parse ``locale -a``, keeping only ``xx_YY`` style entries."""

    def __init__(self, command: Optional[List[str]] = None, timeout: float = 5.0) -> None:
        self._command = command or ["locale", "-a"]
        self._timeout = timeout

    def list_configured_locales(self) -> List[str]:
        try:
            completed = subprocess.run(
                self._command,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            LOGGER.warning("Could not list system locales: %s", exc)
            return []

        LOGGER.debug("Raw locale list: %s", completed.stdout.split())
        locales: List[str] = []
        for line in completed.stdout.splitlines():
            found = extract_posix_locale(line)
            if found:
                locales.append(found)
        return locales


class WindowsKeyboardInventory:
    """Locales of the installed keyboard layouts."""

    def list_configured_locales(self) -> List[str]:
        import ctypes
        import locale as pylocale

        try:
            user32 = ctypes.WinDLL("user32")  # type: ignore[attr-defined]
        except (AttributeError, OSError) as exc:
            LOGGER.warning("Keyboard layouts unavailable: %s", exc)
            return []

        count = user32.GetKeyboardLayoutList(0, None)
        if count <= 0:
            return []
        handles = (ctypes.c_void_p * count)()
        user32.GetKeyboardLayoutList(count, handles)

        locales: List[str] = []
        for handle in handles:
            # Low word of a layout handle is the language identifier
            name = pylocale.windows_locale.get((handle or 0) & 0xFFFF)
            if name:
                locales.append(name)
        return locales


class EngineLocaleInventory:
    """Ask the spelling engine which dictionaries it already has.

    Native engines mix bare languages and full locales (``['en', 'pt_BR']``);
    bare entries are expanded through the fallback table.
    """

    def __init__(self, engine: SpellingEngine) -> None:
        self._engine = engine

    def list_configured_locales(self) -> List[str]:
        locales: List[str] = []
        for entry in self._engine.list_available_dictionaries():
            if len(entry) == 2:
                fallback = FALLBACK_LOCALES.get(entry.lower())
                if fallback:
                    locales.append(fallback)
                continue
            locales.append(entry)
        return locales


def default_locale_inventory(
    platform: HostPlatform, engine: Optional[SpellingEngine] = None
) -> LocaleInventory:
    """Pick the inventory matching the host platform."""

    if platform.is_linux:
        return LinuxLocaleInventory()
    if platform.is_windows:
        return WindowsKeyboardInventory()
    if platform.native_language_detection and engine is not None:
        return EngineLocaleInventory(engine)
    return StaticLocaleInventory([])


__all__ = [
    "EngineLocaleInventory",
    "LinuxLocaleInventory",
    "LocaleInventory",
    "StaticLocaleInventory",
    "WindowsKeyboardInventory",
    "default_locale_inventory",
]
