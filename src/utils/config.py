"""Application configuration utilities."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from src.utils.locale_codes import extract_posix_locale

LOGGER = logging.getLogger(__name__)

# Platforms whose native spelling engine detects the typing language itself.
_NATIVE_DETECTION_PLATFORMS = frozenset({"darwin"})


@dataclass(frozen=True, slots=True)
class HostPlatform:
    """Capabilities of the host operating system relevant to spellchecking."""

    name: str

    @property
    def native_language_detection(self) -> bool:
        """True when the OS engine switches languages on its own."""
        return self.name in _NATIVE_DETECTION_PLATFORMS

    @property
    def is_linux(self) -> bool:
        return self.name.startswith("linux")

    @property
    def is_windows(self) -> bool:
        return self.name == "win32"


@dataclass(slots=True)
class Settings:
    """Container for runtime configuration values."""

    debounce_seconds: float = 0.25
    min_sample_length: int = 8
    min_confidence_percent: float = 85.0
    redetect_word_threshold: int = 2
    auto_correct: bool = True
    unload_on_blur: bool = True
    dictionary_dir: str = "dictionaries"
    storage_path: Optional[str] = None
    alternates_storage_key: str = "spellSwitcher_alternatesTable"
    platform: HostPlatform = HostPlatform(sys.platform)
    locale_hint: Optional[str] = None


def _read_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        LOGGER.warning("Invalid %s=%s; falling back to %s.", name, raw, default)
        return default


def _read_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    LOGGER.warning("Invalid %s=%s; falling back to %s.", name, raw, default)
    return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment and from `.env` if available.

    Returns:
        Loaded :class:`Settings` instance.
    """

    load_dotenv()

    platform = HostPlatform(os.getenv("SPELLCHECK_PLATFORM") or sys.platform)
    debounce_ms = max(0, _read_number("SPELLCHECK_DEBOUNCE_MS", 250, int))

    locale_hint = None
    if platform.is_linux and os.getenv("LANG"):
        # LANG has the final say for its own language on Linux
        locale_hint = extract_posix_locale(os.environ["LANG"])

    settings = Settings(
        debounce_seconds=debounce_ms / 1000.0,
        min_sample_length=max(1, _read_number("SPELLCHECK_MIN_SAMPLE_LENGTH", 8, int)),
        min_confidence_percent=_read_number("SPELLCHECK_MIN_CONFIDENCE", 85.0, float),
        redetect_word_threshold=max(0, _read_number("SPELLCHECK_REDETECT_WORDS", 2, int)),
        auto_correct=_read_flag("SPELLCHECK_AUTO_CORRECT", True),
        unload_on_blur=_read_flag("SPELLCHECK_UNLOAD_ON_BLUR", True),
        dictionary_dir=os.getenv("SPELLCHECK_DICTIONARY_DIR") or "dictionaries",
        storage_path=os.getenv("SPELLCHECK_STORAGE_PATH") or None,
        platform=platform,
        locale_hint=locale_hint,
    )

    if not os.path.isdir(settings.dictionary_dir):
        LOGGER.warning(
            "Dictionary directory %s does not exist. Every dictionary load will fail.",
            settings.dictionary_dir,
        )

    return settings
