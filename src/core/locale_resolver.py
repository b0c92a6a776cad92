"""Map a detected language to the locale this machine most likely wants."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from src.core.errors import UnknownLanguage
from src.core.locale_inventory import LocaleInventory
from src.utils.locale_codes import (
    FALLBACK_LOCALES,
    bare_language,
    extract_posix_locale,
    normalize_locale_code,
)

LOGGER = logging.getLogger(__name__)


class LocaleResolver:
    """Resolve bare languages (``pt``) into concrete locales (``pt-BR``).

    The likely-locale table is built from the locale inventory the first time
    it is needed and never recomputed until :meth:`reset` is called.
    """

    def __init__(self, inventory: LocaleInventory, environment_hint: Optional[str] = None) -> None:
        """Initialise the resolver.

        Args:
            inventory: Source of the OS-configured locales.
            environment_hint: Locale from the environment (``LANG`` on Linux)
                that wins for its own language, ambiguous or not.
        """

        self._inventory = inventory
        self._environment_hint = environment_hint
        self._likely_locales: Optional[Dict[str, str]] = None

    @property
    def likely_locale_table(self) -> Dict[str, str]:
        """Copy of the likely-locale table, building it on first access."""
        return dict(self._ensure_table())

    def resolve_locale(self, language_code: str) -> str:
        """Return the best locale for ``language_code``.

        Raises:
            UnknownLanguage: Neither the machine nor the static table knows it.
        """

        language = bare_language(language_code)
        likely = self._ensure_table().get(language)
        if likely:
            return likely

        fallback = FALLBACK_LOCALES.get(language)
        if fallback is None:
            raise UnknownLanguage(language)
        return fallback

    def reset(self) -> None:
        """Forget the likely-locale table; the next lookup rebuilds it."""
        self._likely_locales = None

    def _ensure_table(self) -> Dict[str, str]:
        if self._likely_locales is None:
            self._likely_locales = self.build_likely_locale_table()
        return self._likely_locales

    def build_likely_locale_table(self) -> Dict[str, str]:
        """Query the inventory and keep only unambiguous languages."""

        locales: List[str] = []
        for raw in self._inventory.list_configured_locales():
            try:
                locales.append(normalize_locale_code(raw))
            except (UnknownLanguage, ValueError):
                LOGGER.debug("Skipping unusable locale entry %r", raw)

        LOGGER.debug("Filtered locale list: %s", locales)

        # Some distros list every region of a language; those tell us nothing.
        buckets: Dict[str, List[str]] = {}
        for locale in locales:
            bucket = buckets.setdefault(bare_language(locale), [])
            if locale not in bucket:
                bucket.append(locale)

        table = {
            language: members[0]
            for language, members in buckets.items()
            if len(members) == 1
        }

        hint = extract_posix_locale(self._environment_hint or "")
        if hint:
            table[bare_language(hint)] = normalize_locale_code(hint)

        LOGGER.debug("Likely locale table: %s", table)
        return table


__all__ = ["LocaleResolver"]
