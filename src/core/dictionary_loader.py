"""Load a dictionary for a locale, falling back to sibling locales."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from src.core.dictionary_source import DictionarySource
from src.core.errors import NoDictionaryAvailable, UnknownLanguage
from src.core.locale_resolver import LocaleResolver
from src.utils.locale_codes import FALLBACK_LOCALES, bare_language, normalize_locale_code
from src.utils.storage import KeyValueStore

LOGGER = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "spellSwitcher_alternatesTable"


@dataclass(frozen=True, slots=True)
class ResolvedDictionary:
    """A dictionary that loaded, and the locale it actually belongs to."""

    locale: str
    dictionary: bytes


class DictionaryFallbackLoader:
    """Try a chain of candidate locales and remember which one worked.

    Successful substitutions (``en-XX`` -> ``en-US``) are persisted in the
    key-value store so later requests skip the trial and error. A cached
    substitution that stops loading invalidates the whole table.
    """

    def __init__(
        self,
        source: DictionarySource,
        resolver: LocaleResolver,
        store: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._source = source
        self._resolver = resolver
        self._store = store
        self._storage_key = storage_key

    def read_alternates(self) -> Dict[str, str]:
        """Return the persisted alternates table (empty when missing or corrupt)."""

        raw = self._store.get(self._storage_key)
        if not raw:
            return {}
        try:
            table = json.loads(raw)
        except ValueError:
            LOGGER.warning("Alternates table in storage is not valid JSON; ignoring it.")
            return {}
        if not isinstance(table, dict):
            return {}
        return {str(key): str(value) for key, value in table.items()}

    def _write_alternates(self, table: Dict[str, str]) -> None:
        self._store.set(self._storage_key, json.dumps(table))

    def candidate_chain(self, requested: str) -> List[str]:
        """Return ``[requested, likely locale, static fallback]`` for a request."""

        language = bare_language(requested)
        try:
            likely: Optional[str] = self._resolver.resolve_locale(language)
        except UnknownLanguage:
            likely = None

        chain: List[str] = []
        for locale in (requested, likely, FALLBACK_LOCALES.get(language)):
            if locale and locale not in chain:
                chain.append(locale)
        return chain

    async def resolve_dictionary(self, requested_locale: str) -> ResolvedDictionary:
        """Load the best available dictionary for ``requested_locale``.

        Args:
            requested_locale: Locale or bare language, in any platform spelling.

        Returns:
            The loaded dictionary and the locale that provided it.

        Raises:
            NoDictionaryAvailable: Every candidate failed to load.
        """

        requested = _canonical_request(requested_locale)
        alternatives = self.candidate_chain(requested)
        alternates = self.read_alternates()

        cached = alternates.get(requested)
        if cached:
            try:
                data = await self._source.load(cached)
            except Exception as exc:  # pylint: disable=broad-except
                # A cached alternate that no longer loads means the table is stale.
                LOGGER.warning(
                    "Cached alternate %s for %s failed to load (%s); discarding alternates table.",
                    cached,
                    requested,
                    exc,
                )
                alternates = {}
                self._write_alternates(alternates)
            else:
                return ResolvedDictionary(locale=cached, dictionary=data)

        LOGGER.debug("Requesting to load %s, alternatives are %s", requested, alternatives)
        for candidate in alternatives:
            try:
                data = await self._source.load(candidate)
            except Exception as exc:  # pylint: disable=broad-except
                LOGGER.debug("Dictionary %s unavailable: %s", candidate, exc)
                continue

            alternates[requested] = candidate
            self._write_alternates(alternates)
            return ResolvedDictionary(locale=candidate, dictionary=data)

        raise NoDictionaryAvailable(requested, alternatives)


def _canonical_request(code: str) -> str:
    try:
        return normalize_locale_code(code)
    except (UnknownLanguage, ValueError):
        return (code or "").strip().lower()


__all__ = ["DEFAULT_STORAGE_KEY", "DictionaryFallbackLoader", "ResolvedDictionary"]
