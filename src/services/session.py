"""The spellcheck session: owner of the single active dictionary."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Protocol

from src.core.dictionary_loader import DictionaryFallbackLoader
from src.core.errors import DetectionUnreliable, NoDictionaryAvailable
from src.core.locale_resolver import LocaleResolver
from src.core.spelling_engine import SpellingEngine
from src.services.events import Signal
from src.services.models import (
    ProviderRegistration,
    RegisterProvider,
    SessionSnapshot,
    SessionStatus,
)
from src.utils.language_detector import DetectionResult

LOGGER = logging.getLogger(__name__)

# Chromium's hunspell integration flags the stem of a contraction ("don" in
# "don't") when the word starts a sentence, so stems are always accepted.
CONTRACTIONS = [
    "ain't", "aren't", "can't", "could've", "couldn't", "couldn't've", "didn't", "doesn't", "don't", "hadn't",
    "hadn't've", "hasn't", "haven't", "he'd", "he'd've", "he'll", "he's", "how'd", "how'll", "how's", "I'd",
    "I'd've", "I'll", "I'm", "I've", "isn't", "it'd", "it'd've", "it'll", "it's", "let's", "ma'am", "mightn't",
    "mightn't've", "might've", "mustn't", "must've", "needn't", "not've", "o'clock", "shan't", "she'd", "she'd've",
    "she'll", "she's", "should've", "shouldn't", "shouldn't've", "that'll", "that's", "there'd", "there'd've",
    "there're", "there's", "they'd", "they'd've", "they'll", "they're", "they've", "wasn't", "we'd", "we'd've",
    "we'll", "we're", "we've", "weren't", "what'll", "what're", "what's", "what've", "when's", "where'd",
    "where's", "where've", "who'd", "who'll", "who're", "who's", "who've", "why'll", "why're", "why's", "won't",
    "would've", "wouldn't", "wouldn't've", "y'all", "y'all'd've", "you'd", "you'd've", "you'll", "you're", "you've",
]

CONTRACTION_STEMS = frozenset(word.split("'", 1)[0].lower() for word in CONTRACTIONS)


class Detector(Protocol):
    def detect(self, text: str) -> DetectionResult:
        ...


class SpellcheckSession:
    """Holds the current dictionary and answers per-word spelling checks.

    States: uninitialized (no language yet), active (locale + engine) and
    unloaded (engine released on blur, locale remembered for focus).
    A switch either fully succeeds or leaves the previous state untouched.
    """

    DEFAULT_NATIVE_LOCALE = "en-US"

    def __init__(
        self,
        loader: DictionaryFallbackLoader,
        resolver: LocaleResolver,
        detector: Detector,
        engine_factory: Callable[[], SpellingEngine],
        register_provider: Optional[RegisterProvider] = None,
        auto_correct: bool = True,
    ) -> None:
        self._loader = loader
        self._resolver = resolver
        self._detector = detector
        self._engine_factory = engine_factory
        self._register_provider = register_provider
        self.auto_correct = auto_correct

        self._engine: Optional[SpellingEngine] = None
        self._language: Optional[str] = None

        self.spellcheck_invoked = Signal("spellcheck_invoked")
        self.spelling_error_occurred = Signal("spelling_error_occurred")
        self.dictionary_changed = Signal("dictionary_changed")
        self.last_registration: Optional[ProviderRegistration] = None

    @property
    def current_language(self) -> Optional[str]:
        return self._language

    @property
    def has_dictionary(self) -> bool:
        return self._engine is not None

    @property
    def status(self) -> SessionStatus:
        if self._engine is not None:
            return SessionStatus.ACTIVE
        if self._language is not None:
            return SessionStatus.UNLOADED
        return SessionStatus.UNINITIALIZED

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            status=self.status,
            language=self._language,
            auto_correct=self.auto_correct,
        )

    async def switch_language(self, language_code: str) -> str:
        """Load and activate the dictionary for ``language_code``.

        The request goes through the fallback chain, so the active locale may
        differ from the one asked for (``en-XX`` -> ``en-US``).

        Returns:
            The locale that is now active.

        Raises:
            NoDictionaryAvailable: No candidate dictionary could be loaded.
        """

        try:
            resolved = await self._loader.resolve_dictionary(language_code)
        except NoDictionaryAvailable as exc:
            LOGGER.error("Failed to load dictionary %s: %s", language_code, exc)
            raise

        LOGGER.info(
            "Setting current spellchecker to %s, requested language was %s",
            resolved.locale,
            language_code,
        )
        if self._language == resolved.locale and self._engine is not None:
            return resolved.locale

        engine = self._engine_factory()
        engine.set_dictionary(resolved.locale, resolved.dictionary)

        self._engine = engine
        self._language = resolved.locale
        self.dictionary_changed.emit(resolved.locale)
        self._install_provider()
        return resolved.locale

    def install_native_engine(self, locale: str = DEFAULT_NATIVE_LOCALE) -> None:
        """Use an engine that picks its own dictionaries (OS-level detection)."""

        self._engine = self._engine_factory()
        self._language = locale
        self._install_provider()

    def unload(self) -> None:
        """Release the dictionary to save memory; remember the language."""

        if self._engine is None:
            return
        LOGGER.info("Unloading spellchecker for %s", self._language)
        self._engine = None

    async def restore(self) -> bool:
        """Reload the remembered language after :meth:`unload`.

        Returns:
            True when a dictionary is active afterwards.
        """

        if self.status is not SessionStatus.UNLOADED:
            return self._engine is not None

        LOGGER.info("Restoring spellchecker for %s", self._language)
        try:
            await self.switch_language(self._language)
        except NoDictionaryAvailable as exc:
            LOGGER.warning("Failed to restore spellchecker: %s", exc)
            return False
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.warning("Dictionary for %s could not be restored: %s", self._language, exc)
            return False
        return True

    async def provide_hint_text(self, text: str) -> Optional[str]:
        """Switch to the language of a sample the user is likely to type in.

        An unreliable detection is ignored silently.

        Returns:
            The locale now active, or ``None`` when the hint was ignored.
        """

        try:
            result = await asyncio.to_thread(self._detector.detect, text)
        except DetectionUnreliable as exc:
            LOGGER.info(
                "Couldn't detect language for text with length %d: %s, ignoring sample",
                len(text or ""),
                exc,
            )
            return None

        locale = self._resolver.resolve_locale(result.language_code)
        return await self.switch_language(locale)

    def check_word(self, word: str) -> bool:
        """Per-word callback handed to the host; True means spelled correctly."""

        self.spellcheck_invoked.emit()
        engine = self._engine
        if engine is None:
            return True

        if word.lower() in CONTRACTION_STEMS:
            return True

        flagged = engine.check_spelling(word)
        if not flagged:
            return True

        if flagged[0].start != 0:
            # Capitalisation artefact at sentence starts: don't underline, but
            # still treat it as a hint that the language may be wrong.
            self.spelling_error_occurred.emit(word)
            return True

        misspelled = engine.is_misspelled(word.lower())
        if misspelled:
            self.spelling_error_occurred.emit(word)
        return not misspelled

    async def get_corrections(self, word: str) -> Optional[List[str]]:
        """Suggestions for ``word``; ``None`` when no dictionary is loaded."""

        if self._engine is None:
            return None
        return self._engine.get_corrections(word)

    async def add_to_dictionary(self, word: str) -> bool:
        if self._engine is None:
            return False
        self._engine.add_word(word)
        return True

    def _install_provider(self) -> None:
        if self._language is None:
            return
        self.last_registration = ProviderRegistration(
            locale=self._language, auto_correct=self.auto_correct
        )
        if self._register_provider is not None:
            LOGGER.debug("Installing spell check provider for %s", self._language)
            self._register_provider(self._language, self.auto_correct, self.check_word)


__all__ = ["CONTRACTION_STEMS", "SpellcheckSession"]
