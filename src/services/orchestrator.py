"""Top-level wiring: typed text in, active dictionary out."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, Callable, List, Optional

from src.core.dictionary_loader import DictionaryFallbackLoader
from src.core.dictionary_source import DictionarySource, DirectoryDictionarySource
from src.core.errors import DetectionUnreliable, NoDictionaryAvailable, UnknownLanguage
from src.core.locale_inventory import LocaleInventory, default_locale_inventory
from src.core.locale_resolver import LocaleResolver
from src.core.sampler import DetectionSampler
from src.core.spelling_engine import PySpellcheckerEngine, SpellingEngine
from src.services.models import RegisterProvider, SessionSnapshot
from src.services.session import Detector, SpellcheckSession
from src.utils.config import Settings, get_settings
from src.utils.language_detector import LanguageDetector
from src.utils.storage import JsonFileStore, KeyValueStore, MemoryStore

LOGGER = logging.getLogger(__name__)


class InputAttachment:
    """Handle for one attached input surface.

    Disposing unhooks the sampler from the session and stops the text pump.
    A detection already running is allowed to finish, but its result is
    dropped.
    """

    def __init__(
        self,
        sampler: Optional[DetectionSampler] = None,
        unsubscribers: Optional[List[Callable[[], None]]] = None,
    ) -> None:
        self.sampler = sampler
        self._unsubscribers = list(unsubscribers or [])
        self._consumer: Optional[asyncio.Task] = None
        self._pump: Optional[asyncio.Task] = None
        self._disposed = sampler is None

    @classmethod
    def inert(cls) -> "InputAttachment":
        """An attachment that ignores all input."""
        return cls()

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def words_since_last_check(self) -> int:
        return self.sampler.words_since_last_check if self.sampler else 0

    def feed(self, text: str) -> None:
        """Push the current full content of the edited field."""

        if self._disposed or self.sampler is None:
            return
        self.sampler.on_text_changed(text)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self.sampler is not None:
            self.sampler.dispose()
        if self._pump is not None and not self._pump.done():
            self._pump.cancel()

    async def wait_closed(self) -> None:
        """Wait for the consumer to drain and the pump to stop."""

        tasks = [task for task in (self._consumer, self._pump) if task is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class SpellcheckOrchestrator:
    """Feeds detected languages from the input surface into the session.

    Instantiate, then call :meth:`attach_to_input`. Languages are detected as
    the user types and dictionaries switched on the fly. An explicit
    :meth:`switch_language` or a sample via :meth:`provide_hint_text` (for
    example the message being replied to) gives much better results.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        engine_factory: Callable[[], SpellingEngine] = PySpellcheckerEngine,
        dictionary_source: Optional[DictionarySource] = None,
        locale_inventory: Optional[LocaleInventory] = None,
        store: Optional[KeyValueStore] = None,
        detector: Optional[Detector] = None,
        register_provider: Optional[RegisterProvider] = None,
    ) -> None:
        """Initialise the orchestrator.

        Args:
            settings: Configuration settings. Uses default if not provided.
            engine_factory: Creates a fresh spelling engine per dictionary.
            dictionary_source: Where dictionaries are loaded from. Defaults to
                the configured dictionary directory.
            locale_inventory: OS locale listing. Defaults per platform.
            store: Persistent storage for the alternates table.
            detector: Language detector. Defaults to langdetect.
            register_provider: Host hook receiving the per-word callback.
        """

        self._settings = settings or get_settings()
        settings = self._settings
        native = settings.platform.native_language_detection

        if store is None:
            store = JsonFileStore(settings.storage_path) if settings.storage_path else MemoryStore()
        if locale_inventory is None:
            locale_inventory = default_locale_inventory(
                settings.platform, engine_factory() if native else None
            )

        self.resolver = LocaleResolver(locale_inventory, environment_hint=settings.locale_hint)
        self.loader = DictionaryFallbackLoader(
            dictionary_source or DirectoryDictionarySource(settings.dictionary_dir),
            self.resolver,
            store,
            storage_key=settings.alternates_storage_key,
        )
        self.detector: Detector = detector or LanguageDetector(settings.min_confidence_percent)
        self.session = SpellcheckSession(
            self.loader,
            self.resolver,
            self.detector,
            engine_factory,
            register_provider=register_provider,
            auto_correct=settings.auto_correct,
        )
        self._attachment: Optional[InputAttachment] = None

        if native:
            # The OS engine detects the typing language on its own
            self.session.install_native_engine()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def attachment(self) -> Optional[InputAttachment]:
        return self._attachment

    def attach_to_input(self, text_events: Optional[AsyncIterable[str]] = None) -> InputAttachment:
        """Start watching typed text and switching languages automatically.

        Must be called from a running event loop. Replaces (and disposes) any
        previous attachment.

        Args:
            text_events: Optional async stream of the field's full text. Hosts
                may instead push changes through :meth:`InputAttachment.feed`.

        Returns:
            The new attachment.
        """

        if self._attachment is not None:
            self._attachment.dispose()

        if self._settings.platform.native_language_detection and text_events is None:
            self._attachment = InputAttachment.inert()
            return self._attachment

        settings = self._settings
        sampler = DetectionSampler(
            debounce_seconds=settings.debounce_seconds,
            min_sample_length=settings.min_sample_length,
            redetect_word_threshold=settings.redetect_word_threshold,
            initial_pass=self.session.current_language is None,
        )
        unsubscribers = [
            self.session.spellcheck_invoked.subscribe(sampler.on_spellcheck_invoked),
            self.session.spelling_error_occurred.subscribe(sampler.on_spelling_error),
            self.session.dictionary_changed.subscribe(sampler.on_dictionary_changed),
        ]
        attachment = InputAttachment(sampler, unsubscribers)
        attachment._consumer = asyncio.create_task(self._consume(attachment))
        if text_events is not None:
            attachment._pump = asyncio.create_task(self._pump(text_events, attachment))

        LOGGER.info("Attached to input (language known: %s)", self.session.current_language)
        self._attachment = attachment
        return attachment

    async def _pump(self, text_events: AsyncIterable[str], attachment: InputAttachment) -> None:
        async for text in text_events:
            if attachment.disposed:
                break
            attachment.feed(text)

    async def _consume(self, attachment: InputAttachment) -> None:
        async for text in attachment.sampler.samples():
            await self._process_sample(text, attachment)

    async def _process_sample(self, text: str, attachment: InputAttachment) -> None:
        LOGGER.debug("Attempting detection of text with length %d", len(text))
        try:
            result = await asyncio.to_thread(self.detector.detect, text)
        except DetectionUnreliable as exc:
            LOGGER.debug("Detection skipped: %s", exc)
            return
        except Exception:  # pylint: disable=broad-except
            LOGGER.exception("Language detection failed for text with length %d", len(text))
            return

        if attachment.disposed:
            LOGGER.debug("Discarding detection result for a disposed input")
            return

        LOGGER.debug("Auto-detected language as %s", result.language_code)
        try:
            locale = self.resolver.resolve_locale(result.language_code)
            if locale == self.session.current_language:
                return
            active = await self.session.switch_language(locale)
        except (UnknownLanguage, NoDictionaryAvailable) as exc:
            LOGGER.warning("Failed to load dictionary: %s", exc)
            return
        except Exception:  # pylint: disable=broad-except
            LOGGER.exception("Unexpected failure switching language for detected '%s'", result.language_code)
            return

        LOGGER.info("New language is %s", active)

    async def handle_blur(self) -> None:
        """Host window lost focus: free the dictionary if configured to."""

        if not self._settings.unload_on_blur or self._settings.platform.native_language_detection:
            return
        self.session.unload()

    async def handle_focus(self) -> bool:
        """Host window regained focus: reload what blur unloaded."""

        if not self._settings.unload_on_blur or self._settings.platform.native_language_detection:
            return self.session.has_dictionary
        return await self.session.restore()

    async def switch_language(self, language_code: str) -> str:
        return await self.session.switch_language(language_code)

    async def provide_hint_text(self, text: str) -> Optional[str]:
        return await self.session.provide_hint_text(text)

    def check_word(self, word: str) -> bool:
        return self.session.check_word(word)

    async def get_corrections(self, word: str) -> Optional[List[str]]:
        return await self.session.get_corrections(word)

    async def add_to_dictionary(self, word: str) -> bool:
        return await self.session.add_to_dictionary(word)

    def snapshot(self) -> SessionSnapshot:
        return self.session.snapshot()

    async def dispose(self) -> None:
        """Detach from input and drop process-wide caches."""

        if self._attachment is not None:
            self._attachment.dispose()
            await self._attachment.wait_closed()
            self._attachment = None
        self.resolver.reset()
        LOGGER.info("Spellcheck orchestrator disposed")


__all__ = ["InputAttachment", "SpellcheckOrchestrator"]
