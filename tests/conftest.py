"""Shared fakes for the spellcheck tests."""

from __future__ import annotations

import json
from typing import Dict, Iterable, List, Optional

import pytest

from src.core.errors import DetectionUnreliable, DictionaryNotFound
from src.core.locale_inventory import StaticLocaleInventory
from src.core.locale_resolver import LocaleResolver
from src.core.spelling_engine import FlaggedSpan
from src.utils.language_detector import DetectionResult
from src.utils.storage import MemoryStore


def word_list(*words: str) -> bytes:
    """Encode a dictionary the way the directory source stores them."""
    return json.dumps(list(words)).encode("utf-8")


class FakeSource:
    """Dictionary source backed by a dict; records every load attempt."""

    def __init__(self, dictionaries: Optional[Dict[str, bytes]] = None) -> None:
        self.dictionaries = dict(dictionaries or {})
        self.requested: List[str] = []

    async def load(self, locale: str) -> bytes:
        self.requested.append(locale)
        if locale not in self.dictionaries:
            raise DictionaryNotFound(locale)
        return self.dictionaries[locale]


class FakeEngine:
    """Whitespace tokenising engine over a JSON word list."""

    def __init__(self) -> None:
        self.locale: Optional[str] = None
        self.words: set = set()
        self.fail_on_set = False

    def set_dictionary(self, locale: str, data: bytes) -> None:
        if self.fail_on_set:
            raise ValueError("corrupt dictionary")
        self.locale = locale
        self.words = {word.lower() for word in json.loads(data.decode("utf-8"))}

    def check_spelling(self, text: str) -> List[FlaggedSpan]:
        spans = []
        offset = 0
        for token in text.split():
            start = text.index(token, offset)
            offset = start + len(token)
            if token not in self.words:
                spans.append(FlaggedSpan(start, offset))
        return spans

    def is_misspelled(self, word: str) -> bool:
        return word.lower() not in self.words

    def get_corrections(self, word: str) -> List[str]:
        return sorted(w for w in self.words if w[:1] == word[:1].lower() and w != word)

    def add_word(self, word: str) -> None:
        self.words.add(word.lower())

    def list_available_dictionaries(self) -> List[str]:
        return [self.locale] if self.locale else []


class FakeDetector:
    """Returns canned languages keyed by a marker word found in the text."""

    def __init__(self, markers: Optional[Dict[str, str]] = None) -> None:
        self.markers = dict(markers or {})
        self.calls: List[str] = []

    def detect(self, text: str) -> DetectionResult:
        self.calls.append(text)
        for marker, language in self.markers.items():
            if marker in text.lower():
                return DetectionResult(language_code=language, confidence_percent=99.0)
        raise DetectionUnreliable("Not enough reliable text")


def make_resolver(locales: Iterable[str] = (), hint: Optional[str] = None) -> LocaleResolver:
    return LocaleResolver(StaticLocaleInventory(locales), environment_hint=hint)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def source():
    """Dictionaries for English (US), German, French and Brazilian Portuguese."""
    return FakeSource(
        {
            "en-US": word_list("hello", "world", "the", "quick", "brown", "fox"),
            "de-DE": word_list("hallo", "welt", "der", "schnelle", "braune", "fuchs"),
            "fr-FR": word_list("bonjour", "le", "monde"),
            "pt-BR": word_list("ola", "mundo"),
        }
    )


@pytest.fixture
def detector():
    return FakeDetector({"hello": "en", "hallo": "de", "bonjour": "fr", "xyzzy": "tlh"})
