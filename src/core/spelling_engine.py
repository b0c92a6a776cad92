"""Spelling engine contract and a pyspellchecker-backed implementation."""

from __future__ import annotations

import gzip
import json
import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol

from spellchecker import SpellChecker

LOGGER = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"
_WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")


@dataclass(frozen=True, slots=True)
class FlaggedSpan:
    """Character range of a misspelling inside the checked text."""

    start: int
    end: int


class SpellingEngine(Protocol):
    """Operations the session needs from a spelling engine."""

    def set_dictionary(self, locale: str, data: bytes) -> None:
        ...

    def check_spelling(self, text: str) -> List[FlaggedSpan]:
        ...

    def is_misspelled(self, word: str) -> bool:
        ...

    def get_corrections(self, word: str) -> List[str]:
        ...

    def add_word(self, word: str) -> None:
        ...

    def list_available_dictionaries(self) -> List[str]:
        ...


def decode_word_frequencies(data: bytes):
    """Decode a pyspellchecker style dictionary (optionally gzipped JSON).

    Returns:
        Either a ``{word: frequency}`` mapping or a list of words.

    Raises:
        ValueError: The payload is not a JSON object or array.
    """

    if data[:2] == _GZIP_MAGIC:
        data = gzip.decompress(data)
    payload = json.loads(data.decode("utf-8"))
    if not isinstance(payload, (dict, list)):
        raise ValueError("Dictionary payload must be a JSON object or array")
    return payload


class PySpellcheckerEngine:
    """Spelling engine using pyspellchecker word-frequency dictionaries."""

    MAX_CORRECTIONS = 10

    def __init__(self) -> None:
        self._checker = SpellChecker(language=None)
        self._locale: Optional[str] = None

    @property
    def locale(self) -> Optional[str]:
        return self._locale

    def set_dictionary(self, locale: str, data: bytes) -> None:
        payload = decode_word_frequencies(data)
        checker = SpellChecker(language=None)
        if isinstance(payload, dict):
            checker.word_frequency.load_json(payload)
        else:
            checker.word_frequency.load_words([str(word) for word in payload])

        self._checker = checker
        self._locale = locale
        LOGGER.debug("Loaded %d words for %s.", len(checker.word_frequency.dictionary), locale)

    def check_spelling(self, text: str) -> List[FlaggedSpan]:
        spans: List[FlaggedSpan] = []
        for match in _WORD_PATTERN.finditer(text or ""):
            if not self._is_known(match.group(0)):
                spans.append(FlaggedSpan(start=match.start(), end=match.end()))
        return spans

    def is_misspelled(self, word: str) -> bool:
        return not self._is_known(word)

    def _is_known(self, word: str) -> bool:
        # SpellChecker.unknown() passes over words longer than its longest entry
        return word.lower() in self._checker.word_frequency

    def get_corrections(self, word: str) -> List[str]:
        candidates = self._checker.candidates(word) or set()
        ranked = sorted(
            (candidate for candidate in candidates if candidate != word.lower()),
            key=lambda candidate: (-self._checker.word_usage_frequency(candidate), candidate),
        )
        return ranked[: self.MAX_CORRECTIONS]

    def add_word(self, word: str) -> None:
        self._checker.word_frequency.load_words([word])

    def list_available_dictionaries(self) -> List[str]:
        return [self._locale] if self._locale else []


__all__ = [
    "FlaggedSpan",
    "PySpellcheckerEngine",
    "SpellingEngine",
    "decode_word_frequencies",
]
