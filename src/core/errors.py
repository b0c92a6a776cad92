"""Exception types shared by the language switching components."""

from __future__ import annotations

from typing import Optional, Sequence


class SpellSwitchError(Exception):
    """Base class for every error raised by this package."""


class UnknownLanguage(SpellSwitchError):
    """No locale mapping exists for a bare language code."""

    def __init__(self, language: str) -> None:
        super().__init__(f"No locale known for language '{language}'")
        self.language = language


class NoDictionaryAvailable(SpellSwitchError):
    """Every candidate of a fallback chain failed to load."""

    def __init__(self, requested: str, candidates: Sequence[str]) -> None:
        super().__init__(
            f"No dictionary could be loaded for '{requested}' (tried {', '.join(candidates) or 'nothing'})"
        )
        self.requested = requested
        self.candidates = list(candidates)


class DetectionUnreliable(SpellSwitchError):
    """The language detector declined to answer confidently."""

    def __init__(self, reason: str, confidence: Optional[float] = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.confidence = confidence


class DictionaryNotFound(SpellSwitchError):
    """A dictionary source has no dictionary for this exact locale."""

    def __init__(self, locale: str) -> None:
        super().__init__(f"No dictionary for locale '{locale}'")
        self.locale = locale


__all__ = [
    "DetectionUnreliable",
    "DictionaryNotFound",
    "NoDictionaryAvailable",
    "SpellSwitchError",
    "UnknownLanguage",
]
