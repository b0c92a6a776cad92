"""Language detection helpers built on top of langdetect."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from langdetect import DetectorFactory, LangDetectException, detect_langs

from src.core.errors import DetectionUnreliable
from src.utils.locale_codes import bare_language

LOGGER = logging.getLogger(__name__)

# Stabilise detection output across runs.
DetectorFactory.seed = 0


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Best language guess for a text sample."""

    language_code: str
    confidence_percent: float


class LanguageDetector:
    """Detects the language of typed text, refusing to guess when unsure."""

    _MAX_SAMPLE_CHARS = 2000

    def __init__(self, min_confidence_percent: float = 85.0) -> None:
        self.min_confidence_percent = min_confidence_percent

    def detect(self, text: str) -> DetectionResult:
        """Detect the dominant language of ``text``.

        Args:
            text: Arbitrary text typed by the user or supplied as a hint.

        Returns:
            The top language candidate with its confidence in percent.

        Raises:
            DetectionUnreliable: No candidate, or the best one is below the
                configured confidence threshold.
        """

        sample = (text or "").strip()
        if not sample:
            raise DetectionUnreliable("Not enough reliable text")

        try:
            candidates = detect_langs(sample[: self._MAX_SAMPLE_CHARS])
        except LangDetectException as exc:
            raise DetectionUnreliable(f"Language detection failed: {exc}") from exc

        if not candidates:
            raise DetectionUnreliable("Not enough reliable text")

        best = candidates[0]
        confidence = round(best.prob * 100.0, 2)
        if confidence < self.min_confidence_percent:
            LOGGER.debug(
                "Best guess '%s' at %.1f%% is below %.1f%%; ignoring.",
                best.lang,
                confidence,
                self.min_confidence_percent,
            )
            raise DetectionUnreliable("Not enough reliable text", confidence=confidence)

        # langdetect reports a few languages with a region (zh-cn, zh-tw)
        language = bare_language(best.lang)
        LOGGER.debug("Detected language '%s' (%.1f%%).", language, confidence)
        return DetectionResult(language_code=language, confidence_percent=confidence)
