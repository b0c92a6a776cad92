"""Decide when typed text is worth sending to the language detector."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import AsyncIterator, Optional

LOGGER = logging.getLogger(__name__)

# A word was just finished: a non-space character followed by whitespace.
_WORD_BOUNDARY = re.compile(r"\S\s$")


class DetectionSampler:
    """Watches one input surface and emits text samples for detection.

    When the user switches to a language the active dictionary cannot
    tokenise, the spelling engine stops calling back. Counting finished words
    between callbacks is how that silence is noticed.

    Detection passes are scheduled by three things: a spelling error
    reported by the session, the silent-engine trigger, and (only while no
    language is established) a debounce window elapsing after a text change.
    Samples go through a single-consumer queue, in arrival order.
    """

    def __init__(
        self,
        debounce_seconds: float = 0.25,
        min_sample_length: int = 8,
        redetect_word_threshold: int = 2,
        initial_pass: bool = True,
    ) -> None:
        """Initialise the sampler. Must be created inside a running event loop.

        Args:
            debounce_seconds: Quiet period before the initial detection pass.
            min_sample_length: Shorter samples are dropped.
            redetect_word_threshold: Words typed without any spellcheck
                callback beyond which detection is re-run.
            initial_pass: Arm the debounced initial pass. Pass ``False`` when
                a language is already known.
        """

        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._debounce_seconds = debounce_seconds
        self._min_sample_length = min_sample_length
        self._redetect_word_threshold = redetect_word_threshold
        self._initial_armed = initial_pass
        self._timer: Optional[asyncio.TimerHandle] = None
        self._disposed = False

        self.words_since_last_check = 0
        self.last_observed_text = ""

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def initial_pass_armed(self) -> bool:
        return self._initial_armed

    def on_text_changed(self, text: str) -> None:
        """Feed the full current content of the edited field."""

        if self._disposed or not text:
            return

        if _WORD_BOUNDARY.search(text):
            self.words_since_last_check += 1

        self.last_observed_text = text

        if self.words_since_last_check > self._redetect_word_threshold:
            LOGGER.debug(
                "%d words typed without spell checking invoked, redetecting language",
                self.words_since_last_check,
            )
            self.request_detection("engine silent")

        if self._initial_armed:
            self._restart_timer()

    def on_spellcheck_invoked(self, *_args) -> None:
        self.words_since_last_check = 0

    def on_spelling_error(self, *_args) -> None:
        self.request_detection("spelling error")

    def on_dictionary_changed(self, *_args) -> None:
        self.words_since_last_check = 0
        # Once a dictionary is in place the initial pass is moot.
        self._initial_armed = False
        self._cancel_timer()

    def request_detection(self, reason: str) -> bool:
        """Queue the last observed text unless it is too short to judge.

        Returns:
            True when a sample was queued.
        """

        if self._disposed:
            return False

        text = self.last_observed_text
        if len(text) < self._min_sample_length:
            LOGGER.debug("Skipping detection (%s): only %d characters", reason, len(text))
            return False

        LOGGER.debug("Queueing %d characters for detection (%s)", len(text), reason)
        self._queue.put_nowait(text)
        return True

    async def samples(self) -> AsyncIterator[str]:
        """Yield queued samples until the sampler is disposed."""

        while True:
            sample = await self._queue.get()
            if sample is None or self._disposed:
                return
            yield sample

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._initial_armed = False
        self._cancel_timer()
        self._queue.put_nowait(None)

    def _restart_timer(self) -> None:
        self._cancel_timer()
        self._timer = self._loop.call_later(self._debounce_seconds, self._on_quiet_period)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_quiet_period(self) -> None:
        self._timer = None
        if self._initial_armed:
            self.request_detection("initial")


__all__ = ["DetectionSampler"]
