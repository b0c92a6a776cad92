"""Minimal observer list used for session notifications."""

from __future__ import annotations

from typing import Any, Callable, List

Observer = Callable[..., Any]


class Signal:
    """Synchronous publish/subscribe channel.

    Observers run in subscription order on the emitting thread. An observer
    raising propagates to whoever emitted.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._observers: List[Observer] = []

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; call the returned function to unsubscribe."""

        self._observers.append(observer)

        def unsubscribe() -> None:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, *args: Any) -> None:
        for observer in list(self._observers):
            observer(*args)

    def __len__(self) -> int:
        return len(self._observers)


__all__ = ["Observer", "Signal"]
