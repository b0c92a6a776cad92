"""Data models for the spellcheck session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class SessionStatus(Enum):
    """Lifecycle of the active dictionary."""

    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    UNLOADED = "unloaded"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session's state."""

    status: SessionStatus
    language: Optional[str] = None
    auto_correct: bool = True

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "language": self.language,
            "auto_correct": self.auto_correct,
        }


@dataclass(frozen=True)
class ProviderRegistration:
    """The last values handed to the host's spellcheck provider hook."""

    locale: str
    auto_correct: bool


# Called by the host for every word it wants checked; True means "correct".
CheckWordCallback = Callable[[str], bool]

# Host hook installing the per-word callback for a locale.
RegisterProvider = Callable[[str, bool, CheckWordCallback], None]
