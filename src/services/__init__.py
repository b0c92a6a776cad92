"""Service layer for automatic spellcheck language switching."""

from src.services.models import (
    CheckWordCallback,
    ProviderRegistration,
    RegisterProvider,
    SessionSnapshot,
    SessionStatus,
)
from src.services.orchestrator import InputAttachment, SpellcheckOrchestrator
from src.services.session import SpellcheckSession

__all__ = [
    "CheckWordCallback",
    "InputAttachment",
    "ProviderRegistration",
    "RegisterProvider",
    "SessionSnapshot",
    "SessionStatus",
    "SpellcheckOrchestrator",
    "SpellcheckSession",
]
