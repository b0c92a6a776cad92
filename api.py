"""FastAPI server exposing the automatic spellcheck language switcher."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.core.errors import NoDictionaryAvailable, UnknownLanguage
from src.services import SpellcheckOrchestrator
from src.utils.locale_codes import normalize_locale_code

logging.basicConfig(
    level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s"
)
LOGGER = logging.getLogger(__name__)

_orchestrator: Optional[SpellcheckOrchestrator] = None


def get_orchestrator() -> SpellcheckOrchestrator:
    """Get the process-wide orchestrator, creating it on first use."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SpellcheckOrchestrator()
    return _orchestrator


@asynccontextmanager
async def lifespan(application: FastAPI):  # noqa: ARG001
    """Attach the orchestrator to the input surface for the app's lifetime."""
    orchestrator = get_orchestrator()
    orchestrator.attach_to_input()
    yield
    await orchestrator.dispose()


app = FastAPI(
    title="Spell Switcher API",
    description="Detects the language being typed and switches spellcheck dictionaries",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - read allowed origins from environment
_default_origins = "http://localhost:3000,http://127.0.0.1:3000"
_cors_origins = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOWED_ORIGINS", _default_origins).split(",")
    if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models for API requests and responses
# ============================================================================


class SessionInfo(BaseModel):
    """Current state of the spellcheck session."""

    status: str
    language: Optional[str] = None
    auto_correct: bool = True


class RegistrationInfo(BaseModel):
    """Last values handed to the spellcheck provider hook."""

    locale: str
    auto_correct: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    session: SessionInfo
    registration: Optional[RegistrationInfo] = None


class TextRequest(BaseModel):
    """Full content of the edited field, or a hint sample."""

    text: str


class InputResponse(BaseModel):
    """Sampler state after a text change."""

    words_since_last_check: int


class WordRequest(BaseModel):
    """A single word."""

    word: str = Field(..., min_length=1)


class CheckResponse(BaseModel):
    """Result of the per-word spelling callback."""

    word: str
    correct: bool


class CorrectionsResponse(BaseModel):
    """Suggestions for a misspelled word."""

    word: str
    corrections: List[str]


class AddWordResponse(BaseModel):
    """Whether the word was added to the active dictionary."""

    word: str
    added: bool


class LanguageRequest(BaseModel):
    """Explicit language switch."""

    code: str = Field(..., min_length=1)


class LanguageResponse(BaseModel):
    """The locale active after a switch or hint (``None`` when ignored)."""

    language: Optional[str] = None


class FocusResponse(BaseModel):
    """Dictionary state after a focus change."""

    has_dictionary: bool
    session: SessionInfo


def _session_info(orchestrator: SpellcheckOrchestrator) -> SessionInfo:
    return SessionInfo(**orchestrator.snapshot().to_dict())


# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    orchestrator = get_orchestrator()
    registration = orchestrator.session.last_registration
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        session=_session_info(orchestrator),
        registration=(
            RegistrationInfo(locale=registration.locale, auto_correct=registration.auto_correct)
            if registration
            else None
        ),
    )


@app.post("/input", response_model=InputResponse)
async def post_input(request: TextRequest) -> InputResponse:
    """Feed the current text of the edited field to the detector."""
    orchestrator = get_orchestrator()
    attachment = orchestrator.attachment
    if attachment is None or attachment.disposed:
        attachment = orchestrator.attach_to_input()
    attachment.feed(request.text)
    return InputResponse(words_since_last_check=attachment.words_since_last_check)


@app.post("/check", response_model=CheckResponse)
async def check_word(request: WordRequest) -> CheckResponse:
    """Spell check a single word against the active dictionary."""
    correct = get_orchestrator().check_word(request.word)
    return CheckResponse(word=request.word, correct=correct)


@app.get("/corrections", response_model=CorrectionsResponse)
async def get_corrections(word: str) -> CorrectionsResponse:
    """Get suggestions for a word."""
    corrections = await get_orchestrator().get_corrections(word)
    if corrections is None:
        raise HTTPException(status_code=404, detail="No dictionary loaded")
    return CorrectionsResponse(word=word, corrections=corrections)


@app.post("/dictionary/words", response_model=AddWordResponse)
async def add_word(request: WordRequest) -> AddWordResponse:
    """Add a word to the active dictionary."""
    added = await get_orchestrator().add_to_dictionary(request.word)
    return AddWordResponse(word=request.word, added=added)


@app.post("/language", response_model=LanguageResponse)
async def switch_language(request: LanguageRequest) -> LanguageResponse:
    """Explicitly switch the spellcheck language."""
    try:
        normalize_locale_code(request.code)
    except (UnknownLanguage, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        language = await get_orchestrator().switch_language(request.code)
    except NoDictionaryAvailable as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return LanguageResponse(language=language)


@app.post("/hint", response_model=LanguageResponse)
async def provide_hint(request: TextRequest) -> LanguageResponse:
    """Switch to the language of a sample the user is likely to type in."""
    try:
        language = await get_orchestrator().provide_hint_text(request.text)
    except NoDictionaryAvailable as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UnknownLanguage as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return LanguageResponse(language=language)


@app.post("/blur", response_model=FocusResponse)
async def blur() -> FocusResponse:
    """Host window lost focus."""
    orchestrator = get_orchestrator()
    await orchestrator.handle_blur()
    return FocusResponse(
        has_dictionary=orchestrator.session.has_dictionary,
        session=_session_info(orchestrator),
    )


@app.post("/focus", response_model=FocusResponse)
async def focus() -> FocusResponse:
    """Host window regained focus."""
    orchestrator = get_orchestrator()
    has_dictionary = await orchestrator.handle_focus()
    return FocusResponse(has_dictionary=has_dictionary, session=_session_info(orchestrator))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
