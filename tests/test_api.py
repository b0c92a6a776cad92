"""Tests for the FastAPI endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import api
from src.core.locale_inventory import StaticLocaleInventory
from src.services.orchestrator import SpellcheckOrchestrator
from src.utils.config import HostPlatform, Settings

from conftest import FakeEngine


@pytest.fixture
def orchestrator(source, store, detector):
    return SpellcheckOrchestrator(
        Settings(debounce_seconds=0.01, platform=HostPlatform("linux")),
        engine_factory=FakeEngine,
        dictionary_source=source,
        locale_inventory=StaticLocaleInventory([]),
        store=store,
        detector=detector,
    )


@pytest.fixture
def client(orchestrator, monkeypatch):
    """Create a test client around an orchestrator with fake collaborators."""
    monkeypatch.setattr(api, "_orchestrator", orchestrator)
    with TestClient(api.app) as test_client:
        yield test_client


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert data["session"] == {"status": "uninitialized", "language": None, "auto_correct": True}
        assert data["registration"] is None

    def test_lifespan_attaches_input(self, client, orchestrator):
        assert orchestrator.attachment is not None
        assert not orchestrator.attachment.disposed


class TestLanguageEndpoint:
    """Explicit switching."""

    def test_switch(self, client):
        response = client.post("/language", json={"code": "de_DE"})
        assert response.status_code == 200
        assert response.json() == {"language": "de-DE"}

        health = client.get("/health").json()
        assert health["session"]["status"] == "active"
        assert health["registration"] == {"locale": "de-DE", "auto_correct": True}

    def test_missing_dictionary(self, client):
        response = client.post("/language", json={"code": "sv"})
        assert response.status_code == 404

    def test_unknown_or_malformed_code(self, client):
        assert client.post("/language", json={"code": "zz"}).status_code == 400
        assert client.post("/language", json={"code": "english"}).status_code == 400

    def test_empty_code_is_invalid(self, client):
        assert client.post("/language", json={"code": ""}).status_code == 422


class TestSpellingEndpoints:
    """Per-word checks, corrections and user words."""

    def test_check_without_dictionary(self, client):
        response = client.post("/check", json={"word": "anything"})
        assert response.json() == {"word": "anything", "correct": True}

    def test_check_and_corrections(self, client):
        client.post("/language", json={"code": "en"})

        assert client.post("/check", json={"word": "hello"}).json()["correct"] is True
        assert client.post("/check", json={"word": "helo"}).json()["correct"] is False

        response = client.get("/corrections", params={"word": "helo"})
        assert response.status_code == 200
        assert "hello" in response.json()["corrections"]

    def test_corrections_without_dictionary(self, client):
        response = client.get("/corrections", params={"word": "helo"})
        assert response.status_code == 404

    def test_add_word(self, client):
        assert client.post("/dictionary/words", json={"word": "zorp"}).json()["added"] is False

        client.post("/language", json={"code": "en"})
        assert client.post("/dictionary/words", json={"word": "zorp"}).json() == {
            "word": "zorp",
            "added": True,
        }
        assert client.post("/check", json={"word": "zorp"}).json()["correct"] is True


class TestHintAndInput:
    """Hint text and the input surface."""

    def test_hint_switches_language(self, client):
        response = client.post("/hint", json={"text": "bonjour tout le monde"})
        assert response.json() == {"language": "fr-FR"}

    def test_unreliable_hint(self, client):
        response = client.post("/hint", json={"text": "12345"})
        assert response.status_code == 200
        assert response.json() == {"language": None}

    def test_hint_in_unknown_language(self, client):
        assert client.post("/hint", json={"text": "xyzzy"}).status_code == 400

    def test_input_counts_words(self, client):
        client.post("/language", json={"code": "en"})
        assert client.post("/input", json={"text": "hello "}).json() == {"words_since_last_check": 1}
        client.post("/check", json={"word": "hello"})
        assert client.post("/input", json={"text": "hello world"}).json() == {"words_since_last_check": 0}


class TestFocusEndpoints:
    """Blur unloads, focus restores."""

    def test_blur_and_focus(self, client):
        client.post("/language", json={"code": "fr"})

        blurred = client.post("/blur").json()
        assert blurred["has_dictionary"] is False
        assert blurred["session"]["status"] == "unloaded"

        focused = client.post("/focus").json()
        assert focused["has_dictionary"] is True
        assert focused["session"] == {"status": "active", "language": "fr-FR", "auto_correct": True}


def test_get_orchestrator_is_lazy(monkeypatch):
    created = MagicMock()
    monkeypatch.setattr(api, "_orchestrator", None)
    monkeypatch.setattr(api, "SpellcheckOrchestrator", created)
    assert api.get_orchestrator() is created.return_value
    assert api.get_orchestrator() is created.return_value
    created.assert_called_once_with()
