"""Tests for the likely-locale table and locale resolution."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from src.core.errors import UnknownLanguage
from src.core.locale_inventory import (
    EngineLocaleInventory,
    LinuxLocaleInventory,
    StaticLocaleInventory,
    default_locale_inventory,
)
from src.core.locale_resolver import LocaleResolver
from src.utils.config import HostPlatform

from conftest import make_resolver


class TestLikelyLocaleTable:
    """Building the table from the OS locale list."""

    def test_single_region_languages_are_kept(self):
        resolver = make_resolver(["en_GB", "fr_CA", "C.UTF-8"])
        assert resolver.likely_locale_table == {"en": "en-GB", "fr": "fr-CA"}

    def test_ambiguous_languages_are_excluded(self):
        """de_AT + de_CH tells us nothing, so German falls back to de-DE."""
        resolver = make_resolver(["de_AT", "de_CH", "en_GB"])
        table = resolver.likely_locale_table
        assert "de" not in table
        assert resolver.resolve_locale("de") == "de-DE"
        assert resolver.resolve_locale("en") == "en-GB"

    def test_duplicate_entries_are_not_ambiguous(self):
        resolver = make_resolver(["en_GB", "en_GB.UTF-8", "en_GB@euro"])
        assert resolver.likely_locale_table == {"en": "en-GB"}

    def test_environment_hint_overrides_its_language(self):
        resolver = make_resolver(["en_GB", "en_US", "fr_CA"], hint="en_AU.UTF-8")
        table = resolver.likely_locale_table
        assert table["en"] == "en-AU"
        assert table["fr"] == "fr-CA"

    def test_table_is_built_once(self):
        inventory = MagicMock()
        inventory.list_configured_locales.return_value = ["pt_PT"]
        resolver = LocaleResolver(inventory)

        assert resolver.resolve_locale("pt") == "pt-PT"
        assert resolver.resolve_locale("pt") == "pt-PT"
        inventory.list_configured_locales.assert_called_once()

        resolver.reset()
        resolver.resolve_locale("pt")
        assert inventory.list_configured_locales.call_count == 2

    def test_returned_table_is_a_copy(self):
        resolver = make_resolver(["en_GB"])
        resolver.likely_locale_table["en"] = "en-ZZ"
        assert resolver.resolve_locale("en") == "en-GB"


class TestResolveLocale:
    """Fallback order when the machine has no opinion."""

    def test_static_fallback(self):
        resolver = make_resolver([])
        assert resolver.resolve_locale("pt") == "pt-BR"
        assert resolver.resolve_locale("en") == "en-US"

    def test_accepts_full_locales(self):
        resolver = make_resolver(["sv_FI"])
        assert resolver.resolve_locale("sv-SE") == "sv-FI"

    def test_unknown_language(self):
        resolver = make_resolver([])
        with pytest.raises(UnknownLanguage):
            resolver.resolve_locale("tlh")


class TestLocaleInventories:
    """Platform inventories."""

    def test_linux_inventory_filters_entries(self):
        completed = subprocess.CompletedProcess(
            args=["locale", "-a"],
            returncode=0,
            stdout="C\nC.UTF-8\nPOSIX\nen_US.utf8\nde_AT.utf8\nde_AT@euro\n",
        )
        with patch("src.core.locale_inventory.subprocess.run", return_value=completed):
            locales = LinuxLocaleInventory().list_configured_locales()
        assert locales == ["en_US", "de_AT", "de_AT"]

    def test_linux_inventory_without_locale_binary(self):
        with patch("src.core.locale_inventory.subprocess.run", side_effect=FileNotFoundError("locale")):
            assert LinuxLocaleInventory().list_configured_locales() == []

    def test_engine_inventory_expands_bare_languages(self):
        engine = MagicMock()
        engine.list_available_dictionaries.return_value = ["en", "pt_BR", "xx"]
        assert EngineLocaleInventory(engine).list_configured_locales() == ["en-US", "pt_BR"]

    def test_default_inventory_per_platform(self):
        engine = MagicMock()
        assert isinstance(default_locale_inventory(HostPlatform("linux")), LinuxLocaleInventory)
        assert isinstance(default_locale_inventory(HostPlatform("darwin"), engine), EngineLocaleInventory)
        assert isinstance(default_locale_inventory(HostPlatform("sunos5")), StaticLocaleInventory)
