"""Tests for locale code normalisation."""

import unittest

from src.core.errors import UnknownLanguage
from src.utils.locale_codes import (
    FALLBACK_LOCALES,
    bare_language,
    extract_posix_locale,
    normalize_locale_code,
)


class TestNormalizeLocaleCode(unittest.TestCase):
    def test_platform_spellings(self):
        self.assertEqual(normalize_locale_code("en_US"), "en-US")
        self.assertEqual(normalize_locale_code("en-us"), "en-US")
        self.assertEqual(normalize_locale_code("EN_gb"), "en-GB")
        self.assertEqual(normalize_locale_code("pt_BR.UTF-8"), "pt-BR")
        self.assertEqual(normalize_locale_code("de_DE@euro"), "de-DE")

    def test_bare_language_expands_through_fallback(self):
        self.assertEqual(normalize_locale_code("en"), "en-US")
        self.assertEqual(normalize_locale_code("pt"), "pt-BR")
        self.assertEqual(normalize_locale_code("DE"), "de-DE")

    def test_unknown_bare_language(self):
        with self.assertRaises(UnknownLanguage) as ctx:
            normalize_locale_code("zz")
        self.assertEqual(ctx.exception.language, "zz")

    def test_malformed(self):
        for code in ("", "english", "en-USA", "e_US"):
            with self.subTest(code=code):
                with self.assertRaises(ValueError):
                    normalize_locale_code(code)

    def test_idempotent(self):
        for code in ("en_US", "fr-ca", "pt", "sv_SE.UTF-8"):
            with self.subTest(code=code):
                once = normalize_locale_code(code)
                self.assertEqual(normalize_locale_code(once), once)

    def test_fallback_values_are_canonical(self):
        for language, locale in FALLBACK_LOCALES.items():
            with self.subTest(language=language):
                self.assertEqual(normalize_locale_code(locale), locale)
                self.assertEqual(bare_language(locale), language)


class TestHelpers(unittest.TestCase):
    def test_bare_language(self):
        self.assertEqual(bare_language("pt_BR"), "pt")
        self.assertEqual(bare_language("en-US"), "en")
        self.assertEqual(bare_language("FR"), "fr")
        self.assertEqual(bare_language("zh-cn"), "zh")

    def test_extract_posix_locale(self):
        self.assertEqual(extract_posix_locale("en_GB.UTF-8"), "en_GB")
        self.assertEqual(extract_posix_locale("de_AT@euro"), "de_AT")
        self.assertIsNone(extract_posix_locale("C.UTF-8"))
        self.assertIsNone(extract_posix_locale("POSIX"))
        self.assertIsNone(extract_posix_locale(""))


if __name__ == "__main__":
    unittest.main()
