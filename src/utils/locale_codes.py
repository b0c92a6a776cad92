"""Locale code normalisation helpers and the static fallback locale table."""

from __future__ import annotations

import re
from typing import Dict, Optional

from src.core.errors import UnknownLanguage

# Default region per bare language, used when nothing better is known about
# the user's machine. Every value is already in canonical ``xx-YY`` form.
FALLBACK_LOCALES: Dict[str, str] = {
    "af": "af-ZA",
    "ar": "ar-SA",
    "bg": "bg-BG",
    "ca": "ca-ES",
    "cs": "cs-CZ",
    "cy": "cy-GB",
    "da": "da-DK",
    "de": "de-DE",
    "el": "el-GR",
    "en": "en-US",
    "es": "es-ES",
    "et": "et-EE",
    "fa": "fa-IR",
    "fi": "fi-FI",
    "fo": "fo-FO",
    "fr": "fr-FR",
    "he": "he-IL",
    "hi": "hi-IN",
    "hr": "hr-HR",
    "hu": "hu-HU",
    "hy": "hy-AM",
    "id": "id-ID",
    "it": "it-IT",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "lt": "lt-LT",
    "lv": "lv-LV",
    "nb": "nb-NO",
    "nl": "nl-NL",
    "pl": "pl-PL",
    "pt": "pt-BR",
    "ro": "ro-RO",
    "ru": "ru-RU",
    "sh": "sh-RS",
    "sk": "sk-SK",
    "sl": "sl-SI",
    "sq": "sq-AL",
    "sr": "sr-RS",
    "sv": "sv-SE",
    "ta": "ta-IN",
    "tg": "tg-TG",
    "tr": "tr-TR",
    "uk": "uk-UA",
    "vi": "vi-VN",
}

# Linux and Windows spell locales with an underscore (``en_US``).
POSIX_LOCALE_PATTERN = re.compile(r"[a-z]{2}_[A-Z]{2}")

_LOCALE_PATTERN = re.compile(r"^([A-Za-z]{2})(?:[-_]([A-Za-z]{2}))?$")


def bare_language(code: str) -> str:
    """Return the lower-case language part of a language or locale code."""

    return re.split(r"[-_.@]", (code or "").strip(), maxsplit=1)[0].lower()


def extract_posix_locale(text: str) -> Optional[str]:
    """Find the first ``xx_YY`` locale inside ``text`` (e.g. ``en_GB.UTF-8``)."""

    match = POSIX_LOCALE_PATTERN.search(text or "")
    return match.group(0) if match else None


def normalize_locale_code(code: str) -> str:
    """Convert any platform spelling of a locale into canonical ``xx-YY`` form.

    Args:
        code: ``en``, ``en_us``, ``EN-us``, ``pt_BR.UTF-8``, ``de_DE@euro`` ...

    Returns:
        The canonical locale, e.g. ``en-US``. Bare languages are expanded
        through :data:`FALLBACK_LOCALES`.

    Raises:
        UnknownLanguage: A bare language has no default locale.
        ValueError: The input is not a recognisable locale code.
    """

    cleaned = (code or "").strip().split(".", 1)[0].split("@", 1)[0]
    match = _LOCALE_PATTERN.match(cleaned)
    if not match:
        raise ValueError(f"Not a locale code: {code!r}")

    language, region = match.group(1).lower(), match.group(2)
    if region is None:
        try:
            return FALLBACK_LOCALES[language]
        except KeyError:
            raise UnknownLanguage(language) from None

    return f"{language}-{region.upper()}"


__all__ = [
    "FALLBACK_LOCALES",
    "POSIX_LOCALE_PATTERN",
    "bare_language",
    "extract_posix_locale",
    "normalize_locale_code",
]
