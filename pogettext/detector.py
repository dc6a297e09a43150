"""
Locale string handling and OS language detection.

Detects the system language from environment variables:
- LANGUAGE
- LC_ALL
- LC_MESSAGES
- LANG
"""

from __future__ import annotations

import os
import re

DEFAULT_LOCALE = "en_US"

# Environment variables to check, in priority order
LOCALE_ENV_VARS = ["LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"]

_LANGUAGE_PATTERN = re.compile(r"^[A-Za-z]{2,3}([_-][A-Za-z0-9]{2,8})*$")


def simplified_locale(locale_string: str) -> str:
    """
    Strip encoding, modifier and fallback parts from a locale string.

    Handles formats like:
    - de_DE.UTF-8 -> de_DE
    - de_DE@euro -> de_DE
    - de_DE:latin1 -> de_DE
    - en_US.UTF-8@latin -> en_US

    Args:
        locale_string: Raw locale string

    Returns:
        The simplified locale, possibly empty
    """
    for separator in (":", "@", "."):
        locale_string = locale_string.split(separator, 1)[0]
    return locale_string.strip()


def primary_language(locale_string: str) -> str:
    """Two-letter primary subtag of a locale (``"pt_BR"`` -> ``"pt"``)."""
    return simplified_locale(locale_string)[:2]


def _parse_locale(locale_string: str) -> str | None:
    """
    Normalize a locale from the environment.

    Returns:
        Simplified locale, or None for empty, C and POSIX locales and
        values that do not look like a language tag
    """
    if not locale_string:
        return None

    simplified = simplified_locale(locale_string)
    if not simplified or simplified.lower() in ("c", "posix"):
        return None
    if not _LANGUAGE_PATTERN.match(simplified):
        return None

    # Normalize hyphens to underscores ("pt-BR" -> "pt_BR")
    return simplified.replace("-", "_")


def detect_os_language(default: str = DEFAULT_LOCALE) -> str:
    """
    Detect the OS language from environment variables.

    The first usable locale found is returned. LANGUAGE can hold several
    values separated by ':'.

    Returns:
        Detected locale (e.g. 'es_ES'), or ``default``

    Examples:
        With LANG=es_ES.UTF-8: returns 'es_ES'
        With LANGUAGE=de:en: returns 'de'
    """
    for var in LOCALE_ENV_VARS:
        value = os.environ.get(var, "")
        if not value:
            continue

        candidates = value.split(":") if var == "LANGUAGE" else [value]
        for candidate in candidates:
            parsed = _parse_locale(candidate)
            if parsed:
                return parsed

    return default


def get_os_locale_info() -> dict[str, str | None]:
    """
    Get detailed OS locale information for debugging.

    Returns:
        Dictionary with all relevant locale environment variables
    """
    env_vars = LOCALE_ENV_VARS + ["LC_CTYPE"]

    info: dict[str, str | None] = {}
    for var in env_vars:
        info[var] = os.environ.get(var)

    info["detected_language"] = detect_os_language()

    return info
