"""
Parameter substitution for translated strings.

Translations use printf-style placeholders. Positional arguments fill
``%s``/``%d`` style placeholders; a single mapping argument fills named
placeholders such as ``%(name)s``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def sprintf(pattern: str, params: Mapping[str, Any]) -> str:
    """
    Substitute named placeholders.

    Args:
        pattern: Text with ``%(name)s`` style placeholders
        params: Values by name; a name may be used several times

    Returns:
        The formatted text

    Raises:
        KeyError: If a placeholder has no value in ``params``

    Examples:
        >>> sprintf("%(brother)s loves %(sister)s.", {"brother": "Louis", "sister": "Susan"})
        'Louis loves Susan.'
    """
    return pattern % params


def printf(text: str, *vars: Any) -> str:
    """
    Format a translated string with optional arguments.

    With no arguments the text is returned unchanged, so literal ``%``
    characters survive. If substitution fails the text is returned
    without interpolation.
    """
    if not vars:
        return text
    try:
        if len(vars) == 1 and isinstance(vars[0], Mapping):
            return sprintf(text, vars[0])
        return text % vars
    except (KeyError, TypeError, ValueError) as e:
        logger.debug(f"Could not format {text!r} with {vars!r}: {e}")
        return text
