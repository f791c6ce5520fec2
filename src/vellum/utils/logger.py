"""Logging helpers for Vellum.

Every logger lives under the ``vellum`` namespace and the library never
attaches handlers. Records are emitted at debug level only, when a render
degrades gracefully (unmatched embed URL, unknown template, depth cap).

Those records often quote author or attacker supplied text, which can be
arbitrarily long. Pass such values through excerpt() so a debug log never
carries a whole document.

Example:
    >>> from vellum.utils.logger import excerpt, get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("No pattern matched %s", excerpt("x" * 500))
"""

from __future__ import annotations

import logging

ROOT_LOGGER = "vellum"

EXCERPT_LIMIT = 60


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a Vellum module.

    Names outside the package namespace are prefixed, so
    ``get_logger("embeds")`` and ``get_logger("vellum.embeds")`` are the
    same logger.

    Example:
        >>> get_logger("embeds").name
        'vellum.embeds'
    """
    if not (name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}.")):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def excerpt(text: str, limit: int = EXCERPT_LIMIT) -> str:
    """Return a repr of text cut to ``limit`` characters for log records.

    Examples:
        >>> excerpt("short")
        "'short'"
        >>> excerpt("abcdef", limit=3)
        "'abc'... (6 chars)"
    """
    if len(text) <= limit:
        return repr(text)
    return f"{text[:limit]!r}... ({len(text)} chars)"
