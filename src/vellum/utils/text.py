"""Text processing utilities for Vellum.

Canonical escaping and whitespace helpers shared by the markup transformer,
the embed resolver and the HTML sanitizer.

Example:
    >>> from vellum.utils.text import escape_code
    >>> escape_code("<b>café</b>")
    '&lt;b&gt;caf&#xE9;&lt;/b&gt;'
"""

from __future__ import annotations

import re
import unicodedata
from html.entities import html5 as _HTML5_ENTITIES

# An ampersand that may already start a character reference
_AMPERSAND = re.compile(r"&(#\d+;|#[xX][0-9a-fA-F]+;|[A-Za-z][A-Za-z0-9]*;)?")

_NON_ASCII = re.compile(r"[^\x00-\x7f]")

_WHITESPACE_RUN = re.compile(r"\s+")

# C0/C1 controls except tab, newline and carriage return
_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_NONCHARACTERS = re.compile(r"[\ufdd0-\ufdef]")


def _keep_or_escape_ampersand(match: re.Match[str]) -> str:
    ref = match.group(1)
    if ref is None:
        return "&amp;"
    if ref.startswith("#") or ref in _HTML5_ENTITIES:
        return match.group(0)
    return "&amp;" + ref


def escape_code(text: str | None, trim: bool = True) -> str:
    """Escape text for literal display inside HTML.

    Known character references are left alone so escaping is idempotent:
    ``escape_code(escape_code(x)) == escape_code(x)``.

    Order of replacement:
    - & becomes &amp; (unless it already starts a known entity)
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &apos;
    - backslash becomes &#92;
    - non-ASCII code points become &#xHEX;

    Args:
        text: Text to escape (None is treated as empty)
        trim: Strip leading and trailing whitespace from the result

    Returns:
        Escaped text

    Examples:
        >>> escape_code("a & b &amp; c")
        'a &amp; b &amp; c'
        >>> escape_code("it's")
        'it&apos;s'
    """
    if not text:
        return ""

    text = _AMPERSAND.sub(_keep_or_escape_ampersand, text)
    text = (
        text.replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("\\", "&#92;")
    )
    text = _NON_ASCII.sub(lambda m: f"&#x{ord(m.group(0)):X};", text)

    return text.strip() if trim else text


def escape_attribute(text: str | None) -> str:
    """Escape a value for a double-quoted attribute emitted by markup rules.

    Only the characters that can break out of the attribute are replaced,
    keeping URLs and titles readable.
    """
    if not text:
        return ""
    text = _AMPERSAND.sub(_keep_or_escape_ampersand, text)
    return text.replace('"', "&quot;").replace("<", "&lt;").replace(">", "&gt;")


def pacify(text: str | None) -> str:
    """Remove unusable characters and surrounding whitespace.

    Strips control characters, Unicode noncharacters (U+FDD0..U+FDEF) and
    surrogate, format or unassigned code points.
    """
    if not text:
        return ""

    text = _CONTROL.sub("", text)
    text = _NONCHARACTERS.sub("", text)
    text = "".join(
        ch for ch in text if unicodedata.category(ch) not in ("Cs", "Cf", "Cn")
    )
    return text.strip()


def unify_spaces(text: str | None, replacement: str = " ") -> str:
    """Collapse every whitespace run to a single replacement string.

    Examples:
        >>> unify_spaces("  a \\t\\n b  ")
        'a b'
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(replacement, pacify(text)).strip()
