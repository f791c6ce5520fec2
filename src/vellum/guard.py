"""Placeholder guard for block-level HTML.

Hides designated tags behind opaque tokens so that later regex passes
cannot see or mutate their interior, then puts them back verbatim.

Example:
    >>> from vellum.guard import ProtectedSegments
    >>> segments = ProtectedSegments()
    >>> hidden = segments.protect("<pre>*x*</pre> *y*")
    >>> "<pre>" in hidden
    False
    >>> segments.restore(hidden)
    '<pre>*x*</pre> *y*'

Thread Safety:
A ProtectedSegments instance belongs to a single render call. The default
tag table is an immutable tuple shared by everyone.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from functools import lru_cache

# Block containers hidden from markup passes unless the caller adds more
DEFAULT_PROTECTED_TAGS: tuple[str, ...] = (
    "p",
    "ul",
    "ol",
    "pre",
    "code",
    "table",
    "figure",
    "figcaption",
    "address",
    "details",
    "span",
    "embed",
    "video",
    "audio",
    "textarea",
    "input",
)

TOKEN_START = "\x02"
TOKEN_END = "\x03"


def merge_tags(base: Iterable[str], extra: Iterable[str] | None = None) -> tuple[str, ...]:
    """Merge tag names, lower-cased, keeping first-seen order and dropping duplicates."""
    merged: dict[str, None] = {}
    for name in base:
        merged[name.lower()] = None
    for name in extra or ():
        merged[name.lower()] = None
    return tuple(merged)


@lru_cache(maxsize=32)
def _region_pattern(tags: tuple[str, ...]) -> re.Pattern[str]:
    names = "|".join(re.escape(tag) for tag in tags)
    return re.compile(rf"<({names})\b[^>]*>.*?</\1\s*>", re.DOTALL | re.IGNORECASE)


class ProtectedSegments:
    """Store of substrings hidden behind placeholder tokens.

    Every token handed out maps to exactly one stored original, and
    restore() replaces tokens until none of this store's tokens remain.
    Tokens carry a per-instance nonce, so look-alike text in user input is
    never mistaken for a placeholder.

    Usage:
        >>> segments = ProtectedSegments()
        >>> token = segments.seal("<b>kept</b>")
        >>> segments.restore(f"before {token} after")
        'before <b>kept</b> after'
    """

    __slots__ = ("_nonce", "_originals", "_token_pattern")

    def __init__(self) -> None:
        self._nonce = uuid.uuid4().hex[:12]
        self._originals: list[str] = []
        self._token_pattern = re.compile(
            rf"{TOKEN_START}{self._nonce}:(\d+){TOKEN_END}"
        )

    def seal(self, original: str) -> str:
        """Store a substring and return the token standing in for it."""
        self._originals.append(original)
        return f"{TOKEN_START}{self._nonce}:{len(self._originals) - 1}{TOKEN_END}"

    def protect(self, html: str, tags: Iterable[str] | None = None) -> str:
        """Replace each non-overlapping ``<tag ...>...</tag>`` region with a token.

        Matching is non-greedy and case-insensitive. A region whose close tag
        is missing is left in place, unprotected.

        Args:
            html: Text to scan
            tags: Tag names to hide (defaults to DEFAULT_PROTECTED_TAGS)

        Returns:
            Text with protected regions replaced by tokens
        """
        names = merge_tags(tags) if tags is not None else DEFAULT_PROTECTED_TAGS
        if not html or not names:
            return html
        return _region_pattern(names).sub(lambda m: self.seal(m.group(0)), html)

    def restore(self, html: str) -> str:
        """Put every stored original back in place of its token.

        Originals may themselves contain tokens (a region sealed after an
        inner one was protected), so replacement repeats until no token of
        this store is left.
        """
        for _ in range(len(self._originals) + 1):
            restored = self._token_pattern.sub(self._lookup, html)
            if restored == html:
                break
            html = restored
        return html

    def original(self, token: str) -> str | None:
        """Return the stored original for a token, or None if it is not ours."""
        match = self._token_pattern.fullmatch(token)
        if match is None:
            return None
        return self._originals[int(match.group(1))]

    def contains_token(self, text: str) -> bool:
        """Check whether text still holds a token from this store."""
        return self._token_pattern.search(text) is not None

    def _lookup(self, match: re.Match[str]) -> str:
        index = int(match.group(1))
        if index < len(self._originals):
            return self._originals[index]
        return match.group(0)

    def __len__(self) -> int:
        """Return the number of stored originals."""
        return len(self._originals)


def protect(html: str, tags: Iterable[str] | None = None) -> tuple[str, ProtectedSegments]:
    """Protect tags in html with a fresh store.

    Returns:
        Tuple of (protected text, store to restore it with)
    """
    segments = ProtectedSegments()
    return segments.protect(html, tags), segments


__all__ = [
    "DEFAULT_PROTECTED_TAGS",
    "TOKEN_END",
    "TOKEN_START",
    "ProtectedSegments",
    "merge_tags",
    "protect",
]
