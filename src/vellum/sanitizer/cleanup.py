"""HTML cruft removal and code region protection.

Pasted or imported HTML often carries document boilerplate, comments and
office-suite markup. clean_html() strips it. Code samples must survive
that stripping untouched, so ``<code>`` regions are lifted out first and
re-wrapped with their original attributes afterwards.

Example:
    >>> segments = protect_code("<!-- x --><code><!-- kept --></code>")
    >>> restore_code(clean_segments(segments))
    '<code><!-- kept --></code>'
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_CLEANUP_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE),
    # Conditional comments like <!--[if mso]> ... <![endif]-->
    re.compile(r"<!--\[if[^>]*\]>.*?<!\[endif\]-->", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--.*?-->", re.DOTALL),
    re.compile(r"<!\[CDATA\[.*?\]\]>", re.DOTALL),
    # OpenOffice / LibreOffice
    re.compile(r"</?(?:office|text|style|draw|table):[^>]*>", re.IGNORECASE),
    # MS Word
    re.compile(r"</?(?:o:p|v:shape|w:worddocument|xml)[^>]*>", re.IGNORECASE),
    re.compile(r"""style\s*=\s*(?:"[^"]*mso-[^"]*"|'[^']*mso-[^']*')""", re.IGNORECASE),
)

_CODE_REGION = re.compile(
    r"<code\b(?P<attributes>[^>]*)>(?P<content>.*?)</code\s*>",
    re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class ProtectedCode:
    """A ``<code>`` region lifted out of the document."""

    attributes: str
    content: str

    def render(self) -> str:
        """Re-wrap the content with the original attributes."""
        attributes = f" {self.attributes}" if self.attributes else ""
        return f"<code{attributes}>{self.content}</code>"


Segment = str | ProtectedCode


def clean_html(html: str) -> str:
    """Remove doctype, comments, CDATA and office-suite markup."""
    for pattern in _CLEANUP_PATTERNS:
        html = pattern.sub("", html)
    return html


def protect_code(html: str) -> list[Segment]:
    """Split html into text segments and protected code regions, in order."""
    segments: list[Segment] = []
    pos = 0
    for match in _CODE_REGION.finditer(html):
        if match.start() > pos:
            segments.append(html[pos : match.start()])
        segments.append(
            ProtectedCode(match.group("attributes").strip(), match.group("content"))
        )
        pos = match.end()
    if pos < len(html):
        segments.append(html[pos:])
    return segments


def clean_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Clean every text segment, leaving code regions as they are."""
    return [clean_html(s) if isinstance(s, str) else s for s in segments]


def restore_code(segments: Iterable[Segment]) -> str:
    """Join segments back into one document."""
    return "".join(s if isinstance(s, str) else s.render() for s in segments)


__all__ = [
    "ProtectedCode",
    "Segment",
    "clean_html",
    "clean_segments",
    "protect_code",
    "restore_code",
]
