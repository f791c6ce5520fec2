"""Paragraph wrapping.

Blank-line separated chunks become paragraphs. Lines that already start
with a block-level tag (headings, lists, tables, rules, media) stand on
their own; the text lines around them are wrapped in ``<p>``. Protected
regions are hidden while chunks are split, so blank lines inside a
``<pre>`` block never end a paragraph.

Wrapping is decided per text run, not per document: an inline protected
region such as a ``<span>`` is wrapped together with the text around it
(``hello <span>x</span>`` becomes ``<p>hello <span>x</span></p>``), and a
document holding a protected region is never left unwrapped as a whole.

Example:
    >>> make_paragraphs("a\\n\\nb")
    '<p>a</p><p>b</p>'
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from vellum.guard import ProtectedSegments

_BLANK_LINES = re.compile(r"\n\s*\n")

BLOCK_LINE_PATTERN = re.compile(
    r"^\s*</?(?:h[1-6]|div|blockquote|hr|table|ul|ol|li|pre|figure|p|details|"
    r"summary|address|video|audio|iframe|section|article|aside|header|footer|nav)\b",
    re.IGNORECASE,
)

_PARAGRAPH_START = re.compile(r"^<p\b", re.IGNORECASE)


def _wrap_chunk(chunk: str, segments: ProtectedSegments) -> str:
    out: list[str] = []
    run: list[str] = []

    def flush() -> None:
        text = "\n".join(run).strip()
        run.clear()
        if not text:
            return
        if _PARAGRAPH_START.match(segments.restore(text)):
            out.append(text)
        else:
            out.append(f"<p>{text}</p>")

    for line in chunk.split("\n"):
        if BLOCK_LINE_PATTERN.match(segments.restore(line)):
            flush()
            out.append(line.strip())
        else:
            run.append(line)
    flush()

    return "\n".join(out)


def make_paragraphs(html: str, protected_tags: Iterable[str] | None = None) -> str:
    """Wrap text runs of a document in paragraphs.

    Args:
        html: Document after rule passes and list formatting
        protected_tags: Tags hidden while splitting (defaults to the
            guard's default set)

    Returns:
        HTML with every text run inside a ``<p>``
    """
    segments = ProtectedSegments()
    hidden = segments.protect(html, protected_tags)
    chunks = (chunk.strip() for chunk in _BLANK_LINES.split(hidden))
    wrapped = "".join(_wrap_chunk(chunk, segments) for chunk in chunks if chunk)
    return segments.restore(wrapped)
