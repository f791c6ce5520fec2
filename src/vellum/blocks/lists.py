"""Indentation-based list formatting.

Turns runs of marker lines into nested ``<ul>``/``<ol>`` markup using an
explicit stack of open list frames.

Markers:
    -, *, +      unordered item
    1. or 1)     ordered item

A marker must be followed by whitespace. Nesting comes from indentation
alone (tabs count as four columns).

Example:
    >>> format_list_block("- a\\n- b\\n  - c")
    '<ul><li>a</li><li>b</li><ul><li>c</li></ul></ul>'

Tie-break:
When an item's marker type differs from the open list at the same indent,
the open list is closed and a new one of the wanted type is started. The
most recently opened frame always decides.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from vellum.guard import ProtectedSegments

_ITEM = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>[-*+]|\d+[.)])[ \t]+(?P<content>.*?)[ \t]*$")


class ListType(str, Enum):
    """Kind of HTML list, valued by its tag name."""

    UNORDERED = "ul"
    ORDERED = "ol"


@dataclass(frozen=True, slots=True)
class ListFrame:
    """An open list on the stack.

    Attributes:
        type: Ordered or unordered
        indent: Column depth of the items in this list

    """

    type: ListType
    indent: int


class ListStack:
    """Stack of open list frames for one run of list lines.

    Indents of the frames increase strictly from bottom to top. Every frame
    pushed emits its opening tag once and every frame popped emits its
    closing tag once.
    """

    __slots__ = ("_frames", "_parts")

    def __init__(self) -> None:
        self._frames: list[ListFrame] = []
        self._parts: list[str] = []

    def add_item(self, indent: int, list_type: ListType, content: str) -> None:
        """Place an item, opening or closing lists so it lands at ``indent``."""
        while self._frames and self._frames[-1].indent > indent:
            self._pop()

        top = self._frames[-1] if self._frames else None
        if top is not None and top.indent == indent and top.type is not list_type:
            self._pop()

        if not self._frames or self._frames[-1].indent < indent:
            self._push(ListFrame(list_type, indent))

        self._parts.append(f"<li>{content}</li>")

    def flush(self) -> str:
        """Close every open frame and return the HTML for the run."""
        while self._frames:
            self._pop()
        html = "".join(self._parts)
        self._parts.clear()
        return html

    @property
    def depth(self) -> int:
        """Number of currently open lists."""
        return len(self._frames)

    def _push(self, frame: ListFrame) -> None:
        self._frames.append(frame)
        self._parts.append(f"<{frame.type.value}>")

    def _pop(self) -> None:
        frame = self._frames.pop()
        self._parts.append(f"</{frame.type.value}>")

    def __bool__(self) -> bool:
        return bool(self._frames or self._parts)


def list_type_for(marker: str) -> ListType:
    """Return the list type a marker asks for."""
    return ListType.UNORDERED if marker in ("-", "*", "+") else ListType.ORDERED


def format_list_block(text: str) -> str:
    """Convert list marker lines in text into nested HTML lists.

    Non-list lines close every open list before being emitted unchanged.
    Each run of list lines becomes a single line of HTML.
    """
    out: list[str] = []
    stack = ListStack()

    for line in text.split("\n"):
        match = _ITEM.match(line)
        if match is not None:
            indent = len(match.group("indent").expandtabs(4))
            stack.add_item(indent, list_type_for(match.group("marker")), match.group("content"))
            continue

        if stack:
            out.append(stack.flush())
        out.append(line)

    if stack:
        out.append(stack.flush())

    return "\n".join(out)


def format_lists(text: str, protected_tags: Iterable[str] | None = None) -> str:
    """Format lists everywhere except inside protected block tags.

    Args:
        text: Document text
        protected_tags: Tags whose content must not be list-formatted
            (defaults to the guard's default set)

    Returns:
        Text with list runs converted to HTML
    """
    segments = ProtectedSegments()
    hidden = segments.protect(text, protected_tags)
    return segments.restore(format_list_block(hidden))
