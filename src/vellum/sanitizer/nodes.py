"""Tag tree nodes produced by the sanitizer parser."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Union

Child = Union["TagNode", str]


@dataclass(frozen=True, slots=True)
class TagNode:
    """One parsed tag.

    Attributes:
        tag_name: Lower-cased tag name
        attributes: Attribute name to raw value ("" for bare attributes)
        content: Opaque text, ordered children (tags and text runs), or
            None for self-closing tags

    """

    tag_name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    content: str | tuple[Child, ...] | None = None

    @property
    def is_leaf(self) -> bool:
        return not isinstance(self.content, tuple)

    def children(self) -> tuple[Child, ...]:
        """Return structured children, or an empty tuple for leaves."""
        return self.content if isinstance(self.content, tuple) else ()

    def walk(self) -> Iterator[TagNode]:
        """Yield this node and every descendant tag, depth first."""
        yield self
        for child in self.children():
            if isinstance(child, TagNode):
                yield from child.walk()

    def depth(self) -> int:
        """Return the number of tag levels in this subtree."""
        nested = [child.depth() for child in self.children() if isinstance(child, TagNode)]
        return 1 + max(nested, default=0)

    def text(self) -> str:
        """Return all text in this subtree, tags removed."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return "".join(
            child.text() if isinstance(child, TagNode) else child for child in self.content
        )
