"""Whitelist-driven HTML serializer.

Walks a parsed tree and emits only what the whitelist schema allows:

- a tag absent from the schema is dropped together with its content
- attributes absent from the tag's entry are dropped
- URI attributes are decoded and stripped of script schemes
- everything else is entity-escaped
- self-closing tags never emit content; ``no_nest`` tags emit their
  content flattened to escaped text
"""

from __future__ import annotations

import html as html_lib
import re
from collections.abc import Iterable, Mapping
from urllib.parse import unquote

from vellum.sanitizer.nodes import Child, TagNode
from vellum.sanitizer.parser import SELF_CLOSING_TAGS
from vellum.utils.text import escape_code, unify_spaces
from vellum.whitelist import WhitelistSchema

_TAG = re.compile(r"<.*?>", re.DOTALL)
_URL_NOISE = re.compile(r"[\t\r\n]")
_DANGEROUS_SCHEME = re.compile(r"^\s*(?:javascript|vbscript|data)\s*:", re.IGNORECASE)

# Bound on decode rounds for layered percent or entity encoding
_MAX_DECODE_ROUNDS = 8


def _clean_uri_once(value: str) -> str:
    value = html_lib.unescape(unquote(value))
    value = _TAG.sub("", value)
    value = unify_spaces(_URL_NOISE.sub("", value))
    while True:
        stripped = _DANGEROUS_SCHEME.sub("", value, count=1)
        if stripped == value:
            return value.strip()
        value = stripped


def clean_uri(value: str) -> str:
    """Clean a URI attribute value.

    Each round percent-decodes, entity-decodes, strips embedded tags,
    drops tab and newline characters, unifies spaces and strips leading
    ``javascript:``, ``vbscript:`` and ``data:`` schemes. Rounds repeat
    until the value is stable. Every remaining ``&`` is then escaped, so
    no character reference survives into the attribute.

    Examples:
        >>> clean_uri("javascript:alert(1)")
        'alert(1)'
        >>> clean_uri("/search?q=a&b")
        '/search?q=a&amp;b'
    """
    for _ in range(_MAX_DECODE_ROUNDS):
        cleaned = _clean_uri_once(value)
        if cleaned == value:
            break
        value = cleaned

    return escape_code(value.replace("&", "&amp;"))


class HtmlBuilder:
    """Serializes a parsed tree against a whitelist schema.

    Usage:
        >>> builder = HtmlBuilder(WhitelistSchema.from_dict({"p": []}))
        >>> builder.build([TagNode("p", {"onclick": "x"}, "hi")])
        '<p>hi</p>'
    """

    __slots__ = ("_schema",)

    def __init__(self, schema: WhitelistSchema) -> None:
        self._schema = schema

    @property
    def schema(self) -> WhitelistSchema:
        return self._schema

    def build(self, children: Iterable[Child]) -> str:
        """Serialize a sequence of nodes and text runs."""
        out: list[str] = []
        for child in children:
            if isinstance(child, TagNode):
                out.append(self.build_node(child))
            else:
                out.append(escape_code(child, trim=False))
        return "".join(out)

    def build_node(self, node: TagNode) -> str:
        """Serialize one node, or return ``""`` if its tag is not allowed."""
        tag = node.tag_name.lower()
        if not self._schema.allows_tag(tag):
            return ""

        attributes = self.build_attributes(tag, node.attributes)

        if tag in SELF_CLOSING_TAGS or self._schema.is_self_closing(tag):
            return f"<{tag}{attributes} />"

        if node.content is None:
            return f"<{tag}{attributes}></{tag}>"

        if isinstance(node.content, tuple):
            if self._schema.is_no_nest(tag):
                content = escape_code(flatten(node.content))
            else:
                content = self.build(node.content)
        else:
            content = escape_code(node.content, trim=False)

        return f"<{tag}{attributes}>{content}</{tag}>"

    def build_attributes(self, tag: str, attributes: Mapping[str, str]) -> str:
        """Serialize the allowed attributes of a tag, in source order."""
        out: list[str] = []
        for name, value in attributes.items():
            name = name.lower()
            if not self._schema.allows_attribute(tag, name):
                continue
            out.append(f' {name}="{self.filter_attribute(tag, name, value)}"')
        return "".join(out)

    def filter_attribute(self, tag: str, name: str, value: str) -> str:
        """Clean one allowed attribute value."""
        if not value:
            return ""
        if self._schema.is_uri_attribute(tag, name):
            return clean_uri(value)
        return escape_code(value)


def flatten(children: Iterable[Child]) -> str:
    """Collapse nodes back to raw markup text, without any filtering."""
    out: list[str] = []
    for child in children:
        if not isinstance(child, TagNode):
            out.append(child)
            continue
        attributes = "".join(f' {name}="{value}"' for name, value in child.attributes.items())
        if child.content is None:
            out.append(f"<{child.tag_name}{attributes} />")
        elif isinstance(child.content, tuple):
            out.append(f"<{child.tag_name}{attributes}>{flatten(child.content)}</{child.tag_name}>")
        else:
            out.append(f"<{child.tag_name}{attributes}>{child.content}</{child.tag_name}>")
    return "".join(out)


__all__ = [
    "HtmlBuilder",
    "clean_uri",
    "flatten",
]
