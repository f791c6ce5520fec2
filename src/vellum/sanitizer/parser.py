"""Depth-capped tag tree parser.

Scans HTML left to right for open tags. Self-closing tags become leaves;
other tags take everything up to their matching close tag (found with
nesting awareness for the same tag name) as content. Content is parsed
recursively unless the whitelist marks the tag ``no_nest``, in which case
it is escaped and kept as opaque text.

This is an approximation of an HTML parser, not a conforming one. Its
contract is:
- an open tag without a matching close tag is literal text
- text between tags is preserved as text runs
- recursion stops at ``max_depth``; deeper branches get empty content

Example:
    >>> parser = HtmlParser(WhitelistSchema.default())
    >>> node, = parser.parse('<p class="x">hi</p>')
    >>> node.tag_name, dict(node.attributes), node.content
    ('p', {'class': 'x'}, 'hi')
"""

from __future__ import annotations

import re
from functools import lru_cache

from vellum.config import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT
from vellum.sanitizer.nodes import Child, TagNode
from vellum.utils.logger import get_logger
from vellum.utils.text import escape_code
from vellum.whitelist import WhitelistSchema

logger = get_logger(__name__)

SELF_CLOSING_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

_ATTRIBUTE_SOURCE = r"""[\w:-]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'=<>`]+))?"""

_OPEN_TAG = re.compile(
    rf"<(?P<name>[A-Za-z][\w-]*)(?P<attributes>(?:\s+{_ATTRIBUTE_SOURCE})*)\s*(?P<slash>/?)>"
)

_ATTRIBUTE = re.compile(
    r"""(?P<name>[\w:-]+)(?:\s*=\s*(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)'|(?P<bare>[^\s"'=<>`]+)))?"""
)


@lru_cache(maxsize=64)
def _boundary_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"<(?P<close>/?){re.escape(name)}(?=[\s/>])[^>]*>", re.IGNORECASE)


def parse_attributes(raw: str) -> dict[str, str]:
    """Parse an attribute string into a name -> value mapping.

    Names are lower-cased; the first occurrence of a name wins. Bare
    attributes get an empty value.

    Examples:
        >>> parse_attributes(' HREF="/a" title=\\'t\\' hidden')
        {'href': '/a', 'title': 't', 'hidden': ''}
    """
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(raw):
        name = match.group("name").lower()
        if name in attributes:
            continue
        value = match.group("double")
        if value is None:
            value = match.group("single")
        if value is None:
            value = match.group("bare")
        attributes[name] = value or ""
    return attributes


def find_close(html: str, name: str, start: int) -> re.Match[str] | None:
    """Find the close tag matching an open tag that ends at ``start``.

    Nested tags of the same name are counted, so the outer close tag is
    returned rather than the first one.
    """
    depth = 1
    for match in _boundary_pattern(name).finditer(html, start):
        if match.group("close"):
            depth -= 1
            if depth == 0:
                return match
        elif not match.group(0).endswith("/>"):
            depth += 1
    return None


class HtmlParser:
    """Parses HTML text into a tuple of TagNode and text children.

    Thread Safety:
        Holds only the immutable schema and depth limit. Safe to share.
    """

    __slots__ = ("_max_depth", "_schema")

    def __init__(self, schema: WhitelistSchema, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._schema = schema
        self._max_depth = min(max_depth, MAX_DEPTH_LIMIT)

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def parse(self, html: str) -> tuple[Child, ...]:
        """Parse a fragment into top-level children."""
        if not html:
            return ()
        if self._max_depth <= 0:
            logger.debug("Depth limit 0, document dropped")
            return ()
        return self._parse(html, self._max_depth)

    def _parse(self, html: str, remaining: int) -> tuple[Child, ...]:
        children: list[Child] = []
        pos = 0
        text_start = 0

        while True:
            lt = html.find("<", pos)
            if lt == -1:
                break

            match = _OPEN_TAG.match(html, lt)
            if match is None:
                pos = lt + 1
                continue

            name = match.group("name").lower()
            attributes = parse_attributes(match.group("attributes"))

            if name in SELF_CLOSING_TAGS or match.group("slash"):
                node = TagNode(name, attributes, None)
                end = match.end()
            else:
                close = find_close(html, name, match.end())
                if close is None:
                    # Unterminated: leave it as literal text
                    pos = lt + 1
                    continue
                raw = html[match.end() : close.start()]
                node = TagNode(name, attributes, self._content(name, raw, remaining))
                end = close.end()

            if lt > text_start:
                children.append(html[text_start:lt])
            children.append(node)
            pos = text_start = end

        if text_start < len(html):
            children.append(html[text_start:])

        return tuple(children)

    def _content(self, name: str, raw: str, remaining: int) -> str | tuple[Child, ...]:
        if self._schema.is_no_nest(name):
            return escape_code(raw)
        if "<" not in raw:
            return raw
        if remaining <= 1:
            logger.debug("Depth limit %d reached inside <%s>", self._max_depth, name)
            return ()
        return self._parse(raw, remaining - 1)


__all__ = [
    "SELF_CLOSING_TAGS",
    "HtmlParser",
    "find_close",
    "parse_attributes",
]
