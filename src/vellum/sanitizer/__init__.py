"""Whitelist HTML sanitizer.

Flow for one fragment:

1. Lift ``<code>`` regions out of the document.
2. Strip doctype, comments, CDATA and office-suite markup.
3. Put the code regions back.
4. Parse into a depth-capped tag tree.
5. Serialize only what the whitelist allows.

Example:
    >>> from vellum.whitelist import WhitelistSchema
    >>> from vellum.config import RenderConfig
    >>> config = RenderConfig(whitelist=WhitelistSchema.from_dict({"p": []}))
    >>> HtmlSanitizer(config).sanitize('<script>alert(1)</script><p onclick="x">hi</p>')
    '<p>hi</p>'

The sanitizer never raises on content; malformed markup degrades to
escaped text or empty output.
"""

from __future__ import annotations

from vellum.config import RenderConfig, default_config
from vellum.sanitizer.builder import HtmlBuilder, clean_uri, flatten
from vellum.sanitizer.cleanup import (
    ProtectedCode,
    clean_html,
    clean_segments,
    protect_code,
    restore_code,
)
from vellum.sanitizer.nodes import Child, TagNode
from vellum.sanitizer.parser import SELF_CLOSING_TAGS, HtmlParser, parse_attributes


class HtmlSanitizer:
    """Cleans untrusted HTML against a whitelist schema.

    Thread Safety:
        Holds only immutable configuration. Safe to share across threads.
    """

    __slots__ = ("_builder", "_config", "_parser")

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config if config is not None else default_config()
        self._parser = HtmlParser(self._config.whitelist, self._config.max_depth)
        self._builder = HtmlBuilder(self._config.whitelist)

    @property
    def config(self) -> RenderConfig:
        return self._config

    def prepare(self, html: str) -> str:
        """Strip document cruft while keeping code regions intact."""
        return restore_code(clean_segments(protect_code(html)))

    def parse(self, html: str) -> tuple[Child, ...]:
        """Clean and parse html into a tag tree."""
        return self._parser.parse(self.prepare(html))

    def sanitize(self, html: str | None) -> str:
        """Return the whitelisted rendition of html."""
        if not html:
            return ""
        return self._builder.build(self.parse(html))

    def __call__(self, html: str | None) -> str:
        return self.sanitize(html)


__all__ = [
    "SELF_CLOSING_TAGS",
    "Child",
    "HtmlBuilder",
    "HtmlParser",
    "HtmlSanitizer",
    "ProtectedCode",
    "TagNode",
    "clean_html",
    "clean_segments",
    "clean_uri",
    "flatten",
    "parse_attributes",
    "protect_code",
    "restore_code",
]
