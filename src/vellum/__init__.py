"""
Vellum: content rendering pipeline for self-hosted publishing

Turns author-written lightweight markup into HTML, and turns untrusted raw
HTML into whitelisted HTML that is safe to serve. No runtime dependencies.

Quick Start:
    >>> from vellum import render_markup, sanitize_html
    >>> render_markup("**bold** and *em*")
    '<p><strong>bold</strong> and <em>em</em></p>'
    >>> sanitize_html('<p onclick="x">hi</p><script>alert(1)</script>')
    '<p>hi</p>'

    >>> # Or use the high-level Vellum class
    >>> from vellum import Vellum
    >>> vellum = Vellum()
    >>> html = vellum("# Hello")

Custom configuration:
    >>> from vellum import RenderConfig, Vellum
    >>> config = RenderConfig.from_dict({"max_depth": 8, "extra_protected_tags": ["aside"]})
    >>> vellum = Vellum(config)

Installation:
    pip install vellum              # Pipeline (zero deps)
    pip install vellum[test]        # + pytest and Hypothesis for the test suite
"""

from vellum.config import RenderConfig, default_config, load_config
from vellum.errors import ConfigError, VellumError
from vellum.guard import DEFAULT_PROTECTED_TAGS, ProtectedSegments, protect
from vellum.markup import MarkupTransformer, PatternRule
from vellum.sanitizer import HtmlSanitizer, TagNode
from vellum.templates import TemplateStore
from vellum.whitelist import WhitelistEntry, WhitelistSchema

__version__ = "0.1.0"


def render_markup(text: str | None, *, config: RenderConfig | None = None) -> str:
    """Render lightweight markup to HTML.

    Args:
        text: Markup source; trimmed before rendering
        config: Render configuration (shared default if None)

    Returns:
        HTML fragment, or ``""`` for empty input

    Example:
        >>> render_markup("- a\\n- b\\n  - c")
        '<ul><li>a</li><li>b</li><ul><li>c</li></ul></ul>'
    """
    return MarkupTransformer(config).transform(text)


def sanitize_html(html: str | None, *, config: RenderConfig | None = None) -> str:
    """Reduce untrusted HTML to its whitelisted structure.

    Args:
        html: Raw HTML fragment
        config: Render configuration (shared default if None)

    Returns:
        Sanitized HTML; never raises on malformed markup
    """
    return HtmlSanitizer(config).sanitize(html)


class Vellum:
    """High-level pipeline holding one immutable configuration.

    Usage:
        >>> vellum = Vellum()
        >>> vellum("*hi*")
        '<p><em>hi</em></p>'
        >>> vellum.sanitize("<b>x</b>")
        ''

    Thread Safety:
        All per-call state lives inside the call. Safe to share one
        instance between threads.

    """

    __slots__ = ("_config", "_sanitizer", "_transformer")

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config if config is not None else default_config()
        self._transformer = MarkupTransformer(self._config)
        self._sanitizer = HtmlSanitizer(self._config)

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, text: str | None) -> str:
        """Render lightweight markup to HTML."""
        return self._transformer.transform(text)

    def sanitize(self, html: str | None) -> str:
        """Reduce untrusted HTML to its whitelisted structure."""
        return self._sanitizer.sanitize(html)

    def __call__(self, text: str | None) -> str:
        return self.render(text)


__all__ = [
    "DEFAULT_PROTECTED_TAGS",
    "ConfigError",
    "HtmlSanitizer",
    "MarkupTransformer",
    "PatternRule",
    "ProtectedSegments",
    "RenderConfig",
    "TagNode",
    "TemplateStore",
    "Vellum",
    "VellumError",
    "WhitelistEntry",
    "WhitelistSchema",
    "__version__",
    "default_config",
    "load_config",
    "protect",
    "render_markup",
    "sanitize_html",
]
