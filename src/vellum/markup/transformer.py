"""Markup transformer: rule passes, list formatting, paragraphs.

Pipeline for one document:

1. Normalize newlines and trim. Empty input renders as ``""``.
2. Protect block tags already present in the input.
3. Apply each PatternRule once, in order.
4. Restore protected and sealed regions.
5. Format indentation-based lists.
6. Wrap paragraphs.

Example:
    >>> MarkupTransformer().transform("**bold** and *em*")
    '<p><strong>bold</strong> and <em>em</em></p>'

Thread Safety:
A transformer holds only its immutable config and rule tuple. All
per-document state (placeholder stores, list stacks) is created inside
transform(), so one instance can serve many threads.
"""

from __future__ import annotations

from collections.abc import Sequence

from vellum.blocks.lists import format_lists
from vellum.config import RenderConfig, default_config
from vellum.guard import ProtectedSegments
from vellum.markup.paragraphs import make_paragraphs
from vellum.markup.rules import DEFAULT_RULES, PatternRule, RuleContext
from vellum.utils.logger import get_logger

logger = get_logger(__name__)


class MarkupTransformer:
    """Renders lightweight markup to HTML.

    Usage:
        >>> transformer = MarkupTransformer()
        >>> transformer.transform("# Title")
        '<h1>Title</h1>'
    """

    __slots__ = ("_config", "_rules")

    def __init__(
        self,
        config: RenderConfig | None = None,
        rules: Sequence[PatternRule] | None = None,
    ) -> None:
        """Initialize transformer.

        Args:
            config: Render configuration (shared default if None)
            rules: Ordered rules replacing DEFAULT_RULES
        """
        self._config = config if config is not None else default_config()
        self._rules: tuple[PatternRule, ...] = (
            tuple(rules) if rules is not None else DEFAULT_RULES
        )

    @property
    def config(self) -> RenderConfig:
        return self._config

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def apply_rules(self, text: str, context: RuleContext) -> str:
        """Run every rule once over text, in order."""
        for rule in self._rules:
            text = rule.apply(text, context)
        return text

    def transform(self, text: str | None) -> str:
        """Render a complete document.

        Args:
            text: Markup source

        Returns:
            HTML fragment; ``""`` for empty or whitespace-only input
        """
        if not text:
            return ""
        text = text.replace("\r\n", "\n").replace("\r", "\n").strip()
        if not text:
            return ""

        tags = self._config.protected_tags
        segments = ProtectedSegments()
        hidden = segments.protect(text, tags)
        context = RuleContext(templates=self._config.templates, segments=segments)

        html = segments.restore(self.apply_rules(hidden, context))
        logger.debug("Applied %d rules, %d regions restored", len(self._rules), len(segments))

        html = format_lists(html, tags)
        return make_paragraphs(html, tags)

    def __call__(self, text: str | None) -> str:
        return self.transform(text)
