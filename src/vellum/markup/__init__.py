"""Markup-to-HTML transformer."""

from vellum.markup.paragraphs import make_paragraphs
from vellum.markup.rules import DEFAULT_RULES, PatternRule, RuleContext
from vellum.markup.transformer import MarkupTransformer

__all__ = [
    "DEFAULT_RULES",
    "MarkupTransformer",
    "PatternRule",
    "RuleContext",
    "make_paragraphs",
]
