"""Ordered pattern rules for the markup transformer.

Each PatternRule pairs a compiled pattern with a handler. Rules run once
each over the whole document, in the order of DEFAULT_RULES:

1. links and images
2. emphasis, delete and quote
3. headings
4. fenced and inline code
5. inline template spans
6. ASCII tables
7. horizontal rules
8. uploaded media, then references (figures, footnotes, hosted media)
9. wiki links

Order matters: output of an earlier rule is literal HTML that a later
rule may still match. Rules marked ``seal`` hide their output behind a
placeholder token until all rules have run, so code samples and embeds
are never rewritten.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from vellum.blocks.table import TABLE_PATTERN, format_table
from vellum.embeds.hosted import is_platform, resolve_hosted
from vellum.embeds.uploads import upload_embed
from vellum.guard import ProtectedSegments
from vellum.templates import TemplateStore
from vellum.utils.text import escape_attribute, escape_code


@dataclass(slots=True)
class RuleContext:
    """Per-render state handed to rule handlers.

    Attributes:
        templates: Template store for embeds and figures
        segments: Placeholder store for sealed rule output

    """

    templates: TemplateStore
    segments: ProtectedSegments


Handler = Callable[[re.Match[str], RuleContext], str]


def _restored(match: re.Match[str], group: str, context: RuleContext) -> str:
    """Return a captured group with protected regions put back."""
    return context.segments.restore(match.group(group) or "")


@dataclass(frozen=True, slots=True)
class PatternRule:
    """A compiled pattern and the handler that renders each match.

    Attributes:
        name: Rule name, for logging and tests
        pattern: Compiled pattern, usually with named groups
        handler: Turns a match into replacement HTML
        seal: Hide the replacement from later rules

    """

    name: str
    pattern: re.Pattern[str]
    handler: Handler
    seal: bool = False

    def apply(self, text: str, context: RuleContext) -> str:
        """Replace every match of this rule in text."""

        def replace(match: re.Match[str]) -> str:
            html = self.handler(match, context)
            if self.seal and html:
                return context.segments.seal(html)
            return html

        return self.pattern.sub(replace, text)


# =============================================================================
# Links and images
# =============================================================================

# Not after a word character or quote (reference captions), never audio:/video:
LINK_PATTERN = re.compile(
    r'(?<![\w"])(?P<image>!)?\[(?!\s*(?:audio|video)\s*:)(?P<text>[^\[\]\n]+)\]'
    r'\((?P<dest>[^\s)]*)(?:\s+"(?P<title>[^"\n]*)")?\s*\)',
    re.IGNORECASE,
)


def render_link(match: re.Match[str], context: RuleContext) -> str:
    dest = escape_attribute(_restored(match, "dest", context))
    title = _restored(match, "title", context)
    title_attr = f' title="{escape_attribute(title)}"' if title else ""

    if match.group("image"):
        alt = escape_attribute(_restored(match, "text", context))
        return f'<img src="{dest}" alt="{alt}"{title_attr}>'
    return f'<a href="{dest}"{title_attr}>{match.group("text")}</a>'


# =============================================================================
# Emphasis
# =============================================================================

EMPHASIS_PATTERN = re.compile(
    r'(?P<delim>\*+|~~)(?=\S)(?P<text>[^\n]*?\S)(?P=delim)'
    r'|:"(?P<quote>[^\n]+?):"'
)


def render_emphasis(match: re.Match[str], context: RuleContext) -> str:
    """Pick the tag from the delimiter.

    ``~~`` deletes, ``:"...:"`` quotes; for asterisks, a run of 2 is strong, 3
    is strong+em, anything else is em.
    """
    quote = match.group("quote")
    if quote is not None:
        return f"<q>{quote}</q>"

    delim = match.group("delim")
    text = match.group("text")
    if delim == "~~":
        return f"<del>{text}</del>"
    if len(delim) == 2:
        return f"<strong>{text}</strong>"
    if len(delim) == 3:
        return f"<strong><em>{text}</em></strong>"
    return f"<em>{text}</em>"


# =============================================================================
# Headings
# =============================================================================

HEADING_PATTERN = re.compile(
    r"^(?P<delim>[#=]{1,6})[ \t]+(?P<text>.+?)[ \t]*[#=]*[ \t]*$",
    re.MULTILINE,
)


def render_heading(match: re.Match[str], context: RuleContext) -> str:
    level = len(match.group("delim"))
    return f"<h{level}>{match.group('text').strip()}</h{level}>"


# =============================================================================
# Code
# =============================================================================

# Fenced blocks are tried before inline spans at every position
CODE_PATTERN = re.compile(
    r"```(?P<lang>[\w+#.-]*)[ \t]*\n(?P<fenced>.*?)\n?[ \t]*```"
    r"|`(?P<inline>[^`\n]+)`",
    re.DOTALL,
)


def render_code(match: re.Match[str], context: RuleContext) -> str:
    # Block tags inside code were hidden before the rules ran
    if match.group("inline") is not None:
        return f"<code>{escape_code(_restored(match, 'inline', context))}</code>"

    code = escape_code(_restored(match, "fenced", context).strip("\n"), trim=False)
    lang = match.group("lang")
    if lang:
        return f'<pre><code class="language-{escape_attribute(lang)}">{code}</code></pre>'
    return f"<pre><code>{code}</code></pre>"


# =============================================================================
# Template spans
# =============================================================================

TEMPLATE_SPAN_PATTERN = re.compile(r"(?<!\\)\{\{(?P<body>.*?)\}\}")


def render_template_span(match: re.Match[str], context: RuleContext) -> str:
    return f'<span class="template">{match.group("body").strip()}</span>'


# =============================================================================
# Tables and horizontal rules
# =============================================================================


def render_table(match: re.Match[str], context: RuleContext) -> str:
    return format_table(match.group(0))


HR_PATTERN = re.compile(r"^[ \t]*[-_+]{4,}[ \t]*$", re.MULTILINE)


def render_hr(match: re.Match[str], context: RuleContext) -> str:
    return "<hr/>"


# =============================================================================
# Uploaded media and references
# =============================================================================

MEDIA_PATTERN = re.compile(
    r'\[\s*(?P<kind>audio|video)\s*:\s*(?P<title>[^\]]*)\]'
    r'\((?P<source>[^"\s)]+)'
    r'(?:\s+"(?P<preview>[^"]*)")?'
    r'(?:\s+"(?P<captions>[^"]*)")?\s*\)',
    re.IGNORECASE,
)


def render_media(match: re.Match[str], context: RuleContext) -> str:
    return upload_embed(
        match.group("kind"),
        _restored(match, "source", context),
        context.templates,
        title=_restored(match, "title", context),
        preview=_restored(match, "preview", context),
        captions=_restored(match, "captions", context),
    )


REFERENCE_PATTERN = re.compile(
    r"\[(?P<kind>ref|footnote|figure|youtube|vimeo|peertube|archive|lbry|odysee|utreon|playeur)"
    r'(?=[\s"\[(\]])'
    r'(?:"(?P<title>[^"]*)")?'
    r"(?:\[(?P<caption>[^\]]*)\])?"
    r"\s*(?:\((?P<wrapped>[^)]*)\)|(?P<source>[^\]]*?))\s*\]",
    re.IGNORECASE,
)


def render_reference(match: re.Match[str], context: RuleContext) -> str:
    """Dispatch a bracketed reference by kind.

    Footnotes are not rendered and produce no output.
    """
    kind = match.group("kind").lower()
    source = context.segments.restore(match.group("wrapped") or match.group("source") or "").strip()

    if kind in ("ref", "footnote"):
        return ""
    if kind == "figure":
        return upload_embed(
            "figure",
            source,
            context.templates,
            title=_restored(match, "title", context),
            caption=match.group("caption") or "",
        )
    if is_platform(kind):
        return resolve_hosted(kind, source, context.templates)
    return match.group(0)


# =============================================================================
# Wiki links
# =============================================================================

WIKI_LINK_PATTERN = re.compile(
    r"(?<!\\)\[\s*(?P<target>[^\]\|\s][^\]\|\n]*?)\s*(?:\|\s*(?P<label>[^\]\n]+?))?\s*\]"
)


def render_wiki_link(match: re.Match[str], context: RuleContext) -> str:
    target = match.group("target")
    label = match.group("label") or target
    return f'<a href="{escape_attribute(context.segments.restore(target))}">{label}</a>'


DEFAULT_RULES: tuple[PatternRule, ...] = (
    PatternRule("link", LINK_PATTERN, render_link),
    PatternRule("emphasis", EMPHASIS_PATTERN, render_emphasis),
    PatternRule("heading", HEADING_PATTERN, render_heading),
    PatternRule("code", CODE_PATTERN, render_code, seal=True),
    PatternRule("template_span", TEMPLATE_SPAN_PATTERN, render_template_span),
    PatternRule("table", TABLE_PATTERN, render_table),
    PatternRule("hr", HR_PATTERN, render_hr),
    PatternRule("media", MEDIA_PATTERN, render_media, seal=True),
    PatternRule("reference", REFERENCE_PATTERN, render_reference, seal=True),
    PatternRule("wiki_link", WIKI_LINK_PATTERN, render_wiki_link),
)


__all__ = [
    "DEFAULT_RULES",
    "Handler",
    "PatternRule",
    "RuleContext",
]
