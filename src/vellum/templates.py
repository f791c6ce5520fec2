"""Named HTML templates with ``{placeholder}`` substitution.

Templates are loaded once into an immutable TemplateStore and shared by
every render. The packaged defaults live in ``vellum/data/templates.tpl``.

Template file format:
    Free prose lines are ignored. A template is a block that starts with
    ``tpl_<name>:`` on its own line and ends with ``end_tpl``.

Example:
    >>> store = TemplateStore({"hello": "<b>{who}</b>{missing}"})
    >>> store.render("hello", {"who": "world"})
    '<b>world</b>'

Thread Safety:
TemplateStore is immutable after creation. Safe to share.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType

from vellum.errors import ConfigError
from vellum.utils.logger import excerpt, get_logger

logger = get_logger(__name__)

_BLOCK_PATTERN = re.compile(
    r"^[ \t]*tpl_(?P<name>\w+):[ \t]*\r?\n(?P<body>.*?)\r?\n[ \t]*end_tpl[ \t]*\r?$",
    re.MULTILINE | re.DOTALL,
)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def parse_template_text(text: str) -> dict[str, str]:
    """Extract ``tpl_<name>:`` ... ``end_tpl`` blocks from template source.

    Names are lower-cased; later blocks with the same name win.
    """
    return {
        match.group("name").lower(): match.group("body").strip()
        for match in _BLOCK_PATTERN.finditer(text)
    }


def render_text(template: str, data: Mapping[str, object], clean: bool = True) -> str:
    """Substitute ``{key}`` placeholders in a single pass.

    Substituted values are never scanned again, so a value that itself
    contains ``{braces}`` is inserted verbatim.

    Args:
        template: Template text
        data: Placeholder values (None counts as unset)
        clean: Remove placeholders that have no value

    Returns:
        Rendered text
    """

    def substitute(match: re.Match[str]) -> str:
        value = data.get(match.group(1))
        if value is None:
            return "" if clean else match.group(0)
        return str(value)

    return _PLACEHOLDER.sub(substitute, template)


class TemplateStore:
    """Immutable table of named templates.

    Usage:
        >>> store = TemplateStore.default()
        >>> "<audio" in store.get("audio_embed")
        True
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        """Initialize store from a name -> template mapping.

        Raises:
            ConfigError: If a name or template is not a string
        """
        table: dict[str, str] = {}
        for name, body in (templates or {}).items():
            if not isinstance(name, str) or not isinstance(body, str):
                raise ConfigError(f"template {name!r} must map a name to text", "templates")
            table[name.lower()] = body
        self._templates: Mapping[str, str] = MappingProxyType(table)

    @classmethod
    def from_text(cls, text: str) -> TemplateStore:
        """Build a store from template file source."""
        return cls(parse_template_text(text))

    @classmethod
    def from_file(cls, path: str | Path) -> TemplateStore:
        """Build a store from a template file.

        Raises:
            ConfigError: If the file cannot be read
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read templates: {e}", str(path)) from e
        return cls.from_text(text)

    @classmethod
    def default(cls) -> TemplateStore:
        """Return the packaged template table (parsed once, shared)."""
        return _default_store()

    def with_overrides(self, overrides: Mapping[str, str]) -> TemplateStore:
        """Return a new store with some templates replaced or added."""
        merged = dict(self._templates)
        merged.update(overrides)
        return TemplateStore(merged)

    def get(self, name: str) -> str:
        """Return template text by name, or an empty string if unknown."""
        template = self._templates.get(name.lower())
        if template is None:
            logger.debug("Unknown template %s", excerpt(name))
            return ""
        return template

    def render(self, name: str, data: Mapping[str, object]) -> str:
        """Render a named template, removing unfilled placeholders."""
        return render_text(self.get(name), data)

    def names(self) -> frozenset[str]:
        """Return all template names."""
        return frozenset(self._templates)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._templates

    def __len__(self) -> int:
        return len(self._templates)


@cache
def _default_store() -> TemplateStore:
    source = (files("vellum") / "data" / "templates.tpl").read_text(encoding="utf-8")
    return TemplateStore.from_text(source)


__all__ = [
    "TemplateStore",
    "parse_template_text",
    "render_text",
]
