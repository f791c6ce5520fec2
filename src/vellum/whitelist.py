"""Whitelist schema for the HTML sanitizer.

The schema is the single source of truth for which tags and attributes
survive sanitization. Anything absent from it is dropped.

Schema source (JSON):
    {
        "a": {"attributes": ["href", "title"], "uri_attr": ["href"]},
        "br": {"attributes": [], "self_closing": 1, "no_nest": 1},
        "code": {"attributes": ["class"], "no_nest": 1}
    }

A bare list of attribute names is accepted as shorthand for
``{"attributes": [...]}``.

Thread Safety:
WhitelistSchema and WhitelistEntry are immutable after creation. Safe to
share across threads and renders.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Any

from vellum.errors import ConfigError


@dataclass(frozen=True, slots=True)
class WhitelistEntry:
    """Permissions for a single tag.

    Attributes:
        allowed_attributes: Attribute names kept on this tag
        self_closing: Always emit as ``<tag />`` without content
        no_nest: Content is opaque text, never parsed as markup
        uri_attributes: Allowed attributes that carry URIs

    """

    allowed_attributes: frozenset[str] = frozenset()
    self_closing: bool = False
    no_nest: bool = False
    uri_attributes: frozenset[str] = frozenset()


def _names(value: Any, tag: str, key: str, source: str | None) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(f"'{tag}.{key}' must be a list of names", source)
    for name in value:
        if not isinstance(name, str):
            raise ConfigError(f"'{tag}.{key}' must contain only strings", source)
    return frozenset(name.strip().lower() for name in value if name.strip())


def _entry_from_raw(tag: str, raw: Any, source: str | None) -> WhitelistEntry:
    if isinstance(raw, WhitelistEntry):
        return raw
    if isinstance(raw, (list, tuple)):
        raw = {"attributes": raw}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"entry for '{tag}' must be an object or a list", source)

    allowed = _names(raw.get("attributes"), tag, "attributes", source)
    uri = _names(raw.get("uri_attr", raw.get("uri_attributes")), tag, "uri_attr", source)
    return WhitelistEntry(
        allowed_attributes=allowed,
        self_closing=bool(raw.get("self_closing", False)),
        no_nest=bool(raw.get("no_nest", False)),
        # URI handling only matters for attributes that are allowed at all
        uri_attributes=uri & allowed,
    )


class WhitelistSchema(Mapping[str, WhitelistEntry]):
    """Immutable mapping of tag name to WhitelistEntry.

    Usage:
        >>> schema = WhitelistSchema.from_dict({"p": {"attributes": ["class"]}})
        >>> schema.allows_attribute("p", "class")
        True
        >>> schema.allows_tag("script")
        False
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, WhitelistEntry] | None = None) -> None:
        self._entries: Mapping[str, WhitelistEntry] = MappingProxyType(
            {tag.lower(): entry for tag, entry in (entries or {}).items()}
        )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], source: str | None = None) -> WhitelistSchema:
        """Build a schema from a plain mapping in the JSON shape.

        Raises:
            ConfigError: If the mapping does not describe a schema
        """
        if not isinstance(raw, Mapping):
            raise ConfigError("whitelist must be an object keyed by tag name", source)
        entries: dict[str, WhitelistEntry] = {}
        for tag, value in raw.items():
            if not isinstance(tag, str) or not tag.strip():
                raise ConfigError(f"invalid tag name {tag!r}", source)
            entries[tag.strip().lower()] = _entry_from_raw(tag, value, source)
        return cls(entries)

    @classmethod
    def from_json(cls, text: str, source: str | None = None) -> WhitelistSchema:
        """Build a schema from JSON text.

        Raises:
            ConfigError: If the text is not valid JSON or not a schema
        """
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid whitelist JSON: {e}", source) from e
        return cls.from_dict(raw, source)

    @classmethod
    def from_file(cls, path: str | Path) -> WhitelistSchema:
        """Build a schema from a JSON file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read whitelist: {e}", str(path)) from e
        return cls.from_json(text, str(path))

    @classmethod
    def default(cls) -> WhitelistSchema:
        """Return the packaged whitelist (parsed once, shared)."""
        return _default_schema()

    def allows_tag(self, tag: str) -> bool:
        return tag.lower() in self._entries

    def allows_attribute(self, tag: str, attribute: str) -> bool:
        entry = self._entries.get(tag.lower())
        return entry is not None and attribute.lower() in entry.allowed_attributes

    def is_uri_attribute(self, tag: str, attribute: str) -> bool:
        entry = self._entries.get(tag.lower())
        return entry is not None and attribute.lower() in entry.uri_attributes

    def is_no_nest(self, tag: str) -> bool:
        entry = self._entries.get(tag.lower())
        return entry is not None and entry.no_nest

    def is_self_closing(self, tag: str) -> bool:
        entry = self._entries.get(tag.lower())
        return entry is not None and entry.self_closing

    def __getitem__(self, tag: str) -> WhitelistEntry:
        if not isinstance(tag, str):
            raise KeyError(tag)
        return self._entries[tag.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"WhitelistSchema(tags={sorted(self._entries)!r})"


@cache
def _default_schema() -> WhitelistSchema:
    source = files("vellum") / "data" / "whitelist.json"
    return WhitelistSchema.from_json(source.read_text(encoding="utf-8"), "whitelist.json")


__all__ = [
    "WhitelistEntry",
    "WhitelistSchema",
]
