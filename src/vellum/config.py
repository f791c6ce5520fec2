"""Immutable render configuration for Vellum.

A RenderConfig is built once at startup and passed explicitly to every
pipeline call. It carries the read-only tables the pipeline shares: the
whitelist schema and the template store.

Usage:
    # Defaults (packaged whitelist and templates)
    config = RenderConfig()

    # From a plain mapping, e.g. parsed from a settings file
    config = RenderConfig.from_dict({
        "max_depth": 12,
        "extra_protected_tags": ["aside"],
        "templates": {"audio_embed": "<audio src=\\"{src}\\"></audio>"},
    })

    # From a JSON file
    config = load_config("vellum.json")

Thread Safety:
RenderConfig is a frozen dataclass holding only immutable tables.
Share one instance across threads without locking.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cache
from pathlib import Path
from typing import Any

from vellum.errors import ConfigError
from vellum.guard import DEFAULT_PROTECTED_TAGS, merge_tags
from vellum.templates import TemplateStore
from vellum.whitelist import WhitelistSchema

DEFAULT_MAX_DEPTH = 20

# Parsing and building recurse once per tag level; stay well inside the
# interpreter recursion limit
MAX_DEPTH_LIMIT = 200


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable pipeline configuration.

    Attributes:
        max_depth: Maximum tag-tree depth the sanitizer will parse
            (0 to MAX_DEPTH_LIMIT)
        extra_protected_tags: Tags hidden from markup passes in addition to
            the default protected set
        whitelist: Tag/attribute whitelist for the sanitizer
        templates: Named templates for embeds and figures

    """

    max_depth: int = DEFAULT_MAX_DEPTH
    extra_protected_tags: tuple[str, ...] = ()
    whitelist: WhitelistSchema = field(default_factory=WhitelistSchema.default)
    templates: TemplateStore = field(default_factory=TemplateStore.default)

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigError("max_depth must be an integer", "max_depth")
        if self.max_depth < 0:
            raise ConfigError("max_depth must not be negative", "max_depth")
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ConfigError(f"max_depth must not exceed {MAX_DEPTH_LIMIT}", "max_depth")

    @property
    def protected_tags(self) -> tuple[str, ...]:
        """Default protected tags merged with the configured extras."""
        return merge_tags(DEFAULT_PROTECTED_TAGS, self.extra_protected_tags)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> RenderConfig:
        """Create RenderConfig from a dictionary.

        Recognized keys (unknown keys are silently ignored):
            max_depth: int
            extra_protected_tags: list of tag names
            whitelist: schema mapping in the JSON shape
            whitelist_file: path to a JSON schema (used when ``whitelist``
                is absent)
            templates: name -> template text, overriding packaged defaults
            templates_file: path to a template file whose blocks override
                packaged defaults

        Raises:
            ConfigError: If a recognized key holds an invalid value
        """
        kwargs: dict[str, Any] = {}

        if "max_depth" in config_dict:
            kwargs["max_depth"] = config_dict["max_depth"]

        extra = config_dict.get("extra_protected_tags")
        if extra is not None:
            if isinstance(extra, str) or not all(isinstance(t, str) for t in extra):
                raise ConfigError("must be a list of tag names", "extra_protected_tags")
            kwargs["extra_protected_tags"] = tuple(extra)

        if config_dict.get("whitelist") is not None:
            kwargs["whitelist"] = WhitelistSchema.from_dict(config_dict["whitelist"], "whitelist")
        elif config_dict.get("whitelist_file") is not None:
            kwargs["whitelist"] = WhitelistSchema.from_file(config_dict["whitelist_file"])

        templates = TemplateStore.default()
        if config_dict.get("templates_file") is not None:
            loaded = TemplateStore.from_file(config_dict["templates_file"])
            templates = templates.with_overrides({name: loaded.get(name) for name in loaded.names()})
        overrides = config_dict.get("templates")
        if overrides is not None:
            if not isinstance(overrides, Mapping):
                raise ConfigError("must map template names to text", "templates")
            templates = templates.with_overrides(overrides)
        kwargs["templates"] = templates

        return cls(**kwargs)


def load_config(path: str | Path) -> RenderConfig:
    """Load a RenderConfig from a JSON file.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or invalid
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config: {e}", str(path)) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid config JSON: {e}", str(path)) from e
    if not isinstance(raw, Mapping):
        raise ConfigError("config must be a JSON object", str(path))
    return RenderConfig.from_dict(raw)


@cache
def default_config() -> RenderConfig:
    """Return the shared default configuration."""
    return RenderConfig()


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "RenderConfig",
    "default_config",
    "load_config",
]
