"""Third-party hosted media resolution.

Each platform owns an ordered tuple of patterns: full URL forms first,
short forms next, a bare-ID fallback last. The first pattern that matches
the raw URL supplies the template data. When none match, the reference is
emitted as inert bracket text ``[platform url]``; resolution never fails.

Supported platforms:
    youtube    youtube.com/watch?v=ID&t=Ns, youtu.be/ID?t=N, bare ID
    vimeo      vimeo.com/ID, player.vimeo.com/video/ID, bare numeric ID
    peertube   any-host/videos/watch/ID, any-host/w/ID
    archive    archive.org/details/ID, bare ID
    lbry       host/$/download/slug/ID, odysee.com/@channel/slug:ID,
               lbry://@channel/slug#ID (alias: odysee)
    playeur    playeur.com/v/ID?t=N, bare ID (alias: utreon)
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from vellum.templates import TemplateStore
from vellum.utils.logger import excerpt, get_logger
from vellum.utils.text import escape_attribute

logger = get_logger(__name__)

_SCHEME = r"(?:https?://)?(?:www\.)?"


@dataclass(frozen=True, slots=True)
class Platform:
    """A hosting platform and how to recognize its URLs.

    Attributes:
        name: Canonical platform name, used in fallback text
        template: Template rendered on a match
        patterns: Patterns tried in order against the raw URL
        defaults: Template values used when a pattern leaves them unset

    """

    name: str
    template: str
    patterns: tuple[re.Pattern[str], ...]
    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def match(self, url: str) -> dict[str, str] | None:
        """Return template data from the first matching pattern, or None."""
        for pattern in self.patterns:
            found = pattern.match(url)
            if found is None:
                continue
            data = dict(self.defaults)
            data.update({k: v for k, v in found.groupdict().items() if v})
            return data
        return None


def _patterns(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


PLATFORMS: Mapping[str, Platform] = MappingProxyType(
    {
        "youtube": Platform(
            name="youtube",
            template="youtube",
            patterns=_patterns(
                rf"^{_SCHEME}(?:m\.)?youtube\.com/watch\?v=(?P<src>[\w-]+)(?:&t=(?P<time>\d+)s?)?",
                rf"^{_SCHEME}youtu\.be/(?P<src>[\w-]+)(?:\?t=(?P<time>\d+))?",
                r"^(?P<src>[\w-]{6,})$",
            ),
            defaults=MappingProxyType({"time": "0"}),
        ),
        "vimeo": Platform(
            name="vimeo",
            template="vimeo",
            patterns=_patterns(
                rf"^{_SCHEME}vimeo\.com/(?P<src>\d+)",
                r"^(?:https?://)?player\.vimeo\.com/video/(?P<src>\d+)",
                r"^(?P<src>\d+)$",
            ),
        ),
        "peertube": Platform(
            name="peertube",
            template="peertube",
            patterns=_patterns(
                r"^(?:https?://)?(?P<src_host>[^/\s]+)/(?:videos/watch|w)/(?P<src>[\w-]+)",
            ),
        ),
        "archive": Platform(
            name="archive",
            template="archive",
            patterns=_patterns(
                rf"^{_SCHEME}archive\.org/details/(?P<src>[\w./-]+)",
                r"^(?P<src>[\w.-][\w./-]*)$",
            ),
        ),
        "lbry": Platform(
            name="lbry",
            template="lbry",
            patterns=_patterns(
                rf"^{_SCHEME}(?P<src_host>[^/\s]+)/\$/(?:download|embed)/(?P<slug>[\w-]+)/-?(?P<src>\w+)",
                rf"^{_SCHEME}(?P<src_host>odysee\.com|lbry\.tv)/@[\w-]+(?:[:#]\w+)?/(?P<slug>[\w-]+)[:#](?P<src>\w+)",
                r"^lbry://@[\w-]+(?:[:#]\w+)?/(?P<slug>[\w-]+)[:#](?P<src>\w+)",
            ),
            defaults=MappingProxyType({"src_host": "odysee.com"}),
        ),
        "playeur": Platform(
            name="playeur",
            template="playeur",
            patterns=_patterns(
                rf"^{_SCHEME}(?:utreon|playeur)\.com/v/(?P<src>[\w-]+)(?:\?t=(?P<time>\d+))?",
                r"^(?P<src>[\w-]+)$",
            ),
            defaults=MappingProxyType({"time": "0"}),
        ),
    }
)

ALIASES: Mapping[str, str] = MappingProxyType({"odysee": "lbry", "utreon": "playeur"})


def canonical_platform(name: str) -> str:
    """Return the canonical platform name for a name or alias."""
    name = name.strip().lower()
    return ALIASES.get(name, name)


def is_platform(name: str) -> bool:
    """Check whether a reference kind names a hosting platform."""
    return canonical_platform(name) in PLATFORMS


def resolve_hosted(platform: str, url: str, templates: TemplateStore) -> str:
    """Render a third-party media reference.

    Args:
        platform: Platform name or alias (case-insensitive)
        url: Raw URL or ID as written by the author
        templates: Template store holding the platform templates

    Returns:
        Rendered embed HTML, or ``[platform url]`` when nothing matches

    Example:
        >>> resolve_hosted("vimeo", "not a video", TemplateStore.default())
        '[vimeo not a video]'
    """
    name = canonical_platform(platform)
    url = url.strip()
    entry = PLATFORMS.get(name)
    data = entry.match(url) if entry is not None else None

    if entry is None or data is None:
        logger.debug("No %s pattern matched %s", name, excerpt(url))
        return f"[{name} {escape_attribute(url)}]"

    rendered = templates.render(
        entry.template, {key: escape_attribute(value) for key, value in data.items()}
    )
    if not rendered:
        return f"[{name} {escape_attribute(url)}]"
    return rendered


__all__ = [
    "ALIASES",
    "PLATFORMS",
    "Platform",
    "canonical_platform",
    "is_platform",
    "resolve_hosted",
]
