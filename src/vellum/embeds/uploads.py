"""Uploaded media embeds: audio, video and figures.

An EmbedDescriptor is built per reference match, rendered through a named
template, and discarded.

Caption list syntax (comma separated):
    subs.vtt                  track without language
    subs.vtt:default          default track without language
    subs-en.vtt:en            language-tagged track
    subs-fr.vtt:fr:default    language-tagged default track

Sources may contain colons of their own (``https://...``); only a trailing
language tag and ``default`` flag are split off.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from vellum.templates import TemplateStore
from vellum.utils.text import escape_attribute

_TRACK_SPLIT = re.compile(r",\s*")
_TRACK = re.compile(
    r"^(?P<src>.+?)"
    r"(?::(?P<lang>[A-Za-z]{2,3}(?:-[A-Za-z0-9]+)*))?"
    r"(?::(?P<default>(?i:default)))?$"
)


class EmbedKind(str, Enum):
    """What an embed reference points at."""

    AUDIO = "audio"
    VIDEO = "video"
    FIGURE = "figure"
    PLATFORM = "third_party_platform"


@dataclass(frozen=True, slots=True)
class CaptionTrack:
    """One subtitle or caption file attached to a video."""

    source: str
    language: str | None = None
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class EmbedDescriptor:
    """A media reference ready for template rendering.

    Attributes:
        kind: Audio, video, figure or third-party platform
        source: Resolved URL or path of the media
        title: Title text (alt text for figures)
        caption: Figure caption
        preview: Poster image for videos
        captions: Caption tracks for videos and audio

    """

    kind: EmbedKind
    source: str
    title: str = ""
    caption: str = ""
    preview: str = ""
    captions: tuple[CaptionTrack, ...] = ()


def parse_captions(captions: str | None) -> tuple[CaptionTrack, ...]:
    """Parse a caption list into tracks, skipping empty entries.

    Examples:
        >>> [t.language for t in parse_captions("a.vtt, b.vtt:fr:default")]
        [None, 'fr']
    """
    if not captions:
        return ()
    tracks: list[CaptionTrack] = []
    for part in _TRACK_SPLIT.split(captions.strip()):
        match = _TRACK.match(part.strip())
        if match is None:
            continue
        tracks.append(
            CaptionTrack(
                source=match.group("src"),
                language=match.group("lang"),
                is_default=match.group("default") is not None,
            )
        )
    return tuple(tracks)


def render_captions(tracks: tuple[CaptionTrack, ...], templates: TemplateStore) -> str:
    """Render caption tracks with the language or no-language track template."""
    out: list[str] = []
    for track in tracks:
        data = {
            "src": escape_attribute(track.source),
            "isdefault": "default" if track.is_default else "",
        }
        if track.language:
            data["lang"] = escape_attribute(track.language)
            data["label"] = data["lang"]
            out.append(templates.render("caption_track_lang", data))
        else:
            out.append(templates.render("caption_track", data))
    return "".join(out)


def render_upload(descriptor: EmbedDescriptor, templates: TemplateStore) -> str:
    """Render an uploaded audio, video or figure embed.

    Args:
        descriptor: The embed to render
        templates: Template store holding the embed templates

    Returns:
        Rendered HTML, or an empty string for platform descriptors
    """
    data = {
        "src": escape_attribute(descriptor.source),
        "title": escape_attribute(descriptor.title),
        "preview": escape_attribute(descriptor.preview),
        "detail": render_captions(descriptor.captions, templates),
    }

    if descriptor.kind is EmbedKind.AUDIO:
        return templates.render("audio_embed", data)

    if descriptor.kind is EmbedKind.VIDEO:
        name = "video_with_preview_embed" if descriptor.preview else "video_embed"
        return templates.render(name, data)

    if descriptor.kind is EmbedKind.FIGURE:
        return templates.render(
            "figure_embed",
            {"src": data["src"], "alt": data["title"], "caption": descriptor.caption},
        )

    return ""


def upload_embed(
    kind: str,
    source: str,
    templates: TemplateStore,
    title: str = "",
    preview: str = "",
    captions: str = "",
    caption: str = "",
) -> str:
    """Build a descriptor for an uploaded media reference and render it.

    Unknown kinds render as an empty string.
    """
    try:
        embed_kind = EmbedKind(kind.lower())
    except ValueError:
        return ""
    descriptor = EmbedDescriptor(
        kind=embed_kind,
        source=source.strip(),
        title=title.strip(),
        caption=caption.strip(),
        preview=preview.strip(),
        captions=parse_captions(captions),
    )
    return render_upload(descriptor, templates)


__all__ = [
    "CaptionTrack",
    "EmbedDescriptor",
    "EmbedKind",
    "parse_captions",
    "render_captions",
    "render_upload",
    "upload_embed",
]
