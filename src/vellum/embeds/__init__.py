"""Embed resolver for uploaded media and third-party hosted media."""

from vellum.embeds.hosted import (
    ALIASES,
    PLATFORMS,
    Platform,
    canonical_platform,
    is_platform,
    resolve_hosted,
)
from vellum.embeds.uploads import (
    CaptionTrack,
    EmbedDescriptor,
    EmbedKind,
    parse_captions,
    render_captions,
    render_upload,
    upload_embed,
)

__all__ = [
    "ALIASES",
    "PLATFORMS",
    "CaptionTrack",
    "EmbedDescriptor",
    "EmbedKind",
    "Platform",
    "canonical_platform",
    "is_platform",
    "parse_captions",
    "render_captions",
    "render_upload",
    "resolve_hosted",
    "upload_embed",
]
