"""Tests for the embed resolver (uploaded and hosted media)."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from vellum.embeds import (
    PLATFORMS,
    CaptionTrack,
    EmbedDescriptor,
    EmbedKind,
    canonical_platform,
    is_platform,
    parse_captions,
    render_captions,
    render_upload,
    resolve_hosted,
    upload_embed,
)
from vellum.templates import TemplateStore

TEMPLATES = TemplateStore.default()

# =============================================================================
# Caption tracks
# =============================================================================


class TestParseCaptions:
    def test_single_track(self) -> None:
        assert parse_captions("subs.vtt") == (CaptionTrack("subs.vtt"),)

    def test_default_without_language(self) -> None:
        assert parse_captions("subs.vtt:default") == (CaptionTrack("subs.vtt", None, True),)

    def test_language(self) -> None:
        assert parse_captions("subs.vtt:en") == (CaptionTrack("subs.vtt", "en", False),)

    def test_language_and_default(self) -> None:
        assert parse_captions("subs.vtt:fr:default") == (CaptionTrack("subs.vtt", "fr", True),)

    def test_url_with_scheme(self) -> None:
        (track,) = parse_captions("https://cdn.example.com/subs.vtt:pt-BR")
        assert track.source == "https://cdn.example.com/subs.vtt"
        assert track.language == "pt-BR"

    def test_comma_separated(self) -> None:
        tracks = parse_captions("a.vtt:en:default, b.vtt:de,c.vtt")
        assert [t.source for t in tracks] == ["a.vtt", "b.vtt", "c.vtt"]
        assert [t.language for t in tracks] == ["en", "de", None]
        assert [t.is_default for t in tracks] == [True, False, False]

    def test_empty(self) -> None:
        assert parse_captions("") == ()
        assert parse_captions(None) == ()


class TestRenderCaptions:
    def test_language_track(self) -> None:
        html = render_captions((CaptionTrack("a.vtt", "en", True),), TEMPLATES)
        assert 'srclang="en"' in html
        assert 'label="en"' in html
        assert 'src="a.vtt" default>' in html

    def test_plain_track(self) -> None:
        html = render_captions((CaptionTrack("a.vtt"),), TEMPLATES)
        assert html == '<track kind="captions" src="a.vtt" >'

    def test_no_tracks(self) -> None:
        assert render_captions((), TEMPLATES) == ""


# =============================================================================
# Uploaded media
# =============================================================================


class TestUploads:
    def test_video_with_preview(self) -> None:
        html = upload_embed("video", "http://host/file.mp4", TEMPLATES, title="Title", preview="preview.jpg")
        assert html == TEMPLATES.render(
            "video_with_preview_embed",
            {"src": "http://host/file.mp4", "title": "Title", "preview": "preview.jpg"},
        )
        assert 'poster="preview.jpg"' in html

    def test_video_without_preview(self) -> None:
        html = upload_embed("video", "/v.mp4", TEMPLATES, title="T")
        assert "poster" not in html
        assert 'src="/v.mp4"' in html

    def test_video_with_captions(self) -> None:
        html = upload_embed("VIDEO", "/v.mp4", TEMPLATES, captions="/s.vtt:en")
        assert '<track label="en"' in html
        assert html.index("<track") < html.index("</video>")

    def test_audio(self) -> None:
        html = upload_embed("audio", "/a.mp3", TEMPLATES, title="Song")
        assert '<audio src="/a.mp3" title="Song"' in html

    def test_figure(self) -> None:
        html = upload_embed("figure", "/i.png", TEMPLATES, title="Alt", caption="Cap")
        assert html == '<figure><img src="/i.png" alt="Alt"><figcaption>Cap</figcaption></figure>'

    def test_attribute_values_escaped(self) -> None:
        html = upload_embed("audio", '/a.mp3" onload="x', TEMPLATES)
        assert 'onload="x' not in html

    def test_unknown_kind(self) -> None:
        assert upload_embed("hologram", "/x", TEMPLATES) == ""

    def test_platform_descriptor_not_rendered_as_upload(self) -> None:
        descriptor = EmbedDescriptor(kind=EmbedKind.PLATFORM, source="x")
        assert render_upload(descriptor, TEMPLATES) == ""


# =============================================================================
# Hosted media
# =============================================================================


class TestHostedPlatforms:
    @pytest.mark.parametrize(
        ("platform", "url", "expected"),
        [
            ("youtube", "https://www.youtube.com/watch?v=abc123&t=42s", "youtube.com/embed/abc123?start=42"),
            ("youtube", "https://youtu.be/abc123?t=7", "youtube.com/embed/abc123?start=7"),
            ("youtube", "abc123XYZ", "youtube.com/embed/abc123XYZ?start=0"),
            ("vimeo", "https://vimeo.com/12345", "player.vimeo.com/video/12345"),
            ("vimeo", "https://player.vimeo.com/video/678", "player.vimeo.com/video/678"),
            ("vimeo", "12345", "player.vimeo.com/video/12345"),
            ("peertube", "https://tube.example.org/videos/watch/abc-1", "https://tube.example.org/videos/embed/abc-1"),
            ("peertube", "https://tube.example.org/w/xyz", "https://tube.example.org/videos/embed/xyz"),
            ("archive", "https://archive.org/details/some_film", "archive.org/embed/some_film"),
            ("archive", "some_film", "archive.org/embed/some_film"),
            ("lbry", "https://odysee.com/$/download/my-video/-abc", "https://odysee.com/$/embed/my-video/abc"),
            ("odysee", "https://odysee.com/@chan:1/my-video:a", "https://odysee.com/$/embed/my-video/a"),
            ("lbry", "lbry://@chan/vid#abc", "https://odysee.com/$/embed/vid/abc"),
            ("playeur", "https://playeur.com/v/xyz?t=5", "playeur.com/embed/xyz?t=5"),
            ("utreon", "https://utreon.com/v/xyz", "playeur.com/embed/xyz?t=0"),
        ],
    )
    def test_resolves(self, platform: str, url: str, expected: str) -> None:
        html = resolve_hosted(platform, url, TEMPLATES)
        assert expected in html
        assert "<iframe" in html

    def test_fallback_literal(self) -> None:
        assert resolve_hosted("vimeo", "https://example.com/video", TEMPLATES) == (
            "[vimeo https://example.com/video]"
        )

    def test_alias_fallback_uses_canonical_name(self) -> None:
        assert resolve_hosted("utreon", "https://example.com/x", TEMPLATES) == (
            "[playeur https://example.com/x]"
        )

    def test_unknown_platform(self) -> None:
        assert resolve_hosted("dailymotion", "x", TEMPLATES) == "[dailymotion x]"

    def test_missing_template_falls_back(self) -> None:
        assert resolve_hosted("vimeo", "123", TemplateStore({})) == "[vimeo 123]"

    def test_aliases(self) -> None:
        assert canonical_platform("Odysee") == "lbry"
        assert canonical_platform("utreon") == "playeur"
        assert is_platform("YouTube")
        assert not is_platform("figure")

    @given(
        platform=st.sampled_from(sorted(PLATFORMS)),
        tail=st.text(alphabet="abcXYZ019 ", max_size=20),
    )
    @settings(max_examples=100)
    def test_unmatched_url_is_bracketed(self, platform: str, tail: str) -> None:
        url = f":: {tail}".strip()
        html = resolve_hosted(platform, url, TEMPLATES)
        assert html == f"[{platform} {url}]"
