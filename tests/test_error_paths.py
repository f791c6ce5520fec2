"""Error-path and malformed input tests.

Configuration problems raise ConfigError when the configuration is
loaded. Content never raises: malformed markup and HTML degrade to
literal or empty output.
"""

import pytest

from vellum import ConfigError, RenderConfig, VellumError, render_markup, sanitize_html
from vellum.templates import TemplateStore
from vellum.whitelist import WhitelistSchema

# =========================================================================
# ConfigError construction and formatting
# =========================================================================


class TestConfigErrorFormatting:
    """Verify ConfigError produces well-formatted messages."""

    def test_message_only(self) -> None:
        err = ConfigError("bad value")
        assert str(err) == "bad value"
        assert err.message == "bad value"
        assert err.source is None

    def test_with_source(self) -> None:
        err = ConfigError("bad value", "site.json")
        assert str(err) == "site.json: bad value"
        assert err.source == "site.json"

    def test_is_vellum_error(self) -> None:
        assert isinstance(ConfigError("x"), VellumError)
        assert issubclass(VellumError, Exception)


# =========================================================================
# Broken configuration
# =========================================================================


class TestBrokenConfiguration:
    def test_bad_whitelist_entry(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            RenderConfig.from_dict({"whitelist": {"p": "class"}})
        assert exc_info.value.source == "whitelist"

    def test_bad_template_value(self) -> None:
        with pytest.raises(ConfigError):
            RenderConfig.from_dict({"templates": {"vimeo": None}})

    def test_missing_templates_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            RenderConfig.from_dict({"templates_file": str(tmp_path / "none.tpl")})

    def test_missing_whitelist_file(self, tmp_path) -> None:
        with pytest.raises(VellumError):
            RenderConfig.from_dict({"whitelist_file": str(tmp_path / "none.json")})


# =========================================================================
# Malformed markup
# =========================================================================


class TestMalformedMarkup:
    """Malformed markup renders without raising."""

    @pytest.mark.parametrize(
        "source",
        [
            "```python\nno closing fence",
            "**",
            "*",
            "~~",
            "[video:](",
            "[audio: x](",
            "[youtube]",
            "[figure]",
            "[",
            "]",
            "[|]",
            "{{",
            "+--+",
            "| a |",
            "#",
            "- ",
            "1.",
            "<pre>unclosed",
            "\x00\x01",
        ],
    )
    def test_does_not_raise(self, source: str) -> None:
        assert isinstance(render_markup(source), str)

    def test_unclosed_fence_stays_literal(self) -> None:
        assert render_markup("```\nx") == "<p>```\nx</p>"

    def test_empty_hosted_reference(self) -> None:
        assert render_markup("[youtube]") == "<p>[youtube ]</p>"

    def test_missing_template_renders_nothing(self) -> None:
        config = RenderConfig(templates=TemplateStore({}))
        assert render_markup("[audio: x](/a.mp3)", config=config) == ""


# =========================================================================
# Malformed HTML
# =========================================================================


class TestMalformedHtml:
    """Malformed HTML sanitizes without raising."""

    @pytest.mark.parametrize(
        "html",
        [
            "<",
            ">",
            "</p>",
            "<p",
            "<p>",
            "<p><em></p></em>",
            "<a href=>x</a>",
            '<a href="unterminated>x</a>',
            "<!-- open comment",
            "<code>",
            "</code><code>",
            "<div>" * 100,
            "<img src=x onerror=alert(1)",
        ],
    )
    def test_does_not_raise(self, html: str) -> None:
        assert isinstance(sanitize_html(html), str)

    def test_crossed_tags(self) -> None:
        assert sanitize_html("<p><em></p></em>") == "<p>&lt;em&gt;</p>&lt;/em&gt;"

    def test_empty_schema_drops_everything(self) -> None:
        config = RenderConfig(whitelist=WhitelistSchema({}))
        assert sanitize_html("<p>a</p>b", config=config) == "b"
