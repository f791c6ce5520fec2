"""Tests for the markup transformer (rules, lists, paragraphs)."""

import re

from hypothesis import given, settings
from hypothesis import strategies as st

from vellum import render_markup
from vellum.config import RenderConfig
from vellum.guard import TOKEN_START
from vellum.markup import DEFAULT_RULES, MarkupTransformer, PatternRule, make_paragraphs
from vellum.templates import TemplateStore

TEMPLATES = TemplateStore.default()

# =============================================================================
# End-to-end scenarios
# =============================================================================


class TestScenarios:
    def test_bold_and_em(self) -> None:
        assert render_markup("**bold** and *em*") == "<p><strong>bold</strong> and <em>em</em></p>"

    def test_nested_list(self) -> None:
        assert render_markup("- a\n- b\n  - c") == "<ul><li>a</li><li>b</li><ul><li>c</li></ul></ul>"

    def test_video_with_preview(self) -> None:
        html = render_markup('[video:Title](http://host/file.mp4 "preview.jpg")')
        assert html == TEMPLATES.render(
            "video_with_preview_embed",
            {"src": "http://host/file.mp4", "title": "Title", "preview": "preview.jpg"},
        )

    def test_inline_code_escaped(self) -> None:
        assert render_markup("`<div>text</div>`") == (
            "<p><code>&lt;div&gt;text&lt;/div&gt;</code></p>"
        )


# =============================================================================
# Individual rules
# =============================================================================


class TestLinks:
    def test_link_with_title(self) -> None:
        assert render_markup('[Vellum](https://example.com "Home")') == (
            '<p><a href="https://example.com" title="Home">Vellum</a></p>'
        )

    def test_image(self) -> None:
        assert render_markup("![alt text](/img.png)") == '<p><img src="/img.png" alt="alt text"></p>'

    def test_destination_escaped(self) -> None:
        html = render_markup('[x](/a"onmouseover)')
        assert 'a"onmouseover' not in html

    def test_media_reference_is_not_a_link(self) -> None:
        assert "<a " not in render_markup("[audio: Song](/song.mp3)")

    def test_destination_with_block_tag_escaped(self) -> None:
        assert render_markup("[a](<span>x</span>)") == (
            '<p><a href="&lt;span&gt;x&lt;/span&gt;">a</a></p>'
        )


class TestEmphasis:
    def test_strong_em(self) -> None:
        assert render_markup("***x***") == "<p><strong><em>x</em></strong></p>"

    def test_delete(self) -> None:
        assert render_markup("~~gone~~") == "<p><del>gone</del></p>"

    def test_quote(self) -> None:
        assert render_markup(':"quoted:"') == "<p><q>quoted</q></p>"

    def test_quote_closes_on_its_own_delimiter(self) -> None:
        assert render_markup(':"hi:" and :"bye:"') == "<p><q>hi</q> and <q>bye</q></p>"

    def test_plain_colon_quote_is_text(self) -> None:
        assert render_markup('key:"value"') == '<p>key:"value"</p>'

    def test_delimiters_must_hug_text(self) -> None:
        assert render_markup("a * b * c") == "<p>a * b * c</p>"

    def test_single_line_only(self) -> None:
        assert "<em>" not in render_markup("*a\nb*")


class TestHeadings:
    def test_levels(self) -> None:
        assert render_markup("# One") == "<h1>One</h1>"
        assert render_markup("###### Six") == "<h6>Six</h6>"

    def test_closing_run_dropped(self) -> None:
        assert render_markup("### Three ###") == "<h3>Three</h3>"

    def test_equals_delimiter(self) -> None:
        assert render_markup("== Two") == "<h2>Two</h2>"

    def test_needs_space(self) -> None:
        assert render_markup("#hashtag") == "<p>#hashtag</p>"

    def test_heading_then_text(self) -> None:
        assert render_markup("# Title\nBody") == "<h1>Title</h1>\n<p>Body</p>"


class TestCode:
    def test_fenced_with_language(self) -> None:
        assert render_markup("```python\nx = 1\n```") == (
            '<pre><code class="language-python">x = 1</code></pre>'
        )

    def test_fenced_keeps_lines_out_of_lists(self) -> None:
        assert render_markup("```\n- a\n- b\n```") == "<pre><code>- a\n- b</code></pre>"

    def test_fenced_blank_lines_stay_in_block(self) -> None:
        html = render_markup("```\na\n\nb\n```")
        assert html == "<pre><code>a\n\nb</code></pre>"

    def test_code_not_wiki_linked(self) -> None:
        assert render_markup("`[x]`") == "<p><code>[x]</code></p>"

    def test_inline_code_escapes_block_tags(self) -> None:
        assert render_markup("Use `<span>x</span>` here") == (
            "<p>Use <code>&lt;span&gt;x&lt;/span&gt;</code> here</p>"
        )
        assert render_markup("`<p>hi</p>`") == "<p><code>&lt;p&gt;hi&lt;/p&gt;</code></p>"

    def test_fenced_code_escapes_block_tags(self) -> None:
        source = "```html\n<table><tr><td>1</td></tr></table>\n```"
        assert render_markup(source) == (
            '<pre><code class="language-html">'
            "&lt;table&gt;&lt;tr&gt;&lt;td&gt;1&lt;/td&gt;&lt;/tr&gt;&lt;/table&gt;"
            "</code></pre>"
        )


class TestBlocks:
    def test_template_span(self) -> None:
        assert render_markup("{{ name }}") == '<p><span class="template">name</span></p>'

    def test_escaped_template_span(self) -> None:
        assert "template" not in render_markup("\\{{ name }}")

    def test_horizontal_rule(self) -> None:
        assert render_markup("a\n\n----\n\nb") == "<p>a</p><hr/><p>b</p>"

    def test_table(self) -> None:
        source = "+---+---+\n| a | b |\n+---+---+\n| 1 | 2 |\n+---+---+"
        assert render_markup(source) == (
            "<table><tr><th>a</th><th>b</th></tr><tr><td>1</td><td>2</td></tr></table>"
        )

    def test_existing_block_tags_protected(self) -> None:
        assert render_markup("<pre>*not em*</pre>") == "<pre>*not em*</pre>"

    def test_extra_protected_tags(self) -> None:
        config = RenderConfig(extra_protected_tags=("aside",))
        html = render_markup("<aside>*x*</aside>", config=config)
        assert "*x*" in html
        assert "<em>" not in html


class TestReferences:
    def test_footnote_is_empty(self) -> None:
        assert render_markup("Text[ref some note] end") == "<p>Text end</p>"
        assert render_markup("[footnote]") == ""

    def test_figure(self) -> None:
        assert render_markup('[figure"Alt"[Cap] /img.png]') == (
            '<figure><img src="/img.png" alt="Alt"><figcaption>Cap</figcaption></figure>'
        )

    def test_figure_with_parenthesized_source(self) -> None:
        html = render_markup('[figure"Alt"[Cap](/img.png)]')
        assert '<img src="/img.png" alt="Alt">' in html
        assert "<a " not in html

    def test_youtube(self) -> None:
        html = render_markup("[youtube https://youtu.be/abc123?t=7]")
        assert "youtube.com/embed/abc123?start=7" in html
        assert not html.startswith("<p>")

    def test_hosted_fallback_stays_literal(self) -> None:
        assert render_markup("[vimeo https://example.com/x]") == "<p>[vimeo https://example.com/x]</p>"

    def test_audio(self) -> None:
        assert '<audio src="/song.mp3" title="Song"' in render_markup("[audio: Song](/song.mp3)")

    def test_video_captions(self) -> None:
        html = render_markup('[video: T](/v.mp4 "" "/subs.vtt:en:default")')
        assert "poster" not in html
        assert 'srclang="en"' in html
        assert 'src="/subs.vtt" default>' in html


class TestWikiLinks:
    def test_with_label(self) -> None:
        assert render_markup("[Home|Go home]") == '<p><a href="Home">Go home</a></p>'

    def test_target_only(self) -> None:
        assert render_markup("[Page]") == '<p><a href="Page">Page</a></p>'

    def test_target_with_block_tag_escaped(self) -> None:
        assert render_markup("[<span>x</span>]") == (
            '<p><a href="&lt;span&gt;x&lt;/span&gt;"><span>x</span></a></p>'
        )

    def test_escaped_bracket(self) -> None:
        assert "<a" not in render_markup("\\[Page]")


# =============================================================================
# Paragraphs and pipeline
# =============================================================================


class TestParagraphs:
    def test_blank_lines_split(self) -> None:
        assert render_markup("a\n\nb") == "<p>a</p><p>b</p>"

    def test_single_newline_kept_in_paragraph(self) -> None:
        assert render_markup("a\nb") == "<p>a\nb</p>"

    def test_existing_paragraph_not_rewrapped(self) -> None:
        assert make_paragraphs("<p>x</p>") == "<p>x</p>"

    def test_inline_protected_region_wrapped_with_text(self) -> None:
        assert render_markup("hello <span>x</span>") == "<p>hello <span>x</span></p>"

    def test_crlf_input(self) -> None:
        assert render_markup("a\r\n\r\nb") == "<p>a</p><p>b</p>"


class TestTransformer:
    def test_empty_input(self) -> None:
        assert render_markup("") == ""
        assert render_markup("   \n ") == ""
        assert render_markup(None) == ""

    def test_input_trimmed(self) -> None:
        assert render_markup("\n\n  *x*  \n") == "<p><em>x</em></p>"

    def test_rule_order(self) -> None:
        assert [rule.name for rule in DEFAULT_RULES] == [
            "link",
            "emphasis",
            "heading",
            "code",
            "template_span",
            "table",
            "hr",
            "media",
            "reference",
            "wiki_link",
        ]

    def test_custom_rules(self) -> None:
        shout = PatternRule("shout", re.compile(r"!!(\w+)!!"), lambda m, ctx: m.group(1).upper())
        transformer = MarkupTransformer(rules=[shout])
        assert transformer.transform("say !!hi!! *x*") == "<p>say HI *x*</p>"

    def test_no_rules(self) -> None:
        assert MarkupTransformer(rules=[])("*x*") == "<p>*x*</p>"

    def test_sealed_output_not_rewritten(self) -> None:
        sealed = PatternRule("sealed", re.compile(r"@@"), lambda m, ctx: "*kept*", seal=True)
        emphasis = next(rule for rule in DEFAULT_RULES if rule.name == "emphasis")
        transformer = MarkupTransformer(rules=[sealed, emphasis])
        assert transformer.transform("@@") == "<p>*kept*</p>"

    @given(st.text(alphabet=st.characters(exclude_characters="\x02\x03"), max_size=200))
    @settings(max_examples=100, deadline=None)
    def test_never_raises_and_restores_everything(self, text: str) -> None:
        html = render_markup(text)
        assert TOKEN_START not in html

    @given(
        st.lists(
            st.sampled_from(
                ["*", "**", "~~", "`", "```", "[", "]", "(", ")", "|", "+---+", "#", "- ", "\n", "a", " ", '"', ":"]
            ),
            max_size=40,
        ).map("".join)
    )
    @settings(max_examples=200, deadline=None)
    def test_delimiter_soup(self, text: str) -> None:
        html = render_markup(text)
        assert TOKEN_START not in html
