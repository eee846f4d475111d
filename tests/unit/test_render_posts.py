"""
Tests for the Post SSR Renderer Service.
"""

from __future__ import annotations

import logging

import pytest

from src.components.render_posts import (
    PostRenderer,
    RenderConfig,
    Rendered,
    Skipped,
    count_links,
    count_words,
    extract_headings,
    extract_text,
    parse_document,
    render_elements,
    render_html,
    render_node,
    styled_render_config,
)
from src.components.richtext import Element, HeadingNode, RootNode, TextNode


def doc(*children: dict) -> dict:
    """Wrap nodes in a Lexical document."""
    return {"root": {"type": "root", "children": list(children)}}


def para(*children: dict) -> dict:
    return {"type": "paragraph", "children": list(children)}


def text(value: str, fmt: object = 0) -> dict:
    return {"type": "text", "text": value, "format": fmt}


@pytest.fixture
def renderer() -> PostRenderer:
    return PostRenderer()


# --- Empty and Absent Input ---


class TestEmptyInput:
    @pytest.mark.parametrize("value", [None, {}, [], "", 0, "<p>raw</p>", {"root": {}}])
    def test_renders_empty(self, value: object) -> None:
        assert render_html(value) == ""
        assert render_elements(value) == []

    def test_empty_children(self) -> None:
        assert render_html(doc()) == ""


# --- Basic Rendering ---


class TestBasicRendering:
    def test_example_document(self) -> None:
        value = doc(para(text("Hello & welcome", 1)))
        assert render_html(value) == "<p><strong>Hello &amp; welcome</strong></p>"

    def test_text_is_escaped(self) -> None:
        html = render_html(doc(para(text("<b>hi</b>"))))
        assert html == "<p>&lt;b&gt;hi&lt;/b&gt;</p>"
        assert "<b>" not in html

    def test_quote_escaped(self) -> None:
        assert render_html(doc(para(text('say "hi"')))) == "<p>say &quot;hi&quot;</p>"

    def test_bold_italic_nesting(self) -> None:
        html = render_html(doc(para(text("ok", 3))))
        assert html == "<p><em><strong>ok</strong></em></p>"
        assert html.count("<strong>") == 1
        assert html.count("<em>") == 1

    @pytest.mark.parametrize(
        ("fmt", "expected"),
        [
            (4, "<s>x</s>"),
            (8, "<u>x</u>"),
            (16, "<code>x</code>"),
            (17, "<strong><code>x</code></strong>"),
            (12, "<s><u>x</u></s>"),
        ],
    )
    def test_format_bits(self, fmt: int, expected: str) -> None:
        assert render_html(doc(para(text("x", fmt)))) == f"<p>{expected}</p>"

    def test_heading(self) -> None:
        value = doc({"type": "heading", "tag": "h3", "children": [text("Fleet")]})
        assert render_html(value) == "<h3>Fleet</h3>"

    def test_heading_out_of_range(self) -> None:
        value = doc({"type": "heading", "level": 9, "children": [text("Fleet")]})
        assert render_html(value) == "<h2>Fleet</h2>"

    def test_heading_non_ascii_digit_level(self, caplog: pytest.LogCaptureFixture) -> None:
        heading = {"type": "heading", "tag": "h²", "children": [text("Title")]}
        assert render_html(doc(heading)) == "<h2>Title</h2>"
        assert "Skipped" not in caplog.text

    def test_heading_model_level_checked_again(self) -> None:
        root = RootNode(children=(HeadingNode(level=12, children=(TextNode("x"),)),))
        assert render_html(root) == "<h2>x</h2>"

    def test_linebreak(self) -> None:
        value = doc(para(text("a"), {"type": "linebreak"}, text("b")))
        assert render_html(value) == "<p>a<br />b</p>"

    def test_quote(self) -> None:
        value = doc({"type": "quote", "children": [text("Wow")]})
        assert render_html(value) == "<blockquote>Wow</blockquote>"


class TestParagraphs:
    def test_empty_paragraph_omitted(self) -> None:
        assert render_html(doc(para(text("")))) == ""

    def test_whitespace_paragraph_omitted(self) -> None:
        assert render_html(doc(para(text("   ")))) == ""

    @pytest.mark.parametrize("fmt", [1, 3, 16])
    def test_formatted_whitespace_paragraph_omitted(self, fmt: int) -> None:
        assert render_html(doc(para(text("  ", fmt)))) == ""

    def test_formatted_whitespace_beside_text_kept(self) -> None:
        assert render_html(doc(para(text(" ", 1), text("a")))) == "<p><strong> </strong>a</p>"

    def test_paragraph_without_children_omitted(self) -> None:
        assert render_html(doc({"type": "paragraph"})) == ""

    def test_break_only_paragraph_kept(self) -> None:
        assert render_html(doc(para({"type": "linebreak"}))) == "<p><br /></p>"


class TestLists:
    def test_numbered(self) -> None:
        value = doc(
            {
                "type": "list",
                "listType": "number",
                "children": [{"type": "listitem", "children": [text("one")]}],
            }
        )
        assert render_html(value) == "<ol><li>one</li></ol>"

    def test_kind_absent_is_bullet(self) -> None:
        value = doc({"type": "list", "children": [{"type": "listitem", "children": [text("a")]}]})
        assert render_html(value) == "<ul><li>a</li></ul>"

    def test_nested(self) -> None:
        value = doc(
            {
                "type": "list",
                "children": [
                    {
                        "type": "listitem",
                        "children": [
                            text("a"),
                            {
                                "type": "list",
                                "kind": "number",
                                "children": [{"type": "listitem", "children": [text("b")]}],
                            },
                        ],
                    }
                ],
            }
        )
        assert render_html(value) == "<ul><li>a<ol><li>b</li></ol></li></ul>"


class TestLinks:
    def test_new_tab(self) -> None:
        value = doc(
            para({"type": "link", "url": "/book", "newTab": True, "children": [text("Book")]})
        )
        assert render_html(value) == (
            '<p><a href="/book" target="_blank" rel="noopener noreferrer">Book</a></p>'
        )

    @pytest.mark.parametrize("new_tab", [None, False])
    def test_same_tab(self, new_tab: object) -> None:
        link = {"type": "link", "url": "/book", "children": [text("Book")]}
        if new_tab is not None:
            link["newTab"] = new_tab
        html = render_html(doc(para(link)))
        assert html == '<p><a href="/book">Book</a></p>'
        assert "noopener" not in html

    def test_missing_url(self) -> None:
        value = doc(para({"type": "link", "children": [text("x")]}))
        assert render_html(value) == '<p><a href="#">x</a></p>'

    def test_url_escaped(self) -> None:
        value = doc(para({"type": "link", "url": '/a?b=1&c="2"', "children": [text("x")]}))
        assert render_html(value) == '<p><a href="/a?b=1&amp;c=&quot;2&quot;">x</a></p>'

    def test_javascript_url_neutralised(self) -> None:
        value = doc(para({"type": "link", "url": "javascript:alert(1)", "children": [text("x")]}))
        assert render_html(value) == '<p><a href="#">x</a></p>'

    def test_formatted_link_children(self) -> None:
        value = doc(para({"type": "autolink", "url": "/x", "children": [text("go", 2)]}))
        assert render_html(value) == '<p><a href="/x"><em>go</em></a></p>'


class TestUnknownNodes:
    def test_children_rendered_without_wrapper(self) -> None:
        value = doc({"type": "callout", "children": [para(text("inside"))]})
        assert render_html(value) == "<p>inside</p>"

    def test_unknown_leaf_renders_nothing(self) -> None:
        assert render_html(doc({"type": "upload", "value": {"id": 1}})) == ""


class TestFaultIsolation:
    def test_one_malformed_among_valid_siblings(self, caplog: pytest.LogCaptureFixture) -> None:
        value = doc(
            para(text("one")),
            para(text("two")),
            para(text("bad", "bold")),
            para(text("three")),
            para(text("four")),
        )
        with caplog.at_level(logging.WARNING):
            html = render_html(value)
        assert html == "<p>one</p><p>two</p><p>three</p><p>four</p>"
        assert any("Skipped text node at index 0" in r.getMessage() for r in caplog.records)

    def test_malformed_top_level_node(self) -> None:
        value = doc(para(text("a")), "not a node", 7, para(text("b")))
        assert render_html(value) == "<p>a</p><p>b</p>"

    def test_render_exception_is_skipped(self) -> None:
        bad = HeadingNode(level="x", children=(TextNode("boom"),))  # type: ignore[arg-type]
        outcome = render_node(bad, 3)
        assert isinstance(outcome, Skipped)
        assert outcome.index == 3
        assert outcome.node_type == "heading"
        assert "TypeError" in outcome.detail

    def test_render_exception_siblings_survive(self) -> None:
        root = RootNode(
            children=(
                TextNode("a"),
                HeadingNode(level="x"),  # type: ignore[arg-type]
                TextNode("b"),
            )
        )
        assert render_html(root) == "ab"

    def test_valid_node_outcome(self) -> None:
        outcome = render_node(TextNode("a"))
        assert outcome == Rendered(items=("a",))


class TestDeterminism:
    def test_idempotent(self, lexical_doc: dict) -> None:
        assert render_html(lexical_doc) == render_html(lexical_doc)

    def test_elements_match_html(self, lexical_doc: dict) -> None:
        items = render_elements(lexical_doc)
        html = "".join(i.to_html() if isinstance(i, Element) else i for i in items)
        assert html == render_html(lexical_doc)

    def test_full_document(self, lexical_doc: dict) -> None:
        assert render_html(lexical_doc) == (
            "<h1>Airport Transfers</h1>"
            "<p>Book a <strong>luxury</strong> ride "
            '<a href="https://example.com/book" target="_blank" rel="noopener noreferrer">'
            "online</a><br />today.</p>"
            "<ol><li>Choose</li><li>Ride</li></ol>"
            "<blockquote>Best driver in town</blockquote>"
        )


class TestElementTree:
    def test_structure(self) -> None:
        items = render_elements(doc(para(text("a & b", 1))))
        assert items == [
            Element(tag="p", children=(Element(tag="strong", children=("a & b",)),)),
        ]

    def test_text_raw_in_tree(self) -> None:
        items = render_elements(doc({"type": "callout", "children": [text("<x>")]}))
        assert items == ["<x>"]


class TestPortableTextRendering:
    def test_render(self, portable_text_doc: list) -> None:
        assert render_html(portable_text_doc) == (
            "<h1>Airport Transfers</h1>"
            '<p><strong>Book </strong><a href="https://example.com/book">online</a></p>'
            "<ul><li>One</li><li>Two</li></ul>"
        )

    def test_forced_source(self, portable_text_doc: list) -> None:
        assert render_html(portable_text_doc, source="lexical") == ""

    def test_parse_document_detects(self, lexical_doc: dict, portable_text_doc: list) -> None:
        assert len(parse_document(lexical_doc).children) == 4
        assert len(parse_document(portable_text_doc).children) == 3


class TestConfig:
    def test_styled_classes(self) -> None:
        html = render_html(doc(para(text("x"))), styled_render_config())
        assert html == '<p class="mb-4">x</p>'

    def test_styled_link(self) -> None:
        value = doc(para({"type": "link", "url": "/a", "children": [text("x")]}))
        html = render_html(value, styled_render_config())
        assert html == (
            '<p class="mb-4"><a href="/a" class="text-primary hover:text-primary-dark underline">'
            "x</a></p>"
        )

    def test_heading_ids(self) -> None:
        value = doc({"type": "heading", "tag": "h2", "children": [text("Our Fleet!")]})
        html = render_html(value, RenderConfig(add_heading_ids=True))
        assert html == '<h2 id="our-fleet">Our Fleet!</h2>'

    def test_wrap_in_article(self) -> None:
        config = RenderConfig(wrap_in_article=True)
        assert render_html(doc(para(text("x"))), config) == "<article><p>x</p></article>"
        assert render_html(doc(), config) == ""

    def test_custom_rel(self) -> None:
        value = doc(para({"type": "link", "url": "/a", "newTab": True, "children": [text("x")]}))
        html = render_html(value, RenderConfig(new_tab_rel="noopener"))
        assert 'rel="noopener"' in html


class TestExtraction:
    def test_extract_text(self, lexical_doc: dict) -> None:
        assert extract_text(lexical_doc) == (
            "Airport Transfers\nBook a luxury ride online\ntoday.\nChoose\nRide\n"
            "Best driver in town"
        )

    def test_extract_text_empty(self) -> None:
        assert extract_text(None) == ""

    def test_extract_headings(self, lexical_doc: dict) -> None:
        assert extract_headings(lexical_doc) == [
            {"level": 1, "text": "Airport Transfers", "id": "airport-transfers"}
        ]

    def test_count_links(self, lexical_doc: dict) -> None:
        assert count_links(lexical_doc) == 1

    def test_count_words(self) -> None:
        assert count_words("") == 0
        assert count_words("one two  three") == 3


class TestPostRenderer:
    def test_render(self, renderer: PostRenderer, lexical_doc: dict) -> None:
        assert renderer.render(lexical_doc) == render_html(lexical_doc)

    def test_config_default(self, renderer: PostRenderer) -> None:
        assert renderer.config == RenderConfig()
