"""
Tests for the Lexical adapter.
"""

from __future__ import annotations

import pytest

from src.components.richtext import (
    Format,
    HeadingNode,
    InvalidNode,
    LineBreakNode,
    LinkNode,
    ListKind,
    ListNode,
    ParagraphNode,
    RootNode,
    TextNode,
    UnknownNode,
    is_lexical,
    parse_lexical,
)
from src.core.services.lexical import parse_node


class TestDocumentShape:
    @pytest.mark.parametrize("value", [None, "", "text", 42, [], {}, {"root": None}, {"root": {}}])
    def test_non_documents_parse_empty(self, value: object) -> None:
        assert parse_lexical(value) == RootNode()

    def test_is_lexical(self, lexical_doc: dict) -> None:
        assert is_lexical(lexical_doc) is True
        assert is_lexical({"root": {"children": "nope"}}) is False

    def test_top_level_order_preserved(self, lexical_doc: dict) -> None:
        root = parse_lexical(lexical_doc)
        assert [child.type for child in root.children] == ["heading", "paragraph", "list", "quote"]


class TestNodes:
    def test_text(self) -> None:
        node = parse_node({"type": "text", "text": "hi", "format": 5})
        assert node == TextNode(text="hi", format=Format.BOLD | Format.STRIKETHROUGH)

    def test_text_without_format(self) -> None:
        assert parse_node({"type": "text", "text": "hi"}) == TextNode(text="hi")

    def test_linebreak(self) -> None:
        assert parse_node({"type": "linebreak"}) == LineBreakNode()

    def test_heading_tag_forms(self) -> None:
        assert parse_node({"type": "heading", "tag": "h3"}).level == 3
        assert parse_node({"type": "heading", "tag": 4}).level == 4
        assert parse_node({"type": "heading", "level": 5}).level == 5

    def test_heading_out_of_range_defaults(self) -> None:
        assert parse_node({"type": "heading", "level": 9}) == HeadingNode(level=2)
        assert parse_node({"type": "heading"}) == HeadingNode(level=2)

    def test_list_kinds(self) -> None:
        assert parse_node({"type": "list", "listType": "number"}).kind == ListKind.NUMBER
        assert parse_node({"type": "list", "kind": "number"}).kind == ListKind.NUMBER
        assert parse_node({"type": "list", "listType": "check"}).kind == ListKind.BULLET
        assert parse_node({"type": "list"}) == ListNode(kind=ListKind.BULLET)

    def test_link_fields(self) -> None:
        node = parse_node(
            {
                "type": "link",
                "fields": {"url": "https://a.test", "newTab": True},
                "children": [{"type": "text", "text": "a"}],
            }
        )
        assert node == LinkNode(
            url="https://a.test", opens_new_tab=True, children=(TextNode(text="a"),)
        )

    def test_link_top_level_url(self) -> None:
        node = parse_node({"type": "link", "url": "/fleet", "opensNewTab": True})
        assert node.url == "/fleet"
        assert node.opens_new_tab is True

    def test_link_empty_field_url_falls_back(self) -> None:
        node = parse_node(
            {
                "type": "link",
                "fields": {"url": "", "newTab": False},
                "url": "https://x.test",
                "newTab": True,
            }
        )
        assert node.url == "https://x.test"
        assert node.opens_new_tab is False

    def test_link_defaults(self) -> None:
        node = parse_node({"type": "link", "fields": {"newTab": "yes"}})
        assert node.url == "#"
        assert node.opens_new_tab is False

    def test_autolink_is_link(self) -> None:
        node = parse_node({"type": "autolink", "url": "https://a.test"})
        assert isinstance(node, LinkNode)

    def test_unknown_type_keeps_children(self) -> None:
        node = parse_node(
            {"type": "callout", "children": [{"type": "paragraph", "children": []}]}
        )
        assert node == UnknownNode(type="callout", children=(ParagraphNode(),))


class TestMalformedNodes:
    def test_non_object(self) -> None:
        node = parse_node(42)
        assert isinstance(node, InvalidNode)
        assert node.type == "int"

    def test_bad_format(self) -> None:
        node = parse_node({"type": "text", "text": "x", "format": "bold"})
        assert isinstance(node, InvalidNode)
        assert node.type == "text"

    def test_bad_text(self) -> None:
        assert isinstance(parse_node({"type": "text", "text": 7}), InvalidNode)

    def test_siblings_unaffected(self) -> None:
        root = parse_lexical(
            {
                "root": {
                    "children": [
                        {"type": "paragraph", "children": [{"type": "text", "text": "a"}]},
                        None,
                        {"type": "paragraph", "children": [{"type": "text", "text": "b"}]},
                    ]
                }
            }
        )
        assert [type(c).__name__ for c in root.children] == [
            "ParagraphNode",
            "InvalidNode",
            "ParagraphNode",
        ]
