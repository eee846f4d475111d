"""
Lexical adapter - Payload CMS rich text JSON to the shared node model.

Expected shape: {"root": {"type": "root", "children": [...]}}

Key behaviors:
- Anything that is not a Lexical document parses to an empty root
- "link" and "autolink" are one case
- Unknown node types keep their children
- A node that cannot be read becomes InvalidNode; siblings still parse
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.core.services.richtext import (
    DEFAULT_LINK_URL,
    EMPTY_DOCUMENT,
    Format,
    HeadingNode,
    InvalidNode,
    LineBreakNode,
    LinkNode,
    ListItemNode,
    ListKind,
    ListNode,
    Node,
    ParagraphNode,
    QuoteNode,
    RootNode,
    TextNode,
    UnknownNode,
    heading_level,
)


def is_lexical(value: Any) -> bool:
    """Check whether a value looks like a Lexical document."""
    if not isinstance(value, Mapping):
        return False
    root = value.get("root")
    return isinstance(root, Mapping) and isinstance(root.get("children"), list)


def parse_lexical(value: Any) -> RootNode:
    """
    Parse a Lexical document.

    Args:
        value: Raw editor payload of unknown shape.

    Returns:
        RootNode; empty when value is not a Lexical document.
    """
    if not is_lexical(value):
        return EMPTY_DOCUMENT
    return RootNode(children=_parse_children(value["root"]))


def _parse_children(node: Mapping[str, Any]) -> tuple[Node, ...]:
    children = node.get("children")
    if not isinstance(children, list):
        return ()
    return tuple(parse_node(child) for child in children)


def _link_field(node: Mapping[str, Any], name: str, allow_empty: bool = True) -> Any:
    fields = node.get("fields")
    if isinstance(fields, Mapping):
        value = fields.get(name)
        if value is not None and (allow_empty or value):
            return value
    return node.get(name)


def parse_node(raw: Any) -> Node:
    """Parse one Lexical node (and its subtree)."""
    if not isinstance(raw, Mapping):
        return InvalidNode(type=type(raw).__name__, reason="node is not an object")

    node_type = raw.get("type")
    if not isinstance(node_type, str):
        node_type = ""

    try:
        return _parse_typed(node_type, raw)
    except (TypeError, ValueError) as e:
        return InvalidNode(type=node_type or "unknown", reason=str(e))


def _parse_typed(node_type: str, raw: Mapping[str, Any]) -> Node:
    if node_type == "text":
        text = raw.get("text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise TypeError(f"text must be a string, got {type(text).__name__}")
        return TextNode(text=text, format=Format.parse(raw.get("format")))

    if node_type == "linebreak":
        return LineBreakNode()

    if node_type in ("link", "autolink"):
        # An empty fields.url still falls back to the node-level url
        url = _link_field(raw, "url", allow_empty=False)
        new_tab = _link_field(raw, "newTab")
        if new_tab is None:
            new_tab = raw.get("opensNewTab")
        return LinkNode(
            url=url if isinstance(url, str) and url else DEFAULT_LINK_URL,
            opens_new_tab=new_tab is True,
            children=_parse_children(raw),
        )

    if node_type == "heading":
        level = raw.get("tag")
        if level is None:
            level = raw.get("level")
        return HeadingNode(level=heading_level(level), children=_parse_children(raw))

    if node_type == "paragraph":
        return ParagraphNode(children=_parse_children(raw))

    if node_type == "list":
        kind = raw.get("listType")
        if kind is None:
            kind = raw.get("kind")
        return ListNode(
            kind=ListKind.NUMBER if kind == "number" else ListKind.BULLET,
            children=_parse_children(raw),
        )

    if node_type == "listitem":
        return ListItemNode(children=_parse_children(raw))

    if node_type == "quote":
        return QuoteNode(children=_parse_children(raw))

    if node_type == "root":
        return RootNode(children=_parse_children(raw))

    return UnknownNode(type=node_type or "unknown", children=_parse_children(raw))
