"""
Portable Text adapter - Sanity block arrays to and from the shared node model.

Key behaviors:
- Block styles map to paragraph, heading (h1-h6) and quote nodes
- Consecutive list blocks are grouped into lists; level > 1 nests
- Decorator marks map to format bits; link markDefs wrap spans in links
- to_portable_text() is the Lexical -> Portable Text migration path,
  with per-call deterministic keys
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from src.core.services.lexical import parse_lexical
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
    children_of,
)

logger = logging.getLogger(__name__)

DECORATOR_TO_FORMAT: dict[str, Format] = {
    "strong": Format.BOLD,
    "em": Format.ITALIC,
    "strike-through": Format.STRIKETHROUGH,
    "underline": Format.UNDERLINE,
    "code": Format.CODE,
}

# Order marks are emitted in when writing Portable Text
FORMAT_TO_DECORATOR: tuple[tuple[Format, str], ...] = (
    (Format.BOLD, "strong"),
    (Format.ITALIC, "em"),
    (Format.STRIKETHROUGH, "strike-through"),
    (Format.UNDERLINE, "underline"),
    (Format.CODE, "code"),
)

HEADING_STYLES = {f"h{level}": level for level in range(1, 7)}


def is_portable_text(value: Any) -> bool:
    """Check whether a value looks like a Portable Text block array."""
    return isinstance(value, list)


# --- Parsing ---


def parse_portable_text(value: Any) -> RootNode:
    """
    Parse a Portable Text block array.

    Args:
        value: Raw block array of unknown shape.

    Returns:
        RootNode; empty when value is not a list.
    """
    if not is_portable_text(value):
        return EMPTY_DOCUMENT

    children: list[Node] = []
    list_run: list[tuple[ListKind, int, tuple[Node, ...]]] = []

    for raw in value:
        entry = _list_entry(raw)
        if entry is not None:
            list_run.append(entry)
            continue
        if list_run:
            children.extend(_build_lists(list_run))
            list_run = []
        children.append(parse_block(raw))

    if list_run:
        children.extend(_build_lists(list_run))

    return RootNode(children=tuple(children))


def parse_block(raw: Any) -> Node:
    """Parse a single non-list block."""
    if not isinstance(raw, Mapping):
        return InvalidNode(type=type(raw).__name__, reason="block is not an object")

    block_type = raw.get("_type")
    if block_type != "block":
        return UnknownNode(type=block_type if isinstance(block_type, str) else "unknown")

    try:
        inline = _parse_inline(raw)
    except (TypeError, ValueError) as e:
        return InvalidNode(type="block", reason=str(e))

    style = raw.get("style") or "normal"
    if style in HEADING_STYLES:
        return HeadingNode(level=HEADING_STYLES[style], children=inline)
    if style == "blockquote":
        return QuoteNode(children=inline)
    return ParagraphNode(children=inline)


def _list_entry(raw: Any) -> tuple[ListKind, int, tuple[Node, ...]] | None:
    if not isinstance(raw, Mapping) or raw.get("_type") != "block":
        return None
    list_item = raw.get("listItem")
    if not list_item:
        return None

    kind = ListKind.NUMBER if list_item == "number" else ListKind.BULLET
    level = raw.get("level")
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        level = 1

    try:
        inline: tuple[Node, ...] = _parse_inline(raw)
    except (TypeError, ValueError) as e:
        inline = (InvalidNode(type="block", reason=str(e)),)
    return kind, level, inline


@dataclass
class _ListBuilder:
    kind: ListKind
    level: int
    items: list[list[Union[Node, _ListBuilder]]] = field(default_factory=list)

    def freeze(self) -> ListNode:
        return ListNode(
            kind=self.kind,
            children=tuple(
                ListItemNode(
                    children=tuple(
                        child.freeze() if isinstance(child, _ListBuilder) else child
                        for child in item
                    )
                )
                for item in self.items
            ),
        )


def _build_lists(run: list[tuple[ListKind, int, tuple[Node, ...]]]) -> list[ListNode]:
    """Group flat list blocks into (possibly nested) lists."""
    top: list[_ListBuilder] = []
    stack: list[_ListBuilder] = []

    for kind, level, inline in run:
        while stack and (
            stack[-1].level > level or (stack[-1].level == level and stack[-1].kind != kind)
        ):
            stack.pop()

        if stack and stack[-1].level == level:
            stack[-1].items.append(list(inline))
            continue

        builder = _ListBuilder(kind=kind, level=level, items=[list(inline)])
        if stack:
            stack[-1].items[-1].append(builder)
        else:
            top.append(builder)
        stack.append(builder)

    return [builder.freeze() for builder in top]


def _parse_inline(block: Mapping[str, Any]) -> tuple[Node, ...]:
    """Parse a block's children into inline nodes, grouping link spans."""
    children = block.get("children") or []
    if not isinstance(children, list):
        raise TypeError("block children must be a list")

    links = _link_defs(block.get("markDefs") or [])

    # (link key, nodes) runs; adjacent spans under the same link share one LinkNode
    runs: list[tuple[str | None, list[Node]]] = []
    for raw in children:
        link_key, nodes = _parse_child(raw, links)
        if runs and link_key is not None and runs[-1][0] == link_key:
            runs[-1][1].extend(nodes)
        else:
            runs.append((link_key, list(nodes)))

    result: list[Node] = []
    for link_key, nodes in runs:
        if link_key is None:
            result.extend(nodes)
        else:
            href, blank = links[link_key]
            result.append(LinkNode(url=href, opens_new_tab=blank, children=tuple(nodes)))
    return tuple(result)


def _link_defs(mark_defs: Any) -> dict[str, tuple[str, bool]]:
    links: dict[str, tuple[str, bool]] = {}
    if not isinstance(mark_defs, list):
        return links
    for mark_def in mark_defs:
        if not isinstance(mark_def, Mapping) or mark_def.get("_type") != "link":
            continue
        key = mark_def.get("_key")
        if not isinstance(key, str):
            continue
        href = mark_def.get("href")
        links[key] = (
            href if isinstance(href, str) and href else DEFAULT_LINK_URL,
            mark_def.get("blank") is True,
        )
    return links


def _parse_child(
    raw: Any,
    links: dict[str, tuple[str, bool]],
) -> tuple[str | None, list[Node]]:
    if not isinstance(raw, Mapping):
        return None, [InvalidNode(type=type(raw).__name__, reason="span is not an object")]

    child_type = raw.get("_type")
    if child_type == "break":
        return None, [LineBreakNode()]
    if child_type != "span":
        return None, [UnknownNode(type=child_type if isinstance(child_type, str) else "unknown")]

    text = raw.get("text") or ""
    marks = raw.get("marks") or []
    if not isinstance(text, str) or not isinstance(marks, list):
        return None, [InvalidNode(type="span", reason="span text or marks malformed")]

    fmt = Format.NONE
    link_key: str | None = None
    for mark in marks:
        if not isinstance(mark, str):
            continue
        if mark in DECORATOR_TO_FORMAT:
            fmt |= DECORATOR_TO_FORMAT[mark]
        elif mark in links and link_key is None:
            link_key = mark

    nodes: list[Node] = []
    for i, line in enumerate(text.split("\n")):
        if i:
            nodes.append(LineBreakNode())
        if line:
            nodes.append(TextNode(text=line, format=fmt))
    return link_key, nodes


# --- Writing ---


def _span(key: str, text: str = "", marks: list[str] | None = None) -> dict[str, Any]:
    return {"_type": "span", "_key": key, "text": text, "marks": marks or []}


class _Writer:
    """Accumulates Portable Text blocks for one conversion call."""

    def __init__(self) -> None:
        self._keys: Iterator[int] = itertools.count()

    def key(self) -> str:
        return f"k{next(self._keys)}"

    def block(
        self,
        inline_nodes: tuple[Node, ...],
        style: str = "normal",
        **extra: Any,
    ) -> dict[str, Any]:
        children: list[dict[str, Any]] = []
        mark_defs: list[dict[str, Any]] = []
        self.inline(inline_nodes, children, mark_defs, [])
        block: dict[str, Any] = {
            "_type": "block",
            "_key": self.key(),
            "style": style,
            "markDefs": mark_defs,
            "children": children or [_span(self.key())],
        }
        block.update(extra)
        return block

    def inline(
        self,
        nodes: tuple[Node, ...],
        children: list[dict[str, Any]],
        mark_defs: list[dict[str, Any]],
        inherited: list[str],
    ) -> None:
        for node in nodes:
            if isinstance(node, TextNode):
                marks = inherited + [
                    name for flag, name in FORMAT_TO_DECORATOR if node.format & flag
                ]
                children.append(_span(self.key(), node.text, marks))
            elif isinstance(node, LineBreakNode):
                children.append({"_type": "break", "_key": self.key()})
            elif isinstance(node, LinkNode):
                mark_key = self.key()
                mark_def: dict[str, Any] = {"_type": "link", "_key": mark_key, "href": node.url}
                if node.opens_new_tab:
                    mark_def["blank"] = True
                mark_defs.append(mark_def)
                self.inline(node.children, children, mark_defs, inherited + [mark_key])
            elif isinstance(node, InvalidNode):
                logger.warning("Dropping unreadable %s node: %s", node.type, node.reason)
            else:
                self.inline(children_of(node), children, mark_defs, inherited)

    def blocks(self, node: Node, level: int = 0) -> list[dict[str, Any]]:
        if isinstance(node, (TextNode, LinkNode)):
            return [self.block((node,))]
        if isinstance(node, LineBreakNode):
            return [
                {
                    "_type": "block",
                    "_key": self.key(),
                    "style": "normal",
                    "markDefs": [],
                    "children": [{"_type": "break", "_key": self.key()}],
                }
            ]
        if isinstance(node, ParagraphNode):
            return [self.block(node.children)]
        if isinstance(node, HeadingNode):
            return [self.block(node.children, style=f"h{node.level}")]
        if isinstance(node, QuoteNode):
            return [self.block(node.children, style="blockquote")]
        if isinstance(node, ListNode):
            result: list[dict[str, Any]] = []
            for child in node.children:
                if isinstance(child, ListItemNode):
                    result.extend(self.list_item(child, node.kind, level + 1))
                else:
                    result.extend(self.blocks(child, level))
            return result
        if isinstance(node, ListItemNode):
            return self.list_item(node, ListKind.BULLET, level + 1)
        if isinstance(node, InvalidNode):
            logger.warning("Dropping unreadable %s node: %s", node.type, node.reason)
            return []

        result = []
        for child in children_of(node):
            result.extend(self.blocks(child, level))
        return result

    def list_item(self, item: ListItemNode, kind: ListKind, level: int) -> list[dict[str, Any]]:
        inline = tuple(child for child in item.children if not isinstance(child, ListNode))
        nested = [child for child in item.children if isinstance(child, ListNode)]

        result = [self.block(inline, listItem=kind.value, level=level)]
        for child in nested:
            result.extend(self.blocks(child, level))
        return result


def to_portable_text(root: Node) -> list[dict[str, Any]]:
    """
    Convert a parsed document to Portable Text blocks.

    Keys are k0, k1, ... in document order, so identical input
    always produces identical output.
    """
    return _Writer().blocks(root)


def lexical_to_portable_text(value: Any) -> list[dict[str, Any]]:
    """Migrate a Lexical document to Portable Text."""
    return to_portable_text(parse_lexical(value))
