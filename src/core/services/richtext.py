"""
Rich text document model.

The shared node model both CMS adapters (Lexical, Portable Text) parse into,
plus the leaf helpers the renderer builds on.

Key behaviors:
- Nodes are a closed set of frozen dataclasses plus two open cases:
  UnknownNode (unrecognised type, children kept) and InvalidNode
  (unreadable payload, rendered as skipped)
- Inline formatting is an integer bitmask applied in one fixed order
- Text is escaped for &, <, >, " before any tag is wrapped around it
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Any, Union

# --- Inline Formatting ---


class Format(IntFlag):
    """Inline style bits as stored by the editor."""

    NONE = 0
    BOLD = 1
    ITALIC = 2
    STRIKETHROUGH = 4
    UNDERLINE = 8
    CODE = 16

    @classmethod
    def parse(cls, value: Any) -> Format:
        """
        Read a format bitmask from an untyped payload.

        None means no formatting. Bits outside the five known styles
        (subscript, highlight, ...) are dropped.

        Raises:
            ValueError: If value is not a non-negative integer.
        """
        if value is None:
            return cls.NONE
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"format must be an integer bitmask, got {value!r}")
        if value < 0:
            raise ValueError(f"format must be non-negative, got {value}")
        return cls(value & _KNOWN_BITS)


_KNOWN_BITS = 31

# Innermost first: code sits closest to the text, strikethrough outermost.
FORMAT_ORDER: tuple[tuple[Format, str], ...] = (
    (Format.CODE, "code"),
    (Format.BOLD, "strong"),
    (Format.ITALIC, "em"),
    (Format.UNDERLINE, "u"),
    (Format.STRIKETHROUGH, "s"),
)


class ListKind(str, Enum):
    BULLET = "bullet"
    NUMBER = "number"


DEFAULT_HEADING_LEVEL = 2
DEFAULT_LINK_URL = "#"

FORBIDDEN_PROTOCOLS: frozenset[str] = frozenset(["javascript:", "data:", "vbscript:"])


# --- Nodes ---


@dataclass(frozen=True)
class TextNode:
    text: str
    format: Format = Format.NONE

    type = "text"


@dataclass(frozen=True)
class LineBreakNode:
    type = "linebreak"


@dataclass(frozen=True)
class LinkNode:
    url: str = DEFAULT_LINK_URL
    opens_new_tab: bool = False
    children: tuple[Node, ...] = ()

    type = "link"


@dataclass(frozen=True)
class HeadingNode:
    level: int = DEFAULT_HEADING_LEVEL
    children: tuple[Node, ...] = ()

    type = "heading"


@dataclass(frozen=True)
class ParagraphNode:
    children: tuple[Node, ...] = ()

    type = "paragraph"


@dataclass(frozen=True)
class ListItemNode:
    children: tuple[Node, ...] = ()

    type = "listitem"


@dataclass(frozen=True)
class ListNode:
    kind: ListKind = ListKind.BULLET
    children: tuple[Node, ...] = ()

    type = "list"


@dataclass(frozen=True)
class QuoteNode:
    children: tuple[Node, ...] = ()

    type = "quote"


@dataclass(frozen=True)
class RootNode:
    children: tuple[Node, ...] = ()

    type = "root"


@dataclass(frozen=True)
class UnknownNode:
    """A node type this renderer does not know; only its children render."""

    type: str
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class InvalidNode:
    """A node whose payload could not be read. Always skipped."""

    type: str
    reason: str


Node = Union[
    TextNode,
    LineBreakNode,
    LinkNode,
    HeadingNode,
    ParagraphNode,
    ListNode,
    ListItemNode,
    QuoteNode,
    RootNode,
    UnknownNode,
    InvalidNode,
]

EMPTY_DOCUMENT = RootNode()


def children_of(node: Node) -> tuple[Node, ...]:
    """Return a node's children, or () for leaves."""
    children: tuple[Node, ...] = getattr(node, "children", ())
    return children


def count_nodes(node: Node) -> int:
    """Count nodes in a tree, the node itself included."""
    return 1 + sum(count_nodes(child) for child in children_of(node))


def walk(node: Node) -> list[Node]:
    """Depth-first, document-order list of every node under (and including) node."""
    result: list[Node] = [node]
    for child in children_of(node):
        result.extend(walk(child))
    return result


def heading_level(value: Any) -> int:
    """
    Coerce a heading level from "h3", "3" or 3.

    Returns DEFAULT_HEADING_LEVEL when absent or outside 1-6.
    """
    if isinstance(value, bool):
        return DEFAULT_HEADING_LEVEL
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw.startswith("h"):
            raw = raw[1:]
        # isdigit() also accepts superscripts and other non-ASCII digits int() rejects
        if not (raw.isascii() and raw.isdecimal()):
            return DEFAULT_HEADING_LEVEL
        value = int(raw)
    if isinstance(value, int) and 1 <= value <= 6:
        return value
    return DEFAULT_HEADING_LEVEL


# --- Escaping and Formatting ---


def escape(text: str) -> str:
    """Escape &, <, > and " for HTML text and attribute values."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def format_tags(fmt: Format) -> list[str]:
    """Tags to wrap for a bitmask, innermost first."""
    return [tag for flag, tag in FORMAT_ORDER if fmt & flag]


def apply_format(content: str, fmt: Format) -> str:
    """Wrap already-escaped content in the tags for each set bit."""
    for tag in format_tags(fmt):
        content = f"<{tag}>{content}</{tag}>"
    return content


def is_safe_url(url: str, forbid_protocols: frozenset[str] = FORBIDDEN_PROTOCOLS) -> bool:
    """Check a link target does not use a forbidden protocol."""
    if not url:
        return True

    # Browsers ignore embedded whitespace/control chars in the scheme
    compact = "".join(ch for ch in url if ch > " ").lower()
    return not any(compact.startswith(protocol) for protocol in forbid_protocols)


# --- Presentation Tree ---

VOID_TAGS = frozenset(["br", "hr", "img"])


@dataclass(frozen=True)
class Element:
    """
    A presentation element produced by the tree renderer.

    Text children are kept raw and escaped when serialised.
    """

    tag: str
    attrs: tuple[tuple[str, str], ...] = ()
    children: tuple[Element | str, ...] = field(default_factory=tuple)

    def to_html(self) -> str:
        """Serialise to an HTML string."""
        attr_html = "".join(f' {name}="{escape(value)}"' for name, value in self.attrs)
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attr_html} />"
        inner = items_to_html(self.children)
        return f"<{self.tag}{attr_html}>{inner}</{self.tag}>"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        return {
            "tag": self.tag,
            "attrs": dict(self.attrs),
            "children": [
                child.to_dict() if isinstance(child, Element) else child
                for child in self.children
            ],
        }


def items_to_html(items: tuple[Element | str, ...] | list[Element | str]) -> str:
    """Serialise a sequence of elements and text strings."""
    return "".join(
        item.to_html() if isinstance(item, Element) else escape(item) for item in items
    )


# Inline tags that add no visible content of their own
_FORMAT_TAGS = frozenset(tag for _, tag in FORMAT_ORDER)


def is_blank(items: tuple[Element | str, ...] | list[Element | str]) -> bool:
    """True when items show nothing: whitespace text, possibly inside format tags."""
    for item in items:
        if isinstance(item, Element):
            if item.tag not in _FORMAT_TAGS or not is_blank(item.children):
                return False
        elif item.strip():
            return False
    return True
