"""
Post SSR Renderer Service - Render rich text to HTML.

Handles conversion of rich text documents (Lexical JSON or Portable Text)
to semantic HTML for SSR, or to a structured element tree.

Key behaviors:
- One depth-first walk over the shared node model
- Each child yields a NodeOutcome (Rendered or Skipped); skips are logged
  and never abort the rest of the document
- Text is escaped before any format tag is applied
- Format tags nest code innermost, then strong, em, u, s outermost
- Links only get target/rel when they ask to open in a new tab
- Absent or unrecognised input renders as empty output; nothing raises
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from src.core.services.lexical import is_lexical, parse_lexical
from src.core.services.portable_text import is_portable_text, parse_portable_text
from src.core.services.richtext import (
    DEFAULT_HEADING_LEVEL,
    DEFAULT_LINK_URL,
    EMPTY_DOCUMENT,
    FORBIDDEN_PROTOCOLS,
    Element,
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
    children_of,
    format_tags,
    is_blank,
    is_safe_url,
    items_to_html,
    walk,
)

logger = logging.getLogger(__name__)

SOURCES = ("auto", "lexical", "portable_text")

Item = Union[Element, str]

# --- Configuration ---


@dataclass(frozen=True)
class RenderConfig:
    """Rendering configuration."""

    # Tag name -> CSS class; empty renders plain HTML
    class_names: Mapping[str, str] = field(default_factory=dict)

    new_tab_rel: str = "noopener noreferrer"
    add_heading_ids: bool = False
    wrap_in_article: bool = False
    forbid_protocols: frozenset[str] = FORBIDDEN_PROTOCOLS


# Utility classes used by the public site templates
STYLED_CLASS_NAMES: dict[str, str] = {
    "p": "mb-4",
    "h1": "text-4xl font-bold mb-6 mt-8",
    "h2": "text-3xl font-bold mb-5 mt-7",
    "h3": "text-2xl font-bold mb-4 mt-6",
    "h4": "text-xl font-bold mb-3 mt-5",
    "h5": "text-lg font-bold mb-2 mt-4",
    "h6": "text-base font-bold mb-2 mt-3",
    "ul": "list-disc list-inside mb-4 ml-4",
    "ol": "list-decimal list-inside mb-4 ml-4",
    "li": "mb-2",
    "blockquote": "border-l-4 border-primary pl-4 italic my-4",
    "a": "text-primary hover:text-primary-dark underline",
}

DEFAULT_RENDER_CONFIG = RenderConfig()
PLAIN_RENDER_CONFIG = DEFAULT_RENDER_CONFIG


def styled_render_config(**overrides: Any) -> RenderConfig:
    """Config carrying the site's utility classes."""
    return RenderConfig(class_names=dict(STYLED_CLASS_NAMES), **overrides)


# --- Node Outcomes ---


@dataclass(frozen=True)
class Rendered:
    items: tuple[Item, ...]


@dataclass(frozen=True)
class Skipped:
    index: int
    node_type: str
    detail: str


NodeOutcome = Union[Rendered, Skipped]


# --- Parsing ---


def parse_document(value: Any, source: str = "auto") -> RootNode:
    """
    Parse an editor payload into the shared node model.

    Args:
        value: Lexical JSON ({"root": ...}) or a Portable Text block list.
        source: "auto", "lexical" or "portable_text".

    Returns:
        RootNode; empty for absent or unrecognised input.
    """
    if isinstance(value, RootNode):
        return value
    if source == "lexical" or (source == "auto" and is_lexical(value)):
        return parse_lexical(value)
    if source == "portable_text" or (source == "auto" and is_portable_text(value)):
        return parse_portable_text(value)
    return EMPTY_DOCUMENT


def detect_source(value: Any) -> str | None:
    """Name the document format of a payload, or None."""
    if is_lexical(value):
        return "lexical"
    if is_portable_text(value):
        return "portable_text"
    return None


# --- Node Renderers ---


def _slugify(text: str) -> str:
    """Create URL-safe slug from text."""
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _element(
    tag: str,
    children: tuple[Item, ...],
    config: RenderConfig,
    attrs: tuple[tuple[str, str], ...] = (),
) -> Element:
    css_class = config.class_names.get(tag)
    if css_class:
        attrs = attrs + (("class", css_class),)
    return Element(tag=tag, attrs=attrs, children=children)


def render_text(node: TextNode, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> tuple[Item, ...]:
    """Render a text leaf wrapped in its format tags."""
    if not node.text:
        return ()

    item: Item = node.text
    for tag in format_tags(node.format):
        item = Element(tag=tag, children=(item,))
    return (item,)


def render_link(node: LinkNode, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> tuple[Item, ...]:
    href = node.url or DEFAULT_LINK_URL
    if not is_safe_url(href, config.forbid_protocols):
        logger.warning("Replaced unsafe link target: %s", href[:50])
        href = DEFAULT_LINK_URL

    attrs: tuple[tuple[str, str], ...] = (("href", href),)
    if node.opens_new_tab:
        attrs += (("target", "_blank"), ("rel", config.new_tab_rel))

    content = render_children(node.children, config)
    return (_element("a", content, config, attrs),)


def render_heading(
    node: HeadingNode,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> tuple[Item, ...]:
    level = node.level if 1 <= node.level <= 6 else DEFAULT_HEADING_LEVEL
    tag = f"h{level}"
    content = render_children(node.children, config)

    attrs: tuple[tuple[str, str], ...] = ()
    if config.add_heading_ids:
        heading_id = _slugify(_text_of(node))
        if heading_id:
            attrs = (("id", heading_id),)
    return (_element(tag, content, config, attrs),)


def render_paragraph(
    node: ParagraphNode,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> tuple[Item, ...]:
    """Render a paragraph; blank paragraphs render as nothing."""
    content = render_children(node.children, config)
    if is_blank(content):
        return ()
    return (_element("p", content, config),)


def render_list(node: ListNode, config: RenderConfig = DEFAULT_RENDER_CONFIG) -> tuple[Item, ...]:
    tag = "ol" if node.kind == ListKind.NUMBER else "ul"
    return (_element(tag, render_children(node.children, config), config),)


def _render(node: Node, config: RenderConfig) -> tuple[Item, ...]:
    if isinstance(node, TextNode):
        return render_text(node, config)
    if isinstance(node, LineBreakNode):
        return (Element(tag="br"),)
    if isinstance(node, LinkNode):
        return render_link(node, config)
    if isinstance(node, HeadingNode):
        return render_heading(node, config)
    if isinstance(node, ParagraphNode):
        return render_paragraph(node, config)
    if isinstance(node, ListNode):
        return render_list(node, config)
    if isinstance(node, ListItemNode):
        return (_element("li", render_children(node.children, config), config),)
    if isinstance(node, QuoteNode):
        return (_element("blockquote", render_children(node.children, config), config),)

    # Root and unknown types: children only
    return render_children(children_of(node), config)


def render_node(
    node: Node,
    index: int = 0,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> NodeOutcome:
    """Render one node, turning any failure into a Skipped outcome."""
    node_type = getattr(node, "type", type(node).__name__)
    if isinstance(node, InvalidNode):
        return Skipped(index=index, node_type=node_type, detail=node.reason)

    try:
        return Rendered(items=_render(node, config))
    except Exception as e:
        return Skipped(index=index, node_type=node_type, detail=f"{type(e).__name__}: {e}")


def render_children(
    children: tuple[Node, ...],
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
) -> tuple[Item, ...]:
    """Render children in order, logging and dropping skipped ones."""
    items: list[Item] = []
    for index, child in enumerate(children):
        outcome = render_node(child, index, config)
        if isinstance(outcome, Skipped):
            logger.warning(
                "Skipped %s node at index %d: %s",
                outcome.node_type,
                outcome.index,
                outcome.detail,
            )
            continue
        items.extend(outcome.items)
    return tuple(items)


# --- Text Extraction ---

_BLOCK_NODES = (ParagraphNode, HeadingNode, QuoteNode, ListNode, ListItemNode)


def _text_of(node: Node) -> str:
    """Plain text of a subtree; blocks on their own lines."""
    if isinstance(node, TextNode):
        return node.text
    if isinstance(node, LineBreakNode):
        return "\n"
    if isinstance(node, InvalidNode):
        return ""

    lines: list[str] = []
    inline = ""
    for child in children_of(node):
        if isinstance(child, _BLOCK_NODES):
            if inline:
                lines.append(inline)
                inline = ""
            text = _text_of(child)
            if text:
                lines.append(text)
        else:
            inline += _text_of(child)
    if inline:
        lines.append(inline)
    return "\n".join(lines)


# --- Main Rendering Functions ---


def render_elements(
    value: Any,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
    source: str = "auto",
) -> list[Item]:
    """
    Render a document to a list of presentation elements.

    Args:
        value: Editor payload (or an already parsed RootNode).
        config: Rendering configuration.
        source: Document format hint; see parse_document.

    Returns:
        Elements and text strings in document order; [] for empty input.
    """
    try:
        root = parse_document(value, source)
        items = render_children(root.children, config)
    except Exception:
        logger.exception("Rich text render failed; returning empty output")
        return []

    if config.wrap_in_article and items:
        return [Element(tag="article", children=items)]
    return list(items)


def render_html(
    value: Any,
    config: RenderConfig = DEFAULT_RENDER_CONFIG,
    source: str = "auto",
) -> str:
    """
    Render a document to an HTML string.

    Returns "" for absent, empty or unrecognised input.
    """
    return items_to_html(render_elements(value, config, source))


def extract_text(value: Any, source: str = "auto") -> str:
    """Extract plain text from a document."""
    return _text_of(parse_document(value, source)).strip()


def extract_headings(value: Any, source: str = "auto") -> list[dict[str, Any]]:
    """Extract headings for table of contents."""
    headings: list[dict[str, Any]] = []
    for node in walk(parse_document(value, source)):
        if isinstance(node, HeadingNode):
            text = _text_of(node).strip()
            headings.append({"level": node.level, "text": text, "id": _slugify(text)})
    return headings


def count_links(value: Any, source: str = "auto") -> int:
    """Count links in document."""
    return sum(1 for node in walk(parse_document(value, source)) if isinstance(node, LinkNode))


def count_words(text: str) -> int:
    """Count words in plain text."""
    if not text:
        return 0
    return len(text.split())


# --- Post Renderer Service ---


class PostRenderer:
    """
    Post renderer service.

    Renders post content from rich text documents to HTML. Holds only its
    config, so one instance can serve concurrent requests.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or DEFAULT_RENDER_CONFIG

    @property
    def config(self) -> RenderConfig:
        return self._config

    def render(self, doc: Any, source: str = "auto") -> str:
        """Render document to HTML."""
        return render_html(doc, self._config, source)

    def render_elements(self, doc: Any, source: str = "auto") -> list[Item]:
        """Render document to an element tree."""
        return render_elements(doc, self._config, source)

    def extract_text(self, doc: Any, source: str = "auto") -> str:
        """Extract plain text from document."""
        return extract_text(doc, source)

    def extract_headings(self, doc: Any, source: str = "auto") -> list[dict[str, Any]]:
        """Extract headings for table of contents."""
        return extract_headings(doc, source)

    def count_links(self, doc: Any, source: str = "auto") -> int:
        return count_links(doc, source)


# --- Factory ---


def create_post_renderer(config: RenderConfig | None = None) -> PostRenderer:
    """Create a PostRenderer."""
    return PostRenderer(config=config)
