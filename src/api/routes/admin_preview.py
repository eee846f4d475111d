"""
Admin Preview API Routes.

Provides preview endpoints for CMS content before publishing.

Key behaviors:
- Preview renders exactly what public pages render (same renderer, same rules)
- Malformed documents still preview; bad nodes are dropped, not rejected
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.adapters.render_rules import RulesRenderAdapter
from src.api.deps import get_render_rules
from src.components.render_posts import (
    PostRenderer,
    RenderConfig,
    count_words,
    detect_source,
)
from src.components.richtext import ConvertToPortableTextInput, run_convert

router = APIRouter()

Source = Literal["auto", "lexical", "portable_text"]


# --- Request/Response Models ---


class PreviewRequest(BaseModel):
    """Request to preview rich text content."""

    document: Any = Field(default=None, description="Lexical JSON or Portable Text blocks")
    source: Source | None = Field(default=None, description="Document format; rules default")
    styled: bool = Field(default=False, description="Add site CSS classes")
    wrap_in_article: bool | None = Field(default=None, description="Wrap in <article> tag")
    add_heading_ids: bool | None = Field(default=None, description="Add IDs to headings")


class PreviewResponse(BaseModel):
    """Preview response with rendered HTML."""

    html: str
    plain_text: str
    headings: list[dict[str, Any]]
    word_count: int
    link_count: int
    source: str | None


class ElementsResponse(BaseModel):
    """Preview response with the rendered element tree."""

    elements: list[Any]


class ConvertRequest(BaseModel):
    """Request to convert a Lexical document to Portable Text."""

    document: Any = Field(default=None, description="Lexical JSON document")


class ConvertResponse(BaseModel):
    blocks: list[dict[str, Any]]
    errors: list[dict[str, Any]]


# --- Helper Functions ---


def _build_renderer(request: PreviewRequest, rules: RulesRenderAdapter) -> PostRenderer:
    base = rules.build_config(styled=request.styled)
    config = RenderConfig(
        class_names=base.class_names,
        new_tab_rel=base.new_tab_rel,
        forbid_protocols=base.forbid_protocols,
        wrap_in_article=(
            base.wrap_in_article if request.wrap_in_article is None else request.wrap_in_article
        ),
        add_heading_ids=(
            base.add_heading_ids if request.add_heading_ids is None else request.add_heading_ids
        ),
    )
    return PostRenderer(config=config)


def _resolve_source(request: PreviewRequest, rules: RulesRenderAdapter) -> str:
    return request.source or rules.get_default_source()


# --- Routes ---


@router.post("/preview", response_model=PreviewResponse)
def preview_rich_text(
    request: PreviewRequest,
    rules: RulesRenderAdapter = Depends(get_render_rules),
) -> PreviewResponse:
    """
    Preview rich text content.

    Renders the same way as public pages for content parity.
    """
    renderer = _build_renderer(request, rules)
    doc = request.document

    source = _resolve_source(request, rules)
    html = renderer.render(doc, source)
    plain_text = renderer.extract_text(doc, source)

    return PreviewResponse(
        html=html,
        plain_text=plain_text,
        headings=renderer.extract_headings(doc, source),
        word_count=count_words(plain_text),
        link_count=renderer.count_links(doc, source),
        source=source if source != "auto" else detect_source(doc),
    )


@router.post("/preview/elements", response_model=ElementsResponse)
def preview_elements(
    request: PreviewRequest,
    rules: RulesRenderAdapter = Depends(get_render_rules),
) -> ElementsResponse:
    """
    Render rich text to a structured element tree.

    For front ends that build their own UI nodes instead of injecting HTML.
    """
    renderer = _build_renderer(request, rules)
    items = renderer.render_elements(request.document, _resolve_source(request, rules))
    return ElementsResponse(
        elements=[item if isinstance(item, str) else item.to_dict() for item in items]
    )


@router.post("/convert/portable-text", response_model=ConvertResponse)
def convert_to_portable_text(request: ConvertRequest) -> ConvertResponse:
    """
    Convert a Lexical document to Portable Text blocks.

    Used when migrating content between the two CMS backends.
    """
    result = run_convert(ConvertToPortableTextInput(document=request.document))
    return ConvertResponse(
        blocks=result.blocks,
        errors=[{"code": e.code, "message": e.message} for e in result.errors],
    )
