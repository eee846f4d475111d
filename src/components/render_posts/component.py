"""
Render posts component - Render rich text to HTML.

Handles conversion of rich text documents to safe, semantic HTML for SSR.

Invariants:
- I1: Text content is escaped before formatting tags are applied
- I2: Output is deterministic for a given document
- I3: Malformed nodes are skipped, never raised
- I4: Text extraction strips all formatting
"""

from __future__ import annotations

from src.core.services.render_posts import (
    RenderConfig,
    extract_headings,
    extract_text,
    render_elements,
    render_html,
    styled_render_config,
)
from src.core.services.richtext import Element

from .models import (
    ElementsOutput,
    ExtractHeadingsInput,
    ExtractTextInput,
    Heading,
    HeadingsOutput,
    RenderElementsInput,
    RenderPostInput,
    RenderPostOutput,
    RenderPostsValidationError,
    TextOutput,
)
from .ports import RulesPort


def _build_config(
    rules: RulesPort | None,
    styled: bool = False,
    wrap_in_article: bool = False,
    add_heading_ids: bool = False,
) -> RenderConfig:
    """Build render config from rules port."""
    if rules is None:
        if styled:
            return styled_render_config(
                wrap_in_article=wrap_in_article,
                add_heading_ids=add_heading_ids,
            )
        return RenderConfig(
            wrap_in_article=wrap_in_article,
            add_heading_ids=add_heading_ids,
        )

    return RenderConfig(
        class_names=rules.get_class_names(styled),
        new_tab_rel=rules.get_new_tab_rel(),
        forbid_protocols=rules.get_forbidden_protocols(),
        wrap_in_article=wrap_in_article,
        add_heading_ids=add_heading_ids,
    )


def _check_source(source: str) -> list[RenderPostsValidationError]:
    if source in ("auto", "lexical", "portable_text"):
        return []
    return [
        RenderPostsValidationError(
            code="invalid_source",
            message=f"Unknown document source: {source}",
            field="source",
        )
    ]


# --- Component Entry Points ---


def run_render(
    inp: RenderPostInput,
    *,
    rules: RulesPort | None = None,
) -> RenderPostOutput:
    """
    Render a document to HTML.

    Args:
        inp: Input containing the document and render options.
        rules: Optional rules port for configuration.

    Returns:
        RenderPostOutput with rendered HTML.
    """
    errors = _check_source(inp.source)
    if errors:
        return RenderPostOutput(html="", errors=errors, success=False)

    config = _build_config(
        rules,
        styled=inp.styled,
        wrap_in_article=inp.wrap_in_article,
        add_heading_ids=inp.add_heading_ids,
    )
    html = render_html(inp.document, config, inp.source)

    return RenderPostOutput(html=html, errors=[], success=True)


def run_render_elements(
    inp: RenderElementsInput,
    *,
    rules: RulesPort | None = None,
) -> ElementsOutput:
    """
    Render a document to a structured element tree.

    Elements come back as plain dictionaries ({"tag", "attrs", "children"}),
    text as raw (unescaped) strings.
    """
    errors = _check_source(inp.source)
    if errors:
        return ElementsOutput(elements=[], errors=errors, success=False)

    config = _build_config(rules, styled=inp.styled)
    items = render_elements(inp.document, config, inp.source)

    return ElementsOutput(
        elements=[item.to_dict() if isinstance(item, Element) else item for item in items],
        errors=[],
        success=True,
    )


def run_extract_text(inp: ExtractTextInput) -> TextOutput:
    """Extract plain text from a document."""
    errors = _check_source(inp.source)
    if errors:
        return TextOutput(text="", errors=errors, success=False)

    return TextOutput(text=extract_text(inp.document, inp.source), errors=[], success=True)


def run_extract_headings(inp: ExtractHeadingsInput) -> HeadingsOutput:
    """
    Extract headings for table of contents.

    Args:
        inp: Input containing the document.

    Returns:
        HeadingsOutput with extracted headings.
    """
    errors = _check_source(inp.source)
    if errors:
        return HeadingsOutput(headings=(), errors=errors, success=False)

    headings = tuple(
        Heading(level=h["level"], text=h["text"], id=h["id"])
        for h in extract_headings(inp.document, inp.source)
    )
    return HeadingsOutput(headings=headings, errors=[], success=True)


def run(
    inp: RenderPostInput | RenderElementsInput | ExtractTextInput | ExtractHeadingsInput,
    *,
    rules: RulesPort | None = None,
) -> RenderPostOutput | ElementsOutput | TextOutput | HeadingsOutput:
    """
    Main entry point for the render posts component.

    Dispatches to appropriate handler based on input type.

    Args:
        inp: Input object determining the operation.
        rules: Optional rules port for configuration.

    Returns:
        Appropriate output object based on input type.
    """
    if isinstance(inp, RenderPostInput):
        return run_render(inp, rules=rules)
    elif isinstance(inp, RenderElementsInput):
        return run_render_elements(inp, rules=rules)
    elif isinstance(inp, ExtractTextInput):
        return run_extract_text(inp)
    elif isinstance(inp, ExtractHeadingsInput):
        return run_extract_headings(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
