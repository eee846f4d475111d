"""
Render posts component - Render rich text to HTML.
"""

from src.core.services.render_posts import (
    DEFAULT_RENDER_CONFIG,
    PLAIN_RENDER_CONFIG,
    STYLED_CLASS_NAMES,
    NodeOutcome,
    PostRenderer,
    RenderConfig,
    Rendered,
    Skipped,
    count_links,
    count_words,
    create_post_renderer,
    detect_source,
    extract_headings,
    extract_text,
    parse_document,
    render_children,
    render_elements,
    render_heading,
    render_html,
    render_link,
    render_list,
    render_node,
    render_paragraph,
    render_text,
    styled_render_config,
)

from .component import (
    run,
    run_extract_headings,
    run_extract_text,
    run_render,
    run_render_elements,
)
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

__all__ = [
    # Entry points
    "run",
    "run_extract_headings",
    "run_extract_text",
    "run_render",
    "run_render_elements",
    # Input models
    "ExtractHeadingsInput",
    "ExtractTextInput",
    "RenderElementsInput",
    "RenderPostInput",
    # Output models
    "ElementsOutput",
    "Heading",
    "HeadingsOutput",
    "RenderPostOutput",
    "RenderPostsValidationError",
    "TextOutput",
    # Ports
    "RulesPort",
    # Service re-exports
    "DEFAULT_RENDER_CONFIG",
    "PLAIN_RENDER_CONFIG",
    "STYLED_CLASS_NAMES",
    "NodeOutcome",
    "PostRenderer",
    "RenderConfig",
    "Rendered",
    "Skipped",
    "count_links",
    "count_words",
    "create_post_renderer",
    "detect_source",
    "extract_headings",
    "extract_text",
    "parse_document",
    "render_children",
    "render_elements",
    "render_heading",
    "render_html",
    "render_link",
    "render_list",
    "render_node",
    "render_paragraph",
    "render_text",
    "styled_render_config",
]
