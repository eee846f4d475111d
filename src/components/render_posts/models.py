"""
Render posts component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# --- Validation Error ---


@dataclass(frozen=True)
class RenderPostsValidationError:
    """Render posts validation error."""

    code: str
    message: str
    field: str | None = None


# --- Heading Model ---


@dataclass(frozen=True)
class Heading:
    """Extracted heading for TOC."""

    level: int
    text: str
    id: str


# --- Input Models ---


@dataclass(frozen=True)
class RenderPostInput:
    """Input for rendering a rich text document to HTML."""

    document: Any
    source: str = "auto"
    styled: bool = False
    wrap_in_article: bool = False
    add_heading_ids: bool = False


@dataclass(frozen=True)
class RenderElementsInput:
    """Input for rendering a rich text document to an element tree."""

    document: Any
    source: str = "auto"
    styled: bool = False


@dataclass(frozen=True)
class ExtractTextInput:
    """Input for extracting plain text from a document."""

    document: Any
    source: str = "auto"


@dataclass(frozen=True)
class ExtractHeadingsInput:
    """Input for extracting headings for TOC."""

    document: Any
    source: str = "auto"


# --- Output Models ---


@dataclass(frozen=True)
class RenderPostOutput:
    """Output containing rendered HTML."""

    html: str
    errors: list[RenderPostsValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ElementsOutput:
    """Output containing the rendered element tree as plain data."""

    elements: list[dict[str, Any] | str]
    errors: list[RenderPostsValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TextOutput:
    """Output containing extracted plain text."""

    text: str
    errors: list[RenderPostsValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class HeadingsOutput:
    """Output containing extracted headings."""

    headings: tuple[Heading, ...]
    errors: list[RenderPostsValidationError] = field(default_factory=list)
    success: bool = True
