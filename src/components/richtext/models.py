"""
Richtext component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# --- Validation Error ---


@dataclass(frozen=True)
class RichTextValidationError:
    """Rich text validation error."""

    code: str
    message: str
    path: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ParseDocumentInput:
    """Input for parsing an editor payload into the node model."""

    document: Any
    source: str = "auto"


@dataclass(frozen=True)
class ConvertToPortableTextInput:
    """Input for migrating a Lexical document to Portable Text."""

    document: Any


# --- Output Models ---


@dataclass(frozen=True)
class ParseOutput:
    """Output describing a parsed document."""

    source: str | None
    node_count: int
    invalid_count: int
    unknown_types: tuple[str, ...] = ()
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ConvertOutput:
    """Output containing Portable Text blocks."""

    blocks: list[dict[str, Any]]
    errors: list[RichTextValidationError] = field(default_factory=list)
    success: bool = True
