"""
Richtext component - Rich text parsing and format migration.

Provides inspection of editor payloads against the shared node model and
the Lexical -> Portable Text migration.

Invariants:
- I1: Parsing never raises; unreadable nodes are counted, not fatal
- I2: Conversion output is identical for identical input
"""

from __future__ import annotations

from src.core.services.lexical import is_lexical, parse_lexical
from src.core.services.portable_text import to_portable_text
from src.core.services.render_posts import detect_source, parse_document
from src.core.services.richtext import InvalidNode, UnknownNode, count_nodes, walk

from .models import (
    ConvertOutput,
    ConvertToPortableTextInput,
    ParseDocumentInput,
    ParseOutput,
    RichTextValidationError,
)

# --- Component Entry Points ---


def run_parse(inp: ParseDocumentInput) -> ParseOutput:
    """
    Parse a document and report what it contains.

    Args:
        inp: Input containing the raw document.

    Returns:
        ParseOutput with the detected source and node statistics.
    """
    source = inp.source if inp.source != "auto" else detect_source(inp.document)
    if source is None:
        return ParseOutput(
            source=None,
            node_count=0,
            invalid_count=0,
            errors=[
                RichTextValidationError(
                    code="unrecognized_document",
                    message="Document is neither Lexical JSON nor Portable Text",
                )
            ],
            success=False,
        )

    root = parse_document(inp.document, source)
    nodes = walk(root)
    invalid = [node for node in nodes if isinstance(node, InvalidNode)]
    unknown = sorted({node.type for node in nodes if isinstance(node, UnknownNode)})

    return ParseOutput(
        source=source,
        # Root excluded
        node_count=count_nodes(root) - 1,
        invalid_count=len(invalid),
        unknown_types=tuple(unknown),
        errors=[
            RichTextValidationError(code="invalid_node", message=node.reason, path=node.type)
            for node in invalid
        ],
        success=True,
    )


def run_convert(inp: ConvertToPortableTextInput) -> ConvertOutput:
    """
    Convert a Lexical document to Portable Text blocks.

    Args:
        inp: Input containing the Lexical document.

    Returns:
        ConvertOutput with the blocks; unsuccessful for non-Lexical input.
    """
    if not is_lexical(inp.document):
        return ConvertOutput(
            blocks=[],
            errors=[
                RichTextValidationError(
                    code="not_lexical",
                    message="Document has no root.children array",
                )
            ],
            success=False,
        )

    return ConvertOutput(blocks=to_portable_text(parse_lexical(inp.document)))


def run(
    inp: ParseDocumentInput | ConvertToPortableTextInput,
) -> ParseOutput | ConvertOutput:
    """
    Main entry point for the richtext component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ParseDocumentInput):
        return run_parse(inp)
    elif isinstance(inp, ConvertToPortableTextInput):
        return run_convert(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
