"""
Richtext component - Rich text document model, parsing and migration.
"""

from src.core.services.lexical import is_lexical, parse_lexical
from src.core.services.portable_text import (
    is_portable_text,
    lexical_to_portable_text,
    parse_portable_text,
    to_portable_text,
)
from src.core.services.richtext import (
    FORMAT_ORDER,
    Element,
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
    apply_format,
    escape,
    is_safe_url,
)

from .component import (
    run,
    run_convert,
    run_parse,
)
from .models import (
    ConvertOutput,
    ConvertToPortableTextInput,
    ParseDocumentInput,
    ParseOutput,
    RichTextValidationError,
)

__all__ = [
    # Entry points
    "run",
    "run_convert",
    "run_parse",
    # Input models
    "ConvertToPortableTextInput",
    "ParseDocumentInput",
    # Output models
    "ConvertOutput",
    "ParseOutput",
    "RichTextValidationError",
    # Node model
    "Element",
    "Format",
    "FORMAT_ORDER",
    "HeadingNode",
    "InvalidNode",
    "LineBreakNode",
    "LinkNode",
    "ListItemNode",
    "ListKind",
    "ListNode",
    "Node",
    "ParagraphNode",
    "QuoteNode",
    "RootNode",
    "TextNode",
    "UnknownNode",
    # Helpers
    "apply_format",
    "escape",
    "is_lexical",
    "is_portable_text",
    "is_safe_url",
    "lexical_to_portable_text",
    "parse_lexical",
    "parse_portable_text",
    "to_portable_text",
]
