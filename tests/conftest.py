from pathlib import Path

import pytest

from src.adapters.render_rules import RulesRenderAdapter
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> Rules:
    """The project's real rules file."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def render_rules(rules: Rules) -> RulesRenderAdapter:
    return RulesRenderAdapter(rules)


@pytest.fixture
def lexical_doc() -> dict:
    """Lexical document exercising every node type."""
    return {
        "root": {
            "type": "root",
            "children": [
                {
                    "type": "heading",
                    "tag": "h1",
                    "children": [{"type": "text", "text": "Airport Transfers"}],
                },
                {
                    "type": "paragraph",
                    "children": [
                        {"type": "text", "text": "Book a "},
                        {"type": "text", "text": "luxury", "format": 1},
                        {"type": "text", "text": " ride "},
                        {
                            "type": "link",
                            "fields": {"url": "https://example.com/book", "newTab": True},
                            "children": [{"type": "text", "text": "online"}],
                        },
                        {"type": "linebreak"},
                        {"type": "text", "text": "today."},
                    ],
                },
                {
                    "type": "list",
                    "listType": "number",
                    "children": [
                        {"type": "listitem", "children": [{"type": "text", "text": "Choose"}]},
                        {"type": "listitem", "children": [{"type": "text", "text": "Ride"}]},
                    ],
                },
                {
                    "type": "quote",
                    "children": [{"type": "text", "text": "Best driver in town"}],
                },
            ],
        }
    }


@pytest.fixture
def portable_text_doc() -> list:
    """Portable Text blocks equivalent in shape to lexical_doc."""
    return [
        {
            "_type": "block",
            "_key": "a1",
            "style": "h1",
            "markDefs": [],
            "children": [{"_type": "span", "_key": "s1", "text": "Airport Transfers", "marks": []}],
        },
        {
            "_type": "block",
            "_key": "a2",
            "style": "normal",
            "markDefs": [{"_type": "link", "_key": "lnk", "href": "https://example.com/book"}],
            "children": [
                {"_type": "span", "_key": "s2", "text": "Book ", "marks": ["strong"]},
                {"_type": "span", "_key": "s3", "text": "online", "marks": ["lnk"]},
            ],
        },
        {
            "_type": "block",
            "_key": "a3",
            "style": "normal",
            "listItem": "bullet",
            "level": 1,
            "markDefs": [],
            "children": [{"_type": "span", "_key": "s4", "text": "One", "marks": []}],
        },
        {
            "_type": "block",
            "_key": "a4",
            "style": "normal",
            "listItem": "bullet",
            "level": 1,
            "markDefs": [],
            "children": [{"_type": "span", "_key": "s5", "text": "Two", "marks": []}],
        },
    ]
