"""
Render posts component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RulesPort(Protocol):
    """Port for accessing render rules configuration."""

    def get_class_names(self, styled: bool) -> dict[str, str]:
        """Get tag -> CSS class map for plain or styled output."""
        ...

    def get_new_tab_rel(self) -> str:
        """Get rel attribute value for links opening in a new tab."""
        ...

    def get_forbidden_protocols(self) -> frozenset[str]:
        """Get link protocols replaced by a no-op anchor."""
        ...
