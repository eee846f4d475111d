"""
Rules-backed render configuration.

Implements the render_posts RulesPort over the loaded rules file.
"""

from __future__ import annotations

from src.core.services.render_posts import RenderConfig
from src.rules.models import Rules


class RulesRenderAdapter:
    def __init__(self, rules: Rules) -> None:
        self._render = rules.render

    def get_class_names(self, styled: bool) -> dict[str, str]:
        class_names = self._render.class_names
        return dict(class_names.styled if styled else class_names.plain)

    def get_new_tab_rel(self) -> str:
        return " ".join(self._render.links.new_tab_rel)

    def get_forbidden_protocols(self) -> frozenset[str]:
        return frozenset(p.lower() for p in self._render.links.forbidden_protocols)

    def get_default_source(self) -> str:
        return self._render.default_source

    def build_config(self, styled: bool = False) -> RenderConfig:
        """Render config with the rules' defaults for ids and article wrapping."""
        return RenderConfig(
            class_names=self.get_class_names(styled),
            new_tab_rel=self.get_new_tab_rel(),
            forbid_protocols=self.get_forbidden_protocols(),
            add_heading_ids=self._render.add_heading_ids,
            wrap_in_article=self._render.wrap_in_article,
        )
