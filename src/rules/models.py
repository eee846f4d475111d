from typing import Literal

from pydantic import BaseModel, Field

from src.core.services.render_posts import STYLED_CLASS_NAMES


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class LinkRules(BaseModel):
    new_tab_rel: list[str] = Field(default_factory=lambda: ["noopener", "noreferrer"])
    forbidden_protocols: list[str] = Field(
        default_factory=lambda: ["javascript:", "data:", "vbscript:"]
    )


class ClassNameRules(BaseModel):
    plain: dict[str, str] = Field(default_factory=dict)
    styled: dict[str, str] = Field(default_factory=lambda: dict(STYLED_CLASS_NAMES))


class RenderRules(BaseModel):
    default_source: Literal["auto", "lexical", "portable_text"] = "auto"
    add_heading_ids: bool = False
    wrap_in_article: bool = False
    links: LinkRules = Field(default_factory=LinkRules)
    class_names: ClassNameRules = Field(default_factory=ClassNameRules)


class Rules(BaseModel):
    project: ProjectRules
    render: RenderRules
