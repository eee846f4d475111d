import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.render_rules import RulesRenderAdapter
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(
            os.environ.get("RENDER_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_cached_rules(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_cached_rules(settings.rules_path)


def get_render_rules(rules: Rules = Depends(get_rules)) -> RulesRenderAdapter:
    return RulesRenderAdapter(rules)
