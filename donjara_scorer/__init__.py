"""Donjara scorer: match recognized tiles, bind wildcards, and score hands."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "Tile",
    "Catalog",
    "BasicRoleCondition",
    "BonusRoleCondition",
    "RuleTable",
    "ScoringTables",
    "BonusRoleDetail",
    "ScoreResult",
    "ScoringEngine",
    "evaluate",
    "WildcardResolver",
    "SelectionRequest",
    "SelectionCancelled",
    "resolve",
    "NameMatcher",
    "match",
    "load_tables",
    "load_settings",
    "__version__",
]

_EXPORTS = {
    "Tile": ("models", "Tile"),
    "Catalog": ("models", "Catalog"),
    "BasicRoleCondition": ("models", "BasicRoleCondition"),
    "BonusRoleCondition": ("models", "BonusRoleCondition"),
    "RuleTable": ("models", "RuleTable"),
    "ScoringTables": ("models", "ScoringTables"),
    "BonusRoleDetail": ("models", "BonusRoleDetail"),
    "ScoreResult": ("models", "ScoreResult"),
    "ScoringEngine": ("scoring.engine", "ScoringEngine"),
    "evaluate": ("scoring.engine", "evaluate"),
    "WildcardResolver": ("wildcard", "WildcardResolver"),
    "SelectionRequest": ("wildcard", "SelectionRequest"),
    "SelectionCancelled": ("wildcard", "SelectionCancelled"),
    "resolve": ("wildcard", "resolve"),
    "NameMatcher": ("name_matcher", "NameMatcher"),
    "match": ("name_matcher", "match"),
    "load_tables": ("data.loaders", "load_tables"),
    "load_settings": ("config", "load_settings"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
