"""Hand scoring."""
from __future__ import annotations

from .engine import (
    ScoringEngine,
    bonus_details,
    completed_sets,
    count_ultimate,
    evaluate,
    resolve_tiles,
    select_basic_role,
)

__all__ = [
    "ScoringEngine",
    "bonus_details",
    "completed_sets",
    "count_ultimate",
    "evaluate",
    "resolve_tiles",
    "select_basic_role",
]
