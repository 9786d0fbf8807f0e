"""Basic-role and bonus-role scoring for a single hand."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..data.constants import MIN_SETS_FOR_BASIC_ROLE, SET_SIZE, ULTIMATE_SET_THRESHOLD
from ..models import (
    BasicRoleCondition,
    BonusRoleDetail,
    Catalog,
    RuleTable,
    ScoreResult,
    ScoringTables,
    Tile,
)

logger = logging.getLogger(__name__)


def resolve_tiles(hand: Sequence[str], catalog: Catalog) -> List[Tile]:
    """Catalog records for the hand, in hand order; unknown names are dropped."""
    tiles: List[Tile] = []
    for name in hand:
        tile = catalog.get(name)
        if tile is None:
            logger.debug("no catalog entry for %r; excluded from scoring", name)
            continue
        tiles.append(tile)
    return tiles


def completed_sets(tiles: Sequence[Tile]) -> List[str]:
    """One attribute label per completed triple, grouped in first-seen order."""
    counts: Dict[str, int] = {}
    for tile in tiles:
        counts[tile.attribute] = counts.get(tile.attribute, 0) + 1
    labels: List[str] = []
    for attribute, count in counts.items():
        logger.debug("attribute %s: %d tiles -> %d sets", attribute, count, count // SET_SIZE)
        labels.extend([attribute] * (count // SET_SIZE))
    return labels


def count_ultimate(hand: Sequence[str], rules: RuleTable) -> int:
    return sum(1 for name in hand if name in rules.ultimate_tiles)


def select_basic_role(set_labels: Sequence[str], rules: RuleTable) -> Optional[BasicRoleCondition]:
    """First non-special condition, by descending priority, that accepts the labels."""
    for role in rules.ordered_basic_roles():
        if role.accepts(set_labels):
            return role
    return None


def bonus_details(tiles: Sequence[Tile], rules: RuleTable) -> Tuple[BonusRoleDetail, ...]:
    details: List[BonusRoleDetail] = []
    for bonus in rules.bonus_roles:
        matched = [t.name for t in tiles if t.name in bonus.target_names]
        if len(matched) >= bonus.required_count:
            details.append(BonusRoleDetail(bonus.name, bonus.bonus_score, tuple(matched)))
    return tuple(details)


def evaluate(hand: Sequence[str], catalog: Catalog, rules: RuleTable) -> ScoreResult:
    """Score ``hand`` against ``catalog`` and ``rules``.

    Never raises on hand content: unknown names, wildcards left unresolved and
    duplicates are all legal input. A hand without three completed sets gets
    a zero result with no basic role.
    """
    snapshot = tuple(hand)
    logger.debug("hand: %s", list(snapshot))

    special = rules.special
    if special is not None:
        ultimate = count_ultimate(snapshot, rules)
        logger.debug("ultimate-set tiles in hand: %d", ultimate)
        if ultimate >= ULTIMATE_SET_THRESHOLD:
            logger.debug("%s: %d", special.name, special.score)
            return ScoreResult(
                basic_role_name=special.name,
                basic_role_score=special.score,
                bonus_score=0,
                final_score=special.score,
                hand=snapshot,
            )

    tiles = resolve_tiles(snapshot, catalog)
    set_labels = completed_sets(tiles)
    logger.debug("completed sets: %s", set_labels)

    if len(set_labels) < MIN_SETS_FOR_BASIC_ROLE:
        logger.debug("no basic role: %d sets", len(set_labels))
        return ScoreResult.empty(snapshot)

    role = select_basic_role(set_labels, rules)
    if role is None or role.score == 0:
        logger.warning("no scoring basic role for sets %s", set_labels)
        return ScoreResult.empty(snapshot)
    logger.debug("basic role: %s (%d)", role.name, role.score)

    details = bonus_details(tiles, rules)
    bonus_score = sum(d.bonus_score for d in details)
    if details:
        logger.debug("bonus roles: %s (total %d)", [d.role_name for d in details], bonus_score)

    final_score = role.score + bonus_score
    logger.debug("final score: %d", final_score)
    return ScoreResult(
        basic_role_name=role.name,
        basic_role_score=role.score,
        bonus_details=details,
        bonus_score=bonus_score,
        final_score=final_score,
        hand=snapshot,
    )


class ScoringEngine:
    """Binds loaded tables so callers only pass hands."""

    def __init__(self, tables: ScoringTables):
        self.tables = tables

    def evaluate(self, hand: Sequence[str]) -> ScoreResult:
        return evaluate(hand, self.tables.catalog, self.tables.rules)


__all__ = [
    "ScoringEngine",
    "bonus_details",
    "completed_sets",
    "count_ultimate",
    "evaluate",
    "resolve_tiles",
    "select_basic_role",
]
