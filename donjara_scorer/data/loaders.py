"""CSV loaders for the tile catalog and the role tables."""
from __future__ import annotations

import csv
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..models import (
    BasicRoleCondition,
    BonusRoleCondition,
    Catalog,
    RuleTable,
    ScoringTables,
    Tile,
)
from .constants import LIST_DELIMITER, ULTIMATE_SET_TILES

logger = logging.getLogger(__name__)


class RuleTableError(ValueError):
    """The basic-role table cannot guarantee a classification for every hand."""


# Each field accepts the English header or the Japanese one used in the spreadsheets.
TILE_COLUMNS = {
    "name": ("name", "牌名"),
    "attribute": ("attribute", "属性"),
    "era": ("era", "時代"),
    "category": ("category", "分類"),
    "color": ("color", "時代色"),
}
BASIC_ROLE_COLUMNS = {
    "name": ("name", "役名"),
    "allowed": ("allowed", "許可属性"),
    "disallowed": ("disallowed", "NG属性"),
    "score": ("score", "得点"),
    "priority": ("priority", "優先度"),
    "special": ("special", "特殊"),
}
BONUS_ROLE_COLUMNS = {
    "name": ("name", "役名"),
    "condition": ("condition", "条件"),
    "required_count": ("required_count", "必要個数"),
    "targets": ("targets", "対象"),
    "bonus_score": ("bonus_score", "得点"),
}


def _cell(row: Mapping[str, Optional[str]], aliases: Iterable[str]) -> Optional[str]:
    for key in aliases:
        value = row.get(key)
        if value is not None:
            return value.strip()
    return None


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def _to_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "○"}


def _split_list(value: Optional[str], delimiter: str) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(delimiter) if part.strip()]


def _read_rows(path: str) -> List[Dict[str, Optional[str]]]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Data file not found: {path}")
    # utf-8-sig tolerates the BOM spreadsheet exports put in front
    with open(path, newline="", encoding="utf-8-sig") as handle:
        return list(csv.DictReader(handle))


def parse_tiles(rows: Iterable[Mapping[str, Optional[str]]]) -> Catalog:
    tiles: List[Tile] = []
    seen = set()
    for line_no, row in enumerate(rows, start=2):
        name = _cell(row, TILE_COLUMNS["name"])
        if not name:
            logger.warning("tiles row %d skipped: no name", line_no)
            continue
        if name in seen:
            logger.warning("tiles row %d skipped: duplicate name %r", line_no, name)
            continue
        seen.add(name)
        tiles.append(Tile(
            name=name,
            attribute=_cell(row, TILE_COLUMNS["attribute"]) or "",
            era=_cell(row, TILE_COLUMNS["era"]) or "",
            category=_cell(row, TILE_COLUMNS["category"]) or "",
            color=_cell(row, TILE_COLUMNS["color"]) or "",
        ))
    return Catalog(tiles)


def parse_basic_roles(
    rows: Iterable[Mapping[str, Optional[str]]],
    delimiter: str = LIST_DELIMITER,
) -> List[BasicRoleCondition]:
    roles: List[BasicRoleCondition] = []
    for line_no, row in enumerate(rows, start=2):
        name = _cell(row, BASIC_ROLE_COLUMNS["name"])
        score = _to_int(_cell(row, BASIC_ROLE_COLUMNS["score"]))
        priority = _to_int(_cell(row, BASIC_ROLE_COLUMNS["priority"]))
        if not name or score is None or priority is None:
            logger.warning("basic role row %d skipped: name/score/priority missing or invalid", line_no)
            continue
        allowed = _split_list(_cell(row, BASIC_ROLE_COLUMNS["allowed"]), delimiter)
        roles.append(BasicRoleCondition(
            name=name,
            allowed_attributes=frozenset(allowed) if allowed else None,
            disallowed_attributes=frozenset(
                _split_list(_cell(row, BASIC_ROLE_COLUMNS["disallowed"]), delimiter)
            ),
            score=score,
            priority=priority,
            is_special=_to_bool(_cell(row, BASIC_ROLE_COLUMNS["special"])),
        ))
    return roles


def parse_bonus_roles(
    rows: Iterable[Mapping[str, Optional[str]]],
    delimiter: str = LIST_DELIMITER,
) -> List[BonusRoleCondition]:
    roles: List[BonusRoleCondition] = []
    for line_no, row in enumerate(rows, start=2):
        name = _cell(row, BONUS_ROLE_COLUMNS["name"])
        if not name:
            logger.warning("bonus role row %d skipped: no name", line_no)
            continue
        roles.append(BonusRoleCondition(
            name=name,
            condition=_cell(row, BONUS_ROLE_COLUMNS["condition"]) or "",
            required_count=_to_int(_cell(row, BONUS_ROLE_COLUMNS["required_count"])) or 0,
            target_names=frozenset(_split_list(_cell(row, BONUS_ROLE_COLUMNS["targets"]), delimiter)),
            bonus_score=_to_int(_cell(row, BONUS_ROLE_COLUMNS["bonus_score"])) or 0,
        ))
    return roles


def validate_rule_table(rules: RuleTable) -> RuleTable:
    """Fail fast on a table the engine could not classify every hand with."""
    basic = rules.basic_roles
    if not basic:
        raise RuleTableError("basic-role table is empty")
    priorities = [r.priority for r in basic]
    if len(set(priorities)) != len(priorities):
        raise RuleTableError(f"basic-role priorities must be unique, got {sorted(priorities)}")
    specials = [r.name for r in basic if r.is_special]
    if len(specials) != 1:
        raise RuleTableError(f"expected exactly one special basic role, found {specials or 'none'}")
    catch_alls = [r for r in basic if r.is_catch_all]
    if len(catch_alls) != 1:
        raise RuleTableError(
            f"expected exactly one unconditional catch-all basic role, found {[r.name for r in catch_alls] or 'none'}"
        )
    lowest = min(priorities)
    if catch_alls[0].priority != lowest:
        raise RuleTableError(
            f"catch-all {catch_alls[0].name!r} must have the lowest priority ({lowest}), "
            f"has {catch_alls[0].priority}"
        )
    return rules


def load_catalog(path: str) -> Catalog:
    catalog = parse_tiles(_read_rows(path))
    logger.info("loaded %d tiles from %s", len(catalog), path)
    return catalog


def load_basic_roles(path: str, delimiter: str = LIST_DELIMITER) -> List[BasicRoleCondition]:
    return parse_basic_roles(_read_rows(path), delimiter)


def load_bonus_roles(path: str, delimiter: str = LIST_DELIMITER) -> List[BonusRoleCondition]:
    return parse_bonus_roles(_read_rows(path), delimiter)


def load_rule_table(
    basic_path: str,
    bonus_path: str,
    delimiter: str = LIST_DELIMITER,
    ultimate_tiles: Optional[Iterable[str]] = None,
) -> RuleTable:
    rules = RuleTable(
        basic_roles=tuple(load_basic_roles(basic_path, delimiter)),
        bonus_roles=tuple(load_bonus_roles(bonus_path, delimiter)),
        ultimate_tiles=frozenset(ultimate_tiles if ultimate_tiles is not None else ULTIMATE_SET_TILES),
    )
    validate_rule_table(rules)
    logger.info("loaded %d basic and %d bonus roles", len(rules.basic_roles), len(rules.bonus_roles))
    return rules


def load_tables(settings: Mapping[str, Any]) -> ScoringTables:
    """Build the catalog and rule table named by ``settings['data']``."""
    data = settings.get("data", {})
    delimiter = data.get("list_delimiter", LIST_DELIMITER)
    ultimate = (settings.get("rules") or {}).get("ultimate_tiles")
    return ScoringTables(
        catalog=load_catalog(data["tiles"]),
        rules=load_rule_table(data["basic_roles"], data["bonus_roles"], delimiter, ultimate),
    )


__all__ = [
    "RuleTableError",
    "load_basic_roles",
    "load_bonus_roles",
    "load_catalog",
    "load_rule_table",
    "load_tables",
    "parse_basic_roles",
    "parse_bonus_roles",
    "parse_tiles",
    "validate_rule_table",
]
