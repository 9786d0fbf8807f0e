from __future__ import annotations
from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple
import json

from .data.constants import ULTIMATE_SET_TILES


@dataclass(frozen=True)
class Tile:
    name: str
    attribute: str
    era: str = ""
    category: str = ""
    color: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class Catalog:
    """Read-only lookup of tiles by name, keeping the order they were loaded in."""

    __slots__ = ("_tiles", "_by_name")

    def __init__(self, tiles: Iterable[Tile] = ()):
        by_name: Dict[str, Tile] = {}
        for tile in tiles:
            # first definition of a name wins
            by_name.setdefault(tile.name, tile)
        self._tiles: Tuple[Tile, ...] = tuple(by_name.values())
        self._by_name: Mapping[str, Tile] = MappingProxyType(by_name)

    def get(self, name: str) -> Optional[Tile]:
        return self._by_name.get(name)

    def attribute_of(self, name: str) -> Optional[str]:
        tile = self._by_name.get(name)
        return tile.attribute if tile is not None else None

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self._tiles)

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return self._tiles

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __repr__(self) -> str:
        return f"Catalog({len(self._tiles)} tiles)"

    def to_list(self) -> List[Dict[str, str]]:
        return [t.to_dict() for t in self._tiles]


@dataclass(frozen=True)
class BasicRoleCondition:
    name: str
    allowed_attributes: Optional[FrozenSet[str]]  # None means every attribute is allowed
    disallowed_attributes: FrozenSet[str] = frozenset()
    score: int = 0
    priority: int = 0
    is_special: bool = False

    @property
    def is_catch_all(self) -> bool:
        return (
            not self.is_special
            and self.allowed_attributes is None
            and not self.disallowed_attributes
        )

    def accepts(self, set_labels: Sequence[str]) -> bool:
        """True when every label is allowed and none is disallowed."""
        if self.allowed_attributes is not None and not all(
            label in self.allowed_attributes for label in set_labels
        ):
            return False
        return not any(label in self.disallowed_attributes for label in set_labels)


@dataclass(frozen=True)
class BonusRoleCondition:
    name: str
    required_count: int
    target_names: FrozenSet[str]
    bonus_score: int
    condition: str = ""  # free text, documentation only


@dataclass(frozen=True)
class RuleTable:
    basic_roles: Tuple[BasicRoleCondition, ...]
    bonus_roles: Tuple[BonusRoleCondition, ...] = ()
    ultimate_tiles: FrozenSet[str] = ULTIMATE_SET_TILES

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.basic_roles, key=lambda r: r.priority, reverse=True))
        object.__setattr__(self, "basic_roles", ordered)
        object.__setattr__(self, "bonus_roles", tuple(self.bonus_roles))
        object.__setattr__(self, "ultimate_tiles", frozenset(self.ultimate_tiles))

    @property
    def special(self) -> Optional[BasicRoleCondition]:
        return next((r for r in self.basic_roles if r.is_special), None)

    @property
    def catch_all(self) -> Optional[BasicRoleCondition]:
        return next((r for r in self.basic_roles if r.is_catch_all), None)

    def ordered_basic_roles(self) -> Tuple[BasicRoleCondition, ...]:
        """Non-special conditions, highest priority first."""
        return tuple(r for r in self.basic_roles if not r.is_special)


@dataclass(frozen=True)
class ScoringTables:
    """Catalog and rules loaded once per process and handed to every consumer."""
    catalog: Catalog
    rules: RuleTable


@dataclass(frozen=True)
class BonusRoleDetail:
    role_name: str
    bonus_score: int
    matched_tile_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoreResult:
    basic_role_name: Optional[str]
    basic_role_score: int
    bonus_details: Tuple[BonusRoleDetail, ...] = ()
    bonus_score: int = 0
    final_score: int = 0
    hand: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def bonus_role_names(self) -> List[str]:
        return [d.role_name for d in self.bonus_details]

    @classmethod
    def empty(cls, hand: Sequence[str]) -> "ScoreResult":
        return cls(basic_role_name=None, basic_role_score=0, hand=tuple(hand))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "basic_role_name": self.basic_role_name,
            "basic_role_score": self.basic_role_score,
            "bonus_roles": [
                {
                    "role_name": d.role_name,
                    "bonus_score": d.bonus_score,
                    "matched_tile_names": list(d.matched_tile_names),
                }
                for d in self.bonus_details
            ],
            "bonus_score": self.bonus_score,
            "final_score": self.final_score,
            "hand": list(self.hand),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


__all__ = [
    "Tile",
    "Catalog",
    "BasicRoleCondition",
    "BonusRoleCondition",
    "RuleTable",
    "ScoringTables",
    "BonusRoleDetail",
    "ScoreResult",
]
