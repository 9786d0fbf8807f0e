from __future__ import annotations

import pytest

from donjara_scorer.config import DEFAULTS
from donjara_scorer.data.loaders import load_tables
from donjara_scorer.models import (
    BasicRoleCondition,
    BonusRoleCondition,
    Catalog,
    RuleTable,
    ScoringTables,
    Tile,
)

ULTIMATE = frozenset(f"U{i}" for i in range(1, 13))


@pytest.fixture
def abc_catalog() -> Catalog:
    """A,B,C -> attr1; D,E,F -> attr2; G,H,I -> attr3; J,K,L -> attr4."""
    tiles = []
    for names, attr in (("ABC", "attr1"), ("DEF", "attr2"), ("GHI", "attr3"), ("JKL", "attr4")):
        tiles.extend(Tile(name=n, attribute=attr) for n in names)
    return Catalog(tiles)


@pytest.fixture
def simple_rules() -> RuleTable:
    return RuleTable(
        basic_roles=(
            BasicRoleCondition("Ultimate", None, frozenset(), 500000, 10, is_special=True),
            BasicRoleCondition("Pure attr1", frozenset({"attr1"}), frozenset(), 100000, 5),
            BasicRoleCondition("No attr3", None, frozenset({"attr3"}), 90000, 3),
            BasicRoleCondition("Basic", None, frozenset(), 60000, 1),
        ),
        bonus_roles=(
            BonusRoleCondition("Pair AB", 2, frozenset({"A", "B"}), 10000),
            BonusRoleCondition("Triple GHI", 3, frozenset({"G", "H", "I"}), 25000),
        ),
        ultimate_tiles=ULTIMATE,
    )


@pytest.fixture
def sample_settings() -> dict:
    return DEFAULTS


@pytest.fixture
def sample_tables(sample_settings) -> ScoringTables:
    return load_tables(sample_settings)
