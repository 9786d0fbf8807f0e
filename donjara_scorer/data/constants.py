"""Fixed values shared by the scoring core and the loaders."""
from __future__ import annotations

HAND_SIZE = 9
SET_SIZE = 3
MIN_SETS_FOR_BASIC_ROLE = 3

UNKNOWN_TILE = "不明"
WILDCARD_TILE = "オキシジェン・デストロイヤー"

# Members of the "Godzilla Final Wars" line-up that short-circuit scoring.
# Eleven members, as in the tile sheets; settings can replace it via rules.ultimate_tiles.
ULTIMATE_SET_TILES = frozenset({
    "ゴジラ(04)",
    "カマキラス(04)",
    "クモンガ(04)",
    "キングシーサー(04)",
    "ジラ",
    "モスラ(04)",
    "ガイガン(04)",
    "改造ガイガン",
    "モンスターＸ",
    "カイザーギドラ",
    "新・轟天号",
})
ULTIMATE_SET_THRESHOLD = 9

MIN_NAME_OVERLAP = 3

LIST_DELIMITER = "、"
