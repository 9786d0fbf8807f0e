"""Map recognized text onto catalog tile names.

The similarity measure is deliberately coarse: the number of distinct
characters a token shares with a catalog name, after lower-casing. It knows
nothing about order or position and is not an edit distance, so e.g. an
anagram scores as high as the real name. The ``> 3`` acceptance threshold
and the measure itself decide which recognized strings land on which tiles;
changing either changes recognition results for existing users.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .data.constants import HAND_SIZE, MIN_NAME_OVERLAP, UNKNOWN_TILE
from .models import Catalog

logger = logging.getLogger(__name__)

TextInput = Union[str, Iterable[str]]


def split_tokens(text: TextInput) -> List[str]:
    """Whitespace/line-break separated tokens, empties dropped."""
    chunks = [text] if isinstance(text, str) else list(text)
    tokens: List[str] = []
    for chunk in chunks:
        tokens.extend(t for t in chunk.split() if t)
    return tokens


def overlap_score(a: str, b: str) -> int:
    return len(set(a.lower()) & set(b.lower()))


def best_candidate(token: str, catalog: Catalog) -> Tuple[Optional[str], int]:
    """Highest-overlap catalog name; the earliest wins ties."""
    best: Optional[str] = None
    best_score = 0
    for name in catalog.names:
        score = overlap_score(token, name)
        if score > best_score:
            best, best_score = name, score
    return best, best_score


def match_token(
    token: str,
    catalog: Catalog,
    min_overlap: int = MIN_NAME_OVERLAP,
    unknown: str = UNKNOWN_TILE,
) -> str:
    if token in catalog:
        return token
    best, score = best_candidate(token, catalog)
    if best is not None and score > min_overlap:
        logger.debug("%r -> %r (overlap %d)", token, best, score)
        return best
    logger.debug("%r unmatched (best %r, overlap %d)", token, best, score)
    return unknown


def match(
    tokens: TextInput,
    catalog: Catalog,
    hand_size: int = HAND_SIZE,
    min_overlap: int = MIN_NAME_OVERLAP,
    unknown: str = UNKNOWN_TILE,
) -> List[str]:
    """Exactly ``hand_size`` names: matches in token order, padded with ``unknown``."""
    matched = [match_token(t, catalog, min_overlap, unknown) for t in split_tokens(tokens)]
    if len(matched) > hand_size:
        logger.info("dropping %d token(s) past the first %d", len(matched) - hand_size, hand_size)
    matched = matched[:hand_size]
    matched.extend([unknown] * (hand_size - len(matched)))
    return matched


def describe_hand(
    hand: Sequence[str],
    catalog: Catalog,
    unknown: str = UNKNOWN_TILE,
) -> List[Tuple[str, str]]:
    """(name, attribute) pairs sorted by attribute, for review before scoring."""
    pairs = [(name, catalog.attribute_of(name) or unknown) for name in hand]
    return sorted(pairs, key=lambda pair: pair[1])


class NameMatcher:
    def __init__(
        self,
        catalog: Catalog,
        hand_size: int = HAND_SIZE,
        min_overlap: int = MIN_NAME_OVERLAP,
        unknown: str = UNKNOWN_TILE,
    ):
        self.catalog = catalog
        self.hand_size = hand_size
        self.min_overlap = min_overlap
        self.unknown = unknown

    def match(self, tokens: TextInput) -> List[str]:
        return match(tokens, self.catalog, self.hand_size, self.min_overlap, self.unknown)

    def match_token(self, token: str) -> str:
        return match_token(token, self.catalog, self.min_overlap, self.unknown)


__all__ = [
    "NameMatcher",
    "best_candidate",
    "describe_hand",
    "match",
    "match_token",
    "overlap_score",
    "split_tokens",
]
