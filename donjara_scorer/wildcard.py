"""Binding wildcard tiles to concrete, unused catalog names.

Resolution is a pull protocol: :func:`iter_requests` is a generator that
yields one :class:`SelectionRequest` per wildcard occurrence and resumes
when the caller sends back the chosen name. Whatever answers the requests
(a person at a prompt, an HTTP client, a scripted list in a test) stays
outside the algorithm.

Occurrences are handled strictly in hand order, one outstanding request at
a time. The candidate pool for each occurrence is the catalog minus every
name already in the hand, including names bound earlier in the same pass,
so two wildcards can never receive the same tile. When the pool runs dry
the remaining wildcards are left as they are and scoring treats them as
unknown tiles.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Generator, List, Optional, Sequence, Tuple

from .data.constants import WILDCARD_TILE
from .models import Catalog

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], str]


class SelectionCancelled(Exception):
    """Raised by a chooser to abandon the resolution pass."""


class InvalidSelection(ValueError):
    """The chosen name was not among the offered candidates."""


@dataclass(frozen=True)
class SelectionRequest:
    position: int   # index in the hand
    ordinal: int    # 0 for the first wildcard, 1 for the second, ...
    candidates: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {"position": self.position, "ordinal": self.ordinal, "candidates": list(self.candidates)}


@dataclass
class ReplayOutcome:
    hand: List[str]
    pending: Optional[SelectionRequest] = None
    bound: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.pending is None


def wildcard_positions(hand: Sequence[str], wildcard: str = WILDCARD_TILE) -> List[int]:
    return [i for i, name in enumerate(hand) if name == wildcard]


def candidate_pool(hand: Sequence[str], catalog: Catalog) -> Tuple[str, ...]:
    present = set(hand)
    return tuple(name for name in catalog.names if name not in present)


def iter_requests(
    hand: Sequence[str],
    catalog: Catalog,
    wildcard: str = WILDCARD_TILE,
) -> Generator[SelectionRequest, str, List[str]]:
    """Yield a request per wildcard; the generator's return value is the bound hand."""
    working = list(hand)
    for ordinal, position in enumerate(wildcard_positions(working, wildcard)):
        pool = candidate_pool(working, catalog)
        if not pool:
            logger.info("no unused tiles left; %d wildcard(s) stay unresolved",
                        working.count(wildcard))
            break
        chosen = yield SelectionRequest(position=position, ordinal=ordinal, candidates=pool)
        if chosen not in pool:
            raise InvalidSelection(f"{chosen!r} is not a candidate for wildcard #{ordinal + 1}")
        logger.debug("wildcard #%d at position %d -> %s", ordinal + 1, position, chosen)
        working[position] = chosen
    return working


def resolve(
    hand: Sequence[str],
    catalog: Catalog,
    choose_one: Chooser,
    wildcard: str = WILDCARD_TILE,
) -> List[str]:
    """Bind every wildcard in ``hand`` through ``choose_one``.

    ``choose_one`` receives the candidate names and returns one of them. Any
    exception it raises (typically :class:`SelectionCancelled`) propagates and
    the partially bound hand is discarded.
    """
    if wildcard not in hand:
        return list(hand)
    requests = iter_requests(hand, catalog, wildcard)
    try:
        request = next(requests)
        while True:
            request = requests.send(choose_one(request.candidates))
    except StopIteration as done:
        return done.value


def replay(
    hand: Sequence[str],
    choices: Sequence[str],
    catalog: Catalog,
    wildcard: str = WILDCARD_TILE,
) -> ReplayOutcome:
    """Answer requests from ``choices`` in order, stopping at the first unanswered one."""
    requests = iter_requests(hand, catalog, wildcard)
    bound: List[Tuple[int, str]] = []
    answers = iter(choices)
    try:
        request = next(requests)
        while True:
            answer = next(answers, None)
            if answer is None:
                requests.close()
                partial = list(hand)
                for position, name in bound:
                    partial[position] = name
                return ReplayOutcome(hand=partial, pending=request, bound=bound)
            bound.append((request.position, answer))
            request = requests.send(answer)
    except StopIteration as done:
        return ReplayOutcome(hand=done.value, pending=None, bound=bound)


class WildcardResolver:
    def __init__(self, catalog: Catalog, wildcard: str = WILDCARD_TILE):
        self.catalog = catalog
        self.wildcard = wildcard

    def has_wildcards(self, hand: Sequence[str]) -> bool:
        return self.wildcard in hand

    def requests(self, hand: Sequence[str]) -> Generator[SelectionRequest, str, List[str]]:
        return iter_requests(hand, self.catalog, self.wildcard)

    def resolve(self, hand: Sequence[str], choose_one: Chooser) -> List[str]:
        return resolve(hand, self.catalog, choose_one, self.wildcard)

    def replay(self, hand: Sequence[str], choices: Sequence[str]) -> ReplayOutcome:
        return replay(hand, choices, self.catalog, self.wildcard)


__all__ = [
    "Chooser",
    "InvalidSelection",
    "ReplayOutcome",
    "SelectionCancelled",
    "SelectionRequest",
    "WildcardResolver",
    "candidate_pool",
    "iter_requests",
    "replay",
    "resolve",
    "wildcard_positions",
]
