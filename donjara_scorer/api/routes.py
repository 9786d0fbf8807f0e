"""API routes for the Donjara scoring service."""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..models import ScoringTables
from ..name_matcher import describe_hand, match
from ..scoring.engine import evaluate
from ..wildcard import InvalidSelection, replay

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class MatchRequest(BaseModel):
    text: str


class ResolveRequest(BaseModel):
    hand: List[str]
    choices: List[str] = []


class ScoreRequest(BaseModel):
    hand: List[str]
    choices: List[str] = []


def get_tables(request: Request) -> ScoringTables:
    return request.app.state.tables


def get_settings(request: Request) -> Dict[str, Any]:
    return request.app.state.settings


def _check_hand_size(hand: List[str], settings: Dict[str, Any]) -> None:
    hand_size = int(settings["matcher"]["hand_size"])
    if len(hand) != hand_size:
        raise HTTPException(status_code=422, detail=f"hand must have exactly {hand_size} tiles, got {len(hand)}")


def _replay(req: ResolveRequest, tables: ScoringTables, settings: Dict[str, Any]):
    try:
        return replay(req.hand, req.choices, tables.catalog, wildcard=settings["tokens"]["wildcard"])
    except InvalidSelection as e:
        raise HTTPException(status_code=400, detail=str(e))


# ============================================================================
# Reference Data
# ============================================================================

@router.get("/catalog")
async def list_catalog(tables: ScoringTables = Depends(get_tables)) -> List[Dict[str, str]]:
    """List every tile in the catalog."""
    return tables.catalog.to_list()


# ============================================================================
# Recognition
# ============================================================================

@router.post("/match")
async def match_text(
    req: MatchRequest,
    tables: ScoringTables = Depends(get_tables),
    settings: Dict[str, Any] = Depends(get_settings),
) -> Dict[str, Any]:
    """Match recognized text to a hand of catalog names."""
    unknown = settings["tokens"]["unknown"]
    hand = match(
        req.text,
        tables.catalog,
        hand_size=int(settings["matcher"]["hand_size"]),
        min_overlap=int(settings["matcher"]["min_overlap"]),
        unknown=unknown,
    )
    return {
        "hand": hand,
        "tiles": [{"name": n, "attribute": a} for n, a in describe_hand(hand, tables.catalog, unknown)],
    }


# ============================================================================
# Wildcards and Scoring
# ============================================================================

@router.post("/resolve")
async def resolve_wildcards(
    req: ResolveRequest,
    tables: ScoringTables = Depends(get_tables),
    settings: Dict[str, Any] = Depends(get_settings),
) -> Dict[str, Any]:
    """Apply the given wildcard choices and report the next pending selection, if any."""
    outcome = _replay(req, tables, settings)
    return {
        "complete": outcome.complete,
        "hand": outcome.hand,
        "pending": outcome.pending.to_dict() if outcome.pending else None,
    }


@router.post("/score")
async def score_hand(
    req: ScoreRequest,
    tables: ScoringTables = Depends(get_tables),
    settings: Dict[str, Any] = Depends(get_settings),
) -> Dict[str, Any]:
    """Bind wildcards from ``choices`` and score the hand."""
    _check_hand_size(req.hand, settings)
    outcome = _replay(ResolveRequest(hand=req.hand, choices=req.choices), tables, settings)
    if not outcome.complete:
        raise HTTPException(
            status_code=409,
            detail={"error": "wildcard selection required", "pending": outcome.pending.to_dict()},
        )
    result = evaluate(outcome.hand, tables.catalog, tables.rules)
    logger.info("scored %s -> %d", result.basic_role_name, result.final_score)
    return result.to_dict()
