from __future__ import annotations

import asyncio

import pytest
from fastapi import HTTPException

from donjara_scorer.api.app import create_app
from donjara_scorer.api.routes import (
    MatchRequest,
    ResolveRequest,
    ScoreRequest,
    list_catalog,
    match_text,
    resolve_wildcards,
    score_hand,
)
from donjara_scorer.data.constants import WILDCARD_TILE

W = WILDCARD_TILE
SHOWA_EIGHT = ["ゴジラ(54)"] * 3 + ["ゴジラ(62)"] * 3 + ["ゴジラ(64)"] * 2


def run(coro):
    return asyncio.run(coro)


def test_catalog_endpoint(sample_tables):
    tiles = run(list_catalog(tables=sample_tables))
    assert len(tiles) == 40
    assert {"name", "attribute", "era", "category", "color"} <= set(tiles[0])


def test_match_endpoint(sample_tables, sample_settings):
    body = run(match_text(MatchRequest(text="機龍 ゴジラ(54)"), sample_tables, sample_settings))
    assert body["hand"][:2] == ["機龍", "ゴジラ(54)"]
    assert len(body["tiles"]) == 9


def test_score_endpoint(sample_tables, sample_settings):
    req = ScoreRequest(hand=SHOWA_EIGHT + ["ゴジラ(64)"])
    body = run(score_hand(req, sample_tables, sample_settings))
    assert body["basic_role_name"] == "昭和ゴジラセット"
    assert body["final_score"] == 360000


def test_score_rejects_wrong_hand_size(sample_tables, sample_settings):
    with pytest.raises(HTTPException) as err:
        run(score_hand(ScoreRequest(hand=SHOWA_EIGHT), sample_tables, sample_settings))
    assert err.value.status_code == 422


def test_score_needs_wildcard_choice(sample_tables, sample_settings):
    with pytest.raises(HTTPException) as err:
        run(score_hand(ScoreRequest(hand=SHOWA_EIGHT + [W]), sample_tables, sample_settings))
    assert err.value.status_code == 409
    pending = err.value.detail["pending"]
    assert pending["position"] == 8
    assert "ゴジラ(74)" in pending["candidates"]
    assert "ゴジラ(54)" not in pending["candidates"]


def test_score_with_wildcard_choice(sample_tables, sample_settings):
    req = ScoreRequest(hand=SHOWA_EIGHT + [W], choices=["ゴジラ(74)"])
    body = run(score_hand(req, sample_tables, sample_settings))
    assert body["hand"][-1] == "ゴジラ(74)"
    assert body["final_score"] == 360000


def test_score_rejects_invalid_choice(sample_tables, sample_settings):
    req = ScoreRequest(hand=SHOWA_EIGHT + [W], choices=["ゴジラ(62)"])
    with pytest.raises(HTTPException) as err:
        run(score_hand(req, sample_tables, sample_settings))
    assert err.value.status_code == 400


def test_resolve_walks_through_wildcards(sample_tables, sample_settings):
    hand = ["ゴジラ(54)", W, "ゴジラ(62)", W] + ["ゴジラ(64)"] * 5

    first = run(resolve_wildcards(ResolveRequest(hand=hand), sample_tables, sample_settings))
    assert not first["complete"]
    assert first["pending"]["ordinal"] == 0

    done = run(resolve_wildcards(
        ResolveRequest(hand=hand, choices=["ゴジラ(74)", "ゴジラ(89)"]),
        sample_tables,
        sample_settings,
    ))
    assert done["complete"]
    assert done["pending"] is None
    assert done["hand"][1] == "ゴジラ(74)"
    assert done["hand"][3] == "ゴジラ(89)"


def test_create_app_wires_state(sample_tables, sample_settings):
    app = create_app(sample_settings, sample_tables)

    assert app.state.tables is sample_tables
    paths = set(app.openapi()["paths"])
    assert {"/api/catalog", "/api/match", "/api/resolve", "/api/score", "/health"} <= paths

    health = next(route for route in app.routes if getattr(route, "path", None) == "/health")
    assert run(health.endpoint()) == {"status": "ok", "service": "donjara-scorer", "tiles": 40}
