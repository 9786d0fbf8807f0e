from __future__ import annotations

import json

from donjara_scorer.cli import main
from donjara_scorer.data.constants import UNKNOWN_TILE, WILDCARD_TILE

SHOWA = ",".join(["ゴジラ(54)"] * 3 + ["ゴジラ(62)"] * 3 + ["ゴジラ(64)"] * 3)


def _json(capsys):
    return json.loads(capsys.readouterr().out)


def test_score_prints_result(capsys):
    assert main(["score", SHOWA]) == 0
    out = _json(capsys)
    assert out["basic_role_name"] == "昭和ゴジラセット"
    assert out["final_score"] == 360000
    assert len(out["hand"]) == 9


def test_score_wrong_size(capsys):
    assert main(["score", "ゴジラ(54),ゴジラ(62)"]) == 2
    assert "exactly 9" in capsys.readouterr().err


def test_score_with_chosen_wildcard(capsys, tmp_path):
    hand = ",".join(["ゴジラ(54)"] * 3 + ["ゴジラ(62)"] * 3 + ["ゴジラ(64)"] * 2 + [WILDCARD_TILE])
    target = tmp_path / "result.json"

    assert main(["score", hand, "--choose", "ゴジラ(74)", "--output", str(target)]) == 0

    out = json.loads(target.read_text(encoding="utf-8"))
    assert out["hand"][-1] == "ゴジラ(74)"
    assert out["basic_role_name"] == "昭和ゴジラセット"


def test_score_missing_choice_is_cancelled(capsys):
    hand = ",".join(["ゴジラ(54)"] * 8 + [WILDCARD_TILE])
    assert main(["score", hand]) == 2
    assert "cancelled" in capsys.readouterr().err


def test_score_rejects_choice_outside_pool(capsys):
    hand = ",".join(["ゴジラ(54)"] * 8 + [WILDCARD_TILE])
    # already in the hand, so not offered
    assert main(["score", hand, "--choose", "ゴジラ(54)"]) == 2


def test_score_interactive_prompt(capsys, monkeypatch):
    hand = ",".join(["ゴジラ(54)"] * 3 + ["ゴジラ(62)"] * 3 + ["ゴジラ(64)"] * 2 + [WILDCARD_TILE])
    answers = iter(["nonsense", "ゴジラ(74)"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert main(["score", hand, "--interactive"]) == 0
    captured = capsys.readouterr()
    assert "wildcard #1" in captured.err
    assert json.loads(captured.out)["final_score"] == 360000


def test_match_text(capsys):
    assert main(["match", "ゴジラ(54)\nメカゴジラ(74) ???"]) == 0
    out = _json(capsys)
    assert len(out["hand"]) == 9
    assert out["hand"].count(UNKNOWN_TILE) == 7
    tiles = {t["name"]: t["attribute"] for t in out["tiles"]}
    assert tiles["メカゴジラ(74)"] == "東宝メカ"


def test_match_keeps_token_order(capsys):
    assert main(["match", "機龍 ゴジラ(54)"]) == 0
    out = _json(capsys)
    assert out["hand"][:2] == ["機龍", "ゴジラ(54)"]
    # the review listing is grouped by attribute
    named = [t["name"] for t in out["tiles"] if t["name"] != UNKNOWN_TILE]
    assert named == ["ゴジラ(54)", "機龍"]


def test_match_text_file(capsys, tmp_path):
    source = tmp_path / "ocr.txt"
    source.write_text("機龍\n", encoding="utf-8")
    assert main(["match", "--text-file", str(source)]) == 0
    assert "機龍" in _json(capsys)["hand"]


def test_catalog_lists_tiles(capsys):
    assert main(["catalog"]) == 0
    tiles = _json(capsys)
    assert len(tiles) == 40
    assert tiles[0]["name"] == "ゴジラ(54)"


def test_broken_config_paths(capsys, tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("data:\n  tiles: /nonexistent/tiles.csv\n", encoding="utf-8")
    assert main(["catalog", "--config", str(cfg)]) == 1
    assert "Cannot load" in capsys.readouterr().err
