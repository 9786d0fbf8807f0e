from __future__ import annotations

import numpy as np
import pytesseract
from PIL import Image

from donjara_scorer import recognition
from donjara_scorer.data.constants import UNKNOWN_TILE
from donjara_scorer.recognition import TesseractRecognizer, recognize_hand


class FixedRecognizer:
    def __init__(self, text: str):
        self.text = text
        self.paths = []

    def recognize(self, image_path: str) -> str:
        self.paths.append(image_path)
        return self.text


class BrokenRecognizer:
    def recognize(self, image_path: str) -> str:
        raise pytesseract.TesseractError(1, "engine failed")


def _photo(tmp_path, color=(255, 255, 255)) -> str:
    path = tmp_path / "hand.png"
    Image.new("RGB", (64, 32), color).save(path)
    return str(path)


def test_recognized_text_is_matched(sample_tables, tmp_path):
    rec = FixedRecognizer("ゴジラ(54)\n機龍\nモスラ(61)\n")
    hand = recognize_hand(_photo(tmp_path), sample_tables.catalog, rec)

    assert hand[:3] == ["ゴジラ(54)", "機龍", "モスラ(61)"]
    assert hand[3:] == [UNKNOWN_TILE] * 6
    assert rec.paths == [str(tmp_path / "hand.png")]


def test_recognition_failure_gives_unknown_hand(sample_tables, tmp_path):
    hand = recognize_hand(_photo(tmp_path), sample_tables.catalog, BrokenRecognizer())
    assert hand == [UNKNOWN_TILE] * 9


def test_missing_photo_gives_unknown_hand(sample_tables, tmp_path):
    hand = recognize_hand(str(tmp_path / "missing.jpg"), sample_tables.catalog, TesseractRecognizer())
    assert hand == [UNKNOWN_TILE] * 9


def test_tesseract_recognizer_passes_binarized_image(tmp_path, monkeypatch):
    seen = {}

    def fake_image_to_string(image, lang=None, config=None):
        seen.update(image=image, lang=lang, config=config)
        return "ゴジラ(54)"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    text = TesseractRecognizer(lang="jpn", psm=11).recognize(_photo(tmp_path, (20, 20, 20)))

    assert text == "ゴジラ(54)"
    assert seen["lang"] == "jpn"
    assert "--psm 11" in seen["config"]
    image = seen["image"]
    assert image.ndim == 2
    assert set(np.unique(image)) <= {0, 255}


def test_binarize_keeps_shape():
    img = np.zeros((10, 20, 3), dtype=np.uint8)
    img[:, 10:] = 255
    out = recognition._binarize(img)
    assert out.shape == (10, 20)
