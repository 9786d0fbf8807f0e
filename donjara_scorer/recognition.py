from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol
import logging

import cv2
import numpy as np
import pytesseract
from PIL import Image, ImageOps

from .data.constants import HAND_SIZE, MIN_NAME_OVERLAP, UNKNOWN_TILE
from .models import Catalog
from .name_matcher import match

logger = logging.getLogger(__name__)


class TextRecognizer(Protocol):
    def recognize(self, image_path: str) -> str: ...


@dataclass
class TesseractRecognizer:
    lang: str = "jpn"
    psm: int = 6
    oem: int = 3

    def recognize(self, image_path: str) -> str:
        """Raw text printed on the photographed tiles."""
        img = _read_image_exif_corrected(image_path)
        prepared = _binarize(img)
        config = f"--psm {self.psm} --oem {self.oem}"
        return pytesseract.image_to_string(prepared, lang=self.lang, config=config)


def _read_image_exif_corrected(path: str) -> np.ndarray:
    """BGR array with the camera's EXIF orientation applied."""
    with Image.open(path) as im:
        im = ImageOps.exif_transpose(im)
        rgb = im.convert("RGB")
        return np.array(rgb)[:, :, ::-1].copy()


def _binarize(img: np.ndarray) -> np.ndarray:
    gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    # invert if mostly dark background
    if gray.mean() < 100:
        _, th = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY_INV + cv2.THRESH_OTSU)
    else:
        _, th = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return th


def recognize_hand(
    image_path: str,
    catalog: Catalog,
    recognizer: Optional[TextRecognizer] = None,
    hand_size: int = HAND_SIZE,
    min_overlap: int = MIN_NAME_OVERLAP,
    unknown: str = UNKNOWN_TILE,
) -> List[str]:
    """Recognize text in the photo and match it to ``hand_size`` catalog names.

    A photo that cannot be read gives an all-unknown hand for the person to
    correct rather than an error.
    """
    recognizer = recognizer or TesseractRecognizer()
    try:
        text = recognizer.recognize(image_path)
    except (OSError, pytesseract.TesseractError, cv2.error) as exc:
        logger.warning("text recognition failed for %s: %s", image_path, exc)
        return [unknown] * hand_size
    logger.debug("recognized text: %r", text)
    return match(text, catalog, hand_size=hand_size, min_overlap=min_overlap, unknown=unknown)


__all__ = ["TesseractRecognizer", "TextRecognizer", "recognize_hand"]
