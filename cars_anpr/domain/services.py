import re
from typing import AbstractSet, Optional, Sequence

import numpy as np

from cars_anpr.domain.models import Prediction
from cars_anpr.domain.regions import REGION_CODES


# =========================
# DOMAIN LOGIC (Pure Python)
# =========================

# Three digits right before the final character (OCR terminator)
REGION_TAIL_RE = re.compile(r"([0-9])([0-9])([0-9]).\Z", re.DOTALL)


def normalize_ocr_text(raw_text: str) -> str:
    """
    Every line break Tesseract emits becomes a single space, so the
    trailing newline ends up as the last character of the text.
    """
    return (raw_text or "").replace("\n", " ")


def correct_region_code(text: str, regions: AbstractSet[int] = REGION_CODES) -> str:
    """
    Repairs a region code that picked up one extra digit during OCR.

    Looks at the three characters before the last one. When they are digits
    and do not form a valid 3-digit region, but the first two form a valid
    2-digit region, the middle digit is dropped. Any other text is returned
    unchanged.
    """
    if not text or len(text) <= 4:
        return text

    m = REGION_TAIL_RE.search(text)
    if not m:
        return text

    first, middle, last = m.groups()
    if int(first + middle + last) in regions:
        return text

    if int(first + middle) in regions:
        cut = m.start(2)
        return text[:cut] + text[cut + 1:]

    return text


def softmax(logits: Sequence[float]) -> np.ndarray:
    x = np.asarray(logits, dtype=np.float64).reshape(-1)
    if x.size == 0:
        return x
    # Shifting by the max leaves exp(x_i) / sum_j exp(x_j) unchanged
    e = np.exp(x - x.max())
    return e / e.sum()


def top_prediction(probs: Sequence[float], labels: Sequence[str]) -> Optional[Prediction]:
    """
    Pairs each probability with its label by index and keeps the highest.
    Ties go to the lowest index.
    """
    p = np.asarray(probs, dtype=np.float64).reshape(-1)
    if p.size == 0:
        return None
    if p.size != len(labels):
        raise ValueError(f"Model returned {p.size} scores for {len(labels)} labels")

    best_idx = int(p.argmax())
    return Prediction(label=labels[best_idx], confidence=float(p[best_idx]))
