import logging
import os

import numpy as np
import cv2

from cars_anpr.domain.errors import ImageDecodeError, InvalidCropError
from cars_anpr.domain.models import BoundingBox

logger = logging.getLogger(__name__)

# ImageNet statistics, R, G, B order
CLASSIFIER_MEAN = np.array([0.485, 0.456, 0.406], dtype=np.float32)
CLASSIFIER_STD = np.array([0.229, 0.224, 0.225], dtype=np.float32)


def image_exists(path) -> bool:
    return bool(path) and os.path.isfile(path)


def load_image(path: str) -> np.ndarray:
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise ImageDecodeError(str(path))
    return img


def decode_image(data: bytes) -> np.ndarray:
    img_array = np.frombuffer(data, np.uint8)
    img = cv2.imdecode(img_array, cv2.IMREAD_COLOR)
    if img is None:
        raise ImageDecodeError("<upload>")
    return img


def resize_image(img: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Stretches the image to exactly width x height (no letterboxing),
    matching the fixed square inputs of the models.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Target size must be positive, got {width}x{height}")
    if img is None or img.size == 0:
        raise ValueError("Empty image for resize")

    return cv2.resize(img, (width, height), interpolation=cv2.INTER_LINEAR)


def crop_box(img: np.ndarray, box: BoundingBox) -> np.ndarray:
    """
    Returns a new box.w x box.h buffer holding the box. Parts of the box
    outside the frame stay black.
    """
    img_h, img_w = img.shape[:2]
    x1 = max(0, box.x)
    y1 = max(0, box.y)
    x2 = min(img_w, box.x + box.w)
    y2 = min(img_h, box.y + box.h)

    if box.w <= 0 or box.h <= 0 or x2 <= x1 or y2 <= y1:
        raise InvalidCropError(box, (img_w, img_h))

    crop = np.zeros((box.h, box.w) + img.shape[2:], dtype=img.dtype)
    crop[y1 - box.y:y2 - box.y, x1 - box.x:x2 - box.x] = img[y1:y2, x1:x2]
    return crop


def save_image(img: np.ndarray, directory: str, filename: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    if not cv2.imwrite(path, img):
        raise ValueError(f"Could not encode image to {path}")
    logger.debug("Saved intermediate image %s", path)
    return path


def to_classifier_tensor(img_bgr: np.ndarray) -> np.ndarray:
    """
    HxWx3 BGR uint8 -> [1, 3, H, W] float32, channel first, each channel
    normalized as (raw / 255 - mean) / std.
    """
    rgb = cv2.cvtColor(img_bgr, cv2.COLOR_BGR2RGB).astype(np.float32) / 255.0
    normalized = (rgb - CLASSIFIER_MEAN) / CLASSIFIER_STD
    return np.ascontiguousarray(normalized.transpose(2, 0, 1)[np.newaxis, ...], dtype=np.float32)
