import cv2
import numpy as np
import pytest

from cars_anpr.domain.models import BoundingBox, Detection


class FakeDetector:
    def __init__(self, boxes=()):
        self.boxes = [
            Detection(box=BoundingBox(x=x, y=y, w=w, h=h), confidence=0.9)
            for x, y, w, h in boxes
        ]
        self.frames = []

    def detect(self, img_bgr):
        self.frames.append(img_bgr)
        return list(self.boxes)


class FakeOcr:
    def __init__(self, text=""):
        self.text = text
        self.crops = []

    def extract_text(self, img):
        self.crops.append(img)
        return self.text


class FakeClassifier:
    def __init__(self, logits):
        self.logits = np.asarray(logits, dtype=np.float32)
        self.tensors = []

    def infer(self, tensor):
        self.tensors.append(tensor)
        return self.logits


def make_image(width, height, color=(40, 40, 40)):
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:] = color
    return img


@pytest.fixture
def write_image(tmp_path):
    def _write(img, name="car.png"):
        path = tmp_path / name
        assert cv2.imwrite(str(path), img)
        return str(path)
    return _write
