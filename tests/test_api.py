import cv2
import pytest
from fastapi.testclient import TestClient

from cars_anpr.api import routers
from cars_anpr.core.config import settings
from cars_anpr.domain.labels import VEHICLE_LABELS
from cars_anpr.main import app

from conftest import FakeClassifier, FakeDetector, FakeOcr, make_image


def _png(img):
    ok, buffer = cv2.imencode(".png", img)
    assert ok
    return buffer.tobytes()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _use(detector=None, ocr=None, classifier=None):
    if detector is not None:
        app.dependency_overrides[routers.get_detector] = lambda: detector
    if ocr is not None:
        app.dependency_overrides[routers.get_plate_ocr] = lambda: ocr
    if classifier is not None:
        app.dependency_overrides[routers.get_classifier] = lambda: classifier


def _upload(data, name="car.png", content_type="image/png"):
    return {"file": (name, data, content_type)}


def test_read_plate(client):
    _use(detector=FakeDetector([(100, 200, 150, 40)]), ocr=FakeOcr("A123BC775\n"))

    resp = client.post("/plate/read", files=_upload(_png(make_image(640, 640))))

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["plateText"] == "A123BC75 "
    assert body["rawText"] == "A123BC775\n"
    assert body["bbox"] == {"x": 100, "y": 200, "w": 150, "h": 40}


def test_read_plate_without_plate(client):
    _use(detector=FakeDetector(), ocr=FakeOcr("A"))

    resp = client.post("/plate/read", files=_upload(_png(make_image(800, 600))))

    assert resp.status_code == 200
    assert resp.json()["status"] == "no_plate"
    assert resp.json()["plateText"] == ""
    assert resp.json()["bbox"] is None


def test_read_plate_with_several_plates(client):
    _use(detector=FakeDetector([(0, 0, 10, 10), (20, 20, 10, 10)]), ocr=FakeOcr("A"))

    resp = client.post("/plate/read", files=_upload(_png(make_image(640, 640))))

    assert resp.status_code == 422
    assert "multiple plates" in resp.json()["detail"]


def test_detect_lists_all_boxes(client):
    _use(detector=FakeDetector([(0, 0, 10, 10), (20, 20, 30, 15)]))

    resp = client.post("/plate/detect", files=_upload(_png(make_image(1024, 768))))

    assert resp.status_code == 200
    boxes = resp.json()["boxes"]
    assert len(boxes) == 2
    assert boxes[1] == {"x": 20, "y": 20, "w": 30, "h": 15, "confidence": pytest.approx(0.9), "classId": 0}


def test_classify(client):
    logits = [0.0] * len(VEHICLE_LABELS)
    logits[3] = 4.0
    _use(classifier=FakeClassifier(logits))

    resp = client.post("/vehicle/classify", files=_upload(_png(make_image(400, 300))))

    assert resp.status_code == 200
    assert resp.json()["label"] == VEHICLE_LABELS[3]
    assert 0.0 < resp.json()["confidence"] <= 1.0


def test_unsupported_media_type(client):
    _use(detector=FakeDetector(), ocr=FakeOcr())
    resp = client.post("/plate/read", files=_upload(b"GIF89a", name="car.gif", content_type="image/gif"))
    assert resp.status_code == 415


def test_empty_upload(client):
    _use(detector=FakeDetector(), ocr=FakeOcr())
    resp = client.post("/plate/read", files=_upload(b""))
    assert resp.status_code == 400


def test_undecodable_upload(client):
    _use(classifier=FakeClassifier([1.0]))
    resp = client.post("/vehicle/classify", files=_upload(b"definitely not a png"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Could not decode image"


def test_debug_images(client, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "debug_dir", str(tmp_path / "absent"))
    assert client.get("/debug/images").json()["files"] == []

    monkeypatch.setattr(settings, "debug_dir", str(tmp_path))
    (tmp_path / "cropped_640_640.jpg").write_bytes(_png(make_image(4, 4)))

    listing = client.get("/debug/images").json()
    assert listing["files"] == ["cropped_640_640.jpg"]
    assert client.get("/debug/images/cropped_640_640.jpg").status_code == 200
    assert client.get("/debug/images/missing.jpg").status_code == 404


def test_read_plate_box_outside_frame(client):
    _use(detector=FakeDetector([(700, 700, 20, 10)]), ocr=FakeOcr("A"))

    resp = client.post("/plate/read", files=_upload(_png(make_image(640, 640))))

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Detector returned invalid crop for OCR"


def test_read_plate_ocr_failure_is_not_reported_as_crop_error(client):
    class BrokenOcr:
        def extract_text(self, img):
            raise ValueError("tesseract config rejected")

    _use(detector=FakeDetector([(0, 0, 50, 20)]), ocr=BrokenOcr())

    with pytest.raises(ValueError, match="tesseract config rejected"):
        client.post("/plate/read", files=_upload(_png(make_image(640, 640))))
