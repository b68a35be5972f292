"""
Plate detection, plate reading and vehicle classification flows.

Engines come in through the ports so the same flows run against YOLO,
Tesseract and ONNX Runtime in the service and against fakes in tests.
Every function works on a single image and keeps no state between calls.
"""
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from cars_anpr.core.config import settings
from cars_anpr.domain import image_utils, services
from cars_anpr.domain.errors import MultiplePlatesDetectedError
from cars_anpr.domain.labels import VEHICLE_LABELS
from cars_anpr.domain.models import DetectionResult, PlateReading, PlateStatus, Prediction
from cars_anpr.ports.classifier_port import ClassifierPort
from cars_anpr.ports.detector_port import PlateDetectorPort
from cars_anpr.ports.ocr_port import OcrPort

logger = logging.getLogger(__name__)


def _keep(img: np.ndarray, name: str) -> None:
    if settings.save_intermediates:
        image_utils.save_image(img, settings.debug_dir, name)


# =========================
# Plate detection
# =========================

def detect_plates_in_image(
    img_bgr: np.ndarray,
    detector: PlateDetectorPort,
) -> Tuple[DetectionResult, np.ndarray]:
    """
    Runs the detector on the image brought to the detector frame.
    Returns the boxes together with that frame, since box coordinates
    refer to it.
    """
    size = settings.plate_img_size
    h, w = img_bgr.shape[:2]
    if (w, h) != (size, size):
        frame = image_utils.resize_image(img_bgr, size, size)
        _keep(frame, f"cropped_{size}_{size}.jpg")
    else:
        frame = img_bgr

    result = DetectionResult(boxes=list(detector.detect(frame)))
    logger.info("Detector returned %d plate box(es)", len(result))
    return result, frame


def detect_plates(image_path: str, detector: PlateDetectorPort) -> DetectionResult:
    if not image_utils.image_exists(image_path):
        logger.warning("Image not found: %r", image_path)
        return DetectionResult()

    result, _ = detect_plates_in_image(image_utils.load_image(image_path), detector)
    return result


# =========================
# Plate reading
# =========================

def read_plate_image(
    img_bgr: np.ndarray,
    detector: PlateDetectorPort,
    ocr: OcrPort,
) -> PlateReading:
    # 1) Detect
    result, frame = detect_plates_in_image(img_bgr, detector)
    if len(result) == 0:
        return PlateReading(status=PlateStatus.NO_PLATE)
    if len(result) > 1:
        raise MultiplePlatesDetectedError(len(result))

    box = result.boxes[0].box

    # 2) Crop
    plate = image_utils.crop_box(frame, box)
    _keep(plate, f"cropped_plate_{box.w}_{box.h}.jpg")

    # 3) OCR
    raw_text = ocr.extract_text(plate)
    text = services.normalize_ocr_text(raw_text)
    logger.info("OCR raw text: %r", raw_text)

    if not text:
        return PlateReading(status=PlateStatus.NO_TEXT, box=box)

    # 4) Region code
    corrected = services.correct_region_code(text)
    if corrected != text:
        logger.info("Region code corrected: %r -> %r", text, corrected)

    return PlateReading(status=PlateStatus.OK, text=corrected, raw_text=raw_text, box=box)


def read_plate(image_path: str, detector: PlateDetectorPort, ocr: OcrPort) -> PlateReading:
    """
    Reads the plate of the vehicle in the image at image_path.

    A missing image and an image without a plate both give an empty text
    (see status); an image with several plates raises
    MultiplePlatesDetectedError. Engine errors propagate.
    """
    if not image_utils.image_exists(image_path):
        logger.warning("Image not found: %r", image_path)
        return PlateReading(status=PlateStatus.NO_IMAGE)

    return read_plate_image(image_utils.load_image(image_path), detector, ocr)


# =========================
# Vehicle classification
# =========================

def predict_vehicle(
    img_bgr: np.ndarray,
    classifier: ClassifierPort,
    labels: Sequence[str] = VEHICLE_LABELS,
) -> Optional[Prediction]:
    size = settings.classifier_img_size
    resized = image_utils.resize_image(img_bgr, size, size)
    _keep(resized, f"cropped_{size}_{size}.jpg")

    logits = classifier.infer(image_utils.to_classifier_tensor(resized))
    prediction = services.top_prediction(services.softmax(logits), labels)

    if prediction is not None:
        logger.info("Vehicle class: %s (%.3f)", prediction.label, prediction.confidence)
    return prediction


def classify_vehicle(image_path: str, classifier: ClassifierPort) -> str:
    if not image_utils.image_exists(image_path):
        logger.warning("Image not found: %r", image_path)
        return ""

    prediction = predict_vehicle(image_utils.load_image(image_path), classifier)
    return prediction.label if prediction else ""
