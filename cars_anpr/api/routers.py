from functools import lru_cache
import logging
import os
import numpy as np
from fastapi import APIRouter, UploadFile, File, HTTPException, Depends
from fastapi.responses import FileResponse
from cars_anpr.ports.detector_port import PlateDetectorPort
from cars_anpr.ports.ocr_port import OcrPort
from cars_anpr.ports.classifier_port import ClassifierPort
from cars_anpr.adapters.detector.yolo_adapter import YoloAdapter
from cars_anpr.adapters.ocr.tesseract_adapter import TesseractPlateAdapter
from cars_anpr.adapters.classifier.onnx_adapter import OnnxClassifierAdapter
from cars_anpr.domain import image_utils, pipelines
from cars_anpr.domain.errors import ImageDecodeError, InvalidCropError, MultiplePlatesDetectedError
from cars_anpr.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependency Injection (Cached): engines are loaded once per process
@lru_cache()
def get_detector() -> PlateDetectorPort:
    return YoloAdapter()

@lru_cache()
def get_plate_ocr() -> OcrPort:
    return TesseractPlateAdapter()

@lru_cache()
def get_classifier() -> ClassifierPort:
    return OnnxClassifierAdapter()


async def _read_upload(file: UploadFile) -> np.ndarray:
    if file.content_type not in ("image/jpeg", "image/png", "image/webp"):
        raise HTTPException(status_code=415, detail="Only JPG/PNG/WEBP supported")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        return image_utils.decode_image(data)
    except ImageDecodeError:
        raise HTTPException(status_code=400, detail="Could not decode image")


@router.post("/plate/detect", response_model=dict)
async def detect(
    file: UploadFile = File(...),
    detector: PlateDetectorPort = Depends(get_detector)
):
    img = await _read_upload(file)
    result, _ = pipelines.detect_plates_in_image(img, detector)

    return {
        "fileName": file.filename,
        "frame": {"w": settings.plate_img_size, "h": settings.plate_img_size},
        "boxes": [
            {
                "x": d.box.x, "y": d.box.y, "w": d.box.w, "h": d.box.h,
                "confidence": d.confidence,
                "classId": d.class_id,
            }
            for d in result.boxes
        ],
    }


@router.post("/plate/read", response_model=dict)
async def read_plate(
    file: UploadFile = File(...),
    detector: PlateDetectorPort = Depends(get_detector),
    ocr_service: OcrPort = Depends(get_plate_ocr)
):
    img = await _read_upload(file)

    try:
        reading = pipelines.read_plate_image(img, detector, ocr_service)
    except MultiplePlatesDetectedError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except InvalidCropError as exc:
        logger.error("Plate crop failed: %s", exc)
        raise HTTPException(status_code=500, detail="Detector returned invalid crop for OCR")

    box = reading.box
    return {
        "fileName": file.filename,
        "status": reading.status.value,
        "plateText": reading.text,
        "rawText": reading.raw_text,
        "bbox": {"x": box.x, "y": box.y, "w": box.w, "h": box.h} if box else None,
    }


@router.post("/vehicle/classify", response_model=dict)
async def classify(
    file: UploadFile = File(...),
    classifier: ClassifierPort = Depends(get_classifier)
):
    img = await _read_upload(file)
    prediction = pipelines.predict_vehicle(img, classifier)

    return {
        "fileName": file.filename,
        "label": prediction.label if prediction else "",
        "confidence": prediction.confidence if prediction else None,
    }


@router.get("/debug/images")
def list_debug_images():
    """List intermediate images saved in the debug directory"""
    debug_dir = settings.debug_dir
    if not os.path.exists(debug_dir):
        return {"files": [], "message": "Debug directory does not exist yet"}
    files = sorted(os.listdir(debug_dir))
    return {"files": files, "count": len(files), "directory": debug_dir}


@router.get("/debug/images/{filename}")
def get_debug_image(filename: str):
    """Download a specific debug image"""
    # Sanitize filename to prevent directory traversal
    filename = os.path.basename(filename)
    file_path = os.path.join(settings.debug_dir, filename)

    if not os.path.exists(file_path):
        raise HTTPException(status_code=404, detail=f"File not found: {filename}")

    return FileResponse(file_path, media_type="image/jpeg", filename=filename)
