from typing import List, Optional
import numpy as np
from ultralytics import YOLO
from cars_anpr.ports.detector_port import PlateDetectorPort
from cars_anpr.domain.models import Detection, BoundingBox
from cars_anpr.core.config import settings


class YoloAdapter(PlateDetectorPort):
    """
    Plate detector backed by ultralytics (.pt or exported .onnx weights).
    Returns every box the model keeps; filtering is left to the model's
    own confidence threshold.
    """
    def __init__(self, model_path: Optional[str] = None):
        self.model = YOLO(model_path or settings.plate_model_path, task="detect")

    def detect(self, img_bgr: np.ndarray) -> List[Detection]:
        results = self.model.predict(
            img_bgr,
            imgsz=settings.plate_img_size,
            conf=settings.conf,
            verbose=False
        )[0]

        if results.boxes is None or len(results.boxes) == 0:
            return []

        img_h, img_w = img_bgr.shape[:2]
        xyxy = results.boxes.xyxy.cpu().numpy().reshape(-1, 4)
        confs = results.boxes.conf.cpu().numpy().reshape(-1)
        classes = results.boxes.cls.cpu().numpy().reshape(-1)

        detections = []
        for (x1, y1, x2, y2), conf, cls in zip(xyxy, confs, classes):
            x1 = max(0, min(int(x1), img_w - 1))
            y1 = max(0, min(int(y1), img_h - 1))
            x2 = max(x1 + 1, min(int(x2), img_w))
            y2 = max(y1 + 1, min(int(y2), img_h))

            detections.append(Detection(
                box=BoundingBox(x=x1, y=y1, w=x2 - x1, h=y2 - y1),
                confidence=float(conf),
                class_id=int(cls),
            ))

        return detections
