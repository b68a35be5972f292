from enum import Enum
from pydantic import BaseModel
from typing import List, Optional

class BoundingBox(BaseModel):
    # left, top, width, height in the detector frame
    x: int
    y: int
    w: int
    h: int

class Detection(BaseModel):
    box: BoundingBox
    confidence: float
    class_id: int = 0

class DetectionResult(BaseModel):
    boxes: List[Detection] = []

    def __len__(self) -> int:
        return len(self.boxes)

class Prediction(BaseModel):
    label: str
    confidence: float

class PlateStatus(str, Enum):
    OK = "ok"
    NO_IMAGE = "no_image"
    NO_PLATE = "no_plate"
    NO_TEXT = "no_text"

class PlateReading(BaseModel):
    status: PlateStatus
    text: str = ""
    raw_text: str = ""
    box: Optional[BoundingBox] = None
