from typing import Protocol, List
import numpy as np
from cars_anpr.domain.models import Detection


class PlateDetectorPort(Protocol):
    def detect(self, img_bgr: np.ndarray) -> List[Detection]:
        ...
