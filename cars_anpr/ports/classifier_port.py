from typing import Protocol
import numpy as np


class ClassifierPort(Protocol):
    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """[1, 3, H, W] float32 -> raw logits, one per class."""
        ...
