from typing import Optional
import numpy as np
import onnxruntime as ort
from cars_anpr.ports.classifier_port import ClassifierPort
from cars_anpr.core.config import settings


class OnnxClassifierAdapter(ClassifierPort):
    """
    Vehicle make/model/year classifier (ResNet exported to ONNX).
    Returns raw logits; softmax is applied by the caller.
    """
    def __init__(self, model_path: Optional[str] = None, input_name: Optional[str] = None):
        session_options = ort.SessionOptions()
        session_options.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL

        self.session = ort.InferenceSession(
            model_path or settings.classifier_model_path,
            sess_options=session_options,
            providers=["CPUExecutionProvider"]
        )
        self.input_name = input_name or settings.classifier_input_name

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        outputs = self.session.run(None, {self.input_name: tensor.astype(np.float32)})
        return np.asarray(outputs[0], dtype=np.float32).reshape(-1)
