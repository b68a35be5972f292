from pydantic import BaseModel
import os
import tempfile
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Model weights
    plate_model_path: str = os.getenv("PLATE_MODEL_PATH", "models/plateyolov8.onnx")
    classifier_model_path: str = os.getenv("CLASSIFIER_MODEL_PATH", "models/carresnet152.onnx")
    classifier_input_name: str = os.getenv("CLASSIFIER_INPUT_NAME", "input")

    # Detector / classifier input contracts
    conf: float = float(os.getenv("CONF", "0.25"))
    plate_img_size: int = int(os.getenv("PLATE_IMG_SIZE", "640"))
    classifier_img_size: int = int(os.getenv("CLASSIFIER_IMG_SIZE", "224"))

    # Tesseract
    tesseract_lang: str = os.getenv("TESSERACT_LANG", "eng")
    tesseract_cmd: Optional[str] = os.getenv("TESSERACT_CMD")

    # Resized frames and plate crops are only written when enabled
    save_intermediates: bool = _env_flag("SAVE_INTERMEDIATES")
    debug_dir: str = os.getenv(
        "DEBUG_DIR",
        str(Path(tempfile.gettempdir()) / "debug_plates")
    )

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
