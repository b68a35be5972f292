from typing import Optional
import os
import cv2
import pytesseract
import numpy as np
from cars_anpr.ports.ocr_port import OcrPort
from cars_anpr.domain.regions import PLATE_ALPHABET
from cars_anpr.core.config import settings

# Configure Tesseract executable path
if settings.tesseract_cmd:
    pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd
elif os.name == 'nt':  # Windows
    tesseract_cmd = r'C:\Program Files\Tesseract-OCR\tesseract.exe'
    if os.path.exists(tesseract_cmd):
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

# psm 6: assume a single uniform block of text
PLATE_CONFIG = f"--oem 3 --psm 6 -c tessedit_char_whitelist={PLATE_ALPHABET}"


class TesseractPlateAdapter(OcrPort):
    """
    OCR for plate crops: one block of text over the plate alphabet.
    """
    def __init__(self, config: Optional[str] = None, lang: Optional[str] = None):
        self.config = config or PLATE_CONFIG
        self.lang = lang or settings.tesseract_lang

    def extract_text(self, img: np.ndarray) -> str:
        if img.ndim == 3:
            img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        text = pytesseract.image_to_string(img, lang=self.lang, config=self.config)
        # Drop the page separator; line breaks are kept for the caller
        return text.replace("\x0c", "")
