class AnprError(Exception):
    """Base class for pipeline errors surfaced to callers."""


class ImageDecodeError(AnprError):
    def __init__(self, source: str):
        super().__init__(f"Could not decode image: {source}")
        self.source = source


class MultiplePlatesDetectedError(AnprError):
    """
    More than one plate box in a single image. Reading one of them would
    give an unflagged guess, so the call fails instead.
    """
    def __init__(self, count: int):
        super().__init__(f"Unsupported: multiple plates detected ({count})")
        self.count = count


class InvalidCropError(AnprError):
    def __init__(self, box, frame_size):
        w, h = frame_size
        super().__init__(f"Box {box.x},{box.y},{box.w},{box.h} does not overlap the {w}x{h} frame")
        self.box = box
