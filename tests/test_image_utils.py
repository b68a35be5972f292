import numpy as np
import pytest

from cars_anpr.domain import image_utils
from cars_anpr.domain.errors import ImageDecodeError, InvalidCropError
from cars_anpr.domain.models import BoundingBox

from conftest import make_image


def test_resize_stretches_to_target():
    img = make_image(800, 300)
    out = image_utils.resize_image(img, 640, 640)
    assert out.shape == (640, 640, 3)
    # source untouched
    assert img.shape == (300, 800, 3)


@pytest.mark.parametrize("w,h", [(0, 640), (640, 0), (-1, 10)])
def test_resize_rejects_non_positive_size(w, h):
    with pytest.raises(ValueError):
        image_utils.resize_image(make_image(10, 10), w, h)


def test_crop_box_is_exact_and_independent():
    frame = make_image(640, 640)
    frame[100:140, 200:320] = (0, 255, 0)

    crop = image_utils.crop_box(frame, BoundingBox(x=200, y=100, w=120, h=40))
    assert crop.shape == (40, 120, 3)
    assert np.all(crop == (0, 255, 0))

    crop[:] = 0
    assert np.all(frame[100:140, 200:320] == (0, 255, 0))


def test_crop_box_outside_frame():
    with pytest.raises(InvalidCropError):
        image_utils.crop_box(make_image(64, 64), BoundingBox(x=100, y=100, w=10, h=10))


def test_crop_box_partly_outside_frame_keeps_box_size():
    frame = make_image(640, 640, color=(200, 200, 200))
    crop = image_utils.crop_box(frame, BoundingBox(x=600, y=620, w=80, h=40))

    assert crop.shape == (40, 80, 3)
    assert np.all(crop[:20, :40] == 200)
    # outside the frame
    assert np.all(crop[20:, :] == 0)
    assert np.all(crop[:, 40:] == 0)


def test_crop_box_negative_origin():
    frame = make_image(64, 64, color=(9, 9, 9))
    crop = image_utils.crop_box(frame, BoundingBox(x=-10, y=-5, w=20, h=10))

    assert crop.shape == (10, 20, 3)
    assert np.all(crop[5:, 10:] == 9)
    assert np.all(crop[:5, :] == 0)


@pytest.mark.parametrize("w,h", [(0, 10), (10, 0)])
def test_crop_box_empty_box(w, h):
    with pytest.raises(InvalidCropError):
        image_utils.crop_box(make_image(64, 64), BoundingBox(x=0, y=0, w=w, h=h))


def test_load_image_undecodable_file(tmp_path):
    bad = tmp_path / "broken.jpg"
    bad.write_bytes(b"not an image")
    with pytest.raises(ImageDecodeError):
        image_utils.load_image(str(bad))


def test_decode_image_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        image_utils.decode_image(b"\x00\x01\x02")


def test_image_exists(tmp_path, write_image):
    path = write_image(make_image(4, 4))
    assert image_utils.image_exists(path)
    assert not image_utils.image_exists(str(tmp_path / "nope.png"))
    assert not image_utils.image_exists("")
    assert not image_utils.image_exists(None)


def test_save_image_creates_directory(tmp_path):
    target = tmp_path / "debug" / "nested"
    path = image_utils.save_image(make_image(8, 8), str(target), "cropped_8_8.jpg")
    assert (target / "cropped_8_8.jpg").exists()
    assert path.endswith("cropped_8_8.jpg")


def test_classifier_tensor_layout_and_normalization():
    # pure red in BGR order
    img = make_image(224, 224, color=(0, 0, 255))
    tensor = image_utils.to_classifier_tensor(img)

    assert tensor.shape == (1, 3, 224, 224)
    assert tensor.dtype == np.float32
    assert tensor[0, 0, 0, 0] == pytest.approx((1.0 - 0.485) / 0.229, rel=1e-5)
    assert tensor[0, 1, 10, 10] == pytest.approx((0.0 - 0.456) / 0.224, rel=1e-5)
    assert tensor[0, 2, 223, 223] == pytest.approx((0.0 - 0.406) / 0.225, rel=1e-5)
