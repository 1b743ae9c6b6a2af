import numpy as np
import pytest
from PIL import Image

from tracekit.bitmap import Bitmap
from tracekit.common import TracerError


def test_new_bitmap_is_black_with_given_size():
    bitmap = Bitmap(4, 3)
    assert bitmap.cols == 4
    assert bitmap.rows == 3
    assert bitmap.data.shape == (3, 4, 3)
    assert not bitmap.data.any()


def test_data_shape_mismatch_raises():
    with pytest.raises(TracerError):
        Bitmap(2, 2, np.zeros((3, 2, 3)))


def test_from_array_rejects_non_rgb():
    with pytest.raises(TracerError):
        Bitmap.from_array(np.zeros((2, 2, 4)))


def test_to_srgb8_black_and_white():
    data = np.zeros((1, 2, 3))
    data[0, 1] = 1.0
    rgb8 = Bitmap.from_array(data).to_srgb8()
    assert rgb8.dtype == np.uint8
    assert rgb8[0, 0].tolist() == [0, 0, 0]
    assert rgb8[0, 1].tolist() == [255, 255, 255]


def test_to_srgb8_clamps_out_of_range():
    data = np.array([[[-1.0, 5.0, 0.0]]])
    rgb8 = Bitmap.from_array(data).to_srgb8()
    assert rgb8[0, 0, 0] == 0
    assert rgb8[0, 0, 1] == 255


def test_to_srgb8_is_monotonic():
    ramp = np.linspace(0.0, 1.0, 50)
    data = np.stack([ramp, ramp, ramp], axis=-1)[None, :, :]
    values = Bitmap.from_array(data).to_srgb8()[0, :, 0].tolist()
    assert values == sorted(values)
    assert values[0] == 0
    assert values[-1] == 255


def test_save_png_round_trip(tmp_path):
    rng = np.random.default_rng(7)
    bitmap = Bitmap.from_array(rng.random((5, 6, 3)))
    path = bitmap.save_png(tmp_path / "out")
    assert path.name == "out.png"
    with Image.open(path) as image:
        loaded = np.asarray(image.convert("RGB"))
    assert np.array_equal(loaded, bitmap.to_srgb8())


def test_save_png_into_missing_directory_raises(tmp_path):
    bitmap = Bitmap(2, 2)
    with pytest.raises(TracerError):
        bitmap.save_png(tmp_path / "missing" / "out")