import pytest
from PIL import Image as PILImage

from pathtracer.image import Image
from pathtracer.vecmath import Vec3


def test_new_image_is_black():
    image = Image(4, 3)
    assert image.get_pixel(2, 3) == Vec3()
    assert image.to_bytes() == bytes(4 * 3 * 3)


def test_set_get_round_trip():
    image = Image(5, 2)
    image.set_pixel(1, 4, (0.1, 0.2, 0.3))
    assert image.get_pixel(1, 4) == Vec3(0.1, 0.2, 0.3)
    assert image.get_pixel(0, 4) == Vec3()


def test_layout_is_row_major():
    image = Image(2, 2)
    image.set_pixel(1, 0, (1.0, 1.0, 1.0))
    data = image.to_bytes()
    assert data[6:9] == bytes([255, 255, 255])
    assert data[:6] == bytes(6)


def test_to_bytes_clamps():
    image = Image(1, 1)
    image.set_pixel(0, 0, (-1.0, 7.0, 1.0))
    assert image.to_bytes() == bytes([0, 255, 255])


def test_out_of_range_pixel():
    image = Image(2, 2)
    with pytest.raises(IndexError):
        image.get_pixel(2, 0)
    with pytest.raises(IndexError):
        image.set_pixel(0, -1, (0, 0, 0))


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Image(70000, 1)


def test_save_writes_jpeg(tmp_path):
    path = tmp_path / "out.jpeg"
    image = Image(8, 4)
    image.save(path, [1.0] * (8 * 4 * 3))
    assert path.read_bytes()[:2] == b"\xff\xd8"
    with PILImage.open(path) as loaded:
        assert loaded.size == (8, 4)
        assert loaded.mode == "RGB"
        assert all(c >= 250 for c in loaded.getpixel((3, 2)))
    assert image.get_pixel(3, 7) == Vec3(1.0, 1.0, 1.0)


def test_save_rejects_oversized_buffer(tmp_path):
    with pytest.raises(ValueError):
        Image(1, 1).save(tmp_path / "x.jpeg", [0.0] * 4)