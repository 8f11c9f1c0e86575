import pytest

from pathtracer.camera import Camera
from pathtracer.sampling import Sampler
from pathtracer.vecmath import Vec3


class _FixedSampler:
    def __init__(self, value):
        self.value = value

    def get_uv_1d(self):
        return self.value


def _approx_vec(v):
    return pytest.approx(tuple(v))


def test_pixel_centers_are_symmetric():
    cam = Camera(4, 4, sampler=_FixedSampler(0.5))
    first = cam.viewport_pixel_center(0, 0)
    last = cam.viewport_pixel_center(3, 3)
    assert first.x == pytest.approx(-last.x)
    assert first.y == pytest.approx(-last.y)
    assert first.z == pytest.approx(-1.0)
    assert first.x < 0.0 < first.y


def test_jitter_spans_one_pixel():
    high = Camera(4, 4, sampler=_FixedSampler(1.0)).viewport_pixel_center(0, 0)
    low = Camera(4, 4, sampler=_FixedSampler(0.0)).viewport_pixel_center(1, 1)
    assert tuple(high) == _approx_vec(low)


def test_random_jitter_stays_in_pixel():
    cam = Camera(4, 4, sampler=Sampler(seed=3))
    centered = Camera(4, 4, sampler=_FixedSampler(0.5)).viewport_pixel_center(2, 1)
    half = 0.5 * abs(cam.pixel_delta_u.x)
    for _ in range(50):
        p = cam.viewport_pixel_center(2, 1)
        assert abs(p.x - centered.x) <= half + 1e-12
        assert abs(p.y - centered.y) <= half + 1e-12


def test_primary_ray_starts_at_center_with_unit_direction():
    center = Vec3(1.0, 2.0, 3.0)
    cam = Camera(8, 8, center=center, sampler=Sampler(seed=1))
    ray = cam.create_primary_ray(5, 2)
    assert ray.origin == center
    assert ray.direction.length() == pytest.approx(1.0)
    assert ray.direction.z < 0.0


def test_center_offsets_viewport():
    shift = Vec3(1.0, 2.0, 3.0)
    base = Camera(4, 4, sampler=_FixedSampler(0.5)).viewport_pixel_center(1, 2)
    moved = Camera(4, 4, center=shift, sampler=_FixedSampler(0.5)).viewport_pixel_center(1, 2)
    assert tuple(moved) == _approx_vec(base + shift)


def test_aspect_ratio_uses_integer_division():
    wide = Camera(3, 2, sampler=_FixedSampler(0.5))
    square = Camera(3, 3, sampler=_FixedSampler(0.5))
    assert wide.viewport_pixel_center(0, 0).x == pytest.approx(square.viewport_pixel_center(0, 0).x)
    assert wide.viewport_pixel_center(2, 0).x == pytest.approx(square.viewport_pixel_center(2, 0).x)


def test_size_attributes():
    cam = Camera(6, 4)
    assert (cam.width, cam.height) == (6, 4)


@pytest.mark.parametrize("size", [(0, 4), (4, 0), (-1, 3)])
def test_invalid_size_raises(size):
    with pytest.raises(ValueError):
        Camera(*size)