import pytest

from pathtracer.tonemap import ClampToneMap, ReinhardToneMap, ToneMap
from pathtracer.vecmath import Vec3


def test_tonemap_is_abstract():
    with pytest.raises(TypeError):
        ToneMap()


def test_clamp_limits_channels():
    pixels = [-0.5, 0.25, 3.0, 1.0, 0.0, 0.75]
    ClampToneMap().map(pixels)
    assert pixels == [0.0, 0.25, 1.0, 1.0, 0.0, 0.75]


def test_white_point_floor():
    assert ReinhardToneMap().white_point([0.0] * 12) == 10.0


def test_white_point_follows_bright_pixel():
    tm = ReinhardToneMap()
    assert tm.white_point([0.0, 0.0, 0.0, 50.0, 50.0, 50.0]) == pytest.approx(50.0)


def test_extended_reinhard_maps_white_to_one():
    tm = ReinhardToneMap()
    w = 25.0
    result = tm.extended_reinhard(Vec3(w, w, w), w)
    assert all(c == pytest.approx(1.0) for c in result)
    assert tm.extended_reinhard(Vec3(), w) == Vec3()


def test_extended_reinhard_is_monotonic():
    tm = ReinhardToneMap()
    values = [tm.extended_reinhard((v, v, v), 10.0).x for v in (0.1, 0.5, 1.0, 4.0, 9.0)]
    assert values == sorted(values)


def test_reinhard_output_in_unit_range_and_length_kept():
    pixels = [0.0, 0.5, 2.0, 100.0, 3.0, 0.1, 7.0, 7.0, 7.0]
    ReinhardToneMap().map(pixels)
    assert len(pixels) == 9
    assert all(0.0 <= v <= 1.0 for v in pixels)


def test_reinhard_rejects_partial_pixel():
    with pytest.raises(ValueError):
        ReinhardToneMap().map([0.1, 0.2])