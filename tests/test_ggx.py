import math

import pytest

from pathtracer.ggx import GGX
from pathtracer.vecmath import Vec3

UP = Vec3(0.0, 0.0, 1.0)


def test_is_smooth_threshold():
    assert GGX(0.0005, 0.0009).is_smooth()
    assert not GGX(0.0005, 0.001).is_smooth()
    assert not GGX(0.3, 0.3).is_smooth()


def test_distribution_is_normalised():
    ggx = GGX(0.5, 0.5)
    steps = 4000
    dtheta = (math.pi / 2) / steps
    total = 0.0
    for k in range(steps):
        theta = (k + 0.5) * dtheta
        wm = Vec3(math.sin(theta), 0.0, math.cos(theta))
        total += ggx.d(wm) * math.cos(theta) * math.sin(theta) * dtheta
    assert math.isclose(total * 2.0 * math.pi, 1.0, abs_tol=1e-2)


def test_no_masking_at_normal_incidence():
    ggx = GGX(0.4, 0.2)
    assert ggx.masking_lambda(UP) == 0.0
    assert ggx.g1(UP) == 1.0


@pytest.mark.parametrize("angle", [0.2, 0.8, 1.3])
def test_masking_in_unit_interval_and_decreasing(angle):
    ggx = GGX(0.3, 0.3)
    w = Vec3(math.sin(angle), 0.0, math.cos(angle))
    steeper = Vec3(math.sin(angle + 0.1), 0.0, math.cos(angle + 0.1))
    assert 0.0 < ggx.g1(w) <= 1.0
    assert ggx.g1(steeper) < ggx.g1(w)


def test_shadowing_symmetric_and_below_g1():
    ggx = GGX(0.3, 0.6)
    wo = Vec3(0.3, 0.2, 0.9).normalized()
    wi = Vec3(-0.5, 0.1, 0.7).normalized()
    assert ggx.g(wo, wi) == ggx.g(wi, wo)
    assert ggx.g(wo, wi) <= min(ggx.g1(wo), ggx.g1(wi))


def test_visible_distribution_non_negative():
    ggx = GGX(0.3, 0.3)
    wo = Vec3(0.3, 0.0, 0.9).normalized()
    wm = Vec3(0.1, 0.1, 1.0).normalized()
    assert ggx.visible_d(wo, wm) > 0.0


@pytest.mark.parametrize("uv", [(0.1, 0.2), (0.5, 0.5), (0.9, 0.95), (0.0, 0.0)])
def test_sample_ellipsoid_gives_upper_unit_vector(uv):
    ggx = GGX(0.4, 0.25)
    wm = ggx.sample_ellipsoid(Vec3(0.4, -0.3, 0.8).normalized(), uv)
    assert math.isclose(wm.length(), 1.0)
    assert wm.z > 0.0