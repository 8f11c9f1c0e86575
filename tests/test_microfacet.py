import pytest

from pathtracer.bxdf import BxDFType
from pathtracer.ggx import GGX
from pathtracer.microfacet import ConductorBxDF, DielectricBxDF
from pathtracer.shape import SurfaceIntersection
from pathtracer.vecmath import Vec3, fresnel_conductor, fresnel_dielectric, refract

NORMAL = Vec3(0.0, 0.0, 1.0)


@pytest.fixture
def si():
    return SurfaceIntersection(shape=None, pos=Vec3(), normal=NORMAL)


def _approx(v):
    return pytest.approx(tuple(v), rel=1e-6, abs=1e-9)


def _conductor(alpha):
    return ConductorBxDF(Vec3(0.2, 0.9, 1.1), Vec3(3.9, 2.4, 2.2), GGX(alpha, alpha))


def test_smooth_conductor_has_no_density(si):
    bxdf = _conductor(0.0)
    wo = Vec3(0.3, 0.1, 1.0).normalized()
    wi = Vec3(-0.3, -0.1, 1.0).normalized()
    assert bxdf.f(wo, wi, si) == Vec3()
    assert bxdf.pdf(wo, wi, si) == 0.0


def test_smooth_conductor_samples_mirror_direction(si):
    bxdf = _conductor(0.0)
    wo = Vec3(1.0, 0.0, 1.0).normalized()
    sample = bxdf.sample_f(0.5, (0.2, 0.3), wo, si)
    assert sample.type is BxDFType.SPECULAR
    assert sample.pdf == 1.0
    assert tuple(sample.wi) == _approx(Vec3(-wo.x, -wo.y, wo.z))
    cos = abs(sample.wi.dot(NORMAL))
    expected = fresnel_conductor(NORMAL, sample.wi, bxdf.eta, bxdf.k)
    assert tuple(sample.f * cos) == _approx(expected)


def test_rough_conductor_sample_matches_evaluation(si):
    bxdf = _conductor(0.3)
    wo = Vec3(0.3, -0.2, 1.0).normalized()
    sample = bxdf.sample_f(0.5, (0.25, 0.7), wo, si)
    assert sample.type is BxDFType.GLOSSY
    assert sample.wi.length() == pytest.approx(1.0)
    assert sample.pdf > 0.0
    assert sample.pdf == pytest.approx(bxdf.pdf(wo, sample.wi, si), rel=1e-6)
    assert tuple(sample.f) == _approx(bxdf.f(wo, sample.wi, si))


def test_smooth_dielectric_reflects_with_fresnel_probability(si):
    bxdf = DielectricBxDF(1.5, GGX(0.0, 0.0))
    wo = Vec3(0.0, 0.0, 1.0)
    sample = bxdf.sample_f(0.0, (0.5, 0.5), wo, si)
    assert sample.type is BxDFType.SPECULAR
    assert sample.pdf == pytest.approx(0.04)
    assert sample.pdf == pytest.approx(fresnel_dielectric(NORMAL, wo, 1.5))


def test_smooth_dielectric_transmits_straight_through_at_normal_incidence(si):
    bxdf = DielectricBxDF(1.5, GGX(0.0, 0.0))
    wo = Vec3(0.0, 0.0, 1.0)
    sample = bxdf.sample_f(0.999, (0.5, 0.5), wo, si)
    assert sample.type is BxDFType.TRANSMISSION
    assert tuple(sample.wi) == _approx(Vec3(0.0, 0.0, -1.0))
    assert tuple(sample.wi) == _approx(refract(NORMAL, wo, 1.5))
    assert sample.pdf == pytest.approx(1.0 - fresnel_dielectric(NORMAL, wo, 1.5))


def test_smooth_dielectric_has_no_density(si):
    bxdf = DielectricBxDF(1.5, GGX(0.0, 0.0))
    wo = Vec3(0.1, 0.0, 1.0).normalized()
    wi = Vec3(-0.1, 0.0, 1.0).normalized()
    assert bxdf.f(wo, wi, si) == Vec3()
    assert bxdf.pdf(wo, wi, si) == 0.0


def test_index_matched_dielectric_pdf_is_zero(si):
    bxdf = DielectricBxDF(1.0, GGX(0.3, 0.3))
    wo = Vec3(0.1, 0.2, 1.0).normalized()
    wi = Vec3(-0.2, 0.1, 1.0).normalized()
    assert bxdf.pdf(wo, wi, si) == 0.0


def test_rough_dielectric_reflection_sample_matches_evaluation(si):
    bxdf = DielectricBxDF(1.5, GGX(0.3, 0.3))
    wo = Vec3(0.2, 0.1, 1.0).normalized()
    sample = bxdf.sample_f(0.0, (0.3, 0.6), wo, si)
    assert sample.type is BxDFType.GLOSSY
    assert sample.pdf == pytest.approx(bxdf.pdf(wo, sample.wi, si), rel=1e-6)
    assert tuple(sample.f) == _approx(bxdf.f(wo, sample.wi, si))
    assert sample.f.x == sample.f.y == sample.f.z


def test_rough_dielectric_transmission_goes_below_surface(si):
    bxdf = DielectricBxDF(1.5, GGX(0.3, 0.3))
    wo = Vec3(0.2, 0.1, 1.0).normalized()
    sample = bxdf.sample_f(0.9999, (0.3, 0.6), wo, si)
    assert sample.type is BxDFType.GLOSSYTRANSMISSION
    assert sample.wi.z < 0.0
    assert sample.pdf > 0.0
    assert sample.wi.length() == pytest.approx(1.0)