"""Microfacet conductor and dielectric scattering built on the GGX distribution."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from pathtracer.bxdf import BxDF, BxDFSample, BxDFType
from pathtracer.ggx import GGX
from pathtracer.shape import SurfaceIntersection
from pathtracer.vecmath import (
    Vec3,
    fresnel_conductor,
    fresnel_dielectric,
    from_local,
    reflect,
    refract,
    to_local,
)


def _div(a: float, b: float) -> float:
    """Division that yields inf or NaN on a zero divisor instead of raising."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _grey(value: float) -> Vec3:
    return Vec3(value, value, value)


@dataclass
class ConductorBxDF(BxDF):
    """Metal with complex index of refraction eta + i*k and GGX roughness."""

    eta: Vec3
    k: Vec3
    ggx: GGX

    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        if self.ggx.is_smooth():
            return Vec3()
        local_wo = to_local(wo, si.normal)
        local_wi = to_local(wi, si.normal)
        cos_o = abs(local_wo.z)
        cos_i = abs(wi.z)
        if cos_o == 0.0 or cos_i == 0.0:
            return Vec3()
        wm = local_wi + local_wo
        if wm.length() == 0.0:
            return Vec3()
        wm = wm.normalized()
        fresnel = fresnel_conductor(wm, local_wo, self.eta, self.k)
        return self.ggx.d(wm) * fresnel * self.ggx.g(local_wo, local_wi) / (4.0 * cos_o * cos_i)

    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        if self.ggx.is_smooth():
            wi = reflect(-wo, si.normal)
            cos = abs(si.normal.dot(wi))
            fresnel = fresnel_conductor(si.normal, wi, self.eta, self.k)
            f = Vec3(*(_div(c, cos) for c in fresnel))
            return BxDFSample(f, wi, 1.0, BxDFType.SPECULAR)

        local_wo = to_local(wo, si.normal)
        wm = self.ggx.sample_ellipsoid(local_wo, uv)
        wi = reflect(-local_wo, wm)
        cos_o = abs(local_wo.z)
        cos_i = abs(wi.z)
        if cos_o == 0.0 or cos_i == 0.0:
            return BxDFSample()

        pdf = _div(self.ggx.visible_d(local_wo, wm), 4.0 * abs(local_wo.dot(wm)))
        fresnel = fresnel_conductor(wm, local_wo, self.eta, self.k)
        f = self.ggx.d(wm) * fresnel * self.ggx.g(local_wo, wi) / (4.0 * cos_o * cos_i)
        return BxDFSample(f, from_local(wi, si.normal), pdf, BxDFType.GLOSSY)

    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        if self.ggx.is_smooth():
            return 0.0
        local_wo = to_local(wo, si.normal)
        local_wi = to_local(wi, si.normal)
        wm = local_wo + local_wi
        if wm.length() == 0.0:
            return 0.0
        wm = wm.normalized()
        if wm.z < 0.0:
            wm = -wm
        return _div(self.ggx.visible_d(local_wo, wm), 4.0 * abs(local_wo.dot(wm)))


@dataclass
class DielectricBxDF(BxDF):
    """Glass-like interface with a real index of refraction and GGX roughness."""

    eta: float
    ggx: GGX

    def _half_vector(self, local_wo: Vec3, local_wi: Vec3, cos_o: float, cos_i: float):
        """Shared set-up of f and pdf: (wm, etap, is_reflection) or None if invalid."""
        reflection = cos_o * cos_i > 0.0
        etap = 1.0
        if not reflection:
            etap = 1.0 / self.eta if cos_o < 0.0 else self.eta
        wm = local_wi * etap + local_wo
        if wm.length() == 0.0:
            return None
        wm = wm.normalized()
        if wm.z < 0.0:
            wm = -wm
        if wm.dot(local_wi) * cos_i < 0.0 or wm.dot(local_wo) * cos_o < 0.0:
            return None
        return wm, etap, reflection

    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        if self.ggx.is_smooth():
            return Vec3()
        local_wo = to_local(wo, si.normal)
        local_wi = to_local(wi, si.normal)
        cos_o = abs(local_wo.z)
        cos_i = abs(wi.z)
        if cos_o == 0.0 or cos_i == 0.0:
            return Vec3()
        setup = self._half_vector(local_wo, local_wi, cos_o, cos_i)
        if setup is None:
            return Vec3()
        wm, etap, reflection = setup

        fr = fresnel_dielectric(wm, local_wo, self.eta)
        tr = 1.0 - fr
        if reflection:
            return _grey(
                self.ggx.d(wm) * fr * self.ggx.g(local_wo, local_wi) / (4.0 * cos_o * cos_i)
            )
        denom = (local_wi.dot(wm) + local_wo.dot(wm) / etap) ** 2
        abs_wi_wm = abs(local_wi.dot(wm))
        abs_wo_wm = abs(local_wo.dot(wm))
        value = self.ggx.d(wm) * tr * self.ggx.g(local_wo, local_wi) * abs_wi_wm * abs_wo_wm
        return _grey(_div(value, cos_o * cos_i * denom))

    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        if self.ggx.is_smooth():
            fr = fresnel_dielectric(si.normal, wo, self.eta)
            tr = 1.0 - fr
            if u < fr / (fr + tr):
                wi = reflect(-wo, si.normal)
                f = _grey(_div(fr, abs(si.normal.dot(wi))))
                return BxDFSample(f, wi, fr / (fr + tr), BxDFType.SPECULAR)
            refracted = refract(si.normal, wo, self.eta)
            if refracted is None:
                return BxDFSample()
            f = _grey(_div(tr, abs(si.normal.dot(refracted))))
            return BxDFSample(f, refracted, tr / (fr + tr), BxDFType.TRANSMISSION)

        local_wo = to_local(wo, si.normal)
        wm = self.ggx.sample_ellipsoid(local_wo, uv)
        fr = fresnel_dielectric(wm, local_wo, self.eta)
        tr = 1.0 - fr
        if u < fr / (fr + tr):
            wi = reflect(-local_wo, wm)
            cos_o = abs(local_wo.z)
            cos_i = abs(wi.z)
            if cos_o == 0.0 or cos_i == 0.0:
                return BxDFSample()
            pdf = _div(self.ggx.visible_d(local_wo, wm), 4.0 * abs(local_wo.dot(wm))) * fr / (fr + tr)
            f = _grey(self.ggx.d(wm) * fr * self.ggx.g(local_wo, wi) / (4.0 * cos_o * cos_i))
            return BxDFSample(f, from_local(wi, si.normal), pdf, BxDFType.GLOSSY)

        wi = refract(wm, local_wo, self.eta)
        if wi is None:
            return BxDFSample()
        cos_o = abs(local_wo.z)
        cos_i = abs(wi.z)
        etap = 1.0 / self.eta if wm.dot(local_wo) < 0.0 else self.eta
        denom = (wi.dot(wm) + local_wo.dot(wm) / etap) ** 2
        abs_wi_wm = abs(wi.dot(wm))
        abs_wo_wm = abs(local_wo.dot(wm))
        pdf = _div(self.ggx.visible_d(local_wo, wm) * abs_wi_wm, denom) * tr / (fr + tr)
        value = self.ggx.d(wm) * tr * self.ggx.g(local_wo, wi) * abs_wi_wm * abs_wo_wm
        f = _grey(_div(value, cos_o * cos_i * denom))
        return BxDFSample(f, from_local(wi, si.normal), pdf, BxDFType.GLOSSYTRANSMISSION)

    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        if self.eta == 1.0 or self.ggx.is_smooth():
            return 0.0
        local_wo = to_local(wo, si.normal)
        local_wi = to_local(wi, si.normal)
        cos_o = abs(local_wo.z)
        cos_i = abs(wi.z)
        if cos_o == 0.0 or cos_i == 0.0:
            return 0.0
        setup = self._half_vector(local_wo, local_wi, cos_o, cos_i)
        if setup is None:
            return 0.0
        wm, etap, reflection = setup

        fr = fresnel_dielectric(wm, local_wo, self.eta)
        tr = 1.0 - fr
        if reflection:
            return _div(self.ggx.visible_d(local_wo, wm), 4.0 * abs(local_wo.dot(wm))) * fr / (fr + tr)
        denom = (local_wi.dot(wm) + local_wo.dot(wm) / etap) ** 2
        abs_wi_wm = abs(local_wi.dot(wm))
        return _div(self.ggx.visible_d(local_wo, wm) * abs_wi_wm, denom) * tr / (fr + tr)