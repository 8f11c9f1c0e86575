"""Trowbridge-Reitz (GGX) microfacet distribution in local shading space."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from pathtracer.sampling import sample_uniform_disk_polar
from pathtracer.vecmath import Vec3, lerp


def _div(a: float, b: float) -> float:
    """IEEE-style division: dividing by zero gives inf or NaN instead of raising."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


@dataclass(frozen=True)
class GGX:
    """Anisotropic GGX distribution; directions are in the local frame (+z normal)."""

    alpha_x: float
    alpha_y: float

    def _angles(self, w: Vec3) -> tuple:
        cos2_theta = w.z * w.z
        sin2_theta = max(0.0, 1.0 - cos2_theta)
        sin_theta = math.sqrt(sin2_theta)
        tan2_theta = _div(sin2_theta, cos2_theta)
        if sin_theta == 0.0:
            cos_phi = sin_phi = 1.0
        else:
            cos_phi = min(max(w.x / sin_theta, -1.0), 1.0)
            sin_phi = min(max(w.y / sin_theta, -1.0), 1.0)
        return cos2_theta, tan2_theta, cos_phi, sin_phi

    def d(self, wm: Vec3) -> float:
        """Microfacet normal distribution D(wm)."""
        cos2_theta, tan2_theta, cos_phi, sin_phi = self._angles(wm)
        cos4_theta = cos2_theta * cos2_theta
        e = tan2_theta * (
            cos_phi * cos_phi / (self.alpha_x * self.alpha_x)
            + sin_phi * sin_phi / (self.alpha_y * self.alpha_y)
        )
        return _div(1.0, math.pi * self.alpha_x * self.alpha_y * cos4_theta * (1.0 + e) * (1.0 + e))

    def visible_d(self, wo: Vec3, wm: Vec3) -> float:
        """Distribution of normals visible from wo."""
        return _div(self.g1(wo), abs(wo.z)) * self.d(wm) * abs(wo.dot(wm))

    def g(self, wo: Vec3, wi: Vec3) -> float:
        return 1.0 / (1.0 + self.masking_lambda(wo) + self.masking_lambda(wi))

    def g1(self, wo: Vec3) -> float:
        return 1.0 / (1.0 + self.masking_lambda(wo))

    def masking_lambda(self, w: Vec3) -> float:
        _, tan2_theta, cos_phi, sin_phi = self._angles(w)
        alpha2 = (cos_phi * self.alpha_x) ** 2 + (sin_phi * self.alpha_y) ** 2
        return (math.sqrt(1.0 + alpha2 * tan2_theta) - 1.0) / 2.0

    def is_smooth(self) -> bool:
        return max(self.alpha_x, self.alpha_y) < 1e-3

    def sample_ellipsoid(self, wo: Vec3, uv: Sequence[float]) -> Vec3:
        """Sample a visible microfacet normal for the outgoing direction wo."""
        wh = Vec3(self.alpha_y * wo.x, self.alpha_y * wo.y, wo.z).normalized()
        if wh.z < 0.0:
            wh = -wh
        if wh.z < 0.99999:
            t1 = Vec3(0.0, 0.0, 1.0).cross(wh).normalized()
        else:
            t1 = Vec3(1.0, 0.0, 0.0)
        t2 = wh.cross(t1)

        px, py = sample_uniform_disk_polar(uv)
        h = math.sqrt(1.0 - px * px)
        py = lerp((1.0 + wh.z) / 2.0, h, py)

        pz = math.sqrt(max(0.0, 1.0 - (px * px + py * py)))
        nh = px * t1 + py * t2 + pz * wh
        return Vec3(self.alpha_x * nh.x, self.alpha_y * nh.y, max(1e-6, nh.z)).normalized()