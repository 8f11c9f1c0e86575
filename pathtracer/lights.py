"""Light sources: emitting triangle meshes and point lights."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Sequence

from pathtracer.shape import Shape, SurfaceIntersection
from pathtracer.vecmath import Vec3


class LightType(Enum):
    POINTLIGHT = 0
    AREALIGHT = 1


@dataclass
class LiSample:
    """Incident radiance l arriving from point y with surface normal, and its density."""

    l: Vec3
    y: Vec3
    normal: Vec3
    pdf: float


class Light(ABC):
    """A source of emitted radiance."""

    type: ClassVar[LightType]

    @abstractmethod
    def sample_li(self, si: SurfaceIntersection, u: Sequence[float]) -> LiSample:
        """Sample a point on the light as seen from the intersection."""

    @abstractmethod
    def li_pdf(self, si: SurfaceIntersection, prev_si: SurfaceIntersection) -> float:
        """Density of reaching si on the light from prev_si."""

    @abstractmethod
    def le(self) -> Vec3:
        """Emitted radiance."""


@dataclass(eq=False)
class AreaLight(Light):
    """Emitting triangle mesh, sampled uniformly over its faces."""

    type: ClassVar[LightType] = LightType.AREALIGHT

    shape: Shape
    radiance: Vec3
    two_sided: bool

    def sample_li(self, si: SurfaceIntersection, u: Sequence[float]) -> LiSample:
        faces = self.shape.num_faces()
        face_id = min(int(u[0] * faces), faces - 1)
        y = self.shape.sample_uniform(face_id, u)
        bu, bv = self.shape.barycentric(y, face_id)
        normal = self.shape.interpolate_normal(face_id, bu, bv)
        radiance = self.le()
        if normal.dot((si.pos - y).normalized()) < 0.0:
            radiance = Vec3()
        return LiSample(radiance, y, normal, 1.0 / self.shape.area)

    def li_pdf(self, si: SurfaceIntersection, prev_si: SurfaceIntersection) -> float:
        wi = (prev_si.pos - si.pos).normalized()
        dist = wi.length()
        denom = abs(si.normal.dot(-wi) / (dist * dist))
        if denom == 0.0:
            return math.inf
        return (1.0 / self.shape.area) / denom

    def le(self) -> Vec3:
        return self.radiance / ((2.0 if self.two_sided else 1.0) * self.shape.area)


@dataclass
class PointLight(Light):
    """Light emitted from a single point in every direction."""

    type: ClassVar[LightType] = LightType.POINTLIGHT

    pos: Vec3
    radiance: Vec3

    def sample_li(self, si: SurfaceIntersection, u: Sequence[float]) -> LiSample:
        return LiSample(self.le(), self.pos, (self.pos - si.pos).normalized(), 1.0)

    def li_pdf(self, si: SurfaceIntersection, prev_si: SurfaceIntersection) -> float:
        return 1.0

    def le(self) -> Vec3:
        return self.radiance