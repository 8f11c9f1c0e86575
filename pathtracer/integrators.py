"""Light transport estimators that turn a camera ray into incoming radiance."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from pathtracer.bxdf import BxDF, BxDFType
from pathtracer.light_sampler import LightSampler
from pathtracer.lights import LightType
from pathtracer.ray import Ray
from pathtracer.sampling import Sampler, sample_uniform_hemisphere, uniform_hemisphere_pdf
from pathtracer.scene import Scene
from pathtracer.shape import SurfaceIntersection
from pathtracer.vecmath import Vec3, from_local

RAY_EPSILON = 0.001


def _bxdf(si: SurfaceIntersection) -> BxDF:
    if si.shape.bxdf is None:
        raise ValueError(f"shape '{si.shape.name}' has no material")
    return si.shape.bxdf


class Integrator(ABC):
    """Estimates the radiance carried back along a ray through a scene."""

    def __init__(self, scene: Scene, max_depth: int, sampler: Optional[Sampler] = None) -> None:
        self.scene = scene
        self.max_depth = max_depth
        self.sampler = sampler if sampler is not None else Sampler()
        self.light_sampler = LightSampler(scene.lights)

    @abstractmethod
    def evaluate_sample(self, ray: Ray, depth: int) -> Vec3:
        """Radiance arriving at the ray origin from along the ray."""

    def visible(self, x: Vec3, y: Vec3) -> bool:
        """Whether the segment between x and y is free of geometry."""
        offset = y - x
        shadow = Ray(x, offset.normalized(), RAY_EPSILON, offset.length() - RAY_EPSILON)
        self.scene.occluded(shadow)
        return shadow.tfar >= 0.0

    def geometry_term(self, x: Vec3, nx: Vec3, y: Vec3, ny: Vec3) -> float:
        """Cosine at both ends over squared distance."""
        cos_x = nx.dot((y - x).normalized())
        cos_y = ny.dot((x - y).normalized())
        dist = (y - x).length()
        return cos_x * cos_y / (dist * dist)

    def _sample_one_light(self, si: SurfaceIntersection, wo: Vec3) -> Vec3:
        """Direct lighting estimate from one uniformly chosen light."""
        light = self.light_sampler.sample(self.sampler.get_uv_1d())
        li = light.sample_li(si, self.sampler.get_uv_2d())
        if not self.visible(si.pos, li.y):
            return Vec3()
        wi = (li.y - si.pos).normalized()
        g = self.geometry_term(si.pos, si.normal, li.y, li.normal)
        return _bxdf(si).f(wo, wi, si) * g * li.l / (li.pdf * self.light_sampler.pmf())


class WhittedIntegrator(Integrator):
    """Point lights plus recursion along perfectly specular and refracted paths."""

    def evaluate_sample(self, ray: Ray, depth: int) -> Vec3:
        radiance = Vec3()
        wo = -ray.direction
        si = self.scene.intersect(ray)
        if si.shape is None or depth == 0:
            return radiance

        bxdf = _bxdf(si)
        for light in self.scene.lights:
            if light.type is not LightType.POINTLIGHT:
                continue
            li = light.sample_li(si, self.sampler.get_uv_2d())
            if self.visible(si.pos, li.y):
                wi = li.y - si.pos
                radiance += bxdf.f(wo, wi, si) * abs(wi.dot(si.normal)) * li.l / li.pdf

        bs = bxdf.sample_f(self.sampler.get_uv_1d(), self.sampler.get_uv_2d(), wo, si)
        if bs.type in (BxDFType.SPECULAR, BxDFType.TRANSMISSION) and bs.pdf != 0.0:
            new_ray = Ray(si.pos, bs.wi, RAY_EPSILON)
            incoming = self.evaluate_sample(new_ray, depth - 1)
            radiance += bs.f * abs(bs.wi.dot(si.normal)) * incoming / bs.pdf
        return radiance


class RandomWalkIntegrator(Integrator):
    """Naive path tracing with uniformly sampled bounce directions."""

    def evaluate_sample(self, ray: Ray, depth: int) -> Vec3:
        radiance = Vec3()
        beta = Vec3(1.0, 1.0, 1.0)
        while beta != Vec3():
            wo = -ray.direction
            si = self.scene.intersect(ray)
            if si.shape is None or depth == 0:
                break
            depth -= 1
            if si.shape.area_light is not None:
                radiance += beta * si.shape.area_light.le()
                continue

            wi = from_local(sample_uniform_hemisphere(self.sampler.get_uv_2d()), si.normal)
            beta *= _bxdf(si).f(wo, wi, si) * abs(wi.dot(si.normal)) / uniform_hemisphere_pdf()
            ray = Ray(si.pos, wi, RAY_EPSILON)
        return radiance


class DirectIlluminationIntegrator(Integrator):
    """Emission plus one light sample at the first hit."""

    def evaluate_sample(self, ray: Ray, depth: int) -> Vec3:
        radiance = Vec3()
        wo = -ray.direction
        si = self.scene.intersect(ray)
        if si.shape is None:
            return radiance
        if si.shape.area_light is not None:
            return radiance + si.shape.area_light.le()
        return radiance + self._sample_one_light(si, wo)


class IndirectIlluminationIntegrator(Integrator):
    """Path tracing with light sampling at every vertex and Russian roulette."""

    def evaluate_sample(self, ray: Ray, depth: int) -> Vec3:
        radiance = Vec3()
        beta = Vec3(1.0, 1.0, 1.0)
        while beta != Vec3():
            wo = -ray.direction
            si = self.scene.intersect(ray)
            if si.shape is None or depth == 0:
                break
            depth -= 1
            if si.shape.area_light is not None and depth + 1 == self.max_depth:
                # Only the camera ray sees emitters; later vertices rely on light sampling.
                radiance += beta * si.shape.area_light.le()
                break

            radiance += beta * self._sample_one_light(si, wo)

            bs = _bxdf(si).sample_f(self.sampler.get_uv_1d(), self.sampler.get_uv_2d(), wo, si)
            if bs.pdf == 0.0:
                break
            beta *= bs.f * abs(bs.wi.dot(si.normal)) / bs.pdf

            q = max(0.0, 1.0 - beta.max_component())
            if self.sampler.get_uv_1d() < q:
                break
            beta /= 1.0 - q
            ray = Ray(si.pos, bs.wi, RAY_EPSILON)
        return radiance


_INTEGRATORS: Dict[str, Type[Integrator]] = {
    "WhittedIntegrator": WhittedIntegrator,
    "RandomWalkIntegrator": RandomWalkIntegrator,
    "DirectIlluminationIntegrator": DirectIlluminationIntegrator,
    "IndirectIlluminationIntegrator": IndirectIlluminationIntegrator,
}


def create_integrator(name: str, scene: Scene, max_depth: int) -> Integrator:
    """Instantiate the integrator with the given class name."""
    try:
        cls = _INTEGRATORS[name]
    except KeyError:
        raise ValueError(f"unknown integrator {name!r}") from None
    return cls(scene, max_depth)