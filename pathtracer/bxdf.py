"""Scattering functions: interface and the diffuse and Phong-style BRDFs."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from pathtracer.sampling import (
    cosine_hemisphere_pdf,
    cosine_lobe_hemisphere_pdf,
    sample_cosine_hemisphere,
    sample_cosine_lobe_hemisphere,
)
from pathtracer.shape import SurfaceIntersection
from pathtracer.vecmath import Vec3, from_local, reflect

INV_PI = 1.0 / math.pi


class BxDFType(Enum):
    DIFFUSE = 0
    SPECULAR = 1
    GLOSSY = 2
    TRANSMISSION = 3
    GLOSSYTRANSMISSION = 4


@dataclass
class BxDFSample:
    """A sampled incident direction with its value and density."""

    f: Vec3 = field(default_factory=Vec3)
    wi: Vec3 = field(default_factory=Vec3)
    pdf: float = 0.0
    type: BxDFType = BxDFType.DIFFUSE


class BxDF(ABC):
    """Bidirectional scattering distribution function in world space."""

    @abstractmethod
    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        """Value of the function for the pair of directions."""

    @abstractmethod
    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        """Draw an incident direction for outgoing wo."""

    @abstractmethod
    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        """Density with which sample_f would choose wi."""


def _lobe_probabilities(rho_diffuse: Vec3, rho_specular: Vec3) -> tuple:
    d = rho_diffuse.max_component()
    s = rho_specular.max_component()
    if d + s == 0.0:
        raise ValueError("material has neither diffuse nor specular reflectance")
    return d / (d + s), s / (d + s)


def _specular_lobe(rho_specular: Vec3, shininess: float, alpha: float) -> Vec3:
    return rho_specular * 0.5 * INV_PI * alpha**shininess * (shininess + 2.0)


@dataclass
class LambertianDiffuseBRDF(BxDF):
    """Ideal diffuse reflector."""

    rho: Vec3

    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        return self.rho * INV_PI

    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        wi = from_local(sample_cosine_hemisphere(uv), si.normal)
        return BxDFSample(
            self.f(wo, wi, si),
            wi,
            cosine_hemisphere_pdf(abs(wi.dot(si.normal))),
            BxDFType.DIFFUSE,
        )

    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        return cosine_hemisphere_pdf(abs(wi.dot(si.normal)))


@dataclass
class BlinnPhongBRDF(BxDF):
    """Diffuse plus normalised Blinn-Phong specular lobe around the half vector."""

    rho_diffuse: Vec3
    rho_specular: Vec3
    shininess: float
    pd: float = field(init=False)
    ps: float = field(init=False)

    def __post_init__(self) -> None:
        self.pd, self.ps = _lobe_probabilities(self.rho_diffuse, self.rho_specular)

    def _diffuse(self) -> Vec3:
        return self.rho_diffuse * INV_PI

    def _specular(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        h = (wo + wi).normalized()
        return _specular_lobe(self.rho_specular, self.shininess, abs(h.dot(si.normal)))

    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        return self._diffuse() + self._specular(wo, wi, si)

    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        if u < self.ps:
            h = from_local(sample_cosine_lobe_hemisphere(uv, self.shininess), si.normal)
            wi = reflect(-wo, h)
            return BxDFSample(
                self._specular(wo, wi, si),
                wi,
                cosine_lobe_hemisphere_pdf(abs(h.dot(si.normal)), self.shininess) * self.ps,
                BxDFType.GLOSSY,
            )
        wi = from_local(sample_cosine_hemisphere(uv), si.normal)
        return BxDFSample(
            self._diffuse(),
            wi,
            cosine_hemisphere_pdf(abs(wi.dot(si.normal))) * self.pd,
            BxDFType.DIFFUSE,
        )

    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        h = (wo + wi).normalized()
        specular = cosine_lobe_hemisphere_pdf(abs(h.dot(si.normal)), self.shininess) * self.ps
        diffuse = cosine_hemisphere_pdf(abs(wi.dot(si.normal))) * self.pd
        return specular + diffuse


@dataclass
class PhongBRDF(BxDF):
    """Diffuse plus normalised Phong specular lobe around the mirror direction."""

    rho_diffuse: Vec3
    rho_specular: Vec3
    shininess: float
    pd: float = field(init=False)
    ps: float = field(init=False)

    def __post_init__(self) -> None:
        self.pd, self.ps = _lobe_probabilities(self.rho_diffuse, self.rho_specular)

    def _diffuse(self) -> Vec3:
        return self.rho_diffuse * INV_PI

    def _specular(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        mirror = reflect(-wo, si.normal)
        return _specular_lobe(self.rho_specular, self.shininess, abs(wi.dot(mirror)))

    def f(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> Vec3:
        return self._diffuse() + self._specular(wo, wi, si)

    def sample_f(
        self, u: float, uv: Sequence[float], wo: Vec3, si: SurfaceIntersection
    ) -> BxDFSample:
        if u < self.ps:
            mirror = reflect(-wo, si.normal)
            wi = from_local(sample_cosine_lobe_hemisphere(uv, self.shininess), mirror)
            return BxDFSample(
                self._specular(wo, wi, si),
                wi,
                cosine_lobe_hemisphere_pdf(abs(wi.dot(mirror)), self.shininess) * self.ps,
                BxDFType.GLOSSY,
            )
        wi = from_local(sample_cosine_hemisphere(uv), si.normal)
        return BxDFSample(
            self._diffuse(),
            wi,
            cosine_hemisphere_pdf(abs(wi.dot(si.normal))) * self.pd,
            BxDFType.DIFFUSE,
        )

    def pdf(self, wo: Vec3, wi: Vec3, si: SurfaceIntersection) -> float:
        mirror = reflect(-wo, si.normal)
        specular = cosine_lobe_hemisphere_pdf(abs(wi.dot(mirror)), self.shininess) * self.ps
        diffuse = cosine_hemisphere_pdf(abs(wi.dot(si.normal))) * self.pd
        return specular + diffuse