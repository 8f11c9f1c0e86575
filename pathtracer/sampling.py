"""Random number source and warping functions for Monte Carlo sampling."""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence, Tuple

from pathtracer.vecmath import Vec3

INV_PI = 1.0 / math.pi


class Sampler:
    """Uniform random numbers; seeded from system entropy unless a seed is given."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def get_uv_1d(self) -> float:
        return self.get_1d(0.0, 1.0)

    def get_1d(self, low: float, high: float) -> float:
        """Uniform value in [low, high)."""
        return low + (high - low) * self._rng.random()

    def get_uv_2d(self) -> Tuple[float, float]:
        return self.get_2d(0.0, 1.0)

    def get_2d(self, low: float, high: float) -> Tuple[float, float]:
        return self.get_1d(low, high), self.get_1d(low, high)


def sample_cosine_hemisphere(uv: Sequence[float]) -> Vec3:
    """Cosine-weighted direction about +z (Malley's method)."""
    phi = 2.0 * math.pi * uv[0]
    theta = math.acos(math.sqrt(1.0 - uv[1]))
    return Vec3(math.cos(phi) * math.sin(theta), math.sin(phi) * math.sin(theta), math.cos(theta))


def cosine_hemisphere_pdf(cos_theta: float) -> float:
    return cos_theta * INV_PI


def sample_cosine_lobe_hemisphere(uv: Sequence[float], n: float) -> Vec3:
    """Direction about +z distributed as cos^n."""
    phi = 2.0 * math.pi * uv[0]
    theta = uv[1] ** (2.0 / (n + 1.0))
    r = math.sqrt(1.0 - theta)
    return Vec3(math.cos(phi) * r, math.sin(phi) * r, uv[1] ** (1.0 / (n + 1.0)))


def cosine_lobe_hemisphere_pdf(cos_alpha: float, n: float) -> float:
    return (n + 1.0) * cos_alpha**n * 0.5 * INV_PI


def sample_uniform_hemisphere(uv: Sequence[float]) -> Vec3:
    z = 1.0 - 2.0 * uv[0]
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * math.pi * uv[1]
    return Vec3(r * math.cos(phi), r * math.sin(phi), z)


def uniform_hemisphere_pdf() -> float:
    return 0.25 * INV_PI


def sample_uniform_disk_polar(uv: Sequence[float]) -> Tuple[float, float]:
    r = math.sqrt(uv[0])
    theta = 2.0 * math.pi * uv[1]
    return r * math.cos(theta), r * math.sin(theta)


def power_heuristic(f_pdf: float, g_pdf: float, nf: int = 1, ng: int = 1) -> float:
    f = nf * f_pdf
    g = ng * g_pdf
    return f * f / (f * f + g * g)