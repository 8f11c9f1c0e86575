"""Small 3D vector type and the shading math built on it."""

from __future__ import annotations

import cmath
import math
import operator
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class Vec3:
    """Immutable three-component float vector with component-wise arithmetic."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __len__(self) -> int:
        return 3

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def _apply(self, other: Union["Vec3", Number], op: Callable[[float, float], float]) -> "Vec3":
        if isinstance(other, Vec3):
            return Vec3(op(self.x, other.x), op(self.y, other.y), op(self.z, other.z))
        return Vec3(op(self.x, other), op(self.y, other), op(self.z, other))

    def _apply_reversed(self, other: Number, op: Callable[[float, float], float]) -> "Vec3":
        return Vec3(op(other, self.x), op(other, self.y), op(other, self.z))

    def __add__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._apply(other, operator.add)

    def __radd__(self, other: Number) -> "Vec3":
        return self._apply_reversed(other, operator.add)

    def __sub__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._apply(other, operator.sub)

    def __rsub__(self, other: Number) -> "Vec3":
        return self._apply_reversed(other, operator.sub)

    def __mul__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._apply(other, operator.mul)

    def __rmul__(self, other: Number) -> "Vec3":
        return self._apply_reversed(other, operator.mul)

    def __truediv__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._apply(other, operator.truediv)

    def __rtruediv__(self, other: Number) -> "Vec3":
        return self._apply_reversed(other, operator.truediv)

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vec3") -> "Vec3":
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        """Unit vector in the same direction; a zero vector yields NaN components."""
        length = self.length()
        if length == 0.0:
            return Vec3(math.nan, math.nan, math.nan)
        return self / length

    def max_component(self) -> float:
        return max(self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class OrthonormalBasis:
    """Three mutually orthogonal unit vectors; e3 is the normal."""

    e1: Vec3
    e2: Vec3
    e3: Vec3


def orthonormal_basis(normal: Vec3) -> OrthonormalBasis:
    """Build a basis whose third axis is the given normal."""
    if abs(normal.x) > abs(normal.y):
        e1 = Vec3(normal.z, 0.0, -normal.x).normalized()
    else:
        e1 = Vec3(0.0, normal.z, -normal.y).normalized()
    return OrthonormalBasis(e1, normal.cross(e1).normalized(), normal)


def to_local(v: Vec3, normal: Vec3) -> Vec3:
    """Express v in the basis built around normal."""
    basis = orthonormal_basis(normal)
    return Vec3(v.dot(basis.e1), v.dot(basis.e2), v.dot(basis.e3))


def from_local(v: Vec3, normal: Vec3) -> Vec3:
    """Map a vector given in the basis around normal back to world space."""
    basis = orthonormal_basis(normal)
    return v.x * basis.e1 + v.y * basis.e2 + v.z * basis.e3


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Mirror the incident direction about the normal."""
    return incident - 2.0 * normal.dot(incident) * normal


def lerp(x: float, a: float, b: float) -> float:
    return (1.0 - x) * a + x * b


def schlick_approximation(f0: Vec3, theta: float) -> Vec3:
    return f0 + (1.0 - f0) * ((1.0 - theta) ** 5)


def refract(normal: Vec3, wi: Vec3, eta: float) -> Optional[Vec3]:
    """Refracted direction, or None on total internal reflection."""
    cos_theta_i = normal.dot(wi)
    if cos_theta_i < 0.0:
        cos_theta_i = -cos_theta_i
        eta = 1.0 / eta
    sin2_theta_i = max(0.0, 1.0 - cos_theta_i * cos_theta_i)
    sin2_theta_t = sin2_theta_i / (eta * eta)
    if sin2_theta_t >= 1.0:
        return None
    cos_theta_t = math.sqrt(1.0 - sin2_theta_t)
    return -wi / eta + (cos_theta_i / eta - cos_theta_t) * normal


def fresnel_dielectric(normal: Vec3, wi: Vec3, eta: float) -> float:
    """Unpolarised Fresnel reflectance of a dielectric interface."""
    cos_theta_i = min(max(wi.dot(normal), -1.0), 1.0)
    if cos_theta_i < 0.0:
        eta = 1.0 / eta
        cos_theta_i = -cos_theta_i
    sin2_theta_i = 1.0 - cos_theta_i * cos_theta_i
    sin2_theta_t = sin2_theta_i / (eta * eta)
    if sin2_theta_t >= 1.0:
        return 1.0
    cos_theta_t = math.sqrt(1.0 - sin2_theta_t)
    r_parl = (eta * cos_theta_i - cos_theta_t) / (eta * cos_theta_i + cos_theta_t)
    r_perp = (cos_theta_i - eta * cos_theta_t) / (cos_theta_i + eta * cos_theta_t)
    return (r_parl * r_parl + r_perp * r_perp) / 2.0


def fresnel_conductor_complex(normal: Vec3, wi: Vec3, eta: complex) -> float:
    """Fresnel reflectance for a complex index of refraction eta + i*k."""
    cos_theta_i = normal.dot(wi)
    sin2_theta_i = 1.0 - cos_theta_i * cos_theta_i
    sin2_theta_t = sin2_theta_i / (eta * eta)
    cos_theta_t = cmath.sqrt(1.0 - sin2_theta_t)
    r_parl = (eta * cos_theta_i - cos_theta_t) / (eta * cos_theta_i + cos_theta_t)
    r_perp = (cos_theta_i - eta * cos_theta_t) / (cos_theta_i + eta * cos_theta_t)
    return (abs(r_parl) ** 2 + abs(r_perp) ** 2) / 2.0


def fresnel_conductor(normal: Vec3, wi: Vec3, eta: Vec3, k: Vec3) -> Vec3:
    """Per-channel conductor Fresnel reflectance."""
    return Vec3(
        *(fresnel_conductor_complex(normal, wi, complex(e, kk)) for e, kk in zip(eta, k))
    )