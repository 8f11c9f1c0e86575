"""Ray with a parametric interval and hit bookkeeping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from pathtracer.vecmath import Vec3


@dataclass
class Ray:
    """A ray origin + t * direction valid for t in [tnear, tfar]."""

    origin: Vec3
    direction: Vec3
    tnear: float = 0.0
    tfar: float = math.inf
    mask: int = -1
    geom_id: Optional[int] = None
    prim_id: Optional[int] = None

    def at(self, t: float) -> Vec3:
        return self.origin + self.direction * t