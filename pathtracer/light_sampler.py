"""Uniform choice among the lights of a scene."""

from __future__ import annotations

from typing import Sequence

from pathtracer.lights import Light


class LightSampler:
    """Picks lights with equal probability; follows changes to the given list."""

    def __init__(self, lights: Sequence[Light]) -> None:
        self.lights = lights

    def sample(self, u: float) -> Light:
        """Light selected by a uniform number u in [0, 1)."""
        count = len(self.lights)
        if count == 0:
            raise IndexError("no lights to sample")
        return self.lights[min(int(u * count), count - 1)]

    def pmf(self) -> float:
        """Probability of any one light being chosen."""
        if not self.lights:
            raise ValueError("no lights to sample")
        return 1.0 / len(self.lights)