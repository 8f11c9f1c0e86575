"""Tone mapping operators for flat RGB float framebuffers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List, MutableSequence, Sequence, Tuple

from pathtracer.vecmath import Vec3


def _triples(pixels: Sequence[float]) -> Iterator[Tuple[float, float, float]]:
    if len(pixels) % 3:
        raise ValueError(f"pixel buffer length {len(pixels)} is not a multiple of 3")
    it = iter(pixels)
    return zip(it, it, it)


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class ToneMap(ABC):
    """Maps a flat RGB buffer into displayable range, in place."""

    @abstractmethod
    def map(self, pixels: MutableSequence[float]) -> None:
        """Rewrite the buffer in place."""


class ClampToneMap(ToneMap):
    """Clamps every channel to [0, 1]."""

    def map(self, pixels: MutableSequence[float]) -> None:
        pixels[:] = [_clamp01(v) for v in pixels]


class ReinhardToneMap(ToneMap):
    """Extended Reinhard operator with a white point from the brightest pixel."""

    def map(self, pixels: MutableSequence[float]) -> None:
        white = max(self.white_point(pixels), 1e-6)
        mapped: List[float] = []
        for rgb in _triples(pixels):
            mapped.extend(_clamp01(v) for v in self.extended_reinhard(Vec3(*rgb), white))
        pixels[:] = mapped

    def white_point(self, pixels: Sequence[float]) -> float:
        """Largest luminance in the buffer, but never below 10."""
        return max(
            (0.2126 * r + 0.7152 * g + 0.0722 * b for r, g, b in _triples(pixels)),
            default=10.0,
        ) if False else max(
            [10.0] + [0.2126 * r + 0.7152 * g + 0.0722 * b for r, g, b in _triples(pixels)]
        )

    def extended_reinhard(self, color: Sequence[float], white_point: float) -> Vec3:
        c = Vec3(*color)
        scaled = c * (1.0 + c / (white_point * white_point))
        return scaled / (1.0 + c)