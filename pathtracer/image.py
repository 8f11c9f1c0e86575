"""RGB float image that can be written to disk as JPEG."""

from __future__ import annotations

import os
from typing import Iterable, List, Optional, Sequence, Union

from PIL import Image as PILImage

from pathtracer.vecmath import Vec3

_MAX_DIMENSION = 0xFFFF


def _to_byte(value: float) -> int:
    scaled = 255.0 * value
    if not scaled > 0.0:
        return 0
    if scaled >= 255.0:
        return 255
    return int(scaled)


class Image:
    """Row-major RGB float image; row i, column j."""

    def __init__(self, width: int, height: int) -> None:
        for name, value in (("width", width), ("height", height)):
            if not 0 <= value <= _MAX_DIMENSION:
                raise ValueError(f"{name} {value} out of range 0..{_MAX_DIMENSION}")
        self.width = width
        self.height = height
        self.pixels: List[float] = [0.0] * (width * height * 3)

    def _index(self, i: int, j: int) -> int:
        if not (0 <= i < self.height and 0 <= j < self.width):
            raise IndexError(f"pixel ({i}, {j}) outside {self.height}x{self.width} image")
        return 3 * j + 3 * self.width * i

    def get_pixel(self, i: int, j: int) -> Vec3:
        idx = self._index(i, j)
        return Vec3(*self.pixels[idx:idx + 3])

    def set_pixel(self, i: int, j: int, rgb: Sequence[float]) -> None:
        idx = self._index(i, j)
        self.pixels[idx:idx + 3] = [float(c) for c in rgb]

    def to_bytes(self) -> bytes:
        """8-bit RGB data, channels scaled by 255 and clamped."""
        return bytes(_to_byte(v) for v in self.pixels)

    def save(
        self,
        path: Union[str, "os.PathLike[str]"],
        pixels: Optional[Iterable[float]] = None,
    ) -> None:
        """Write the image as a baseline JPEG, optionally copying pixels in first."""
        if pixels is not None:
            values = [float(v) for v in pixels]
            if len(values) > len(self.pixels):
                raise ValueError(
                    f"{len(values)} values do not fit a buffer of {len(self.pixels)}"
                )
            self.pixels[:len(values)] = values
        picture = PILImage.frombytes("RGB", (self.width, self.height), self.to_bytes())
        picture.save(os.fspath(path), format="JPEG", quality=90, subsampling=0)