"""Progressive accumulation of samples into a framebuffer and output to an image."""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence, Union

from pathtracer.camera import Camera
from pathtracer.image import Image
from pathtracer.integrators import Integrator
from pathtracer.sampling import Sampler
from pathtracer.tonemap import ReinhardToneMap

logger = logging.getLogger(__name__)

GAMMA = 1.0 / 2.2


def _gamma(value: float) -> float:
    return value**GAMMA if value > 0.0 else 0.0


class Renderer:
    """Drives an integrator over every pixel of a camera image."""

    def __init__(
        self,
        integrator: Integrator,
        width: int = 800,
        height: int = 800,
        camera_sampler: Optional[Sampler] = None,
    ) -> None:
        self.integrator = integrator
        self.current_spp = 1
        self.save_path = ""
        self.camera = Camera(
            width, height, integrator.scene.camera_coordinates, sampler=camera_sampler
        )
        self.framebuffer: List[float] = [0.0] * (width * height * 3)
        self.tonemap = ReinhardToneMap()
        integrator.scene.build()

    @property
    def width(self) -> int:
        return self.camera.width

    @property
    def height(self) -> int:
        return self.camera.height

    def add_radiance(self, i: int, j: int, rgb: Sequence[float]) -> None:
        """Accumulate rgb into row i, column j."""
        idx = 3 * j + 3 * self.width * i
        for k, value in enumerate(rgb):
            self.framebuffer[idx + k] += value

    def render_pass(self) -> None:
        """Trace one sample through every pixel."""
        depth = self.integrator.max_depth
        for row in range(self.height):
            for column in range(self.width):
                ray = self.camera.create_primary_ray(column, row)
                self.add_radiance(row, column, self.integrator.evaluate_sample(ray, depth))

    def finalize(self, spp: int) -> List[float]:
        """Average, gamma-correct and tone-map the framebuffer in place."""
        if spp <= 0:
            raise ValueError(f"samples per pixel must be positive, got {spp}")
        self.framebuffer[:] = [_gamma(v / spp) for v in self.framebuffer]
        self.tonemap.map(self.framebuffer)
        return self.framebuffer

    def render(self, spp: int, save_path: Union[str, "os.PathLike[str]"]) -> None:
        """Render with doubling sample counts until spp is reached, then save a JPEG."""
        self.save_path = os.fspath(save_path)
        while self.current_spp < spp:
            for _ in range(self.current_spp, self.current_spp * 2):
                self.render_pass()
            self.current_spp *= 2
            logger.debug("Renderer: rendered with spp = %d", self.current_spp)
        self.finalize(spp)
        Image(self.width, self.height).save(self.save_path, self.framebuffer)