"""Pinhole camera that produces jittered primary rays."""

from __future__ import annotations

from typing import Optional

from pathtracer.ray import Ray
from pathtracer.sampling import Sampler
from pathtracer.vecmath import Vec3


class Camera:
    """Camera looking down -z with a viewport of height 2 at the focal distance."""

    def __init__(
        self,
        image_width: int,
        image_height: int,
        center: Vec3 = Vec3(),
        focal_length: float = 1.0,
        sampler: Optional[Sampler] = None,
    ) -> None:
        if image_width <= 0 or image_height <= 0:
            raise ValueError(f"image size {image_width}x{image_height} must be positive")
        self.width = image_width
        self.height = image_height
        self.center = center
        self.focal_length = focal_length
        self.sampler = sampler if sampler is not None else Sampler()

        viewport_height = 2.0
        # The aspect ratio is taken from an integer division of the image size.
        viewport_width = viewport_height * float(image_width // image_height)
        viewport_u = Vec3(viewport_width, 0.0, 0.0)
        viewport_v = Vec3(0.0, -viewport_height, 0.0)
        self.pixel_delta_u = viewport_u / float(image_width)
        self.pixel_delta_v = viewport_v / float(image_height)

        viewport_left = (
            center - Vec3(0.0, 0.0, focal_length) - viewport_u / 2.0 - viewport_v / 2.0
        )
        self.first_pixel_center = viewport_left + 0.5 * (self.pixel_delta_u + self.pixel_delta_v)

    def viewport_pixel_center(self, u: int, v: int) -> Vec3:
        """Point in pixel (u, v) jittered by up to half a pixel in each direction."""
        offset_x = self.sampler.get_uv_1d() - 0.5
        offset_y = self.sampler.get_uv_1d() - 0.5
        return (
            self.first_pixel_center
            + (float(u) + offset_x) * self.pixel_delta_u
            + (float(v) + offset_y) * self.pixel_delta_v
        )

    def create_primary_ray(self, i: int, j: int) -> Ray:
        """Ray from the camera center through column i, row j."""
        pixel = self.viewport_pixel_center(i, j)
        return Ray(self.center, (pixel - self.center).normalized())