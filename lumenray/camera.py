"""
Camera module for generating primary rays.

The camera sits at the origin looking down -z with the canvas one unit in
front of it; its transform (usually from `view_transform`) moves the whole
arrangement into the world.
"""

from __future__ import annotations
import math
from typing import Optional, TYPE_CHECKING

from .vec3 import Point3
from .ray import Ray
from .matrix import Matrix, IDENTITY
from .transform import Transform
from .renderer import Renderer, RenderSettings

if TYPE_CHECKING:
    from .canvas import Canvas
    from .world import World


class Camera:
    """A pinhole camera mapping canvas pixels to world-space rays."""

    def __init__(
        self,
        hsize: int,
        vsize: int,
        field_of_view: float,
        transform: Matrix = IDENTITY
    ):
        """Create a camera.

        Args:
            hsize: Canvas width in pixels
            vsize: Canvas height in pixels
            field_of_view: Angle (radians) covered by the wider canvas side
            transform: World-to-camera transform (a Matrix or Transform builder)
        """
        if hsize <= 0 or vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {hsize}x{vsize}")

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = transform

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize

        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view

        self.pixel_size = (self.half_width * 2.0) / hsize

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, value) -> None:
        if isinstance(value, Transform):
            value = value.build()
        self._transform = value

    def ray_for_pixel(self, px: float, py: float) -> Ray:
        """Build the ray through the center of pixel (px, py).

        Fractional coordinates are allowed; (x + 0.3, y - 0.1) aims at a
        point inside the neighbourhood of pixel (x, y).

        Args:
            px: Column, 0 at the left edge
            py: Row, 0 at the top edge

        Returns:
            World-space ray with a normalized direction
        """
        x_offset = (px + 0.5) * self.pixel_size
        y_offset = (py + 0.5) * self.pixel_size

        # The camera looks toward -z, so +x is to the left
        world_x = self.half_width - x_offset
        world_y = self.half_height - y_offset

        inverse = self._transform.inverse()
        pixel = inverse * Point3(world_x, world_y, -1.0)
        origin = inverse * Point3(0.0, 0.0, 0.0)
        direction = (pixel - origin).normalize()

        return Ray(origin, direction)

    def render(
        self,
        world: World,
        samples: int = 0,
        max_depth: int = 5,
        num_threads: int = 1,
        seed: Optional[int] = None
    ) -> Canvas:
        """Render `world` to a new canvas of hsize x vsize pixels.

        Args:
            world: The scene
            samples: Extra jittered rays per pixel (0 = center ray only)
            max_depth: Recursion budget for reflections and refractions
            num_threads: Worker threads (1 renders on the calling thread)
            seed: Seed for the jitter, for reproducible images

        Returns:
            The rendered canvas
        """
        settings = RenderSettings(
            width=self.hsize,
            height=self.vsize,
            samples_per_pixel=samples,
            max_depth=max_depth,
            num_threads=num_threads,
            seed=seed,
        )
        return Renderer(settings).render(world, self)

    def __repr__(self) -> str:
        return f"Camera({self.hsize}x{self.vsize}, fov={self.field_of_view:.4f})"
