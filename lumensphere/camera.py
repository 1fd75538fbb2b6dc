"""
Camera module: primary ray generation and the path tracing loop.

Supports:
- Perspective projection with a vertical field of view
- Arbitrary positioning via look-from / look-at / up
- Depth of field (defocus blur) through a thin-lens disk
- Box-filter anti-aliasing by jittering samples inside each pixel
"""

from __future__ import annotations
import logging
import math
import sys
import time
from typing import Callable, Iterator, List, Optional, TextIO

import numpy as np

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval
from .shapes import Hittable
from .color import quantize, write_color, write_ppm_header
from .config import RenderConfig
from .sampling import INFINITY, RandomSource, degrees_to_radians, make_rng

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# Lower bound of the hit window; keeps scattered rays from re-hitting
# the surface they leave because of rounding.
SHADOW_ACNE_EPSILON = 0.001


class Camera:
    """A thin-lens perspective camera that also drives the render loop.

    Configuration lives in plain attributes. Derived geometry is cached by
    initialize(), which render() calls, so changing a setting and
    rendering again is always consistent.
    """

    def __init__(
        self,
        aspect_ratio: float = 1.0,
        image_width: int = 100,
        samples_per_pixel: int = 10,
        max_depth: int = 10,
        vfov: float = 90.0,
        lookfrom: Point3 = Point3(0, 0, 0),
        lookat: Point3 = Point3(0, 0, -1),
        vup: Vec3 = Vec3(0, 1, 0),
        defocus_angle: float = 0.0,
        focus_dist: float = 10.0,
        rng: Optional[RandomSource] = None
    ):
        """Create a camera.

        Args:
            aspect_ratio: Image width / height
            image_width: Rendered image width in pixels
            samples_per_pixel: Random samples averaged per pixel
            max_depth: Maximum number of bounces per path
            vfov: Vertical field of view in degrees
            lookfrom: Camera position in world space
            lookat: Point the camera is looking at
            vup: World up vector
            defocus_angle: Cone angle (degrees) through each pixel; <= 0 is a pinhole
            focus_dist: Distance to the plane of perfect focus
            rng: Random source (a fresh unseeded generator if omitted)
        """
        self.aspect_ratio = aspect_ratio
        self.image_width = image_width
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.vfov = vfov
        self.lookfrom = lookfrom
        self.lookat = lookat
        self.vup = vup
        self.defocus_angle = defocus_angle
        self.focus_dist = focus_dist
        self.rng = rng if rng is not None else make_rng()

        self.initialize()

    @classmethod
    def from_config(cls, config: RenderConfig, rng: Optional[RandomSource] = None) -> Camera:
        """Build a camera from a validated RenderConfig.

        The config's seed is used when no explicit random source is given.
        """
        return cls(
            aspect_ratio=config.aspect_ratio,
            image_width=config.image_width,
            samples_per_pixel=config.samples_per_pixel,
            max_depth=config.max_depth,
            vfov=config.vfov,
            lookfrom=config.lookfrom,
            lookat=config.lookat,
            vup=config.vup,
            defocus_angle=config.defocus_angle,
            focus_dist=config.focus_dist,
            rng=rng if rng is not None else make_rng(config.seed)
        )

    def initialize(self) -> None:
        """Recompute all derived geometry from the current configuration."""
        self.image_height = max(1, int(self.image_width / self.aspect_ratio))
        self.pixel_samples_scale = 1.0 / self.samples_per_pixel
        self.center = self.lookfrom

        theta = degrees_to_radians(self.vfov)
        h = math.tan(theta / 2)
        viewport_height = 2.0 * h * self.focus_dist
        viewport_width = viewport_height * (self.image_width / self.image_height)

        # Orthonormal camera basis
        self.w = (self.lookfrom - self.lookat).unit()  # Points backward from camera
        self.u = self.vup.cross(self.w).unit()         # Points right
        self.v = self.w.cross(self.u)                  # Points up

        # Viewport edges; v runs down the image because rows go top to bottom
        viewport_u = self.u * viewport_width
        viewport_v = -self.v * viewport_height

        self.pixel_delta_u = viewport_u / self.image_width
        self.pixel_delta_v = viewport_v / self.image_height

        viewport_upper_left = (
            self.center
            - self.w * self.focus_dist
            - viewport_u / 2
            - viewport_v / 2
        )
        self.pixel00_loc = viewport_upper_left + (self.pixel_delta_u + self.pixel_delta_v) * 0.5

        defocus_radius = self.focus_dist * math.tan(degrees_to_radians(self.defocus_angle / 2))
        self.defocus_disk_u = self.u * defocus_radius
        self.defocus_disk_v = self.v * defocus_radius

    def get_ray(self, i: int, j: int) -> Ray:
        """Generate a sample ray through pixel column i, row j.

        The sample point is jittered uniformly within the pixel square and
        the origin is drawn from the defocus disk when depth of field is on.
        The direction is left unnormalized.
        """
        offset = self._sample_square()
        pixel_sample = (
            self.pixel00_loc
            + self.pixel_delta_u * (i + offset.x)
            + self.pixel_delta_v * (j + offset.y)
        )

        ray_origin = self.center if self.defocus_angle <= 0 else self.defocus_disk_sample()
        return Ray(ray_origin, pixel_sample - ray_origin)

    def _sample_square(self) -> Vec3:
        """Random point in the [-.5,-.5]-[+.5,+.5] unit square."""
        return Vec3(self.rng.random() - 0.5, self.rng.random() - 0.5, 0)

    def defocus_disk_sample(self) -> Point3:
        """Random point on the camera's defocus disk."""
        p = Vec3.random_in_unit_disk(self.rng)
        return self.center + self.defocus_disk_u * p.x + self.defocus_disk_v * p.y

    def ray_color(self, ray: Ray, depth: int, world: Hittable) -> Color:
        """Radiance arriving along ray, following at most depth bounces.

        Args:
            ray: The ray to trace
            depth: Remaining bounce budget
            world: The scene to trace against

        Returns:
            Linear RGB radiance
        """
        if depth <= 0:
            return Color(0, 0, 0)

        rec = world.hit(ray, Interval(SHADOW_ACNE_EPSILON, INFINITY))
        if rec is None:
            return self.sky_color(ray)

        scatter_result = rec.material.scatter(ray, rec, self.rng)
        if scatter_result is None:
            return Color(0, 0, 0)

        return scatter_result.attenuation * self.ray_color(
            scatter_result.scattered_ray, depth - 1, world
        )

    @staticmethod
    def sky_color(ray: Ray) -> Color:
        """Vertical white-to-blue gradient used as the background."""
        unit_direction = ray.direction.unit()
        a = 0.5 * (unit_direction.y + 1.0)
        return Color(1.0, 1.0, 1.0) * (1.0 - a) + Color(0.5, 0.7, 1.0) * a

    def pixel_color(self, i: int, j: int, world: Hittable) -> Color:
        """Average of samples_per_pixel independent samples of one pixel."""
        total = Color(0, 0, 0)
        for _ in range(self.samples_per_pixel):
            total = total + self.ray_color(self.get_ray(i, j), self.max_depth, world)
        return total * self.pixel_samples_scale

    def scanlines(
        self,
        world: Hittable,
        progress: Optional[ProgressCallback] = None
    ) -> Iterator[List[Color]]:
        """Yield each row of averaged linear colors, top row first.

        Args:
            world: The scene to render
            progress: Called as progress(rows_done, total_rows) after each row
        """
        self.initialize()
        for j in range(self.image_height):
            yield [self.pixel_color(i, j, world) for i in range(self.image_width)]
            if progress is not None:
                progress(j + 1, self.image_height)

    def render(
        self,
        world: Hittable,
        out: Optional[TextIO] = None,
        progress: Optional[ProgressCallback] = None
    ) -> None:
        """Render world and write it as a plain-text PPM stream.

        Args:
            world: The scene to render
            out: Text stream for the image (stdout by default)
            progress: Optional per-scanline progress callback
        """
        out = out if out is not None else sys.stdout
        self.initialize()
        logger.info(
            "Rendering %dx%d, %d samples/pixel, max depth %d",
            self.image_width, self.image_height, self.samples_per_pixel, self.max_depth
        )
        start_time = time.time()

        write_ppm_header(out, self.image_width, self.image_height)
        for row in self.scanlines(world, progress):
            for color in row:
                write_color(out, color)

        logger.info("Render finished in %.2f seconds", time.time() - start_time)

    def render_image(
        self,
        world: Hittable,
        progress: Optional[ProgressCallback] = None
    ) -> np.ndarray:
        """Render world into an 8-bit RGB array of shape (height, width, 3).

        Row 0 is the top scanline; channels are quantized the same way as
        the PPM stream.
        """
        self.initialize()
        image = np.zeros((self.image_height, self.image_width, 3), dtype=np.uint8)
        start_time = time.time()

        for j, row in enumerate(self.scanlines(world, progress)):
            image[j] = [quantize(color) for color in row]

        logger.info("Render finished in %.2f seconds", time.time() - start_time)
        return image

    def __repr__(self) -> str:
        return f"Camera(lookfrom={self.lookfrom}, lookat={self.lookat}, vfov={self.vfov})"
