"""
Renderer module - the heart of the ray tracer.

Implements:
- Path tracing with a bounded number of bounces
- Multi-threaded scanline-based rendering
- Ordered reassembly of scanlines into a single pixel buffer

Work is split into one unit per scanline. Scanlines are large enough that
dispatch overhead stays small next to the tracing itself; the price is
some imbalance when a few rows (say, the ones crossing glass) cost far
more than the rest. Workers only read the scene and camera. The calling
thread is the only writer of the output buffer: it collects finished
scanlines in whatever order they complete and copies each into the slot
reserved for its row.
"""

from __future__ import annotations
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Optional

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .image import RGB, encode_pixel, format_ppm
from .sampling import random_double

logger = logging.getLogger(__name__)

# Nearest accepted hit distance, keeps bounced rays off their own surface
T_MIN = 0.001

WHITE = Color(1.0, 1.0, 1.0)
SKY_BLUE = Color(0.5, 0.7, 1.0)
BLACK = Color(0.0, 0.0, 0.0)


class RenderError(RuntimeError):
    """A unit of work failed or the output buffer could not be assembled."""
    pass


@dataclass(frozen=True)
class RenderSettings:
    """Configuration for the renderer.

    `height` is derived from `width` and `aspect_ratio`. A `num_threads` of
    zero sizes the worker pool to the machine's CPU count.
    """
    width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_threads: int = 0

    def __post_init__(self):
        if self.aspect_ratio <= 0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.width < 2 or self.height < 2:
            raise ValueError(
                f"Image must be at least 2x2 pixels, got {self.width}x{self.height}"
            )
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be >= 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be >= 0, got {self.num_threads}")

    @property
    def height(self) -> int:
        return int(self.width / self.aspect_ratio)

    @property
    def workers(self) -> int:
        """Size of the worker pool."""
        return self.num_threads or os.cpu_count() or 4


def sky_color(ray: Ray) -> Color:
    """Background seen by rays that leave the scene.

    A vertical blend from white at the bottom to sky blue at the top,
    driven by the y component of the unit direction.
    """
    unit_direction = ray.direction.unit()
    t = 0.5 * (unit_direction.y + 1.0)
    return Color.lerp(WHITE, SKY_BLUE, t)


def ray_color(ray: Ray, scene: Hittable, depth: int) -> Color:
    """Compute the color carried back along a ray.

    Follows the path bounce by bounce, multiplying in each material's
    attenuation, until it escapes to the sky, is absorbed, or runs out of
    bounces (black).

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Maximum number of bounces

    Returns:
        The computed color for this ray
    """
    throughput = Color(1.0, 1.0, 1.0)

    for _ in range(depth):
        hit_record = scene.hit(ray, T_MIN, float('inf'))
        if hit_record is None:
            return throughput * sky_color(ray)

        if hit_record.material is None:
            return BLACK

        scatter_result = hit_record.material.scatter(ray, hit_record)
        if scatter_result is None:
            return BLACK

        throughput = throughput * scatter_result.attenuation
        ray = scatter_result.scattered_ray

    return BLACK


def render_pixel(i: int, j: int, scene: Hittable, camera: Camera, settings: RenderSettings) -> RGB:
    """Sample one pixel and encode it.

    Args:
        i: Column, 0 at the left
        j: Scanline, 0 at the bottom
    """
    width = settings.width
    height = settings.height
    pixel_color = Color(0.0, 0.0, 0.0)

    for _ in range(settings.samples_per_pixel):
        u = (i + random_double()) / (width - 1)
        v = (j + random_double()) / (height - 1)
        ray = camera.get_ray(u, v)
        pixel_color = pixel_color + ray_color(ray, scene, settings.max_depth)

    return encode_pixel(pixel_color, settings.samples_per_pixel)


def render_scanline(j: int, scene: Hittable, camera: Camera, settings: RenderSettings) -> list[RGB]:
    """Render scanline `j` (0 = bottom row), left to right."""
    return [render_pixel(i, j, scene, camera, settings) for i in range(settings.width)]


class Renderer:
    """Path tracing renderer with a fixed-size worker pool."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        The callback runs on the thread that called `render`, once per
        finished scanline.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def scanline_offset(self, j: int) -> int:
        """Index of the first pixel of scanline `j` in the output buffer.

        The buffer is stored top row first, so scanline `height - 1` starts
        at index 0.
        """
        return (self.settings.height - 1 - j) * self.settings.width

    def render(self, scene: Hittable, camera: Camera) -> list[RGB]:
        """Render the scene and return its pixels.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            width * height RGB triples, rows top to bottom, columns left
            to right

        Raises:
            RenderError: if any scanline fails to render
        """
        width = self.settings.width
        height = self.settings.height
        workers = self.settings.workers

        pixels: list[Optional[RGB]] = [None] * (width * height)

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d workers",
            width, height, self.settings.samples_per_pixel, self.settings.max_depth, workers,
        )
        start_time = time.perf_counter()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='raytracing') as executor:
            futures = {
                executor.submit(render_scanline, j, scene, camera, self.settings): j
                for j in range(height - 1, -1, -1)
            }

            for done, future in enumerate(as_completed(futures), start=1):
                j = futures[future]
                try:
                    colors = future.result()
                    if len(colors) != width:
                        raise RenderError(
                            f"Scanline {j} produced {len(colors)} pixels, expected {width}"
                        )
                except Exception as exc:
                    # Queued scanlines would otherwise still run before the pool exits
                    for pending in futures:
                        pending.cancel()
                    if isinstance(exc, RenderError):
                        raise
                    raise RenderError(f"Scanline {j} failed to render") from exc

                start = self.scanline_offset(j)
                pixels[start:start + width] = colors

                logger.debug("Scanlines remaining: %d", height - done)
                if self._progress_callback:
                    self._progress_callback(done / height)

        if any(pixel is None for pixel in pixels):
            raise RenderError("Render finished with unfilled pixels")

        elapsed = time.perf_counter() - start_time
        logger.info("Render completed in %.2f seconds", elapsed)

        return pixels

    def render_ppm(self, scene: Hittable, camera: Camera) -> str:
        """Render the scene straight to plain-text PPM."""
        pixels = self.render(scene, camera)
        return format_ppm(pixels, self.settings.width, self.settings.height)
