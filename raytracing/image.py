"""
Pixel encoding and image output.

Accumulated sample sums are turned into 8-bit RGB triples here, and
finished pixel buffers are written out either as plain-text PPM (P3) or,
through Pillow, in any raster format it knows.
"""

from __future__ import annotations
from pathlib import Path
from typing import Sequence, Tuple, Union
import numpy as np

from .vec3 import Color

RGB = Tuple[int, int, int]


def encode_pixel(color: Color, samples_per_pixel: int) -> RGB:
    """Convert a sum of samples into an 8-bit RGB triple.

    The sum is averaged, gamma-2 encoded (square root per channel),
    clamped to [0, 0.999] and scaled by 256.

    Args:
        color: Sum of `samples_per_pixel` linear radiance samples
        samples_per_pixel: Number of samples in the sum

    Returns:
        (r, g, b) with each channel in [0, 255]
    """
    scale = 1.0 / samples_per_pixel
    encoded = (color * scale).gamma_correct().clamp(0.0, 0.999)
    return (
        int(256 * encoded.r),
        int(256 * encoded.g),
        int(256 * encoded.b),
    )


def to_rgb_string(rgb: RGB) -> str:
    """Format one pixel as a PPM body line."""
    r, g, b = rgb
    return f"{r} {g} {b}"


def _check_size(pixels: Sequence[RGB], width: int, height: int) -> None:
    if len(pixels) != width * height:
        raise ValueError(
            f"Pixel buffer holds {len(pixels)} pixels, expected {width}x{height}={width * height}"
        )


def format_ppm(pixels: Sequence[RGB], width: int, height: int) -> str:
    """Render a pixel buffer as plain-text PPM.

    Args:
        pixels: Row-major pixels, top scanline first
        width: Image width
        height: Image height

    Returns:
        The full file contents: `P3` header then one "R G B" line per pixel
    """
    _check_size(pixels, width, height)
    header = f"P3\n{width} {height}\n255"
    body = "\n".join(to_rgb_string(rgb) for rgb in pixels)
    return f"{header}\n{body}\n"


def write_ppm(path: Union[str, Path], pixels: Sequence[RGB], width: int, height: int) -> Path:
    """Write a pixel buffer to a PPM file, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_ppm(pixels, width, height))
    return output_path


def to_array(pixels: Sequence[RGB], width: int, height: int) -> np.ndarray:
    """Pack a pixel buffer into a (height, width, 3) uint8 array."""
    _check_size(pixels, width, height)
    return np.asarray(pixels, dtype=np.uint8).reshape(height, width, 3)


def save_image(path: Union[str, Path], pixels: Sequence[RGB], width: int, height: int) -> Path:
    """Save a pixel buffer to file.

    `.ppm` files are written as plain text; any other extension is handed
    to Pillow, which picks the format from it.

    Args:
        path: Output filename
        pixels: Row-major pixels, top scanline first
        width: Image width
        height: Image height
    """
    from PIL import Image as PILImage

    output_path = Path(path)
    if output_path.suffix.lower() == '.ppm':
        return write_ppm(output_path, pixels, width, height)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    pil_image = PILImage.fromarray(to_array(pixels, width, height))
    pil_image.save(output_path)
    return output_path
