"""
Display-space conversion and the plain-text PPM pixel encoding.

Linear radiance is gamma corrected with a square root, clamped to
[0, 0.999] and scaled to an 8-bit channel.
"""

from __future__ import annotations
import math
from typing import TextIO, Tuple

from .vec3 import Color
from .interval import Interval

INTENSITY = Interval(0.000, 0.999)


def linear_to_gamma(linear_component: float) -> float:
    """Gamma 2 transform; non-positive input maps to 0."""
    if linear_component > 0:
        return math.sqrt(linear_component)
    return 0.0


def quantize(pixel_color: Color) -> Tuple[int, int, int]:
    """Convert a linear color into three integer channels in [0, 255]."""
    return tuple(
        int(255.999 * INTENSITY.clamp(linear_to_gamma(c)))
        for c in pixel_color
    )


def write_ppm_header(out: TextIO, width: int, height: int) -> None:
    out.write(f"P3\n{width} {height}\n255\n")


def write_color(out: TextIO, pixel_color: Color) -> None:
    """Write one pixel as an "r g b" line."""
    r, g, b = quantize(pixel_color)
    out.write(f"{r} {g} {b}\n")
