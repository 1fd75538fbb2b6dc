"""
Writing rendered pixel arrays to disk.
"""

from __future__ import annotations
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PILImage

from .color import write_ppm_header


def write_ppm(image: np.ndarray, out) -> None:
    """Write an 8-bit (height, width, 3) array as a plain-text P3 stream."""
    height, width = image.shape[:2]
    write_ppm_header(out, width, height)
    for row in image:
        for r, g, b in row:
            out.write(f"{r} {g} {b}\n")


def save_image(image: np.ndarray, filename: Union[str, Path]) -> None:
    """Save an 8-bit RGB array.

    Args:
        image: uint8 array of shape (height, width, 3), top row first
        filename: Output path; .ppm is written as plain text, any other
            extension goes through Pillow
    """
    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        with open(path, 'w') as f:
            write_ppm(image, f)
    else:
        PILImage.fromarray(np.asarray(image, dtype=np.uint8)).save(path)
