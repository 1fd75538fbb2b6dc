"""
Random sources and small numeric helpers.

A random source is any object exposing ``random()`` (uniform in [0, 1))
and ``uniform(low, high)``. ``numpy.random.Generator`` and
``random.Random`` both qualify, so tests can pass either one or a tiny
stub with fixed answers.
"""

from __future__ import annotations
import math
from typing import Optional, Protocol

import numpy as np

INFINITY = math.inf


class RandomSource(Protocol):
    """Anything that can hand out uniform random floats."""

    def random(self) -> float:
        ...

    def uniform(self, low: float, high: float) -> float:
        ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random source, reproducible when a seed is given."""
    return np.random.default_rng(seed)


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0
