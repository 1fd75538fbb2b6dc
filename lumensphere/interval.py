"""
Closed real intervals used for ray parameter windows and color clamping.
"""

from __future__ import annotations
from dataclasses import dataclass

from .sampling import INFINITY


@dataclass(frozen=True)
class Interval:
    """The range [min, max]. An interval with min > max is empty."""
    min: float = INFINITY
    max: float = -INFINITY

    def size(self) -> float:
        return self.max - self.min

    def contains(self, x: float) -> bool:
        """True if min <= x <= max."""
        return self.min <= x <= self.max

    def surrounds(self, x: float) -> bool:
        """True if min < x < max (boundaries excluded)."""
        return self.min < x < self.max

    def clamp(self, x: float) -> float:
        if x < self.min:
            return self.min
        if x > self.max:
            return self.max
        return x

    def expand(self, delta: float) -> Interval:
        """Return the interval padded by delta/2 on both sides."""
        padding = delta / 2
        return Interval(self.min - padding, self.max + padding)


EMPTY = Interval(INFINITY, -INFINITY)
UNIVERSE = Interval(-INFINITY, INFINITY)
