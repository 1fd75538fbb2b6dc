"""
Render configuration.

RenderConfig gathers every user-facing camera setting in one place and
rejects values the camera cannot work with before any rendering starts.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional

from .vec3 import Vec3, Point3


class ConfigError(ValueError):
    """Invalid render configuration."""
    pass


@dataclass
class RenderConfig:
    """Configuration for the camera and render loop."""
    aspect_ratio: float = 1.0
    image_width: int = 100
    samples_per_pixel: int = 10
    max_depth: int = 10
    vfov: float = 90.0
    lookfrom: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    lookat: Point3 = field(default_factory=lambda: Point3(0, 0, -1))
    vup: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    defocus_angle: float = 0.0
    focus_dist: float = 10.0
    seed: Optional[int] = None

    def __post_init__(self):
        for name in ('image_width', 'samples_per_pixel', 'max_depth'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigError(f"seed must be an integer, got {self.seed!r}")
        if self.image_width < 1:
            raise ConfigError(f"image_width must be at least 1, got {self.image_width}")
        if self.samples_per_pixel < 1:
            raise ConfigError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ConfigError(f"max_depth must not be negative, got {self.max_depth}")
        if self.aspect_ratio <= 0:
            raise ConfigError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if not 0 < self.vfov < 180:
            raise ConfigError(f"vfov must be between 0 and 180 degrees, got {self.vfov}")
        if self.focus_dist <= 0:
            raise ConfigError(f"focus_dist must be positive, got {self.focus_dist}")
        if (self.lookfrom - self.lookat).near_zero():
            raise ConfigError("lookfrom and lookat must be different points")
        if self.vup.cross(self.lookfrom - self.lookat).near_zero():
            raise ConfigError("vup must not be parallel to the view direction")

    def with_overrides(self, **overrides: Any) -> RenderConfig:
        """Return a copy with the non-None overrides applied (and validated)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
