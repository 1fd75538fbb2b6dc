"""
Vector3 class for 3D math operations.

The same type stands in for points, direction vectors and RGB colors;
callers keep track of which one they mean.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np

from .sampling import RandomSource


class Vec3:
    """An immutable 3D vector backed by a small numpy array."""

    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Wrap an existing 3-element array without copying."""
        v = cls.__new__(cls)
        v._data = np.asarray(arr, dtype=np.float64)
        return v

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    # Aliases for color channels
    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    def __repr__(self) -> str:
        return f"Vec3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return bool(np.allclose(self._data, other._data))

    def __hash__(self) -> int:
        return hash(tuple(self._data))

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def __neg__(self) -> Vec3:
        return Vec3.from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data + other._data)
        return Vec3.from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return Vec3.from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data - other._data)
        return Vec3.from_array(self._data - other)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        # Vec3 * Vec3 is the element-wise (Hadamard) product
        if isinstance(other, Vec3):
            return Vec3.from_array(self._data * other._data)
        return Vec3.from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3.from_array(other * self._data)

    def __truediv__(self, other: float) -> Vec3:
        return Vec3.from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def length(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.length_squared())

    def length_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        x, y, z = self._data
        return float(x * x + y * y + z * z)

    def unit(self) -> Vec3:
        """Return a unit vector in the same direction.

        The zero vector has no direction; it maps to itself.
        """
        length = self.length()
        if length == 0:
            return Vec3(0, 0, 0)
        return Vec3.from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        x, y, z = self._data
        ox, oy, oz = other._data
        return float(x * ox + y * oy + z * oz)

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Mirror this vector about the given unit normal: v - 2(v.n)n."""
        return self - normal * (2 * self.dot(normal))

    def refract(self, normal: Vec3, eta_ratio: float) -> Vec3:
        """Bend this unit vector through a surface following Snell's law.

        Args:
            normal: Unit surface normal on the incoming side
            eta_ratio: Ratio of refractive indices (n1/n2)

        Returns:
            The refracted direction. Callers check for total internal
            reflection before calling.
        """
        cos_theta = min((-self).dot(normal), 1.0)
        r_out_perp = (self + normal * cos_theta) * eta_ratio
        r_out_parallel = normal * -math.sqrt(abs(1.0 - r_out_perp.length_squared()))
        return r_out_perp + r_out_parallel

    def near_zero(self, epsilon: float = 1e-8) -> bool:
        """Check if vector is close to zero in all dimensions."""
        return bool(np.all(np.abs(self._data) < epsilon))

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()

    @staticmethod
    def random(rng: RandomSource) -> Vec3:
        """Vector with each component uniform in [0, 1)."""
        return Vec3(rng.random(), rng.random(), rng.random())

    @staticmethod
    def random_range(rng: RandomSource, min_val: float, max_val: float) -> Vec3:
        """Vector with each component uniform in [min_val, max_val)."""
        return Vec3(
            rng.uniform(min_val, max_val),
            rng.uniform(min_val, max_val),
            rng.uniform(min_val, max_val)
        )

    @staticmethod
    def random_unit_vector(rng: RandomSource) -> Vec3:
        """Uniformly distributed direction on the unit sphere.

        Rejection-samples the unit ball; candidates too close to the
        origin are discarded so the normalization stays finite.
        """
        while True:
            p = Vec3.random_range(rng, -1, 1)
            lensq = p.length_squared()
            if 1e-160 < lensq <= 1:
                return p / math.sqrt(lensq)

    @staticmethod
    def random_on_hemisphere(rng: RandomSource, normal: Vec3) -> Vec3:
        """Random unit vector flipped into the hemisphere around normal."""
        on_unit_sphere = Vec3.random_unit_vector(rng)
        if on_unit_sphere.dot(normal) > 0.0:
            return on_unit_sphere
        return -on_unit_sphere

    @staticmethod
    def random_in_unit_disk(rng: RandomSource) -> Vec3:
        """Generate a random point inside the unit disk (z=0)."""
        while True:
            p = Vec3(rng.uniform(-1, 1), rng.uniform(-1, 1), 0)
            if p.length_squared() < 1:
                return p


# Convenience type aliases
Point3 = Vec3
Color = Vec3
