"""
Vector types for 3D math operations.

This is the fundamental building block of the ray tracer, used for:
- Points in 3D space (homogeneous w=1)
- Direction vectors (homogeneous w=0)
- RGB color values

All equality comparisons are tolerant: two values are equal when every
component differs by less than EPSILON.
"""

from __future__ import annotations
import math
from typing import Union
import numpy as np


EPSILON = 1e-4


def float_eq(a: float, b: float) -> bool:
    """Compare two floats using the renderer's tolerance."""
    return abs(a - b) < EPSILON


class Vec3:
    """A 3D direction vector.

    Uses numpy internally for efficient computation while providing
    a clean, Pythonic API. Instances are immutable value types.

    Points (`Point3`) and colors (`Color`) share this implementation;
    the homogeneous `w` component decides the type of arithmetic results:
    point - point is a vector, point + vector is a point.
    """

    __slots__ = ('_data',)

    w = 0

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self._data = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vec3:
        """Create an instance from a numpy array."""
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

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        if self.w != other.w:
            return False
        return bool(np.all(np.abs(self._data - other._data) < EPSILON))

    __hash__ = None

    def _result_type(self, other: Vec3, w: int) -> type:
        if w == 1:
            return Point3
        if w == 0:
            if isinstance(self, Color) or isinstance(other, Color):
                return Color
            return Vec3
        raise TypeError(
            f"unsupported operand types: {type(self).__name__} and {type(other).__name__}"
        )

    def __neg__(self) -> Vec3:
        return type(self).from_array(-self._data)

    def __add__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            cls = self._result_type(other, self.w + other.w)
            return cls.from_array(self._data + other._data)
        return type(self).from_array(self._data + other)

    def __radd__(self, other: float) -> Vec3:
        return type(self).from_array(other + self._data)

    def __sub__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            cls = self._result_type(other, self.w - other.w)
            return cls.from_array(self._data - other._data)
        return type(self).from_array(self._data - other)

    def __rsub__(self, other: float) -> Vec3:
        return type(self).from_array(other - self._data)

    def __mul__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            # Component-wise (Hadamard) product, used for color blending
            return type(self).from_array(self._data * other._data)
        return type(self).from_array(self._data * other)

    def __rmul__(self, other: float) -> Vec3:
        return type(self).from_array(other * self._data)

    def __truediv__(self, other: Union[Vec3, float]) -> Vec3:
        if isinstance(other, Vec3):
            return type(self).from_array(self._data / other._data)
        return type(self).from_array(self._data / other)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def magnitude(self) -> float:
        """Return the magnitude (length) of the vector."""
        return math.sqrt(self.magnitude_squared())

    def magnitude_squared(self) -> float:
        """Return the squared magnitude (avoids sqrt for comparisons)."""
        return float(np.dot(self._data, self._data))

    length = magnitude

    def normalize(self) -> Vec3:
        """Return a unit vector in the same direction."""
        length = self.magnitude()
        if length == 0:
            return type(self)(0, 0, 0)
        return type(self).from_array(self._data / length)

    def dot(self, other: Vec3) -> float:
        """Compute dot product with another vector."""
        return float(np.dot(self._data, other._data))

    def cross(self, other: Vec3) -> Vec3:
        """Compute cross product with another vector."""
        return Vec3.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Vec3) -> Vec3:
        """Reflect this vector around the given normal."""
        return self - normal * 2 * self.dot(normal)

    def to_array(self) -> np.ndarray:
        """Return the underlying numpy array (copy)."""
        return self._data.copy()


class Point3(Vec3):
    """A position in space (homogeneous w=1)."""

    __slots__ = ()

    w = 1


class Color(Vec3):
    """An RGB color with unclamped float channels."""

    __slots__ = ()

    @property
    def r(self) -> float:
        return self.x

    @property
    def g(self) -> float:
        return self.y

    @property
    def b(self) -> float:
        return self.z

    @classmethod
    def from_rgb255(cls, r: int, g: int, b: int) -> Color:
        """Create a color from 8-bit channel values."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def clamp(self, min_val: float = 0.0, max_val: float = 1.0) -> Color:
        """Clamp all channels to the given range."""
        return Color.from_array(np.clip(self._data, min_val, max_val))

    def to_rgb(self) -> tuple[int, int, int]:
        """Quantize to 8-bit channels (clamped, rounded)."""
        r, g, b = np.rint(np.clip(self._data, 0.0, 1.0) * 255).astype(int)
        return int(r), int(g), int(b)


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
