"""
Pattern system for the ray tracer.

Implements:
- Solid colors
- Stripes (alternating along x)
- Linear gradients
- Concentric rings
- 3D checkers
- A coordinate-echo test pattern

Every pattern owns its own transform, applied after the object's
transform, so a pattern can be scaled or rotated independently of the
surface it decorates.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING
import math

from .vec3 import Point3, Color, WHITE, BLACK
from .matrix import Matrix, IDENTITY
from .transform import Transform

if TYPE_CHECKING:
    from .shapes import Shape


class Pattern(ABC):
    """Abstract base class for patterns."""

    def __init__(self, a: Color = WHITE, b: Color = BLACK, transform: Matrix = IDENTITY):
        self.a = a
        self.b = b
        self.transform = transform

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, value) -> None:
        if isinstance(value, Transform):
            value = value.build()
        self._transform = value

    @abstractmethod
    def pattern_at(self, point: Point3) -> Color:
        """Get the pattern color at a point in pattern space.

        Args:
            point: Point already converted to pattern space

        Returns:
            Color at this location
        """
        pass

    def pattern_at_object(self, obj: Shape, world_point: Point3, container=None) -> Color:
        """Sample the pattern for a point on `obj` given in world space.

        The point passes through the object's (and its parents') inverse
        transforms, then through the pattern's own inverse transform.

        Args:
            obj: The shape being shaded
            world_point: Hit point in world space
            container: World or Group that resolves parent ids

        Returns:
            Pattern color
        """
        object_point = obj.world_to_object(world_point, container)
        pattern_point = self._transform.inverse() * object_point
        return self.pattern_at(pattern_point)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.a == other.a and self.b == other.b and self._transform == other._transform

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(a={self.a}, b={self.b})"


class SolidPattern(Pattern):
    """A single flat color."""

    def __init__(self, color: Color, transform: Matrix = IDENTITY):
        super().__init__(color, color, transform)

    @property
    def color(self) -> Color:
        return self.a

    def pattern_at(self, point: Point3) -> Color:
        return self.a


class StripePattern(Pattern):
    """Alternates between a and b every unit along x."""

    def pattern_at(self, point: Point3) -> Color:
        if math.floor(point.x) % 2 == 0:
            return self.a
        return self.b


class GradientPattern(Pattern):
    """Linear blend from a to b over each unit of x."""

    def pattern_at(self, point: Point3) -> Color:
        fraction = point.x - math.floor(point.x)
        return self.a + (self.b - self.a) * fraction


def _snap(v: float) -> float:
    """Round to two decimals, halves away from zero, so boundary points sample consistently."""
    return math.copysign(math.floor(abs(v) * 100.0 + 0.5), v) / 100.0


class RingPattern(Pattern):
    """Concentric rings around the y axis, alternating every unit of radius."""

    def pattern_at(self, point: Point3) -> Color:
        x = _snap(point.x)
        z = _snap(point.z)
        if math.floor(math.sqrt(x * x + z * z)) % 2 == 0:
            return self.a
        return self.b


class CheckersPattern(Pattern):
    """Alternating unit cubes in all three dimensions."""

    def pattern_at(self, point: Point3) -> Color:
        total = math.floor(point.x) + math.floor(point.y) + math.floor(point.z)
        if total % 2 == 0:
            return self.a
        return self.b


class TestPattern(Pattern):
    """Returns the pattern-space point as a color.

    Useful for checking which transforms were applied before sampling.
    """

    __test__ = False

    def __init__(self, transform: Matrix = IDENTITY):
        super().__init__(WHITE, BLACK, transform)

    def pattern_at(self, point: Point3) -> Color:
        return Color(point.x, point.y, point.z)


PATTERN_TYPES: dict[str, type] = {
    'solid': SolidPattern,
    'stripe': StripePattern,
    'gradient': GradientPattern,
    'ring': RingPattern,
    'checkers': CheckersPattern,
}


def create_pattern(kind: str, a: Color, b: Optional[Color] = None, transform: Matrix = IDENTITY) -> Pattern:
    """Create a pattern by name.

    Args:
        kind: One of the keys of PATTERN_TYPES
        a: First color
        b: Second color (ignored for solid patterns)
        transform: Pattern transform

    Returns:
        The new pattern

    Raises:
        ValueError: If `kind` is not a known pattern
    """
    cls = PATTERN_TYPES.get(kind.lower())
    if cls is None:
        raise ValueError(f"Unknown pattern type: {kind}")
    if cls is SolidPattern:
        return SolidPattern(a, transform)
    return cls(a, b if b is not None else BLACK, transform)
