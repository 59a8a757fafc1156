"""
Ray class for representing rays in 3D space.

A ray is defined by an origin point and a direction vector.
Ray(t) = origin + t * direction
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .vec3 import Vec3, Point3

if TYPE_CHECKING:
    from .matrix import Matrix


class Ray:
    """A ray with origin and direction.

    The parametric form is: P(t) = origin + t * direction.
    Directions are not normalized when a ray is moved into object space,
    so t values stay comparable between world and object space.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        """Create a ray with given origin and direction.

        Args:
            origin: The starting point of the ray
            direction: The direction vector
        """
        self.origin = origin
        self.direction = direction

    def position(self, t: float) -> Point3:
        """Get the point along the ray at parameter t.

        Args:
            t: The parameter value (distance if direction is normalized)

        Returns:
            The point at origin + t * direction
        """
        return self.origin + self.direction * t

    at = position

    def transform(self, m: Matrix) -> Ray:
        """Return a new ray with both origin and direction multiplied by `m`."""
        return Ray(m * self.origin, m * self.direction)

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction})"
