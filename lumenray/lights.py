"""
Light sources for the ray tracer.

Only point lights are supported: a position and an intensity color,
no falloff and no area (hard shadows).
"""

from __future__ import annotations
from dataclasses import dataclass

from .vec3 import Point3, Color


@dataclass
class PointLight:
    """A point light source.

    Point lights emit light equally in all directions from a single point.
    They produce hard shadows.

    Attributes:
        position: Position of the light
        intensity: Color and brightness of the light
    """
    position: Point3
    intensity: Color

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, intensity={self.intensity})"
