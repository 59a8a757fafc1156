"""
Surface materials and the Phong reflection model.

A material describes how a surface responds to light: a base color (or a
pattern), the ambient/diffuse/specular weights of the Phong model, and the
reflective/transparent properties used by the recursive tracer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .vec3 import Vec3, Point3, Color, WHITE, BLACK
from .lights import PointLight
from .patterns import Pattern

if TYPE_CHECKING:
    from .shapes import Shape


@dataclass
class Material:
    """Optical properties of a surface.

    Attributes:
        color: Flat surface color, used when no pattern is set
        ambient: Fraction of light reflected regardless of direction
        diffuse: Weight of the Lambertian term
        specular: Weight of the highlight term
        shininess: Highlight exponent (larger is tighter)
        reflective: 0 for matte, 1 for a perfect mirror
        transparency: 0 for opaque, 1 for fully transparent
        refractive_index: Index of refraction (1.0 vacuum, 1.5 glass)
        pattern: Optional pattern overriding `color`
    """
    color: Color = field(default_factory=lambda: WHITE)
    ambient: float = 0.1
    diffuse: float = 0.9
    specular: float = 0.9
    shininess: float = 200.0
    reflective: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0
    pattern: Optional[Pattern] = None

    def lighting(
        self,
        obj: Shape,
        light: PointLight,
        point: Point3,
        eyev: Vec3,
        normalv: Vec3,
        in_shadow: bool = False,
        container=None,
    ) -> Color:
        """Shade a point with the Phong model for a single light.

        Args:
            obj: Shape being shaded (needed to sample patterns in object space)
            light: The light source
            point: Point being shaded, in world space
            eyev: Unit vector from the point toward the eye
            normalv: Unit surface normal
            in_shadow: Whether the light is blocked; leaves only ambient
            container: World or Group that resolves the shape's parents

        Returns:
            Unclamped color contribution of this light
        """
        if self.pattern is not None:
            color = self.pattern.pattern_at_object(obj, point, container)
        else:
            color = self.color

        effective_color = color * light.intensity
        ambient = effective_color * self.ambient

        if in_shadow:
            return ambient

        lightv = (light.position - point).normalize()
        light_dot_normal = lightv.dot(normalv)
        if light_dot_normal < 0:
            # Light is on the other side of the surface
            return ambient

        diffuse = effective_color * self.diffuse * light_dot_normal

        reflectv = (-lightv).reflect(normalv)
        reflect_dot_eye = reflectv.dot(eyev)
        if reflect_dot_eye <= 0:
            specular = BLACK
        else:
            factor = reflect_dot_eye ** self.shininess
            specular = light.intensity * self.specular * factor

        return ambient + diffuse + specular
