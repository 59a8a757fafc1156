"""
The world: every shape and light in a scene, plus the recursive shader.

Implements:
- Linear intersection of all shapes
- Phong shading summed over every light, with hard shadows
- Recursive reflection and refraction bounded by a depth counter
- Schlick blending of reflected and refracted light
"""

from __future__ import annotations
import logging
import math
from typing import Optional, Iterator
import uuid

from .vec3 import Point3, Color, WHITE, BLACK
from .ray import Ray
from .transform import Transform
from .lights import PointLight
from .shapes import Shape, Sphere, Group, ShapeNotFoundError
from .intersection import Intersection, Computations, hit, prepare_computations

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 5


class World:
    """A collection of shapes and lights.

    Shapes are owned by the world (groups own their children). The world
    also acts as the container that resolves parent ids during
    world/object conversions. It must not be mutated while rendering.
    """

    def __init__(self, background: Color = WHITE):
        self.objects: list[Shape] = []
        self.lights: list[PointLight] = []
        self.background = background
        self._index: dict[uuid.UUID, Shape] = {}

    @classmethod
    def default(cls) -> World:
        """Two concentric spheres lit from the upper left.

        The outer unit sphere is green-tinted with a soft highlight;
        the inner one is half its size with the default material.
        """
        world = cls()
        world.add_light(PointLight(Point3(-10, 10, -10), Color(1, 1, 1)))

        s1 = Sphere()
        s1.material.color = Color(0.8, 1.0, 0.6)
        s1.material.diffuse = 0.7
        s1.material.specular = 0.2
        world.add_shape(s1)

        s2 = Sphere(transform=Transform().scaling(0.5, 0.5, 0.5))
        world.add_shape(s2)
        return world

    def add_shape(self, shape: Shape) -> Shape:
        """Add a top-level shape.

        Args:
            shape: The shape (groups bring their children with them)

        Returns:
            The added shape

        Raises:
            ShapeNotFoundError: If the shape names a parent the world does not contain
        """
        if shape.parent_id is not None and self.get_shape(shape.parent_id) is None:
            raise ShapeNotFoundError(
                f"Cannot add {shape!r}: parent {shape.parent_id} is not in the world"
            )
        self.objects.append(shape)
        self._register(shape)
        logger.debug("Added %r (%d top-level shapes)", shape, len(self.objects))
        return shape

    def _register(self, shape: Shape) -> None:
        self._index[shape.id] = shape
        if isinstance(shape, Group):
            for child in shape.walk():
                self._index[child.id] = child

    def add_light(self, light: PointLight) -> PointLight:
        self.lights.append(light)
        return light

    def get_shape(self, shape_id: uuid.UUID) -> Optional[Shape]:
        """Find a shape anywhere in the world by id.

        Returns:
            The shape, or None when no shape has this id
        """
        shape = self._index.get(shape_id)
        if shape is not None:
            return shape

        # Children added to a group after the group joined the world
        for obj in self.objects:
            if isinstance(obj, Group):
                found = obj.get_shape(shape_id)
                if found is not None:
                    self._index[shape_id] = found
                    return found
        return None

    def walk(self) -> Iterator[Shape]:
        """Yield every shape in the world, depth first."""
        for obj in self.objects:
            yield obj
            if isinstance(obj, Group):
                yield from obj.walk()

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a world-space ray with every shape.

        Returns:
            All intersections sorted by t (empty when nothing is hit)
        """
        xs: list[Intersection] = []
        for obj in self.objects:
            xs.extend(obj.intersect(ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def is_shadowed(self, point: Point3, light: Optional[PointLight] = None) -> bool:
        """Check whether something blocks `light` from `point`.

        Args:
            point: Point being shaded (usually an over_point)
            light: Light to test; defaults to the first light in the world

        Returns:
            True when a shadow-casting shape lies between point and light
        """
        if light is None:
            if not self.lights:
                return False
            light = self.lights[0]

        v = light.position - point
        distance = v.magnitude()
        h = hit(self.intersect(Ray(point, v.normalize())))
        return h is not None and h.t < distance and h.object.cast_shadow

    def shade_hit(self, comps: Computations, remaining: int = DEFAULT_DEPTH) -> Color:
        """Color of a prepared hit, including reflections and refractions.

        Args:
            comps: Prepared computations for the hit
            remaining: Recursion budget for secondary rays

        Returns:
            The unclamped color
        """
        material = comps.object.material

        surface = BLACK
        for light in self.lights:
            in_shadow = self.is_shadowed(comps.over_point, light)
            surface = surface + material.lighting(
                comps.object,
                light,
                comps.over_point,
                comps.eyev,
                comps.normalv,
                in_shadow,
                self,
            )

        reflected = self.reflected_color(comps, remaining)
        refracted = self.refracted_color(comps, remaining)

        if material.reflective > 0 and material.transparency > 0:
            reflectance = comps.schlick()
            return surface + reflected * reflectance + refracted * (1.0 - reflectance)
        return surface + reflected + refracted

    def color_at(self, ray: Ray, remaining: int = DEFAULT_DEPTH) -> Color:
        """Trace a ray into the world and return its color.

        Rays that hit nothing return the background color.
        """
        xs = self.intersect(ray)
        h = hit(xs)
        if h is None:
            return self.background
        comps = prepare_computations(h, ray, xs, self)
        return self.shade_hit(comps, remaining)

    def reflected_color(self, comps: Computations, remaining: int = DEFAULT_DEPTH) -> Color:
        """Contribution of the mirror reflection at a hit."""
        reflective = comps.object.material.reflective
        if reflective == 0 or remaining < 1:
            return BLACK

        reflect_ray = Ray(comps.over_point, comps.reflectv)
        return self.color_at(reflect_ray, remaining - 1) * reflective

    def refracted_color(self, comps: Computations, remaining: int = DEFAULT_DEPTH) -> Color:
        """Contribution of light transmitted through a hit (Snell's law)."""
        transparency = comps.object.material.transparency
        if transparency == 0 or remaining < 1:
            return BLACK

        n_ratio = comps.n1 / comps.n2
        cos_i = comps.eyev.dot(comps.normalv)
        sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
        if sin2_t > 1.0:
            # Total internal reflection
            return BLACK

        cos_t = math.sqrt(1.0 - sin2_t)
        direction = comps.normalv * (n_ratio * cos_i - cos_t) - comps.eyev * n_ratio
        refract_ray = Ray(comps.under_point, direction)
        return self.color_at(refract_ray, remaining - 1) * transparency

    def __len__(self) -> int:
        return len(self.objects)

    def __repr__(self) -> str:
        return f"World(objects={len(self.objects)}, lights={len(self.lights)})"
