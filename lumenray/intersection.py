"""
Ray-shape intersections and the per-hit shading state.

Implements:
- Hit selection (nearest non-negative t)
- Precomputed shading state (`Computations`) with acne-free offset points
- Refractive index tracking through nested transparent shapes
- Schlick's approximation of Fresnel reflectance
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, TYPE_CHECKING
import math

from .vec3 import EPSILON, Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .shapes import Shape


@dataclass(frozen=True)
class Intersection:
    """A ray parameter and the shape hit there.

    Attributes:
        t: Ray parameter of the intersection
        object: The shape that was hit
    """
    t: float
    object: Shape


def hit(xs: Sequence[Intersection]) -> Optional[Intersection]:
    """Return the visible intersection: the lowest non-negative t.

    On ties the earliest entry in `xs` wins.

    Args:
        xs: Intersections in any order

    Returns:
        The hit, or None when every t is negative (or `xs` is empty)
    """
    best: Optional[Intersection] = None
    for i in xs:
        if i.t >= 0 and (best is None or i.t < best.t):
            best = i
    return best


@dataclass
class Computations:
    """Shading state derived from a hit.

    Attributes:
        t: Ray parameter of the hit
        object: Shape that was hit
        point: Exact hit point
        eyev: Unit vector back toward the ray origin
        normalv: Surface normal, flipped to face the eye
        inside: True when the hit is on the inside of the surface
        over_point: Point nudged along the normal (shadow and reflection origin)
        under_point: Point nudged against the normal (refraction origin)
        reflectv: Ray direction reflected about the normal
        n1: Refractive index of the medium being exited
        n2: Refractive index of the medium being entered
    """
    t: float
    object: Shape
    point: Point3
    eyev: Vec3
    normalv: Vec3
    inside: bool
    over_point: Point3
    under_point: Point3
    reflectv: Vec3
    n1: float = 1.0
    n2: float = 1.0

    def schlick(self) -> float:
        """Fraction of light reflected at the surface (Schlick's approximation).

        Returns 1.0 under total internal reflection.
        """
        cos = self.eyev.dot(self.normalv)

        if self.n1 > self.n2:
            n = self.n1 / self.n2
            sin2_t = n * n * (1.0 - cos * cos)
            if sin2_t > 1.0:
                return 1.0
            cos = math.sqrt(1.0 - sin2_t)

        r0 = ((self.n1 - self.n2) / (self.n1 + self.n2)) ** 2
        return r0 + (1.0 - r0) * (1.0 - cos) ** 5


def schlick(comps: Computations) -> float:
    return comps.schlick()


def _refractive_indices(hit_: Intersection, xs: Sequence[Intersection]) -> tuple[float, float]:
    n1 = n2 = 1.0
    containers: list[Shape] = []

    for i in xs:
        if i == hit_:
            n1 = containers[-1].material.refractive_index if containers else 1.0

        if i.object in containers:
            # Leaving this shape
            containers.remove(i.object)
        else:
            containers.append(i.object)

        if i == hit_:
            n2 = containers[-1].material.refractive_index if containers else 1.0
            break

    return n1, n2


def prepare_computations(
    hit_: Intersection,
    ray: Ray,
    xs: Optional[Sequence[Intersection]] = None,
    container=None
) -> Computations:
    """Precompute everything shading needs for a hit.

    Args:
        hit_: The intersection being shaded
        ray: The ray that produced it
        xs: All intersections of `ray`, sorted by t; used to work out
            which media the ray is leaving and entering. Defaults to [hit_].
        container: World or Group resolving the hit shape's parents

    Returns:
        The computations for this hit
    """
    point = ray.position(hit_.t)
    eyev = -ray.direction
    normalv = hit_.object.normal_at(point, container)

    inside = False
    if normalv.dot(eyev) < 0:
        inside = True
        normalv = -normalv

    n1, n2 = _refractive_indices(hit_, xs if xs is not None else [hit_])

    return Computations(
        t=hit_.t,
        object=hit_.object,
        point=point,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        over_point=point + normalv * EPSILON,
        under_point=point - normalv * EPSILON,
        reflectv=ray.direction.reflect(normalv),
        n1=n1,
        n2=n2,
    )
