"""
Geometric shapes for the ray tracer.

Every shape lives in its own object space and carries a transform into
world space. Subclasses only implement the object-space parts:
`local_intersect` and `local_normal_at`. The base class handles moving
rays and normals between spaces, including through any parent groups.

Parents are referenced by id rather than by object. A container (a World
or a Group) resolves the id with `get_shape` whenever a conversion has to
walk up the hierarchy.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Iterator
import math
import uuid

from .vec3 import EPSILON, Vec3, Point3
from .ray import Ray
from .matrix import Matrix, IDENTITY
from .transform import Transform
from .materials import Material
from .intersection import Intersection


class ShapeNotFoundError(LookupError):
    """Raised when a shape's parent id cannot be resolved."""
    pass


class Shape(ABC):
    """Abstract base class for all shapes."""

    def __init__(
        self,
        transform: Matrix = IDENTITY,
        material: Optional[Material] = None,
        cast_shadow: bool = True
    ):
        """Create a shape.

        Args:
            transform: Object-to-world transform (a Matrix or a Transform builder)
            material: Surface material; each shape gets its own default when omitted
            cast_shadow: Whether the shape blocks light in shadow tests
        """
        self.id = uuid.uuid4()
        self.parent_id: Optional[uuid.UUID] = None
        self.transform = transform
        self.material = material if material is not None else Material()
        self.cast_shadow = cast_shadow

    @property
    def transform(self) -> Matrix:
        return self._transform

    @transform.setter
    def transform(self, value) -> None:
        if isinstance(value, Transform):
            value = value.build()
        self._transform = value

    @abstractmethod
    def local_intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray already in object space.

        Args:
            ray: The ray in object space

        Returns:
            Intersections (possibly empty, not necessarily sorted)
        """
        pass

    @abstractmethod
    def local_normal_at(self, point: Point3) -> Vec3:
        """Surface normal at a point in object space."""
        pass

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a ray given in the parent's space (world space for top-level shapes)."""
        return self.local_intersect(ray.transform(self._transform.inverse()))

    def _parent(self, container) -> Optional[Shape]:
        if self.parent_id is None:
            return None
        if container is None:
            raise ShapeNotFoundError(
                f"Shape {self.id} has parent {self.parent_id} but no container was given"
            )
        parent = container.get_shape(self.parent_id)
        if parent is None:
            raise ShapeNotFoundError(f"Parent shape {self.parent_id} not found")
        return parent

    def world_to_object(self, point: Point3, container=None) -> Point3:
        """Convert a world-space point into this shape's object space.

        Args:
            point: Point in world space
            container: World or Group that can resolve parent ids

        Raises:
            ShapeNotFoundError: If a parent id cannot be resolved
        """
        parent = self._parent(container)
        if parent is not None:
            point = parent.world_to_object(point, container)
        return self._transform.inverse() * point

    def normal_to_world(self, normal: Vec3, container=None) -> Vec3:
        """Convert an object-space normal into world space.

        Raises:
            ShapeNotFoundError: If a parent id cannot be resolved
        """
        normal = (self._transform.inverse().transpose() * normal).normalize()
        parent = self._parent(container)
        if parent is not None:
            normal = parent.normal_to_world(normal, container)
        return normal

    def normal_at(self, world_point: Point3, container=None) -> Vec3:
        """Unit surface normal at a world-space point."""
        local_point = self.world_to_object(world_point, container)
        local_normal = self.local_normal_at(local_point)
        return self.normal_to_world(local_normal, container)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={str(self.id)[:8]})"


class Sphere(Shape):
    """A unit sphere centered at the origin."""

    @classmethod
    def glass(cls) -> Sphere:
        """A fully transparent sphere with the refractive index of glass."""
        sphere = cls()
        sphere.material.transparency = 1.0
        sphere.material.refractive_index = 1.5
        return sphere

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        """Ray-sphere intersection using the quadratic formula.

        |O + tD|² = 1 expands to t²(D·D) + 2t(D·O) + (O·O - 1) = 0.
        A tangent ray returns the same t twice.
        """
        sphere_to_ray = ray.origin - Point3(0, 0, 0)
        a = ray.direction.dot(ray.direction)
        b = 2.0 * ray.direction.dot(sphere_to_ray)
        c = sphere_to_ray.dot(sphere_to_ray) - 1.0

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0:
            return []

        sqrtd = math.sqrt(discriminant)
        t1 = (-b - sqrtd) / (2.0 * a)
        t2 = (-b + sqrtd) / (2.0 * a)
        return [Intersection(t1, self), Intersection(t2, self)]

    def local_normal_at(self, point: Point3) -> Vec3:
        return point - Point3(0, 0, 0)


class Plane(Shape):
    """The infinite xz plane (y = 0)."""

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        if abs(ray.direction.y) < EPSILON:
            # Parallel or coplanar
            return []
        t = -ray.origin.y / ray.direction.y
        return [Intersection(t, self)]

    def local_normal_at(self, point: Point3) -> Vec3:
        return Vec3(0, 1, 0)


def _check_axis(origin: float, direction: float) -> tuple[float, float]:
    tmin_numerator = -1.0 - origin
    tmax_numerator = 1.0 - origin

    if abs(direction) >= EPSILON:
        tmin = tmin_numerator / direction
        tmax = tmax_numerator / direction
    else:
        tmin = math.copysign(math.inf, tmin_numerator)
        tmax = math.copysign(math.inf, tmax_numerator)

    if tmin > tmax:
        tmin, tmax = tmax, tmin
    return tmin, tmax


class Cube(Shape):
    """An axis-aligned cube spanning [-1, 1] on every axis."""

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        """Slab test: intersect the three per-axis [tmin, tmax] intervals."""
        xtmin, xtmax = _check_axis(ray.origin.x, ray.direction.x)
        ytmin, ytmax = _check_axis(ray.origin.y, ray.direction.y)
        ztmin, ztmax = _check_axis(ray.origin.z, ray.direction.z)

        tmin = max(xtmin, ytmin, ztmin)
        tmax = min(xtmax, ytmax, ztmax)
        if tmin > tmax:
            return []
        return [Intersection(tmin, self), Intersection(tmax, self)]

    def local_normal_at(self, point: Point3) -> Vec3:
        ax, ay, az = abs(point.x), abs(point.y), abs(point.z)
        maxc = max(ax, ay, az)
        if maxc == ax:
            return Vec3(point.x, 0, 0)
        if maxc == ay:
            return Vec3(0, point.y, 0)
        return Vec3(0, 0, point.z)


class _Truncated(Shape):
    """Shared truncation and cap handling for cylinders and cones."""

    def __init__(
        self,
        minimum: float = -math.inf,
        maximum: float = math.inf,
        closed: bool = False,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.minimum = minimum
        self.maximum = maximum
        self.closed = closed

    @abstractmethod
    def _cap_radius(self, y: float) -> float:
        """Radius of the cap disc at height y."""
        pass

    def _in_range(self, y: float) -> bool:
        return self.minimum < y < self.maximum

    def _check_cap(self, ray: Ray, t: float, radius: float) -> bool:
        x = ray.origin.x + t * ray.direction.x
        z = ray.origin.z + t * ray.direction.z
        return x * x + z * z <= radius * radius

    def _intersect_caps(self, ray: Ray, xs: list[Intersection]) -> None:
        if not self.closed or abs(ray.direction.y) < EPSILON:
            return

        for bound in (self.minimum, self.maximum):
            if not math.isfinite(bound):
                continue
            t = (bound - ray.origin.y) / ray.direction.y
            if self._check_cap(ray, t, self._cap_radius(bound)):
                xs.append(Intersection(t, self))

    def _cap_normal(self, point: Point3) -> Optional[Vec3]:
        dist = point.x * point.x + point.z * point.z
        if point.y >= self.maximum - EPSILON and dist < self._cap_radius(self.maximum) ** 2:
            return Vec3(0, 1, 0)
        if point.y <= self.minimum + EPSILON and dist < self._cap_radius(self.minimum) ** 2:
            return Vec3(0, -1, 0)
        return None


class Cylinder(_Truncated):
    """A cylinder of radius 1 around the y axis.

    Truncated to minimum < y < maximum (infinite by default) and optionally
    closed with unit discs at both ends.
    """

    def _cap_radius(self, y: float) -> float:
        return 1.0

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        xs: list[Intersection] = []
        o, d = ray.origin, ray.direction

        a = d.x * d.x + d.z * d.z
        if abs(a) >= EPSILON:
            b = 2.0 * o.x * d.x + 2.0 * o.z * d.z
            c = o.x * o.x + o.z * o.z - 1.0
            disc = b * b - 4.0 * a * c
            if disc < 0:
                return []

            sqrtd = math.sqrt(disc)
            t0 = (-b - sqrtd) / (2.0 * a)
            t1 = (-b + sqrtd) / (2.0 * a)
            if t0 > t1:
                t0, t1 = t1, t0

            for t in (t0, t1):
                if self._in_range(o.y + t * d.y):
                    xs.append(Intersection(t, self))

        self._intersect_caps(ray, xs)
        return xs

    def local_normal_at(self, point: Point3) -> Vec3:
        cap = self._cap_normal(point)
        if cap is not None:
            return cap
        return Vec3(point.x, 0, point.z)


class Cone(_Truncated):
    """A double-napped cone x² + z² = y² around the y axis.

    Truncation and caps work as for Cylinder; a cap's radius is the |y| of
    the plane it sits in.
    """

    def _cap_radius(self, y: float) -> float:
        return abs(y)

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        xs: list[Intersection] = []
        o, d = ray.origin, ray.direction

        a = d.x * d.x - d.y * d.y + d.z * d.z
        b = 2.0 * (o.x * d.x - o.y * d.y + o.z * d.z)
        c = o.x * o.x - o.y * o.y + o.z * o.z

        if abs(a) < EPSILON:
            if abs(b) >= EPSILON:
                # Ray parallel to one of the halves: a single hit
                t = -c / (2.0 * b)
                if self._in_range(o.y + t * d.y):
                    xs.append(Intersection(t, self))
        else:
            disc = b * b - 4.0 * a * c
            if disc < 0:
                return []

            sqrtd = math.sqrt(disc)
            t0 = (-b - sqrtd) / (2.0 * a)
            t1 = (-b + sqrtd) / (2.0 * a)
            if t0 > t1:
                t0, t1 = t1, t0

            for t in (t0, t1):
                if self._in_range(o.y + t * d.y):
                    xs.append(Intersection(t, self))

        self._intersect_caps(ray, xs)
        return xs

    def local_normal_at(self, point: Point3) -> Vec3:
        cap = self._cap_normal(point)
        if cap is not None:
            return cap

        y = math.sqrt(point.x * point.x + point.z * point.z)
        if point.y > 0:
            y = -y
        return Vec3(point.x, y, point.z)


class Group(Shape):
    """A collection of shapes sharing a common transform.

    Children keep their own transforms, applied inside the group's.
    Groups nest.
    """

    def __init__(self, children: Optional[list[Shape]] = None, **kwargs):
        super().__init__(**kwargs)
        self.children: list[Shape] = []
        for child in children or []:
            self.add_child(child)

    def add_child(self, shape: Shape) -> Shape:
        """Add a shape to this group and point its parent id at the group."""
        shape.parent_id = self.id
        self.children.append(shape)
        return shape

    def get_shape(self, shape_id: uuid.UUID) -> Optional[Shape]:
        """Find a shape by id in this group's subtree (including the group)."""
        if self.id == shape_id:
            return self
        for child in self.children:
            if child.id == shape_id:
                return child
            if isinstance(child, Group):
                found = child.get_shape(shape_id)
                if found is not None:
                    return found
        return None

    def walk(self) -> Iterator[Shape]:
        """Yield every descendant, depth first."""
        for child in self.children:
            yield child
            if isinstance(child, Group):
                yield from child.walk()

    def local_intersect(self, ray: Ray) -> list[Intersection]:
        xs: list[Intersection] = []
        for child in self.children:
            xs.extend(child.intersect(ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def local_normal_at(self, point: Point3) -> Vec3:
        raise NotImplementedError("Groups have no surface; normals come from their children")

    def __len__(self) -> int:
        return len(self.children)
