"""
Built-in demo scenes.

Each builder takes the image size and returns (world, camera):
- balls: a glass ball around a red one and a large mirror ball in a checkered room
- cylinders: a reflective cone lying on its side between checkered walls
- room: a furnished room built entirely from scaled cubes
- hexagon: two hexagons built from nested groups of spheres and cylinders
- default: the two-sphere default world
"""

from __future__ import annotations
import math
from typing import Callable, Tuple

from .vec3 import Vec3, Point3, Color, WHITE, BLACK
from .transform import Transform, view_transform
from .patterns import CheckersPattern, StripePattern
from .lights import PointLight
from .shapes import Sphere, Plane, Cube, Cylinder, Cone, Group
from .world import World
from .camera import Camera

SceneBuilder = Callable[[int, int], Tuple[World, Camera]]


def _room_camera(width: int, height: int) -> Camera:
    return Camera(
        width, height, math.pi / 3,
        view_transform(Point3(0, 1.5, -4), Point3(0, 1, 0), Vec3(0, 1, 0)),
    )


def _floor_pattern() -> CheckersPattern:
    return CheckersPattern(
        WHITE, BLACK,
        Transform().scaling(0.1, 0.1, 0.1).rotation_y(0.174).translation(10, 0, 10).build(),
    )


def _wall(rotation: float, x: float, z: float) -> Plane:
    wall = Plane(transform=Transform().rotation_x(math.pi / 2).rotation_y(rotation).translation(x, 0, z))
    wall.material.pattern = CheckersPattern(WHITE, BLACK, Transform().translation(10, 0, 10).build())
    return wall


def _room(world: World, ceiling: bool = False) -> None:
    floor = Plane()
    floor.material.pattern = _floor_pattern()
    world.add_shape(floor)

    if ceiling:
        top = Plane(transform=Transform().translation(0, 10, 0))
        top.material.reflective = 0.1
        top.material.pattern = _floor_pattern()
        world.add_shape(top)

    world.add_shape(_wall(-math.pi / 4, 0, 10))
    world.add_shape(_wall(math.pi / 4, 10, 0))
    world.add_light(PointLight(Point3(10, 3.5, -10), Color(1, 1, 1)))


def balls_scene(width: int, height: int) -> Tuple[World, Camera]:
    world = World()
    _room(world, ceiling=True)

    outer = Sphere.glass()
    outer.transform = Transform().translation(-0.5, 1, -1)
    outer.material.ambient = 0.1
    outer.material.diffuse = 0.05
    world.add_shape(outer)

    inner = Sphere(transform=Transform().scaling(0.65, 0.65, 0.65).translation(-0.5, 1, -1))
    inner.material.color = Color(1, 0, 0)
    inner.material.ambient = 0.5
    inner.material.reflective = 0.25
    world.add_shape(inner)

    mirror = Sphere(transform=Transform().scaling(2, 2, 2).translation(2.25, 2, -4.25))
    mirror.material.color = Color(0, 1, 0)
    mirror.material.ambient = 0.8
    mirror.material.reflective = 1.0
    world.add_shape(mirror)

    return world, _room_camera(width, height)


def cylinders_scene(width: int, height: int) -> Tuple[World, Camera]:
    world = World()
    _room(world)

    pillar = Cylinder(minimum=0.0, maximum=2.0, closed=True,
                      transform=Transform().translation(-2.5, 0, 2))
    pillar.material.color = Color(0.2, 0.3, 0.8)
    pillar.material.reflective = 0.3
    world.add_shape(pillar)

    cone = Cone(minimum=-1.0, maximum=1.0,
                transform=Transform().rotation_z(math.pi / 2).translation(0, 1, 0))
    cone.material.color = Color(0.25, 0, 0)
    cone.material.reflective = 0.9
    cone.material.refractive_index = 1.5
    cone.material.ambient = 0.1
    cone.material.diffuse = 0.05
    world.add_shape(cone)

    return world, _room_camera(width, height)


WOOD = Color.from_rgb255(161, 64, 5)


def _box(size: Tuple[float, float, float], position: Tuple[float, float, float]) -> Cube:
    return Cube(transform=Transform().scaling(*size).translation(*position))


def _wood_stripes(rotated: bool = False) -> StripePattern:
    t = Transform().scaling(0.05, 0.05, 0.05)
    if rotated:
        t = t.rotation_y(math.pi / 2)
    return StripePattern(WOOD, Color.from_rgb255(145, 41, 3), t.build())


def room_scene(width: int, height: int) -> Tuple[World, Camera]:
    world = World()

    floor = world.add_shape(_box((5, 0.1, 5), (0, -0.1, 0)))
    floor.material.pattern = CheckersPattern(WHITE, BLACK, Transform().scaling(0.15, 0.15, 0.15).build())

    for x in (-5.1, 5.1):
        wall = world.add_shape(_box((0.1, 4, 5), (x, 4, 0)))
        wall.material.pattern = _wood_stripes(rotated=True)
    back = world.add_shape(_box((5, 4, 0.1), (0, 4, 5.1)))
    back.material.pattern = _wood_stripes()

    paintings = [
        ((1, 2, 0.1), (-1.5, 4, 4.9), Color(0.1, 1, 0.1)),
        ((1.75, 0.5, 0.1), (1.5, 4, 4.9), Color(1, 0.3, 0.3)),
        ((1.75, 0.5, 0.1), (1.5, 2.75, 4.9), Color(0, 0.3, 1)),
    ]
    for size, position, color in paintings:
        world.add_shape(_box(size, position)).material.color = color

    mirror = world.add_shape(_box((0.01, 2, 4), (5, 3, 0)))
    mirror.material.reflective = 1.0
    mirror.material.refractive_index = 1.458

    table_top = world.add_shape(_box((2.5, 0.1, 3), (0.5, 1.25, 0)))
    table_top.material.pattern = _wood_stripes(rotated=True)
    table_top.material.reflective = 0.02
    table_top.material.refractive_index = 3.45

    for x, z in ((-1.9, -2.9), (2.9, -2.9), (2.9, 2.9), (-1.9, 2.9)):
        world.add_shape(_box((0.1, 0.65, 0.1), (x, 0.65, z))).material.color = WOOD

    crystal = world.add_shape(_box((0.1, 1, 0.1), (-0.75, 2.35, -0.75)))
    crystal.material.color = Color.from_rgb255(211, 102, 151)
    crystal.material.refractive_index = 2.417
    crystal.material.reflective = 0.45

    world.add_shape(_box((0.1, 0.1, 0.1), (0.5, 1.45, -2))).material.color = Color.from_rgb255(213, 14, 151)
    world.add_shape(_box((0.2, 0.2, 0.2), (1.75, 1.55, -1))).material.color = Color.from_rgb255(10, 234, 36)

    slab = world.add_shape(_box((0.55, 0.5, 1.75), (0.2, 1.55, 0.05)))
    slab.material.color = Color.from_rgb255(237, 234, 36)
    slab.material.reflective = 0.6
    slab.material.refractive_index = 1.31
    slab.material.ambient = 0.025
    slab.material.diffuse = 0.25

    world.add_light(PointLight(Point3(3, 11, -10), Color(1, 1, 1)))
    camera = Camera(
        width, height, math.pi / 3,
        view_transform(Point3(-4, 2.5, -4.8), Point3(0.9, 1.25, 0), Vec3(0, 1, 0)),
    )
    return world, camera


def _hexagon_corner() -> Sphere:
    return Sphere(transform=Transform().scaling(0.25, 0.25, 0.25).translation(0, 0, -1))


def _hexagon_edge() -> Cylinder:
    return Cylinder(
        minimum=0.0, maximum=1.0,
        transform=Transform()
        .scaling(0.25, 1, 0.25)
        .rotation_z(-math.pi / 2)
        .rotation_y(-math.pi / 6)
        .translation(0, 0, -1),
    )


def hexagon(color: Color = Color(1, 0, 0)) -> Group:
    """Six sides, each a group holding one corner sphere and one edge cylinder."""
    hex_group = Group()
    for n in range(6):
        side = Group([_hexagon_corner(), _hexagon_edge()],
                     transform=Transform().rotation_y(n * math.pi / 3))
        for part in side.children:
            part.material.color = color
        hex_group.add_child(side)
    return hex_group


def hexagon_scene(width: int, height: int) -> Tuple[World, Camera]:
    world = World()
    floor = Plane()
    floor.material.pattern = _floor_pattern()
    world.add_shape(floor)

    big = hexagon()
    big.transform = Transform().rotation_x(-math.pi / 6).translation(1, 1, 0)
    world.add_shape(big)

    small = hexagon(Color(0, 1, 0))
    small.transform = Transform().scaling(0.25, 0.25, 0.25).rotation_x(-math.pi / 6).translation(1, 1, 0)
    world.add_shape(small)

    world.add_light(PointLight(Point3(10, 3.5, -10), Color(1, 1, 1)))
    return world, _room_camera(width, height)


def default_scene(width: int, height: int) -> Tuple[World, Camera]:
    camera = Camera(
        width, height, math.pi / 2,
        view_transform(Point3(0, 0, -5), Point3(0, 0, 0), Vec3(0, 1, 0)),
    )
    return World.default(), camera


SCENES: dict[str, SceneBuilder] = {
    'balls': balls_scene,
    'cylinders': cylinders_scene,
    'room': room_scene,
    'hexagon': hexagon_scene,
    'default': default_scene,
}
