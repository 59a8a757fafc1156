"""
Fluent builder for affine transforms.

Each call left-multiplies an elementary matrix onto the accumulated one,
so operations read in the order they are applied:

    Transform().scaling(2, 2, 2).rotation_y(math.pi / 4).translation(0, 1, 0).build()

scales first, then rotates, then translates.
"""

from __future__ import annotations
import math
import numpy as np

from .vec3 import Vec3, Point3
from .matrix import Matrix


class Transform:
    """Accumulates translation, scaling, rotation and shearing operations."""

    __slots__ = ('_data',)

    def __init__(self, data: np.ndarray = None):
        self._data = np.identity(4) if data is None else data

    def _then(self, m: list[list[float]]) -> Transform:
        return Transform(np.array(m, dtype=np.float64) @ self._data)

    def translation(self, x: float, y: float, z: float) -> Transform:
        return self._then([
            [1.0, 0.0, 0.0, x],
            [0.0, 1.0, 0.0, y],
            [0.0, 0.0, 1.0, z],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def scaling(self, x: float, y: float, z: float) -> Transform:
        return self._then([
            [x, 0.0, 0.0, 0.0],
            [0.0, y, 0.0, 0.0],
            [0.0, 0.0, z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def rotation_x(self, r: float) -> Transform:
        c, s = math.cos(r), math.sin(r)
        return self._then([
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def rotation_y(self, r: float) -> Transform:
        c, s = math.cos(r), math.sin(r)
        return self._then([
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def rotation_z(self, r: float) -> Transform:
        c, s = math.cos(r), math.sin(r)
        return self._then([
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def shearing(self, xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Transform:
        return self._then([
            [1.0, xy, xz, 0.0],
            [yx, 1.0, yz, 0.0],
            [zx, zy, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def build(self) -> Matrix:
        """Finalize into a Matrix (computes the inverse).

        Raises:
            SingularMatrixError: If a zero scale collapsed the transform
        """
        return Matrix(self._data)

    @staticmethod
    def view_transformation(from_point: Point3, to: Point3, up: Vec3) -> Matrix:
        return view_transform(from_point, to, up)

    def __repr__(self) -> str:
        return f"Transform({self._data.tolist()})"


def view_transform(from_point: Point3, to: Point3, up: Vec3) -> Matrix:
    """Build the world-to-camera matrix for an eye at `from_point` looking at `to`.

    Args:
        from_point: Eye position
        to: Point being looked at
        up: Approximate up direction (need not be orthogonal to the view)

    Returns:
        Orientation matrix multiplied by the inverse eye translation
    """
    forward = (to - from_point).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = np.array([
        [left.x, left.y, left.z, 0.0],
        [true_up.x, true_up.y, true_up.z, 0.0],
        [-forward.x, -forward.y, -forward.z, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ])
    translation = Transform().translation(-from_point.x, -from_point.y, -from_point.z)
    return Matrix(orientation @ translation._data)
