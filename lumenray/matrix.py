"""
4x4 matrices for affine transforms.

Every Matrix computes its inverse once, at construction, using cofactor
expansion; `inverse()` is then a constant-time swap of the cached data.
Products of two matrices reuse the cached inverses (inv(A*B) = inv(B)*inv(A)),
so only matrices built from raw data pay for the expansion.
"""

from __future__ import annotations
from typing import Sequence, Union
import numpy as np

from .vec3 import EPSILON, Vec3, Point3


class SingularMatrixError(ValueError):
    """Raised when a matrix with a zero determinant is built."""
    pass


def submatrix(a: np.ndarray, row: int, col: int) -> np.ndarray:
    """Return a copy of `a` with the given row and column removed."""
    return np.delete(np.delete(a, row, axis=0), col, axis=1)


def minor(a: np.ndarray, row: int, col: int) -> float:
    """Determinant of the submatrix at (row, col)."""
    return determinant(submatrix(a, row, col))


def cofactor(a: np.ndarray, row: int, col: int) -> float:
    """Minor at (row, col), negated when row + col is odd."""
    m = minor(a, row, col)
    return -m if (row + col) % 2 == 1 else m


def determinant(a: np.ndarray) -> float:
    """Determinant by cofactor expansion along the first row."""
    size = a.shape[0]
    if size == 1:
        return float(a[0, 0])
    if size == 2:
        return float(a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0])
    return sum(float(a[0, col]) * cofactor(a, 0, col) for col in range(size))


def _invert(data: np.ndarray) -> np.ndarray:
    det = determinant(data)
    if det == 0.0:
        raise SingularMatrixError(f"Matrix is not invertible:\n{data}")

    inverse = np.empty((4, 4), dtype=np.float64)
    for row in range(4):
        for col in range(4):
            # Transposed assignment builds the adjugate directly
            inverse[col, row] = cofactor(data, row, col) / det
    return inverse


class Matrix:
    """A 4x4 transform matrix with a cached inverse."""

    __slots__ = ('_data', '_inverse')

    def __init__(self, data: Union[Sequence[Sequence[float]], np.ndarray], inverse: np.ndarray = None):
        """Create a matrix.

        Args:
            data: 4x4 nested sequence or numpy array
            inverse: Known inverse; computed by cofactor expansion if omitted

        Raises:
            SingularMatrixError: If `data` has no inverse
        """
        self._data = np.array(data, dtype=np.float64)
        if self._data.shape != (4, 4):
            raise ValueError(f"Matrix must be 4x4, got shape {self._data.shape}")
        if inverse is None:
            self._inverse = _invert(self._data)
        else:
            self._inverse = np.asarray(inverse, dtype=np.float64)

    @staticmethod
    def is_invertible(data: Union[Sequence[Sequence[float]], np.ndarray]) -> bool:
        """Check whether raw 4x4 data can be turned into a Matrix."""
        return determinant(np.asarray(data, dtype=np.float64)) != 0.0

    @property
    def data(self) -> np.ndarray:
        """The matrix entries (copy)."""
        return self._data.copy()

    def determinant(self) -> float:
        return determinant(self._data)

    def inverse(self) -> Matrix:
        """Return the inverse matrix (no recomputation)."""
        return Matrix(self._inverse, inverse=self._data)

    def transpose(self) -> Matrix:
        return Matrix(self._data.T, inverse=self._inverse.T)

    def __getitem__(self, index: tuple[int, int]) -> float:
        return float(self._data[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return bool(np.all(np.abs(self._data - other._data) < EPSILON))

    __hash__ = None

    def __mul__(self, other):
        if isinstance(other, Matrix):
            return Matrix(self._data @ other._data, inverse=other._inverse @ self._inverse)
        if isinstance(other, Point3):
            return Point3.from_array(self._data[:3, :3] @ other._data + self._data[:3, 3])
        if isinstance(other, Vec3):
            # Vectors have w=0, so translation does not apply
            return type(other).from_array(self._data[:3, :3] @ other._data)
        return NotImplemented

    def __repr__(self) -> str:
        rows = ", ".join(
            "[" + ", ".join(f"{v:.4f}" for v in row) + "]" for row in self._data
        )
        return f"Matrix([{rows}])"


IDENTITY = Matrix(np.identity(4), inverse=np.identity(4))
