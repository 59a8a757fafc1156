"""Tests for Vec3, Point3 and Color."""

import pytest
import math
import numpy as np

from lumenray.vec3 import EPSILON, float_eq, Vec3, Point3, Color, BLACK, WHITE


class TestVec3Creation:
    """Test Vec3 construction."""

    def test_default_constructor(self):
        v = Vec3()
        assert v.x == 0.0
        assert v.y == 0.0
        assert v.z == 0.0

    def test_value_constructor(self):
        v = Vec3(1.0, 2.0, 3.0)
        assert v.x == 1.0
        assert v.y == 2.0
        assert v.z == 3.0

    def test_from_array(self):
        arr = np.array([1.0, 2.0, 3.0])
        v = Vec3.from_array(arr)
        assert v == Vec3(1, 2, 3)

    def test_homogeneous_w(self):
        assert Vec3(4.3, -4.2, 3.1).w == 0
        assert Point3(4.3, -4.2, 3.1).w == 1

    def test_indexing_and_iteration(self):
        v = Vec3(1, 2, 3)
        assert v[0] == 1.0 and v[2] == 3.0
        assert list(v) == [1.0, 2.0, 3.0]


class TestEquality:
    """Equality is tolerant to EPSILON."""

    def test_float_eq(self):
        assert float_eq(1.0, 1.0 + EPSILON / 2)
        assert not float_eq(1.0, 1.0 + EPSILON * 2)

    def test_nearly_equal_vectors(self):
        assert Vec3(1, 2, 3) == Vec3(1.00001, 2, 2.99999)

    def test_different_vectors(self):
        assert Vec3(1, 2, 3) != Vec3(1.001, 2, 3)

    def test_point_is_not_vector(self):
        assert Point3(1, 2, 3) != Vec3(1, 2, 3)

    def test_compare_with_other_type(self):
        assert Vec3(1, 2, 3) != (1, 2, 3)


class TestTypedArithmetic:
    """The result type follows the homogeneous w component."""

    def test_point_plus_vector_is_point(self):
        p = Point3(3, -2, 5) + Vec3(-2, 3, 1)
        assert isinstance(p, Point3)
        assert p == Point3(1, 1, 6)

    def test_point_minus_point_is_vector(self):
        v = Point3(3, 2, 1) - Point3(5, 6, 7)
        assert type(v) is Vec3
        assert v == Vec3(-2, -4, -6)

    def test_point_minus_vector_is_point(self):
        p = Point3(3, 2, 1) - Vec3(5, 6, 7)
        assert isinstance(p, Point3)
        assert p == Point3(-2, -4, -6)

    def test_vector_minus_vector(self):
        assert Vec3(3, 2, 1) - Vec3(5, 6, 7) == Vec3(-2, -4, -6)

    def test_point_plus_point_fails(self):
        with pytest.raises(TypeError):
            Point3(1, 2, 3) + Point3(1, 2, 3)

    def test_vector_minus_point_fails(self):
        with pytest.raises(TypeError):
            Vec3(1, 2, 3) - Point3(1, 2, 3)

    def test_round_trip(self):
        p = Point3(1.5, -2.25, 7)
        q = Point3(-3, 0.125, 2)
        assert (p - q) + q == p

    def test_negation(self):
        assert -Vec3(1, -2, 3) == Vec3(-1, 2, -3)

    def test_scalar_multiply_and_divide(self):
        a = Vec3(1, -2, 3)
        assert a * 3.5 == Vec3(3.5, -7, 10.5)
        assert 0.5 * a == Vec3(0.5, -1, 1.5)
        assert a / 2 == Vec3(0.5, -1, 1.5)


class TestVectorOps:
    """Magnitude, normalization, dot, cross and reflect."""

    @pytest.mark.parametrize("v, expected", [
        (Vec3(1, 0, 0), 1.0),
        (Vec3(0, 0, 1), 1.0),
        (Vec3(1, 2, 3), math.sqrt(14)),
        (Vec3(-1, -2, -3), math.sqrt(14)),
    ])
    def test_magnitude(self, v, expected):
        assert abs(v.magnitude() - expected) < 1e-9

    def test_normalize(self):
        assert Vec3(4, 0, 0).normalize() == Vec3(1, 0, 0)
        n = Vec3(1, 2, 3).normalize()
        assert n == Vec3(1 / math.sqrt(14), 2 / math.sqrt(14), 3 / math.sqrt(14))
        assert abs(n.magnitude() - 1.0) < EPSILON

    def test_normalize_is_idempotent(self):
        n = Vec3(-3.5, 0.25, 12).normalize()
        assert n.normalize() == n

    def test_normalize_zero_vector(self):
        assert Vec3(0, 0, 0).normalize() == Vec3(0, 0, 0)

    def test_dot(self):
        assert Vec3(1, 2, 3).dot(Vec3(2, 3, 4)) == 20.0

    def test_cross(self):
        a = Vec3(1, 2, 3)
        b = Vec3(2, 3, 4)
        assert a.cross(b) == Vec3(-1, 2, -1)
        assert b.cross(a) == Vec3(1, -2, 1)

    def test_reflect_at_45_degrees(self):
        v = Vec3(1, -1, 0)
        assert v.reflect(Vec3(0, 1, 0)) == Vec3(1, 1, 0)

    def test_reflect_off_slanted_surface(self):
        v = Vec3(0, -1, 0)
        n = Vec3(math.sqrt(2) / 2, math.sqrt(2) / 2, 0)
        assert v.reflect(n) == Vec3(1, 0, 0)


class TestColor:
    """Color arithmetic and quantization."""

    def test_channels(self):
        c = Color(-0.5, 0.4, 1.7)
        assert c.r == -0.5
        assert c.g == 0.4
        assert c.b == 1.7

    def test_add_subtract(self):
        c1 = Color(0.9, 0.6, 0.75)
        c2 = Color(0.7, 0.1, 0.25)
        assert c1 + c2 == Color(1.6, 0.7, 1.0)
        assert c1 - c2 == Color(0.2, 0.5, 0.5)
        assert isinstance(c1 - c2, Color)

    def test_scalar_multiply(self):
        assert Color(0.2, 0.3, 0.4) * 2 == Color(0.4, 0.6, 0.8)

    def test_hadamard_product(self):
        c = Color(1, 0.2, 0.4) * Color(0.9, 1, 0.1)
        assert c == Color(0.9, 0.2, 0.04)

    def test_from_rgb255(self):
        assert Color.from_rgb255(255, 0, 51) == Color(1.0, 0.0, 0.2)

    def test_to_rgb_clamps_and_rounds(self):
        assert Color(1.5, 0.5, -0.5).to_rgb() == (255, 128, 0)

    def test_clamp(self):
        assert Color(1.5, 0.5, -0.5).clamp() == Color(1.0, 0.5, 0.0)

    def test_constants(self):
        assert BLACK == Color(0, 0, 0)
        assert WHITE == Color(1, 1, 1)
