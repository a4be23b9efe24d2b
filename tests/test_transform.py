"""Tests for Transform (CFrame).

Tests the composition semantics and degenerate-case policies:
- Construction from components, columns, facing, quaternion, axis-angle
- Composition (other applied first), associativity, identity
- Inverse including the singular -> identity substitution
- Column-major export
"""

import math

import numpy as np
import pytest

from cframe import CFrame, Transform, Vector3, axis_angle_to_quaternion

S = math.sqrt(0.5)


def random_transform(rng: np.random.Generator, scale_range=(0.5, 2.0)) -> Transform:
    """Create a well-conditioned random transform: rotation * scale + translation."""
    q = rng.standard_normal(4)
    q /= np.linalg.norm(q)
    p = Vector3(*rng.uniform(-10, 10, 3))
    rotation = Transform.from_position_quaternion(p, *q)
    sx, sy, sz = rng.uniform(*scale_range, 3)
    scale = Transform.from_components(sx, 0, 0, 0, 0, sy, 0, 0, 0, 0, sz, 0)
    return rotation * scale


def assert_orthonormal(t: Transform):
    """Assert the basis columns are unit length, orthogonal and right-handed."""
    x, y, z = t.x, t.y, t.z
    for axis in (x, y, z):
        assert abs(axis.magnitude() - 1.0) < 1e-12
    assert abs(x.dot(y)) < 1e-12
    assert abs(y.dot(z)) < 1e-12
    assert abs(z.dot(x)) < 1e-12
    assert abs(t.determinant() - 1.0) < 1e-12


class TestConstruction:
    """Test factory functions and column accessors."""

    def test_identity(self):
        t = Transform.identity()
        assert t.x == Vector3.right()
        assert t.y == Vector3.up()
        assert t.z == Vector3.backward()
        assert t.p == Vector3.zero()
        assert Transform() == t

    def test_from_components_layout(self):
        """Test components are read row by row, column 4 is translation."""
        t = Transform.from_components(1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)
        assert t.x == Vector3(1, 5, 9)
        assert t.y == Vector3(2, 6, 10)
        assert t.z == Vector3(3, 7, 11)
        assert t.p == Vector3(4, 8, 12)
        assert t.components() == tuple(float(v) for v in range(1, 13))

    def test_from_columns(self):
        """Test columns are stored without orthonormalization."""
        x, y, z, p = Vector3(2, 0, 0), Vector3(1, 1, 0), Vector3(0, 0, 3), Vector3(4, 5, 6)
        t = Transform.from_columns(x, y, z, p)
        assert t.x == x
        assert t.y == y
        assert t.z == z
        assert t.p == p

    def test_from_position(self):
        t = Transform.from_position(Vector3(1, 2, 3))
        assert t.p == Vector3(1, 2, 3)
        assert t.x == Vector3.right()
        assert t.y == Vector3.up()
        assert t.z == Vector3.backward()

    def test_accessor_aliases(self):
        t = Transform.from_components(1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)
        assert t.position == t.p
        assert t.right_vector == t.x
        assert t.up_vector == t.y
        assert t.look_vector == -t.z

    def test_accessors_return_copies(self):
        """Test mutating an accessor result does not change the transform."""
        t = Transform.from_position(Vector3(1, 2, 3))
        p = t.p
        p += Vector3(10, 10, 10)
        assert t.p == Vector3(1, 2, 3)

    def test_cframe_alias(self):
        assert CFrame is Transform


class TestFromPositionFacing:
    """Test look-direction frames and the parallel-to-up fallback."""

    def test_facing_forward_is_identity_rotation(self):
        t = Transform.from_position_facing(Vector3(1, 2, 3), Vector3(1, 2, -7))
        assert t.x == Vector3.right()
        assert t.y == Vector3.up()
        assert t.z == Vector3.backward()
        assert t.p == Vector3(1, 2, 3)

    def test_look_vector_points_at_target(self):
        origin = Vector3(1, 2, 3)
        target = Vector3(4, -1, 7)
        t = Transform.from_position_facing(origin, target)
        assert t.look_vector.is_close((target - origin).normalized(), 1e-12)
        assert t.p == origin
        assert_orthonormal(t)

    def test_right_axis_is_horizontal(self):
        t = Transform.from_position_facing(Vector3(0, 0, 0), Vector3(3, 2, 1))
        assert abs(t.x.y) < 1e-12
        assert t.y.y > 0

    def test_facing_straight_down_fallback(self):
        """Test looking down the -Y axis uses the fixed down-facing basis."""
        t = Transform.from_position_facing(Vector3(0, 10, 0), Vector3(0, 0, 0))
        assert t.x == Vector3.right()
        assert t.y == Vector3.forward()
        assert t.z == Vector3.up()
        assert t.look_vector == Vector3.down()
        assert t.p == Vector3(0, 10, 0)
        assert_orthonormal(t)

    def test_facing_straight_up_fallback(self):
        """Test looking up the +Y axis uses the fixed up-facing basis."""
        t = Transform.from_position_facing(Vector3(0, 0, 0), Vector3(0, 3, 0))
        assert t.x == Vector3.right()
        assert t.y == Vector3.backward()
        assert t.z == Vector3.down()
        assert t.look_vector == Vector3.up()
        assert_orthonormal(t)

    def test_extreme_coordinates_keep_regular_basis(self):
        """Test huge and tiny separations still take the regular horizontal basis."""
        t = Transform.from_position_facing(Vector3(0, 0, 1e200), Vector3(0, 0, -1e200))
        assert t.x == Vector3.right()
        assert t.y == Vector3.up()
        assert t.z == Vector3.backward()
        assert t.p == Vector3(0, 0, 1e200)

        t = Transform.from_position_facing(Vector3(1e-170, 0, 0), Vector3.zero())
        assert t.x == Vector3(0, 0, -1)
        assert t.y == Vector3.up()
        assert t.z == Vector3.right()

    def test_fallback_has_no_nan(self):
        t = Transform.from_position_facing(Vector3(5, 5, 5), Vector3(5, -5, 5))
        assert not np.isnan(t.to_array()).any()

    def test_coincident_points(self):
        """Test from == to is deterministic and finite."""
        t = Transform.from_position_facing(Vector3(1, 1, 1), Vector3(1, 1, 1))
        assert t.x == Vector3.right()
        assert t.y == Vector3.forward()
        assert t.z == Vector3.up()
        assert t.p == Vector3(1, 1, 1)


class TestFromPositionQuaternion:
    """Test quaternion to rotation-block conversion."""

    def test_identity_quaternion(self):
        t = Transform.from_position_quaternion(Vector3(1, 2, 3), 0, 0, 0, 1)
        assert t == Transform.from_position(Vector3(1, 2, 3))

    def test_90_degrees_about_z(self):
        """Test right -> up and up -> left for +90 deg about Z."""
        t = Transform.from_position_quaternion(Vector3(4, 5, 6), 0, 0, S, S)
        assert t.x.is_close(Vector3.up(), 1e-12)
        assert t.y.is_close(Vector3.left(), 1e-12)
        assert t.z.is_close(Vector3.backward(), 1e-12)
        assert t.p == Vector3(4, 5, 6)

    def test_90_degrees_about_x(self):
        """Test up -> backward for +90 deg about X."""
        t = Transform.from_position_quaternion(Vector3.zero(), S, 0, 0, S)
        assert t.x.is_close(Vector3.right(), 1e-12)
        assert t.y.is_close(Vector3.backward(), 1e-12)
        assert t.z.is_close(Vector3.down(), 1e-12)

    def test_90_degrees_about_y(self):
        """Test right -> forward for +90 deg about Y."""
        t = Transform.from_position_quaternion(Vector3.zero(), 0, S, 0, S)
        assert t.x.is_close(Vector3.forward(), 1e-12)
        assert t.y.is_close(Vector3.up(), 1e-12)
        assert t.z.is_close(Vector3.right(), 1e-12)

    def test_not_renormalized(self):
        """Test a non-unit quaternion is used as given."""
        t = Transform.from_position_quaternion(Vector3.zero(), 0, 0, 1, 1)
        assert t.x == Vector3(-1, 2, 0)
        assert t.y == Vector3(-2, -1, 0)

    def test_to_quaternion_round_trip(self):
        q = axis_angle_to_quaternion([1, -2, 0.5], 2.1)
        t = Transform.from_position_quaternion(Vector3.zero(), *q)
        np.testing.assert_allclose(t.to_quaternion(), q, atol=1e-12)


class TestFromAxisAngle:
    """Test Rodrigues rotation construction."""

    def test_zero_angle_is_identity(self):
        for axis in (Vector3(1, 2, 3), Vector3.up(), Vector3(-0.1, 0, 5)):
            assert Transform.from_axis_angle(axis, 0.0).is_close(Transform.identity())

    def test_right_about_up(self):
        """Test rotating (1, 0, 0) by +90 deg about +Y gives (0, 0, -1)."""
        t = Transform.from_axis_angle(Vector3.up(), math.pi / 2)
        assert t.x.is_close(Vector3(0, 0, -1), 1e-12)
        assert (t * Vector3.right()).is_close(Vector3.forward(), 1e-12)
        assert t.p == Vector3.zero()

    def test_axis_is_normalized(self):
        a = Transform.from_axis_angle(Vector3(0, 5, 0), 0.3)
        b = Transform.from_axis_angle(Vector3(0, 1, 0), 0.3)
        assert a.is_close(b, 1e-12)

    def test_matches_quaternion(self):
        axis = Vector3(1, 2, 3)
        theta = 0.7
        q = axis_angle_to_quaternion(axis.to_array(), theta)
        a = Transform.from_axis_angle(axis, theta)
        b = Transform.from_position_quaternion(Vector3.zero(), *q)
        assert a.is_close(b, 1e-12)
        assert_orthonormal(a)

    def test_zero_axis_is_degenerate(self):
        """Test a zero axis yields cos(theta) * identity, not a rotation."""
        t = Transform.from_axis_angle(Vector3.zero(), math.pi / 3)
        assert t.x.is_close(Vector3(0.5, 0, 0), 1e-12)
        assert t.y.is_close(Vector3(0, 0.5, 0), 1e-12)
        assert t.z.is_close(Vector3(0, 0, 0.5), 1e-12)
        assert Transform.from_axis_angle(Vector3.zero(), 0.0) == Transform.identity()

    def test_with_position(self):
        t = Transform.from_position_axis_angle(Vector3(1, 2, 3), Vector3.up(), math.pi / 2)
        assert t.p == Vector3(1, 2, 3)
        assert t.x.is_close(Vector3.forward(), 1e-12)


class TestFromMatrix:
    """Test conversion to and from numpy matrices."""

    def test_round_trip_4x4(self):
        t = Transform.from_components(1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)
        M = t.to_matrix()
        assert M.shape == (4, 4)
        np.testing.assert_array_equal(M[3], [0, 0, 0, 1])
        assert Transform.from_matrix(M) == t

    def test_3x4(self):
        m = np.arange(12, dtype=np.float64).reshape(3, 4)
        t = Transform.from_matrix(m)
        assert t.p == Vector3(3, 7, 11)

    def test_input_is_copied(self):
        m = np.eye(4)
        t = Transform.from_matrix(m)
        m[0, 3] = 99.0
        assert t.p == Vector3.zero()

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="3x4 or 4x4"):
            Transform.from_matrix(np.eye(3))


class TestTranslationOffset:
    """Test add/subtract of a vector."""

    def test_add_subtract(self):
        t = Transform.from_axis_angle(Vector3.up(), 0.5)
        moved = t + Vector3(1, 2, 3)
        assert moved.p == Vector3(1, 2, 3)
        assert moved.x == t.x
        assert (moved - Vector3(1, 2, 3)).p == Vector3.zero()
        assert t.add(Vector3(1, 0, 0)) == t + Vector3(1, 0, 0)
        assert t.subtract(Vector3(1, 0, 0)) == t - Vector3(1, 0, 0)

    def test_pure_leaves_original(self):
        t = Transform.identity()
        _ = t + Vector3(1, 1, 1)
        assert t == Transform.identity()

    def test_assign_mutates_translation_only(self):
        t = Transform.from_axis_angle(Vector3.right(), 1.0)
        x_before = t.x
        result = t.add_assign(Vector3(1, 2, 3))
        assert result is t
        assert t.p == Vector3(1, 2, 3)
        assert t.x == x_before
        t.subtract_assign(Vector3(1, 0, 0))
        assert t.p == Vector3(0, 2, 3)

    def test_augmented_operators(self):
        t = Transform.identity()
        original = t
        t += Vector3(5, 0, 0)
        t -= Vector3(0, 0, 2)
        assert t is original
        assert t.p == Vector3(5, 0, -2)


class TestComposition:
    """Test multiply: other applied first, then self."""

    def test_order_of_application(self):
        translate = Transform.from_position(Vector3(1, 0, 0))
        rotate = Transform.from_axis_angle(Vector3.up(), math.pi / 2)

        # Rotate first, then translate
        a = translate * rotate
        assert a.p == Vector3(1, 0, 0)
        assert a.x.is_close(rotate.x)

        # Translate first, then rotate the translation
        b = rotate * translate
        assert b.p.is_close(Vector3(0, 0, -1), 1e-12)

    def test_matches_sequential_point_mapping(self):
        rng = np.random.default_rng(0)
        a = random_transform(rng)
        b = random_transform(rng)
        v = Vector3(0.3, -1.2, 2.5)
        assert ((a * b) * v).is_close(a * (b * v), 1e-9)

    def test_associativity(self):
        rng = np.random.default_rng(42)
        for _ in range(20):
            a, b, c = random_transform(rng), random_transform(rng), random_transform(rng)
            assert ((a * b) * c).is_close(a * (b * c), 1e-9)

    def test_identity_two_sided(self):
        rng = np.random.default_rng(7)
        for _ in range(10):
            a = random_transform(rng)
            assert (Transform.identity() * a).is_close(a, 1e-12)
            assert (a * Transform.identity()).is_close(a, 1e-12)

    def test_multiply_method_matches_operator(self):
        rng = np.random.default_rng(3)
        a, b = random_transform(rng), random_transform(rng)
        assert a.multiply(b) == a * b

    def test_multiply_assign(self):
        rng = np.random.default_rng(5)
        a, b = random_transform(rng), random_transform(rng)
        expected = a * b
        target = a.copy()
        result = target.multiply_assign(b)
        assert result is target
        assert target == expected

        target = a.copy()
        target *= b
        assert target == expected

    def test_self_multiply_assign(self):
        """Test in-place composition with itself reads before writing."""
        t = Transform.from_position_axis_angle(Vector3(1, 0, 0), Vector3.up(), math.pi / 2)
        expected = t * t
        t *= t
        assert t == expected

    def test_quaternion_composition(self):
        """Test composing rotations matches the Hamilton product."""
        from cframe import quaternion_multiply

        q1 = axis_angle_to_quaternion([0, 0, 1], 0.4)
        q2 = axis_angle_to_quaternion([1, 1, 0], 1.1)
        a = Transform.from_position_quaternion(Vector3.zero(), *q1)
        b = Transform.from_position_quaternion(Vector3.zero(), *q2)
        ab = Transform.from_position_quaternion(Vector3.zero(), *quaternion_multiply(q1, q2))
        assert (a * b).is_close(ab, 1e-12)

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            _ = Transform.identity() * 2.0


class TestDeterminantAndInverse:
    """Test determinant and affine inverse."""

    def test_determinant(self):
        assert Transform.identity().determinant() == 1.0
        scale = Transform.from_components(2, 0, 0, 5, 0, 3, 0, 5, 0, 0, 4, 5)
        assert scale.determinant() == 24.0
        t = Transform.from_components(1, 2, 3, 0, 0, 1, 4, 0, 5, 6, 0, 0)
        assert t.determinant() == 1.0

    def test_rotation_determinant_is_one(self):
        t = Transform.from_axis_angle(Vector3(1, 2, 3), 1.3)
        assert abs(t.determinant() - 1.0) < 1e-12

    def test_known_inverse(self):
        """Test the adjugate inverse against a hand-computed integer result."""
        t = Transform.from_components(1, 2, 3, 1, 0, 1, 4, 2, 5, 6, 0, 3)
        expected = Transform.from_components(-24, 18, 5, -27, 20, -15, -4, 22, -5, 4, 1, -6)
        assert t.inverse() == expected

    def test_inverse_composes_to_identity(self):
        rng = np.random.default_rng(11)
        for _ in range(20):
            a = random_transform(rng)
            assert (a * a.inverse()).is_close(Transform.identity(), 1e-9)
            assert (a.inverse() * a).is_close(Transform.identity(), 1e-9)

    def test_singular_returns_identity(self):
        """Test a zero determinant inverts to exactly identity."""
        flat = Transform.from_components(1, 2, 3, 4, 0, 0, 0, 5, 7, 8, 9, 6)
        assert flat.determinant() == 0.0
        assert flat.inverse() == Transform.identity()

        zero = Transform.from_components(0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0, 3)
        assert zero.inverse() == Transform.identity()

    def test_singular_is_logged(self, caplog):
        with caplog.at_level("DEBUG", logger="cframe.transform"):
            Transform.from_components(0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0).inverse()
        assert "Singular" in caplog.text

    def test_inverse_leaves_original(self):
        t = Transform.from_position(Vector3(1, 2, 3))
        inv = t.inverse()
        assert inv.p == Vector3(-1, -2, -3)
        assert t.p == Vector3(1, 2, 3)


class TestApplyToVectors:
    """Test mapping single vectors and arrays."""

    def test_point_and_vector(self):
        t = Transform.from_position_axis_angle(Vector3(10, 0, 0), Vector3.up(), math.pi / 2)
        assert t.point_to_world_space(Vector3.right()).is_close(Vector3(10, 0, -1), 1e-12)
        assert t.vector_to_world_space(Vector3.right()).is_close(Vector3(0, 0, -1), 1e-12)

    def test_object_space_round_trip(self):
        rng = np.random.default_rng(13)
        t = random_transform(rng)
        v = Vector3(1, -2, 3)
        assert t.point_to_object_space(t.point_to_world_space(v)).is_close(v, 1e-9)
        assert t.vector_to_object_space(t.vector_to_world_space(v)).is_close(v, 1e-9)

    def test_transform_points_matches_single(self):
        rng = np.random.default_rng(21)
        t = random_transform(rng)
        points = rng.uniform(-5, 5, (100, 3))
        result = t.transform_points(points)
        assert result.shape == (100, 3)
        for i in (0, 37, 99):
            expected = t.point_to_world_space(Vector3.from_array(points[i]))
            np.testing.assert_allclose(result[i], expected.to_array(), atol=1e-12)

    def test_transform_points_matches_matrix(self):
        rng = np.random.default_rng(22)
        t = random_transform(rng)
        points = rng.uniform(-5, 5, (50, 3))
        M = t.to_matrix()
        expected = points @ M[:3, :3].T + M[:3, 3]
        np.testing.assert_allclose(t.transform_points(points), expected, atol=1e-12)

    def test_transform_vectors_ignores_translation(self):
        t = Transform.from_position(Vector3(100, 100, 100))
        vectors = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 3.0]])
        np.testing.assert_array_equal(t.transform_vectors(vectors), vectors)

    def test_single_point(self):
        t = Transform.from_position(Vector3(1, 2, 3))
        result = t.transform_points([1.0, 1.0, 1.0])
        assert result.shape == (3,)
        np.testing.assert_array_equal(result, [2.0, 3.0, 4.0])

    def test_single_point_output_buffer(self):
        """Test a [3] point accepts a [3] output buffer and fills it."""
        t = Transform.from_position(Vector3(1, 2, 3))
        out = np.empty(3)
        result = t.transform_points([1.0, 1.0, 1.0], out=out)
        assert result is out
        np.testing.assert_array_equal(out, [2.0, 3.0, 4.0])

        result = t.transform_vectors([1.0, 1.0, 1.0], out=out)
        assert result is out
        np.testing.assert_array_equal(out, [1.0, 1.0, 1.0])

        with pytest.raises(ValueError, match="Output buffer"):
            t.transform_points([1.0, 1.0, 1.0], out=np.empty((1, 3)))

    def test_output_buffer(self):
        t = Transform.from_position(Vector3(1, 0, 0))
        points = np.zeros((4, 3))
        out = np.empty((4, 3))
        result = t.transform_points(points, out=out)
        assert result is out
        np.testing.assert_array_equal(out[:, 0], 1.0)

    def test_in_place_buffer(self):
        t = Transform.from_axis_angle(Vector3.up(), math.pi / 2)
        points = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        t.transform_points(points, out=points)
        np.testing.assert_allclose(points, [[0, 0, -1], [1, 0, 0]], atol=1e-12)

    def test_bad_shapes(self):
        t = Transform.identity()
        with pytest.raises(ValueError, match=r"\[N, 3\]"):
            t.transform_points(np.zeros((5, 2)))
        with pytest.raises(ValueError, match="Output buffer"):
            t.transform_points(np.zeros((5, 3)), out=np.zeros((4, 3)))


class TestExport:
    """Test flat array export and value semantics."""

    def test_to_array_column_major(self):
        t = Transform.from_components(1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)
        arr = t.to_array()
        assert arr.shape == (16,)
        assert arr.dtype == np.float64
        np.testing.assert_array_equal(
            arr, [1, 5, 9, 0, 2, 6, 10, 0, 3, 7, 11, 0, 4, 8, 12, 1]
        )

    def test_to_array_identity(self):
        np.testing.assert_array_equal(Transform.identity().to_array(), np.eye(4).reshape(-1))

    def test_copy_is_independent(self):
        t = Transform.identity()
        c = t.copy()
        c += Vector3(1, 0, 0)
        assert t == Transform.identity()

    def test_equality(self):
        a = Transform.from_position(Vector3(1, 2, 3))
        assert a == Transform.from_position(Vector3(1, 2, 3))
        assert a != Transform.identity()
        assert a != "not a transform"

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Transform.identity())

    def test_repr(self):
        text = repr(Transform.identity())
        assert text.startswith("Transform(1.0, 0.0, 0.0, 0.0, ")
        assert "p=(0.0, 0.0, 0.0)" in str(Transform.identity())
