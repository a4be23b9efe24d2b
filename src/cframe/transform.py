"""
Affine coordinate frames (3x4 transforms).

A :class:`Transform` holds a 3x3 rotation/scale block and a translation.
The implicit bottom row ``(0, 0, 0, 1)`` is never stored. Storage is a
private row-major ``[3, 4]`` float64 array; callers read it only through the
basis columns :attr:`Transform.x`, :attr:`Transform.y`, :attr:`Transform.z`
and the translation :attr:`Transform.p`.

Degenerate inputs never raise and never produce NaN where a substitution is
defined:

- Facing along the world up axis uses a fixed fallback basis.
- Inverting a transform whose determinant is exactly zero returns identity.
  Callers that need to detect this must check :meth:`Transform.determinant`
  first.

Nothing is validated or renormalized: non-unit quaternions and
non-orthonormal columns are used as given.

Example:
    >>> from cframe import Transform, Vector3
    >>> camera = Transform.from_position_facing(Vector3(0, 5, 10), Vector3.zero())
    >>> world_point = camera * Vector3(0, 0, -1)  # one unit in front of the camera
    >>> local = camera.inverse() * world_point
"""

from __future__ import annotations

import logging
import math

import numpy as np

from cframe.config import TOLERANCE_CONFIG
from cframe.kernels import transform_points_numba, transform_vectors_numba
from cframe.rotation import (
    _quaternion_to_rotation_matrix_numpy,
    _rotation_matrix_to_quaternion_numpy,
)
from cframe.vector import Vector3

logger = logging.getLogger(__name__)

_IDENTITY = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
    ],
    dtype=np.float64,
)


# ============================================================================
# Shared matrix routines (used by both pure and in-place forms)
# ============================================================================


def _compose(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Return storage of ``a * b``: ``b`` applied first, then ``a``."""
    out = np.empty((3, 4), dtype=np.float64)
    out[:, :3] = a[:, :3] @ b[:, :3]
    out[:, 3] = a[:, :3] @ b[:, 3] + a[:, 3]
    return out


def _offset(m: np.ndarray, v: Vector3, sign: float) -> np.ndarray:
    out = m.copy()
    out[0, 3] += sign * v.x
    out[1, 3] += sign * v.y
    out[2, 3] += sign * v.z
    return out


def _determinant(m: np.ndarray) -> float:
    a, b, c = float(m[0, 0]), float(m[0, 1]), float(m[0, 2])
    d, e, f = float(m[1, 0]), float(m[1, 1]), float(m[1, 2])
    g, h, i = float(m[2, 0]), float(m[2, 1]), float(m[2, 2])
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def _rotate_axis_angle(n: Vector3, v: Vector3, theta: float) -> Vector3:
    """Rodrigues' rotation of ``v`` about unit axis ``n`` by ``theta`` radians."""
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return v * cos_t + n * (v.dot(n) * (1.0 - cos_t)) + n.cross(v) * sin_t


class Transform:
    """3x4 affine transform: rotation/scale block plus translation.

    ``A * B`` composes (``B`` applied first), ``A * v`` maps a point,
    ``A + v`` / ``A - v`` offset the translation. ``Transform()`` is the
    identity.
    """

    __slots__ = ("_m",)

    def __init__(self) -> None:
        self._m = _IDENTITY.copy()

    @classmethod
    def _wrap(cls, m: np.ndarray) -> Transform:
        """Adopt ``m`` as storage without copying."""
        t = cls.__new__(cls)
        t._m = m
        return t

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls) -> Transform:
        return cls()

    @classmethod
    def from_components(
        cls,
        m11: float,
        m12: float,
        m13: float,
        m14: float,
        m21: float,
        m22: float,
        m23: float,
        m24: float,
        m31: float,
        m32: float,
        m33: float,
        m34: float,
    ) -> Transform:
        """Create a transform from its twelve scalars, row by row.

        ``m14, m24, m34`` are the translation; the rest is the 3x3 block.
        Values are stored as given.
        """
        return cls._wrap(
            np.array(
                [
                    [m11, m12, m13, m14],
                    [m21, m22, m23, m24],
                    [m31, m32, m33, m34],
                ],
                dtype=np.float64,
            )
        )

    @classmethod
    def from_columns(cls, x: Vector3, y: Vector3, z: Vector3, p: Vector3) -> Transform:
        """Assemble a transform from basis columns and a position.

        The columns are not orthonormalized.
        """
        return cls.from_components(
            x.x, y.x, z.x, p.x,
            x.y, y.y, z.y, p.y,
            x.z, y.z, z.z, p.z,
        )  # fmt: skip

    @classmethod
    def from_position(cls, p: Vector3) -> Transform:
        m = _IDENTITY.copy()
        m[:, 3] = (p.x, p.y, p.z)
        return cls._wrap(m)

    @classmethod
    def from_position_facing(cls, from_: Vector3, to: Vector3) -> Transform:
        """Create a frame at ``from_`` whose forward axis (-z) faces ``to``.

        The basis is ``z = normalized(from_ - to)``,
        ``x = normalized(up x z)``, ``y = z x x``.

        When the look direction is parallel to world up the cross product
        vanishes and a fixed right-handed basis is used instead:

        - looking up (``z.y < 0``): x = right, y = backward, z = down
        - looking down, or ``from_ == to``: x = right, y = forward, z = up

        :param from_: Frame position
        :param to: Point to face
        :returns: New Transform with translation ``from_``
        """
        z = (from_ - to).normalized()
        x = Vector3.up().cross(z).normalized()
        y = z.cross(x)
        if x.magnitude() == 0.0:
            logger.debug("[Transform] Facing direction parallel to up axis, using fallback basis")
            if z.y < 0.0:
                x, y, z = Vector3.right(), Vector3.backward(), Vector3.down()
            else:
                x, y, z = Vector3.right(), Vector3.forward(), Vector3.up()
        return cls.from_columns(x, y, z, from_)

    @classmethod
    def from_position_quaternion(
        cls, p: Vector3, i: float, j: float, k: float, w: float
    ) -> Transform:
        """Create a transform from a position and a unit quaternion.

        The quaternion is assumed to be unit length and is not renormalized.

        :param p: Translation
        :param i: Quaternion x component
        :param j: Quaternion y component
        :param k: Quaternion z component
        :param w: Quaternion scalar component
        :returns: New Transform
        """
        q = np.array([i, j, k, w], dtype=np.float64)
        m = np.empty((3, 4), dtype=np.float64)
        m[:, :3] = _quaternion_to_rotation_matrix_numpy(q)
        m[:, 3] = (p.x, p.y, p.z)
        return cls._wrap(m)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, theta: float) -> Transform:
        """Create a pure rotation of ``theta`` radians about ``axis``.

        Positive angles rotate counter-clockwise when looking down the axis
        towards the origin, e.g. ``right`` about ``up`` by pi/2 gives
        ``forward``.

        A zero-length axis normalizes to the zero vector, which leaves
        ``cos(theta) * identity``: a degenerate non-rotation.
        """
        n = axis.normalized()
        x = _rotate_axis_angle(n, Vector3.right(), theta)
        y = _rotate_axis_angle(n, Vector3.up(), theta)
        z = _rotate_axis_angle(n, Vector3.backward(), theta)
        return cls.from_columns(x, y, z, Vector3.zero())

    @classmethod
    def from_position_axis_angle(cls, p: Vector3, axis: Vector3, theta: float) -> Transform:
        rotation = cls.from_axis_angle(axis, theta)
        rotation._m[:, 3] = (p.x, p.y, p.z)
        return rotation

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> Transform:
        """Create a transform from a row-major 3x4 or 4x4 matrix.

        The bottom row of a 4x4 input is ignored.

        :param matrix: Array-like of shape [3, 4] or [4, 4]
        :returns: New Transform (input is copied)
        :raises ValueError: If the shape is not [3, 4] or [4, 4]
        """
        m = np.array(matrix, dtype=np.float64)
        if m.shape not in ((3, 4), (4, 4)):
            raise ValueError(f"Expected a 3x4 or 4x4 matrix, got shape {m.shape}")
        return cls._wrap(np.ascontiguousarray(m[:3, :]))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def x(self) -> Vector3:
        """Right basis column."""
        m = self._m
        return Vector3(m[0, 0], m[1, 0], m[2, 0])

    @property
    def y(self) -> Vector3:
        """Up basis column."""
        m = self._m
        return Vector3(m[0, 1], m[1, 1], m[2, 1])

    @property
    def z(self) -> Vector3:
        """Backward basis column."""
        m = self._m
        return Vector3(m[0, 2], m[1, 2], m[2, 2])

    @property
    def p(self) -> Vector3:
        """Translation."""
        m = self._m
        return Vector3(m[0, 3], m[1, 3], m[2, 3])

    position = p
    right_vector = x
    up_vector = y

    @property
    def look_vector(self) -> Vector3:
        """Forward direction, the negated z column."""
        return -self.z

    def components(self) -> tuple[float, ...]:
        """Return the twelve scalars in ``from_components`` order."""
        return tuple(float(v) for v in self._m.reshape(-1))

    # ------------------------------------------------------------------
    # Translation offset
    # ------------------------------------------------------------------

    def add(self, v: Vector3) -> Transform:
        return Transform._wrap(_offset(self._m, v, 1.0))

    def subtract(self, v: Vector3) -> Transform:
        return Transform._wrap(_offset(self._m, v, -1.0))

    def add_assign(self, v: Vector3) -> Transform:
        self._m = _offset(self._m, v, 1.0)
        return self

    def subtract_assign(self, v: Vector3) -> Transform:
        self._m = _offset(self._m, v, -1.0)
        return self

    # ------------------------------------------------------------------
    # Composition and inversion
    # ------------------------------------------------------------------

    def multiply(self, other: Transform) -> Transform:
        """Compose transforms: ``other`` applied FIRST, then ``self``.

        :param other: Transform applied before self
        :returns: Composed transform
        """
        return Transform._wrap(_compose(self._m, other._m))

    def multiply_assign(self, other: Transform) -> Transform:
        self._m = _compose(self._m, other._m)
        return self

    def determinant(self) -> float:
        """Determinant of the 3x3 rotation/scale block."""
        return _determinant(self._m)

    def inverse(self) -> Transform:
        """Affine inverse.

        A transform whose determinant is exactly zero has no inverse; the
        identity is returned instead of raising. Check :meth:`determinant`
        beforehand when that case must be detected.

        :returns: New Transform ``T`` with ``self * T == identity``
        """
        det = self.determinant()
        if det == 0.0:
            logger.debug("[Transform] Singular rotation block, inverse falls back to identity")
            return Transform()

        m = self._m
        a, b, c = float(m[0, 0]), float(m[0, 1]), float(m[0, 2])
        d, e, f = float(m[1, 0]), float(m[1, 1]), float(m[1, 2])
        g, h, i = float(m[2, 0]), float(m[2, 1]), float(m[2, 2])
        inv_det = 1.0 / det

        out = np.empty((3, 4), dtype=np.float64)
        # Adjugate (transposed cofactors) scaled by 1/det
        out[0, 0] = (e * i - f * h) * inv_det
        out[0, 1] = (c * h - b * i) * inv_det
        out[0, 2] = (b * f - c * e) * inv_det
        out[1, 0] = (f * g - d * i) * inv_det
        out[1, 1] = (a * i - c * g) * inv_det
        out[1, 2] = (c * d - a * f) * inv_det
        out[2, 0] = (d * h - e * g) * inv_det
        out[2, 1] = (b * g - a * h) * inv_det
        out[2, 2] = (a * e - b * d) * inv_det
        out[:, 3] = -(out[:, :3] @ m[:, 3])
        return Transform._wrap(out)

    # ------------------------------------------------------------------
    # Applying to vectors
    # ------------------------------------------------------------------

    def point_to_world_space(self, v: Vector3) -> Vector3:
        """Map a point from this frame's local space: ``R v + p``."""
        m = self._m
        return Vector3(
            m[0, 0] * v.x + m[0, 1] * v.y + m[0, 2] * v.z + m[0, 3],
            m[1, 0] * v.x + m[1, 1] * v.y + m[1, 2] * v.z + m[1, 3],
            m[2, 0] * v.x + m[2, 1] * v.y + m[2, 2] * v.z + m[2, 3],
        )

    def vector_to_world_space(self, v: Vector3) -> Vector3:
        """Map a direction from local space: ``R v`` (translation ignored)."""
        m = self._m
        return Vector3(
            m[0, 0] * v.x + m[0, 1] * v.y + m[0, 2] * v.z,
            m[1, 0] * v.x + m[1, 1] * v.y + m[1, 2] * v.z,
            m[2, 0] * v.x + m[2, 1] * v.y + m[2, 2] * v.z,
        )

    def point_to_object_space(self, v: Vector3) -> Vector3:
        return self.inverse().point_to_world_space(v)

    def vector_to_object_space(self, v: Vector3) -> Vector3:
        return self.inverse().vector_to_world_space(v)

    def _apply_batch(self, arr: np.ndarray, out: np.ndarray | None, kernel) -> np.ndarray:
        points = np.asarray(arr, dtype=np.float64)
        was_1d = points.ndim == 1
        if was_1d:
            points = points[np.newaxis, :]
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"Expected array of shape [N, 3] or [3], got {np.shape(arr)}")
        points = np.ascontiguousarray(points)

        if out is None:
            result = np.empty_like(points)
            kernel(points, self._m, result)
            return result[0] if was_1d else result

        expected = (3,) if was_1d else points.shape
        if out.shape != expected or out.dtype != np.float64:
            raise ValueError(
                f"Output buffer must be float64 with shape {expected}, "
                f"got {out.dtype} {out.shape}"
            )
        kernel(points, self._m, out[np.newaxis, :] if was_1d else out)
        return out

    def transform_points(self, points: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """Apply this transform to an array of points.

        Uses a parallel Numba kernel.

        :param points: Points [N, 3] or a single point [3]
        :param out: Optional pre-allocated float64 output buffer shaped like `points`
        :returns: Transformed points (same as `out` if provided)
        :raises ValueError: If shapes do not match
        """
        return self._apply_batch(points, out, transform_points_numba)

    def transform_vectors(self, vectors: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """Apply only the rotation/scale block to an array of directions.

        :param vectors: Directions [N, 3] or a single direction [3]
        :param out: Optional pre-allocated float64 output buffer shaped like `vectors`
        :returns: Transformed directions (same as `out` if provided)
        :raises ValueError: If shapes do not match
        """
        return self._apply_batch(vectors, out, transform_vectors_numba)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_matrix(self) -> np.ndarray:
        """Convert to a row-major 4x4 homogeneous matrix.

        :returns: 4x4 float64 numpy array with bottom row (0, 0, 0, 1)
        """
        M = np.eye(4, dtype=np.float64)
        M[:3, :] = self._m
        return M

    def to_array(self) -> np.ndarray:
        """Flatten the 4x4 homogeneous matrix in column-major order.

        The layout is ``x.x, x.y, x.z, 0, y.x, y.y, y.z, 0, z.x, z.y, z.z, 0,
        p.x, p.y, p.z, 1``, ready for a column-major matrix uniform.

        :returns: float64 numpy array of shape [16]
        """
        return self.to_matrix().flatten(order="F")

    def to_quaternion(self) -> tuple[float, float, float, float]:
        """Extract the rotation as a unit quaternion ``(i, j, k, w)``.

        Only meaningful when the 3x3 block is a pure rotation.
        """
        q = _rotation_matrix_to_quaternion_numpy(self._m[:, :3])
        return float(q[0]), float(q[1]), float(q[2]), float(q[3])

    # ------------------------------------------------------------------
    # Comparison and copying
    # ------------------------------------------------------------------

    def copy(self) -> Transform:
        return Transform._wrap(self._m.copy())

    def is_close(self, other: Transform, tolerance: float | None = None) -> bool:
        """Check all twelve components agree within an absolute tolerance.

        :param other: Transform to compare against
        :param tolerance: Absolute tolerance, defaults to TOLERANCE_CONFIG.epsilon
        :returns: True if every component differs by at most ``tolerance``
        """
        tol = TOLERANCE_CONFIG.resolve(tolerance)
        return bool(np.all(np.abs(self._m - other._m) <= tol))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None

    def __repr__(self) -> str:
        values = ", ".join(repr(v) for v in self.components())
        return f"Transform({values})"

    def __str__(self) -> str:
        return f"Transform(x={self.x}, y={self.y}, z={self.z}, p={self.p})"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __mul__(self, other: Transform | Vector3) -> Transform | Vector3:
        if isinstance(other, Transform):
            return self.multiply(other)
        if isinstance(other, Vector3):
            return self.point_to_world_space(other)
        return NotImplemented

    def __imul__(self, other: Transform) -> Transform:
        if not isinstance(other, Transform):
            return NotImplemented
        return self.multiply_assign(other)

    def __add__(self, other: Vector3) -> Transform:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Vector3) -> Transform:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract(other)

    def __iadd__(self, other: Vector3) -> Transform:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add_assign(other)

    def __isub__(self, other: Vector3) -> Transform:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract_assign(other)


# Coordinate-frame alias
CFrame = Transform
