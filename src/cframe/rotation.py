"""Quaternion and rotation-matrix utilities.

NumPy implementations of the rotation conversions used by
:class:`cframe.transform.Transform`. All functions work on float64 arrays.

Quaternion Convention: (i, j, k, w) - scalar last, matching
``Transform.from_position_quaternion(p, i, j, k, w)``.

Rotation matrices act on column vectors (``v' = R @ v``); their columns are
the rotated basis vectors.
"""

from __future__ import annotations

from typing import TypeAlias

import numpy as np

from cframe.types import QuaternionLike, Vector3Like

ArrayLike: TypeAlias = np.ndarray | list | tuple


# ============================================================================
# NumPy Implementation
# ============================================================================


def _quaternion_multiply_numpy(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product ``q1 * q2`` (rotation q2 applied first).

    :param q1: First quaternion [4] (i, j, k, w)
    :param q2: Second quaternion [4] (i, j, k, w)
    :returns: Product quaternion [4]
    """
    x1, y1, z1, w1 = q1[0], q1[1], q1[2], q1[3]
    x2, y2, z2, w2 = q2[0], q2[1], q2[2], q2[3]

    w = w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2
    x = w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2
    y = w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2
    z = w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2

    return np.array([x, y, z, w], dtype=np.float64)


def _quaternion_to_rotation_matrix_numpy(q: np.ndarray) -> np.ndarray:
    """NumPy quaternion to 3x3 rotation matrix.

    The quaternion is NOT normalized: a non-unit input yields a scaled,
    sheared block, exactly as the formula dictates.

    :param q: Quaternion [4] (i, j, k, w)
    :returns: 3x3 rotation matrix
    """
    i, j, k, w = q[0], q[1], q[2], q[3]

    R = np.zeros((3, 3), dtype=np.float64)

    R[0, 0] = 1 - 2 * (j * j + k * k)
    R[0, 1] = 2 * (i * j - k * w)
    R[0, 2] = 2 * (i * k + j * w)

    R[1, 0] = 2 * (i * j + k * w)
    R[1, 1] = 1 - 2 * (i * i + k * k)
    R[1, 2] = 2 * (j * k - i * w)

    R[2, 0] = 2 * (i * k - j * w)
    R[2, 1] = 2 * (j * k + i * w)
    R[2, 2] = 1 - 2 * (i * i + j * j)

    return R


def _rotation_matrix_to_quaternion_numpy(R: np.ndarray) -> np.ndarray:
    """NumPy 3x3 rotation matrix to quaternion.

    Picks the numerically largest pivot (trace or a diagonal element).

    :param R: 3x3 rotation matrix
    :returns: Unit quaternion [4] (i, j, k, w) with w >= 0
    """
    trace = R[0, 0] + R[1, 1] + R[2, 2]

    if trace > 0:
        s = 0.5 / np.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (R[2, 1] - R[1, 2]) * s
        y = (R[0, 2] - R[2, 0]) * s
        z = (R[1, 0] - R[0, 1]) * s
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        w = (R[2, 1] - R[1, 2]) / s
        x = 0.25 * s
        y = (R[0, 1] + R[1, 0]) / s
        z = (R[0, 2] + R[2, 0]) / s
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * np.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        w = (R[0, 2] - R[2, 0]) / s
        x = (R[0, 1] + R[1, 0]) / s
        y = 0.25 * s
        z = (R[1, 2] + R[2, 1]) / s
    else:
        s = 2.0 * np.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        w = (R[1, 0] - R[0, 1]) / s
        x = (R[0, 2] + R[2, 0]) / s
        y = (R[1, 2] + R[2, 1]) / s
        z = 0.25 * s

    q = np.array([x, y, z, w], dtype=np.float64)
    q = q / np.linalg.norm(q)
    # q and -q encode the same rotation; keep the scalar part non-negative
    if q[3] < 0:
        q = -q
    return q


def _axis_angle_to_quaternion_numpy(axis: np.ndarray, angle: float) -> np.ndarray:
    """NumPy axis-angle to quaternion.

    :param axis: Rotation axis [3], any non-zero length
    :param angle: Rotation angle in radians
    :returns: Quaternion [4] (i, j, k, w); identity for a zero axis
    """
    norm = np.linalg.norm(axis)
    if norm == 0.0:
        return np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)

    n = axis / norm
    half_angle = angle / 2
    sin_half = np.sin(half_angle)

    return np.array(
        [n[0] * sin_half, n[1] * sin_half, n[2] * sin_half, np.cos(half_angle)],
        dtype=np.float64,
    )


# ============================================================================
# Public API
# ============================================================================


def _as_quaternion(q: QuaternionLike) -> np.ndarray:
    arr = np.asarray(q, dtype=np.float64).reshape(-1)
    if arr.shape[0] != 4:
        raise ValueError(f"Quaternion must have 4 elements (i, j, k, w), got {arr.shape[0]}")
    return arr


def quaternion_multiply(q1: QuaternionLike, q2: QuaternionLike) -> np.ndarray:
    """Multiply quaternions.

    :param q1: First quaternion [4] (i, j, k, w)
    :param q2: Second quaternion [4] (i, j, k, w)
    :returns: Product quaternion, the rotation ``q2`` followed by ``q1``

    Example:
        >>> q = axis_angle_to_quaternion([0, 0, 1], np.pi / 4)
        >>> quaternion_multiply(q, q)  # 90 deg about Z
    """
    return _quaternion_multiply_numpy(_as_quaternion(q1), _as_quaternion(q2))


def quaternion_to_rotation_matrix(q: QuaternionLike) -> np.ndarray:
    """Convert quaternion to 3x3 rotation matrix (no renormalization)."""
    return _quaternion_to_rotation_matrix_numpy(_as_quaternion(q))


def rotation_matrix_to_quaternion(R: ArrayLike) -> np.ndarray:
    """Convert 3x3 rotation matrix to a unit quaternion (i, j, k, w).

    :raises ValueError: If ``R`` is not 3x3
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"Rotation matrix must be 3x3, got shape {R.shape}")
    return _rotation_matrix_to_quaternion_numpy(R)


def axis_angle_to_quaternion(axis: Vector3Like, angle: float) -> np.ndarray:
    """Convert axis-angle to quaternion.

    :param axis: Rotation axis [3]
    :param angle: Rotation angle in radians
    :returns: Quaternion [4] (i, j, k, w)
    """
    axis_arr = np.asarray(axis, dtype=np.float64).reshape(-1)
    if axis_arr.shape[0] != 3:
        raise ValueError(f"Axis must have 3 elements, got {axis_arr.shape[0]}")
    return _axis_angle_to_quaternion_numpy(axis_arr, float(angle))


def normalize_quaternion(q: QuaternionLike) -> np.ndarray:
    """Normalize quaternion to unit length.

    :param q: Quaternion [4] (i, j, k, w)
    :returns: Normalized quaternion
    """
    q = _as_quaternion(q)
    return q / np.linalg.norm(q)


def quaternion_identity() -> np.ndarray:
    """Return identity quaternion [0, 0, 0, 1]."""
    return np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float64)
