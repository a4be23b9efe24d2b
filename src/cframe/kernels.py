"""
Numba-optimized kernels for applying a 3x4 transform to many vectors.

The matrix argument is the row-major ``[3, 4]`` storage of a
:class:`cframe.transform.Transform`: a 3x3 rotation/scale block followed by
the translation column.
"""

from __future__ import annotations

import numpy as np
from numba import njit, prange
from numpy.typing import NDArray


@njit(parallel=True, fastmath=False, cache=True, nogil=True)
def transform_points_numba(
    points: NDArray[np.float64],
    matrix: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Apply rotation and translation to points.

    Args:
        points: Input points [N, 3]
        matrix: Transform storage [3, 4]
        out: Output points [N, 3] (modified in-place, may alias ``points``)
    """
    n = points.shape[0]

    for i in prange(n):
        px = points[i, 0]
        py = points[i, 1]
        pz = points[i, 2]

        out[i, 0] = matrix[0, 0] * px + matrix[0, 1] * py + matrix[0, 2] * pz + matrix[0, 3]
        out[i, 1] = matrix[1, 0] * px + matrix[1, 1] * py + matrix[1, 2] * pz + matrix[1, 3]
        out[i, 2] = matrix[2, 0] * px + matrix[2, 1] * py + matrix[2, 2] * pz + matrix[2, 3]


@njit(parallel=True, fastmath=False, cache=True, nogil=True)
def transform_vectors_numba(
    vectors: NDArray[np.float64],
    matrix: NDArray[np.float64],
    out: NDArray[np.float64],
) -> None:
    """
    Apply only the rotation/scale block to direction vectors.

    Args:
        vectors: Input directions [N, 3]
        matrix: Transform storage [3, 4] (translation column ignored)
        out: Output directions [N, 3] (modified in-place, may alias ``vectors``)
    """
    n = vectors.shape[0]

    for i in prange(n):
        vx = vectors[i, 0]
        vy = vectors[i, 1]
        vz = vectors[i, 2]

        out[i, 0] = matrix[0, 0] * vx + matrix[0, 1] * vy + matrix[0, 2] * vz
        out[i, 1] = matrix[1, 0] * vx + matrix[1, 1] * vy + matrix[1, 2] * vz
        out[i, 2] = matrix[2, 0] * vx + matrix[2, 1] * vy + matrix[2, 2] * vz
