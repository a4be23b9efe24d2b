"""Camera matrices: projection and view construction.

Projection matrices are returned as flat float64 arrays of 16 values in
column-major order (OpenGL-style, right-handed, clip-space z in [-1, 1]),
i.e. element ``[column][row]`` lives at index ``column * 4 + row``.
They do not go through :class:`cframe.transform.Transform` because their
bottom row is not ``(0, 0, 0, 1)``.
"""

from __future__ import annotations

import logging

import numpy as np

from cframe.transform import Transform
from cframe.vector import Vector3

logger = logging.getLogger(__name__)


def perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Build a perspective projection matrix.

    :param fov: Vertical field of view in radians
    :param aspect: Viewport width / height
    :param near: Distance to the near clip plane
    :param far: Distance to the far clip plane
    :returns: float64 numpy array [16], column-major

    Example:
        >>> import math
        >>> m = perspective(math.radians(90.0), 1.0, 0.1, 100.0)
        >>> float(m[11])  # [2][3]
        -1.0
    """
    # Zero fov or near == far yield IEEE infinities, not exceptions
    with np.errstate(divide="ignore", invalid="ignore"):
        f = 1.0 / np.tan(np.float64(fov) / 2.0)
        depth = np.float64(near) - np.float64(far)

        M = np.zeros((4, 4), dtype=np.float64)
        M[0, 0] = f / aspect
        M[1, 1] = f
        M[2, 2] = (far + near) / depth
        M[2, 3] = 2.0 * far * near / depth
        M[3, 2] = -1.0

    return M.flatten(order="F")


def orthographic(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """Build an orthographic projection matrix.

    :returns: float64 numpy array [16], column-major
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        dx = np.float64(right) - np.float64(left)
        dy = np.float64(top) - np.float64(bottom)
        dz = np.float64(far) - np.float64(near)

        M = np.zeros((4, 4), dtype=np.float64)
        M[0, 0] = 2.0 / dx
        M[1, 1] = 2.0 / dy
        M[2, 2] = -2.0 / dz
        M[0, 3] = -(right + left) / dx
        M[1, 3] = -(top + bottom) / dy
        M[2, 3] = -(far + near) / dz
        M[3, 3] = 1.0

    return M.flatten(order="F")


def look_at(eye: Vector3, center: Vector3) -> Transform:
    """Build the view transform of a camera at ``eye`` looking at ``center``.

    The camera basis is ``z = normalized(eye - center)``,
    ``x = normalized(up x z)``, ``y = z x x``. The result maps world space
    into camera space: its rows are the basis vectors and its translation
    is ``(-x.eye, -y.eye, -z.eye)``. It equals
    ``Transform.from_position_facing(eye, center).inverse()``.

    Returns identity when ``eye == center`` or when the view direction is
    parallel to world up.

    :param eye: Camera position
    :param center: Point the camera looks at
    :returns: View Transform
    """
    z = (eye - center).normalized()
    if z.magnitude() == 0.0:
        logger.debug("[look_at] Eye and center coincide, returning identity")
        return Transform.identity()

    x = Vector3.up().cross(z).normalized()
    if x.magnitude() == 0.0:
        logger.debug("[look_at] View direction parallel to up axis, returning identity")
        return Transform.identity()

    y = z.cross(x)
    return Transform.from_components(
        x.x, x.y, x.z, -x.dot(eye),
        y.x, y.y, y.z, -y.dot(eye),
        z.x, z.y, z.z, -z.dot(eye),
    )  # fmt: skip
