"""
cframe - 3D vector and coordinate-frame math

Value types for positioning, orienting and projecting objects in 3D space.

Features:
- Vector3 with pure and in-place arithmetic, dot/cross, normalization, lerp
- Transform (alias CFrame): 3x4 affine frames built from components, columns,
  facing vectors, quaternions or axis-angle
- Composition, affine inverse, determinant, column-major export
- Perspective/orthographic projection and look-at view matrices
- Numba-parallel batch application to [N, 3] point arrays

Conventions: right-handed, Y-up, forward = -Z, angles in radians, float64.

Degenerate inputs are substituted, never raised: zero vectors normalize to
zero, singular transforms invert to identity, facing along the up axis uses
a fixed basis.

Example:
    >>> import math
    >>> from cframe import Transform, Vector3, perspective, look_at
    >>>
    >>> model = Transform.from_position(Vector3(0, 1, 0)) * Transform.from_axis_angle(
    ...     Vector3.up(), math.pi / 2
    ... )
    >>> view = look_at(Vector3(0, 2, 5), Vector3.zero())
    >>> proj = perspective(math.radians(60.0), 16 / 9, 0.1, 100.0)
    >>> uniform = (view * model).to_array()  # 16 floats, column-major
"""

__version__ = "0.1.0"

from cframe.config import TOLERANCE_CONFIG, ToleranceConfig
from cframe.projection import look_at, orthographic, perspective
from cframe.rotation import (
    axis_angle_to_quaternion,
    normalize_quaternion,
    quaternion_identity,
    quaternion_multiply,
    quaternion_to_rotation_matrix,
    rotation_matrix_to_quaternion,
)
from cframe.transform import CFrame, Transform
from cframe.vector import Vector3

__all__ = [
    "__version__",
    # Core types
    "Vector3",
    "Transform",
    "CFrame",
    # Camera matrices
    "perspective",
    "orthographic",
    "look_at",
    # Rotation utilities
    "quaternion_multiply",
    "quaternion_to_rotation_matrix",
    "rotation_matrix_to_quaternion",
    "axis_angle_to_quaternion",
    "normalize_quaternion",
    "quaternion_identity",
    # Configuration
    "ToleranceConfig",
    "TOLERANCE_CONFIG",
]
