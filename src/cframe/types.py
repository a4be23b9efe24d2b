"""Type aliases for cframe.

Provides unified type hints for array-like parameters across all modules.
"""

from collections.abc import Sequence

import numpy as np

# 3D vector type accepted by from_array helpers
Vector3Like = tuple[float, float, float] | Sequence[float] | np.ndarray

# Quaternion type (i, j, k, w)
QuaternionLike = tuple[float, float, float, float] | Sequence[float] | np.ndarray
