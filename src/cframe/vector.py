"""3-component vector with value semantics.

Axis convention (right-handed, Y-up):

- ``up`` = +Y, ``down`` = -Y
- ``right`` = +X, ``left`` = -X
- ``forward`` = -Z, ``backward`` = +Z

so that ``right().cross(up()) == backward()``.

Every binary operation comes in two forms sharing one private routine:
a pure form (``add``, ``+``) that returns a new vector and an in-place form
(``add_assign``, ``+=``) that mutates and returns the receiver.

Example:
    >>> from cframe import Vector3
    >>> v = Vector3(3.0, 0.0, 4.0)
    >>> v.magnitude()
    5.0
    >>> Vector3(0.0, 0.0, 2.0).normalized()
    Vector3(0.0, 0.0, 1.0)
    >>> v += Vector3.up()  # in-place
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from numbers import Real
from typing import TypeAlias

import numpy as np

from cframe.config import TOLERANCE_CONFIG
from cframe.types import Vector3Like

Components: TypeAlias = tuple[float, float, float]


# ============================================================================
# Shared component routines (used by both pure and in-place forms)
# ============================================================================


def _ieee_divide(a: float, b: float) -> float:
    """Divide with IEEE semantics: x/0 -> +-inf, 0/0 -> nan, no exception."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(a) / np.float64(b))


def _add(a: Vector3, b: Vector3) -> Components:
    return a.x + b.x, a.y + b.y, a.z + b.z


def _subtract(a: Vector3, b: Vector3) -> Components:
    return a.x - b.x, a.y - b.y, a.z - b.z


def _multiply(a: Vector3, b: Vector3) -> Components:
    return a.x * b.x, a.y * b.y, a.z * b.z


def _divide(a: Vector3, b: Vector3) -> Components:
    return _ieee_divide(a.x, b.x), _ieee_divide(a.y, b.y), _ieee_divide(a.z, b.z)


def _scale(a: Vector3, s: float) -> Components:
    return a.x * s, a.y * s, a.z * s


def _divide_scalar(a: Vector3, s: float) -> Components:
    return _ieee_divide(a.x, s), _ieee_divide(a.y, s), _ieee_divide(a.z, s)


@dataclass
class Vector3:
    """3D vector of 64-bit floats.

    Equality is exact component equality; use :meth:`is_close` for
    tolerance comparisons.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self) -> None:
        self.x = float(self.x)
        self.y = float(self.y)
        self.z = float(self.z)

    # ------------------------------------------------------------------
    # Named constants
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls) -> Vector3:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def one(cls) -> Vector3:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def up(cls) -> Vector3:
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def down(cls) -> Vector3:
        return cls(0.0, -1.0, 0.0)

    @classmethod
    def left(cls) -> Vector3:
        return cls(-1.0, 0.0, 0.0)

    @classmethod
    def right(cls) -> Vector3:
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def forward(cls) -> Vector3:
        return cls(0.0, 0.0, -1.0)

    @classmethod
    def backward(cls) -> Vector3:
        return cls(0.0, 0.0, 1.0)

    @classmethod
    def from_array(cls, arr: Vector3Like) -> Vector3:
        """Create a vector from any 3-element sequence or array.

        :param arr: Sequence or array with exactly 3 elements
        :returns: New Vector3
        :raises ValueError: If the input does not hold exactly 3 elements
        """
        values = np.asarray(arr, dtype=np.float64).reshape(-1)
        if values.shape[0] != 3:
            raise ValueError(f"Expected 3 elements, got {values.shape[0]}")
        return cls(float(values[0]), float(values[1]), float(values[2]))

    # ------------------------------------------------------------------
    # Pure arithmetic
    # ------------------------------------------------------------------

    def add(self, other: Vector3) -> Vector3:
        return Vector3(*_add(self, other))

    def subtract(self, other: Vector3) -> Vector3:
        return Vector3(*_subtract(self, other))

    def multiply(self, other: Vector3) -> Vector3:
        """Component-wise product."""
        return Vector3(*_multiply(self, other))

    def divide(self, other: Vector3 | float) -> Vector3:
        """Component-wise division by a vector, or division by a scalar.

        Zero divisors produce IEEE infinities or NaN rather than raising.
        """
        if isinstance(other, Vector3):
            return Vector3(*_divide(self, other))
        return Vector3(*_divide_scalar(self, float(other)))

    def scale(self, scalar: float) -> Vector3:
        return Vector3(*_scale(self, float(scalar)))

    def negate(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    # ------------------------------------------------------------------
    # In-place arithmetic
    # ------------------------------------------------------------------

    def _assign(self, components: Components) -> Vector3:
        self.x, self.y, self.z = components
        return self

    def add_assign(self, other: Vector3) -> Vector3:
        return self._assign(_add(self, other))

    def subtract_assign(self, other: Vector3) -> Vector3:
        return self._assign(_subtract(self, other))

    def multiply_assign(self, other: Vector3) -> Vector3:
        return self._assign(_multiply(self, other))

    def divide_assign(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return self._assign(_divide(self, other))
        return self._assign(_divide_scalar(self, float(other)))

    def scale_assign(self, scalar: float) -> Vector3:
        return self._assign(_scale(self, float(scalar)))

    # ------------------------------------------------------------------
    # Products and norms
    # ------------------------------------------------------------------

    def dot(self, other: Vector3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Right-handed cross product: ``right x up == backward``."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Euclidean length, always >= 0.

        Finite for any finite components, including ones whose squares
        overflow or underflow float64.
        """
        return math.hypot(self.x, self.y, self.z)

    def magnitude_squared(self) -> float:
        return self.dot(self)

    def normalized(self) -> Vector3:
        """Return the unit vector in the same direction.

        A vector of zero magnitude normalizes to the zero vector instead of
        NaN. Facing and look-at construction rely on this to detect
        parallel axes.

        :returns: New unit-length Vector3, or the zero vector
        """
        mag = self.magnitude()
        if mag > 0.0:
            return Vector3(*_divide_scalar(self, mag))
        return Vector3.zero()

    def lerp(self, other: Vector3, t: float) -> Vector3:
        """Linear interpolation ``self + t * (other - self)``.

        ``t`` is not clamped, so values outside [0, 1] extrapolate.
        """
        return Vector3(
            self.x + t * (other.x - self.x),
            self.y + t * (other.y - self.y),
            self.z + t * (other.z - self.z),
        )

    # ------------------------------------------------------------------
    # Conversion and comparison
    # ------------------------------------------------------------------

    def copy(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        """Convert to a float64 numpy array of shape [3]."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def to_tuple(self) -> Components:
        return (self.x, self.y, self.z)

    def is_close(self, other: Vector3, tolerance: float | None = None) -> bool:
        """Check component-wise equality within an absolute tolerance.

        :param other: Vector to compare against
        :param tolerance: Absolute tolerance, defaults to TOLERANCE_CONFIG.epsilon
        :returns: True if every component differs by at most ``tolerance``
        """
        tol = TOLERANCE_CONFIG.resolve(tolerance)
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(self.z - other.z) <= tol
        )

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __repr__(self) -> str:
        return f"Vector3({self.x}, {self.y}, {self.z})"

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return self.multiply(other)
        if isinstance(other, Real):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other: float) -> Vector3:
        if isinstance(other, Real):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3 | Real):
            return self.divide(other)
        return NotImplemented

    def __neg__(self) -> Vector3:
        return self.negate()

    def __iadd__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add_assign(other)

    def __isub__(self, other: Vector3) -> Vector3:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.subtract_assign(other)

    def __imul__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return self.multiply_assign(other)
        if isinstance(other, Real):
            return self.scale_assign(other)
        return NotImplemented

    def __itruediv__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3 | Real):
            return self.divide_assign(other)
        return NotImplemented
