"""Numeric tolerance configuration.

This module defines the comparison tolerances shared by the vector and
transform types. Nothing here changes results of the algebra itself; the
values only feed the approximate comparisons (``is_close``).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceConfig:
    """Tolerances for approximate comparisons.

    Attributes:
        epsilon: Absolute per-component tolerance used by ``is_close``
        description: Human-readable description
    """

    epsilon: float = 1e-9
    description: str = "Absolute per-component tolerance for is_close"

    def resolve(self, tolerance: float | None) -> float:
        """Return ``tolerance`` if given, else the configured epsilon.

        :param tolerance: Caller-supplied tolerance or None
        :returns: Tolerance to use
        :raises ValueError: If tolerance is negative or not a number
        """
        if tolerance is None:
            return self.epsilon
        if not isinstance(tolerance, int | float):
            raise ValueError(f"tolerance: expected number, got {type(tolerance).__name__}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {tolerance}")
        return float(tolerance)

    def __repr__(self) -> str:
        return f"ToleranceConfig(epsilon={self.epsilon})"


# Singleton instance for use throughout the codebase
TOLERANCE_CONFIG = ToleranceConfig()
