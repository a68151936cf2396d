"""Scalar helpers shared by the geometry and field generation code.

All functions are pure and work on plain floats; mix() also accepts Vector2
operands.
"""

from typing import TypeVar

from glyphfield.geometry.vector import Vector2

T = TypeVar("T", float, Vector2)


def median(a: float, b: float, c: float) -> float:
    """Return the middle value out of three.

    Examples:
        >>> median(3.0, 1.0, 2.0)
        2.0
    """
    return max(min(a, b), min(max(a, b), c))


def mix(a: T, b: T, weight: float) -> T:
    """Return the weighted average of a and b.

    weight == 0 yields a, weight == 1 yields b; values outside [0, 1]
    extrapolate.
    """
    return (1.0 - weight) * a + weight * b


def sign(n: float) -> int:
    """Return 1 for positive values, -1 for negative values and 0 for zero."""
    return (1 if n > 0 else 0) - (1 if n < 0 else 0)


def non_zero_sign(n: float) -> int:
    """Return 1 for non-negative values and -1 for negative values."""
    return 1 if n >= 0 else -1
