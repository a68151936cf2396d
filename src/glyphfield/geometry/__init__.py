"""Geometry kernel for glyphfield.

This module provides the numeric building blocks used by the outline model
and the field generators:

- Vector2: immutable 2D vector with dot/cross products
- SignedDistance: distance with alignment-based tie-breaking
- median, mix, sign, non_zero_sign: scalar helpers
- solve_quadratic, solve_cubic: real polynomial root solvers

All functions are pure, allocation-light and safe to call from worker
processes.
"""

from glyphfield.geometry.arithmetic import median, mix, non_zero_sign, sign
from glyphfield.geometry.equations import solve_cubic, solve_linear, solve_quadratic
from glyphfield.geometry.signed_distance import SignedDistance
from glyphfield.geometry.vector import Vector2, cross, dot

__all__ = [
    "SignedDistance",
    "Vector2",
    "cross",
    "dot",
    "median",
    "mix",
    "non_zero_sign",
    "sign",
    "solve_cubic",
    "solve_linear",
    "solve_quadratic",
]
