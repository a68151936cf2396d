"""Two-dimensional vector type used by all outline geometry.

Vector2 is an immutable value type. Arithmetic operators work elementwise
between vectors and broadcast when one operand is a scalar.
"""

import math
from dataclasses import dataclass
from typing import Any, Union

Operand = Union["Vector2", float, int]


@dataclass(frozen=True, slots=True)
class Vector2:
    """A 2D euclidean vector with double precision.

    Attributes:
        x: X component
        y: Y component
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __mul__(self, other: Operand) -> "Vector2":
        if isinstance(other, Vector2):
            return Vector2(self.x * other.x, self.y * other.y)
        return Vector2(self.x * other, self.y * other)

    def __rmul__(self, other: float) -> "Vector2":
        return Vector2(other * self.x, other * self.y)

    def __truediv__(self, other: Operand) -> "Vector2":
        if isinstance(other, Vector2):
            return Vector2(self.x / other.x, self.y / other.y)
        return Vector2(self.x / other, self.y / other)

    def __rtruediv__(self, other: float) -> "Vector2":
        return Vector2(other / self.x, other / self.y)

    def is_zero(self) -> bool:
        """Check whether both components are exactly zero."""
        return self.x == 0 and self.y == 0

    def length(self) -> float:
        """Return the euclidean length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalize(self, allow_zero: bool = False) -> "Vector2":
        """Return the unit vector with the same direction.

        A zero vector has no direction; it normalizes to (0, 1), or stays
        (0, 0) when allow_zero is set.

        Args:
            allow_zero: Return the zero vector instead of the (0, 1) fallback

        Returns:
            Unit-length vector
        """
        length = self.length()
        if length == 0:
            return Vector2(0.0, 0.0 if allow_zero else 1.0)
        return Vector2(self.x / length, self.y / length)

    def orthogonal(self, polarity: bool = True) -> "Vector2":
        """Return a vector of the same length rotated by +90 (or -90) degrees."""
        if polarity:
            return Vector2(-self.y, self.x)
        return Vector2(self.y, -self.x)

    def orthonormal(self, polarity: bool = True, allow_zero: bool = False) -> "Vector2":
        """Return a unit vector orthogonal to this one.

        Args:
            polarity: Rotate counter-clockwise when True, clockwise otherwise
            allow_zero: Return the zero vector for a zero input

        Returns:
            Unit-length orthogonal vector
        """
        length = self.length()
        if length == 0:
            if allow_zero:
                return Vector2(0.0, 0.0)
            return Vector2(0.0, 1.0) if polarity else Vector2(0.0, -1.0)
        if polarity:
            return Vector2(-self.y / length, self.x / length)
        return Vector2(self.y / length, -self.x / length)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vector2":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


def dot(a: Vector2, b: Vector2) -> float:
    """Dot product of two vectors."""
    return a.x * b.x + a.y * b.y


def cross(a: Vector2, b: Vector2) -> float:
    """Scalar 2D cross product (z component of the 3D cross product)."""
    return a.x * b.y - a.y * b.x
