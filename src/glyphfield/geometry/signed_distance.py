"""Signed distance with alignment tie-breaking."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class SignedDistance:
    """A signed distance paired with an alignment score.

    Two signed distances are ordered by absolute distance first and by the
    alignment score (dot) on an exact tie. An endpoint distance carries the
    alignment between the query offset and the end tangent, an interior
    (orthogonal) distance carries 0, so interior feet win ties against
    endpoints shared by two adjacent edges.

    Attributes:
        distance: Distance to the edge, positive when the origin lies to the
            left of the edge direction
        dot: Alignment score used to break ties
    """

    distance: float
    dot: float

    INFINITE: ClassVar["SignedDistance"]

    def __lt__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __gt__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot > other.dot)

    def __le__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot <= other.dot)

    def __ge__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot >= other.dot)


SignedDistance.INFINITE = SignedDistance(-1e240, 1.0)
