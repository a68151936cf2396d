"""Closed contour made of edge segments."""

from dataclasses import dataclass, field
from typing import Any

from glyphfield.domain.segments import EdgeSegment
from glyphfield.geometry import Vector2, sign


def _shoelace(a: Vector2, b: Vector2) -> float:
    # Positive area contribution for counter-clockwise traversal
    return (a.x - b.x) * (a.y + b.y)


@dataclass
class Contour:
    """A single closed contour of a shape.

    Consecutive edges are expected to be endpoint-continuous, including the
    wrap from the last edge back to the first (see Shape.validate).

    Attributes:
        edges: Sequence of edge segments forming the contour
    """

    edges: list[EdgeSegment] = field(default_factory=list)

    def add_edge(self, edge: EdgeSegment) -> EdgeSegment:
        """Append an edge to the contour.

        Args:
            edge: Edge segment to append

        Returns:
            The appended edge
        """
        self.edges.append(edge)
        return edge

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)

    def __getitem__(self, index: int) -> EdgeSegment:
        return self.edges[index]

    def bounds(self, box: list[float]) -> None:
        """Expand box ([left, bottom, right, top]) to fit the contour."""
        for edge in self.edges:
            edge.bounds(box)

    def winding(self) -> int:
        """Compute the winding of the contour.

        The sign of a shoelace sum over sample points along the contour.
        One edge is sampled at three parameters and two edges at two
        parameters each; with three or more edges the start points alone
        form an adequate polygon.

        Returns:
            1 for counter-clockwise (positive) winding, -1 for clockwise,
            0 for an empty or degenerate contour
        """
        if not self.edges:
            return 0

        total = 0.0
        if len(self.edges) == 1:
            edge = self.edges[0]
            a, b, c = edge.point(0), edge.point(1 / 3), edge.point(2 / 3)
            total += _shoelace(a, b)
            total += _shoelace(b, c)
            total += _shoelace(c, a)
        elif len(self.edges) == 2:
            first, second = self.edges
            a, b = first.point(0), first.point(0.5)
            c, d = second.point(0), second.point(0.5)
            total += _shoelace(a, b)
            total += _shoelace(b, c)
            total += _shoelace(c, d)
            total += _shoelace(d, a)
        else:
            prev = self.edges[-1].point(0)
            for edge in self.edges:
                cur = edge.point(0)
                total += _shoelace(prev, cur)
                prev = cur

        return sign(total)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"edges": [edge.to_dict() for edge in self.edges]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary."""
        return cls(edges=[EdgeSegment.from_dict(e) for e in data["edges"]])
