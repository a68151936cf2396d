"""Vector shape: the set of contours a distance field is generated from."""

from dataclasses import dataclass, field
from typing import Any

import structlog

from glyphfield.domain.contour import Contour

logger = structlog.get_logger(__name__)


@dataclass
class Shape:
    """Vector shape representation.

    Contours may overlap or nest arbitrarily; the winding of each contour,
    not containment, decides what is inside.

    Attributes:
        contours: List of closed contours
        inverse_y_axis: True if the shape uses top-to-bottom Y coordinates,
            which flips the row order of generated bitmaps
    """

    contours: list[Contour] = field(default_factory=list)
    inverse_y_axis: bool = False

    def add_contour(self, contour: Contour | None = None) -> Contour:
        """Append a contour, creating an empty one if none is given.

        Returns:
            The appended contour
        """
        if contour is None:
            contour = Contour()
        self.contours.append(contour)
        return contour

    def __len__(self) -> int:
        return len(self.contours)

    def __iter__(self):
        return iter(self.contours)

    def __getitem__(self, index: int) -> Contour:
        return self.contours[index]

    def is_empty(self) -> bool:
        """Check if the shape has no edges at all."""
        return all(len(contour) == 0 for contour in self.contours)

    def edge_count(self) -> int:
        """Total number of edges over all contours."""
        return sum(len(contour) for contour in self.contours)

    def normalize(self) -> None:
        """Normalize the shape geometry for distance field generation.

        A contour made of a single edge is replaced by the three thirds of
        that edge, since corner and coloring logic needs at least two
        distinguishable edges.
        """
        for index, contour in enumerate(self.contours):
            if len(contour) == 1:
                contour.edges = list(contour.edges[0].split_in_thirds())
                logger.debug("Split single-edge contour", contour=index)

    def validate(self) -> bool:
        """Perform basic checks to determine if the shape is valid.

        Every edge must start exactly where the previous one ends, wrapping
        from the last edge to the first.

        Returns:
            True if every contour is closed and continuous, False otherwise
        """
        for contour in self.contours:
            if not contour.edges:
                continue
            corner = contour.edges[-1].point(1)
            for edge in contour.edges:
                if edge is None:
                    return False
                if edge.point(0) != corner:
                    return False
                corner = edge.point(1)
        return True

    def bounds(self) -> tuple[float, float, float, float]:
        """Compute the shape's bounding box.

        Returns:
            Tuple of (left, bottom, right, top). An empty shape yields an
            inverted box (left > right).
        """
        box = [float("inf"), float("inf"), float("-inf"), float("-inf")]
        for contour in self.contours:
            contour.bounds(box)
        return (box[0], box[1], box[2], box[3])

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "contours": [c.to_dict() for c in self.contours],
            "inverse_y_axis": self.inverse_y_axis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shape":
        """Deserialize from dictionary."""
        return cls(
            contours=[Contour.from_dict(c) for c in data["contours"]],
            inverse_y_axis=data.get("inverse_y_axis", False),
        )
