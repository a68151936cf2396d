"""Domain models for glyphfield.

This module contains the outline and raster models the field generators
work on. All models are designed to be:

- Owned: no edge or contour is shared between shapes
- Serializable for inter-process communication (parallel processing)
- Independent of fontTools implementation details

Key classes:
- EdgeColor: Channel mask assigned to each edge by edge coloring
- EdgeSegment: Linear, quadratic or cubic curve with distance queries
- Contour: A closed loop of edge segments
- Shape: A set of contours with a Y-axis orientation flag
- Bitmap: Float32 pixel grid receiving a generated field
"""

from glyphfield.domain.bitmap import Bitmap
from glyphfield.domain.contour import Contour
from glyphfield.domain.edge_color import EdgeColor
from glyphfield.domain.segments import (
    CubicSegment,
    EdgeSegment,
    LinearSegment,
    QuadraticSegment,
    edge_segment_from_points,
)
from glyphfield.domain.shape import Shape

__all__: list[str] = [
    # Enums
    "EdgeColor",
    # Edge segments
    "EdgeSegment",
    "LinearSegment",
    "QuadraticSegment",
    "CubicSegment",
    "edge_segment_from_points",
    # Outline containers
    "Contour",
    "Shape",
    # Raster
    "Bitmap",
]
