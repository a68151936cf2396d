"""Edge coloring for multi-channel distance fields.

Assigns each edge a set of color channels so that every corner of a contour
sits on a channel discontinuity. The median of the three channel distances
then reproduces the sharp corner after the field is magnified.

Color choices are driven by an explicit integer seed: the coloring of a
shape is a deterministic function of (shape, angle threshold, seed).
"""

import math

import structlog

from glyphfield.domain import Contour, EdgeColor, EdgeSegment, Shape
from glyphfield.geometry import Vector2, cross, dot

logger = structlog.get_logger(__name__)

SEED_MASK = 0xFFFFFFFFFFFFFFFF

# Colors drawn when a contour starts without a distinguishing channel
_START_COLORS = (EdgeColor.CYAN, EdgeColor.MAGENTA, EdgeColor.YELLOW)
_PRIMARY_COLORS = (EdgeColor.RED, EdgeColor.GREEN, EdgeColor.BLUE)


def is_corner(a_dir: Vector2, b_dir: Vector2, cross_threshold: float) -> bool:
    """Check whether two unit tangents meeting at a vertex form a corner.

    Args:
        a_dir: Normalized incoming direction
        b_dir: Normalized outgoing direction
        cross_threshold: Sine of the angle threshold

    Returns:
        True if the tangents turn back or diverge beyond the threshold
    """
    return dot(a_dir, b_dir) <= 0 or abs(cross(a_dir, b_dir)) > cross_threshold


def switch_color(
    color: EdgeColor, seed: int, banned: EdgeColor = EdgeColor.BLACK
) -> tuple[EdgeColor, int]:
    """Advance to the next edge color.

    Args:
        color: Current color
        seed: Pseudo-random accumulator
        banned: Channels the new color should avoid

    Returns:
        Tuple of (new color, advanced seed)
    """
    combined = color & banned
    if combined in _PRIMARY_COLORS:
        return EdgeColor(combined ^ EdgeColor.WHITE), seed

    if color in (EdgeColor.BLACK, EdgeColor.WHITE):
        return _START_COLORS[seed % 3], seed // 3

    shifted = int(color) << (1 + (seed & 1))
    return EdgeColor((shifted | (shifted >> 3)) & EdgeColor.WHITE), seed >> 1


def find_corners(contour: Contour, cross_threshold: float) -> list[int]:
    """Return the indices of edges that start at a corner.

    Args:
        contour: Contour to scan
        cross_threshold: Sine of the angle threshold

    Returns:
        Edge indices in contour order
    """
    corners: list[int] = []
    if not contour.edges:
        return corners

    prev_direction = contour.edges[-1].direction(1)
    for index, edge in enumerate(contour.edges):
        if is_corner(prev_direction.normalize(), edge.direction(0).normalize(), cross_threshold):
            corners.append(index)
        prev_direction = edge.direction(1)
    return corners


def _color_teardrop(contour: Contour, corner: int, seed: int) -> int:
    colors = [EdgeColor.WHITE, EdgeColor.WHITE, EdgeColor.BLACK]
    colors[0], seed = switch_color(colors[0], seed)
    colors[2], seed = switch_color(colors[0], seed)

    m = len(contour.edges)
    if m >= 3:
        for i in range(m):
            slot = math.floor(3 + 2.875 * i / (m - 1) - 1.4375 + 0.5) - 3
            contour.edges[(corner + i) % m].color = colors[slot + 1]
        return seed

    # Fewer than three edges for three colors: split them
    parts: list[EdgeSegment | None] = [None] * 6
    parts[3 * corner : 3 * corner + 3] = contour.edges[0].split_in_thirds()
    if m >= 2:
        parts[3 - 3 * corner : 6 - 3 * corner] = contour.edges[1].split_in_thirds()
        for i, part in enumerate(parts):
            part.color = colors[i // 2]
    else:
        for i in range(3):
            parts[i].color = colors[i]
        parts = parts[:3]

    contour.edges = list(parts)
    return seed


def _color_multiple_corners(contour: Contour, corners: list[int], seed: int) -> int:
    corner_count = len(corners)
    spline = 0
    start = corners[0]
    m = len(contour.edges)
    color, seed = switch_color(EdgeColor.WHITE, seed)
    initial_color = color
    for i in range(m):
        index = (start + i) % m
        if spline + 1 < corner_count and corners[spline + 1] == index:
            spline += 1
            banned = initial_color if spline == corner_count - 1 else EdgeColor.BLACK
            color, seed = switch_color(color, seed, banned)
        contour.edges[index].color = color
    return seed


def edge_coloring_simple(shape: Shape, angle_threshold: float, seed: int = 0) -> int:
    """Assign edge colors for multi-channel distance field generation.

    Contours with fewer than three edges and a single corner are split so
    each of the three colors gets its own segment.

    Args:
        shape: Shape to color in place
        angle_threshold: Maximum angle (radians) still considered smooth,
            for example 3.0 (~172 degrees). Values below pi/2 act as the
            external angle.
        seed: Non-negative seed for reproducible color choices

    Returns:
        The advanced seed, which can be passed on to color another shape
    """
    cross_threshold = math.sin(angle_threshold)
    seed &= SEED_MASK

    for contour_index, contour in enumerate(shape.contours):
        corners = find_corners(contour, cross_threshold)

        if not corners:
            # Smooth contour
            for edge in contour.edges:
                edge.color = EdgeColor.WHITE
        elif len(corners) == 1:
            seed = _color_teardrop(contour, corners[0], seed)
        else:
            seed = _color_multiple_corners(contour, corners, seed)

        logger.debug(
            "Contour colored",
            contour=contour_index,
            corners=len(corners),
            edges=len(contour.edges),
        )

    return seed
