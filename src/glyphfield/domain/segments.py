"""Edge segments: the curve primitives contours are built from.

Three closed variants share one interface:
- LinearSegment: straight line between two points
- QuadraticSegment: quadratic Bezier curve (TrueType outlines)
- CubicSegment: cubic Bezier curve (PostScript/CFF outlines)

Each segment can report its point and direction at a curve parameter, the
signed distance from an arbitrary origin, its bounding box, and can be split
into thirds or have an endpoint moved.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from glyphfield.domain.edge_color import EdgeColor
from glyphfield.geometry import (
    SignedDistance,
    Vector2,
    cross,
    dot,
    mix,
    non_zero_sign,
    solve_cubic,
    solve_quadratic,
)

# Box layout used by all bounds() methods
LEFT, BOTTOM, RIGHT, TOP = 0, 1, 2, 3


def _point_bounds(p: Vector2, box: list[float]) -> None:
    if p.x < box[LEFT]:
        box[LEFT] = p.x
    if p.y < box[BOTTOM]:
        box[BOTTOM] = p.y
    if p.x > box[RIGHT]:
        box[RIGHT] = p.x
    if p.y > box[TOP]:
        box[TOP] = p.y


class EdgeSegment(ABC):
    """An abstract edge segment.

    Attributes:
        color: Color channels this edge contributes to
    """

    kind: ClassVar[str] = ""

    def __init__(self, points: list[Vector2], color: EdgeColor = EdgeColor.WHITE) -> None:
        self._p = list(points)
        self.color = EdgeColor(color)

    @property
    def control_points(self) -> tuple[Vector2, ...]:
        """Control points of the segment, start point first."""
        return tuple(self._p)

    @abstractmethod
    def point(self, param: float) -> Vector2:
        """Return the point on the edge at the given parameter (0 to 1)."""

    @abstractmethod
    def direction(self, param: float) -> Vector2:
        """Return the (unnormalized) tangent direction at the given parameter."""

    @abstractmethod
    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        """Return the minimum signed distance between origin and the edge.

        The distance is positive when origin lies to the left of the edge
        direction, so the interior of a counter-clockwise contour is positive.

        Args:
            origin: Query point in shape coordinates

        Returns:
            Tuple of (signed distance, curve parameter of the nearest point).
            The parameter lies outside [0, 1] when the nearest point is an
            endpoint and origin is beyond it along the end tangent.
        """

    @abstractmethod
    def bounds(self, box: list[float]) -> None:
        """Expand box ([left, bottom, right, top]) to fit the edge."""

    @abstractmethod
    def move_start_point(self, to: Vector2) -> None:
        """Move the start point of the edge."""

    @abstractmethod
    def move_end_point(self, to: Vector2) -> None:
        """Move the end point of the edge."""

    @abstractmethod
    def split_in_thirds(self) -> tuple["EdgeSegment", "EdgeSegment", "EdgeSegment"]:
        """Split the edge into three parts which together form the original edge."""

    def distance_to_pseudo_distance(
        self, distance: SignedDistance, origin: Vector2, param: float
    ) -> SignedDistance:
        """Convert a signed distance from signed_distance() into a pseudo-distance.

        When the nearest point lies beyond an endpoint, the distance to the
        tangent line through that endpoint replaces the endpoint distance if
        it is not larger.

        Args:
            distance: Distance previously returned for origin
            origin: The same query point
            param: Parameter previously returned for origin

        Returns:
            The pseudo-distance, or the unchanged distance
        """
        if param < 0:
            direction = self.direction(0).normalize()
            aq = origin - self.point(0)
            if dot(aq, direction) < 0:
                pseudo_distance = cross(direction, aq)
                if abs(pseudo_distance) <= abs(distance.distance):
                    return SignedDistance(pseudo_distance, 0.0)
        elif param > 1:
            direction = self.direction(1).normalize()
            bq = origin - self.point(1)
            if dot(bq, direction) > 0:
                pseudo_distance = cross(direction, bq)
                if abs(pseudo_distance) <= abs(distance.distance):
                    return SignedDistance(pseudo_distance, 0.0)
        return distance

    def copy(self) -> "EdgeSegment":
        """Return an independent copy of the segment."""
        return type(self)(*self._p, color=self.color)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "type": self.kind,
            "points": [p.to_dict() for p in self._p],
            "color": int(self.color),
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "EdgeSegment":
        """Deserialize a segment of any kind from dictionary."""
        points = [Vector2.from_dict(p) for p in data["points"]]
        color = EdgeColor(data.get("color", EdgeColor.WHITE))
        segment = edge_segment_from_points(points, color)
        if segment.kind != data["type"]:
            raise ValueError(
                f"Segment type '{data['type']}' does not match {len(points)} control points"
            )
        return segment

    def __repr__(self) -> str:
        points = ", ".join(f"({p.x:g}, {p.y:g})" for p in self._p)
        return f"{type(self).__name__}({points}, color={self.color.name})"


class LinearSegment(EdgeSegment):
    """A line segment."""

    kind = "linear"

    def __init__(self, p0: Vector2, p1: Vector2, color: EdgeColor = EdgeColor.WHITE) -> None:
        super().__init__([p0, p1], color)

    def point(self, param: float) -> Vector2:
        return mix(self._p[0], self._p[1], param)

    def direction(self, param: float) -> Vector2:
        return self._p[1] - self._p[0]

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1 = self._p
        aq = origin - p0
        ab = p1 - p0
        ab_length_sq = dot(ab, ab)
        param = dot(aq, ab) / ab_length_sq if ab_length_sq != 0 else 0.0
        eq = (p1 if param > 0.5 else p0) - origin
        endpoint_distance = eq.length()
        if 0 < param < 1:
            ortho_distance = dot(ab.orthonormal(), aq)
            if abs(ortho_distance) < endpoint_distance:
                return SignedDistance(ortho_distance, 0.0), param

        return (
            SignedDistance(
                non_zero_sign(cross(ab, aq)) * endpoint_distance,
                abs(dot(ab.normalize(), eq.normalize())),
            ),
            param,
        )

    def bounds(self, box: list[float]) -> None:
        _point_bounds(self._p[0], box)
        _point_bounds(self._p[1], box)

    def move_start_point(self, to: Vector2) -> None:
        self._p[0] = to

    def move_end_point(self, to: Vector2) -> None:
        self._p[1] = to

    def split_in_thirds(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        p0, p1 = self._p
        a = self.point(1 / 3)
        b = self.point(2 / 3)
        return (
            LinearSegment(p0, a, self.color),
            LinearSegment(a, b, self.color),
            LinearSegment(b, p1, self.color),
        )


class QuadraticSegment(EdgeSegment):
    """A quadratic Bezier curve.

    A control point that coincides with either endpoint leaves the curve
    without a defined end tangent; it is moved to the midpoint of the
    endpoints on construction.
    """

    kind = "quadratic"

    def __init__(
        self,
        p0: Vector2,
        p1: Vector2,
        p2: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> None:
        if p1 == p0 or p1 == p2:
            p1 = 0.5 * (p0 + p2)
        super().__init__([p0, p1, p2], color)

    def point(self, param: float) -> Vector2:
        p0, p1, p2 = self._p
        return mix(mix(p0, p1, param), mix(p1, p2, param), param)

    def direction(self, param: float) -> Vector2:
        p0, p1, p2 = self._p
        return mix(p1 - p0, p2 - p1, param)

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2 = self._p
        qa = p0 - origin
        ab = p1 - p0
        br = p0 + p2 - p1 - p1
        _, roots = solve_cubic(
            dot(br, br),
            3 * dot(ab, br),
            2 * dot(ab, ab) + dot(qa, br),
            dot(qa, ab),
        )

        # Distance from the start point
        min_distance = non_zero_sign(cross(ab, -qa)) * qa.length()
        ab_length_sq = dot(ab, ab)
        param = -dot(qa, ab) / ab_length_sq if ab_length_sq != 0 else 0.0

        # Distance from the end point
        end_dir = p2 - p1
        distance = non_zero_sign(cross(end_dir, origin - p2)) * (p2 - origin).length()
        if abs(distance) < abs(min_distance):
            min_distance = distance
            end_length_sq = dot(end_dir, end_dir)
            param = dot(origin - p1, end_dir) / end_length_sq if end_length_sq != 0 else 1.0

        for t in roots:
            if 0 < t < 1:
                endpoint = p0 + 2 * t * ab + t * t * br
                distance = non_zero_sign(cross(p2 - p0, origin - endpoint)) * (
                    endpoint - origin
                ).length()
                if abs(distance) <= abs(min_distance):
                    min_distance = distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            return (
                SignedDistance(min_distance, abs(dot(ab.normalize(), qa.normalize()))),
                param,
            )
        return (
            SignedDistance(min_distance, abs(dot(end_dir.normalize(), (p2 - origin).normalize()))),
            param,
        )

    def bounds(self, box: list[float]) -> None:
        p0, p1, p2 = self._p
        _point_bounds(p0, box)
        _point_bounds(p2, box)
        bot = (p1 - p0) - (p2 - p1)
        if bot.x != 0:
            param = (p1.x - p0.x) / bot.x
            if 0 < param < 1:
                _point_bounds(self.point(param), box)
        if bot.y != 0:
            param = (p1.y - p0.y) / bot.y
            if 0 < param < 1:
                _point_bounds(self.point(param), box)

    def move_start_point(self, to: Vector2) -> None:
        p0, p1, p2 = self._p
        original_start_dir = p0 - p1
        denominator = cross(p0 - p1, p2 - p1)
        if denominator != 0:
            p1 = p1 + cross(p0 - p1, to - p0) / denominator * (p2 - p1)
        # Keep the original control point if the start tangent would flip
        if dot(original_start_dir, to - p1) < 0:
            p1 = self._p[1]
        self._p = [to, p1, p2]

    def move_end_point(self, to: Vector2) -> None:
        p0, p1, p2 = self._p
        original_end_dir = p2 - p1
        denominator = cross(p2 - p1, p0 - p1)
        if denominator != 0:
            p1 = p1 + cross(p2 - p1, to - p2) / denominator * (p0 - p1)
        if dot(original_end_dir, to - p1) < 0:
            p1 = self._p[1]
        self._p = [p0, p1, to]

    def split_in_thirds(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        p0, p1, p2 = self._p
        a = self.point(1 / 3)
        b = self.point(2 / 3)
        return (
            QuadraticSegment(p0, mix(p0, p1, 1 / 3), a, self.color),
            QuadraticSegment(
                a,
                mix(mix(p0, p1, 5 / 9), mix(p1, p2, 4 / 9), 0.5),
                b,
                self.color,
            ),
            QuadraticSegment(b, mix(p1, p2, 2 / 3), p2, self.color),
        )


class CubicSegment(EdgeSegment):
    """A cubic Bezier curve.

    The interior nearest point has no closed form; it is found by Newton
    iteration from SEARCH_STARTS + 1 evenly spaced seeds, SEARCH_STEPS
    refinements each. Raise both for more precision on strongly curved
    segments at proportional cost.
    """

    kind = "cubic"

    SEARCH_STARTS: ClassVar[int] = 4
    SEARCH_STEPS: ClassVar[int] = 4

    def __init__(
        self,
        p0: Vector2,
        p1: Vector2,
        p2: Vector2,
        p3: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> None:
        super().__init__([p0, p1, p2, p3], color)

    def point(self, param: float) -> Vector2:
        p0, p1, p2, p3 = self._p
        p12 = mix(p1, p2, param)
        return mix(
            mix(mix(p0, p1, param), p12, param),
            mix(p12, mix(p2, p3, param), param),
            param,
        )

    def direction(self, param: float) -> Vector2:
        p0, p1, p2, p3 = self._p
        tangent = mix(
            mix(p1 - p0, p2 - p1, param),
            mix(p2 - p1, p3 - p2, param),
            param,
        )
        if tangent.is_zero():
            if param == 0:
                return p2 - p0
            if param == 1:
                return p3 - p1
        return tangent

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        p0, p1, p2, p3 = self._p
        qa = p0 - origin
        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br

        # Distance from the start point
        start_dir = self.direction(0)
        min_distance = non_zero_sign(cross(start_dir, -qa)) * qa.length()
        start_length_sq = dot(start_dir, start_dir)
        param = -dot(qa, start_dir) / start_length_sq if start_length_sq != 0 else 0.0

        # Distance from the end point
        end_dir = self.direction(1)
        distance = non_zero_sign(cross(end_dir, origin - p3)) * (p3 - origin).length()
        if abs(distance) < abs(min_distance):
            min_distance = distance
            end_length_sq = dot(end_dir, end_dir)
            param = (
                dot(origin + end_dir - p3, end_dir) / end_length_sq if end_length_sq != 0 else 1.0
            )

        # Iterative search for the interior minimum
        for i in range(self.SEARCH_STARTS + 1):
            t = i / self.SEARCH_STARTS
            step = 0
            while True:
                qpt = self.point(t) - origin
                distance = non_zero_sign(cross(self.direction(t), -qpt)) * qpt.length()
                if abs(distance) < abs(min_distance):
                    min_distance = distance
                    param = t
                if step == self.SEARCH_STEPS:
                    break
                d1 = 3 * t * t * as_ + 6 * t * br + 3 * ab
                d2 = 6 * t * as_ + 6 * br
                denominator = dot(d1, d1) + dot(qpt, d2)
                if denominator == 0:
                    break
                t -= dot(qpt, d1) / denominator
                if t < 0 or t > 1:
                    break
                step += 1

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            return (
                SignedDistance(min_distance, abs(dot(start_dir.normalize(), qa.normalize()))),
                param,
            )
        return (
            SignedDistance(min_distance, abs(dot(end_dir.normalize(), (p3 - origin).normalize()))),
            param,
        )

    def bounds(self, box: list[float]) -> None:
        p0, p1, p2, p3 = self._p
        _point_bounds(p0, box)
        _point_bounds(p3, box)
        a0 = p1 - p0
        a1 = 2 * (p2 - p1 - a0)
        a2 = p3 - 3 * p2 + 3 * p1 - p0
        for a, b, c in ((a2.x, a1.x, a0.x), (a2.y, a1.y, a0.y)):
            _, roots = solve_quadratic(a, b, c)
            for t in roots:
                if 0 < t < 1:
                    _point_bounds(self.point(t), box)

    def move_start_point(self, to: Vector2) -> None:
        p0, p1, p2, p3 = self._p
        self._p = [to, p1 + (to - p0), p2, p3]

    def move_end_point(self, to: Vector2) -> None:
        p0, p1, p2, p3 = self._p
        self._p = [p0, p1, p2 + (to - p3), to]

    def split_in_thirds(self) -> tuple[EdgeSegment, EdgeSegment, EdgeSegment]:
        p0, p1, p2, p3 = self._p
        a = self.point(1 / 3)
        b = self.point(2 / 3)
        # De Casteljau intermediate points at t = 1/3 and t = 2/3
        q01, q12, q23 = mix(p0, p1, 1 / 3), mix(p1, p2, 1 / 3), mix(p2, p3, 1 / 3)
        r01, r12, r23 = mix(p0, p1, 2 / 3), mix(p1, p2, 2 / 3), mix(p2, p3, 2 / 3)
        q012, q123 = mix(q01, q12, 1 / 3), mix(q12, q23, 1 / 3)
        r012, r123 = mix(r01, r12, 2 / 3), mix(r12, r23, 2 / 3)
        return (
            CubicSegment(p0, p0 if p0 == p1 else q01, q012, a, self.color),
            CubicSegment(a, mix(q012, q123, 2 / 3), mix(r012, r123, 1 / 3), b, self.color),
            CubicSegment(b, r123, p3 if p2 == p3 else r23, p3, self.color),
        )


def edge_segment_from_points(
    points: list[Vector2], color: EdgeColor = EdgeColor.WHITE
) -> EdgeSegment:
    """Create the segment variant matching the number of control points.

    Args:
        points: 2, 3 or 4 control points
        color: Initial edge color

    Returns:
        LinearSegment, QuadraticSegment or CubicSegment

    Raises:
        ValueError: If points list is not of length 2, 3 or 4
    """
    if len(points) == 2:
        return LinearSegment(points[0], points[1], color)
    if len(points) == 3:
        return QuadraticSegment(points[0], points[1], points[2], color)
    if len(points) == 4:
        return CubicSegment(points[0], points[1], points[2], points[3], color)
    raise ValueError(f"Expected 2-4 control points for an edge segment, got {len(points)}")
