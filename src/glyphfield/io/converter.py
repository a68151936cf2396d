"""Converters from fonttools outlines to domain shapes.

Outlines are drawn through a fontTools pen that appends one edge segment per
drawing command. TrueType ('glyf') outlines wind clockwise around filled
areas, opposite to the counter-clockwise convention of the distance field
generators, so their contours are reversed on import. CFF outlines already
use the counter-clockwise convention.
"""

from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.recordingPen import replayRecording
from fontTools.pens.reverseContourPen import ReverseContourPen

from glyphfield.domain import Contour, CubicSegment, LinearSegment, QuadraticSegment, Shape
from glyphfield.geometry import Vector2


def _vector(pt: tuple[float, float]) -> Vector2:
    return Vector2(float(pt[0]), float(pt[1]))


class ShapePen(BasePen):
    """Pen that builds a Shape from drawing commands.

    Zero-length lines are dropped and every contour is closed with a line
    back to its start point when the outline does not return there itself.

    Example:
        pen = ShapePen()
        glyph_set["A"].draw(pen)
        shape = pen.shape
    """

    def __init__(self, glyph_set: Any = None, shape: Shape | None = None) -> None:
        super().__init__(glyph_set)
        self.shape = shape if shape is not None else Shape()
        self._contour: Contour | None = None
        self._start: Vector2 | None = None
        self._position: Vector2 | None = None

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._finish_contour()
        self._contour = Contour()
        self._start = self._position = _vector(pt)

    def _lineTo(self, pt: tuple[float, float]) -> None:
        end = _vector(pt)
        if self._contour is None or end == self._position:
            return
        self._contour.add_edge(LinearSegment(self._position, end))
        self._position = end

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        end = _vector(pt2)
        if self._contour is None:
            return
        self._contour.add_edge(QuadraticSegment(self._position, _vector(pt1), end))
        self._position = end

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        end = _vector(pt3)
        if self._contour is None:
            return
        self._contour.add_edge(CubicSegment(self._position, _vector(pt1), _vector(pt2), end))
        self._position = end

    def _closePath(self) -> None:
        self._finish_contour()

    def _endPath(self) -> None:
        self._finish_contour()

    def _finish_contour(self) -> None:
        contour = self._contour
        if contour is None:
            return
        if contour.edges and self._position != self._start:
            contour.add_edge(LinearSegment(self._position, self._start))
        if contour.edges:
            self.shape.add_contour(contour)
        self._contour = None
        self._start = self._position = None


def shape_from_commands(
    commands: list[tuple[str, tuple[Any, ...]]],
    reverse: bool = False,
) -> Shape:
    """Build a shape from RecordingPen-style drawing commands.

    The recording contains commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), (x2, y2), ...))  # Quadratic
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ())

    Args:
        commands: Drawing commands, for example RecordingPen.value
        reverse: Reverse the direction of every contour

    Returns:
        Shape with one contour per closed path
    """
    pen = ShapePen()
    replayRecording(commands, ReverseContourPen(pen) if reverse else pen)
    return pen.shape


def glyph_to_shape(glyph_set: Any, name: str, reverse: bool = False) -> Shape:
    """Convert a glyph from a fonttools glyph set into a shape.

    Composite glyphs are drawn with their components resolved.

    Args:
        glyph_set: Glyph set from TTFont.getGlyphSet()
        name: Glyph name
        reverse: Reverse the direction of every contour (TrueType outlines)

    Returns:
        Shape in font units with the Y axis pointing up
    """
    pen = ShapePen(glyph_set)
    glyph_set[name].draw(ReverseContourPen(pen) if reverse else pen)
    return pen.shape
