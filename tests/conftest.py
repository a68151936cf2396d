"""Shared fixtures: small fonts built with fontTools.fontBuilder."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphfield.domain import Contour, LinearSegment, Shape
from glyphfield.geometry import Vector2

GLYPH_ORDER = [".notdef", "space", "square", "ring"]
CMAP = {ord(" "): "space", ord("A"): "square", ord("O"): "ring"}
ADVANCE = 700
# Left side bearings match the xMin of each outline
LSB = {".notdef": 0, "space": 0, "square": 100, "ring": 100}


def _draw_rect(pen, left: float, bottom: float, right: float, top: float, clockwise: bool) -> None:
    corners = [(left, bottom), (right, bottom), (right, top), (left, top)]
    if clockwise:
        corners.reverse()
    pen.moveTo(corners[0])
    for corner in corners[1:]:
        pen.lineTo(corner)
    pen.closePath()


def _draw_glyph(pen, name: str, filled_clockwise: bool) -> None:
    # TrueType fills clockwise contours, CFF counter-clockwise ones
    if name == "square":
        _draw_rect(pen, 100, 0, 600, 500, clockwise=filled_clockwise)
    elif name == "ring":
        _draw_rect(pen, 100, 0, 600, 500, clockwise=filled_clockwise)
        _draw_rect(pen, 250, 150, 450, 350, clockwise=not filled_clockwise)


def build_truetype_font(path: Path) -> Path:
    """Build a TrueType font with an empty, a square and a ring glyph."""
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap(CMAP)

    glyphs = {}
    for name in GLYPH_ORDER:
        pen = TTGlyphPen(None)
        _draw_glyph(pen, name, filled_clockwise=True)
        glyphs[name] = pen.glyph()
    fb.setupGlyf(glyphs)

    fb.setupHorizontalMetrics({name: (ADVANCE, LSB[name]) for name in GLYPH_ORDER})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphfield Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


def build_cff_font(path: Path) -> Path:
    """Build a CFF-flavored OpenType font with the same glyphs."""
    fb = FontBuilder(1000, isTTF=False)
    fb.setupGlyphOrder(GLYPH_ORDER)
    fb.setupCharacterMap(CMAP)

    charstrings = {}
    for name in GLYPH_ORDER:
        pen = T2CharStringPen(ADVANCE, None)
        _draw_glyph(pen, name, filled_clockwise=False)
        charstrings[name] = pen.getCharString()
    fb.setupCFF("GlyphfieldTest-Regular", {"FullName": "Glyphfield Test"}, charstrings, {})

    fb.setupHorizontalMetrics({name: (ADVANCE, LSB[name]) for name in GLYPH_ORDER})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Glyphfield Test", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


def square_contour(
    left: float = 0.0,
    bottom: float = 0.0,
    right: float = 1.0,
    top: float = 1.0,
    clockwise: bool = False,
) -> Contour:
    """Axis-aligned rectangle made of four linear edges."""
    corners = [
        Vector2(left, bottom),
        Vector2(right, bottom),
        Vector2(right, top),
        Vector2(left, top),
    ]
    if clockwise:
        corners.reverse()
    contour = Contour()
    for i, corner in enumerate(corners):
        contour.add_edge(LinearSegment(corner, corners[(i + 1) % 4]))
    return contour


@pytest.fixture
def unit_square() -> Shape:
    """Counter-clockwise unit square."""
    return Shape(contours=[square_contour()])


@pytest.fixture
def truetype_font(tmp_path: Path) -> Path:
    """Path to a generated TrueType test font."""
    return build_truetype_font(tmp_path / "GlyphfieldTest.ttf")


@pytest.fixture
def cff_font(tmp_path: Path) -> Path:
    """Path to a generated CFF test font."""
    return build_cff_font(tmp_path / "GlyphfieldTest.otf")


@pytest.fixture
def make_square():
    """Factory for rectangle contours (see square_contour)."""
    return square_contour
