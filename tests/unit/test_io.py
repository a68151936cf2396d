"""Unit tests for the Font I/O layer.

Tests for FontReader, BitmapWriter, and converter functions.
"""

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import numpy as np
import pytest
from PIL import Image

from glyphfield.domain import Bitmap, CubicSegment, LinearSegment, QuadraticSegment
from glyphfield.exceptions import BitmapSaveError, FontLoadError, GlyphNotFoundError
from glyphfield.io import BitmapWriter, FontReader, GlyphOutline, shape_from_commands

SQUARE = [
    ("moveTo", ((0.0, 0.0),)),
    ("lineTo", ((100.0, 0.0),)),
    ("lineTo", ((100.0, 100.0),)),
    ("lineTo", ((0.0, 100.0),)),
    ("closePath", ()),
]


class TestFontReader:
    """Tests for FontReader class."""

    def test_init(self):
        """Test FontReader initialization."""
        path = Path("test.ttf")
        reader = FontReader(path)
        assert reader._font_path == path
        assert reader._font is None

    def test_load_nonexistent_file(self):
        """Test loading a nonexistent file raises FileNotFoundError."""
        reader = FontReader(Path("nonexistent.ttf"))
        with pytest.raises(FileNotFoundError):
            reader.load()

    def test_load_invalid_file(self, tmp_path):
        """Test that a file which is not a font raises FontLoadError."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"definitely not a font")

        with pytest.raises(FontLoadError) as exc_info:
            FontReader(path).load()

        assert exc_info.value.path == str(path)

    def test_format_before_load(self):
        """Test accessing format before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            _ = reader.format

    def test_outlines_before_load(self):
        """Test iterating outlines before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            list(reader.iter_outlines())

    @patch("glyphfield.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_format_opentype(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test format property for CFF-flavored fonts."""
        mock_font = MagicMock()
        mock_font.__contains__ = Mock(side_effect=lambda x: x == "CFF ")
        mock_ttfont.return_value = mock_font

        reader = FontReader(Path("test.otf"))
        reader.load()

        assert reader.format == "OpenType"

    @patch("glyphfield.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_context_manager(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test FontReader as context manager."""
        mock_font = MagicMock()
        mock_ttfont.return_value = mock_font

        with FontReader(Path("test.ttf")) as reader:
            assert reader._font is not None

        mock_font.close.assert_called_once()

    def test_truetype_metadata(self, truetype_font):
        """Test font-level properties of a real TrueType font."""
        with FontReader(truetype_font) as reader:
            assert reader.format == "TrueType"
            assert reader.units_per_em == 1000
            assert reader.glyph_count == 4
            assert reader.glyph_names() == [".notdef", "space", "square", "ring"]

    def test_truetype_outline_is_counter_clockwise(self, truetype_font):
        """Test that clockwise TrueType contours are reversed on import."""
        with FontReader(truetype_font) as reader:
            outline = reader.get_outline("square")

        assert outline.unicode == ord("A")
        assert outline.advance_width == 700
        assert [contour.winding() for contour in outline.shape] == [1]
        assert outline.shape.bounds() == (100, 0, 600, 500)
        assert outline.shape.validate()

    @pytest.mark.parametrize("font_fixture", ["truetype_font", "cff_font"])
    def test_hole_winds_negatively(self, request, font_fixture):
        """Test that counters come out clockwise for both outline formats."""
        with FontReader(request.getfixturevalue(font_fixture)) as reader:
            outline = reader.get_outline("ring")

        assert [contour.winding() for contour in outline.shape] == [1, -1]

    def test_cff_format(self, cff_font):
        """Test that a CFF font reports OpenType and keeps its orientation."""
        with FontReader(cff_font) as reader:
            assert reader.format == "OpenType"
            outline = reader.get_outline("square")

        assert [contour.winding() for contour in outline.shape] == [1]

    def test_empty_glyph(self, truetype_font):
        """Test that a glyph without contours is empty."""
        with FontReader(truetype_font) as reader:
            assert reader.get_outline("space").is_empty()

    def test_glyph_name_for(self, truetype_font):
        """Test cmap lookups."""
        with FontReader(truetype_font) as reader:
            assert reader.glyph_name_for("O") == "ring"
            with pytest.raises(GlyphNotFoundError, match="U\\+005A"):
                reader.glyph_name_for("Z")

    def test_missing_glyph(self, truetype_font):
        """Test that unknown glyph names raise GlyphNotFoundError."""
        with FontReader(truetype_font) as reader:
            with pytest.raises(GlyphNotFoundError) as exc_info:
                reader.get_outline("missing")
        assert exc_info.value.glyph_name == "missing"

    def test_iter_outlines_subset(self, truetype_font):
        """Test iterating a subset of glyphs in request order."""
        with FontReader(truetype_font) as reader:
            names = [outline.name for outline in reader.iter_outlines(["ring", "square"])]
        assert names == ["ring", "square"]

    def test_unicode_per_outline(self, truetype_font):
        """Test that every outline reports its mapped code point."""
        with FontReader(truetype_font) as reader:
            unicodes = [outline.unicode for outline in reader.iter_outlines()]
        assert unicodes == [None, ord(" "), ord("A"), ord("O")]

    def test_outline_roundtrip(self, truetype_font):
        """Test GlyphOutline serialization for worker processes."""
        with FontReader(truetype_font) as reader:
            outline = reader.get_outline("ring")

        restored = GlyphOutline.from_dict(outline.to_dict())

        assert restored.name == "ring"
        assert restored.unicode == ord("O")
        assert restored.shape.edge_count() == outline.shape.edge_count()


class TestConverter:
    """Tests for converter functions."""

    def test_square(self):
        """Test that an implicitly closed polygon gets its closing edge."""
        shape = shape_from_commands(SQUARE)

        assert len(shape) == 1
        assert len(shape[0]) == 4
        assert all(isinstance(edge, LinearSegment) for edge in shape[0])
        assert shape[0].winding() == 1
        assert shape.validate()

    def test_reverse(self):
        """Test that reversing flips the winding."""
        shape = shape_from_commands(SQUARE, reverse=True)
        assert len(shape[0]) == 4
        assert shape[0].winding() == -1
        assert shape.validate()

    def test_quadratic_with_implied_on_curve_points(self):
        """Test that consecutive off-curve points are split into quadratics."""
        shape = shape_from_commands(
            [
                ("moveTo", ((0.0, 0.0),)),
                ("qCurveTo", ((50.0, 50.0), (100.0, 50.0), (150.0, 0.0))),
                ("closePath", ()),
            ]
        )

        kinds = [type(edge) for edge in shape[0]]
        assert kinds == [QuadraticSegment, QuadraticSegment, LinearSegment]
        assert shape[0][0].point(1) == shape[0][1].point(0)
        assert shape[0][0].point(1).to_tuple() == (75.0, 50.0)

    def test_cubic(self):
        """Test conversion with cubic curves."""
        shape = shape_from_commands(
            [
                ("moveTo", ((0.0, 0.0),)),
                ("curveTo", ((33.0, 33.0), (66.0, 66.0), (100.0, 0.0))),
                ("closePath", ()),
            ]
        )

        assert [type(edge) for edge in shape[0]] == [CubicSegment, LinearSegment]

    def test_zero_length_lines_dropped(self):
        """Test that repeated points do not create degenerate edges."""
        shape = shape_from_commands(
            [
                ("moveTo", ((0.0, 0.0),)),
                ("lineTo", ((0.0, 0.0),)),
                ("lineTo", ((10.0, 0.0),)),
                ("lineTo", ((10.0, 10.0),)),
                ("lineTo", ((0.0, 0.0),)),
                ("closePath", ()),
            ]
        )

        assert len(shape[0]) == 3
        assert shape.validate()

    def test_open_path_is_closed(self):
        """Test that an open path is closed with a line."""
        shape = shape_from_commands(
            [
                ("moveTo", ((0.0, 0.0),)),
                ("lineTo", ((10.0, 0.0),)),
                ("lineTo", ((10.0, 10.0),)),
                ("endPath", ()),
            ]
        )

        assert len(shape[0]) == 3
        assert shape.validate()

    def test_multiple_contours(self):
        """Test conversion with multiple contours."""
        shape = shape_from_commands(
            SQUARE
            + [
                ("moveTo", ((20.0, 20.0),)),
                ("lineTo", ((30.0, 20.0),)),
                ("lineTo", ((30.0, 30.0),)),
                ("closePath", ()),
            ]
        )

        assert len(shape) == 2
        assert len(shape[1]) == 3


class TestBitmapWriter:
    """Tests for BitmapWriter class."""

    def test_png_is_flipped_and_quantized(self, tmp_path):
        """Test that the bottom field row becomes the bottom image row."""
        bitmap = Bitmap(2, 2)
        bitmap[0, 0] = 1.0
        bitmap[1, 0] = 0.5
        path = tmp_path / "field.png"

        BitmapWriter.save(bitmap, path)

        with Image.open(path) as image:
            assert image.mode == "L"
            pixels = np.array(image)
        assert pixels.tolist() == [[0, 0], [255, 128]]

    def test_rgb_bitmap(self, tmp_path):
        """Test that three-channel bitmaps are saved as RGB."""
        path = tmp_path / "field.bmp"
        BitmapWriter.save(Bitmap(3, 2, channels=3), path)

        with Image.open(path) as image:
            assert image.mode == "RGB"
            assert image.size == (3, 2)

    def test_unsupported_suffix(self, tmp_path):
        """Test that unknown image formats are rejected."""
        with pytest.raises(BitmapSaveError, match="unsupported image format"):
            BitmapWriter.save(Bitmap(1, 1), tmp_path / "field.gif")

    def test_unwritable_path(self, tmp_path):
        """Test that write failures become BitmapSaveError."""
        with pytest.raises(BitmapSaveError):
            BitmapWriter.save(Bitmap(1, 1), tmp_path / "missing" / "field.png")

    def test_numpy_roundtrip(self, tmp_path):
        """Test that raw fields are stored without loss."""
        bitmap = Bitmap(3, 2, channels=3)
        bitmap[2, 1] = (0.125, -0.5, 1.75)
        path = tmp_path / "field.npy"

        BitmapWriter.save_numpy(bitmap, path)
        restored = BitmapWriter.load_numpy(path)

        assert restored.channels == 3
        assert np.array_equal(restored.data, bitmap.data)

    def test_get_output_path(self):
        """Test output path naming."""
        result = BitmapWriter.get_output_path(Path("out"), "A", "msdf", "png")
        assert result == Path("out/A-msdf.png")
