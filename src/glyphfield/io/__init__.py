"""Font and bitmap I/O layer for glyphfield.

This module reads font outlines using fonttools and writes generated fields
using Pillow and NumPy. It provides a clean abstraction layer between those
libraries and the domain models.

Key responsibilities:
- Load TTF/OTF fonts and map characters to glyphs
- Convert fonttools outlines to Shape models with consistent winding
- Save fields as PNG/BMP images or raw .npy arrays

Key classes:
- FontReader: Load fonts and extract glyph outlines
- ShapePen: fontTools pen building a Shape
- BitmapWriter: Save generated bitmaps
"""

from glyphfield.io.converter import ShapePen, glyph_to_shape, shape_from_commands
from glyphfield.io.reader import FontReader, GlyphOutline
from glyphfield.io.writer import BitmapWriter

__all__ = [
    "BitmapWriter",
    "FontReader",
    "GlyphOutline",
    "ShapePen",
    "glyph_to_shape",
    "shape_from_commands",
]
