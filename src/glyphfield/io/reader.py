"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files
and extracting glyph outlines as domain shapes.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fontTools.ttLib import TTFont, TTLibError

from glyphfield.domain import Shape
from glyphfield.exceptions import FontLoadError, GlyphNotFoundError, GlyphProcessingError
from glyphfield.io.converter import glyph_to_shape


@dataclass
class GlyphOutline:
    """A glyph outline together with its metrics.

    Attributes:
        name: Glyph name (e.g., "A", "zero", "uni0041")
        unicode: Unicode code point, if mapped
        advance_width: Horizontal advance in font units
        shape: Outline in font units
    """

    name: str
    shape: Shape
    unicode: int | None = None
    advance_width: int = 0

    def is_empty(self) -> bool:
        """Check if the glyph has no outline (e.g. space)."""
        return self.shape.is_empty()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "name": self.name,
            "unicode": self.unicode,
            "advance_width": self.advance_width,
            "shape": self.shape.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GlyphOutline":
        """Deserialize from dictionary."""
        return cls(
            name=data["name"],
            unicode=data.get("unicode"),
            advance_width=data.get("advance_width", 0),
            shape=Shape.from_dict(data["shape"]),
        )


class FontReader:
    """Loads TTF/OTF fonts and extracts glyph outlines.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            outline = reader.get_outline(reader.glyph_name_for("A"))
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None
        self._cmap: dict[int, str] = {}
        self._unicodes: dict[str, int] = {}

    def load(self) -> None:
        """Load the font file.

        Raises:
            FileNotFoundError: If font file does not exist
            FontLoadError: If font file is invalid or cannot be loaded
        """
        if not self._font_path.exists():
            raise FileNotFoundError(f"Font file not found: {self._font_path}")

        try:
            self._font = TTFont(str(self._font_path))
        except (TTLibError, OSError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        self._cmap = self._font.getBestCmap() or {}
        self._unicodes = {}
        for code, glyph_name in self._cmap.items():
            self._unicodes.setdefault(glyph_name, code)

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for TTF fonts, 'OpenType' for OTF fonts

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self._require_font()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["maxp"].numGlyphs

    def glyph_names(self) -> list[str]:
        """Return all glyph names in font order."""
        return list(self._require_font().getGlyphOrder())

    def glyph_name_for(self, char: str) -> str:
        """Look up the glyph name mapped to a character.

        Args:
            char: Single character

        Returns:
            Glyph name from the font's best cmap

        Raises:
            GlyphNotFoundError: If the character is not mapped
        """
        self._require_font()
        name = self._cmap.get(ord(char))
        if name is None:
            raise GlyphNotFoundError(f"U+{ord(char):04X}")
        return name

    def get_outline(self, name: str) -> GlyphOutline:
        """Get the outline of a glyph by name.

        Contours are oriented counter-clockwise around filled areas.

        Args:
            name: Name of the glyph to retrieve

        Returns:
            GlyphOutline with the shape in font units

        Raises:
            RuntimeError: If font has not been loaded yet
            GlyphNotFoundError: If the glyph does not exist
            GlyphProcessingError: If the outline cannot be drawn
        """
        font = self._require_font()
        glyph_set = font.getGlyphSet()
        if name not in glyph_set:
            raise GlyphNotFoundError(name)

        try:
            shape = glyph_to_shape(glyph_set, name, reverse=self.format == "TrueType")
        except (KeyError, ValueError, TypeError, AssertionError) as e:
            raise GlyphProcessingError(name, f"cannot draw outline: {e}") from e

        advance_width = 0
        hmtx = font.get("hmtx")
        if hmtx and name in hmtx.metrics:
            advance_width = hmtx.metrics[name][0]

        unicode_value = self._unicodes.get(name)

        return GlyphOutline(
            name=name,
            shape=shape,
            unicode=unicode_value,
            advance_width=advance_width,
        )

    def iter_outlines(self, names: list[str] | None = None) -> Iterator[GlyphOutline]:
        """Iterate over glyph outlines.

        Args:
            names: Glyph names to load (all glyphs in font order if None)

        Yields:
            GlyphOutline for each glyph

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        for name in names if names is not None else self.glyph_names():
            yield self.get_outline(name)

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None
            self._cmap = {}
            self._unicodes = {}

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
