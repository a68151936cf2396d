"""Exception hierarchy for Glyphfield."""


class GlyphfieldError(Exception):
    """Base exception for all Glyphfield errors."""

    pass


class FontError(GlyphfieldError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphError(GlyphfieldError):
    """Errors related to glyph processing."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested glyph not found in font."""

    def __init__(self, glyph_name: str) -> None:
        self.glyph_name = glyph_name
        super().__init__(f"Glyph '{glyph_name}' not found in font")


class GlyphProcessingError(GlyphError):
    """Error processing a specific glyph."""

    def __init__(self, glyph_name: str, reason: str) -> None:
        self.glyph_name = glyph_name
        self.reason = reason
        super().__init__(f"Error processing glyph '{glyph_name}': {reason}")


class ShapeError(GlyphfieldError):
    """Errors in shape geometry."""

    pass


class InvalidShapeError(ShapeError):
    """Shape has a contour whose edges do not connect end to start."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Shape '{name}' has an open or discontinuous contour")


class OutputError(GlyphfieldError):
    """Errors related to writing generated fields."""

    pass


class BitmapSaveError(OutputError):
    """Error saving a bitmap file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save bitmap '{path}': {reason}")


class ProcessingCancelledError(GlyphfieldError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
