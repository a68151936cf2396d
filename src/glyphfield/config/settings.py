"""Configuration settings for Glyphfield."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class FieldMode(str, Enum):
    """Type of distance field to generate."""

    SDF = "sdf"
    PSDF = "psdf"
    MSDF = "msdf"

    @property
    def channels(self) -> int:
        """Number of bitmap channels the mode produces."""
        return 3 if self is FieldMode.MSDF else 1


class OutputFormat(str, Enum):
    """File format for generated fields."""

    PNG = "png"
    BMP = "bmp"
    NPY = "npy"


class GenerationConfig(BaseModel):
    """Configuration for distance field generation.

    With auto_frame enabled, scale and translate are derived from the shape
    bounds so the glyph fits the bitmap with a margin of range pixels. The
    range is given in output pixels and converted to shape units using the
    smaller scale component.
    """

    mode: FieldMode = Field(
        default=FieldMode.MSDF,
        description="Distance field type",
    )
    width: int = Field(
        default=32,
        ge=1,
        le=4096,
        description="Output bitmap width in pixels",
    )
    height: int = Field(
        default=32,
        ge=1,
        le=4096,
        description="Output bitmap height in pixels",
    )
    range: float = Field(
        default=4.0,
        gt=0.0,
        description="Width of the distance range in output pixels",
    )
    scale: tuple[float, float] = Field(
        default=(1.0, 1.0),
        description="Pixels per shape unit (ignored with auto_frame)",
    )
    translate: tuple[float, float] = Field(
        default=(0.0, 0.0),
        description="Shape-space offset applied to pixel centers (ignored with auto_frame)",
    )
    auto_frame: bool = Field(
        default=True,
        description="Fit the shape bounds into the bitmap",
    )
    edge_threshold: float = Field(
        default=1.00000001,
        ge=0.0,
        description="MSDF clash threshold for error correction (0 disables)",
    )
    legacy: bool = Field(
        default=False,
        description="Use the nearest-edge generators without overlap handling",
    )


class ColoringConfig(BaseModel):
    """Configuration for MSDF edge coloring."""

    angle_threshold: float = Field(
        default=3.0,
        gt=0.0,
        le=3.14159266,
        description="Maximum angle in radians still treated as smooth",
    )
    seed: int = Field(
        default=0,
        ge=0,
        description="Seed for reproducible color choices",
    )


class ProcessingConfig(BaseModel):
    """Configuration for font processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.PNG,
        description="File format of generated fields",
    )
    preview_size: int | None = Field(
        default=None,
        ge=1,
        le=4096,
        description="Edge length of a rendered preview image (None = no preview)",
    )


LOG_LEVEL_PATTERN = r"(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        pattern=LOG_LEVEL_PATTERN,
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        pattern=LOG_LEVEL_PATTERN,
        description="File log level (more verbose)",
    )


class GlyphfieldSettings(BaseModel):
    """Main application settings."""

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    coloring: ColoringConfig = Field(default_factory=ColoringConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
