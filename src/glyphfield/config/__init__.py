"""Configuration management for glyphfield.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GenerationConfig: Field type, bitmap size, range and framing
- ColoringConfig: MSDF edge coloring settings
- ProcessingConfig: Font processing settings
- LoggingConfig: Logging settings
- GlyphfieldSettings: Main application settings
"""

from glyphfield.config.settings import (
    ColoringConfig,
    FieldMode,
    GenerationConfig,
    GlyphfieldSettings,
    LoggingConfig,
    OutputFormat,
    ProcessingConfig,
)

__all__ = [
    "ColoringConfig",
    "FieldMode",
    "GenerationConfig",
    "GlyphfieldSettings",
    "LoggingConfig",
    "OutputFormat",
    "ProcessingConfig",
]
