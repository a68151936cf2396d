"""Core algorithms for glyphfield.

This module contains the core algorithms for:

- Edge coloring (corner detection, channel assignment)
- Distance field generation (SDF, pseudo-SDF, MSDF and legacy variants)
- MSDF error correction
- Preview rendering of generated fields
- Parallel processing of font glyphs

All generators are pure per pixel and safe for use in worker processes.

Key functions:
- edge_coloring_simple: Assign edge colors for MSDF generation
- generate_sdf / generate_pseudo_sdf / generate_msdf: Fill a bitmap
- msdf_error_correction: Fix clashing MSDF pixels
- render_sdf: Render a field back to coverage

Key classes:
- FieldGenerator: Generates the configured field type for a shape
- FieldProcessor: Generates fields for the glyphs of a font
"""

from glyphfield.core.coloring import edge_coloring_simple, find_corners, is_corner, switch_color
from glyphfield.core.generator import (
    FieldGenerator,
    auto_frame,
    generate_msdf,
    generate_msdf_legacy,
    generate_pseudo_sdf,
    generate_pseudo_sdf_legacy,
    generate_sdf,
    generate_sdf_legacy,
    msdf_error_correction,
    pixel_clash,
    resolve_overlap,
)
from glyphfield.core.processor import FieldProcessor, process_glyph
from glyphfield.core.render import distance_value, render_sdf, sample, simulate_8bit

__all__ = [
    # Coloring
    "edge_coloring_simple",
    "find_corners",
    "is_corner",
    "switch_color",
    # Generators
    "FieldGenerator",
    "auto_frame",
    "generate_msdf",
    "generate_msdf_legacy",
    "generate_pseudo_sdf",
    "generate_pseudo_sdf_legacy",
    "generate_sdf",
    "generate_sdf_legacy",
    "msdf_error_correction",
    "pixel_clash",
    "resolve_overlap",
    # Rendering
    "distance_value",
    "render_sdf",
    "sample",
    "simulate_8bit",
    # Processing
    "FieldProcessor",
    "process_glyph",
]
