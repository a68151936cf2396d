"""Glyphfield - Generate distance fields from font glyphs.

Glyphfield is a CLI tool and library that turns vector outlines (typically
font glyphs) into signed distance fields (SDF), pseudo-distance fields and
multi-channel signed distance fields (MSDF) for sharp text rendering at any
scale.

Example:
    $ glyphfield Roboto-Regular.ttf -c "AB" -m msdf -s 32

This will create A-msdf.png and B-msdf.png in the current directory.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
