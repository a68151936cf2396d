"""Utility functions for glyphfield.

This module provides logging setup and processing statistics.
"""

from glyphfield.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
