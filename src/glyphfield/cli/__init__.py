"""Command-line interface for glyphfield.

The generate command is built with Typer, and its console output
(progress bar, summaries, error tables) is rendered with rich.
"""

from glyphfield.cli.app import app, cli

__all__ = ["app", "cli"]
