"""CLI application entry point for glyphfield.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from glyphfield import __version__
from glyphfield.cli.output import (
    console,
    create_progress,
    print_cancellation_summary,
    print_error,
    print_errors_table,
    print_field_info,
    print_font_info,
    print_glyph_selection,
    print_header,
    print_slowest_glyphs,
    print_step,
    print_summary,
)
from glyphfield.config import (
    ColoringConfig,
    FieldMode,
    GenerationConfig,
    GlyphfieldSettings,
    LoggingConfig,
    OutputFormat,
    ProcessingConfig,
)
from glyphfield.core import FieldProcessor
from glyphfield.exceptions import (
    FontLoadError,
    GlyphfieldError,
    GlyphNotFoundError,
    ProcessingCancelledError,
)
from glyphfield.io import FontReader
from glyphfield.utils import ProcessingStats

# Create the Typer app
app = typer.Typer(
    name="glyphfield",
    help="Generate signed distance fields (SDF, pseudo-SDF, MSDF) from font glyphs.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Glyphfield[/bold blue] v{__version__}")
        raise typer.Exit()


def select_glyphs(reader: FontReader, chars: str | None, glyphs: list[str] | None) -> list[str]:
    """Resolve the glyph names to process.

    Args:
        reader: Loaded font reader
        chars: Characters to look up in the cmap
        glyphs: Explicit glyph names

    Returns:
        Unique glyph names in request order, or every glyph of the font
        when nothing was requested

    Raises:
        GlyphNotFoundError: If a character is unmapped or a name is unknown
    """
    if not chars and not glyphs:
        return reader.glyph_names()

    known = set(reader.glyph_names())
    names: list[str] = []
    for char in chars or "":
        names.append(reader.glyph_name_for(char))
    for name in glyphs or []:
        if name not in known:
            raise GlyphNotFoundError(name)
        names.append(name)
    return list(dict.fromkeys(names))


@app.command()
def generate(
    input_font: Annotated[
        Path,
        typer.Argument(
            help="Path to input TTF/OTF font file",
            show_default=False,
        ),
    ],
    chars: Annotated[
        str | None,
        typer.Option(
            "--chars",
            "-c",
            help="Characters to generate fields for",
        ),
    ] = None,
    glyphs: Annotated[
        list[str] | None,
        typer.Option(
            "--glyph",
            "-g",
            help="Glyph name to generate a field for (repeatable)",
        ),
    ] = None,
    mode: Annotated[
        FieldMode,
        typer.Option(
            "--mode",
            "-m",
            help="Field type",
            case_sensitive=False,
        ),
    ] = FieldMode.MSDF,
    size: Annotated[
        int,
        typer.Option(
            "--size",
            "-s",
            help="Width and height of each field in pixels",
            min=1,
            max=4096,
        ),
    ] = 32,
    px_range: Annotated[
        float,
        typer.Option(
            "--range",
            "-r",
            help="Distance range in pixels",
            min=0.0,
        ),
    ] = 4.0,
    angle_threshold: Annotated[
        float,
        typer.Option(
            "--angle-threshold",
            "-a",
            help="Maximum corner angle in radians treated as smooth (MSDF)",
            min=0.0,
            max=3.14159266,
        ),
    ] = 3.0,
    seed: Annotated[
        int,
        typer.Option(
            "--seed",
            help="Seed for edge coloring (MSDF)",
            min=0,
        ),
    ] = 0,
    edge_threshold: Annotated[
        float,
        typer.Option(
            "--edge-threshold",
            help="Clash threshold for MSDF error correction (0 disables)",
            min=0.0,
        ),
    ] = 1.00000001,
    legacy: Annotated[
        bool,
        typer.Option(
            "--legacy",
            help="Use nearest-edge generators without overlapping contour support",
        ),
    ] = False,
    preview: Annotated[
        int | None,
        typer.Option(
            "--preview",
            help="Also render a preview image of this size",
            min=1,
            max=4096,
        ),
    ] = None,
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output directory",
        ),
    ] = Path("."),
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output file format",
            case_sensitive=False,
        ),
    ] = OutputFormat.PNG,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate distance fields for glyphs of a font.

    Each glyph is fitted into a SIZE x SIZE bitmap with a margin of half the
    range and saved as {glyph}-{mode}.{format} in the output directory.

    Example:
        glyphfield Roboto-Regular.ttf -c "Ag" -m msdf -s 48 --preview 256
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_font.exists():
        print_error(
            f"Input file not found: {input_font}",
            details=f"The file '{input_font}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_font.is_file():
        print_error(
            f"Input path is not a file: {input_font}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    try:
        settings = GlyphfieldSettings(
            generation=GenerationConfig(
                mode=mode,
                width=size,
                height=size,
                range=px_range,
                edge_threshold=edge_threshold,
                legacy=legacy,
            ),
            coloring=ColoringConfig(
                angle_threshold=angle_threshold,
                seed=seed,
            ),
            processing=ProcessingConfig(
                max_workers=workers,
                output_format=output_format,
                preview_size=preview,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )
    except ValidationError as e:
        print_error("Invalid option", details=str(e))
        raise typer.Exit(code=1) from None

    try:
        if not quiet:
            print_step("Loading font")

        with FontReader(input_font) as reader:
            glyph_names = select_glyphs(reader, chars, glyphs)
            if not quiet:
                print_font_info(input_font, reader.format, reader.glyph_count, reader.units_per_em)
                print_glyph_selection(glyph_names, verbose)

        if not quiet:
            print_step("Generating")
            print_field_info(
                mode.value,
                size,
                px_range,
                legacy,
                workers=workers or os.cpu_count() or 1,
                auto_workers=workers is None,
            )

        processor = FieldProcessor(settings)
        try:
            stats = run_processor(processor, input_font, output, glyph_names, workers, quiet)
        except ProcessingCancelledError as e:
            if not quiet:
                print_cancellation_summary(e.processed_count, e.pending_count)
            # 130 is the shell convention for SIGINT
            raise typer.Exit(code=130) from None

        if not quiet:
            print_summary(output, stats)
            if verbose:
                print_slowest_glyphs(stats)
                if stats.errors:
                    print_errors_table(stats.errors)

        if stats.error_count > 0:
            raise typer.Exit(code=1)

    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1) from None
    except GlyphfieldError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1) from None


def run_processor(
    processor: FieldProcessor,
    font_path: Path,
    output_dir: Path,
    glyph_names: list[str],
    workers: int | None,
    quiet: bool,
) -> ProcessingStats:
    """Run the processor, driving a progress bar unless quiet."""
    if quiet:
        return processor.process(
            font_path=font_path,
            output_dir=output_dir,
            glyph_names=glyph_names,
            max_workers=workers,
        )

    with create_progress() as progress:
        task_id = progress.add_task("fields", total=len(glyph_names))

        def advance(completed: int, *_: object) -> None:
            progress.update(task_id, completed=completed)

        return processor.process(
            font_path=font_path,
            output_dir=output_dir,
            glyph_names=glyph_names,
            max_workers=workers,
            progress_callback=advance,
        )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
