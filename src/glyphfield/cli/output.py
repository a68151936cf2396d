"""Rich console output helpers for the CLI.

All user-facing text of the generate command goes through this module:
step headers, font and field summaries, the progress bar, and the final
report built from ProcessingStats.
"""

from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from glyphfield.utils import ProcessingStats

console = Console()

SYM_STEP = "▸"
SYM_OK = "✓"
SYM_ERR = "✗"
SYM_DOT = "·"

# Glyph names listed before the selection summary is truncated
NAME_PREVIEW_LIMIT = 20


def create_progress() -> Progress:
    """Create the progress bar shown while fields are generated."""
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Glyphfield[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: Path, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: "TrueType" or "OpenType"
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Text keeps square brackets in paths from being read as markup
    line = Text("  ")
    line.append(str(font_path))
    line.append(f" ({font_type})", style="dim")
    console.print(line)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def print_glyph_selection(glyph_names: list[str], verbose: bool) -> None:
    """Print how many glyphs were selected, and their names when verbose."""
    console.print(f"  [green]{len(glyph_names)}[/green] glyphs selected")
    if not verbose or not glyph_names:
        return
    shown = ", ".join(glyph_names[:NAME_PREVIEW_LIMIT])
    hidden = len(glyph_names) - NAME_PREVIEW_LIMIT
    if hidden > 0:
        shown += f" (+{hidden} more)"
    console.print(Text(f"  {shown}", style="dim"))


def print_field_info(
    mode: str,
    size: int,
    px_range: float,
    legacy: bool,
    workers: int,
    auto_workers: bool,
) -> None:
    """Print the field configuration and worker count."""
    variant = " (legacy)" if legacy else ""
    console.print(
        f"  {mode.upper()}{variant} {SYM_DOT} {size}x{size} px {SYM_DOT} range {px_range:g} px"
    )
    suffix = " (auto)" if auto_workers else ""
    console.print(f"  {workers} workers{suffix} {SYM_DOT} Ctrl+C to cancel")


def format_duration(seconds: float) -> str:
    """Format seconds as a short human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m {rest:.1f}s"


def print_summary(output_dir: Path, stats: ProcessingStats) -> None:
    """Print the result of a generation run.

    Args:
        output_dir: Directory receiving the generated files
        stats: Statistics of the finished run
    """
    console.print(
        f"\n[bold green]{SYM_OK} Complete[/bold green] in {format_duration(stats.duration_seconds)}"
    )

    line = Text("  ")
    line.append(str(output_dir), style="bold")
    console.print(line)

    error_style = "red" if stats.error_count else "green"
    console.print(
        f"  {stats.processed_count} fields {SYM_DOT} {stats.skipped_count} skipped {SYM_DOT} "
        f"[{error_style}]{stats.error_count} errors[/{error_style}]"
    )

    if stats.glyph_timings_ms:
        console.print(
            f"  {stats.avg_glyph_ms:.1f}ms avg "
            f"({stats.min_glyph_ms:.1f}-{stats.max_glyph_ms:.1f}ms range)"
        )


def print_slowest_glyphs(stats: ProcessingStats, limit: int = 5) -> None:
    """Print a table of the glyphs that took longest to generate."""
    if not stats.glyph_timings_ms:
        return
    slowest = sorted(stats.glyph_timings_ms.items(), key=lambda item: item[1], reverse=True)
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Glyph")
    table.add_column("Time", justify="right")
    for glyph_name, duration_ms in slowest[:limit]:
        table.add_row(glyph_name, f"{duration_ms:.1f}ms")
    console.print(table)


def print_errors_table(errors: list[tuple[str, str]]) -> None:
    """Print failed glyphs with their error messages."""
    table = Table(show_header=True, header_style="bold red", box=None, padding=(0, 2))
    table.add_column("Glyph")
    table.add_column("Error")
    for glyph_name, message in errors:
        table.add_row(glyph_name, message)
    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print an error message, with optional details on a second line."""
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}", highlight=False)
    if details:
        console.print(Text(f"  {details}"))


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print how many glyphs finished before the run was cancelled."""
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} fields written {SYM_DOT} {cancelled} glyphs not generated")
