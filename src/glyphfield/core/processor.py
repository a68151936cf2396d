"""Batch generation of distance fields for the glyphs of a font.

Outlines are read in the parent process, serialized, and fanned out to
worker processes; results come back as plain dictionaries and are written
to disk by the parent.
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

import structlog

from glyphfield.config import (
    ColoringConfig,
    FieldMode,
    GenerationConfig,
    GlyphfieldSettings,
    OutputFormat,
)
from glyphfield.core.generator import FieldGenerator
from glyphfield.core.render import render_sdf
from glyphfield.domain import Bitmap, Shape
from glyphfield.exceptions import (
    GlyphfieldError,
    InvalidShapeError,
    OutputError,
    ProcessingCancelledError,
)
from glyphfield.io import BitmapWriter, FontReader, GlyphOutline
from glyphfield.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_glyph(
    shape_dict: dict[str, Any],
    config_dict: dict[str, Any],
    name: str,
) -> dict[str, Any]:
    """Generate the distance field of a single glyph.

    Runs inside a worker process, so it only takes and returns plain
    dictionaries. Failures are reported in the result instead of raised.

    Args:
        shape_dict: Serialized shape (from Shape.to_dict())
        config_dict: {"generation": ..., "coloring": ...} model dumps
        name: Glyph name used in results and errors

    Returns:
        Dictionary containing either:
        - Success: {"glyph_name": str, "bitmap": bitmap_dict, "duration_ms": float}
        - Error: {"error": str, "glyph_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(shape_dict)
        shape.normalize()
        if not shape.validate():
            raise InvalidShapeError(name)

        generator = FieldGenerator(
            GenerationConfig(**config_dict["generation"]),
            ColoringConfig(**config_dict["coloring"]),
        )
        bitmap = generator.generate(shape)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "glyph_name": name,
            "bitmap": bitmap.to_dict(),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "glyph_name": name,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class FieldProcessor:
    """Orchestrates parallel distance field generation for a font.

    Empty glyphs are skipped, every other requested glyph gets a field file
    (plus a rendered preview when configured), and per-glyph outcomes are
    collected in ProcessingStats.

    Example:
        settings = GlyphfieldSettings()
        processor = FieldProcessor(settings)
        stats = processor.process(
            font_path=Path("font.ttf"),
            output_dir=Path("fields"),
            glyph_names=["A", "B"],
            max_workers=4
        )
    """

    def __init__(
        self,
        config: GlyphfieldSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """
        Args:
            config: Glyphfield settings
            logger: Logger to use; file logging is configured when omitted
        """
        self.config = config
        if logger is None:
            logger = configure_logging(
                log_file=config.logging.log_file,
                console_level=config.logging.log_level,
                file_level=config.logging.file_log_level,
                quiet=False,
            )
        self.logger = logger
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        font_path: Path,
        output_dir: Path,
        glyph_names: list[str] | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> ProcessingStats:
        """Generate distance fields for glyphs of a font.

        Args:
            font_path: Path to input font file (TTF or OTF)
            output_dir: Directory receiving the generated files
            glyph_names: Glyphs to process (all glyphs if None)
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, glyph_name, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If font file does not exist
            FontLoadError: If the font cannot be parsed
            GlyphNotFoundError: If a requested glyph does not exist
            ProcessingCancelledError: If processing is cancelled by user
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        output_dir.mkdir(parents=True, exist_ok=True)

        self.logger.info(
            "Starting field generation",
            input=str(font_path),
            output=str(output_dir),
            mode=self.config.generation.mode.value,
            max_workers=max_workers,
        )

        with FontReader(font_path) as reader:
            self.logger.info(
                "Font loaded",
                format=reader.format,
                upm=reader.units_per_em,
                glyph_count=reader.glyph_count,
            )

            outlines: list[GlyphOutline] = []
            for outline in reader.iter_outlines(glyph_names):
                if outline.is_empty():
                    self.processing_logger.log_glyph_skipped(outline.name, "empty glyph")
                    continue
                self.processing_logger.log_shape_summary(
                    outline.name,
                    len(outline.shape.contours),
                    outline.shape.edge_count(),
                    outline.shape.bounds(),
                )
                outlines.append(outline)

        if outlines:
            self._process_outlines_parallel(
                outlines=outlines,
                output_dir=output_dir,
                max_workers=max_workers,
                progress_callback=progress_callback,
            )
        else:
            self.logger.info("No glyphs to process")

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _process_outlines_parallel(
        self,
        outlines: list[GlyphOutline],
        output_dir: Path,
        max_workers: int | None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
    ) -> None:
        """Submit every outline to the worker pool and save results as they finish."""
        config_dict = {
            "generation": self.config.generation.model_dump(),
            "coloring": self.config.coloring.model_dump(),
        }

        self.logger.info(
            "Starting parallel processing",
            glyph_count=len(outlines),
            max_workers=max_workers,
        )

        total = len(outlines)
        completed = 0
        pending_futures: dict[Future, str] = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for outline in outlines:
                self.processing_logger.log_glyph_start(outline.name)
                future = executor.submit(
                    process_glyph,
                    outline.shape.to_dict(),
                    config_dict,
                    outline.name,
                )
                pending_futures[future] = outline.name

            try:
                for future in as_completed(list(pending_futures)):
                    glyph_name = pending_futures.pop(future)
                    success = self._handle_result(future, glyph_name, output_dir)

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, glyph_name, success)

            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                for pending in pending_futures:
                    pending.cancel()
                self.processing_logger.log_cancelled(len(pending_futures))
                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(completed, len(pending_futures)) from e

    def _handle_result(self, future: Future, glyph_name: str, output_dir: Path) -> bool:
        """Save one worker result and record it in the statistics.

        Returns:
            True if the field was generated and saved
        """
        try:
            result = future.result()
        except Exception as e:
            # Worker crashed or could not unpickle the job
            self.processing_logger.log_glyph_error(
                glyph_name=glyph_name,
                error=e,
                traceback=traceback.format_exc(),
            )
            return False

        if "error" in result:
            self.processing_logger.log_glyph_error(
                glyph_name=result["glyph_name"],
                error=GlyphfieldError(result["error"]),
                traceback=result.get("traceback"),
            )
            return False

        bitmap = Bitmap.from_dict(result["bitmap"])
        try:
            self.save_outputs(bitmap, glyph_name, output_dir)
        except OutputError as e:
            self.processing_logger.log_glyph_error(glyph_name=glyph_name, error=e)
            return False

        self.processing_logger.log_glyph_complete(
            glyph_name=glyph_name,
            pixel_count=bitmap.width * bitmap.height,
            duration_ms=result.get("duration_ms", 0.0),
        )
        return True

    def save_outputs(self, bitmap: Bitmap, glyph_name: str, output_dir: Path) -> list[Path]:
        """Write a generated field, and its preview if configured.

        Args:
            bitmap: Generated field
            glyph_name: Glyph the field belongs to
            output_dir: Directory receiving the files

        Returns:
            Paths of the written files

        Raises:
            BitmapSaveError: If a file cannot be written
        """
        mode: FieldMode = self.config.generation.mode
        output_format: OutputFormat = self.config.processing.output_format
        path = BitmapWriter.get_output_path(output_dir, glyph_name, mode.value, output_format.value)
        if output_format == OutputFormat.NPY:
            BitmapWriter.save_numpy(bitmap, path)
        else:
            BitmapWriter.save(bitmap, path)
        written = [path]

        preview_size = self.config.processing.preview_size
        if preview_size is not None:
            preview = Bitmap(preview_size, preview_size, channels=1)
            render_sdf(preview, bitmap, self.config.generation.range)
            preview_path = BitmapWriter.get_output_path(
                output_dir, glyph_name, f"{mode.value}-preview", "png"
            )
            BitmapWriter.save(preview, preview_path)
            written.append(preview_path)

        return written
