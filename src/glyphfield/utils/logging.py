"""Structured logging setup and run statistics.

configure_logging() wires structlog to the standard library handlers;
ProcessingLogger turns per-glyph events into log lines and ProcessingStats.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Counters and timings collected over one generation run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    cancelled_count: int = 0
    was_cancelled: bool = False
    pixels_generated: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    glyph_timings_ms: dict[str, float] = field(default_factory=dict)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Wall-clock duration of the run, 0.0 while it is still running."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_glyph_ms(self) -> float:
        """Average generation time per processed glyph."""
        if not self.glyph_timings_ms:
            return 0.0
        return sum(self.glyph_timings_ms.values()) / len(self.glyph_timings_ms)

    @property
    def min_glyph_ms(self) -> float:
        """Fastest glyph generation time."""
        return min(self.glyph_timings_ms.values(), default=0.0)

    @property
    def max_glyph_ms(self) -> float:
        """Slowest glyph generation time."""
        return max(self.glyph_timings_ms.values(), default=0.0)


# Handlers installed by the last configure_logging call
_installed_handlers: list[logging.Handler] = []

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(),
]


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def default_log_path() -> Path:
    """Timestamped log file name in the working directory."""
    return Path(f"glyphfield_{datetime.now():%Y%m%d_%H%M%S}.log")


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Route structlog events to a log file and, unless quiet, stderr.

    Events are rendered as JSON lines. Calling this again replaces the
    handlers installed by the previous call.

    Args:
        log_file: Destination file, see default_log_path() when omitted
        console_level: Minimum level echoed to the console
        file_level: Minimum level written to the file
        quiet: Skip the console handler entirely

    Returns:
        Logger bound to the "glyphfield" name

    Raises:
        ValueError: If a level name is not a logging level
    """
    log_file = log_file or default_log_path()

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(_level(file_level))
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    _installed_handlers.append(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(console_level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        _installed_handlers.append(console_handler)

    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.addHandler(handler)

    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("glyphfield")
    logger.info("Logging configured", log_file=str(log_file), file_level=file_level)
    return logger


class ProcessingLogger:
    """Logs glyph events and updates the matching ProcessingStats counters."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_glyph_start(self, glyph_name: str) -> None:
        """Log that a glyph was handed to a worker."""
        self._logger.debug("Processing glyph", glyph=glyph_name)

    def log_glyph_complete(
        self,
        glyph_name: str,
        pixel_count: int,
        duration_ms: float,
    ) -> None:
        """Log a saved field and record its timing."""
        self._logger.info(
            "Glyph processed",
            glyph=glyph_name,
            pixels=pixel_count,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.pixels_generated += pixel_count
        self._stats.glyph_timings_ms[glyph_name] = duration_ms

    def log_glyph_skipped(self, glyph_name: str, reason: str) -> None:
        """Log a glyph that produced no field."""
        self._logger.debug("Glyph skipped", glyph=glyph_name, reason=reason)
        self._stats.skipped_count += 1

    def log_glyph_error(
        self,
        glyph_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log a failed glyph and keep its message for the report."""
        self._logger.error(
            "Glyph processing failed",
            glyph=glyph_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((glyph_name, str(error)))

    def log_shape_summary(
        self,
        glyph_name: str,
        contour_count: int,
        edge_count: int,
        bounds: tuple[float, float, float, float],
    ) -> None:
        """Log the geometry a field is generated from."""
        self._logger.debug(
            "Shape loaded",
            glyph=glyph_name,
            contours=contour_count,
            edges=edge_count,
            bounds=[round(v, 2) for v in bounds],
        )

    def log_cancelled(self, pending_count: int) -> None:
        """Log cancellation of the remaining glyphs."""
        self._logger.warning("Processing cancelled", pending=pending_count)
        self._stats.was_cancelled = True
        self._stats.cancelled_count += pending_count

    @property
    def stats(self) -> ProcessingStats:
        """Statistics of the current run."""
        return self._stats
