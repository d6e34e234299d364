"""Logging configuration utilities."""

import sys
from pathlib import Path

from loguru import logger

# Modules whose TRACE records carry the raw UCI conversation
PROTOCOL_LOGGER_PREFIX = "chessprep.engine"


def _make_filter(level: str, trace_protocol: bool):
    """Build a sink filter that lets protocol TRACE records through on demand."""
    min_no = logger.level(level).no

    def _filter(record) -> bool:
        if record["level"].no >= min_no:
            return True
        return trace_protocol and (record["name"] or "").startswith(PROTOCOL_LOGGER_PREFIX)

    return _filter


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "1 week",
    *,
    trace_protocol: bool = False,
) -> None:
    """Configure loguru for the application.

    Args:
        level: Minimum log level to display.
        log_file: Optional path to a log file.
        rotation: When to rotate the log file.
        retention: How long to keep old log files.
        trace_protocol: Also emit every UCI line sent to and received from
            the engine (TRACE level), regardless of ``level``.
    """
    # Remove default handler
    logger.remove()

    level = level.upper()
    log_filter = _make_filter(level, trace_protocol)

    logger.add(
        sys.stderr,
        level="TRACE",
        filter=log_filter,
        format=(
            "<green>{time:HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level="TRACE",
            filter=log_filter,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {process} | {name}:{function}:{line} | {message}",
            rotation=rotation,
            retention=retention,
            compression="gz",
        )

    logger.debug(f"Logging configured at level: {level} (protocol trace: {trace_protocol})")
