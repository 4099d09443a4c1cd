"""Logging utilities for gitline.

This module provides standalone structlog logger factories. Loggers write
JSON-formatted or text-formatted records to a log file and never to
standard output, which carries the status line. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
from os import getenv
from pathlib import Path
from typing import Literal, cast

import structlog
from structlog.typing import FilteringBoundLogger

from ._paths import get_default_log_file

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, GITLINE_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer, WARNING for unknown names.
    """
    if respect_env and getenv("GITLINE_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def _create_logger(
    log_file_path: str,
    *,
    log_level: int = logging.WARNING,
    log_format: LogFormatType = "json",
) -> FilteringBoundLogger:
    """Create a standalone structlog logger appending to the specified file.

    Args:
        log_file_path: Path to the log file (created with its parent
            directory if missing).
        log_level: Minimum level that is written.
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.
    """
    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
        ),
    )


def create_null_logger() -> FilteringBoundLogger:
    """Create a logger that discards every event."""
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            processors=[],
            wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
            context_class=dict,
        ),
    )


def create_logger(
    *,
    level: str = "warning",
    log_format: LogFormatType = "json",
    log_file: str = "",
    enabled: bool = True,
) -> FilteringBoundLogger:
    """Create the gitline logger.

    The log level can be overridden by the GITLINE_DEBUG environment
    variable, which enables DEBUG regardless of configuration.

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to the log file (uses the user log directory if empty).
        enabled: When False, return a logger that discards everything.

    Returns:
        A FilteringBoundLogger instance.
    """
    if not enabled:
        return create_null_logger()

    effective_file = log_file if log_file else str(get_default_log_file())
    return _create_logger(
        effective_file,
        log_level=_log_level_from_string(level, respect_env=True),
        log_format=log_format,
    )
