"""Shared CLI utilities.

This module provides the exit codes and console helpers used by the
``gitline`` command.
"""

from enum import IntEnum

from rich.console import Console

__all__ = [
    "ExitCode",
    "get_error_console",
    "write_line",
]


class ExitCode(IntEnum):
    """Exit codes for the gitline CLI."""

    SUCCESS = 0
    INTERNAL_ERROR = 1
    CONFIG_ERROR = 2


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr."""
    return Console(stderr=True)


def write_line(console: Console, line: str) -> None:
    """Write ``line`` verbatim to the console's file.

    The status line may already carry ANSI escapes, so it bypasses Rich
    markup and wrapping.
    """
    console.file.write(f"{line}\n")
    console.file.flush()
