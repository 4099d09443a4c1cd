"""Utilities for gitline: paths, logging, and command execution."""

from ._exec import DEFAULT_TIMEOUT_MS, CommandConfig, CommandResult, run_command
from ._logging import LogFormatType, create_logger, create_null_logger
from ._paths import (
    APP_NAME,
    get_default_log_file,
    get_user_config_path,
    resolve_target_path,
)

__all__ = [
    "APP_NAME",
    "DEFAULT_TIMEOUT_MS",
    "CommandConfig",
    "CommandResult",
    "LogFormatType",
    "create_logger",
    "create_null_logger",
    "get_default_log_file",
    "get_user_config_path",
    "resolve_target_path",
    "run_command",
]
