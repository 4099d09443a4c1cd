"""gitline configuration.

This module provides the public API for gitline configuration management:
layered loading (defaults, user TOML file, ``GITLINE_*`` environment
variables, CLI overrides), validation, and typed access to the values.

Example:
    >>> from gitline.config import Config
    >>> config = Config.load()
    >>> config.display.color
    <ColorMode.ALWAYS: 'always'>
"""

from gitline.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources
from ._load import safe_load_config
from ._loader import ENV_PREFIX, deep_merge, parse_env_vars, read_toml_file, set_nested_key
from ._models import (
    ColorMode,
    Config,
    ConfigSource,
    ConfigSourceName,
    DisplayConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StatusConfig,
)
from ._validation import ConfigSchema, ValidationIssue, parse_config, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "ColorMode",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSchema",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "DisplayConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StatusConfig",
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "parse_config",
    "parse_env_vars",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
]
