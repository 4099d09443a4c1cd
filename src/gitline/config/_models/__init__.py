"""Configuration models."""

from gitline.config._models._common import (
    ColorMode,
    ConfigSource,
    ConfigSourceName,
    LogFormat,
    LogLevel,
)
from gitline.config._models._config import Config
from gitline.config._models._display import DisplayConfig
from gitline.config._models._logging import LoggingConfig
from gitline.config._models._status import StatusConfig

__all__ = [
    "ColorMode",
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "DisplayConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StatusConfig",
]
