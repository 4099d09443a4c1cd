"""Logging configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from gitline.config._models._common import LogFormat, LogLevel


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses the user log directory).
        enabled: Whether to write a log file at all.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.JSON
    file: str = ""
    enabled: bool = True
