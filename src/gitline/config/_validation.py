# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownVariableType=false
"""Configuration validation using Pydantic schemas.

Unknown sections and keys are ignored so that configuration files written
for newer versions keep working.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import ErrorDetails

from gitline.config._models._display import DisplayConfig
from gitline.config._models._logging import LoggingConfig
from gitline.config._models._status import StatusConfig
from gitline.exceptions import ConfigValidationError


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """Represents a configuration validation issue.

    Attributes:
        key: Dotted path to the configuration key (e.g., "display.color").
        message: Human-readable description of the issue.
        expected: Description of expected value or type, if available.
        actual: The actual value that caused the issue.
        severity: Whether this is an error or warning.
    """

    key: str
    message: str
    expected: str | None
    actual: Any
    severity: Literal["error", "warning"]


class ConfigSchema(BaseModel):
    """Pydantic schema for the root configuration."""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    display: DisplayConfig = DisplayConfig()
    status: StatusConfig = StatusConfig()


def _pydantic_error_to_issue(error: ErrorDetails) -> ValidationIssue:
    """Convert a Pydantic error dict to a ValidationIssue."""
    key = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "Validation error"))

    ctx = error.get("ctx")
    expected: str | None = None
    if ctx is not None:
        if "expected" in ctx:
            expected = str(ctx["expected"])
        elif "ge" in ctx or "le" in ctx or "gt" in ctx:
            expected = message

    return ValidationIssue(
        key=key,
        message=message,
        expected=expected,
        actual=error.get("input"),
        severity="error",
    )


def validate_config(config: dict[str, Any]) -> list[ValidationIssue]:
    """Validate a merged configuration dictionary.

    Args:
        config: The merged configuration dictionary to validate.

    Returns:
        List of ValidationIssue objects. Empty list indicates valid config.
    """
    try:
        _ = ConfigSchema.model_validate(config)
    except ValidationError as e:
        return [_pydantic_error_to_issue(err) for err in e.errors()]
    else:
        return []


def parse_config(config: dict[str, Any]) -> ConfigSchema:
    """Parse a merged configuration dictionary into its typed sections.

    Raises:
        ConfigValidationError: If the configuration is invalid.
    """
    try:
        return ConfigSchema.model_validate(config)
    except ValidationError as e:
        raise_if_validation_errors([_pydantic_error_to_issue(err) for err in e.errors()])
        raise  # pragma: no cover


def raise_if_validation_errors(issues: list[ValidationIssue]) -> None:
    """Raise ConfigValidationError for the first error in ``issues``.

    Raises:
        ConfigValidationError: If any issues have severity="error".
    """
    errors = [i for i in issues if i.severity == "error"]
    if errors:
        issue = errors[0]
        msg = f"Invalid configuration value for '{issue.key}': {issue.message}"
        raise ConfigValidationError(
            msg,
            key=issue.key,
            value=issue.actual,
            expected=issue.expected or issue.message,
        )
