"""gitline exceptions."""

from pathlib import Path


class GitlineError(Exception):
    """Base exception for gitline errors."""


class StatusError(GitlineError):
    """Base exception for repository status errors."""


class NotARepositoryError(StatusError):
    """No repository exists at or above the requested path."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        """Initialize with error message and the path that was searched."""
        super().__init__(message)
        self.path: Path | None = path


class AcquisitionError(StatusError):
    """Raised when the repository data source cannot be queried.

    Covers process spawn failures, timeouts, corrupt repository metadata and
    I/O errors while reading marker files.
    """

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] | None = None,
        stderr: str | None = None,
    ) -> None:
        """Initialize with error message and optional command context.

        Args:
            message: Human-readable description of the failure.
            command: The command that was run, if the failure came from git.
            stderr: Standard error captured from the command.
        """
        super().__init__(message)
        self.command: tuple[str, ...] | None = command
        self.stderr: str | None = stderr


class InconsistentStateError(StatusError):
    """Repository state violates an assumption of the classifier.

    For example a non-zero conflict tally with neither a merge nor a rebase
    marker present.
    """


class RefEncodingError(StatusError):
    """A reference name is not representable as text."""

    def __init__(self, message: str, *, raw: bytes) -> None:
        """Initialize with error message and the undecodable value."""
        super().__init__(message)
        self.raw: bytes = raw


class ConfigError(GitlineError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and file location context.

        Args:
            message: Human-readable error message.
            path: Path to the config file that failed to load.
            line: Line number where the error occurred (1-indexed).
            column: Column number where the error occurred (1-indexed).
        """
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column

    def __str__(self) -> str:
        """Return error message with location context."""
        parts = [super().__str__()]
        if self.path is not None:
            location = str(self.path)
            if self.line is not None:
                location += f":{self.line}"
                if self.column is not None:
                    location += f":{self.column}"
            parts.append(f"({location})")
        return " ".join(parts)


class ConfigValidationError(ConfigError):
    """Raised when configuration values fail validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        value: object = None,
        expected: str | None = None,
    ) -> None:
        """Initialize with error message and validation context.

        Args:
            message: Human-readable error message.
            key: Dotted configuration key that failed validation.
            value: The offending value.
            expected: Description of the expected value.
        """
        super().__init__(message)
        self.key: str | None = key
        self.value: object = value
        self.expected: str | None = expected
