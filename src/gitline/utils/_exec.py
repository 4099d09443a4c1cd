"""Subprocess execution for git commands.

Runs a command with a timeout and captures its output. Failures to spawn
or time-outs are reported through CommandResult rather than raised, so
callers decide which outcomes are errors.
"""

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

# Default timeout in milliseconds
DEFAULT_TIMEOUT_MS: int = 5000


@dataclass(frozen=True, slots=True)
class CommandConfig:
    """Configuration for command execution.

    Attributes:
        args: Program and arguments.
        cwd: Working directory for execution.
        env: Additional environment variables to set.
        timeout_ms: Execution timeout in milliseconds.
    """

    args: tuple[str, ...]
    cwd: str | Path | None = None
    env: dict[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result from command execution.

    Attributes:
        success: Whether the command ran and exited with status 0.
        exit_code: Process exit code, or None if the process did not run.
        stdout: Standard output decoded as UTF-8 (invalid bytes replaced).
        stdout_bytes: Standard output as raw bytes, for strict decoding.
        stderr: Standard error decoded as UTF-8 (invalid bytes replaced).
        error: Error message if execution failed (timeout, not found, etc.).
        timed_out: Whether the command timed out.
        command_not_found: Whether the program was not found.
    """

    success: bool
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    stdout_bytes: bytes = b""
    error: str | None = None
    timed_out: bool = False
    command_not_found: bool = False


def run_command(config: CommandConfig) -> CommandResult:
    """Execute a command and capture its output.

    Args:
        config: Command configuration specifying args, env, cwd and timeout.

    Returns:
        CommandResult with the execution outcome.
    """
    if not config.args:
        return CommandResult(success=False, error="No command specified")

    env = {**os.environ, **config.env}
    cwd = str(config.cwd) if config.cwd else None
    timeout_seconds = config.timeout_ms / 1000.0

    try:
        result = subprocess.run(  # noqa: S603
            config.args,
            env=env,
            cwd=cwd,
            capture_output=True,
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            success=False,
            error=f"Command timed out after {timeout_seconds}s",
            timed_out=True,
        )
    except FileNotFoundError as e:
        return CommandResult(success=False, error=str(e), command_not_found=True)
    except OSError as e:
        return CommandResult(success=False, error=str(e))

    return CommandResult(
        success=result.returncode == 0,
        exit_code=result.returncode,
        stdout=result.stdout.decode("utf-8", errors="replace"),
        stderr=result.stderr.decode("utf-8", errors="replace"),
        stdout_bytes=result.stdout,
    )
