import os
import sys
from pathlib import Path

from gitline.exceptions import ConfigError, ConfigLoadError

from ._models import Config


def safe_load_config(
    *,
    config_path: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Attempts to load configuration and handles errors based on the
    GITLINE_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and return the default config
    - If "1": re-raise the error for the caller to report

    When config_path is provided, the file must exist (explicit user request).

    Args:
        config_path: Explicit path to config file (--config flag).
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
        On failure (non-strict mode), returns default Config with error message.

    Raises:
        ConfigError: In strict mode, or when an explicit config_path is missing.
    """
    strict_mode = os.environ.get("GITLINE_STRICT_CONFIG", "0") == "1"

    if config_path is not None and not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigLoadError(msg, path=config_path)

    try:
        config = Config.load(
            config_path=config_path,
            include_env=True,
            include_cli=cli_overrides is not None,
            cli_overrides=cli_overrides,
        )
    except ConfigError as e:
        if strict_mode:
            raise
        error_msg = str(e)
    except OSError as e:
        if strict_mode:
            msg = f"Failed to load config: {e}"
            raise ConfigLoadError(msg, path=config_path) from e
        error_msg = f"Failed to load config: {e}"
    else:
        return config, None

    print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
    return Config(), error_msg
