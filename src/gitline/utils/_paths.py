"""Platform-specific locations for gitline files."""

from pathlib import Path

import platformdirs

APP_NAME = "gitline"


def get_user_config_path() -> Path:
    r"""Get the platform-specific user config file path.

    - Linux: ``~/.config/gitline/config.toml``
    - macOS: ``~/Library/Application Support/gitline/config.toml``
    - Windows: ``%APPDATA%\gitline\config.toml``

    The path is returned whether or not the file exists.
    """
    return platformdirs.user_config_path(APP_NAME) / "config.toml"


def get_default_log_file() -> Path:
    """Get the default log file path in the user log directory."""
    return platformdirs.user_log_path(APP_NAME) / "gitline.log"


def resolve_target_path(cwd: Path, path: Path | str | None = None) -> Path:
    """Resolve the directory a status line is requested for.

    An absolute ``path`` is used as is, a relative one is joined onto
    ``cwd``, and no ``path`` means ``cwd`` itself.

    Args:
        cwd: The absolute current working directory.
        path: Optional user-supplied path.

    Returns:
        Absolute path to start repository discovery from.

    Raises:
        ValueError: If ``cwd`` is not absolute.
    """
    if not cwd.is_absolute():
        msg = f"Working directory must be absolute: {cwd}"
        raise ValueError(msg)
    if path is None:
        return cwd
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return cwd / candidate
