"""Configuration source discovery.

gitline reads at most one configuration file: the platform user config
(``~/.config/gitline/config.toml`` on Linux) or an explicit ``--config``
path, layered between the built-in defaults and environment variables.
"""

from pathlib import Path
from typing import Any

from gitline.utils import get_user_config_path

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName


def _file_exists(path: Path) -> bool:
    """Check if a file exists, treating permission errors as absence."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    *,
    config_path: Path | None = None,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Args:
        config_path: Explicit config file replacing the user config.
        include_env: Include environment variables as a source.
        include_cli: Include CLI overrides as a source.
        cli_overrides: Dictionary of CLI argument overrides. Only used
            if include_cli is True.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
        Sources that don't exist are still included with exists=False.

    Examples:
        >>> [source.name.value for source in discover_sources()]
        ['env', 'user', 'default']
    """
    sources: list[ConfigSource] = []

    if include_cli:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides or {},
            )
        )

    if include_env:
        # Values are parsed during loading
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )

    user_path = config_path if config_path is not None else get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
