# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the Config class, the single object the CLI reads its
settings from.
"""

from pathlib import Path
from typing import Any, ClassVar, Self, TypeVar, overload

from pydantic import BaseModel, ConfigDict, PrivateAttr

from gitline.config._defaults import DEFAULT_CONFIG
from gitline.config._loader import copy_value, deep_merge, parse_env_vars, read_toml_file
from gitline.config._models._common import ConfigSource, ConfigSourceName
from gitline.config._models._display import DisplayConfig
from gitline.config._models._logging import LoggingConfig
from gitline.config._models._status import StatusConfig

T = TypeVar("T")


class Config(BaseModel):
    """Configuration container with typed access.

    Use the factory methods (from_dict, from_file, load) rather than the
    constructor.

    Example:
        >>> config = Config.from_dict({"display": {"sparse": True}})
        >>> config.display.sparse
        True
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _display: DisplayConfig = PrivateAttr(default_factory=DisplayConfig)
    _status: StatusConfig = PrivateAttr(default_factory=StatusConfig)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _logging: LoggingConfig | None = None,
        _display: DisplayConfig | None = None,
        _status: StatusConfig | None = None,
    ) -> None:
        super().__init__()
        self._data = _data if _data is not None else copy_value(DEFAULT_CONFIG)
        self._sources = _sources
        self._logging = _logging if _logging is not None else LoggingConfig()
        self._display = _display if _display is not None else DisplayConfig()
        self._status = _status if _status is not None else StatusConfig()

    @classmethod
    def _build(cls, merged: dict[str, Any], sources: tuple[ConfigSource, ...]) -> Self:
        # Deferred import to avoid circular dependency
        from gitline.config._validation import parse_config  # noqa: PLC0415

        schema = parse_config(merged)

        return cls(
            _data=merged,
            _sources=sources,
            _logging=schema.logging,
            _display=schema.display,
            _status=schema.status,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return cls._build(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file merged over the defaults.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.USER, path=path, exists=True, values=data
        )
        return cls._build(deep_merge(DEFAULT_CONFIG, data), (source,))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Sources are merged in precedence order (defaults -> user file ->
        env -> cli).

        Args:
            config_path: Config file to read instead of the user config.
            include_env: Include ``GITLINE_<SECTION>__<KEY>`` variables.
            include_cli: Include CLI overrides.
            cli_overrides: Dict of CLI argument overrides. Only used if
                include_cli is True.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If the config file cannot be parsed.
            ConfigValidationError: If merged config fails validation.
        """
        # Deferred import to avoid circular dependency
        from gitline.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            config_path=config_path,
            include_env=include_env,
            include_cli=include_cli,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        # Discovered highest-to-lowest, merged lowest-to-highest
        for source in reversed(sources):
            values: dict[str, Any] = {}
            match source.name:
                case ConfigSourceName.DEFAULT | ConfigSourceName.CLI:
                    values = source.values
                case ConfigSourceName.ENV:
                    values = parse_env_vars()
                case ConfigSourceName.USER if source.path and source.exists:
                    values = read_toml_file(source.path)
                case _:
                    pass

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        return cls._build(merged, tuple(reversed(loaded_sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed, highest precedence first."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._logging

    @property
    def display(self) -> DisplayConfig:
        """Return the display configuration section."""
        return self._display

    @property
    def status(self) -> StatusConfig:
        """Return the status acquisition configuration section."""
        return self._status

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("display.color")
            'always'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration dictionary."""
        return copy_value(self._data)
