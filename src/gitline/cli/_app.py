"""The command-line interface for gitline."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

import os
from pathlib import Path
from typing import Annotated, Never

from cyclopts import App, Parameter
from rich.console import Console
from structlog.typing import FilteringBoundLogger

from gitline.config import ColorMode, Config, ConfigError, safe_load_config
from gitline.exceptions import NotARepositoryError
from gitline.sources import Backend, get_repo_state
from gitline.status import Marker, RenderOptions, render, render_marker
from gitline.utils import create_logger, create_null_logger, resolve_target_path

from ._shared import ExitCode, get_error_console, write_line

HELP = "Print a one-line summary of a git repository's status."


def _cli_overrides(
    *,
    backend: Backend | None,
    color: bool | None,
    sparse: bool | None,
    stash: bool | None,
) -> dict[str, object] | None:
    display: dict[str, object] = {}
    if color is not None:
        display["color"] = ColorMode.ALWAYS.value if color else ColorMode.NEVER.value
    if sparse is not None:
        display["sparse"] = sparse
    if stash is not None:
        display["show_stash"] = stash

    overrides: dict[str, object] = {}
    if display:
        overrides["display"] = display
    if backend is not None:
        overrides["status"] = {"backend": backend.value}
    return overrides or None


def _should_decorate(mode: ColorMode, console: Console) -> bool:
    match mode:
        case ColorMode.ALWAYS:
            return True
        case ColorMode.NEVER:
            return False
        case ColorMode.AUTO:
            return console.is_terminal and "NO_COLOR" not in os.environ


def _create_logger(config: Config, error_console: Console) -> FilteringBoundLogger:
    settings = config.logging
    try:
        return create_logger(
            level=settings.level.value,
            log_format=settings.format.value,  # type: ignore[arg-type]
            log_file=settings.file,
            enabled=settings.enabled,
        )
    except OSError as e:
        error_console.print(f"[yellow]Warning:[/yellow] logging disabled: {e}")
        return create_null_logger()


def run_status(
    path: Path | None,
    *,
    console: Console,
    error_console: Console,
    debug: bool = False,
    cli_overrides: dict[str, object] | None = None,
    config_path: Path | None = None,
) -> ExitCode:
    """Print the status line for ``path`` and return the exit code.

    Args:
        path: Directory to inspect, relative to the working directory.
        console: Console receiving the status line.
        error_console: Console receiving warnings and debug tracebacks.
        debug: Print a traceback when an error occurs.
        cli_overrides: Configuration overrides from command-line flags.
        config_path: Explicit config file.

    Returns:
        SUCCESS for a rendered line or ``[no repo]``; CONFIG_ERROR or
        INTERNAL_ERROR otherwise.
    """
    try:
        config, _ = safe_load_config(config_path=config_path, cli_overrides=cli_overrides)
    except ConfigError:
        if debug:
            error_console.print_exception()
        write_line(console, render_marker(Marker.ERROR))
        return ExitCode.CONFIG_ERROR

    logger = _create_logger(config, error_console)
    decorate = _should_decorate(config.display.color, console)
    options = RenderOptions(
        decorate=decorate,
        sparse=config.display.sparse,
        show_stash=config.display.show_stash,
        hash_length=config.display.hash_length,
    )

    target = resolve_target_path(Path.cwd(), path)
    try:
        state = get_repo_state(
            target,
            backend=config.status.backend,
            git=config.status.git,
            timeout_ms=config.status.timeout_ms,
            logger=logger,
        )
        line = render(state, options)
    except NotARepositoryError:
        write_line(console, render_marker(Marker.NO_REPO, decorate=decorate))
        return ExitCode.SUCCESS
    except Exception:  # noqa: BLE001
        logger.exception("classification_failed", path=str(target))
        if debug:
            error_console.print_exception()
        write_line(console, render_marker(Marker.ERROR, decorate=decorate))
        return ExitCode.INTERNAL_ERROR

    write_line(console, line)
    return ExitCode.SUCCESS


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the gitline application.

    The default command always finishes by raising SystemExit with an
    ExitCode.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = get_error_console()
    app = App(
        name="gitline",
        help=HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def _status(  # pyright: ignore[reportUnusedFunction]
        path: Annotated[
            Path | None, Parameter(help="Directory to inspect (default: current)")
        ] = None,
        *,
        debug: Annotated[
            bool, Parameter(negative="", help="Print a traceback on errors")
        ] = False,
        backend: Annotated[
            Backend | None, Parameter(help="Status source implementation")
        ] = None,
        color: Annotated[
            bool | None,
            Parameter(
                name="--color", negative="--plain", help="Force or disable ANSI colors"
            ),
        ] = None,
        sparse: Annotated[
            bool | None,
            Parameter(negative="", help="Condense same-name upstream branches"),
        ] = None,
        stash: Annotated[
            bool | None, Parameter(negative="", help="Show the stash count")
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
    ) -> Never:
        """Print the status line for PATH.

        Args:
            path: Directory to inspect.
            debug: Print a traceback to stderr when an error occurs.
            backend: Status source implementation.
            color: Force (--color) or disable (--plain) ANSI colors.
            sparse: Condense an upstream sharing the local branch name.
            stash: Append the stash count when non-zero.
            config: Explicit path to config file.
        """
        code = run_status(
            path,
            console=console,
            error_console=error_console,
            debug=debug,
            cli_overrides=_cli_overrides(
                backend=backend, color=color, sparse=sparse, stash=stash
            ),
            config_path=config,
        )
        raise SystemExit(code)

    return app


def main() -> None:
    """Default entrypoint for the `gitline` CLI."""
    app = create_app()
    app()


if __name__ == "__main__":
    main()
