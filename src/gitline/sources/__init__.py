"""Status sources: the backends that read repository data.

Classes:
    PorcelainSource: Reads ``git status --porcelain=v2`` output.
    DulwichSource: Reads the repository in-process through dulwich.
    FakeSource: In-memory source for tests.

Functions:
    open_source: Open a source for a directory with the chosen backend.
    get_repo_state: Open a source, classify it and close it.

Example:
    >>> from gitline.sources import Backend, get_repo_state
    >>> get_repo_state(Path.cwd(), backend=Backend.DULWICH)
    Clean(branch=Branch(local='main', remote=None, divergence=None), stash=0)
"""

from enum import StrEnum
from pathlib import Path

from structlog.typing import FilteringBoundLogger

from gitline.sources._dulwich import DulwichSource
from gitline.sources._fake import FakeSource
from gitline.sources._porcelain import PorcelainSource, StatusSnapshot, parse_status
from gitline.status import RepoState, StatusSource, classify
from gitline.utils import DEFAULT_TIMEOUT_MS, create_null_logger


class Backend(StrEnum):
    """Available status source implementations."""

    PORCELAIN = "porcelain"
    DULWICH = "dulwich"


def open_source(
    path: Path,
    *,
    backend: Backend = Backend.PORCELAIN,
    git: str = "git",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    logger: FilteringBoundLogger | None = None,
) -> StatusSource:
    """Open a status source for the repository containing ``path``.

    Args:
        path: Absolute directory to start repository discovery from.
        backend: Which implementation to use.
        git: Git executable (porcelain backend only).
        timeout_ms: Per-command timeout (porcelain backend only).
        logger: Logger passed to the source.

    Returns:
        An open status source; close it or use it as a context manager.

    Raises:
        NotARepositoryError: If no repository contains ``path``.
        AcquisitionError: If the repository cannot be opened.
    """
    match backend:
        case Backend.PORCELAIN:
            return PorcelainSource(path, git=git, timeout_ms=timeout_ms, logger=logger)
        case Backend.DULWICH:
            return DulwichSource(path, logger=logger)


def get_repo_state(
    path: Path,
    *,
    backend: Backend = Backend.PORCELAIN,
    git: str = "git",
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    logger: FilteringBoundLogger | None = None,
) -> RepoState:
    """Classify the repository containing ``path``.

    Raises:
        NotARepositoryError: If no repository contains ``path``.
        StatusError: If reading or classifying the repository fails.
    """
    log = logger if logger is not None else create_null_logger()
    with open_source(
        path, backend=backend, git=git, timeout_ms=timeout_ms, logger=log
    ) as source:
        return classify(source, logger=log)


__all__ = [
    "Backend",
    "DulwichSource",
    "FakeSource",
    "PorcelainSource",
    "StatusSnapshot",
    "get_repo_state",
    "open_source",
    "parse_status",
]
