# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""Status source protocol.

Both acquisition strategies (the ``git status`` porcelain reader and the
in-process dulwich reader) satisfy StatusSource, so the classifier never
depends on a concrete backend.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from types import TracebackType
from typing import Protocol, Self, runtime_checkable

from gitline.status._refs import CommitRef, RemoteBranch, Tag
from gitline.status._state import ConflictKind

# Submodule field of a non-submodule entry in porcelain v2 output
NOT_SUBMODULE = "N..."


class EntryKind(StrEnum):
    """Porcelain v2 line type of a status entry."""

    ORDINARY = "1"
    RENAMED = "2"
    UNMERGED = "u"
    UNTRACKED = "?"
    IGNORED = "!"


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One path reported by the status source.

    Attributes:
        kind: Entry line type.
        index: Index-side status letter (``.`` when unchanged).
        worktree: Worktree-side status letter (``.`` when unchanged).
        submodule: Four-character submodule state, ``N...`` for plain files.
        path: Repository-relative path, informational only.
    """

    kind: EntryKind
    index: str = "."
    worktree: str = "."
    submodule: str = NOT_SUBMODULE
    path: str = ""

    @property
    def is_submodule(self) -> bool:
        return self.submodule != NOT_SUBMODULE


@dataclass(frozen=True, slots=True)
class Head:
    """Where HEAD points.

    Attributes:
        commit: Commit HEAD resolves to, or None when HEAD is unborn.
        branch: Branch name HEAD is attached to, or None when detached.
    """

    commit: CommitRef | None
    branch: str | None


@runtime_checkable
class StatusSource(Protocol):
    """Read-only view of a repository used by the classifier.

    Example:
        >>> with open_source(Path.cwd()) as source:
        ...     state = classify(source)
    """

    @property
    def root(self) -> Path:
        """Working tree root of the discovered repository."""
        ...

    def entries(self) -> Iterable[StatusEntry]:
        """Yield every reported path once."""
        ...

    def head(self) -> Head:
        """Resolve HEAD."""
        ...

    def upstream(self, branch: str) -> RemoteBranch | None:
        """Return the configured upstream of ``branch``, if any."""
        ...

    def divergence(self, branch: str, upstream: RemoteBranch) -> tuple[int, int]:
        """Count commits (ahead, behind) of ``branch`` relative to ``upstream``.

        Returns ``(0, 0)`` when in sync or when the upstream ref is missing.
        """
        ...

    def tag_at_head(self) -> Tag | None:
        """Return a tag whose target is the HEAD commit, if any."""
        ...

    def conflict_marker(self, kind: ConflictKind) -> CommitRef | None:
        """Return the commit named by the merge or rebase marker, if present."""
        ...

    def branches_at(self, commit: CommitRef) -> list[str]:
        """Return sorted local branch names whose tip is ``commit``."""
        ...

    def stash_count(self) -> int:
        """Return the number of stash entries."""
        ...

    def close(self) -> None:
        """Release resources held by the source."""
        ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
