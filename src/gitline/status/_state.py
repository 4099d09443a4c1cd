"""Repository state variants.

A classification run produces exactly one of Headless, Clean, Detached,
Working or Conflicted. RepoState is the closed union of these; consumers
match on it and use ``assert_never`` on the fall-through branch.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from gitline.status._changes import ChangeCounts
from gitline.status._refs import Branch, ConflictRef, DetachedRef


class ConflictKind(StrEnum):
    """Operation that left unresolved conflicts behind."""

    MERGE = "merge"
    REBASE = "rebase"


@dataclass(frozen=True, slots=True)
class Headless:
    """No commits exist yet (unborn HEAD)."""

    working_tree: ChangeCounts = field(default_factory=ChangeCounts)
    index: ChangeCounts = field(default_factory=ChangeCounts)
    stash: int = 0


@dataclass(frozen=True, slots=True)
class Clean:
    """On a branch with no changes and no conflicts."""

    branch: Branch
    stash: int = 0


@dataclass(frozen=True, slots=True)
class Detached:
    """HEAD points at a commit or tag rather than a branch."""

    head: DetachedRef
    working_tree: ChangeCounts = field(default_factory=ChangeCounts)
    index: ChangeCounts = field(default_factory=ChangeCounts)
    stash: int = 0


@dataclass(frozen=True, slots=True)
class Working:
    """On a branch with staged or unstaged changes."""

    branch: Branch
    working_tree: ChangeCounts = field(default_factory=ChangeCounts)
    index: ChangeCounts = field(default_factory=ChangeCounts)
    stash: int = 0


@dataclass(frozen=True, slots=True)
class Conflicted:
    """An unresolved merge or rebase is in progress.

    Attributes:
        kind: Whether a merge or a rebase produced the conflicts.
        source: The local side (HEAD, or the rebase anchor).
        target: The side named by the merge/rebase marker.
        working_tree: Unstaged changes outside the conflicted paths.
        index: Staged changes outside the conflicted paths.
        conflicts: Number of conflicted paths, always positive.
        stash: Number of stash entries.
    """

    kind: ConflictKind
    source: ConflictRef
    target: ConflictRef
    conflicts: int
    working_tree: ChangeCounts = field(default_factory=ChangeCounts)
    index: ChangeCounts = field(default_factory=ChangeCounts)
    stash: int = 0

    def __post_init__(self) -> None:
        if self.conflicts <= 0:
            msg = f"Conflicted state requires a positive conflict count: {self.conflicts}"
            raise ValueError(msg)
        for side in (self.source, self.target):
            if isinstance(side, Branch) and side.remote is not None:
                msg = f"Conflict endpoint {side.local!r} must not carry upstream info"
                raise ValueError(msg)


type RepoState = Headless | Clean | Detached | Working | Conflicted
