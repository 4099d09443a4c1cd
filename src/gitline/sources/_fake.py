# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake status source for testing.

This module provides a FakeSource class that implements StatusSource
without requiring an actual Git repository.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self

from gitline.status import (
    CommitRef,
    ConflictKind,
    EntryKind,
    Head,
    RemoteBranch,
    StatusEntry,
    Tag,
)


@dataclass(slots=True)
class FakeSource:
    """Fake status source for testing.

    Every query answers from a plain field, so tests can set up any
    repository state by assignment. Helper methods cover the common cases.

    Example:
        >>> source = FakeSource(head_ref=Head(commit=CommitRef("a" * 40), branch="main"))
        >>> source.add_entry(EntryKind.UNTRACKED, path="new.txt")
        >>> render(classify(source))
        'main[-] :: w[+1]'
    """

    root: Path = field(default_factory=lambda: Path("/fake/project"))
    head_ref: Head = field(default_factory=lambda: Head(commit=None, branch="main"))
    status_entries: list[StatusEntry] = field(default_factory=list)
    upstreams: dict[str, RemoteBranch] = field(default_factory=dict)
    divergences: dict[str, tuple[int, int]] = field(default_factory=dict)
    tag: Tag | None = None
    markers: dict[ConflictKind, CommitRef] = field(default_factory=dict)
    branch_tips: dict[str, CommitRef] = field(default_factory=dict)
    stash: int = 0
    closed: bool = False

    def add_entry(
        self,
        kind: EntryKind,
        index: str = ".",
        worktree: str = ".",
        *,
        path: str = "file.txt",
        submodule: str = "N...",
    ) -> StatusEntry:
        """Append a status entry and return it."""
        entry = StatusEntry(
            kind=kind, index=index, worktree=worktree, submodule=submodule, path=path
        )
        self.status_entries.append(entry)
        return entry

    def set_upstream(
        self, branch: str, upstream: RemoteBranch, ahead: int = 0, behind: int = 0
    ) -> None:
        """Configure ``upstream`` for ``branch`` with the given divergence."""
        self.upstreams[branch] = upstream
        self.divergences[branch] = (ahead, behind)

    def entries(self) -> Iterator[StatusEntry]:
        return iter(list(self.status_entries))

    def head(self) -> Head:
        return self.head_ref

    def upstream(self, branch: str) -> RemoteBranch | None:
        return self.upstreams.get(branch)

    def divergence(self, branch: str, upstream: RemoteBranch) -> tuple[int, int]:
        if self.upstreams.get(branch) != upstream:
            return 0, 0
        return self.divergences.get(branch, (0, 0))

    def tag_at_head(self) -> Tag | None:
        return self.tag

    def conflict_marker(self, kind: ConflictKind) -> CommitRef | None:
        return self.markers.get(kind)

    def branches_at(self, commit: CommitRef) -> list[str]:
        return sorted(name for name, tip in self.branch_tips.items() if tip == commit)

    def stash_count(self) -> int:
        return self.stash

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
