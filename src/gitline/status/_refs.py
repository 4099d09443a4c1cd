"""Reference identity value types.

Commits, tags, upstream branches, divergence and local branches, as
immutable values with their construction invariants enforced.
"""

import re
from dataclasses import dataclass
from typing import Self

_HEX_SHA_RE = re.compile(r"[0-9a-f]{40}")
_BINARY_SHA_LENGTH = 20

# Placeholder shown instead of the upstream branch name in sparse mode
SPARSE_PLACEHOLDER = "~"


@dataclass(frozen=True, slots=True)
class CommitRef:
    """A commit identified by its full 40-character hex SHA.

    Attributes:
        sha: Lowercase hex object id.
    """

    sha: str

    def __post_init__(self) -> None:
        if _HEX_SHA_RE.fullmatch(self.sha) is None:
            msg = f"Commit id must be 40 lowercase hex characters, got {self.sha!r}"
            raise ValueError(msg)

    @classmethod
    def parse(cls, value: str | bytes) -> Self:
        """Build a CommitRef from textual, hex-bytes or binary object ids.

        Args:
            value: A hex string, hex-encoded bytes, or a 20-byte binary id.

        Returns:
            The parsed commit reference.

        Raises:
            ValueError: If the value is not a valid object id.
        """
        if isinstance(value, bytes):
            if len(value) == _BINARY_SHA_LENGTH:
                return cls(value.hex())
            try:
                value = value.decode("ascii")
            except UnicodeDecodeError as e:
                msg = f"Commit id is not ASCII: {value!r}"
                raise ValueError(msg) from e
        return cls(value.strip().lower())

    def short(self, length: int = 7) -> str:
        """Return the SHA truncated to at most ``length`` characters."""
        return self.sha[: max(1, min(length, len(self.sha)))]

    def __str__(self) -> str:
        return self.sha


@dataclass(frozen=True, slots=True)
class Tag:
    """A tag name (without the ``refs/tags/`` prefix)."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            msg = "Tag name must not be empty"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.name


# What a detached HEAD points at
type DetachedRef = CommitRef | Tag


@dataclass(frozen=True, slots=True)
class RemoteBranch:
    """An upstream tracking branch.

    Attributes:
        remote: Remote name, or ``"."`` for a local upstream.
        branch: Branch name on the remote.
    """

    remote: str
    branch: str

    @property
    def ref(self) -> str:
        """Full reference name of the tracking branch."""
        if self.remote == ".":
            return f"refs/heads/{self.branch}"
        return f"refs/remotes/{self.remote}/{self.branch}"

    def __str__(self) -> str:
        return f"{self.remote}/{self.branch}"


@dataclass(frozen=True, slots=True)
class Divergence:
    """Commits ahead of and behind the upstream tip.

    Never constructed with both counts zero; absence of divergence is
    represented by ``None``.
    """

    ahead: int
    behind: int

    def __post_init__(self) -> None:
        if self.ahead < 0 or self.behind < 0:
            msg = f"Divergence counts must not be negative: {self.ahead}, {self.behind}"
            raise ValueError(msg)
        if self.ahead == 0 and self.behind == 0:
            msg = "Divergence requires a non-zero ahead or behind count"
            raise ValueError(msg)

    @classmethod
    def of(cls, ahead: int, behind: int) -> Self | None:
        """Return a Divergence, or None when both counts are zero."""
        if ahead == 0 and behind == 0:
            return None
        return cls(ahead=ahead, behind=behind)


@dataclass(frozen=True, slots=True)
class Branch:
    """A local branch with its optional upstream and divergence.

    Attributes:
        local: Local branch name (without ``refs/heads/``).
        remote: Upstream tracking branch, or None if none is configured.
        divergence: Ahead/behind counts, or None when in sync. Only set
            when ``remote`` is set.
    """

    local: str
    remote: RemoteBranch | None = None
    divergence: Divergence | None = None

    def __post_init__(self) -> None:
        if self.divergence is not None and self.remote is None:
            msg = f"Branch {self.local!r} has a divergence but no upstream"
            raise ValueError(msg)

    @property
    def tracks_same_name(self) -> bool:
        """Whether the upstream branch has the same name as the local one."""
        return self.remote is not None and self.remote.branch == self.local

    def __str__(self) -> str:
        return self.local


# One side of an in-progress merge or rebase: a branch name (no upstream
# information) when one resolves, otherwise the raw commit
type ConflictRef = CommitRef | Branch
