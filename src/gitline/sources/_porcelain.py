"""Status source backed by the ``git`` executable.

Runs ``git status --porcelain=v2 --branch --show-stash`` once and answers
the StatusSource queries from the parsed output, falling back to small
``git for-each-ref`` calls for branch and tag lookups.
"""

import re
from collections import defaultdict
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self

from structlog.typing import FilteringBoundLogger

from gitline.exceptions import AcquisitionError, NotARepositoryError
from gitline.sources._common import (
    HEADS_PREFIX,
    REMOTES_PREFIX,
    TAGS_PREFIX,
    decode_ref,
    parse_commit,
    read_marker,
    strip_prefix,
)
from gitline.status import (
    CommitRef,
    ConflictKind,
    EntryKind,
    Head,
    RemoteBranch,
    StatusEntry,
    Tag,
)
from gitline.utils import (
    DEFAULT_TIMEOUT_MS,
    CommandConfig,
    CommandResult,
    create_null_logger,
    run_command,
)

STATUS_ARGS: tuple[str, ...] = (
    "status",
    "--porcelain=v2",
    "--branch",
    "--show-stash",
)

# Keep git from refreshing the index and keep messages untranslated
_GIT_ENV: dict[str, str] = {"GIT_OPTIONAL_LOCKS": "0", "LC_ALL": "C"}

_AHEAD_BEHIND_RE = re.compile(r"\+(\d+) -(\d+)")

# Remote name and merge ref of a branch's upstream, "." for a local upstream
_UPSTREAM_FORMAT = "--format=%(upstream:remotename) %(upstream:remoteref)"

# Number of space-separated fields before the path, per entry line type
_ENTRY_FIELDS: dict[EntryKind, int] = {
    EntryKind.ORDINARY: 8,
    EntryKind.RENAMED: 9,
    EntryKind.UNMERGED: 10,
}


@dataclass(slots=True)
class StatusSnapshot:
    """Parsed ``git status --porcelain=v2 --branch --show-stash`` output.

    Attributes:
        commit: HEAD commit, or None for ``(initial)``.
        branch: Current branch, or None for ``(detached)``.
        upstream: Short name of the current branch's upstream as git prints
            it (``origin/main``); the remote and branch are not split here.
        ahead: Commits ahead of the upstream.
        behind: Commits behind the upstream.
        stash: Number of stash entries.
        entries: One entry per reported path.
    """

    commit: CommitRef | None = None
    branch: str | None = None
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    stash: int = 0
    entries: list[StatusEntry] = field(default_factory=list)


def _parse_header(snapshot: StatusSnapshot, header: str) -> None:
    key, _, value = header.partition(" ")
    match key:
        case "branch.oid":
            if value != "(initial)":
                snapshot.commit = parse_commit(value, what="branch.oid")
        case "branch.head":
            if value != "(detached)":
                snapshot.branch = value
        case "branch.upstream":
            snapshot.upstream = value
        case "branch.ab":
            match_ = _AHEAD_BEHIND_RE.fullmatch(value)
            if match_ is None:
                msg = f"Malformed branch.ab header: {value!r}"
                raise AcquisitionError(msg)
            snapshot.ahead, snapshot.behind = int(match_[1]), int(match_[2])
        case "stash":
            if not value.isdigit():
                msg = f"Malformed stash header: {value!r}"
                raise AcquisitionError(msg)
            snapshot.stash = int(value)
        case _:
            pass


def _parse_entry(kind: EntryKind, line: str) -> StatusEntry:
    if kind in (EntryKind.UNTRACKED, EntryKind.IGNORED):
        return StatusEntry(kind=kind, path=line[2:])

    fields = line.split(" ", _ENTRY_FIELDS[kind])
    if len(fields) != _ENTRY_FIELDS[kind] + 1 or len(fields[1]) != 2:  # noqa: PLR2004
        msg = f"Malformed status entry: {line!r}"
        raise AcquisitionError(msg)

    xy, submodule, path = fields[1], fields[2], fields[-1]
    if kind is EntryKind.RENAMED:
        path = path.split("\t", 1)[0]
    return StatusEntry(
        kind=kind,
        index=xy[0],
        worktree=xy[1],
        submodule=submodule,
        path=path,
    )


def parse_status(output: str) -> StatusSnapshot:
    """Parse porcelain v2 status output.

    Args:
        output: Standard output of the status command.

    Returns:
        The parsed snapshot.

    Raises:
        AcquisitionError: If a line is malformed.
        InconsistentStateError: If ``branch.oid`` is not a commit id.
    """
    snapshot = StatusSnapshot()
    kinds = {kind.value: kind for kind in EntryKind}

    for line in output.splitlines():
        if not line:
            continue
        if line.startswith("# "):
            _parse_header(snapshot, line[2:])
            continue
        kind = kinds.get(line[0]) if line[1:2] == " " else None
        if kind is None:
            msg = f"Unrecognized status line: {line!r}"
            raise AcquisitionError(msg)
        snapshot.entries.append(_parse_entry(kind, line))

    return snapshot


def _short_name(upstream: RemoteBranch) -> str:
    """Return the upstream as ``git status`` prints it in ``branch.upstream``."""
    if upstream.remote == ".":
        return upstream.branch
    return strip_prefix(upstream.ref, REMOTES_PREFIX)

class PorcelainSource:
    """StatusSource implementation that shells out to ``git``.

    Example:
        >>> with PorcelainSource(Path.cwd()) as source:
        ...     source.head().branch
        'main'
    """

    def __init__(
        self,
        path: Path,
        *,
        git: str = "git",
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Discover the repository containing ``path``.

        Args:
            path: Absolute directory to start discovery from.
            git: Name or path of the git executable.
            timeout_ms: Timeout applied to each git invocation.
            logger: Logger for diagnostics.

        Raises:
            NotARepositoryError: If no repository contains ``path``.
            AcquisitionError: If git cannot be run.
        """
        self._path: Path = path
        self._git: str = git
        self._timeout_ms: int = timeout_ms
        self._logger: FilteringBoundLogger = (
            logger if logger is not None else create_null_logger()
        )
        self._snapshot: StatusSnapshot | None = None
        self._branch_tips: dict[str, list[str]] | None = None

        if not path.is_dir():
            msg = f"Not a directory: {path}"
            raise NotARepositoryError(msg, path=path)

        root, git_dir = self._discover()
        self._root: Path = root
        self._git_dir: Path = git_dir

    def _invoke(self, *args: str) -> CommandResult:
        command = (self._git, *args)
        result = run_command(
            CommandConfig(
                args=command,
                cwd=self._path,
                env=_GIT_ENV,
                timeout_ms=self._timeout_ms,
            )
        )
        if result.exit_code is None:
            msg = f"Failed to run {self._git}: {result.error}"
            raise AcquisitionError(msg, command=command)
        return result

    def _run(self, *args: str) -> str:
        result = self._invoke(*args)
        if not result.success:
            msg = f"git {args[0]} exited with status {result.exit_code}"
            raise AcquisitionError(
                msg, command=(self._git, *args), stderr=result.stderr.strip()
            )
        return decode_ref(result.stdout_bytes)

    def _discover(self) -> tuple[Path, Path]:
        args = ("rev-parse", "--show-toplevel", "--absolute-git-dir")
        result = self._invoke(*args)
        if not result.success:
            if "not a git repository" in result.stderr:
                msg = f"No git repository at or above {self._path}"
                raise NotARepositoryError(msg, path=self._path)
            msg = f"git rev-parse exited with status {result.exit_code}"
            raise AcquisitionError(
                msg, command=(self._git, *args), stderr=result.stderr.strip()
            )

        lines = decode_ref(result.stdout_bytes).splitlines()
        if len(lines) != 2:  # noqa: PLR2004
            msg = f"Unexpected rev-parse output: {lines!r}"
            raise AcquisitionError(msg, command=(self._git, *args))
        self._logger.debug("status_source_opened", backend="porcelain", root=lines[0])
        return Path(lines[0]), Path(lines[1])

    def _status(self) -> StatusSnapshot:
        if self._snapshot is None:
            self._snapshot = parse_status(self._run(*STATUS_ARGS))
        return self._snapshot

    def _tips(self) -> dict[str, list[str]]:
        if self._branch_tips is None:
            output = self._run(
                "for-each-ref", "--format=%(objectname) %(refname)", "refs/heads"
            )
            tips: defaultdict[str, list[str]] = defaultdict(list)
            for line in output.splitlines():
                sha, _, ref = line.partition(" ")
                tips[sha].append(strip_prefix(ref, HEADS_PREFIX))
            self._branch_tips = {sha: sorted(names) for sha, names in tips.items()}
        return self._branch_tips

    @property
    def root(self) -> Path:
        return self._root

    @property
    def git_dir(self) -> Path:
        return self._git_dir

    def entries(self) -> Iterator[StatusEntry]:
        return iter(self._status().entries)

    def head(self) -> Head:
        snapshot = self._status()
        return Head(commit=snapshot.commit, branch=snapshot.branch)

    def upstream(self, branch: str) -> RemoteBranch | None:
        snapshot = self._status()
        if branch == snapshot.branch and snapshot.upstream is None:
            return None
        output = self._run("for-each-ref", _UPSTREAM_FORMAT, f"{HEADS_PREFIX}{branch}")
        remote, _, merge = output.strip().partition(" ")
        if not remote or not merge:
            return None
        return RemoteBranch(remote=remote, branch=strip_prefix(merge, HEADS_PREFIX))

    def divergence(self, branch: str, upstream: RemoteBranch) -> tuple[int, int]:
        snapshot = self._status()
        if branch == snapshot.branch and _short_name(upstream) == snapshot.upstream:
            return snapshot.ahead, snapshot.behind

        verify = self._invoke("rev-parse", "--verify", "--quiet", upstream.ref)
        if not verify.success:
            return 0, 0
        output = self._run(
            "rev-list",
            "--left-right",
            "--count",
            f"{HEADS_PREFIX}{branch}...{upstream.ref}",
        )
        ahead, _, behind = output.strip().partition("\t")
        return int(ahead), int(behind)

    def tag_at_head(self) -> Tag | None:
        output = self._run(
            "for-each-ref", "--points-at", "HEAD", "--format=%(refname)", "refs/tags"
        )
        names = sorted(strip_prefix(line, TAGS_PREFIX) for line in output.splitlines())
        return Tag(names[0]) if names else None

    def conflict_marker(self, kind: ConflictKind) -> CommitRef | None:
        return read_marker(self._git_dir, kind)

    def branches_at(self, commit: CommitRef) -> list[str]:
        return list(self._tips().get(commit.sha, []))

    def stash_count(self) -> int:
        return self._status().stash

    def close(self) -> None:
        self._snapshot = None
        self._branch_tips = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
