"""Repository state classification.

Turns the raw data exposed by a StatusSource into exactly one RepoState:

1. Tally change entries into working tree and index counters, counting
   conflicted paths separately.
2. An unborn HEAD is Headless; nothing else is consulted.
3. A detached HEAD without conflicts is Detached (at a tag when one names
   HEAD, otherwise at the raw commit). A detached HEAD with conflicts is
   taken to be mid-rebase and falls through to conflict resolution with the
   HEAD commit as the local anchor.
4. Conflicts resolve to Conflicted using the merge marker, then the rebase
   marker; having neither is an InconsistentStateError.
5. Otherwise the branch is resolved with its upstream and divergence, and
   the state is Working or Clean depending on the counters.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from structlog.typing import FilteringBoundLogger

from gitline.exceptions import InconsistentStateError
from gitline.status._changes import ChangeCounts, ChangeKind
from gitline.status._protocol import EntryKind, Head, StatusEntry, StatusSource
from gitline.status._refs import Branch, CommitRef, ConflictRef, Divergence
from gitline.status._state import (
    Clean,
    ConflictKind,
    Conflicted,
    Detached,
    Headless,
    RepoState,
    Working,
)
from gitline.utils import create_null_logger

_LETTER_KINDS: dict[str, ChangeKind] = {
    "A": ChangeKind.ADD,
    "M": ChangeKind.MODIFY,
    "D": ChangeKind.DELETE,
    "R": ChangeKind.RENAME,
    "T": ChangeKind.TYPE_CHANGE,
}

# "." is unchanged and "C" (copied) is never counted
_UNCOUNTED_LETTERS = frozenset({".", "C"})

# Markers are checked in this order
_MARKER_ORDER = (ConflictKind.MERGE, ConflictKind.REBASE)


@dataclass(slots=True)
class Acquisition:
    """Counters collected from one pass over the status entries.

    Attributes:
        working_tree: Unstaged changes, untracked files counted as adds.
        index: Staged changes.
        conflicts: Number of unmerged paths.
        ignored: Number of ignored paths (never displayed).
    """

    working_tree: ChangeCounts = field(default_factory=ChangeCounts)
    index: ChangeCounts = field(default_factory=ChangeCounts)
    conflicts: int = 0
    ignored: int = 0


def _count_letter(
    counts: ChangeCounts,
    letter: str,
    *,
    side: str,
    entry: StatusEntry,
    logger: FilteringBoundLogger,
) -> None:
    if letter in _UNCOUNTED_LETTERS:
        return
    kind = _LETTER_KINDS.get(letter)
    if kind is None:
        logger.warning(
            "unknown_status_letter", side=side, letter=letter, path=entry.path
        )
        return
    counts.increment(kind)


def acquire_changes(
    entries: Iterable[StatusEntry],
    *,
    logger: FilteringBoundLogger | None = None,
) -> Acquisition:
    """Tally status entries into change counters and a conflict count.

    Args:
        entries: Status entries, each visited once.
        logger: Logger for unknown status letters.

    Returns:
        The collected counters.
    """
    log = logger if logger is not None else create_null_logger()
    acquisition = Acquisition()

    for entry in entries:
        match entry.kind:
            case EntryKind.IGNORED:
                acquisition.ignored += 1
            case EntryKind.UNTRACKED:
                acquisition.working_tree.increment(ChangeKind.ADD)
            case _ if entry.is_submodule:
                continue
            case EntryKind.UNMERGED:
                acquisition.conflicts += 1
            case EntryKind.ORDINARY | EntryKind.RENAMED:
                _count_letter(
                    acquisition.index, entry.index, side="index", entry=entry, logger=log
                )
                _count_letter(
                    acquisition.working_tree,
                    entry.worktree,
                    side="worktree",
                    entry=entry,
                    logger=log,
                )

    return acquisition


def _resolve_branch(source: StatusSource, name: str) -> Branch:
    remote = source.upstream(name)
    if remote is None:
        return Branch(local=name)
    ahead, behind = source.divergence(name, remote)
    return Branch(local=name, remote=remote, divergence=Divergence.of(ahead, behind))


def _resolve_endpoint(
    source: StatusSource, commit: CommitRef, *, prefer: str | None = None
) -> ConflictRef:
    names = source.branches_at(commit)
    if not names:
        return commit
    if prefer is not None and prefer in names:
        return Branch(local=prefer)
    return Branch(local=names[0])


def _resolve_conflict(
    source: StatusSource,
    head: Head,
    anchor: CommitRef,
    acquisition: Acquisition,
    stash: int,
) -> Conflicted:
    for kind in _MARKER_ORDER:
        target = source.conflict_marker(kind)
        if target is not None:
            break
    else:
        msg = (
            f"{acquisition.conflicts} conflicted path(s) but neither a merge "
            "nor a rebase is in progress"
        )
        raise InconsistentStateError(msg)

    return Conflicted(
        kind=kind,
        source=_resolve_endpoint(source, anchor, prefer=head.branch),
        target=_resolve_endpoint(source, target),
        conflicts=acquisition.conflicts,
        working_tree=acquisition.working_tree,
        index=acquisition.index,
        stash=stash,
    )


def classify(
    source: StatusSource,
    *,
    logger: FilteringBoundLogger | None = None,
) -> RepoState:
    """Classify the repository behind ``source`` into a single RepoState.

    Args:
        source: Status source for an open repository.
        logger: Logger for classification diagnostics.

    Returns:
        The repository state.

    Raises:
        InconsistentStateError: If conflicts exist without a merge or rebase
            marker.
        StatusError: If the source fails to read repository data.
    """
    log = logger if logger is not None else create_null_logger()

    acquisition = acquire_changes(source.entries(), logger=log)
    head = source.head()
    stash = source.stash_count()
    working_tree, index = acquisition.working_tree, acquisition.index

    state: RepoState
    if head.commit is None:
        state = Headless(working_tree=working_tree, index=index, stash=stash)
    elif acquisition.conflicts:
        state = _resolve_conflict(source, head, head.commit, acquisition, stash)
    elif head.branch is None:
        tag = source.tag_at_head()
        state = Detached(
            head=tag if tag is not None else head.commit,
            working_tree=working_tree,
            index=index,
            stash=stash,
        )
    else:
        branch = _resolve_branch(source, head.branch)
        if working_tree.any() or index.any():
            state = Working(
                branch=branch, working_tree=working_tree, index=index, stash=stash
            )
        else:
            state = Clean(branch=branch, stash=stash)

    log.debug(
        "repo_state_classified",
        state=type(state).__name__,
        conflicts=acquisition.conflicts,
        ignored=acquisition.ignored,
    )
    return state
