"""Status line rendering.

Rendering is a pure function of a RepoState and explicit RenderOptions.
Decoration wraps fragments in ANSI styles but never adds, removes or
reorders characters of the plain line.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import assert_never

from rich.color import ColorSystem
from rich.style import Style

from gitline.status._changes import ChangeCounts, ChangeKind
from gitline.status._refs import SPARSE_PLACEHOLDER, Branch, CommitRef, Tag
from gitline.status._state import (
    Clean,
    ConflictKind,
    Conflicted,
    Detached,
    Headless,
    RepoState,
    Working,
)

_STYLE_HEADLESS = Style(bold=True, color="blue")
_STYLE_COMMIT = Style(bold=True, color="yellow")
_STYLE_TAG = Style(bold=True, color="magenta")
_STYLE_REMOTE = Style(color="blue")
_STYLE_IN_SYNC = Style(color="green")
_STYLE_AHEAD = Style(color="green")
_STYLE_BEHIND = Style(color="red")
_STYLE_CONFLICTS = Style(bold=True, color="red")
_STYLE_WORKING_TREE = Style(color="yellow")
_STYLE_INDEX = Style(color="green")
_STYLE_STASH = Style(color="cyan")
_STYLE_ERROR = Style(bold=True, color="red")
_STYLE_NO_REPO = Style(color="bright_black")

_CHANGE_STYLES: dict[ChangeKind, Style] = {
    ChangeKind.ADD: Style(color="green"),
    ChangeKind.MODIFY: Style(color="yellow"),
    ChangeKind.DELETE: Style(color="red"),
    ChangeKind.RENAME: Style(color="cyan"),
    ChangeKind.TYPE_CHANGE: Style(color="magenta"),
}

_CONFLICT_ARROWS: dict[ConflictKind, str] = {
    ConflictKind.MERGE: " <- ",
    ConflictKind.REBASE: " -> ",
}


class Marker(StrEnum):
    """Fixed outputs for runs that produce no repository state."""

    NO_REPO = "no repo"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Display mode for a status line.

    Attributes:
        decorate: Emit ANSI styling around fragments.
        sparse: Shorten upstream information when it tracks the same name.
        show_stash: Append the stash count when there are stash entries.
        hash_length: Number of hex characters shown for raw commits.
    """

    decorate: bool = False
    sparse: bool = False
    show_stash: bool = False
    hash_length: int = 7


class _Line:
    __slots__ = ("_fragments",)

    def __init__(self) -> None:
        self._fragments: list[tuple[str, Style | None]] = []

    def add(self, text: str, style: Style | None = None) -> None:
        self._fragments.append((text, style))

    def finish(self, *, decorate: bool) -> str:
        if not decorate:
            return "".join(text for text, _ in self._fragments)
        return "".join(
            style.render(text, color_system=ColorSystem.STANDARD) if style else text
            for text, style in self._fragments
        )


def _add_counts(line: _Line, label: str, style: Style, counts: ChangeCounts) -> None:
    line.add(" ")
    line.add(label, style)
    line.add("[")
    for kind, value in counts.nonzero():
        line.add(f"{kind.sigil}{value}", _CHANGE_STYLES[kind])
    line.add("]")


def _add_changes(
    line: _Line,
    working_tree: ChangeCounts,
    index: ChangeCounts,
    *,
    conflicts: int = 0,
    stash: int = 0,
) -> None:
    if not (working_tree.any() or index.any() or conflicts or stash):
        return

    line.add(" ::")
    if conflicts:
        line.add(" [")
        line.add(f"!{conflicts}", _STYLE_CONFLICTS)
        line.add("]")
    if working_tree.any():
        _add_counts(line, "w", _STYLE_WORKING_TREE, working_tree)
    if index.any():
        _add_counts(line, "i", _STYLE_INDEX, index)
    if stash:
        line.add(" s[")
        line.add(str(stash), _STYLE_STASH)
        line.add("]")


def _add_branch(line: _Line, branch: Branch, options: RenderOptions) -> None:
    line.add(branch.local)

    remote = branch.remote
    if remote is None:
        line.add("[")
        line.add("-", _STYLE_REMOTE)
        line.add("]")
        return

    condensed = options.sparse and branch.tracks_same_name
    line.add("[")
    line.add(remote.remote, _STYLE_REMOTE)
    line.add("/")
    line.add(SPARSE_PLACEHOLDER if condensed else remote.branch, _STYLE_REMOTE)
    line.add("]")
    if condensed:
        return

    divergence = branch.divergence
    line.add("[")
    if divergence is None:
        line.add("", _STYLE_IN_SYNC)
    else:
        if divergence.ahead:
            line.add(str(divergence.ahead), _STYLE_AHEAD)
        if divergence.behind:
            line.add(str(divergence.behind), _STYLE_BEHIND)
    line.add("]")


def _add_ref(line: _Line, ref: CommitRef | Tag | Branch, options: RenderOptions) -> None:
    match ref:
        case CommitRef():
            line.add(ref.short(options.hash_length), _STYLE_COMMIT)
        case Tag():
            line.add(ref.name, _STYLE_TAG)
        case Branch():
            line.add(ref.local)
        case _:
            assert_never(ref)


def render(state: RepoState, options: RenderOptions | None = None) -> str:
    """Render a repository state as a single status line.

    Args:
        state: The classified repository state.
        options: Display mode; plain, non-sparse output when omitted.

    Returns:
        The status line without a trailing newline.

    Example:
        >>> render(Clean(branch=Branch(local="main")))
        'main[-]'
    """
    opts = options if options is not None else RenderOptions()
    line = _Line()

    match state:
        case Headless(working_tree=working_tree, index=index, stash=stash):
            line.add("[")
            line.add("headless", _STYLE_HEADLESS)
            line.add("]")
            _add_changes(line, working_tree, index, stash=_stash(stash, opts))
        case Clean(branch=branch, stash=stash):
            _add_branch(line, branch, opts)
            _add_changes(line, ChangeCounts(), ChangeCounts(), stash=_stash(stash, opts))
        case Detached(head=head, working_tree=working_tree, index=index, stash=stash):
            _add_ref(line, head, opts)
            _add_changes(line, working_tree, index, stash=_stash(stash, opts))
        case Working(branch=branch, working_tree=working_tree, index=index, stash=stash):
            _add_branch(line, branch, opts)
            _add_changes(line, working_tree, index, stash=_stash(stash, opts))
        case Conflicted(kind=kind, source=source, target=target, conflicts=conflicts):
            first, second = (source, target) if kind is ConflictKind.MERGE else (target, source)
            _add_ref(line, first, opts)
            line.add(_CONFLICT_ARROWS[kind])
            _add_ref(line, second, opts)
            _add_changes(
                line,
                state.working_tree,
                state.index,
                conflicts=conflicts,
                stash=_stash(state.stash, opts),
            )
        case _:
            assert_never(state)

    return line.finish(decorate=opts.decorate)


def _stash(count: int, options: RenderOptions) -> int:
    return count if options.show_stash else 0


def render_marker(marker: Marker, *, decorate: bool = False) -> str:
    """Render a fixed bracketed marker such as ``[no repo]`` or ``[error]``."""
    line = _Line()
    line.add("[")
    line.add(marker.value, _STYLE_ERROR if marker is Marker.ERROR else _STYLE_NO_REPO)
    line.add("]")
    return line.finish(decorate=decorate)
