"""Repository status classification and rendering.

This package holds the core of gitline: change counters, reference value
types, the RepoState variants, the StatusSource protocol every backend
implements, the classifier, and the status line renderer.

Example:
    >>> from gitline.sources import open_source
    >>> from gitline.status import classify, render
    >>> with open_source(Path.cwd()) as source:
    ...     print(render(classify(source)))
    main[origin/main][]
"""

from gitline.status._changes import ChangeCounts, ChangeKind
from gitline.status._classifier import Acquisition, acquire_changes, classify
from gitline.status._protocol import (
    NOT_SUBMODULE,
    EntryKind,
    Head,
    StatusEntry,
    StatusSource,
)
from gitline.status._refs import (
    SPARSE_PLACEHOLDER,
    Branch,
    CommitRef,
    ConflictRef,
    DetachedRef,
    Divergence,
    RemoteBranch,
    Tag,
)
from gitline.status._render import Marker, RenderOptions, render, render_marker
from gitline.status._state import (
    Clean,
    ConflictKind,
    Conflicted,
    Detached,
    Headless,
    RepoState,
    Working,
)

__all__ = [
    "NOT_SUBMODULE",
    "SPARSE_PLACEHOLDER",
    "Acquisition",
    "Branch",
    "ChangeCounts",
    "ChangeKind",
    "Clean",
    "CommitRef",
    "ConflictKind",
    "ConflictRef",
    "Conflicted",
    "Detached",
    "DetachedRef",
    "Divergence",
    "EntryKind",
    "Head",
    "Headless",
    "Marker",
    "RemoteBranch",
    "RenderOptions",
    "RepoState",
    "StatusEntry",
    "StatusSource",
    "Tag",
    "Working",
    "acquire_changes",
    "classify",
    "render",
    "render_marker",
]
