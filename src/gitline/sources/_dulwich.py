"""Status source backed by dulwich, without spawning processes.

Change entries are assembled from the index (conflicted paths), a
rename-detecting diff of the HEAD tree against the index (staged changes)
and ``porcelain.status`` (unstaged and untracked paths). References,
upstream configuration and ahead/behind counts come from the repository
object model.
"""

# ruff: noqa: TC002  # Repo needed at runtime
import stat
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType
from typing import Self

from dulwich import porcelain
from dulwich.diff_tree import (
    CHANGE_ADD,
    CHANGE_COPY,
    CHANGE_DELETE,
    CHANGE_RENAME,
    RenameDetector,
    tree_changes,
)
from dulwich.errors import NotGitRepository
from dulwich.index import (
    ConflictedIndexEntry,
    Index,
    IndexEntry,
    UnmergedEntries,
    commit_tree,
)
from dulwich.object_store import MemoryObjectStore, OverlayObjectStore
from dulwich.objects import S_ISGITLINK
from dulwich.objects import Tag as TagObject
from dulwich.repo import Repo
from dulwich.stash import Stash
from structlog.typing import FilteringBoundLogger

from gitline.exceptions import AcquisitionError, NotARepositoryError
from gitline.sources._common import (
    HEADS_PREFIX,
    TAGS_PREFIX,
    collapse_untracked,
    decode_ref,
    parse_commit,
    read_marker,
    strip_prefix,
)
from gitline.status import (
    NOT_SUBMODULE,
    CommitRef,
    ConflictKind,
    EntryKind,
    Head,
    RemoteBranch,
    StatusEntry,
    Tag,
)
from gitline.utils import create_null_logger

# Similarity percentage git status uses for rename detection
_RENAME_THRESHOLD = 50

# Submodule field for gitlink entries; the state flags are not computed
_SUBMODULE = "S..."


def _modify_letter(old_mode: int, new_mode: int) -> str:
    """Return ``T`` when the file type changed, otherwise ``M``."""
    return "T" if stat.S_IFMT(old_mode) != stat.S_IFMT(new_mode) else "M"


class DulwichSource:
    """StatusSource implementation that reads the repository in-process.

    Example:
        >>> with DulwichSource(Path.cwd()) as source:
        ...     source.head().branch
        'main'
    """

    def __init__(
        self, path: Path, *, logger: FilteringBoundLogger | None = None
    ) -> None:
        """Discover the repository containing ``path``.

        Args:
            path: Absolute directory to start discovery from.
            logger: Logger for diagnostics.

        Raises:
            NotARepositoryError: If no repository contains ``path``.
            AcquisitionError: If the repository is bare.
        """
        self._logger: FilteringBoundLogger = (
            logger if logger is not None else create_null_logger()
        )
        if not path.is_dir():
            msg = f"Not a directory: {path}"
            raise NotARepositoryError(msg, path=path)

        try:
            self._repo: Repo = Repo.discover(str(path))
        except NotGitRepository as e:
            msg = f"No git repository at or above {path}"
            raise NotARepositoryError(msg, path=path) from e

        if self._repo.bare:
            self._repo.close()
            msg = f"Repository at {path} has no working tree"
            raise AcquisitionError(msg)

        self._root: Path = Path(decode_ref(self._repo.path))
        self._git_dir: Path = Path(decode_ref(self._repo.controldir()))
        self._logger.debug("status_source_opened", backend="dulwich", root=str(self._root))

    @property
    def root(self) -> Path:
        return self._root

    @property
    def git_dir(self) -> Path:
        return self._git_dir

    def _head_tree(self) -> bytes | None:
        try:
            commit = self._repo[self._repo.head()]
        except KeyError:
            return None
        tree: bytes | None = getattr(commit, "tree", None)
        return tree

    def _staged_changes(self, index: Index) -> dict[str, tuple[EntryKind, str]]:
        """Compare the HEAD tree with the index, detecting renames.

        The index tree is built in a memory store layered over the
        repository's, so nothing is written to the object database.
        """
        store = OverlayObjectStore(
            [self._repo.object_store], add_store=MemoryObjectStore()
        )
        blobs = [
            (path, entry.sha, entry.mode)
            for path, entry in index.items()
            if isinstance(entry, IndexEntry)
        ]
        index_tree = commit_tree(store, blobs)
        detector = RenameDetector(store, rename_threshold=_RENAME_THRESHOLD)

        staged: dict[str, tuple[EntryKind, str]] = {}
        added: dict[str, int] = {}
        deleted: dict[str, int] = {}
        for change in tree_changes(
            store, self._head_tree(), index_tree, rename_detector=detector
        ):
            old, new = change.old, change.new
            if change.type == CHANGE_DELETE:
                deleted[decode_ref(old.path)] = old.mode
            elif change.type in (CHANGE_ADD, CHANGE_COPY):
                # git status does not look for copies; a copy is an add
                added[decode_ref(new.path)] = new.mode
            elif change.type == CHANGE_RENAME and old.path != new.path:
                staged[decode_ref(new.path)] = (EntryKind.RENAMED, "R")
            else:
                letter = _modify_letter(old.mode, new.mode)
                staged[decode_ref(new.path)] = (EntryKind.ORDINARY, letter)

        # A file type change is reported by dulwich as a delete plus an add
        for path in added.keys() & deleted.keys():
            letter = _modify_letter(deleted.pop(path), added.pop(path))
            staged[path] = (EntryKind.ORDINARY, letter)
        staged.update((path, (EntryKind.ORDINARY, "A")) for path in added)
        staged.update((path, (EntryKind.ORDINARY, "D")) for path in deleted)
        return staged

    def _worktree_letter(self, path: str, index_mode: int | None) -> str:
        try:
            mode = (self._root / path).lstat().st_mode
        except FileNotFoundError:
            return "D"
        if stat.S_ISDIR(mode):
            return "D"
        if index_mode is None:
            return "M"
        return _modify_letter(index_mode, mode)

    def entries(self) -> Iterator[StatusEntry]:
        try:
            index = self._repo.open_index()
            staged = self._staged_changes(index)
            status = porcelain.status(self._repo, untracked_files="all")
        except (OSError, KeyError, ValueError, UnmergedEntries) as e:
            msg = f"Failed to read repository status: {e}"
            raise AcquisitionError(msg) from e

        modes: dict[str, int] = {}
        conflicted: list[str] = []
        for raw, entry in index.items():
            path = decode_ref(raw)
            if isinstance(entry, ConflictedIndexEntry):
                conflicted.append(path)
            else:
                modes[path] = entry.mode
        skip = set(conflicted)

        worktree_letters: dict[str, str] = {}
        for raw in status.unstaged:
            path = decode_ref(raw)
            if path not in skip:
                worktree_letters[path] = self._worktree_letter(path, modes.get(path))

        for path in sorted(conflicted):
            yield StatusEntry(kind=EntryKind.UNMERGED, index="U", worktree="U", path=path)

        for path in sorted((staged.keys() | worktree_letters.keys()) - skip):
            kind, index_letter = staged.get(path, (EntryKind.ORDINARY, "."))
            mode = modes.get(path)
            is_submodule = mode is not None and S_ISGITLINK(mode)
            yield StatusEntry(
                kind=kind,
                index=index_letter,
                worktree=worktree_letters.get(path, "."),
                submodule=_SUBMODULE if is_submodule else NOT_SUBMODULE,
                path=path,
            )

        for path in collapse_untracked(
            (decode_ref(raw) for raw in status.untracked), modes.keys() | skip
        ):
            yield StatusEntry(kind=EntryKind.UNTRACKED, path=path)

    def head(self) -> Head:
        head_ref = self._repo.refs.get_symrefs().get(b"HEAD")
        branch = None
        if head_ref is not None:
            name = decode_ref(head_ref)
            if name.startswith(HEADS_PREFIX):
                branch = strip_prefix(name, HEADS_PREFIX)

        try:
            sha = self._repo.head()
        except KeyError:
            return Head(commit=None, branch=branch)
        return Head(commit=parse_commit(sha, what="HEAD"), branch=branch)

    def upstream(self, branch: str) -> RemoteBranch | None:
        config = self._repo.get_config()
        section = (b"branch", branch.encode())
        try:
            remote = config.get(section, b"remote")
            merge = config.get(section, b"merge")
        except KeyError:
            return None
        return RemoteBranch(
            remote=decode_ref(remote),
            branch=strip_prefix(decode_ref(merge), HEADS_PREFIX),
        )

    def _count_exclusive(self, include: bytes, exclude: bytes) -> int:
        return sum(1 for _ in self._repo.get_walker(include=[include], exclude=[exclude]))

    def divergence(self, branch: str, upstream: RemoteBranch) -> tuple[int, int]:
        refs = self._repo.refs
        local_ref = f"{HEADS_PREFIX}{branch}".encode()
        remote_ref = upstream.ref.encode()
        if local_ref not in refs or remote_ref not in refs:
            return 0, 0

        local, remote = refs[local_ref], refs[remote_ref]
        if local == remote:
            return 0, 0
        try:
            return (
                self._count_exclusive(local, remote),
                self._count_exclusive(remote, local),
            )
        except KeyError as e:
            msg = f"Missing object while comparing {branch} with {upstream}: {e}"
            raise AcquisitionError(msg) from e

    def _peel(self, sha: bytes) -> bytes:
        obj = self._repo[sha]
        while isinstance(obj, TagObject):
            _, sha = obj.object
            obj = self._repo[sha]
        return sha

    def tag_at_head(self) -> Tag | None:
        try:
            head_sha = self._repo.head()
        except KeyError:
            return None

        names: list[str] = []
        for name, sha in self._repo.refs.as_dict(TAGS_PREFIX.encode()).items():
            try:
                peeled = self._peel(sha)
            except KeyError:
                continue
            if peeled == head_sha:
                names.append(decode_ref(name))
        return Tag(min(names)) if names else None

    def conflict_marker(self, kind: ConflictKind) -> CommitRef | None:
        return read_marker(self._git_dir, kind)

    def branches_at(self, commit: CommitRef) -> list[str]:
        target = commit.sha.encode()
        return sorted(
            decode_ref(name)
            for name, sha in self._repo.refs.as_dict(HEADS_PREFIX.encode()).items()
            if sha == target
        )

    def stash_count(self) -> int:
        return len(Stash.from_repo(self._repo))

    def close(self) -> None:
        self._repo.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
