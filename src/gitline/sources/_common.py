"""Helpers shared by the status sources."""

from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from gitline.exceptions import AcquisitionError, InconsistentStateError, RefEncodingError
from gitline.status import CommitRef, ConflictKind

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"
REMOTES_PREFIX = "refs/remotes/"

# Marker files in the git directory, by the operation they indicate
MARKER_FILES: dict[ConflictKind, str] = {
    ConflictKind.MERGE: "MERGE_HEAD",
    ConflictKind.REBASE: "REBASE_HEAD",
}


def decode_ref(value: bytes | str) -> str:
    """Decode a reference name strictly as UTF-8.

    Args:
        value: A bytes or str reference name.

    Returns:
        The reference name as a string.

    Raises:
        RefEncodingError: If the bytes are not valid UTF-8.
    """
    if isinstance(value, str):
        return value
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        msg = f"Reference name is not valid UTF-8: {value!r}"
        raise RefEncodingError(msg, raw=value) from e


def strip_prefix(ref: str, prefix: str) -> str:
    """Strip ``prefix`` (e.g. ``refs/heads/``) from a reference name if present."""
    if ref.startswith(prefix):
        return ref[len(prefix) :]
    return ref


def parse_commit(value: str | bytes, *, what: str) -> CommitRef:
    """Parse an object id, treating anything else as an inconsistency.

    Args:
        value: Raw object id.
        what: Description of where the id came from, for the error message.

    Returns:
        The commit reference.

    Raises:
        InconsistentStateError: If ``value`` is not a commit id.
    """
    try:
        return CommitRef.parse(value)
    except ValueError as e:
        msg = f"Expected a commit id for {what}, got {value!r}"
        raise InconsistentStateError(msg) from e


def read_marker(git_dir: Path, kind: ConflictKind) -> CommitRef | None:
    """Read the commit named by a merge or rebase marker file.

    Args:
        git_dir: The repository's git directory.
        kind: Which marker to read.

    Returns:
        The first commit listed in the marker, or None if the file is absent.

    Raises:
        AcquisitionError: If the file exists but cannot be read.
        InconsistentStateError: If the file does not hold a commit id.
    """
    name = MARKER_FILES[kind]
    path = git_dir / name
    try:
        content = path.read_text(encoding="ascii")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read {name}: {e}"
        raise AcquisitionError(msg) from e

    lines = content.splitlines()
    first = lines[0].strip() if lines else ""
    return parse_commit(first, what=name)


def collapse_untracked(untracked: Iterable[str], tracked: Iterable[str]) -> list[str]:
    """Report each wholly untracked directory once, as ``git status`` does.

    An untracked file is replaced by its shallowest ancestor directory that
    holds no tracked path, written with a trailing slash.

    Args:
        untracked: Repository-relative untracked file paths.
        tracked: Repository-relative paths present in the index.

    Returns:
        Sorted, de-duplicated untracked entries.
    """
    tracked_dirs = {
        str(parent) for path in tracked for parent in PurePosixPath(path).parents
    }
    collapsed: set[str] = set()
    for path in untracked:
        parts = PurePosixPath(path).parts
        for depth in range(1, len(parts)):
            directory = "/".join(parts[:depth])
            if directory not in tracked_dirs:
                collapsed.add(f"{directory}/")
                break
        else:
            collapsed.add(path)
    return sorted(collapsed)
