"""Change counter over the fixed set of change kinds."""

from collections.abc import Iterator, Mapping
from enum import IntEnum


class ChangeKind(IntEnum):
    """Kind of change recorded for a path.

    Declaration order is the display order of a change counter.
    """

    ADD = 0
    MODIFY = 1
    DELETE = 2
    RENAME = 3
    TYPE_CHANGE = 4

    @property
    def sigil(self) -> str:
        """One-character symbol used when rendering counts of this kind."""
        return _SIGILS[self]


_SIGILS: dict[ChangeKind, str] = {
    ChangeKind.ADD: "+",
    ChangeKind.MODIFY: "~",
    ChangeKind.DELETE: "-",
    ChangeKind.RENAME: "*",
    ChangeKind.TYPE_CHANGE: "?",
}


class ChangeCounts:
    """Non-negative count per ChangeKind, every kind always present.

    Example:
        >>> counts = ChangeCounts()
        >>> counts.increment(ChangeKind.MODIFY)
        >>> counts[ChangeKind.MODIFY]
        1
        >>> counts.any()
        True
    """

    __slots__ = ("_counts",)

    def __init__(self, initial: Mapping[ChangeKind, int] | None = None) -> None:
        """Create a counter, optionally seeded from a mapping.

        Args:
            initial: Starting counts. Kinds not present start at zero.

        Raises:
            ValueError: If any starting count is negative.
        """
        self._counts: list[int] = [0] * len(ChangeKind)
        if initial is None:
            return
        for kind, value in initial.items():
            if value < 0:
                msg = f"Change count for {kind.name} must not be negative: {value}"
                raise ValueError(msg)
            self._counts[ChangeKind(kind)] = value

    def increment(self, kind: ChangeKind, by: int = 1) -> None:
        if by < 0:
            msg = f"Cannot decrement change counts: {by}"
            raise ValueError(msg)
        self._counts[kind] += by

    def count(self, kind: ChangeKind) -> int:
        return self._counts[kind]

    def __getitem__(self, kind: ChangeKind) -> int:
        return self._counts[kind]

    def any(self) -> bool:
        """Return True if at least one kind has a non-zero count."""
        return any(self._counts)

    def total(self) -> int:
        return sum(self._counts)

    def items(self) -> Iterator[tuple[ChangeKind, int]]:
        """Yield (kind, count) pairs in declaration order, zeros included."""
        for kind in ChangeKind:
            yield kind, self._counts[kind]

    def nonzero(self) -> Iterator[tuple[ChangeKind, int]]:
        """Yield (kind, count) pairs in declaration order, skipping zeros."""
        return ((kind, value) for kind, value in self.items() if value)

    def as_dict(self) -> dict[ChangeKind, int]:
        return dict(self.items())

    def __iter__(self) -> Iterator[tuple[ChangeKind, int]]:
        return self.items()

    def __bool__(self) -> bool:
        return self.any()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChangeCounts):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        fields = ", ".join(f"{kind.name.lower()}={value}" for kind, value in self.items())
        return f"ChangeCounts({fields})"
