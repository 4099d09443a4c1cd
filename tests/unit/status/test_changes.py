import pytest

from gitline.status import ChangeCounts, ChangeKind


class TestChangeKind:
    def test_sigils(self) -> None:
        assert [kind.sigil for kind in ChangeKind] == ["+", "~", "-", "*", "?"]

    def test_declaration_order_is_display_order(self) -> None:
        assert list(ChangeKind) == [
            ChangeKind.ADD,
            ChangeKind.MODIFY,
            ChangeKind.DELETE,
            ChangeKind.RENAME,
            ChangeKind.TYPE_CHANGE,
        ]


class TestChangeCounts:
    def test_fresh_counter_is_empty(self) -> None:
        counts = ChangeCounts()

        assert counts.any() is False
        assert not counts
        assert counts.total() == 0
        assert all(value == 0 for _, value in counts.items())

    def test_increment(self) -> None:
        counts = ChangeCounts()

        counts.increment(ChangeKind.DELETE)
        counts.increment(ChangeKind.DELETE, by=2)

        assert counts[ChangeKind.DELETE] == 3
        assert counts.count(ChangeKind.ADD) == 0
        assert counts.any() is True

    def test_increment_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="decrement"):
            ChangeCounts().increment(ChangeKind.ADD, by=-1)

    def test_initial_mapping(self) -> None:
        counts = ChangeCounts({ChangeKind.ADD: 2, ChangeKind.RENAME: 1})

        assert counts.as_dict() == {
            ChangeKind.ADD: 2,
            ChangeKind.MODIFY: 0,
            ChangeKind.DELETE: 0,
            ChangeKind.RENAME: 1,
            ChangeKind.TYPE_CHANGE: 0,
        }

    def test_initial_mapping_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="must not be negative"):
            _ = ChangeCounts({ChangeKind.MODIFY: -1})

    def test_zero_initial_counts_are_not_any(self) -> None:
        assert ChangeCounts({ChangeKind.ADD: 0}).any() is False

    def test_nonzero_skips_zeros_in_order(self) -> None:
        counts = ChangeCounts({ChangeKind.TYPE_CHANGE: 1, ChangeKind.ADD: 4})

        assert list(counts.nonzero()) == [
            (ChangeKind.ADD, 4),
            (ChangeKind.TYPE_CHANGE, 1),
        ]

    def test_iteration_matches_items(self) -> None:
        counts = ChangeCounts({ChangeKind.MODIFY: 1})

        assert list(counts) == list(counts.items())

    def test_equality(self) -> None:
        assert ChangeCounts({ChangeKind.ADD: 1}) == ChangeCounts({ChangeKind.ADD: 1})
        assert ChangeCounts({ChangeKind.ADD: 1}) != ChangeCounts()
        assert ChangeCounts() != {ChangeKind.ADD: 0}

    def test_repr(self) -> None:
        counts = ChangeCounts({ChangeKind.MODIFY: 2})

        assert repr(counts) == (
            "ChangeCounts(add=0, modify=2, delete=0, rename=0, type_change=0)"
        )
