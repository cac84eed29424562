"""
Tests for contiguous work partitioning.
"""

import pytest

from mc_option_pricing.execution.partition import WorkPartition, check_coverage, partition


def _ranges(parts):
    return [(p.start, p.end) for p in parts]


class TestPartition:
    """Tests for partition()."""

    def test_even_split(self) -> None:
        assert _ranges(partition(12, 4)) == [(0, 3), (3, 6), (6, 9), (9, 12)]

    def test_last_absorbs_remainder(self) -> None:
        assert _ranges(partition(10, 3)) == [(0, 3), (3, 6), (6, 10)]

    def test_single_worker(self) -> None:
        assert _ranges(partition(7, 1)) == [(0, 7)]

    def test_more_workers_than_items(self) -> None:
        """Base size 0: all but the last partition are empty."""
        parts = partition(3, 5)

        assert len(parts) == 5
        assert [p.is_empty for p in parts] == [True, True, True, True, False]
        assert _ranges(parts)[-1] == (0, 3)

    def test_no_items(self) -> None:
        parts = partition(0, 4)
        assert len(parts) == 4
        assert all(p.is_empty for p in parts)

    def test_exact_count_and_indices(self) -> None:
        parts = partition(100, 8)
        assert [p.index for p in parts] == list(range(8))

    def test_returns_tuple(self) -> None:
        assert isinstance(partition(5, 2), tuple)

    @pytest.mark.parametrize("workers", [0, -1])
    def test_invalid_worker_count(self, workers) -> None:
        with pytest.raises(ValueError, match="worker_count"):
            partition(10, workers)

    def test_negative_item_count(self) -> None:
        with pytest.raises(ValueError, match="item_count"):
            partition(-1, 2)


class TestWorkPartition:
    """Tests for the WorkPartition value type."""

    def test_size_and_indices(self) -> None:
        part = WorkPartition(index=1, start=3, end=7)
        assert part.size == 4
        assert list(part.indices()) == [3, 4, 5, 6]

    def test_membership_is_half_open(self) -> None:
        part = WorkPartition(index=0, start=2, end=5)
        assert 2 in part
        assert 4 in part
        assert 5 not in part
        assert 1 not in part

    def test_empty(self) -> None:
        part = WorkPartition(index=0, start=4, end=4)
        assert part.is_empty
        assert part.size == 0
        assert 4 not in part

    @pytest.mark.parametrize(
        "index,start,end",
        [(-1, 0, 1), (0, -1, 1), (0, 5, 4)],
    )
    def test_invalid(self, index, start, end) -> None:
        with pytest.raises(ValueError, match="CRITICAL"):
            WorkPartition(index=index, start=start, end=end)

    def test_frozen(self) -> None:
        part = WorkPartition(index=0, start=0, end=1)
        with pytest.raises(AttributeError):
            part.end = 2  # type: ignore[misc]


class TestCheckCoverage:
    """Tests for check_coverage()."""

    def test_accepts_partition_output(self) -> None:
        check_coverage(partition(17, 4), 17)

    def test_gap(self) -> None:
        parts = [WorkPartition(0, 0, 3), WorkPartition(1, 4, 6)]
        with pytest.raises(ValueError, match="gap"):
            check_coverage(parts, 6)

    def test_overlap(self) -> None:
        parts = [WorkPartition(0, 0, 3), WorkPartition(1, 2, 6)]
        with pytest.raises(ValueError, match="overlap"):
            check_coverage(parts, 6)

    def test_short_total(self) -> None:
        with pytest.raises(ValueError, match="expected"):
            check_coverage(partition(5, 2), 6)

    def test_out_of_order_indices(self) -> None:
        parts = [WorkPartition(1, 0, 3), WorkPartition(0, 3, 6)]
        with pytest.raises(ValueError, match="in order"):
            check_coverage(parts, 6)
