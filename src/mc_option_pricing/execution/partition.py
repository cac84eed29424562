"""
Contiguous work partitioning.

Splits ``item_count`` contracts into ``worker_count`` half-open index ranges
[start, end). Base size is ``item_count // worker_count``; the last range
absorbs the remainder. Ranges are pairwise disjoint and cover [0, item_count).

When ``worker_count > item_count`` the base size is zero, so every range but
the last is empty and those workers have nothing to do.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class WorkPartition:
    """
    Half-open index range owned by one worker.

    Attributes
    ----------
    index : int
        Partition (and worker) index
    start : int
        First index, inclusive
    end : int
        Last index, exclusive
    """

    index: int
    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate range."""
        if self.index < 0:
            raise ValueError(f"CRITICAL: partition index must be >= 0, got {self.index}")
        if not 0 <= self.start <= self.end:
            raise ValueError(
                f"CRITICAL: partition range must satisfy 0 <= start <= end, "
                f"got [{self.start}, {self.end})"
            )

    @property
    def size(self) -> int:
        """Number of indices in the range."""
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        """True when the worker has nothing to do."""
        return self.start == self.end

    def indices(self) -> range:
        """Indices owned by this partition."""
        return range(self.start, self.end)

    def __contains__(self, item: int) -> bool:
        return self.start <= item < self.end


def partition(item_count: int, worker_count: int) -> tuple[WorkPartition, ...]:
    """
    Split ``item_count`` items across ``worker_count`` workers.

    Parameters
    ----------
    item_count : int
        Number of contracts (>= 0)
    worker_count : int
        Number of workers (>= 1)

    Returns
    -------
    tuple[WorkPartition, ...]
        Exactly ``worker_count`` partitions in index order

    Examples
    --------
    >>> [(p.start, p.end) for p in partition(10, 3)]
    [(0, 3), (3, 6), (6, 10)]
    """
    if worker_count < 1:
        raise ValueError(f"CRITICAL: worker_count must be >= 1, got {worker_count}")
    if item_count < 0:
        raise ValueError(f"CRITICAL: item_count must be >= 0, got {item_count}")

    base_size = item_count // worker_count
    partitions = []

    for worker in range(worker_count):
        start = worker * base_size
        end = item_count if worker == worker_count - 1 else start + base_size
        partitions.append(WorkPartition(index=worker, start=start, end=end))

    return tuple(partitions)


def check_coverage(partitions: Iterable[WorkPartition], item_count: int) -> None:
    """
    Verify partitions are disjoint, contiguous and cover [0, item_count).

    Raises
    ------
    ValueError
        On any gap, overlap, out-of-order index or wrong total
    """
    cursor = 0
    for expected_index, part in enumerate(partitions):
        if part.index != expected_index:
            raise ValueError(
                f"CRITICAL: partition indices must be 0..n-1 in order, "
                f"got {part.index} at position {expected_index}"
            )
        if part.start != cursor:
            kind = "gap" if part.start > cursor else "overlap"
            raise ValueError(
                f"CRITICAL: partition {part.index} starts at {part.start}, "
                f"expected {cursor} ({kind})"
            )
        cursor = part.end

    if cursor != item_count:
        raise ValueError(
            f"CRITICAL: partitions cover [0, {cursor}), expected [0, {item_count})"
        )
