"""
Deterministic per-worker standard normal sampler.

One PathSampler per worker, seeded once, never shared. Two samplers built
from the same seed produce bit-identical draws for the same number of calls,
whether the draws are taken one at a time or in blocks.

[T1] numpy Generator(PCG64) fills a block by repeated scalar draws, so
``standard_normals(n)`` equals ``n`` calls to ``next_standard_normal()``.
"""

from enum import Enum

import numpy as np


class SeedStrategy(Enum):
    """How a worker seed is derived from the base seed."""

    #: base_seed + worker_index. Reproducible for a fixed worker count, but
    #: adjacent integer seeds can correlate for some generator families.
    OFFSET = "offset"
    #: SeedSequence(base_seed, spawn_key=(worker_index,)), hashed
    HASHED = "hashed"


def derive_seed(
    base_seed: int,
    worker_index: int,
    strategy: SeedStrategy = SeedStrategy.OFFSET,
) -> int:
    """
    Derive the seed of one worker.

    Parameters
    ----------
    base_seed : int
        Run-level seed (>= 0)
    worker_index : int
        Partition index of the worker (>= 0)
    strategy : SeedStrategy, default OFFSET
        Derivation rule

    Returns
    -------
    int
        Non-negative integer seed

    Examples
    --------
    >>> derive_seed(12345, 3)
    12348
    """
    if base_seed < 0:
        raise ValueError(f"CRITICAL: base_seed must be >= 0, got {base_seed}")
    if worker_index < 0:
        raise ValueError(f"CRITICAL: worker_index must be >= 0, got {worker_index}")

    if strategy == SeedStrategy.OFFSET:
        return base_seed + worker_index

    sequence = np.random.SeedSequence(base_seed, spawn_key=(worker_index,))
    return int(sequence.generate_state(1, dtype=np.uint64)[0])


class PathSampler:
    """
    Sequential standard normal source for one worker.

    Parameters
    ----------
    seed : int
        Non-negative integer seed

    Examples
    --------
    >>> a, b = PathSampler(42), PathSampler(42)
    >>> a.next_standard_normal() == b.next_standard_normal()
    True
    """

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise TypeError(f"CRITICAL: seed must be an integer, got {type(seed).__name__}")
        if seed < 0:
            raise ValueError(f"CRITICAL: seed must be >= 0, got {seed}")

        self.seed = int(seed)
        self._rng = np.random.Generator(np.random.PCG64(self.seed))
        self._draws = 0

    @property
    def draws(self) -> int:
        """Number of variates consumed so far."""
        return self._draws

    def next_standard_normal(self) -> float:
        """Draw one standard normal variate."""
        self._draws += 1
        return float(self._rng.standard_normal())

    def standard_normals(self, n: int) -> np.ndarray:
        """
        Draw ``n`` standard normal variates in sequence order.

        Parameters
        ----------
        n : int
            Number of draws (>= 0)

        Returns
        -------
        np.ndarray
            Draws, shape (n,)
        """
        if n < 0:
            raise ValueError(f"CRITICAL: n must be >= 0, got {n}")
        self._draws += n
        return self._rng.standard_normal(n)

    def __repr__(self) -> str:
        return f"PathSampler(seed={self.seed}, draws={self._draws})"
