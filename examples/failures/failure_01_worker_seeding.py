"""
Failure Example 01: Worker Seeding Mistakes
===========================================

WHAT GOES WRONG
---------------
Parallel Monte Carlo batches that are either not reproducible or whose
workers silently simulate the same paths.

WHY IT'S WRONG
--------------
1. Unseeded generators: every run prices differently, so no result can be
   re-derived or audited.
2. One seed for every worker: all workers draw identical normals, so two
   identical contracts in different partitions get the exact same price and
   the batch carries far less independent randomness than it claims.

THE FIX
-------
One PathSampler per worker, seeded once from the run's base seed and the
worker's partition index (derive_seed). Never share a sampler.

VALIDATION
----------
Same base seed + same worker count => bit-identical batch.
Identical contracts in different partitions => different estimates.
"""

import sys

import numpy as np

sys.path.insert(0, "src")

from mc_option_pricing import Contract, OptionType, PathSampler, get_engine
from mc_option_pricing.options.simulation.sampler import derive_seed

CONTRACT = Contract("ATM", 100.0, 100.0, 0.05, 0.20, 1.0, OptionType.CALL)
N_PATHS = 10_240
N_WORKERS = 4


# =============================================================================
# THE WRONG WAYS
# =============================================================================


def price_WRONG_unseeded() -> list[float]:
    """WRONG: seed from OS entropy, different on every call."""
    engine = get_engine("batched")
    seeds = [int(np.random.default_rng().integers(0, 2**32)) for _ in range(N_WORKERS)]
    return [engine.price(CONTRACT, N_PATHS, PathSampler(s)) for s in seeds]


def price_WRONG_same_seed(base_seed: int = 12345) -> list[float]:
    """WRONG: every worker uses the base seed unchanged."""
    engine = get_engine("batched")
    return [engine.price(CONTRACT, N_PATHS, PathSampler(base_seed)) for _ in range(N_WORKERS)]


# =============================================================================
# THE RIGHT WAY
# =============================================================================


def price_CORRECT(base_seed: int = 12345) -> list[float]:
    """CORRECT: one sampler per worker, seed derived from the worker index."""
    engine = get_engine("batched")
    return [
        engine.price(CONTRACT, N_PATHS, PathSampler(derive_seed(base_seed, worker)))
        for worker in range(N_WORKERS)
    ]


# =============================================================================
# DEMONSTRATION
# =============================================================================

if __name__ == "__main__":
    print("=" * 75)
    print("Failure Example 01: Worker Seeding Mistakes")
    print("=" * 75)
    print()

    first, second = price_WRONG_unseeded(), price_WRONG_unseeded()
    print("1. Unseeded workers (two runs):")
    print(f"   run 1: {[round(p, 4) for p in first]}")
    print(f"   run 2: {[round(p, 4) for p in second]}")
    print(f"   STATUS: reproducible? {first == second}")
    print()

    same = price_WRONG_same_seed()
    print("2. Same seed on every worker:")
    print(f"   prices: {[round(p, 4) for p in same]}")
    print(f"   STATUS: distinct estimates = {len(set(same))} of {N_WORKERS}")
    print()

    correct_a, correct_b = price_CORRECT(), price_CORRECT()
    print("CORRECT: derive_seed(base_seed, worker_index):")
    print(f"   prices: {[round(p, 4) for p in correct_a]}")
    print(f"   reproducible? {correct_a == correct_b}  "
          f"distinct estimates = {len(set(correct_a))} of {N_WORKERS}")
    print()
    print("=" * 75)
    print("KEY LESSONS:")
    print("  1. Seed every run explicitly; log the base seed with the results")
    print("  2. Give each worker its own sampler with its own derived seed")
    print("  3. Never share one sampler across workers")
    print("=" * 75)
