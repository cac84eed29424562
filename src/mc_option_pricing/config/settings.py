"""
Frozen configuration settings for batch option pricing.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Path count and base seed are run-time configuration passed to the executor,
never module constants.
"""

import os
from dataclasses import dataclass
from typing import Optional

from mc_option_pricing.options.simulation.batched import DEFAULT_BATCH_SIZE, LANE_WIDTH
from mc_option_pricing.options.simulation.monte_carlo import EngineVariant
from mc_option_pricing.options.simulation.sampler import SeedStrategy

#: Worker count when hardware parallelism cannot be detected
FALLBACK_WORKERS = 4

BACKENDS = ("process", "thread")


def _resolve_worker_count() -> int:
    """
    Resolve the worker pool size.

    Priority:
    1. MC_OPTION_WORKERS environment variable (if set)
    2. os.cpu_count()
    3. FALLBACK_WORKERS

    Returns
    -------
    int
        Number of workers (>= 1)
    """
    env_workers = os.environ.get("MC_OPTION_WORKERS")
    if env_workers:
        try:
            return int(env_workers)
        except ValueError as e:
            raise ValueError(
                f"CRITICAL: MC_OPTION_WORKERS must be an integer, got {env_workers!r}"
            ) from e
    return os.cpu_count() or FALLBACK_WORKERS


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation configuration.

    Attributes
    ----------
    n_paths : int
        Monte Carlo paths per contract
    base_seed : int
        Run-level seed; worker seeds derive from it
    n_workers : int
        Parallel workers (None resolves from MC_OPTION_WORKERS / cpu count)
    variant : EngineVariant
        Kernel used by every worker
    batch_size : int
        Block size of the batched kernel (multiple of 4)
    seed_strategy : SeedStrategy
        Worker seed derivation
    backend : str
        "process" (one OS process per worker) or "thread"
    confidence_level : float
        Confidence level of Monte Carlo intervals
    """

    n_paths: int = 1_000_000
    base_seed: int = 12345
    n_workers: Optional[int] = None
    variant: EngineVariant = EngineVariant.BATCHED
    batch_size: int = DEFAULT_BATCH_SIZE
    seed_strategy: SeedStrategy = SeedStrategy.OFFSET
    backend: str = "process"
    confidence_level: float = 0.95

    def __post_init__(self) -> None:
        """Resolve worker count and validate."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.n_workers is None:
            object.__setattr__(self, "n_workers", _resolve_worker_count())
        object.__setattr__(self, "variant", EngineVariant(self.variant))
        object.__setattr__(self, "seed_strategy", SeedStrategy(self.seed_strategy))

        if self.n_paths <= 0:
            raise ValueError(f"CRITICAL: n_paths must be > 0, got {self.n_paths}")
        if self.base_seed < 0:
            raise ValueError(f"CRITICAL: base_seed must be >= 0, got {self.base_seed}")
        if self.n_workers < 1:
            raise ValueError(f"CRITICAL: n_workers must be >= 1, got {self.n_workers}")
        if self.batch_size <= 0 or self.batch_size % LANE_WIDTH != 0:
            raise ValueError(
                f"CRITICAL: batch_size must be a positive multiple of {LANE_WIDTH}, "
                f"got {self.batch_size}"
            )
        if self.backend not in BACKENDS:
            raise ValueError(f"CRITICAL: backend must be one of {BACKENDS}, got {self.backend!r}")
        if not 0.0 < self.confidence_level < 1.0:
            raise ValueError(
                f"CRITICAL: confidence_level must be in (0, 1), got {self.confidence_level}"
            )


# =============================================================================
# Report Configuration
# =============================================================================

@dataclass(frozen=True)
class ReportConfig:
    """
    Immutable report configuration.

    Attributes
    ----------
    top_n : int
        Ranked contracts shown in the report
    """

    top_n: int = 5


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from mc_option_pricing.config.settings import SETTINGS
    >>> SETTINGS.simulation.n_paths
    1000000
    """

    simulation: SimulationConfig = SimulationConfig()
    report: ReportConfig = ReportConfig()


# Singleton instance - import this
SETTINGS = Settings()
