"""
Monte Carlo simulation for option pricing.

Provides:
- Deterministic per-worker normal sampler and seed derivation
- Reference (scalar) and batched Monte Carlo kernels
- Convergence analysis tools
"""

from mc_option_pricing.options.simulation.batched import (
    DEFAULT_BATCH_SIZE,
    BatchedEngine,
)
from mc_option_pricing.options.simulation.monte_carlo import (
    EngineVariant,
    MCEstimate,
    ReferenceEngine,
    SimulationEngine,
    convergence_analysis,
    get_engine,
    price_vanilla_mc,
)
from mc_option_pricing.options.simulation.sampler import (
    PathSampler,
    SeedStrategy,
    derive_seed,
)

__all__ = [
    # Sampling
    "PathSampler",
    "SeedStrategy",
    "derive_seed",
    # Engines
    "BatchedEngine",
    "DEFAULT_BATCH_SIZE",
    "EngineVariant",
    "MCEstimate",
    "ReferenceEngine",
    "SimulationEngine",
    "get_engine",
    # Analysis
    "convergence_analysis",
    "price_vanilla_mc",
]
