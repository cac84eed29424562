"""
mc-option-pricing: Parallel Monte Carlo pricing and ranking of European options.

Quick Start
-----------
>>> from mc_option_pricing import Contract, OptionType, ParallelExecutor, SimulationConfig, rank_results
>>> contracts = [Contract("ATM_C", 100.0, 100.0, 0.05, 0.20, 1.0, OptionType.CALL)]
>>> run = ParallelExecutor(SimulationConfig(n_paths=100_000, n_workers=2)).run(contracts)
>>> ranked = rank_results(run.results)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Data Model
# =============================================================================
from mc_option_pricing.data.schemas import Contract, OptionType, SimulationResult
from mc_option_pricing.data.loader import load_contracts, SyntheticContractProvider

# =============================================================================
# Errors
# =============================================================================
from mc_option_pricing.errors import (
    DegenerateParameterError,
    InputValidationError,
    PricingError,
    WorkerFailureError,
)

# =============================================================================
# Pricing
# =============================================================================
from mc_option_pricing.options.pricing import (
    analytic_delta,
    analytic_price,
    norm_cdf,
    norm_pdf,
)
from mc_option_pricing.options.simulation import (
    BatchedEngine,
    EngineVariant,
    MCEstimate,
    PathSampler,
    ReferenceEngine,
    SeedStrategy,
    get_engine,
)

# =============================================================================
# Execution and Ranking
# =============================================================================
from mc_option_pricing.execution import BatchRun, ParallelExecutor, WorkPartition, partition
from mc_option_pricing.ranking import RankedResult, ResultRanker, format_report, rank_results

# =============================================================================
# Configuration
# =============================================================================
from mc_option_pricing.config.settings import SETTINGS, SimulationConfig

__all__ = [
    # Version
    "__version__",
    # Data
    "Contract",
    "OptionType",
    "SimulationResult",
    "load_contracts",
    "SyntheticContractProvider",
    # Errors
    "PricingError",
    "InputValidationError",
    "DegenerateParameterError",
    "WorkerFailureError",
    # Pricing
    "analytic_price",
    "analytic_delta",
    "norm_cdf",
    "norm_pdf",
    "BatchedEngine",
    "EngineVariant",
    "MCEstimate",
    "PathSampler",
    "ReferenceEngine",
    "SeedStrategy",
    "get_engine",
    # Execution
    "BatchRun",
    "ParallelExecutor",
    "WorkPartition",
    "partition",
    # Ranking
    "RankedResult",
    "ResultRanker",
    "format_report",
    "rank_results",
    # Config
    "SETTINGS",
    "SimulationConfig",
]
