"""
Parallel batch execution.

Provides:
- Contiguous work partitioning across a fixed worker pool
- Lock-free, slice-per-worker result buffer
- ParallelExecutor with a single join barrier and fail-fast errors
"""

from mc_option_pricing.execution.executor import (
    BatchRun,
    ParallelExecutor,
    ResultBuffer,
    ResultSlice,
    WorkerTask,
    price_partition,
)
from mc_option_pricing.execution.partition import (
    WorkPartition,
    check_coverage,
    partition,
)

__all__ = [
    # Partitioning
    "WorkPartition",
    "check_coverage",
    "partition",
    # Execution
    "BatchRun",
    "ParallelExecutor",
    "ResultBuffer",
    "ResultSlice",
    "WorkerTask",
    "price_partition",
]
