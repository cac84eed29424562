"""
Parallel batch executor.

Runs one worker per non-empty WorkPartition. Each worker:
1. builds its own PathSampler from the seed derived for its partition index
2. prices every contract in its range (Monte Carlo price + analytic delta)
3. writes each result into the ResultSlice it exclusively owns

Design Principles:
- **No locks on the hot path**: the output buffer is an arena of per-worker
  slices; a slot is written once, by the single worker that owns its index
- **Single barrier**: results are collected only after every worker has
  finished; there is no partial-result view
- **Fail fast**: any worker exception aborts the batch as a WorkerFailureError,
  raised after all workers are joined
"""

import logging
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, Sequence

from mc_option_pricing.config.settings import SimulationConfig
from mc_option_pricing.data.schemas import Contract, SimulationResult
from mc_option_pricing.errors import WorkerFailureError
from mc_option_pricing.execution.partition import WorkPartition, check_coverage, partition
from mc_option_pricing.options.pricing.black_scholes import (
    analytic_result,
    validate_pricing_inputs,
)
from mc_option_pricing.options.simulation.monte_carlo import EngineVariant, get_engine
from mc_option_pricing.options.simulation.sampler import PathSampler, derive_seed

logger = logging.getLogger(__name__)


# =============================================================================
# Output Buffer
# =============================================================================


class ResultSlice:
    """
    Exclusive result storage for one partition.

    Only indices inside the partition can be written, each exactly once.

    Parameters
    ----------
    partition : WorkPartition
        The owning worker's range
    """

    def __init__(self, partition: WorkPartition):
        self.partition = partition
        self._slots: list[Optional[SimulationResult]] = [None] * partition.size

    def write(self, index: int, result: SimulationResult) -> None:
        """Store ``result`` at global ``index``."""
        if index not in self.partition:
            raise IndexError(
                f"CRITICAL: index {index} outside partition {self.partition.index} "
                f"[{self.partition.start}, {self.partition.end})"
            )
        offset = index - self.partition.start
        if self._slots[offset] is not None:
            raise RuntimeError(f"CRITICAL: result slot {index} written twice")
        self._slots[offset] = result

    @property
    def is_complete(self) -> bool:
        """True when every slot has been written."""
        return all(slot is not None for slot in self._slots)

    def results(self) -> tuple[SimulationResult, ...]:
        """Slot contents in index order."""
        if not self.is_complete:
            missing = [self.partition.start + i for i, s in enumerate(self._slots) if s is None]
            raise RuntimeError(
                f"CRITICAL: partition {self.partition.index} incomplete, "
                f"missing indices {missing[:10]}"
            )
        return tuple(self._slots)  # type: ignore[arg-type]


class ResultBuffer:
    """
    Pre-sized, index-aligned output made of one ResultSlice per partition.

    Parameters
    ----------
    item_count : int
        Number of contracts
    partitions : Sequence[WorkPartition]
        Disjoint ranges covering [0, item_count)
    """

    def __init__(self, item_count: int, partitions: Sequence[WorkPartition]):
        check_coverage(partitions, item_count)
        self.item_count = item_count
        self._slices = [ResultSlice(p) for p in partitions]

    def slice_for(self, partition_index: int) -> ResultSlice:
        """The slice owned by partition ``partition_index``."""
        return self._slices[partition_index]

    def adopt(self, filled: ResultSlice) -> None:
        """
        Take back a slice returned by a worker.

        Process workers fill a pickled copy, so the returned object replaces
        the one handed out.
        """
        current = self._slices[filled.partition.index]
        if filled.partition != current.partition:
            raise ValueError(
                f"CRITICAL: returned slice {filled.partition} does not match "
                f"{current.partition}"
            )
        self._slices[filled.partition.index] = filled

    def collect(self) -> tuple[SimulationResult, ...]:
        """All results, index-aligned with the input contracts."""
        collected: list[SimulationResult] = []
        for result_slice in self._slices:
            collected.extend(result_slice.results())
        return tuple(collected)


# =============================================================================
# Worker
# =============================================================================


@dataclass(frozen=True)
class WorkerTask:
    """
    Picklable unit of work for one partition.

    Attributes
    ----------
    partition : WorkPartition
        Range to price
    seed : int
        Seed of the worker's PathSampler
    n_paths : int
        Paths per contract
    variant : EngineVariant
        Kernel to use
    batch_size : int
        Block size for the batched kernel
    confidence_level : float
        Confidence level of Monte Carlo intervals
    """

    partition: WorkPartition
    seed: int
    n_paths: int
    variant: EngineVariant
    batch_size: int
    confidence_level: float = 0.95


def price_partition(
    contracts: Sequence[Contract],
    task: WorkerTask,
    out: ResultSlice,
) -> ResultSlice:
    """
    Worker body: price every contract of one partition.

    Parameters
    ----------
    contracts : Sequence[Contract]
        The partition's contracts only, ``contracts[0]`` is global index
        ``task.partition.start``
    task : WorkerTask
        Partition, seed and kernel settings
    out : ResultSlice
        Slice owned by this worker

    Returns
    -------
    ResultSlice
        ``out``, filled
    """
    sampler = PathSampler(task.seed)
    engine = get_engine(
        task.variant,
        batch_size=task.batch_size,
        confidence_level=task.confidence_level,
    )

    for index in task.partition.indices():
        contract = contracts[index - task.partition.start]

        estimate = engine.simulate(contract, task.n_paths, sampler)
        analytic = analytic_result(contract)

        out.write(
            index,
            SimulationResult(
                identifier=contract.identifier,
                price=estimate.price,
                delta=analytic.delta,
                expected_return=estimate.price / contract.strike,
                analytic_price=analytic.price,
                standard_error=estimate.standard_error,
            ),
        )

    return out


# =============================================================================
# Executor
# =============================================================================


@dataclass(frozen=True)
class BatchRun:
    """
    Completed batch.

    Attributes
    ----------
    results : tuple[SimulationResult, ...]
        Index-aligned with the input contracts
    elapsed_seconds : float
        Wall-clock duration of the parallel section
    n_paths : int
        Paths per contract
    n_workers : int
        Number of partitions
    variant : EngineVariant
        Kernel used
    base_seed : int
        Run-level seed
    """

    results: tuple[SimulationResult, ...]
    elapsed_seconds: float
    n_paths: int
    n_workers: int
    variant: EngineVariant
    base_seed: int

    @property
    def total_paths(self) -> int:
        """Paths simulated across all contracts."""
        return len(self.results) * self.n_paths

    @property
    def paths_per_second(self) -> float:
        """Throughput of the parallel section."""
        if self.elapsed_seconds <= 0:
            return float("inf") if self.total_paths else 0.0
        return self.total_paths / self.elapsed_seconds


class ParallelExecutor:
    """
    Prices a batch of contracts across a fixed pool of workers.

    Parameters
    ----------
    config : SimulationConfig, optional
        Path count, seed, workers, kernel and backend. Defaults to
        ``SimulationConfig()``.

    Examples
    --------
    >>> executor = ParallelExecutor(SimulationConfig(n_paths=100_000, n_workers=2))
    >>> run = executor.run(contracts)
    >>> run.results[0].price
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()

    def run(
        self,
        contracts: Sequence[Contract],
        partitions: Optional[Sequence[WorkPartition]] = None,
        base_seed: Optional[int] = None,
        n_paths: Optional[int] = None,
        variant: Optional[EngineVariant] = None,
    ) -> BatchRun:
        """
        Price every contract and return after all workers have joined.

        Parameters
        ----------
        contracts : Sequence[Contract]
            Validated contracts, read only
        partitions : Sequence[WorkPartition], optional
            Defaults to ``partition(len(contracts), config.n_workers)``
        base_seed : int, optional
            Overrides ``config.base_seed``
        n_paths : int, optional
            Overrides ``config.n_paths``
        variant : EngineVariant, optional
            Overrides ``config.variant``

        Returns
        -------
        BatchRun
            Index-aligned results and timing

        Raises
        ------
        DegenerateParameterError
            If any contract has zero volatility or time to expiry; raised
            before any worker starts
        InputValidationError
            If any contract cannot be priced in float64
        WorkerFailureError
            If any worker fails; raised after every worker has finished
        """
        config = self.config
        base_seed = config.base_seed if base_seed is None else base_seed
        n_paths = config.n_paths if n_paths is None else n_paths
        variant = config.variant if variant is None else EngineVariant(variant)

        if n_paths <= 0:
            raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")

        for contract in contracts:
            validate_pricing_inputs(contract)

        if partitions is None:
            partitions = partition(len(contracts), config.n_workers)
        partitions = tuple(partitions)
        buffer = ResultBuffer(len(contracts), partitions)

        tasks = [
            WorkerTask(
                partition=part,
                seed=derive_seed(base_seed, part.index, config.seed_strategy),
                n_paths=n_paths,
                variant=variant,
                batch_size=config.batch_size,
                confidence_level=config.confidence_level,
            )
            for part in partitions
            if not part.is_empty
        ]

        logger.info(
            f"Pricing {len(contracts)} contracts x {n_paths} paths on "
            f"{len(tasks)} {config.backend} workers ({variant.value} kernel)"
        )

        start_time = time.perf_counter()
        failures = self._execute(contracts, tasks, buffer) if tasks else []
        elapsed = time.perf_counter() - start_time

        if failures:
            for task, error in failures:
                logger.error(f"Worker {task.partition.index} failed: {error!r}")
            task, error = min(failures, key=lambda f: f[0].partition.index)
            raise WorkerFailureError(
                f"CRITICAL: worker {task.partition.index} failed on range "
                f"[{task.partition.start}, {task.partition.end}): {error}; "
                f"batch aborted ({len(failures)} of {len(tasks)} workers failed)",
                partition_index=task.partition.index,
                partition=task.partition,
            ) from error

        run = BatchRun(
            results=buffer.collect(),
            elapsed_seconds=elapsed,
            n_paths=n_paths,
            n_workers=len(partitions),
            variant=variant,
            base_seed=base_seed,
        )

        logger.info(
            f"Completed in {elapsed:.2f}s "
            f"({run.paths_per_second / 1e6:.2f} million paths/sec)"
        )

        return run

    def _execute(
        self,
        contracts: Sequence[Contract],
        tasks: list[WorkerTask],
        buffer: ResultBuffer,
    ) -> list[tuple[WorkerTask, Exception]]:
        """Run all tasks concurrently; return failures after the join."""
        pool_cls = ProcessPoolExecutor if self.config.backend == "process" else ThreadPoolExecutor
        failures: list[tuple[WorkerTask, Exception]] = []

        with pool_cls(max_workers=len(tasks)) as executor:
            future_to_task = {
                executor.submit(
                    price_partition,
                    contracts[task.partition.start : task.partition.end],
                    task,
                    buffer.slice_for(task.partition.index),
                ): task
                for task in tasks
            }

            for future in as_completed(future_to_task):
                task = future_to_task[future]
                try:
                    buffer.adopt(future.result())
                except Exception as e:
                    failures.append((task, e))

        return failures
