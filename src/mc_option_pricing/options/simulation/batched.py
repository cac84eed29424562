"""
Batched Monte Carlo kernel.

Same estimator as ReferenceEngine, evaluated in fixed-size blocks:
- draw ``batch_size`` normals from the sampler in one call
- evaluate the block as (batch_size / 4, 4) lanes with numpy
- sum the block, then add it to the running total
- the remainder (< batch_size paths) goes through the scalar kernel

The sampler is consumed in the same order as the reference kernel, so for
the same seed and path count the two prices differ only by summation order
(relative difference far below 1e-6), not necessarily bit-for-bit.
"""

import numpy as np

from mc_option_pricing.options.simulation.monte_carlo import (
    EngineVariant,
    KernelInputs,
    SimulationEngine,
    scalar_payoff_sums,
)
from mc_option_pricing.options.simulation.sampler import PathSampler

DEFAULT_BATCH_SIZE = 1024
LANE_WIDTH = 4


class BatchedEngine(SimulationEngine):
    """
    Block-wise kernel for throughput.

    Parameters
    ----------
    batch_size : int, default 1024
        Normals drawn per block; positive multiple of 4
    confidence_level : float, default 0.95
        Confidence level of the reported interval
    """

    variant = EngineVariant.BATCHED

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE, confidence_level: float = 0.95):
        super().__init__(confidence_level=confidence_level)
        if batch_size <= 0 or batch_size % LANE_WIDTH != 0:
            raise ValueError(
                f"CRITICAL: batch_size must be a positive multiple of {LANE_WIDTH}, "
                f"got {batch_size}"
            )
        self.batch_size = batch_size

    def _payoff_sums(
        self,
        inputs: KernelInputs,
        n_paths: int,
        sampler: PathSampler,
    ) -> tuple[float, float]:
        n_batches, remainder = divmod(n_paths, self.batch_size)
        lanes = (self.batch_size // LANE_WIDTH, LANE_WIDTH)

        sum_payoff = 0.0
        sum_squared = 0.0

        for _ in range(n_batches):
            z = sampler.standard_normals(self.batch_size).reshape(lanes)
            terminal = inputs.spot * np.exp(inputs.drift + inputs.diffusion * z)

            if inputs.is_call:
                payoffs = np.maximum(terminal - inputs.discounted_strike, 0.0)
            else:
                payoffs = np.maximum(inputs.discounted_strike - terminal, 0.0)

            sum_payoff += float(payoffs.sum())
            sum_squared += float(np.square(payoffs).sum())

        if remainder:
            tail_sum, tail_squared = scalar_payoff_sums(inputs, remainder, sampler)
            sum_payoff += tail_sum
            sum_squared += tail_squared

        return sum_payoff, sum_squared

    def __repr__(self) -> str:
        return (
            f"BatchedEngine(batch_size={self.batch_size}, "
            f"confidence_level={self.confidence_level})"
        )
