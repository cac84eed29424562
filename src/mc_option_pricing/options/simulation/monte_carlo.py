"""
Monte Carlo option pricing engine.

Terminal-value simulation of risk-neutral GBM for European calls and puts:

[T1] S(T) = S * exp((r - σ²/2)T + σ√T * Z),  Z ~ N(0, 1)
[T1] Price = e^(-rT) * (1/N) * Σ payoff(S(T)_i)
[T1] MC converges to the analytical price at rate 1/√N

The discount is applied inside the payoff, on e^(-rT) S(T) = S * exp(-σ²T/2 + σ√T * Z)
against K e^(-rT), which keeps every exponent bounded.

Two interchangeable kernels consume the sampler in the same order, one
draw per path:
- ReferenceEngine: scalar loop
- BatchedEngine: fixed-size blocks, see batched.py

See: Glasserman (2003) "Monte Carlo Methods in Financial Engineering"
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
from scipy import stats

from mc_option_pricing.data.schemas import Contract
from mc_option_pricing.options.pricing.black_scholes import (
    analytic_price,
    validate_pricing_inputs,
)
from mc_option_pricing.options.simulation.sampler import PathSampler


class EngineVariant(Enum):
    """Simulation kernel selection."""

    REFERENCE = "reference"
    BATCHED = "batched"


@dataclass(frozen=True)
class MCEstimate:
    """
    Monte Carlo pricing estimate.

    Attributes
    ----------
    price : float
        Option price (discounted mean payoff)
    standard_error : float
        Standard error of the estimate
    confidence_interval : tuple[float, float]
        Two-sided confidence interval at ``confidence_level``
    n_paths : int
        Number of paths used
    discount_factor : float
        Discount factor used
    confidence_level : float
        Confidence level of the interval
    """

    price: float
    standard_error: float
    confidence_interval: tuple[float, float]
    n_paths: int
    discount_factor: float
    confidence_level: float = 0.95

    @property
    def relative_error(self) -> float:
        """Relative standard error (SE / price)."""
        if abs(self.price) < 1e-10:
            return float("inf")
        return self.standard_error / abs(self.price)

    @property
    def ci_width(self) -> float:
        """Width of the confidence interval."""
        return self.confidence_interval[1] - self.confidence_interval[0]


@dataclass(frozen=True)
class KernelInputs:
    """
    Per-contract constants shared by every path.

    Paths are simulated in discounted terms, S_T e^(-rT) against K e^(-rT),
    so the exponent stays bounded by z²/2 for any r, σ and T.
    """

    spot: float
    discounted_strike: float
    drift: float
    diffusion: float
    discount: float
    is_call: bool

    @classmethod
    def from_contract(cls, contract: Contract) -> "KernelInputs":
        """[T1] drift = -σ²T/2, diffusion = σ√T, discounted strike = K e^(-rT)."""
        sigma = contract.volatility
        discount = contract.discount_factor
        return cls(
            spot=contract.spot,
            discounted_strike=contract.strike * discount,
            drift=-0.5 * sigma * sigma * contract.time_to_expiry,
            diffusion=sigma * math.sqrt(contract.time_to_expiry),
            discount=discount,
            is_call=contract.is_call,
        )


def scalar_payoff_sums(
    inputs: KernelInputs,
    n_paths: int,
    sampler: PathSampler,
) -> tuple[float, float]:
    """
    Accumulate payoffs one draw at a time.

    Returns
    -------
    tuple[float, float]
        (sum of payoffs, sum of squared payoffs), discounted
    """
    spot = inputs.spot
    strike = inputs.discounted_strike
    drift = inputs.drift
    diffusion = inputs.diffusion
    is_call = inputs.is_call

    sum_payoff = 0.0
    sum_squared = 0.0

    for _ in range(n_paths):
        z = sampler.next_standard_normal()
        terminal = spot * math.exp(drift + diffusion * z)

        payoff = max(terminal - strike, 0.0) if is_call else max(strike - terminal, 0.0)

        sum_payoff += payoff
        sum_squared += payoff * payoff

    return sum_payoff, sum_squared


class SimulationEngine(ABC):
    """
    Abstract Monte Carlo kernel.

    Parameters
    ----------
    confidence_level : float, default 0.95
        Confidence level of the reported interval
    """

    variant: EngineVariant

    def __init__(self, confidence_level: float = 0.95):
        if not 0.0 < confidence_level < 1.0:
            raise ValueError(
                f"CRITICAL: confidence_level must be in (0, 1), got {confidence_level}"
            )
        self.confidence_level = confidence_level
        self._z = float(stats.norm.ppf(0.5 + confidence_level / 2.0))

    def simulate(self, contract: Contract, n_paths: int, sampler: PathSampler) -> MCEstimate:
        """
        Estimate the contract price from ``n_paths`` terminal values.

        Parameters
        ----------
        contract : Contract
            Contract to price
        n_paths : int
            Number of paths (>= 1); exactly this many draws are consumed
        sampler : PathSampler
            The calling worker's sampler

        Returns
        -------
        MCEstimate
            Price with standard error and confidence interval

        Raises
        ------
        DegenerateParameterError
            If volatility or time to expiry is zero
        InputValidationError
            If the discounted strike would overflow float64
        """
        if n_paths <= 0:
            raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
        validate_pricing_inputs(contract)

        inputs = KernelInputs.from_contract(contract)
        sum_payoff, sum_squared = self._payoff_sums(inputs, n_paths, sampler)

        return self._compute_estimate(inputs.discount, sum_payoff, sum_squared, n_paths)

    def price(self, contract: Contract, n_paths: int, sampler: PathSampler) -> float:
        """Monte Carlo price only."""
        return self.simulate(contract, n_paths, sampler).price

    @abstractmethod
    def _payoff_sums(
        self,
        inputs: KernelInputs,
        n_paths: int,
        sampler: PathSampler,
    ) -> tuple[float, float]:
        """Return (Σ payoff, Σ payoff²) over ``n_paths`` draws."""
        ...

    def _compute_estimate(
        self,
        discount: float,
        sum_payoff: float,
        sum_squared: float,
        n_paths: int,
    ) -> MCEstimate:
        """
        Compute MC estimate from payoff sums.

        [T1] SE = s / √N, s the sample standard deviation of discounted payoffs.
        ``discount`` is recorded on the estimate only.
        """
        mean_payoff = sum_payoff / n_paths
        if n_paths > 1:
            variance = max(sum_squared - n_paths * mean_payoff * mean_payoff, 0.0) / (n_paths - 1)
        else:
            variance = 0.0

        price = mean_payoff
        se_price = math.sqrt(variance / n_paths)
        half_width = self._z * se_price

        return MCEstimate(
            price=price,
            standard_error=se_price,
            confidence_interval=(price - half_width, price + half_width),
            n_paths=n_paths,
            discount_factor=discount,
            confidence_level=self.confidence_level,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(confidence_level={self.confidence_level})"


class ReferenceEngine(SimulationEngine):
    """
    Scalar reference kernel: one draw, one path, one accumulation.

    Examples
    --------
    >>> contract = Contract("ATM", 100, 100, 0.05, 0.20, 1.0, OptionType.CALL)
    >>> ReferenceEngine().price(contract, 100_000, PathSampler(42))  # ~10.45
    """

    variant = EngineVariant.REFERENCE

    def _payoff_sums(
        self,
        inputs: KernelInputs,
        n_paths: int,
        sampler: PathSampler,
    ) -> tuple[float, float]:
        return scalar_payoff_sums(inputs, n_paths, sampler)


def get_engine(
    variant: EngineVariant,
    batch_size: Optional[int] = None,
    confidence_level: float = 0.95,
) -> SimulationEngine:
    """
    Build the kernel for ``variant``.

    Parameters
    ----------
    variant : EngineVariant
        REFERENCE or BATCHED
    batch_size : int, optional
        Block size for the batched kernel (default 1024)
    confidence_level : float, default 0.95
        Confidence level of reported intervals

    Returns
    -------
    SimulationEngine
        Kernel instance
    """
    from mc_option_pricing.options.simulation.batched import (
        DEFAULT_BATCH_SIZE,
        BatchedEngine,
    )

    variant = EngineVariant(variant)

    if variant == EngineVariant.REFERENCE:
        return ReferenceEngine(confidence_level=confidence_level)
    return BatchedEngine(
        batch_size=batch_size or DEFAULT_BATCH_SIZE,
        confidence_level=confidence_level,
    )


def price_vanilla_mc(
    contract: Contract,
    n_paths: int = 100_000,
    seed: int = 42,
    variant: EngineVariant = EngineVariant.BATCHED,
) -> MCEstimate:
    """
    Convenience function to price one contract with a fresh sampler.

    Parameters
    ----------
    contract : Contract
        Contract to price
    n_paths : int, default 100000
        Number of paths
    seed : int, default 42
        Sampler seed
    variant : EngineVariant, default BATCHED
        Kernel to use

    Returns
    -------
    MCEstimate
        Monte Carlo pricing estimate
    """
    engine = get_engine(variant)
    return engine.simulate(contract, n_paths, PathSampler(seed))


def convergence_analysis(
    contract: Contract,
    path_counts: tuple[int, ...] = (1_000, 5_000, 10_000, 50_000, 100_000, 500_000),
    seed: int = 42,
    variant: EngineVariant = EngineVariant.BATCHED,
) -> dict:
    """
    Analyze MC convergence to the analytical price.

    [T1] MC error should converge at rate 1/√N.

    Parameters
    ----------
    contract : Contract
        Contract to price
    path_counts : tuple[int, ...]
        Number of paths to test, each with a fresh sampler on ``seed``
    seed : int
        Random seed
    variant : EngineVariant
        Kernel to use

    Returns
    -------
    dict
        Per-count results and the fitted log-log convergence rate
    """
    reference_price = analytic_price(contract)
    engine = get_engine(variant)
    results = []

    for n in path_counts:
        estimate = engine.simulate(contract, n, PathSampler(seed))

        error = abs(estimate.price - reference_price)
        rel_error = error / reference_price if reference_price > 0 else float("inf")

        results.append(
            {
                "n_paths": n,
                "mc_price": estimate.price,
                "analytical_price": reference_price,
                "absolute_error": error,
                "relative_error": rel_error,
                "standard_error": estimate.standard_error,
                "within_ci": estimate.confidence_interval[0]
                <= reference_price
                <= estimate.confidence_interval[1],
            }
        )

    return {
        "results": results,
        "convergence_rate": _estimate_convergence_rate(results),
    }


def _estimate_convergence_rate(results: list[dict]) -> float:
    """
    Estimate convergence rate from results.

    [T1] Theory predicts rate = -0.5 (error ~ 1/√N). Standard errors are
    used rather than realized errors, which are too noisy for a fit.
    """
    if len(results) < 2:
        return float("nan")

    log_n = np.log([r["n_paths"] for r in results])
    log_error = np.log([r["standard_error"] + 1e-12 for r in results])

    slope, _ = np.polyfit(log_n, log_error, 1)

    return float(slope)
