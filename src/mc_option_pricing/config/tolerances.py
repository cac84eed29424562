"""
Centralized tolerance framework for option pricing.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Closed-form results, approximation-bound limited
    Tier 2 (Reproducibility): Same seed, same kernel or reordered summation
    Tier 3 (Stochastic): CLT-derived, Monte Carlo vs analytical

References:
    [T1] Abramowitz & Stegun (1964) 26.2.17 - normal CDF approximation
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances
# =============================================================================

#: Maximum absolute error of the Abramowitz-Stegun 26.2.17 CDF approximation
#: Published bound is 7.5e-8; 1.5e-7 leaves a factor 2 for float64 rounding
NORMAL_CDF_APPROXIMATION_TOLERANCE: Final[float] = 1.5e-7

#: N(x) + N(-x) = 1; reflection makes this exact up to rounding
NORMAL_CDF_SYMMETRY_TOLERANCE: Final[float] = 1e-7

#: Put-call parity without dividends: C - P = S - K*exp(-rT)
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-6

#: Known-answer checks quoted to 4 decimal places
KNOWN_ANSWER_TOLERANCE: Final[float] = 1e-3


# =============================================================================
# Tier 2: Reproducibility Tolerances
# =============================================================================

#: Same kernel, same seed, same path count
DETERMINISM_TOLERANCE: Final[float] = 1e-10

#: Reference vs batched kernel, same seed: only summation order differs
#: Relative tolerance
VARIANT_EQUIVALENCE_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of Monte Carlo paths
    sigma : float
        Estimated relative volatility of the payoff
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Relative tolerance for MC vs analytical comparison
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: MC vs analytical at 1,000,000 paths, relative
BS_MC_CONVERGENCE_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "normal_cdf_approximation": NORMAL_CDF_APPROXIMATION_TOLERANCE,
    "normal_cdf_symmetry": NORMAL_CDF_SYMMETRY_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "known_answer": KNOWN_ANSWER_TOLERANCE,
    "determinism": DETERMINISM_TOLERANCE,
    "variant_equivalence": VARIANT_EQUIVALENCE_TOLERANCE,
    "bs_mc_convergence": BS_MC_CONVERGENCE_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
