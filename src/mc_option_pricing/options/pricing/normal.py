"""
Standard normal density and CDF approximation.

[T1] Abramowitz & Stegun (1964) formula 26.2.17:
N(x) ≈ 1 - n(x) * (a1*t + a2*t² + a3*t³ + a4*t⁴ + a5*t⁵),  t = 1/(1 + p*x),  x >= 0

Published maximum absolute error is 7.5e-8. Negative arguments are
reflected with N(-x) = 1 - N(x), so symmetry holds up to rounding.

Note: the approximation gives N(0) = 0.5000000005, not 0.5 exactly; the
reflected left-hand limit is 0.4999999995.
"""

import math

import numpy as np

# Abramowitz & Stegun 26.2.17 coefficients
AS_P = 0.2316419
AS_A1 = 0.319381530
AS_A2 = -0.356563782
AS_A3 = 1.781477937
AS_A4 = -1.821255978
AS_A5 = 1.330274429

_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_pdf(x: float) -> float:
    """
    Standard normal density.

    [T1] n(x) = exp(-x²/2) / √(2π)
    """
    return math.exp(-0.5 * x * x) * _INV_SQRT_2PI


def norm_cdf(x: float) -> float:
    """
    Standard normal CDF via Abramowitz-Stegun 26.2.17.

    Parameters
    ----------
    x : float
        Evaluation point

    Returns
    -------
    float
        N(x) in [0, 1]

    Examples
    --------
    >>> round(norm_cdf(1.0), 4)
    0.8413
    >>> round(norm_cdf(-1.0), 4)
    0.1587
    """
    if math.isnan(x):
        raise ValueError("CRITICAL: norm_cdf argument is NaN")
    if x < 0.0:
        return 1.0 - norm_cdf(-x)

    t = 1.0 / (1.0 + AS_P * x)
    # Horner form of a1*t + ... + a5*t^5
    poly = t * (AS_A1 + t * (AS_A2 + t * (AS_A3 + t * (AS_A4 + t * AS_A5))))

    return 1.0 - norm_pdf(x) * poly


def norm_pdf_array(x: np.ndarray) -> np.ndarray:
    """Vectorized norm_pdf."""
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x * x) * _INV_SQRT_2PI


def norm_cdf_array(x: np.ndarray) -> np.ndarray:
    """
    Vectorized norm_cdf with the same approximation and reflection.

    Parameters
    ----------
    x : np.ndarray
        Evaluation points

    Returns
    -------
    np.ndarray
        N(x), same shape as x
    """
    x = np.asarray(x, dtype=float)
    if np.isnan(x).any():
        raise ValueError("CRITICAL: norm_cdf_array argument contains NaN")

    abs_x = np.abs(x)
    t = 1.0 / (1.0 + AS_P * abs_x)
    poly = t * (AS_A1 + t * (AS_A2 + t * (AS_A3 + t * (AS_A4 + t * AS_A5))))
    upper = 1.0 - norm_pdf_array(abs_x) * poly

    return np.where(x < 0.0, 1.0 - upper, upper)
