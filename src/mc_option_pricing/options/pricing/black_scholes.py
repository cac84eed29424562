"""
Black-Scholes analytic pricing and delta.

Ground truth for the Monte Carlo engines and the delta estimator used by
the batch executor. No dividend yield.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

import math
import sys
from dataclasses import dataclass

from mc_option_pricing.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from mc_option_pricing.data.schemas import Contract, OptionType
from mc_option_pricing.errors import DegenerateParameterError, InputValidationError
from mc_option_pricing.options.pricing.normal import norm_cdf

# Squared payoffs on the discounted strike must stay finite in float64
MAX_LOG_DISCOUNTED_STRIKE = 0.5 * math.log(sys.float_info.max)


@dataclass(frozen=True)
class AnalyticResult:
    """
    Immutable Black-Scholes result.

    Attributes
    ----------
    price : float
        Option price
    delta : float
        Delta (dV/dS)
    d1 : float
        d1 parameter
    d2 : float
        d2 parameter
    """

    price: float
    delta: float
    d1: float
    d2: float


def validate_pricing_inputs(contract: Contract) -> None:
    """
    Reject contracts that cannot be priced before any division by σ√T.

    Raises
    ------
    DegenerateParameterError
        If volatility or time to expiry is zero
    InputValidationError
        If K e^(-rT) or its square would overflow float64
    """
    if contract.volatility == 0:
        raise DegenerateParameterError(
            f"CRITICAL: volatility is zero for {contract.identifier}; "
            f"sigma*sqrt(T) would divide by zero"
        )
    if contract.time_to_expiry == 0:
        raise DegenerateParameterError(
            f"CRITICAL: time_to_expiry is zero for {contract.identifier}; "
            f"sigma*sqrt(T) would divide by zero"
        )
    log_growth = max(math.log(contract.strike), 0.0) - contract.rate * contract.time_to_expiry
    if log_growth > MAX_LOG_DISCOUNTED_STRIKE:
        raise InputValidationError(
            f"CRITICAL: discounted strike K*exp(-rT) overflows for {contract.identifier} "
            f"(r={contract.rate}, T={contract.time_to_expiry})"
        )


def _calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Calculate d1 and d2 parameters.

    [T1] d1 = (ln(S/K) + (r + σ²/2)T) / (σ√T)
    [T1] d2 = d1 - σ√T
    """
    vol_sqrt_t = volatility * math.sqrt(time_to_expiry)

    d1 = (math.log(spot / strike) + (rate + 0.5 * volatility**2) * time_to_expiry) / vol_sqrt_t
    d2 = d1 - vol_sqrt_t

    return d1, d2


def _delta_from_cdf(n_d1: float, option_type: OptionType) -> float:
    """
    Delta from N(d1), kept inside the open interval.

    [T1] call Δ = N(d1) in (0, 1), put Δ = N(d1) - 1 in (-1, 0)

    N(d1) saturates to exactly 0 or 1 in float64 for deep ITM/OTM contracts;
    the result is clamped to the nearest representable interior value.
    """
    if option_type == OptionType.CALL:
        return min(max(n_d1, math.nextafter(0.0, 1.0)), math.nextafter(1.0, 0.0))
    return min(max(n_d1 - 1.0, math.nextafter(-1.0, 0.0)), math.nextafter(0.0, -1.0))


def _validate_inputs(
    spot: float,
    strike: float,
    volatility: float,
    time_to_expiry: float,
) -> None:
    """Validate scalar Black-Scholes inputs."""
    if spot <= 0:
        raise InputValidationError(f"CRITICAL: spot must be > 0, got {spot}")
    if strike <= 0:
        raise InputValidationError(f"CRITICAL: strike must be > 0, got {strike}")
    if volatility < 0:
        raise InputValidationError(f"CRITICAL: volatility must be >= 0, got {volatility}")
    if time_to_expiry < 0:
        raise InputValidationError(f"CRITICAL: time_to_expiry must be >= 0, got {time_to_expiry}")
    if volatility == 0 or time_to_expiry == 0:
        raise DegenerateParameterError(
            f"CRITICAL: volatility={volatility}, time_to_expiry={time_to_expiry}; "
            f"both must be > 0"
        )


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European call option using Black-Scholes.

    [T1] C = S*N(d1) - K*e^(-rT)*N(d2)

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.20, 1.0), 2)
    10.45
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, time_to_expiry)
    discount = math.exp(-rate * time_to_expiry)

    return spot * norm_cdf(d1) - strike * discount * norm_cdf(d2)


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    Price European put option using Black-Scholes.

    [T1] P = K*e^(-rT)*N(-d2) - S*N(-d1)

    Examples
    --------
    >>> round(black_scholes_put(100, 100, 0.05, 0.20, 1.0), 2)
    5.57
    """
    _validate_inputs(spot, strike, volatility, time_to_expiry)

    d1, d2 = _calculate_d1_d2(spot, strike, rate, volatility, time_to_expiry)
    discount = math.exp(-rate * time_to_expiry)

    return strike * discount * norm_cdf(-d2) - spot * norm_cdf(-d1)


def analytic_result(contract: Contract) -> AnalyticResult:
    """
    Price and delta of a contract.

    [T1] Delta (call) = N(d1)
    [T1] Delta (put) = N(d1) - 1

    Parameters
    ----------
    contract : Contract
        Contract to price

    Returns
    -------
    AnalyticResult
        Price, delta, d1 and d2

    Raises
    ------
    DegenerateParameterError
        If volatility or time to expiry is zero
    """
    validate_pricing_inputs(contract)

    d1, d2 = _calculate_d1_d2(
        contract.spot,
        contract.strike,
        contract.rate,
        contract.volatility,
        contract.time_to_expiry,
    )
    discount = contract.discount_factor
    n_d1 = norm_cdf(d1)

    if contract.option_type == OptionType.CALL:
        price = contract.spot * n_d1 - contract.strike * discount * norm_cdf(d2)
    else:
        price = contract.strike * discount * norm_cdf(-d2) - contract.spot * norm_cdf(-d1)

    delta = _delta_from_cdf(n_d1, contract.option_type)

    # The CDF approximation can leave deep OTM prices a hair below zero
    return AnalyticResult(price=max(price, 0.0), delta=delta, d1=d1, d2=d2)


def analytic_price(contract: Contract) -> float:
    """Closed-form price of a contract."""
    return analytic_result(contract).price


def analytic_delta(contract: Contract) -> float:
    """Closed-form delta of a contract."""
    validate_pricing_inputs(contract)

    d1, _ = _calculate_d1_d2(
        contract.spot,
        contract.strike,
        contract.rate,
        contract.volatility,
        contract.time_to_expiry,
    )
    return _delta_from_cdf(norm_cdf(d1), contract.option_type)


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    time_to_expiry: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> bool:
    """
    Verify put-call parity holds.

    [T1] C - P = S - K*e^(-rT)

    Returns
    -------
    bool
        True if parity holds within tolerance
    """
    lhs = call_price - put_price
    rhs = spot - strike * math.exp(-rate * time_to_expiry)

    return abs(lhs - rhs) < tolerance
