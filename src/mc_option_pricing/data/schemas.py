"""
Contract and result schemas.

Immutable dataclasses representing option contracts and their pricing
results. Contracts are owned by the caller and only read by the core;
each result is written exactly once by the worker that owns its slot.
"""

import math
from dataclasses import dataclass
from enum import Enum

from mc_option_pricing.errors import InputValidationError


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"


# =============================================================================
# Contract
# =============================================================================

@dataclass(frozen=True)
class Contract:
    """
    European option contract on a non-dividend-paying underlying. [T1]

    Attributes
    ----------
    identifier : str
        Unique contract symbol (non-empty)
    spot : float
        Current underlying price S (> 0)
    strike : float
        Strike price K (> 0)
    rate : float
        Risk-free rate r (annualized, decimal, any sign)
    volatility : float
        Volatility σ (annualized, decimal, >= 0)
    time_to_expiry : float
        Time to maturity T in years (>= 0)
    option_type : OptionType
        CALL or PUT

    Notes
    -----
    σ == 0 and T == 0 are representable but degenerate: the analytic pricer
    and both simulation engines reject them with DegenerateParameterError.
    The CSV loader rejects them up front.

    Examples
    --------
    >>> Contract("ATM", 100.0, 100.0, 0.05, 0.20, 1.0, OptionType.CALL).moneyness
    1.0
    """

    identifier: str
    spot: float
    strike: float
    rate: float
    volatility: float
    time_to_expiry: float
    option_type: OptionType

    def __post_init__(self) -> None:
        """Validate contract fields."""
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise InputValidationError("CRITICAL: identifier must be a non-empty string")
        if not isinstance(self.option_type, OptionType):
            raise InputValidationError(
                f"CRITICAL: option_type must be OptionType for {self.identifier}, "
                f"got {self.option_type!r}"
            )
        for name in ("spot", "strike", "rate", "volatility", "time_to_expiry"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InputValidationError(
                    f"CRITICAL: {name} must be finite for {self.identifier}, got {value}"
                )
        if self.spot <= 0:
            raise InputValidationError(
                f"CRITICAL: spot must be > 0 for {self.identifier}, got {self.spot}"
            )
        if self.strike <= 0:
            raise InputValidationError(
                f"CRITICAL: strike must be > 0 for {self.identifier}, got {self.strike}"
            )
        if self.volatility < 0:
            raise InputValidationError(
                f"CRITICAL: volatility must be >= 0 for {self.identifier}, got {self.volatility}"
            )
        if self.time_to_expiry < 0:
            raise InputValidationError(
                f"CRITICAL: time_to_expiry must be >= 0 for {self.identifier}, "
                f"got {self.time_to_expiry}"
            )

    @property
    def is_call(self) -> bool:
        """True for calls."""
        return self.option_type == OptionType.CALL

    @property
    def moneyness(self) -> float:
        """Spot over strike."""
        return self.spot / self.strike

    @property
    def discount_factor(self) -> float:
        """[T1] exp(-rT)."""
        return math.exp(-self.rate * self.time_to_expiry)


# =============================================================================
# Simulation Result
# =============================================================================

@dataclass(frozen=True)
class SimulationResult:
    """
    Pricing result for one contract.

    Attributes
    ----------
    identifier : str
        Copied from the contract
    price : float
        Monte Carlo price (>= 0)
    delta : float
        Analytic delta
    expected_return : float
        Ranking proxy: price / strike
    analytic_price : float
        Closed-form price used as cross-check
    standard_error : float
        Standard error of the Monte Carlo price
    """

    identifier: str
    price: float
    delta: float
    expected_return: float
    analytic_price: float = float("nan")
    standard_error: float = float("nan")

    @property
    def pricing_error(self) -> float:
        """Monte Carlo minus analytic price."""
        return self.price - self.analytic_price

    @property
    def relative_pricing_error(self) -> float:
        """|MC - analytic| / analytic."""
        if abs(self.analytic_price) < 1e-10:
            return float("inf")
        return abs(self.pricing_error) / abs(self.analytic_price)
