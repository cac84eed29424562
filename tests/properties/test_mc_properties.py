"""
Property-based tests for Monte Carlo simulation.

Uses Hypothesis to verify Monte Carlo properties:
1. Prices are non-negative
2. Reference and batched kernels agree for the same seed
3. MC price lies within a few standard errors of Black-Scholes
4. Same seed, same price

References:
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo Methods
    [T1] CLT for MC convergence
"""

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from mc_option_pricing.config.tolerances import VARIANT_EQUIVALENCE_TOLERANCE
from mc_option_pricing.data.schemas import Contract, OptionType
from mc_option_pricing.options.pricing.black_scholes import analytic_price
from mc_option_pricing.options.simulation.batched import BatchedEngine
from mc_option_pricing.options.simulation.monte_carlo import ReferenceEngine
from mc_option_pricing.options.simulation.sampler import PathSampler

# =============================================================================
# Strategy Definitions
# =============================================================================

# Constrained strategies: MC is expensive to run
spot_strategy = st.floats(min_value=50.0, max_value=200.0, allow_nan=False, allow_infinity=False)
moneyness_strategy = st.floats(min_value=0.8, max_value=1.2, allow_nan=False, allow_infinity=False)
rate_strategy = st.floats(min_value=-0.02, max_value=0.10, allow_nan=False, allow_infinity=False)
vol_strategy = st.floats(min_value=0.10, max_value=0.60, allow_nan=False, allow_infinity=False)
time_strategy = st.floats(min_value=0.25, max_value=2.0, allow_nan=False, allow_infinity=False)
kind_strategy = st.sampled_from([OptionType.CALL, OptionType.PUT])
seed_strategy = st.integers(min_value=0, max_value=2**32 - 1)


@st.composite
def contracts(draw) -> Contract:
    spot = draw(spot_strategy)
    return Contract(
        identifier="PROP",
        spot=spot,
        strike=spot * draw(moneyness_strategy),
        rate=draw(rate_strategy),
        volatility=draw(vol_strategy),
        time_to_expiry=draw(time_strategy),
        option_type=draw(kind_strategy),
    )


MC_SETTINGS = settings(
    max_examples=40,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)


class TestMCProperties:
    """[T1] Estimator properties over random contracts."""

    @given(contract=contracts(), seed=seed_strategy)
    @MC_SETTINGS
    def test_price_non_negative(self, contract: Contract, seed: int) -> None:
        assert BatchedEngine().price(contract, 2_048, PathSampler(seed)) >= 0.0

    @given(contract=contracts(), seed=seed_strategy, n_paths=st.integers(1, 3_000))
    @MC_SETTINGS
    def test_kernels_agree(self, contract: Contract, seed: int, n_paths: int) -> None:
        reference = ReferenceEngine().price(contract, n_paths, PathSampler(seed))
        batched = BatchedEngine(batch_size=256).price(contract, n_paths, PathSampler(seed))

        assert abs(batched - reference) <= VARIANT_EQUIVALENCE_TOLERANCE * max(abs(reference), 1e-9)

    @given(contract=contracts(), seed=seed_strategy)
    @MC_SETTINGS
    def test_near_analytic(self, contract: Contract, seed: int) -> None:
        """6 standard errors plus a small absolute floor for near-zero prices."""
        estimate = BatchedEngine().simulate(contract, 20_480, PathSampler(seed))
        bs = analytic_price(contract)

        assert abs(estimate.price - bs) < 6 * estimate.standard_error + 1e-3 * contract.spot

    @given(contract=contracts(), seed=seed_strategy)
    @MC_SETTINGS
    def test_deterministic(self, contract: Contract, seed: int) -> None:
        first = BatchedEngine().price(contract, 1_024, PathSampler(seed))
        second = BatchedEngine().price(contract, 1_024, PathSampler(seed))
        assert first == second
