"""
Analytic option pricing.

Provides:
- Abramowitz-Stegun normal CDF approximation and density
- Black-Scholes price and delta (ground truth for Monte Carlo)
"""

from mc_option_pricing.options.pricing.black_scholes import (
    AnalyticResult,
    analytic_delta,
    analytic_price,
    analytic_result,
    black_scholes_call,
    black_scholes_put,
    put_call_parity_check,
    validate_pricing_inputs,
)
from mc_option_pricing.options.pricing.normal import (
    norm_cdf,
    norm_cdf_array,
    norm_pdf,
    norm_pdf_array,
)

__all__ = [
    # Black-Scholes
    "AnalyticResult",
    "analytic_delta",
    "analytic_price",
    "analytic_result",
    "black_scholes_call",
    "black_scholes_put",
    "put_call_parity_check",
    "validate_pricing_inputs",
    # Normal distribution
    "norm_cdf",
    "norm_cdf_array",
    "norm_pdf",
    "norm_pdf_array",
]
