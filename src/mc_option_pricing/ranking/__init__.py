"""
Result ranking and reporting.

Provides:
- Expected-return ranking with stable tie-breaking
- DataFrame and text report rendering
"""

from mc_option_pricing.ranking.rankings import (
    RankedResult,
    ResultRanker,
    rank_results,
    results_to_frame,
)
from mc_option_pricing.ranking.reporting import format_report

__all__ = [
    "RankedResult",
    "ResultRanker",
    "format_report",
    "rank_results",
    "results_to_frame",
]
