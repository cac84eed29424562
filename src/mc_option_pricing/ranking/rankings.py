"""
Result rankings by expected return.

Ranks completed simulation results by ``expected_return`` (price / strike),
highest first. Ties keep input order: Python's sort is stable, including
with ``reverse=True``, so equal keys are never reordered.
"""

from dataclasses import dataclass
from operator import attrgetter
from typing import Iterable, Optional

import pandas as pd

from mc_option_pricing.data.schemas import SimulationResult


@dataclass(frozen=True)
class RankedResult:
    """
    Ranked simulation result.

    Attributes
    ----------
    rank : int
        Rank (1 = highest expected return)
    result : SimulationResult
        The underlying result
    """

    rank: int
    result: SimulationResult

    @property
    def identifier(self) -> str:
        """Contract identifier."""
        return self.result.identifier

    @property
    def expected_return(self) -> float:
        """Ranking key."""
        return self.result.expected_return


def rank_results(results: Iterable[SimulationResult]) -> tuple[SimulationResult, ...]:
    """
    Sort results by expected return, descending.

    Parameters
    ----------
    results : Iterable[SimulationResult]
        Completed results, in input order

    Returns
    -------
    tuple[SimulationResult, ...]
        Sorted results; equal expected returns keep input order

    Examples
    --------
    >>> ranked = rank_results(run.results)
    >>> ranked[0].expected_return >= ranked[-1].expected_return
    True
    """
    return tuple(sorted(results, key=attrgetter("expected_return"), reverse=True))


class ResultRanker:
    """
    Expected-return ranker.

    Examples
    --------
    >>> ranker = ResultRanker()
    >>> top = ranker.top(run.results, n=5)
    >>> top[0].rank
    1
    """

    def rank(self, results: Iterable[SimulationResult]) -> list[RankedResult]:
        """Rank all results, 1-based."""
        return [
            RankedResult(rank=position, result=result)
            for position, result in enumerate(rank_results(results), start=1)
        ]

    def top(self, results: Iterable[SimulationResult], n: int = 5) -> list[RankedResult]:
        """
        Highest ``n`` expected returns.

        Raises
        ------
        ValueError
            If n is negative
        """
        if n < 0:
            raise ValueError(f"CRITICAL: n must be >= 0, got {n}")
        return self.rank(results)[:n]


def results_to_frame(
    ranked: Iterable[RankedResult],
    top_n: Optional[int] = None,
) -> pd.DataFrame:
    """
    Tabulate ranked results.

    Parameters
    ----------
    ranked : Iterable[RankedResult]
        Output of ResultRanker.rank
    top_n : int, optional
        Keep only the first ``top_n`` rows

    Returns
    -------
    pd.DataFrame
        One row per result, indexed by rank
    """
    rows = [
        {
            "rank": r.rank,
            "symbol": r.result.identifier,
            "price": r.result.price,
            "analytic_price": r.result.analytic_price,
            "std_error": r.result.standard_error,
            "delta": r.result.delta,
            "expected_return": r.result.expected_return,
        }
        for r in ranked
    ]
    columns = ["rank", "symbol", "price", "analytic_price", "std_error", "delta", "expected_return"]
    df = pd.DataFrame(rows, columns=columns).set_index("rank")

    if top_n is not None:
        df = df.head(top_n)

    return df
