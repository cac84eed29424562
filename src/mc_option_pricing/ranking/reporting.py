"""
Plain-text batch report.

Summarizes a BatchRun: timing, throughput and the top-ranked contracts.
"""

from typing import Sequence

from mc_option_pricing.execution.executor import BatchRun
from mc_option_pricing.ranking.rankings import RankedResult, results_to_frame


def format_report(
    run: BatchRun,
    ranked: Sequence[RankedResult],
    top_n: int = 5,
    title: str = "Monte Carlo Pricing Results",
) -> str:
    """
    Render a batch run as text.

    Parameters
    ----------
    run : BatchRun
        Completed batch
    ranked : Sequence[RankedResult]
        Ranked results of ``run``
    top_n : int, default 5
        Number of contracts listed
    title : str
        Report heading

    Returns
    -------
    str
        Report text
    """
    lines = [
        f"=== {title} ===",
        f"Contracts: {len(run.results)}",
        f"Kernel: {run.variant.value}  Workers: {run.n_workers}  "
        f"Paths/contract: {run.n_paths:,}  Seed: {run.base_seed}",
        f"Time: {run.elapsed_seconds * 1000:.0f} ms",
        f"Throughput: {run.paths_per_second / 1e6:.2f} million paths/sec",
    ]

    if not ranked or top_n <= 0:
        lines.append("")
        lines.append("No results.")
        return "\n".join(lines)

    frame = results_to_frame(ranked, top_n=top_n)
    lines.append("")
    lines.append(f"Top {len(frame)} Options:")
    lines.append(frame.to_string(float_format=lambda v: f"{v:.6f}"))

    return "\n".join(lines)
