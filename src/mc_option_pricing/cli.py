"""
Command-line entry point: load contracts, price in parallel, print ranking.

Usage
-----
    mc-option-pricing options.csv --variant batched --paths 1000000 --seed 12345
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from mc_option_pricing.config.settings import BACKENDS, SETTINGS, SimulationConfig
from mc_option_pricing.data.loader import DataIntegrityError, DataLoadError, load_contracts
from mc_option_pricing.errors import PricingError
from mc_option_pricing.execution.executor import ParallelExecutor
from mc_option_pricing.options.simulation.monte_carlo import EngineVariant
from mc_option_pricing.options.simulation.sampler import SeedStrategy
from mc_option_pricing.ranking.rankings import ResultRanker
from mc_option_pricing.ranking.reporting import format_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the pricing CLI."""
    defaults = SETTINGS.simulation

    parser = argparse.ArgumentParser(
        prog="mc-option-pricing",
        description="Monte Carlo batch option pricer with expected-return ranking",
    )
    parser.add_argument("csv_file", help="CSV with columns symbol,S,K,r,sigma,T,isCall")
    parser.add_argument(
        "--variant",
        choices=[v.value for v in EngineVariant],
        default=defaults.variant.value,
        help=f"Simulation kernel (default: {defaults.variant.value})",
    )
    parser.add_argument(
        "--paths",
        type=int,
        default=defaults.n_paths,
        help=f"Paths per contract (default: {defaults.n_paths})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.base_seed,
        help=f"Base seed (default: {defaults.base_seed})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (default: MC_OPTION_WORKERS or CPU count)",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=defaults.backend,
        help=f"Worker type (default: {defaults.backend})",
    )
    parser.add_argument(
        "--seed-strategy",
        choices=[s.value for s in SeedStrategy],
        default=defaults.seed_strategy.value,
        help="Worker seed derivation (default: offset = base seed + worker index)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=SETTINGS.report.top_n,
        help=f"Contracts listed in the report (default: {SETTINGS.report.top_n})",
    )
    parser.add_argument(
        "--checksum",
        default=None,
        help="Expected SHA-256 of the CSV file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the CLI.

    Returns
    -------
    int
        Process exit code (0 on success, 1 on any load/pricing error)
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SimulationConfig(
            n_paths=args.paths,
            base_seed=args.seed,
            n_workers=args.workers,
            variant=EngineVariant(args.variant),
            seed_strategy=SeedStrategy(args.seed_strategy),
            backend=args.backend,
        )

        print(f"Loading options from {args.csv_file}...")
        contracts = load_contracts(args.csv_file, expected_checksum=args.checksum)
        print(f"Loaded {len(contracts)} options")

        run = ParallelExecutor(config).run(contracts)
    except (PricingError, DataLoadError, DataIntegrityError, FileNotFoundError, ValueError) as e:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ranked = ResultRanker().rank(run.results)
    print()
    print(format_report(run, ranked, top_n=args.top))

    return 0


if __name__ == "__main__":
    sys.exit(main())
