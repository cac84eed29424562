#!/usr/bin/env python3
"""
Generate a synthetic options CSV for benchmarks and demos.

Output: options.csv in the CLI input format (symbol,S,K,r,sigma,T,isCall)
plus its SHA-256, suitable for ``mc-option-pricing --checksum``.

Distribution targets:
- Spot 50-500, strike within ±20% of spot
- r 1-6%, σ 10-60%, T 0.1-2 years
- Calls and puts in equal proportion
"""

import sys
from pathlib import Path

sys.path.insert(0, "src")

from mc_option_pricing.data.loader import SyntheticContractProvider, compute_sha256


def generate_sample_options(n_contracts: int, output_path: Path, seed: int = 42) -> str:
    """
    Write ``n_contracts`` synthetic contracts and return the file checksum.

    Parameters
    ----------
    n_contracts : int
        Number of rows
    output_path : Path
        Destination CSV
    seed : int
        Generator seed

    Returns
    -------
    str
        SHA-256 of the written file
    """
    print(f"Generating {n_contracts} synthetic contracts (seed={seed})")
    df = SyntheticContractProvider(seed=seed).generate_frame(n_contracts)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    print(f"Writing {len(df)} records to {output_path}")

    print_summary(df)
    return compute_sha256(output_path)


def print_summary(df) -> None:
    """Print distribution statistics of the generated batch."""
    print()
    print("=" * 60)
    print("Summary Statistics")
    print("=" * 60)
    print(f"  Calls: {int(df['isCall'].sum())}  Puts: {int((1 - df['isCall']).sum())}")
    moneyness = df["S"] / df["K"]
    print(f"  Moneyness S/K: min={moneyness.min():.3f}, max={moneyness.max():.3f}")
    print(f"  sigma: min={df['sigma'].min():.2%}, max={df['sigma'].max():.2%}, "
          f"mean={df['sigma'].mean():.2%}")
    print(f"  T: min={df['T'].min():.3f}, max={df['T'].max():.3f}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate a synthetic options CSV")
    parser.add_argument("--n-contracts", type=int, default=1_000, help="Number of contracts")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("options.csv"),
        help="Output CSV path",
    )
    args = parser.parse_args()

    checksum = generate_sample_options(args.n_contracts, args.output, seed=args.seed)
    print()
    print(f"sha256: {checksum}")
