"""
Contract CSV loader with checksum verification and SyntheticContractProvider.

NEVER fails silently - all errors are explicit. Every row is validated
before any simulation starts; the first invalid row aborts the load.

Expected format (header required)::

    symbol,S,K,r,sigma,T,isCall
    AAPL_C_150,150.0,155.0,0.05,0.25,0.5,1
"""

import hashlib
import logging
import math
import warnings
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from mc_option_pricing.data.schemas import Contract, OptionType
from mc_option_pricing.errors import InputValidationError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("symbol", "S", "K", "r", "sigma", "T", "isCall")


class DataIntegrityError(Exception):
    """Raised when data checksum verification fails."""

    pass


class DataLoadError(Exception):
    """Raised when data loading fails."""

    pass


class SyntheticDataWarning(UserWarning):
    """Warning issued when synthetic data is being used."""

    pass


# =============================================================================
# SyntheticContractProvider - Generates synthetic contracts for demos/benchmarks
# =============================================================================


class SyntheticContractProvider:
    """
    Generate synthetic option contracts for testing and benchmarks.

    ⚠️ SYNTHETIC DATA - NOT FOR PRODUCTION USE

    Usage
    -----
    >>> provider = SyntheticContractProvider(seed=42)
    >>> contracts = provider.generate_contracts(n_contracts=100)
    >>> df = provider.generate_frame(n_contracts=100)
    """

    UNDERLYINGS = ["AAPL", "MSFT", "GOOG", "AMZN", "NVDA", "META", "TSLA", "JPM"]

    def __init__(self, seed: int = 42):
        """
        Initialize provider with random seed for reproducibility.

        Parameters
        ----------
        seed : int
            Random seed for reproducible synthetic data generation
        """
        self.rng = np.random.default_rng(seed)

    def generate_frame(self, n_contracts: int = 100) -> pd.DataFrame:
        """
        Generate contracts in the CSV column layout.

        Parameters
        ----------
        n_contracts : int
            Number of contracts

        Returns
        -------
        pd.DataFrame
            Columns symbol, S, K, r, sigma, T, isCall
        """
        if n_contracts < 0:
            raise ValueError(f"CRITICAL: n_contracts must be >= 0, got {n_contracts}")

        underlyings = self.rng.choice(self.UNDERLYINGS, size=n_contracts)
        spots = np.round(self.rng.uniform(50.0, 500.0, size=n_contracts), 2)
        # Strikes within ±20% of spot
        strikes = np.round(spots * self.rng.uniform(0.8, 1.2, size=n_contracts), 0)
        rates = np.round(self.rng.uniform(0.01, 0.06, size=n_contracts), 4)
        vols = np.round(self.rng.uniform(0.10, 0.60, size=n_contracts), 4)
        maturities = np.round(self.rng.uniform(0.1, 2.0, size=n_contracts), 3)
        is_call = self.rng.integers(0, 2, size=n_contracts)

        symbols = [
            f"{u}_{'C' if c else 'P'}_{int(k)}_{i}"
            for i, (u, k, c) in enumerate(zip(underlyings, strikes, is_call))
        ]

        return pd.DataFrame(
            {
                "symbol": symbols,
                "S": spots,
                "K": strikes,
                "r": rates,
                "sigma": vols,
                "T": maturities,
                "isCall": is_call,
            },
            columns=list(REQUIRED_COLUMNS),
        )

    def generate_contracts(self, n_contracts: int = 100) -> list[Contract]:
        """Generate validated Contract objects."""
        warnings.warn(
            "Using SYNTHETIC contracts. Results are for testing only.",
            SyntheticDataWarning,
            stacklevel=2,
        )
        return contracts_from_frame(self.generate_frame(n_contracts))


# =============================================================================
# Checksums
# =============================================================================


def compute_sha256(file_path: Path) -> str:
    """
    Compute SHA-256 hash of a file.

    Raises
    ------
    FileNotFoundError
        If file does not exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"CRITICAL: File not found: {file_path}")

    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256_hash.update(chunk)

    return sha256_hash.hexdigest()


def verify_checksum(file_path: Path, expected_checksum: str) -> None:
    """
    Verify file integrity via SHA-256 checksum.

    Raises
    ------
    DataIntegrityError
        If checksum does not match
    """
    actual_checksum = compute_sha256(file_path)

    if actual_checksum != expected_checksum:
        raise DataIntegrityError(
            f"CRITICAL: Checksum mismatch for {file_path}.\n"
            f"Expected: {expected_checksum}\n"
            f"Actual:   {actual_checksum}\n"
            f"Data may be corrupted or modified."
        )


# =============================================================================
# Parsing
# =============================================================================


def _parse_option_type(value: object, symbol: str) -> OptionType:
    """isCall column: 1 -> CALL, 0 -> PUT."""
    try:
        flag = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise InputValidationError(
            f"CRITICAL: isCall must be 0 or 1 for {symbol}, got {value!r}"
        ) from e
    if flag not in (0, 1):
        raise InputValidationError(f"CRITICAL: isCall must be 0 or 1 for {symbol}, got {value!r}")
    return OptionType.CALL if flag == 1 else OptionType.PUT


def _row_to_contract(row: dict, line_number: int) -> Contract:
    """Build and validate one contract; ``line_number`` is 1-based incl. header."""
    raw_symbol = row["symbol"]
    symbol = "" if pd.isna(raw_symbol) else str(raw_symbol).strip()
    if not symbol:
        raise InputValidationError(f"CRITICAL: empty symbol on line {line_number}")

    values = {}
    for column in ("S", "K", "r", "sigma", "T"):
        try:
            values[column] = float(row[column])
        except (TypeError, ValueError) as e:
            raise InputValidationError(
                f"CRITICAL: non-numeric {column}={row[column]!r} for {symbol} "
                f"(line {line_number})"
            ) from e
        if not math.isfinite(values[column]):
            raise InputValidationError(
                f"CRITICAL: missing or non-finite {column} for {symbol} (line {line_number})"
            )

    # Loader-level rule: zero volatility / maturity never enters the core
    if values["sigma"] <= 0.0:
        raise InputValidationError(f"CRITICAL: Invalid volatility: {symbol} (line {line_number})")
    if values["T"] <= 0.0:
        raise InputValidationError(
            f"CRITICAL: Invalid time to maturity: {symbol} (line {line_number})"
        )

    return Contract(
        identifier=symbol,
        spot=values["S"],
        strike=values["K"],
        rate=values["r"],
        volatility=values["sigma"],
        time_to_expiry=values["T"],
        option_type=_parse_option_type(row["isCall"], symbol),
    )


def contracts_from_frame(df: pd.DataFrame) -> list[Contract]:
    """
    Convert a DataFrame in the CSV layout to validated contracts.

    Raises
    ------
    DataLoadError
        If required columns are missing
    InputValidationError
        On the first invalid row
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(
            f"CRITICAL: missing columns {missing}. Expected header: {','.join(REQUIRED_COLUMNS)}"
        )

    return [
        _row_to_contract(row, line_number)
        for line_number, row in enumerate(df.to_dict(orient="records"), start=2)
    ]


def load_contracts(
    path: Union[str, Path],
    expected_checksum: Optional[str] = None,
) -> list[Contract]:
    """
    Load and validate contracts from CSV.

    Parameters
    ----------
    path : str or Path
        CSV file with header ``symbol,S,K,r,sigma,T,isCall``
    expected_checksum : str, optional
        SHA-256 to verify before parsing

    Returns
    -------
    list[Contract]
        Contracts in file order

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    DataIntegrityError
        If checksum verification fails
    DataLoadError
        If the file cannot be parsed or columns are missing
    InputValidationError
        If any row is invalid (non-positive S/K/σ/T, empty symbol, ...)
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"CRITICAL: Cannot open file: {file_path}")

    if expected_checksum is not None:
        verify_checksum(file_path, expected_checksum)

    try:
        df = pd.read_csv(
            file_path,
            dtype=str,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"CRITICAL: Failed to parse {file_path}: {e}") from e

    contracts = contracts_from_frame(df)
    logger.info(f"Loaded {len(contracts)} contracts from {file_path}")

    return contracts
