"""
Centralized pytest fixtures for the mc-option-pricing test suite.

Fixture Categories:
1. Tolerances - Tiered tolerance framework
2. Contracts - Standard ATM contracts and batches
3. Fixture files - Sample CSV with checksum verification
4. Configuration - Small, fast simulation configs
"""

import hashlib
import warnings
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pytest

from mc_option_pricing.config.settings import SimulationConfig
from mc_option_pricing.data.schemas import Contract, OptionType

# =============================================================================
# FIXTURE PATHS
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
OPTIONS_SAMPLE_PATH = FIXTURES_DIR / "options_sample.csv"
CHECKSUMS_PATH = FIXTURES_DIR / "CHECKSUMS.sha256"


# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    See: mc_option_pricing/config/tolerances.py
    """

    # Same seed, same kernel
    determinism: float = 1e-10

    # Reference vs batched kernel, relative
    variant_equivalence: float = 1e-6

    # Analytical identities
    parity: float = 1e-6

    # Monte Carlo vs analytical, relative
    mc_1m_paths: float = 0.01


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# CHECKSUM VERIFICATION
# =============================================================================

def _compute_sha256(filepath: Path) -> str:
    """Compute SHA-256 hash of a file."""
    sha256_hash = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(4096), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()


def _load_expected_checksums() -> dict[str, str]:
    """Load expected checksums from CHECKSUMS.sha256 file."""
    checksums = {}
    if CHECKSUMS_PATH.exists():
        with open(CHECKSUMS_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    parts = line.split()
                    if len(parts) >= 2:
                        checksum, filename = parts[0], parts[1]
                        checksums[filename] = checksum
    return checksums


@pytest.fixture(scope="session", autouse=True)
def verify_fixture_checksums():
    """
    Verify test fixtures haven't changed unexpectedly.

    If fixtures have changed, either:
    1. The change was intentional → update CHECKSUMS.sha256
    2. The change was unintentional → investigate the cause
    """
    expected = _load_expected_checksums()

    for filename, expected_hash in expected.items():
        filepath = FIXTURES_DIR / filename
        if filepath.exists():
            actual_hash = _compute_sha256(filepath)
            if actual_hash != expected_hash:
                warnings.warn(
                    f"Fixture checksum mismatch for {filename}!\n"
                    f"  Expected: {expected_hash}\n"
                    f"  Actual:   {actual_hash}\n"
                    f"If intentional, update tests/fixtures/CHECKSUMS.sha256",
                    UserWarning,
                )


@pytest.fixture(scope="session")
def options_sample_path() -> Path:
    """Path to the sample options CSV."""
    return OPTIONS_SAMPLE_PATH


@pytest.fixture(scope="session")
def options_sample_checksum() -> str:
    """Expected SHA-256 of the sample options CSV."""
    return _load_expected_checksums()["options_sample.csv"]


# =============================================================================
# CONTRACTS
# =============================================================================

def make_contract(
    identifier: str = "ATM",
    spot: float = 100.0,
    strike: float = 100.0,
    rate: float = 0.05,
    volatility: float = 0.20,
    time_to_expiry: float = 1.0,
    option_type: OptionType = OptionType.CALL,
) -> Contract:
    """Contract with standard ATM defaults."""
    return Contract(
        identifier=identifier,
        spot=spot,
        strike=strike,
        rate=rate,
        volatility=volatility,
        time_to_expiry=time_to_expiry,
        option_type=option_type,
    )


@pytest.fixture
def contract_factory():
    """Build contracts with ATM defaults, overriding any field by keyword."""
    return make_contract


@pytest.fixture
def atm_call() -> Contract:
    """ATM call: S=K=100, r=5%, σ=20%, T=1 (BS price ≈ 10.4506)."""
    return make_contract("ATM_CALL")


@pytest.fixture
def atm_put() -> Contract:
    """ATM put: S=K=100, r=5%, σ=20%, T=1 (BS price ≈ 5.5735)."""
    return make_contract("ATM_PUT", option_type=OptionType.PUT)


@pytest.fixture
def contract_batch() -> list[Contract]:
    """Ten distinct contracts spanning calls, puts and moneyness."""
    contracts = []
    for i in range(10):
        contracts.append(
            make_contract(
                identifier=f"OPT_{i}",
                strike=80.0 + 5.0 * i,
                volatility=0.15 + 0.02 * i,
                time_to_expiry=0.5 + 0.1 * i,
                option_type=OptionType.CALL if i % 2 == 0 else OptionType.PUT,
            )
        )
    return contracts


# =============================================================================
# CONFIGURATION
# =============================================================================

@pytest.fixture
def fast_config() -> SimulationConfig:
    """Small thread-backed configuration for quick executor tests."""
    return SimulationConfig(n_paths=2_000, base_seed=12345, n_workers=3, backend="thread")


@pytest.fixture
def reproducible_rng():
    """Provide a reproducible numpy random generator."""
    return np.random.default_rng(seed=42)
