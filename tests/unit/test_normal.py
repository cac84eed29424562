"""
Tests for the standard normal approximation.

[T1] Abramowitz & Stegun 26.2.17, max absolute error 7.5e-8.
scipy.stats.norm is used as the exact oracle.
"""

import math

import numpy as np
import pytest
from scipy import stats

from mc_option_pricing.config.tolerances import (
    NORMAL_CDF_APPROXIMATION_TOLERANCE,
    NORMAL_CDF_SYMMETRY_TOLERANCE,
)
from mc_option_pricing.options.pricing.normal import (
    norm_cdf,
    norm_cdf_array,
    norm_pdf,
    norm_pdf_array,
)


class TestNormPdf:
    """Tests for the standard normal density."""

    def test_peak_at_zero(self) -> None:
        """n(0) = 1/√(2π)."""
        assert norm_pdf(0.0) == pytest.approx(1.0 / math.sqrt(2.0 * math.pi), abs=1e-15)

    def test_even_function(self) -> None:
        """n(x) = n(-x)."""
        for x in (0.1, 1.0, 2.5, 7.0):
            assert norm_pdf(x) == norm_pdf(-x)

    def test_matches_scipy(self) -> None:
        """Density is exact, not approximated."""
        for x in np.linspace(-6, 6, 49):
            assert norm_pdf(x) == pytest.approx(stats.norm.pdf(x), rel=1e-12)

    def test_array_matches_scalar(self) -> None:
        """Vectorized density agrees with the scalar one."""
        x = np.linspace(-4, 4, 17)
        expected = np.array([norm_pdf(v) for v in x])
        np.testing.assert_allclose(norm_pdf_array(x), expected, rtol=1e-14)


class TestNormCdf:
    """Tests for the CDF approximation."""

    @pytest.mark.parametrize(
        "x,expected",
        [
            (1.0, 0.8413),
            (2.0, 0.9772),
            (-1.0, 0.1587),
        ],
    )
    def test_known_values(self, x: float, expected: float) -> None:
        """Textbook values to 4 decimal places."""
        assert norm_cdf(x) == pytest.approx(expected, abs=1e-4)

    def test_center_is_half(self) -> None:
        """cdf(0) is 0.5 within the approximation error."""
        assert norm_cdf(0.0) == pytest.approx(0.5, abs=1e-7)

    def test_center_offset_is_known(self) -> None:
        """The polynomial leaves N(0) a hair above one half."""
        assert 0.0 < norm_cdf(0.0) - 0.5 < 1e-9

    def test_left_limit_at_center(self) -> None:
        """Reflection puts the left-hand limit the same distance below one half."""
        left = norm_cdf(-1e-300)
        assert 0.0 < 0.5 - left < 1e-9
        assert left + norm_cdf(0.0) == pytest.approx(1.0, abs=1e-15)

    def test_within_published_error_bound(self) -> None:
        """|approx - exact| < 1.5e-7 across the working range."""
        x = np.linspace(-8, 8, 1601)
        approx = np.array([norm_cdf(v) for v in x])
        error = np.abs(approx - stats.norm.cdf(x))
        assert error.max() < NORMAL_CDF_APPROXIMATION_TOLERANCE

    def test_symmetry(self) -> None:
        """cdf(x) + cdf(-x) = 1."""
        for x in (0.0, 0.3, 1.0, 1.96, 3.0, 5.0):
            assert abs(norm_cdf(x) + norm_cdf(-x) - 1.0) < NORMAL_CDF_SYMMETRY_TOLERANCE

    def test_limits(self) -> None:
        """cdf(-inf) -> 0, cdf(+inf) -> 1."""
        assert norm_cdf(-40.0) == pytest.approx(0.0, abs=1e-15)
        assert norm_cdf(40.0) == pytest.approx(1.0, abs=1e-15)
        assert norm_cdf(math.inf) == 1.0
        assert norm_cdf(-math.inf) == 0.0

    def test_bounded(self) -> None:
        """Values stay in [0, 1]."""
        for x in (-1e6, -50.0, -10.0, 0.0, 10.0, 50.0, 1e6):
            assert 0.0 <= norm_cdf(x) <= 1.0

    def test_monotone_on_grid(self) -> None:
        """Non-decreasing on a fine grid."""
        values = [norm_cdf(x) for x in np.linspace(-5, 5, 2001)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_nan_rejected(self) -> None:
        """NaN never silently propagates."""
        with pytest.raises(ValueError, match="NaN"):
            norm_cdf(float("nan"))


class TestNormCdfArray:
    """Tests for the vectorized CDF."""

    def test_matches_scalar(self) -> None:
        """Same approximation and reflection as the scalar version."""
        x = np.linspace(-6, 6, 241)
        expected = np.array([norm_cdf(v) for v in x])
        np.testing.assert_allclose(norm_cdf_array(x), expected, rtol=0, atol=1e-15)

    def test_preserves_shape(self) -> None:
        """2-D input gives 2-D output."""
        x = np.zeros((3, 4))
        assert norm_cdf_array(x).shape == (3, 4)

    def test_nan_rejected(self) -> None:
        """Any NaN in the array raises."""
        with pytest.raises(ValueError, match="NaN"):
            norm_cdf_array(np.array([0.0, np.nan]))
