"""Unit tests for the monotone spline engine."""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from jesterEOS.interpol import (
    LogLogSpline,
    LogSpline,
    MonotoneSpline,
    make_interpol_pchip_spline,
)
from jesterEOS.interval import Interval


class TestConstruction:
    """Test validation of sample data."""

    def test_too_few_samples(self) -> None:
        """Test that fewer than four samples are rejected."""
        with pytest.raises(ValueError, match="at least 4"):
            MonotoneSpline([0.0, 1.0, 2.0], [0.0, 1.0, 2.0])

    def test_non_increasing_positions(self) -> None:
        """Test that repeated positions are rejected."""
        with pytest.raises(ValueError, match="increasing"):
            MonotoneSpline([0.0, 1.0, 1.0, 2.0], [0.0, 1.0, 2.0, 3.0])

    def test_mismatched_lengths(self) -> None:
        """Test that sample arrays must match in length."""
        with pytest.raises(ValueError, match="equal length"):
            MonotoneSpline([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 2.0])

    def test_log_axis_needs_positive_values(self) -> None:
        """Test that log axes reject zero values."""
        x = np.linspace(1.0, 2.0, 10)
        y = np.linspace(0.0, 1.0, 10)
        with pytest.raises(ValueError, match="non-finite"):
            LogLogSpline(x, y)
        LogSpline(x, y)

    def test_from_function_rejects_non_positive_log_domain(self) -> None:
        """Test that log domains must be positive."""
        with pytest.raises(ValueError, match="positive"):
            LogSpline.from_function(np.sqrt, Interval(0.0, 1.0), 10)

    def test_from_function_rejects_degenerate_domain(self) -> None:
        """Test that a zero-length domain is rejected."""
        with pytest.raises(ValueError, match="degenerate"):
            MonotoneSpline.from_function(np.sqrt, Interval(1.0, 1.0), 10)


class TestEvaluation:
    """Test evaluation, ranges and transforms."""

    def test_loglog_power_law_is_exact(self) -> None:
        """Power laws are straight lines in log-log space."""
        x = np.logspace(0, 3, 20)
        spl = LogLogSpline(x, 3.0 * x**2)
        xq = np.array([1.5, 5.5, 77.0, 999.0])
        np.testing.assert_allclose(spl(xq), 3.0 * xq**2, rtol=1e-10)

    def test_log_spline_of_logarithm_is_exact(self) -> None:
        """Test that the logarithm is linear in log-x coordinates."""
        spl = LogSpline.from_function(np.log, Interval(1e-3, 1e3), 50)
        assert spl(1e-3) == pytest.approx(np.log(1e-3), rel=1e-12)
        assert spl(42.0) == pytest.approx(np.log(42.0), rel=1e-10)

    def test_from_function_endpoints_exact(self) -> None:
        """Test that sampling hits both domain endpoints exactly."""
        domain = Interval(1e-7, 3e-2)
        spl = LogLogSpline.from_function(lambda x: x**1.5, domain, 100)
        assert spl.range_x == domain
        assert len(spl) == 100
        knots = spl.knots()
        assert knots.x_min == domain.min
        assert knots.x_max == domain.max

    def test_scalar_input_gives_float(self) -> None:
        """Test scalar and array evaluation return types."""
        spl = MonotoneSpline(np.arange(5.0), np.arange(5.0) ** 2)
        assert isinstance(spl(2.5), float)
        assert spl(np.array([2.5])).shape == (1,)

    def test_evaluation_is_clamped_to_domain(self) -> None:
        """Test that evaluation clamps to the sampled domain."""
        spl = MonotoneSpline(np.arange(5.0), np.arange(5.0))
        assert spl(10.0) == spl(4.0)
        assert spl(-1.0) == spl(0.0)

    def test_range_y_from_knots(self) -> None:
        """Test the value range of the knots."""
        x = np.linspace(0, 1, 11)
        spl = MonotoneSpline(x, x**3 - 0.5)
        assert spl.range_y == Interval(-0.5, 0.5)

    def test_contains(self) -> None:
        """Test domain containment of points and intervals."""
        spl = LogSpline(np.logspace(-2, 2, 10), np.arange(10.0))
        assert spl.contains(1.0)
        assert spl.contains(Interval(0.1, 10.0))
        assert not spl.contains(Interval(1e-3, 10.0))

    def test_knots_round_trip_bit_identical(self) -> None:
        """Test that rebuilding from knots is bit identical."""
        x = np.logspace(-5, 0, 40)
        spl = LogSpline(x, np.sqrt(x) + np.sin(10 * x))
        xq = np.logspace(-5, 0, 777)
        spl2 = LogSpline.from_knots(spl.knots())
        assert np.array_equal(spl(xq), spl2(xq))

    def test_knots_are_copies(self) -> None:
        """Test that knots do not alias the spline state."""
        spl = MonotoneSpline(np.arange(5.0), np.arange(5.0))
        knots = spl.knots()
        knots.tx[0] = 100.0
        assert spl.knots().tx[0] == 0.0


class TestMonotonicity:
    """Test the shape preserving property."""

    def test_step_has_no_overshoot(self) -> None:
        """Test that a step is interpolated without overshoot."""
        x = np.arange(8.0)
        y = np.array([0.0, 0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 1.0])
        spl = MonotoneSpline(x, y)
        yq = spl(np.linspace(0, 7, 1000))
        assert np.all(yq >= 0.0)
        assert np.all(yq <= 1.0)
        assert np.all(np.diff(yq) >= 0.0)

    @settings(deadline=None, max_examples=50)
    @given(
        st.lists(
            st.floats(min_value=1e-3, max_value=10.0), min_size=4, max_size=30
        ),
        st.lists(
            st.floats(min_value=0.0, max_value=10.0), min_size=30, max_size=30
        ),
    )
    def test_monotone_samples_give_monotone_spline(self, dx, dy) -> None:
        """Test that increasing samples never produce a decreasing interpolant."""
        x = np.cumsum(dx)
        y = np.cumsum(dy[: len(x)])
        spl = MonotoneSpline(x, y)
        yq = spl(np.linspace(x[0], x[-1], 500))
        scale = max(1.0, abs(y[-1]))
        assert np.all(np.diff(yq) >= -1e-12 * scale)
        assert np.all(yq >= y[0] - 1e-12 * scale)
        assert np.all(yq <= y[-1] + 1e-12 * scale)


class TestAutomaticTransform:
    """Test the coordinate choice of make_interpol_pchip_spline."""

    def test_positive_data_uses_loglog(self) -> None:
        """Test that positive data is fitted in log-log coordinates."""
        x = np.logspace(0, 2, 10)
        assert type(make_interpol_pchip_spline(x, x**2)) is LogLogSpline

    def test_zero_values_use_log_x(self) -> None:
        """Test that zero values fall back to log-x coordinates."""
        x = np.logspace(0, 2, 10)
        y = np.linspace(0, 1, 10)
        assert type(make_interpol_pchip_spline(x, y)) is LogSpline

    def test_zero_positions_use_linear(self) -> None:
        """Test that zero positions fall back to linear coordinates."""
        x = np.linspace(0, 1, 10)
        assert type(make_interpol_pchip_spline(x, x + 1.0)) is MonotoneSpline
