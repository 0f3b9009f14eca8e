"""Unit tests for polytropic and piecewise polytropic EOS."""

import numpy as np
import pytest

from jesterEOS.eos import (
    GeneralizedPolytrope,
    PiecewisePolytrope,
    make_eos_barotr_gpoly,
    make_eos_barotr_poly,
    make_eos_barotr_pwpoly,
    rmd_p_from_K_n,
)
from jesterEOS.errors import EOSConstructionError, UnavailableQuantityError
from jesterEOS.interval import Interval
from jesterEOS.units import Units


class TestGeneralizedPolytrope:
    """Test closed-form polytrope evaluation."""

    def test_rmd_p_from_K(self) -> None:
        """Test the density scale computed from K and n."""
        assert rmd_p_from_K_n(100.0, 1.0) == pytest.approx(0.01)
        assert rmd_p_from_K_n(100.0, 1.5) == pytest.approx(1e-3)

    def test_closed_form_values(self, poly_eos) -> None:
        """Test Gamma = 2, K = 100 at rho = 1e-4 where P / rho = 0.01."""
        s = poly_eos.at_rho(1e-4)
        assert s.valid
        assert s.gm1 == pytest.approx(0.02, rel=1e-12)
        assert s.press == pytest.approx(1e-6, rel=1e-12)
        assert s.eps == pytest.approx(0.01, rel=1e-12)
        assert s.hm1 == pytest.approx(0.02, rel=1e-12)
        assert s.csnd == pytest.approx(np.sqrt(0.02 / 1.02), rel=1e-12)
        assert s.temp == 0.0

    def test_gm1_inverse(self, poly_eos) -> None:
        """Test that gm1_from_rho inverts rho."""
        impl = poly_eos.implementation
        rho = np.logspace(-12, -2, 100)
        np.testing.assert_allclose(impl.rho(impl.gm1_from_rho(rho)), rho, rtol=1e-12)

    def test_at_gm1_matches_at_rho(self, poly_eos) -> None:
        """Test that states from rho and g-1 agree."""
        s1 = poly_eos.at_rho(3e-4)
        s2 = poly_eos.at_gm1(s1.gm1)
        assert s2.rho == pytest.approx(3e-4, rel=1e-12)
        assert s2.press == pytest.approx(s1.press, rel=1e-12)

    def test_generalized_enthalpy(self) -> None:
        """Test that h - 1 = eps + P / rho holds with an energy offset."""
        eos = make_eos_barotr_gpoly(1.5, 1e-3, 0.1, 1e-2)
        rho = np.logspace(-8, -2, 30)
        impl = eos.implementation
        gm1 = impl.gm1_from_rho(rho)
        np.testing.assert_allclose(
            impl.hm1(gm1), impl.eps(gm1) + impl.press(gm1) / rho, rtol=1e-12
        )
        assert eos.minimal_h == pytest.approx(1.1)
        assert eos.at_rho(0.0).eps == pytest.approx(0.1)

    def test_ranges(self, poly_eos) -> None:
        """Test the validity ranges of the polytrope."""
        assert poly_eos.range_rho == Interval(0.0, 1e-2)
        assert poly_eos.range_gm1 == Interval(0.0, 2.0)
        assert not poly_eos.at_rho(1.1e-2).valid
        assert not poly_eos.at_gm1(2.1).valid
        assert poly_eos.at_rho(1e-2).valid

    def test_flags(self, poly_eos) -> None:
        """Test the capability flags."""
        assert poly_eos.is_isentropic
        assert poly_eos.is_zero_temp
        assert poly_eos.has_temp
        assert not poly_eos.has_efrac
        assert poly_eos.units_to_SI == Units.geom_solar()

    def test_no_electron_fraction(self, poly_eos) -> None:
        """Test that the electron fraction is unavailable."""
        with pytest.raises(UnavailableQuantityError, match="electron fraction"):
            poly_eos.at_rho(1e-4).ye

    @pytest.mark.parametrize(
        "n, rmd_p, eps_0, rho_max",
        [(0.0, 1.0, 0.0, 1.0), (1.0, -1.0, 0.0, 1.0), (1.0, 1.0, 0.0, 0.0), (1.0, 1.0, -1.0, 1.0)],
    )
    def test_invalid_parameters(self, n, rmd_p, eps_0, rho_max) -> None:
        """Test that non-physical parameters are rejected."""
        with pytest.raises(EOSConstructionError):
            GeneralizedPolytrope(n, rmd_p, eps_0, rho_max)


class TestFromBoundary:
    """Test matching a polytrope to a boundary point."""

    def test_matches_boundary(self) -> None:
        """Test that the matched polytrope reproduces the boundary point."""
        rho, eps, press = 1e-5, 0.02, 3e-7
        poly = GeneralizedPolytrope.from_boundary(rho, eps, press, 1.5, 2e-5)
        gm1 = poly.gm1_from_rho(rho)
        assert poly.rho(gm1) == pytest.approx(rho, rel=1e-12)
        assert poly.eps(gm1) == pytest.approx(eps, rel=1e-12)
        assert poly.press(gm1) == pytest.approx(press, rel=1e-12)
        assert poly.range_rho == Interval(0.0, 2e-5)

    def test_keeps_units(self) -> None:
        """Test that the unit system is passed through."""
        poly = GeneralizedPolytrope.from_boundary(1e-5, 0.0, 1e-8, 1.0, 1e-5, Units.cgs())
        assert poly.units_to_SI == Units.cgs()

    def test_non_positive_pressure(self) -> None:
        """Test that zero boundary pressure is rejected."""
        with pytest.raises(EOSConstructionError, match="cannot match"):
            GeneralizedPolytrope.from_boundary(1e-5, 0.02, 0.0, 1.0, 2e-5)

    def test_rho_max_below_boundary(self) -> None:
        """Test that rho_max must not be below the boundary."""
        with pytest.raises(EOSConstructionError, match="above maximum"):
            GeneralizedPolytrope.from_boundary(1e-5, 0.02, 3e-7, 1.0, 1e-6)

    def test_negative_enthalpy(self) -> None:
        """Test that eps_0 <= -1 is detected, here eps_0 = -0.5 - 1."""
        with pytest.raises(EOSConstructionError, match="enthalpy"):
            GeneralizedPolytrope.from_boundary(1.0, -0.5, 1.0, 1.0, 2.0)


class TestPiecewisePolytrope:
    """Test the piecewise polytrope."""

    def test_single_segment_equals_polytrope(self, poly_eos) -> None:
        """Test that one segment reproduces the plain polytrope."""
        eos = make_eos_barotr_pwpoly(0.01, [0.0], [2.0], 1e-2)
        rho = np.logspace(-10, -2, 40)
        pw = eos.implementation
        pp = poly_eos.implementation
        np.testing.assert_allclose(pw.gm1_from_rho(rho), pp.gm1_from_rho(rho), rtol=1e-12)
        gm1 = pp.gm1_from_rho(rho)
        np.testing.assert_allclose(pw.press(gm1), pp.press(gm1), rtol=1e-10)
        np.testing.assert_allclose(pw.eps(gm1), pp.eps(gm1), rtol=1e-10)
        np.testing.assert_allclose(pw.csnd(gm1), pp.csnd(gm1), rtol=1e-10)

    @pytest.mark.parametrize("segment", [1, 2, 3])
    def test_continuity_at_boundaries(self, ms1_eos, ms1_params, segment) -> None:
        """Test that P, eps and rho are continuous across segment bounds."""
        rho_b = ms1_params["rho_bounds"][segment]
        impl = ms1_eos.implementation
        gm1 = impl.gm1_from_rho(np.array([rho_b * (1 - 1e-10), rho_b * (1 + 1e-10)]))
        for q in (impl.press(gm1), impl.eps(gm1), impl.rho(gm1)):
            assert q[0] == pytest.approx(q[1], rel=1e-8)

    def test_segment_constants(self, ms1_eos) -> None:
        """Test the per-segment K and energy offset."""
        impl = ms1_eos.implementation
        assert impl.segment_K[0] == pytest.approx(0.08950758861673326, rel=1e-12)
        assert impl.segment_a[0] == 0.0

    def test_inverse(self, ms1_eos) -> None:
        """Test that gm1_from_rho inverts rho across all segments."""
        impl = ms1_eos.implementation
        rho = np.logspace(-10, np.log10(4e-3), 300)
        np.testing.assert_allclose(impl.rho(impl.gm1_from_rho(rho)), rho, rtol=1e-10)

    def test_gm1_equals_hm1(self, ms1_eos) -> None:
        """Test that g - 1 equals h - 1 for zero temperature."""
        impl = ms1_eos.implementation
        rho = np.logspace(-8, np.log10(4e-3), 50)
        gm1 = impl.gm1_from_rho(rho)
        np.testing.assert_allclose(
            impl.eps(gm1) + impl.press(gm1) / rho, gm1, rtol=1e-10
        )

    @pytest.mark.parametrize("rho", [1e-4, 5e-4, 1e-3])
    def test_sound_speed_matches_derivative(self, ms1_eos, rho) -> None:
        """Test c_s^2 = dP/de against a central finite difference."""
        impl = ms1_eos.implementation
        r = rho * np.array([1 - 1e-6, 1 + 1e-6])
        gm1 = impl.gm1_from_rho(r)
        e = r * (1 + impl.eps(gm1))
        dp_de = np.diff(impl.press(gm1))[0] / np.diff(e)[0]
        s = ms1_eos.at_rho(rho)
        assert s.csnd**2 == pytest.approx(dp_de, rel=1e-5)

    def test_minimal_enthalpy(self, ms1_eos) -> None:
        """Test the minimal enthalpy at zero density."""
        assert ms1_eos.minimal_h == 1.0
        assert ms1_eos.at_rho(0.0).gm1 == 0.0

    @pytest.mark.parametrize(
        "rho_bounds, gammas",
        [([1e-5, 1e-4], [2.0, 3.0]), ([0.0, 1e-4], [2.0]), ([0.0, 1e-4], [2.0, 1.0]), ([0.0, 1e-4, 1e-4], [2.0, 3.0, 2.5])],
    )
    def test_invalid_segments(self, rho_bounds, gammas) -> None:
        """Test that malformed segment definitions are rejected."""
        with pytest.raises(EOSConstructionError):
            PiecewisePolytrope(1.0, rho_bounds, gammas, 1e-2)
