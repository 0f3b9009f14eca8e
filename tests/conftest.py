"""Test configuration for jesterEOS test suite."""

import numpy as np
import pytest

from jesterEOS.eos import (
    make_eos_barotr_poly,
    make_eos_barotr_pwpoly,
    make_eos_barotr_spline_from_samples,
)
from jesterEOS.interval import Interval

# Polytrope with Gamma = 2, K = 100, i.e. n = 1 and rmd_p = 1 / K
_POLY_N = 1.0
_POLY_RMD_P = 0.01
_POLY_RHO = np.logspace(-10, -3, 50)

# MS1 piecewise polytrope, 4 segments
_MS1 = {
    "rmd_p": 1.0 / 0.08950758861673326 ** (1.0 / (1.35692 - 1.0)),
    "rho_bounds": [
        0.0,
        0.00015247493312376816,
        0.000811456143270882,
        0.00161906786291838,
    ],
    "gammas": [1.35692, 3.224, 3.033, 1.325],
    "rho_max": 5e-3,
}


def _polytrope_columns(rho=_POLY_RHO):
    x = rho / _POLY_RMD_P
    gm1 = 2.0 * x
    return {
        "gm1": gm1,
        "rho": rho,
        "eps": x,
        "press": rho * x,
        "csnd": np.sqrt(gm1 / (1.0 + gm1)),
    }


@pytest.fixture(scope="session")
def poly_n():
    """Polytropic index of the Gamma = 2 test polytrope."""
    return _POLY_N


@pytest.fixture(scope="session")
def polytrope_columns():
    """Callable returning exact Gamma = 2, K = 100 polytrope columns for given rho."""
    return _polytrope_columns


@pytest.fixture
def polytrope_samples():
    """Sample columns of a Gamma = 2 polytrope from rho = 1e-10 to 1e-3."""
    return _polytrope_columns()


@pytest.fixture(scope="session")
def ms1_params():
    """Parameters of the MS1 piecewise polytrope."""
    return dict(_MS1)


@pytest.fixture(scope="session")
def spline_eos():
    """Spline EOS fitted to the Gamma = 2 polytrope samples."""
    cols = _polytrope_columns()
    return make_eos_barotr_spline_from_samples(
        cols["gm1"],
        cols["rho"],
        cols["eps"],
        cols["press"],
        cols["csnd"],
        n_poly=_POLY_N,
    )


@pytest.fixture(scope="session")
def poly_eos():
    """The Gamma = 2 polytrope as analytic EOS."""
    return make_eos_barotr_poly(_POLY_N, _POLY_RMD_P, 1e-2)


@pytest.fixture(scope="session")
def ms1_eos():
    """MS1 piecewise polytrope."""
    return make_eos_barotr_pwpoly(
        _MS1["rmd_p"], _MS1["rho_bounds"], _MS1["gammas"], _MS1["rho_max"]
    )


@pytest.fixture
def poly_rho_range():
    """Density range covered by the polytrope samples."""
    return Interval(_POLY_RHO[0], _POLY_RHO[-1])
