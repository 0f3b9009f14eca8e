r"""
Utility functions and constants for EOS construction.

This module provides the physical constants used to define unit systems and
the numerical helpers needed to complete EOS tables that only provide density,
specific energy and pressure.
"""

import numpy as np
from numpy.typing import ArrayLike

#################################
### PHYSICAL CONSTANTS ###
#################################

# Fundamental constants (SI units)
c = 299792458.0  # Speed of light [m/s]
G = 6.6743e-11  # Gravitational constant [m³/kg/s²]
Msun = 1.988409870698051e30  # Solar mass [kg]

# Derived constants
solar_mass_in_meter = Msun * G / c / c  # Solar mass in geometric units [m]


#########################
### UTILITY FUNCTIONS ###
#########################


def cumtrapz(y: ArrayLike, x: ArrayLike) -> np.ndarray:
    r"""
    Cumulatively integrate y(x) using the composite trapezoidal rule.

    .. math::
        \int_{x_0}^{x_i} y(x) dx \approx \sum_{j=1}^{i} \frac{\Delta x_j}{2}(y_{j-1} + y_j)

    Parameters
    ----------
    y : ArrayLike
        Values to integrate
    x : ArrayLike
        The coordinate to integrate along

    Returns
    -------
    np.ndarray
        The cumulative integral, same length as the input and starting at 0
    """
    y = np.asarray(y, dtype=float)
    x = np.asarray(x, dtype=float)
    assert y.shape == x.shape, "Input arrays must have matching shapes"
    assert y.ndim == 1, "Input arrays must be one-dimensional"

    dx = np.diff(x)
    res = np.cumsum(dx * (y[1:] + y[:-1]) / 2.0)
    return np.concatenate(([0.0], res))


def pseudo_enthalpy_from_table(
    rho: ArrayLike, eps: ArrayLike, press: ArrayLike, n_poly: float
) -> np.ndarray:
    r"""
    Compute the pseudo-enthalpy :math:`g - 1` along a cold EOS table.

    The pseudo-enthalpy is defined by

    .. math::
        \ln g = \int \frac{dP}{e + P} = \int \frac{P}{e + P} \, d\ln P,
        \qquad e = \rho (1 + \epsilon)

    with :math:`g = 1` at zero density. The table is assumed to continue
    below its first point as a polytrope of index ``n_poly`` matched to that
    point, which fixes the integration constant.

    Parameters
    ----------
    rho : ArrayLike
        Strictly increasing, positive mass densities
    eps : ArrayLike
        Specific internal energies
    press : ArrayLike
        Positive, increasing pressures
    n_poly : float
        Polytropic index of the assumed low-density extension

    Returns
    -------
    np.ndarray
        :math:`g - 1` at the table points
    """
    rho = np.asarray(rho, dtype=float)
    eps = np.asarray(eps, dtype=float)
    press = np.asarray(press, dtype=float)
    if np.any(rho <= 0) or np.any(press <= 0):
        raise ValueError("Pseudo-enthalpy integration needs positive rho and press")

    e = rho * (1.0 + eps)
    ln_g = cumtrapz(press / (e + press), np.log(press))

    # Polytropic extension matched at the first point
    x0 = press[0] / rho[0]
    h_first = 1.0 + eps[0] + x0
    h_zero = 1.0 + eps[0] - n_poly * x0
    if h_zero <= 0:
        raise ValueError("Polytropic extension implies non-positive enthalpy at zero density")

    return np.expm1(np.log(h_first / h_zero) + ln_g)


def sound_speed_from_table(eps: ArrayLike, press: ArrayLike, rho: ArrayLike) -> np.ndarray:
    r"""
    Sound speed :math:`c_s = \sqrt{dP/de}` along a cold EOS table.

    The derivative is computed with ``np.gradient`` with respect to the energy
    density :math:`e = \rho (1 + \epsilon)`.
    """
    eps = np.asarray(eps, dtype=float)
    press = np.asarray(press, dtype=float)
    rho = np.asarray(rho, dtype=float)
    cs2 = np.gradient(press, rho * (1.0 + eps))
    return np.sqrt(np.clip(cs2, 0.0, None))
