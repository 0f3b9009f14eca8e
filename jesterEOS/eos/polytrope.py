r"""
Generalized polytropic EOS.

The generalized polytrope is a closed-form barotropic EOS

.. math::
    P = K \rho^\Gamma, \qquad
    \epsilon = \epsilon_0 + n \frac{P}{\rho}, \qquad
    \Gamma = 1 + \frac{1}{n}

parametrized by the polytropic index :math:`n`, the polytropic density scale
:math:`\rho_p = K^{-n}` and the specific energy offset :math:`\epsilon_0`.
Writing :math:`x = (\rho / \rho_p)^{1/n} = P/\rho`, all quantities follow in
closed form:

.. math::
    h = h_0 + (n + 1) x, \qquad h_0 = 1 + \epsilon_0, \qquad
    g - 1 = \frac{(n + 1) x}{h_0}, \qquad
    c_s^2 = \frac{g - 1}{n g}

It is used standalone and as the analytic low-density crust of the spline
EOS, see :meth:`GeneralizedPolytrope.from_boundary`.
"""

from typing import Any, Optional

import numpy as np
from numpy.typing import ArrayLike

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.base import EOSBarotropicImpl, FloatOrArray
from jesterEOS.errors import EOSConstructionError, UnavailableQuantityError
from jesterEOS.interval import Interval
from jesterEOS.units import Units


def rmd_p_from_K_n(K: float, n: float) -> float:
    r"""Polytropic density scale :math:`\rho_p = K^{-n}`."""
    return K ** (-n)


class GeneralizedPolytrope(EOSBarotropicImpl):
    r"""
    Generalized polytrope implementation.

    Parameters
    ----------
    n : float
        Polytropic index, :math:`n > 0`
    rmd_p : float
        Polytropic density scale :math:`\rho_p > 0`
    eps_0 : float
        Specific internal energy at zero density, :math:`\epsilon_0 > -1`
    rho_max : float
        Maximum valid mass density
    units : Units, optional
        Unit system of the EOS; defaults to geometric solar units.

    Raises
    ------
    EOSConstructionError
        If any parameter is outside its valid range.
    """

    kind = "gpoly"

    def __init__(
        self,
        n: float,
        rmd_p: float,
        eps_0: float,
        rho_max: float,
        units: Optional[Units] = None,
    ):
        if not n > 0:
            raise EOSConstructionError(f"eos_barotr_gpoly: polytropic index must be positive, got {n}")
        if not rmd_p > 0:
            raise EOSConstructionError(f"eos_barotr_gpoly: polytropic density scale must be positive, got {rmd_p}")
        if not rho_max > 0:
            raise EOSConstructionError(f"eos_barotr_gpoly: maximum density must be positive, got {rho_max}")
        if not 1.0 + eps_0 > 0:
            raise EOSConstructionError(
                f"eos_barotr_gpoly: specific energy offset {eps_0} implies non-positive enthalpy"
            )

        self.n = float(n)
        self.rmd_p = float(rmd_p)
        self.eps_0 = float(eps_0)
        self.rho_max = float(rho_max)
        self._units = units if units is not None else Units.geom_solar()

        self._np1 = self.n + 1.0
        self._invn = 1.0 / self.n
        self._h0 = 1.0 + self.eps_0

        self._rgrho = Interval(0.0, self.rho_max)
        self._rggm1 = Interval(0.0, float(self.gm1_from_rho(self.rho_max)))

    @classmethod
    def from_boundary(
        cls,
        rho: float,
        eps: float,
        press: float,
        n: float,
        rho_max: float,
        units: Optional[Units] = None,
    ) -> "GeneralizedPolytrope":
        r"""
        Polytrope of index ``n`` matching density, specific energy and pressure
        exactly at a boundary point.

        Args:
            rho: Mass density at the boundary
            eps: Specific internal energy at the boundary
            press: Pressure at the boundary
            n: Polytropic index
            rho_max: Maximum density of the polytrope, at least ``rho``
            units: Unit system

        Raises:
            EOSConstructionError: If the boundary point cannot be matched.
        """
        if not (rho > 0 and press > 0):
            raise EOSConstructionError(
                f"eos_barotr_gpoly: cannot match polytrope at rho={rho}, press={press}"
            )
        if rho_max < rho:
            raise EOSConstructionError(
                "eos_barotr_gpoly: matching point above maximum density"
            )
        x = press / rho
        rmd_p = rho / x**n
        eps_0 = eps - n * x
        return cls(n, rmd_p, eps_0, rho_max, units)

    def _x(self, gm1):
        return np.asarray(gm1) * (self._h0 / self._np1)

    def gm1_from_rho(self, rho: ArrayLike) -> FloatOrArray:
        return self._np1 * np.power(np.asarray(rho) / self.rmd_p, self._invn) / self._h0

    def rho(self, gm1: ArrayLike) -> FloatOrArray:
        return self.rmd_p * np.power(self._x(gm1), self.n)

    def press(self, gm1: ArrayLike) -> FloatOrArray:
        x = self._x(gm1)
        return self.rmd_p * np.power(x, self._np1)

    def eps(self, gm1: ArrayLike) -> FloatOrArray:
        return self.eps_0 + self.n * self._x(gm1)

    def hm1(self, gm1: ArrayLike) -> FloatOrArray:
        return self.eps_0 + self._h0 * np.asarray(gm1)

    def csnd(self, gm1: ArrayLike) -> FloatOrArray:
        gm1 = np.asarray(gm1)
        return np.sqrt(gm1 / (self.n * (1.0 + gm1)))

    def temp(self, gm1: ArrayLike) -> FloatOrArray:
        return np.zeros_like(np.asarray(gm1, dtype=float))

    def ye(self, gm1: ArrayLike) -> FloatOrArray:
        raise UnavailableQuantityError(
            "eos_barotr_gpoly: electron fraction not available"
        )

    @property
    def range_rho(self) -> Interval:
        return self._rgrho

    @property
    def range_gm1(self) -> Interval:
        return self._rggm1

    @property
    def minimal_h(self) -> float:
        return self._h0

    @property
    def is_isentropic(self) -> bool:
        return True

    @property
    def is_zero_temp(self) -> bool:
        return True

    @property
    def has_temp(self) -> bool:
        return True

    @property
    def has_efrac(self) -> bool:
        return False

    @property
    def units_to_SI(self) -> Units:
        return self._units

    def state_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "n": self.n,
            "rmd_p": self.rmd_p,
            "eps_0": self.eps_0,
            "rho_max": self.rho_max,
            "units": np.array(self._units),
        }

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "GeneralizedPolytrope":
        return cls(
            float(data["n"]),
            float(data["rmd_p"]),
            float(data["eps_0"]),
            float(data["rho_max"]),
            Units(*np.asarray(data["units"], dtype=float)),
        )

    def __repr__(self) -> str:
        return (
            f"GeneralizedPolytrope(n={self.n}, rmd_p={self.rmd_p:.6g}, "
            f"eps_0={self.eps_0:.6g}, rho_max={self.rho_max:.6g})"
        )


def make_eos_barotr_gpoly(
    n: float,
    rmd_p: float,
    eps_0: float,
    rho_max: float,
    units: Optional[Units] = None,
) -> EOSBarotropic:
    """Create a generalized polytropic EOS, see :class:`GeneralizedPolytrope`."""
    return EOSBarotropic(GeneralizedPolytrope(n, rmd_p, eps_0, rho_max, units))


def make_eos_barotr_poly(
    n: float,
    rmd_p: float,
    rho_max: float,
    units: Optional[Units] = None,
) -> EOSBarotropic:
    r"""Create a classical polytropic EOS (:math:`\epsilon_0 = 0`)."""
    return EOSBarotropic(GeneralizedPolytrope(n, rmd_p, 0.0, rho_max, units))
