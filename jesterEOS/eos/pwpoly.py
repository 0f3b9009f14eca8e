r"""
Piecewise polytropic EOS.

Within segment :math:`i`, starting at density :math:`\rho_i`,

.. math::
    P = K_i \rho^{\Gamma_i}, \qquad
    \epsilon = a_i + \frac{K_i \rho^{\Gamma_i - 1}}{\Gamma_i - 1}

The first segment starts at zero density with :math:`a_0 = 0`; the remaining
:math:`K_i` and :math:`a_i` are fixed by requiring continuous pressure and
specific energy at the segment boundaries. Being cold and starting at
:math:`\epsilon = 0`, the pseudo-enthalpy equals the specific enthalpy,
:math:`g = h`.
"""

from typing import Any, Optional

import numpy as np
from numpy.typing import ArrayLike

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.base import EOSBarotropicImpl, FloatOrArray
from jesterEOS.errors import EOSConstructionError, UnavailableQuantityError
from jesterEOS.interval import Interval
from jesterEOS.units import Units


class PiecewisePolytrope(EOSBarotropicImpl):
    r"""
    Piecewise polytrope implementation.

    Parameters
    ----------
    rmd_p : float
        Polytropic density scale of the first segment,
        :math:`K_0 = \rho_p^{1 - \Gamma_0}`
    rho_bounds : ArrayLike
        Start densities of the segments; the first must be zero
    gammas : ArrayLike
        Adiabatic exponents of the segments, all :math:`> 1`
    rho_max : float
        Maximum valid mass density
    units : Units, optional
        Unit system, defaults to geometric solar units.
    """

    kind = "pwpoly"

    def __init__(
        self,
        rmd_p: float,
        rho_bounds: ArrayLike,
        gammas: ArrayLike,
        rho_max: float,
        units: Optional[Units] = None,
    ):
        rho_bounds = np.array(rho_bounds, dtype=float)
        gammas = np.array(gammas, dtype=float)

        if rho_bounds.ndim != 1 or rho_bounds.shape != gammas.shape or len(gammas) < 1:
            raise EOSConstructionError(
                "eos_barotr_pwpoly: need one adiabatic exponent per segment"
            )
        if rho_bounds[0] != 0:
            raise EOSConstructionError(
                "eos_barotr_pwpoly: first segment must start at zero density"
            )
        if np.any(np.diff(rho_bounds) <= 0):
            raise EOSConstructionError(
                "eos_barotr_pwpoly: segment boundaries must be strictly increasing"
            )
        if np.any(gammas <= 1):
            raise EOSConstructionError(
                "eos_barotr_pwpoly: adiabatic exponents must exceed one"
            )
        if not rmd_p > 0:
            raise EOSConstructionError(
                f"eos_barotr_pwpoly: polytropic density scale must be positive, got {rmd_p}"
            )
        if not rho_max > 0:
            raise EOSConstructionError(
                f"eos_barotr_pwpoly: maximum density must be positive, got {rho_max}"
            )

        self.rmd_p = float(rmd_p)
        self.rho_max = float(rho_max)
        self._units = units if units is not None else Units.geom_solar()

        nseg = len(gammas)
        K = np.empty(nseg)
        a = np.empty(nseg)
        K[0] = self.rmd_p ** (1.0 - gammas[0])
        a[0] = 0.0
        for i in range(1, nseg):
            r = rho_bounds[i]
            g0, g1 = gammas[i - 1], gammas[i]
            K[i] = K[i - 1] * r ** (g0 - g1)
            a[i] = (
                a[i - 1]
                + K[i - 1] * r ** (g0 - 1) / (g0 - 1)
                - K[i] * r ** (g1 - 1) / (g1 - 1)
            )

        self._rho_bounds = rho_bounds
        self._gammas = gammas
        self._K = K
        self._a = a
        self._gm1_bounds = self._gm1_seg(rho_bounds, np.arange(nseg))
        for arr in (self._rho_bounds, self._gammas, self._K, self._a, self._gm1_bounds):
            arr.setflags(write=False)

        self._rgrho = Interval(0.0, self.rho_max)
        self._rggm1 = Interval(0.0, float(self.gm1_from_rho(self.rho_max)))

    @property
    def rho_bounds(self) -> np.ndarray:
        return self._rho_bounds

    @property
    def gammas(self) -> np.ndarray:
        return self._gammas

    @property
    def segment_K(self) -> np.ndarray:
        """Polytropic constants :math:`K_i` of the segments."""
        return self._K

    @property
    def segment_a(self) -> np.ndarray:
        """Specific energy offsets :math:`a_i` of the segments."""
        return self._a

    # Segment helpers

    def _gm1_seg(self, rho, i):
        gm = self._gammas[i]
        return self._a[i] + self._K[i] * gm / (gm - 1) * np.power(rho, gm - 1)

    def _seg_rho(self, rho):
        idx = np.searchsorted(self._rho_bounds, rho, side="right") - 1
        return np.clip(idx, 0, len(self._gammas) - 1)

    def _seg_gm1(self, gm1):
        idx = np.searchsorted(self._gm1_bounds, gm1, side="right") - 1
        return np.clip(idx, 0, len(self._gammas) - 1)

    # Evaluation

    def gm1_from_rho(self, rho: ArrayLike) -> FloatOrArray:
        rho = np.asarray(rho, dtype=float)
        return self._gm1_seg(rho, self._seg_rho(rho))

    def rho(self, gm1: ArrayLike) -> FloatOrArray:
        gm1 = np.asarray(gm1, dtype=float)
        i = self._seg_gm1(gm1)
        gm = self._gammas[i]
        base = np.maximum(gm1 - self._a[i], 0.0) * (gm - 1) / (self._K[i] * gm)
        return np.power(base, 1.0 / (gm - 1))

    def press(self, gm1: ArrayLike) -> FloatOrArray:
        gm1 = np.asarray(gm1, dtype=float)
        i = self._seg_gm1(gm1)
        return self._K[i] * np.power(self.rho(gm1), self._gammas[i])

    def eps(self, gm1: ArrayLike) -> FloatOrArray:
        gm1 = np.asarray(gm1, dtype=float)
        i = self._seg_gm1(gm1)
        gm = self._gammas[i]
        return self._a[i] + self._K[i] * np.power(self.rho(gm1), gm - 1) / (gm - 1)

    def hm1(self, gm1: ArrayLike) -> FloatOrArray:
        return np.array(gm1, dtype=float)

    def csnd(self, gm1: ArrayLike) -> FloatOrArray:
        gm1 = np.asarray(gm1, dtype=float)
        i = self._seg_gm1(gm1)
        gm = self._gammas[i]
        cs2 = gm * self._K[i] * np.power(self.rho(gm1), gm - 1) / (1.0 + gm1)
        return np.sqrt(cs2)

    def temp(self, gm1: ArrayLike) -> FloatOrArray:
        return np.zeros_like(np.asarray(gm1, dtype=float))

    def ye(self, gm1: ArrayLike) -> FloatOrArray:
        raise UnavailableQuantityError(
            "eos_barotr_pwpoly: electron fraction not available"
        )

    @property
    def range_rho(self) -> Interval:
        return self._rgrho

    @property
    def range_gm1(self) -> Interval:
        return self._rggm1

    @property
    def minimal_h(self) -> float:
        return 1.0

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
            "rmd_p": self.rmd_p,
            "rho_bounds": self._rho_bounds.copy(),
            "gammas": self._gammas.copy(),
            "rho_max": self.rho_max,
            "units": np.array(self._units),
        }

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "PiecewisePolytrope":
        return cls(
            float(data["rmd_p"]),
            data["rho_bounds"],
            data["gammas"],
            float(data["rho_max"]),
            Units(*np.asarray(data["units"], dtype=float)),
        )

    def __repr__(self) -> str:
        return (
            f"PiecewisePolytrope(segments={len(self._gammas)}, "
            f"rho_max={self.rho_max:.6g})"
        )


def make_eos_barotr_pwpoly(
    rmd_p: float,
    rho_bounds: ArrayLike,
    gammas: ArrayLike,
    rho_max: float,
    units: Optional[Units] = None,
) -> EOSBarotropic:
    """Create a piecewise polytropic EOS, see :class:`PiecewisePolytrope`."""
    return EOSBarotropic(PiecewisePolytrope(rmd_p, rho_bounds, gammas, rho_max, units))
