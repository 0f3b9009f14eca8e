r"""
Thermal hybrid EOS.

The hybrid EOS adds an ideal-gas like thermal component to a cold barotropic
EOS:

.. math::
    P(\rho, \epsilon) = P_c(\rho) + (\Gamma_\mathrm{th} - 1) \rho
    (\epsilon - \epsilon_c(\rho))

The thermal variable of its states is the thermal part of the specific
energy, :math:`\epsilon_\mathrm{th} = \epsilon - \epsilon_c(\rho) \ge 0`.
Temperature is not modelled and reported as zero; composition is not used,
any electron fraction in :math:`[0, 1]` is accepted.
"""

from typing import Any, Optional

import numpy as np
from numpy.typing import ArrayLike

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.base import (
    EOSBarotropicImpl,
    EOSThermalImpl,
    FloatOrArray,
    nest_state,
    unnest_state,
)
from jesterEOS.eos.thermal import EOSThermal
from jesterEOS.errors import EOSConstructionError, UnavailableQuantityError
from jesterEOS.interval import Interval
from jesterEOS.logging_config import get_logger
from jesterEOS.units import Units

logger = get_logger(__name__)


class HybridThermal(EOSThermalImpl):
    r"""
    Hybrid EOS implementation.

    Parameters
    ----------
    eos_c : EOSBarotropicImpl
        Cold EOS implementation
    gamma_th : float
        Thermal adiabatic index :math:`\Gamma_\mathrm{th} > 1`
    eps_max : float
        Maximum specific energy
    rho_max : float
        Maximum density, not above the maximum density of the cold EOS
    """

    kind = "hybrid"

    def __init__(
        self,
        eos_c: EOSBarotropicImpl,
        gamma_th: float,
        eps_max: float,
        rho_max: float,
    ):
        if not gamma_th > 1:
            raise EOSConstructionError(
                f"eos_hybrid: thermal adiabatic index must exceed one, got {gamma_th}"
            )
        if not 0 < rho_max <= eos_c.range_rho.max:
            raise EOSConstructionError(
                f"eos_hybrid: maximum density {rho_max} outside the range of the "
                f"cold EOS {eos_c.range_rho}"
            )

        self._cold = eos_c
        self.gamma_th = float(gamma_th)
        self.eps_max = float(eps_max)
        self.rho_max = float(rho_max)
        self._gm1th = self.gamma_th - 1.0

        eps_c_max = float(self._cold_eps(self.rho_max))
        if self.eps_max < eps_c_max:
            raise EOSConstructionError(
                f"eos_hybrid: maximum specific energy {eps_max} below cold "
                f"specific energy {eps_c_max} at maximum density"
            )

        self._rgrho = Interval(0.0, self.rho_max)
        self._rgye = Interval(0.0, 1.0)
        self._rgtemp = Interval(0.0, 0.0)

    @property
    def cold(self) -> EOSBarotropicImpl:
        """The cold EOS implementation."""
        return self._cold

    def _cold_eps(self, rho):
        return self._cold.eps(self._cold.gm1_from_rho(rho))

    def _cold_state(self, rho):
        # Pc / rho is written as hm1 - eps to stay finite at zero density
        gm1 = self._cold.gm1_from_rho(rho)
        eps_c = self._cold.eps(gm1)
        hm1_c = self._cold.hm1(gm1)
        return (
            np.asarray(eps_c),
            np.asarray(self._cold.press(gm1)),
            np.asarray(hm1_c) - eps_c,
            np.asarray(self._cold.csnd(gm1)),
            1.0 + np.asarray(hm1_c),
        )

    def therm_from_rho_eps_ye(
        self, rho: ArrayLike, eps: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        return np.asarray(eps) - self._cold_eps(rho)

    def therm_from_rho_temp_ye(
        self, rho: ArrayLike, temp: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        return np.zeros_like(np.asarray(rho, dtype=float))

    def eps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        return self._cold_eps(rho) + th

    def temp(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        return np.zeros_like(np.asarray(th, dtype=float))

    def press(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _, p_c, _, _, _ = self._cold_state(rho)
        return p_c + self._gm1th * np.asarray(rho) * th

    def csnd(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _, _, p_over_rho_c, cs_c, h_c = self._cold_state(rho)
        h = h_c + self.gamma_th * np.asarray(th)
        cs2 = (cs_c**2 * h_c + self.gamma_th * self._gm1th * th) / h
        return np.sqrt(cs2)

    def sentr(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        raise UnavailableQuantityError("eos_hybrid: entropy not available")

    def dpress_drho(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _, _, p_over_rho_c, cs_c, h_c = self._cold_state(rho)
        return cs_c**2 * h_c + self._gm1th * (th - p_over_rho_c)

    def dpress_deps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        return self._gm1th * np.asarray(rho, dtype=float)

    @property
    def range_rho(self) -> Interval:
        return self._rgrho

    @property
    def range_ye(self) -> Interval:
        return self._rgye

    def range_eps(self, rho: float, ye: float) -> Interval:
        return Interval(float(self._cold_eps(rho)), self.eps_max)

    def range_temp(self, rho: float, ye: float) -> Interval:
        return self._rgtemp

    @property
    def minimal_h(self) -> float:
        return self._cold.minimal_h

    @property
    def units_to_SI(self) -> Units:
        return self._cold.units_to_SI

    def state_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind,
            "gamma_th": self.gamma_th,
            "eps_max": self.eps_max,
            "rho_max": self.rho_max,
        }
        data.update(nest_state(self._cold.state_dict(), "cold"))
        return data

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "HybridThermal":
        cold = EOSBarotropicImpl.from_state_dict(unnest_state(data, "cold"))
        return cls(
            cold,
            float(data["gamma_th"]),
            float(data["eps_max"]),
            float(data["rho_max"]),
        )

    def __repr__(self) -> str:
        return (
            f"HybridThermal(gamma_th={self.gamma_th}, eps_max={self.eps_max:.6g}, "
            f"rho_max={self.rho_max:.6g}, cold={type(self._cold).__name__})"
        )


def make_eos_hybrid(
    eos_c: EOSBarotropic,
    gamma_th: float,
    eps_max: float,
    rho_max: Optional[float] = None,
) -> EOSThermal:
    r"""
    Create a hybrid EOS from a cold EOS and a thermal adiabatic index.

    Args:
        eos_c: Cold barotropic EOS
        gamma_th: Thermal adiabatic index :math:`\Gamma_\mathrm{th} > 1`
        eps_max: Maximum specific energy
        rho_max: Maximum density; defaults to the maximum of the cold EOS

    Returns:
        EOSThermal: Handle to the hybrid EOS

    Raises:
        EOSConstructionError: If the parameters are invalid.
    """
    cold = eos_c.implementation
    if rho_max is None:
        rho_max = cold.range_rho.max
    impl = HybridThermal(cold, gamma_th, eps_max, rho_max)
    logger.info(
        f"Built hybrid EOS with gamma_th={gamma_th} on top of {type(cold).__name__}"
    )
    return EOSThermal(impl)
