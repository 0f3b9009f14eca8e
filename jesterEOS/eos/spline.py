r"""
Barotropic EOS based on monotone splines.

A :class:`SplineBarotropic` EOS represents a cold EOS by splines of all
quantities as functions of the pseudo-enthalpy :math:`g - 1`, plus the
inverse spline :math:`g - 1(\rho)`. Below a join density the table is replaced
by a :class:`~jesterEOS.eos.polytrope.GeneralizedPolytrope` crust that matches
density, specific energy and pressure at the join.

There are three ways to build one:

- :func:`make_eos_barotr_spline` from vectorized functions of :math:`g - 1`
  (and of :math:`\rho` for the inverse),
- :func:`make_eos_barotr_spline_from_samples` from sample columns,
- :func:`resample_eos_barotr` from any other barotropic EOS.

The crust computes :math:`g - 1` from its own closed form, which in general
disagrees slightly with the sampled data at the join. The builder therefore
reparametrizes the table,

.. math::
    (g - 1)_\mathrm{new} = (g - 1) + g_\mathrm{corr} \, g, \qquad
    g_\mathrm{corr} = \frac{(g - 1)_\mathrm{crust}(\rho_j) - (g - 1)_j}{g_j}

so that both representations agree to machine precision at the join. This
amounts to a constant factor in :math:`g`, i.e. the freedom in the integration
constant of :math:`\ln g = \int dP / (\rho h)`.
"""

from typing import Any, Callable, Optional

import numpy as np
from numpy.typing import ArrayLike

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.base import (
    EOSBarotropicImpl,
    FloatOrArray,
    nest_state,
    unnest_state,
)
from jesterEOS.eos.polytrope import GeneralizedPolytrope
from jesterEOS.errors import EOSConstructionError, UnavailableQuantityError
from jesterEOS.interpol import (
    LogLogSpline,
    LogSpline,
    MonotoneSpline,
    SplineKnots,
    make_interpol_pchip_spline,
)
from jesterEOS.interval import Interval, intersect
from jesterEOS.logging_config import get_logger
from jesterEOS.units import Units

logger = get_logger(__name__)

#: Ratio between the number of density samples and the number of g-1 samples
FAC_PTS_RHO = 5

#: Upper density of the matching crust, relative to the join density
RHO_POLY_MARGIN = 1.000001

# Spline classes per stored quantity, in constructor order
_SPLINE_TYPES: dict[str, type] = {
    "gm1_rho": LogLogSpline,
    "rho_gm1": LogLogSpline,
    "eps_gm1": LogSpline,
    "press_gm1": LogLogSpline,
    "hm1_gm1": LogSpline,
    "csnd_gm1": LogSpline,
    "temp_gm1": LogSpline,
    "efrac_gm1": LogSpline,
}

Func = Callable[[np.ndarray], ArrayLike]


class SplineBarotropic(EOSBarotropicImpl):
    r"""
    Barotropic EOS implementation from splines joined to a polytropic crust.

    Usually created by one of the builder functions of this module, which take
    care of the join correction. The constructor only validates that the
    splines and the crust fit together and are physically sound.

    Parameters
    ----------
    gm1_rho : LogLogSpline
        :math:`g - 1` as function of mass density
    rho_gm1 : LogLogSpline
        Mass density as function of :math:`g - 1`
    eps_gm1 : LogSpline
        Specific internal energy
    press_gm1 : LogLogSpline
        Pressure
    hm1_gm1 : LogSpline
        Specific enthalpy minus one
    csnd_gm1 : LogSpline
        Adiabatic sound speed
    temp_gm1 : LogSpline or None
        Temperature, if available
    efrac_gm1 : LogSpline or None
        Electron fraction, if available
    isentropic : bool
        Whether the EOS describes isentropic matter
    poly : GeneralizedPolytrope
        Crust used below the join, whose maximum density and :math:`g - 1`
        define the join point

    Raises
    ------
    EOSConstructionError
        If the crust's maximum lies outside the spline domains or any
        quantity violates a physical bound.
    """

    kind = "spline"

    def __init__(
        self,
        gm1_rho: MonotoneSpline,
        rho_gm1: MonotoneSpline,
        eps_gm1: MonotoneSpline,
        press_gm1: MonotoneSpline,
        hm1_gm1: MonotoneSpline,
        csnd_gm1: MonotoneSpline,
        temp_gm1: Optional[MonotoneSpline],
        efrac_gm1: Optional[MonotoneSpline],
        isentropic: bool,
        poly: GeneralizedPolytrope,
    ):
        self._gm1_rho = gm1_rho
        self._rho_gm1 = rho_gm1
        self._eps_gm1 = eps_gm1
        self._press_gm1 = press_gm1
        self._hm1_gm1 = hm1_gm1
        self._csnd_gm1 = csnd_gm1
        self._temp_gm1 = temp_gm1
        self._efrac_gm1 = efrac_gm1
        self._isentropic = bool(isentropic)
        self._poly = poly

        required = [eps_gm1, press_gm1, hm1_gm1, rho_gm1, csnd_gm1]
        optional = [s for s in (temp_gm1, efrac_gm1) if s is not None]
        try:
            rg = intersect(*[s.range_x for s in required + optional])
        except ValueError as e:
            raise EOSConstructionError(
                "eos_barotr_spline: spline domains do not overlap"
            ) from e
        self._rggm1 = Interval(0.0, rg.max)

        self._gm1_low = poly.range_gm1.max
        self._rho_low = poly.range_rho.max

        if not all(s.contains(self._gm1_low) for s in required + optional):
            raise EOSConstructionError(
                "eos_barotr_spline: matching polytrope outside sampled range for g-1"
            )
        if not gm1_rho.contains(self._rho_low):
            raise EOSConstructionError(
                "eos_barotr_spline: matching polytrope outside sampled range for rho"
            )
        if rho_gm1.range_y.min < 0.0:
            raise EOSConstructionError(
                "eos_barotr_spline: negative mass density in rho(gm1)"
            )
        if csnd_gm1.range_y.max >= 1.0:
            raise EOSConstructionError("eos_barotr_spline: sound speed >= 1")
        if csnd_gm1.range_y.min < 0.0:
            raise EOSConstructionError("eos_barotr_spline: sound speed < 0")
        if press_gm1.range_y.min < 0.0:
            raise EOSConstructionError("eos_barotr_spline: negative pressure")
        if gm1_rho.range_y.min < 0.0:
            raise EOSConstructionError("eos_barotr_spline: encountered g < 1")

        self._zerotemp = False
        self._temp0 = 0.0
        if temp_gm1 is not None:
            if temp_gm1.range_y.min < 0.0:
                raise EOSConstructionError(
                    "eos_barotr_spline: encountered negative temperature"
                )
            self._temp0 = temp_gm1(self._gm1_low)
            self._zerotemp = temp_gm1.range_y.max == 0
        if self._zerotemp and not self._isentropic:
            raise EOSConstructionError(
                "eos_barotr_spline: zero-temperature EOS must be isentropic"
            )

        self._efrac0 = efrac_gm1(self._gm1_low) if efrac_gm1 is not None else 0.0

        rho_max = min(rho_gm1(self._rggm1.max), gm1_rho.range_x.max)
        self._rgrho = Interval(0.0, rho_max)
        self._min_h = 1.0 + min(float(poly.hm1(0.0)), hm1_gm1.range_y.min)

    # Join point

    @property
    def gm1_low(self) -> float:
        """Pseudo-enthalpy below which the crust is used."""
        return self._gm1_low

    @property
    def rho_low(self) -> float:
        """Density below which the crust is used."""
        return self._rho_low

    @property
    def crust(self) -> GeneralizedPolytrope:
        return self._poly

    def _select(self, gm1, spline, crust):
        g = np.asarray(gm1, dtype=float)
        if g.ndim == 0:
            return float(spline(g) if g >= self._gm1_low else crust(g))
        return np.where(g >= self._gm1_low, spline(g), crust(g))

    # Evaluation

    def gm1_from_rho(self, rho: ArrayLike) -> FloatOrArray:
        r = np.asarray(rho, dtype=float)
        if r.ndim == 0:
            if r >= self._rho_low:
                res = self._gm1_rho(r)
            else:
                res = self._poly.gm1_from_rho(r)
            return min(max(float(res), 0.0), self._rggm1.max)
        res = np.where(
            r >= self._rho_low, self._gm1_rho(r), self._poly.gm1_from_rho(r)
        )
        return np.clip(res, 0.0, self._rggm1.max)

    def rho(self, gm1: ArrayLike) -> FloatOrArray:
        return self._select(gm1, self._rho_gm1, self._poly.rho)

    def eps(self, gm1: ArrayLike) -> FloatOrArray:
        return self._select(gm1, self._eps_gm1, self._poly.eps)

    def press(self, gm1: ArrayLike) -> FloatOrArray:
        return self._select(gm1, self._press_gm1, self._poly.press)

    def hm1(self, gm1: ArrayLike) -> FloatOrArray:
        return self._select(gm1, self._hm1_gm1, self._poly.hm1)

    def csnd(self, gm1: ArrayLike) -> FloatOrArray:
        return self._select(gm1, self._csnd_gm1, self._poly.csnd)

    def temp(self, gm1: ArrayLike) -> FloatOrArray:
        g = np.asarray(gm1, dtype=float)
        if self._zerotemp:
            return np.zeros_like(g) if g.ndim else 0.0
        if self._temp_gm1 is None:
            raise UnavailableQuantityError(
                "eos_barotr_spline: temperature not available"
            )
        if g.ndim == 0:
            return self._temp_gm1(g) if g > self._gm1_low else self._temp0
        return np.where(g > self._gm1_low, self._temp_gm1(g), self._temp0)

    def ye(self, gm1: ArrayLike) -> FloatOrArray:
        if self._efrac_gm1 is None:
            raise UnavailableQuantityError(
                "eos_barotr_spline: electron fraction not available"
            )
        g = np.asarray(gm1, dtype=float)
        if g.ndim == 0:
            return self._efrac_gm1(g) if g >= self._gm1_low else self._efrac0
        return np.where(g >= self._gm1_low, self._efrac_gm1(g), self._efrac0)

    # Ranges and flags

    @property
    def range_rho(self) -> Interval:
        return self._rgrho

    @property
    def range_gm1(self) -> Interval:
        return self._rggm1

    @property
    def minimal_h(self) -> float:
        return self._min_h

    @property
    def is_isentropic(self) -> bool:
        return self._isentropic

    @property
    def is_zero_temp(self) -> bool:
        return self._zerotemp

    @property
    def has_temp(self) -> bool:
        return self._temp_gm1 is not None

    @property
    def has_efrac(self) -> bool:
        return self._efrac_gm1 is not None

    @property
    def units_to_SI(self) -> Units:
        return self._poly.units_to_SI

    # Save/load

    def _splines(self) -> dict[str, Optional[MonotoneSpline]]:
        return {
            "gm1_rho": self._gm1_rho,
            "rho_gm1": self._rho_gm1,
            "eps_gm1": self._eps_gm1,
            "press_gm1": self._press_gm1,
            "hm1_gm1": self._hm1_gm1,
            "csnd_gm1": self._csnd_gm1,
            "temp_gm1": self._temp_gm1,
            "efrac_gm1": self._efrac_gm1,
        }

    def state_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "isentropic": self._isentropic}
        for name, spl in self._splines().items():
            if spl is None:
                continue
            knots = spl.knots()
            data[f"{name}_tx"] = knots.tx
            data[f"{name}_ty"] = knots.ty
            data[f"{name}_range"] = np.array([knots.x_min, knots.x_max])
        data.update(nest_state(self._poly.state_dict(), "poly"))
        return data

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "SplineBarotropic":
        splines = {}
        for name, spl_cls in _SPLINE_TYPES.items():
            if f"{name}_tx" not in data:
                splines[name] = None
                continue
            x_min, x_max = np.asarray(data[f"{name}_range"], dtype=float)
            splines[name] = spl_cls.from_knots(
                SplineKnots(data[f"{name}_tx"], data[f"{name}_ty"], x_min, x_max)
            )
        poly = GeneralizedPolytrope.from_state_dict(unnest_state(data, "poly"))
        return cls(
            **splines, isentropic=bool(data["isentropic"]), poly=poly
        )

    def __repr__(self) -> str:
        return (
            f"SplineBarotropic(rho=[0, {self._rgrho.max:.6g}], "
            f"gm1=[0, {self._rggm1.max:.6g}], rho_low={self._rho_low:.6g}, "
            f"n_points={len(self._rho_gm1)})"
        )


def make_eos_barotr_spline(
    gm1_rho: Func,
    rho_gm1: Func,
    eps_gm1: Func,
    press_gm1: Func,
    csnd_gm1: Func,
    temp_gm1: Optional[Func],
    efrac_gm1: Optional[Func],
    isentropic: bool,
    rg_rho: Interval,
    n_poly: float,
    units: Optional[Units] = None,
    pts_per_mag: int = 200,
) -> EOSBarotropic:
    r"""
    Create a spline EOS by sampling functions of :math:`g - 1`.

    All functions must be vectorized: they are called with numpy arrays of
    sample positions. They only need to be valid on the target density range
    and the corresponding range of :math:`g - 1`. Below ``rg_rho.min``, the
    EOS is continued with a generalized polytrope of index ``n_poly`` matched
    at that density.

    Args:
        gm1_rho: :math:`g - 1` as function of mass density
        rho_gm1: Mass density as function of :math:`g - 1`
        eps_gm1: Specific internal energy
        press_gm1: Pressure
        csnd_gm1: Adiabatic sound speed
        temp_gm1: Temperature, or None if unknown
        efrac_gm1: Electron fraction, or None if unknown
        isentropic: Whether the EOS is isentropic
        rg_rho: Density range to be represented by splines
        n_poly: Polytropic index of the crust
        units: Unit system of the EOS
        pts_per_mag: Sample points per decade of :math:`g - 1`. The inverse
            density spline uses five times as many.

    Returns:
        EOSBarotropic: Handle to the new EOS

    Raises:
        EOSConstructionError: If the functions cannot be represented or
            yield unphysical values.
    """
    if pts_per_mag < 1:
        raise EOSConstructionError(
            f"eos_barotr_spline: need at least one point per decade, got {pts_per_mag}"
        )
    if not rg_rho.min < rg_rho.max:
        raise EOSConstructionError(
            f"eos_barotr_spline: degenerate density range {rg_rho}"
        )

    def hm1_gm1(gm1):
        return np.asarray(eps_gm1(gm1)) + np.asarray(press_gm1(gm1)) / np.asarray(
            rho_gm1(gm1)
        )

    rho_join = rg_rho.min
    gm1_join = float(gm1_rho(rho_join))
    eps_join = float(eps_gm1(gm1_join))
    p_join = float(press_gm1(gm1_join))
    poly = GeneralizedPolytrope.from_boundary(
        rho_join, eps_join, p_join, n_poly, RHO_POLY_MARGIN * rho_join, units
    )

    gcorr = (float(poly.gm1_from_rho(rho_join)) - gm1_join) / (1.0 + gm1_join)

    def gm1_new(gm1o):
        return gm1o + gcorr * (1.0 + gm1o)

    def gm1_old(gm1n):
        return gm1n - (gcorr / (1.0 + gcorr)) * (1.0 + gm1n)

    gm1_lo = gm1_new(gm1_join)
    gm1_hi = gm1_new(float(gm1_rho(rg_rho.max)))
    if not (gm1_lo > 0 and gm1_lo < gm1_hi):
        raise EOSConstructionError(
            "eos_barotr_spline: invalid interval requested for interpolation range"
        )
    rg_gm1 = Interval(gm1_lo, gm1_hi)

    npts_gm1 = pts_per_mag * int(max(1.0, np.log10(rg_gm1.max / rg_gm1.min)))
    npts_rho = FAC_PTS_RHO * npts_gm1
    logger.debug(
        f"Spline EOS join at rho={rho_join:.6e}, gm1={gm1_join:.6e}, gcorr={gcorr:.3e}"
    )
    logger.debug(f"Sampling {npts_gm1} points in g-1 and {npts_rho} points in rho")

    def resampled(func):
        return lambda gm1: func(gm1_old(gm1))

    try:
        sgm1 = LogLogSpline.from_function(
            lambda rho: gm1_new(np.asarray(gm1_rho(rho))), rg_rho, npts_rho
        )
        srho = LogLogSpline.from_function(resampled(rho_gm1), rg_gm1, npts_gm1)
        seps = LogSpline.from_function(resampled(eps_gm1), rg_gm1, npts_gm1)
        shm1 = LogSpline.from_function(resampled(hm1_gm1), rg_gm1, npts_gm1)
        spress = LogLogSpline.from_function(resampled(press_gm1), rg_gm1, npts_gm1)
        scsnd = LogSpline.from_function(resampled(csnd_gm1), rg_gm1, npts_gm1)
        stemp = (
            LogSpline.from_function(resampled(temp_gm1), rg_gm1, npts_gm1)
            if temp_gm1 is not None
            else None
        )
        sefrac = (
            LogSpline.from_function(resampled(efrac_gm1), rg_gm1, npts_gm1)
            if efrac_gm1 is not None
            else None
        )
    except ValueError as e:
        raise EOSConstructionError(f"eos_barotr_spline: {e}") from e

    impl = SplineBarotropic(
        sgm1, srho, seps, spress, shm1, scsnd, stemp, sefrac, isentropic, poly
    )
    logger.info(
        f"Built spline EOS for rho in [{rg_rho.min:.4e}, {rg_rho.max:.4e}] "
        f"with polytropic crust n={n_poly}"
    )
    return EOSBarotropic(impl)


def _as_column(
    name: str, values: ArrayLike, size: Optional[int] = None
) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise EOSConstructionError(
            f"eos_barotr_spline: column '{name}' must be one-dimensional"
        )
    if size is not None and len(arr) != size:
        raise EOSConstructionError(
            f"eos_barotr_spline: column '{name}' has {len(arr)} samples, expected {size}"
        )
    if not np.all(np.isfinite(arr)):
        raise EOSConstructionError(
            f"eos_barotr_spline: column '{name}' contains non-finite values"
        )
    return arr


def make_eos_barotr_spline_from_samples(
    gm1: ArrayLike,
    rho: ArrayLike,
    eps: ArrayLike,
    press: ArrayLike,
    csnd: ArrayLike,
    temp: Optional[ArrayLike] = None,
    efrac: Optional[ArrayLike] = None,
    *,
    n_poly: float,
    isentropic: bool = True,
    rg_rho: Optional[Interval] = None,
    units: Optional[Units] = None,
    pts_per_mag: int = 200,
) -> EOSBarotropic:
    r"""
    Create a spline EOS from sample columns.

    Each column is first fitted against :math:`g - 1` (and density against
    :math:`g - 1` and vice versa) with
    :func:`~jesterEOS.interpol.make_interpol_pchip_spline`; the resulting
    interpolants are then resampled by :func:`make_eos_barotr_spline`. Samples
    with zero density or zero :math:`g - 1` are not fitted, since the crust
    represents that point.

    Args:
        gm1: Pseudo-enthalpy :math:`g - 1`, strictly increasing
        rho: Mass density, strictly increasing
        eps: Specific internal energy
        press: Pressure
        csnd: Adiabatic sound speed
        temp: Temperature, optional
        efrac: Electron fraction, optional
        n_poly: Polytropic index of the crust
        isentropic: Whether the EOS is isentropic
        rg_rho: Density range represented by splines. Defaults to the range
            from the smallest positive to the largest sampled density.
        units: Unit system of the samples
        pts_per_mag: Resampling points per decade, see
            :func:`make_eos_barotr_spline`

    Returns:
        EOSBarotropic: Handle to the new EOS

    Raises:
        EOSConstructionError: If the samples are inconsistent or the target
            density range is not covered.
    """
    gm1 = _as_column("gm1", gm1)
    n = len(gm1)
    if n < MonotoneSpline.min_points:
        raise EOSConstructionError(
            f"eos_barotr_spline: need at least {MonotoneSpline.min_points} samples, got {n}"
        )
    rho = _as_column("rho", rho, n)
    eps = _as_column("eps", eps, n)
    press = _as_column("press", press, n)
    csnd = _as_column("csnd", csnd, n)
    if temp is not None:
        temp = _as_column("temp", temp, n)
    if efrac is not None:
        efrac = _as_column("efrac", efrac, n)

    if np.any(np.diff(rho) <= 0) or np.any(np.diff(gm1) <= 0):
        raise EOSConstructionError(
            "eos_barotr_spline: density and g-1 samples must be strictly increasing"
        )
    if rho[0] < 0:
        raise EOSConstructionError("eos_barotr_spline: negative mass density")
    if gm1[0] < 0:
        raise EOSConstructionError("eos_barotr_spline: encountered g < 1")
    if np.any(press < 0):
        raise EOSConstructionError("eos_barotr_spline: negative pressure")
    if np.any(csnd < 0) or np.any(csnd >= 1):
        raise EOSConstructionError("eos_barotr_spline: sound speed outside [0, 1)")
    if temp is not None and np.any(temp < 0):
        raise EOSConstructionError(
            "eos_barotr_spline: encountered negative temperature"
        )

    # Log-coordinate fits need positive samples; the crust covers rho = 0
    keep = (rho > 0) & (gm1 > 0)
    if np.count_nonzero(keep) < MonotoneSpline.min_points:
        raise EOSConstructionError(
            f"eos_barotr_spline: need at least {MonotoneSpline.min_points} samples "
            f"with positive density and g-1, got {np.count_nonzero(keep)}"
        )
    if not np.all(keep):
        logger.debug(
            f"Dropped {len(keep) - np.count_nonzero(keep)} zero-density samples"
        )
        rho, gm1, eps, press, csnd = (
            rho[keep], gm1[keep], eps[keep], press[keep], csnd[keep]
        )
        if temp is not None:
            temp = temp[keep]
        if efrac is not None:
            efrac = efrac[keep]

    if rg_rho is None:
        rg_rho = Interval(rho[0], rho[-1])

    try:
        gm1_rho = make_interpol_pchip_spline(rho, gm1)
        rho_gm1 = make_interpol_pchip_spline(gm1, rho)
        eps_gm1 = make_interpol_pchip_spline(gm1, eps)
        press_gm1 = make_interpol_pchip_spline(gm1, press)
        csnd_gm1 = make_interpol_pchip_spline(gm1, csnd)
        temp_gm1 = make_interpol_pchip_spline(gm1, temp) if temp is not None else None
        efrac_gm1 = (
            make_interpol_pchip_spline(gm1, efrac) if efrac is not None else None
        )
    except ValueError as e:
        raise EOSConstructionError(f"eos_barotr_spline: {e}") from e

    if not gm1_rho.contains(rg_rho):
        raise EOSConstructionError(
            "eos_barotr_spline: target density range outside provided sample points"
        )

    return make_eos_barotr_spline(
        gm1_rho,
        rho_gm1,
        eps_gm1,
        press_gm1,
        csnd_gm1,
        temp_gm1,
        efrac_gm1,
        isentropic,
        rg_rho,
        n_poly,
        units,
        pts_per_mag,
    )


def resample_eos_barotr(
    eos: EOSBarotropic,
    rg_rho: Interval,
    n_poly: float,
    pts_per_mag: int = 200,
) -> EOSBarotropic:
    """
    Represent an existing barotropic EOS as spline EOS.

    Temperature and electron fraction are carried over when the source EOS
    provides them; isentropy flag and unit system are copied.

    Raises:
        EOSConstructionError: If ``rg_rho`` is not inside the valid density
            range of ``eos``.
    """
    if not eos.range_rho.contains(rg_rho):
        raise EOSConstructionError(
            "eos_barotr_spline: target density range outside EOS validity range"
        )
    impl = eos.implementation

    return make_eos_barotr_spline(
        impl.gm1_from_rho,
        impl.rho,
        impl.eps,
        impl.press,
        impl.csnd,
        impl.temp if impl.has_temp else None,
        impl.ye if impl.has_efrac else None,
        eos.is_isentropic,
        rg_rho,
        n_poly,
        eos.units_to_SI,
        pts_per_mag,
    )
