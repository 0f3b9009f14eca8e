r"""
Monotone spline interpolation.

This module provides the shape-preserving 1-D interpolants used to tabulate
EOS quantities. Interpolation is performed with piecewise cubic Hermite
polynomials (PCHIP) which never overshoot where the samples are monotone.
Quantities spanning many orders of magnitude are interpolated in transformed
coordinates:

- :class:`MonotoneSpline`: linear :math:`x`, linear :math:`y`
- :class:`LogSpline`: :math:`\ln x`, linear :math:`y`
- :class:`LogLogSpline`: :math:`\ln x`, :math:`\ln y`

Evaluation outside ``range_x`` is a precondition violation and is not
checked; queries are clamped to the first and last knot in the transformed
coordinate, which only matters for roundoff at the domain boundaries.
"""

from typing import Callable, NamedTuple, Union

import numpy as np
from numpy.typing import ArrayLike
from scipy.interpolate import PchipInterpolator

from jesterEOS.interval import Interval


class SplineKnots(NamedTuple):
    """
    Knots of a monotone spline in its transformed coordinates.

    Rebuilding a spline from the same knots reproduces it exactly, which is
    what the save/load hooks rely on.
    """

    tx: np.ndarray  # transformed abscissae
    ty: np.ndarray  # transformed ordinates
    x_min: float  # domain lower bound (untransformed)
    x_max: float  # domain upper bound (untransformed)


class MonotoneSpline:
    r"""
    Monotonicity preserving cubic spline in linear coordinates.

    Parameters
    ----------
    x : ArrayLike
        Strictly increasing sample positions.
    y : ArrayLike
        Sample values, same length as ``x``.

    Raises
    ------
    ValueError
        If fewer than ``min_points`` samples are given, the positions are not
        strictly increasing or a transformed sample is not finite (e.g. a
        non-positive value on a logarithmic axis).
    """

    log_x = False
    log_y = False
    min_points = 4

    def __init__(self, x: ArrayLike, y: ArrayLike):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.ndim != 1 or x.shape != y.shape:
            raise ValueError(
                f"{type(self).__name__}: sample arrays must be one-dimensional "
                f"and of equal length, got shapes {x.shape} and {y.shape}"
            )
        if len(x) < self.min_points:
            raise ValueError(
                f"{type(self).__name__}: need at least {self.min_points} samples"
            )
        if not x[0] < x[-1]:
            raise ValueError(
                f"{type(self).__name__}: sample positions must be increasing"
            )
        self._setup(self._to_t(x), self._to_u(y), Interval(x[0], x[-1]))

    @classmethod
    def from_knots(cls, knots: SplineKnots) -> "MonotoneSpline":
        """Rebuild a spline from knots obtained with :meth:`knots`."""
        spl = cls.__new__(cls)
        spl._setup(
            np.array(knots.tx, dtype=float),
            np.array(knots.ty, dtype=float),
            Interval(knots.x_min, knots.x_max),
        )
        return spl

    @classmethod
    def from_function(
        cls, func: Callable[[np.ndarray], ArrayLike], domain: Interval, n_points: int
    ) -> "MonotoneSpline":
        r"""
        Sample a function and fit a monotone spline through the samples.

        The sample positions are uniformly spaced in the transformed
        coordinate, i.e. logarithmically spaced for the log-x variants. The
        first and last position coincide exactly with the domain bounds.

        Args:
            func: Vectorized function, called once with the array of sample
                positions.
            domain: Interval to sample.
            n_points: Number of samples.

        Returns:
            MonotoneSpline: Spline of the same class the method is called on.
        """
        if n_points < cls.min_points:
            raise ValueError(
                f"{cls.__name__}: need at least {cls.min_points} samples, "
                f"got {n_points}"
            )
        if cls.log_x and domain.min <= 0:
            raise ValueError(
                f"{cls.__name__}: logarithmic domain must be positive, got {domain}"
            )
        if not domain.min < domain.max:
            raise ValueError(f"{cls.__name__}: degenerate domain {domain}")

        tx = np.linspace(cls._to_t(domain.min), cls._to_t(domain.max), n_points)
        x = cls._from_t(tx)
        x[0] = domain.min
        x[-1] = domain.max

        y = np.broadcast_to(np.asarray(func(x), dtype=float), x.shape)
        return cls.from_knots(SplineKnots(tx, cls._to_u(y), domain.min, domain.max))

    # Coordinate transforms

    @classmethod
    def _to_t(cls, x):
        if not cls.log_x:
            return np.array(x, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(x)

    @classmethod
    def _from_t(cls, t):
        return np.exp(t) if cls.log_x else np.array(t, dtype=float)

    @classmethod
    def _to_u(cls, y):
        if not cls.log_y:
            return np.array(y, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.log(y)

    @classmethod
    def _from_u(cls, u):
        return np.exp(u) if cls.log_y else u

    def _setup(self, tx: np.ndarray, ty: np.ndarray, range_x: Interval) -> None:
        name = type(self).__name__
        if not (np.all(np.isfinite(tx)) and np.all(np.isfinite(ty))):
            raise ValueError(
                f"{name}: non-finite sample after coordinate transform "
                f"(log axes need positive samples)"
            )
        if not np.all(np.diff(tx) > 0):
            raise ValueError(f"{name}: sample positions must be strictly increasing")

        tx.setflags(write=False)
        ty.setflags(write=False)
        self._tx = tx
        self._ty = ty
        self._t_lo = tx[0]
        self._t_hi = tx[-1]
        self._interp = PchipInterpolator(tx, ty, extrapolate=True)
        self._range_x = range_x
        self._range_y = Interval(
            float(self._from_u(np.min(ty))), float(self._from_u(np.max(ty)))
        )

    # Evaluation

    def __call__(self, x: ArrayLike) -> Union[float, np.ndarray]:
        xa = np.asarray(x, dtype=float)
        t = np.clip(self._to_t(xa), self._t_lo, self._t_hi)
        y = self._from_u(self._interp(t))
        return y if xa.ndim else float(y)

    def evaluate(self, x: ArrayLike) -> Union[float, np.ndarray]:
        """Evaluate the spline; ``x`` must lie inside :attr:`range_x`."""
        return self(x)

    @property
    def range_x(self) -> Interval:
        """Domain of the spline."""
        return self._range_x

    @property
    def range_y(self) -> Interval:
        """Range of values taken by the spline on its domain."""
        return self._range_y

    def contains(self, x: Union[float, Interval]) -> bool:
        """Whether a point or an interval lies inside the spline domain."""
        return self._range_x.contains(x)

    def knots(self) -> SplineKnots:
        """Knots in transformed coordinates, see :meth:`from_knots`."""
        return SplineKnots(
            self._tx.copy(), self._ty.copy(), self._range_x.min, self._range_x.max
        )

    def __len__(self) -> int:
        return len(self._tx)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(n_points={len(self)}, "
            f"range_x=[{self._range_x.min:.6g}, {self._range_x.max:.6g}])"
        )


class LogSpline(MonotoneSpline):
    r"""Monotone spline in :math:`\ln x` with linear :math:`y`."""

    log_x = True


class LogLogSpline(MonotoneSpline):
    r"""Monotone spline in :math:`\ln x` and :math:`\ln y`."""

    log_x = True
    log_y = True


def make_interpol_pchip_spline(x: ArrayLike, y: ArrayLike) -> MonotoneSpline:
    r"""
    Fit raw sample columns with a monotone spline.

    The coordinate space is chosen from the data: log-log if all positions and
    values are positive, log-linear if only the positions are, linear
    otherwise. Power-law relations such as :math:`P(\rho)` of a polytrope are
    then represented without interpolation error.

    Args:
        x: Strictly increasing sample positions.
        y: Sample values.

    Returns:
        MonotoneSpline: The fitted spline.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.size and np.min(x) > 0:
        if y.size and np.min(y) > 0:
            return LogLogSpline(x, y)
        return LogSpline(x, y)
    return MonotoneSpline(x, y)
