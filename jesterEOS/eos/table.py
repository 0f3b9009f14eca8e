r"""Loading of cold EOS sample tables."""

import os
from typing import Optional

import numpy as np

from jesterEOS import utils
from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.spline import make_eos_barotr_spline_from_samples
from jesterEOS.errors import EOSConstructionError
from jesterEOS.interval import Interval
from jesterEOS.logging_config import get_logger
from jesterEOS.units import Units

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("rho", "eps", "press")
OPTIONAL_COLUMNS = ("gm1", "csnd", "temp", "efrac")


class SampleTable:
    r"""
    Cold EOS sample table loaded from an ``.npz`` archive.

    The archive must contain the columns ``rho`` (mass density), ``eps``
    (specific internal energy) and ``press`` (pressure), sorted by density.
    It may further contain ``gm1`` (pseudo-enthalpy :math:`g - 1`), ``csnd``
    (sound speed), ``temp`` (temperature) and ``efrac`` (electron fraction).
    Missing ``gm1`` and ``csnd`` columns are computed from the others, see
    :func:`jesterEOS.utils.pseudo_enthalpy_from_table` and
    :func:`jesterEOS.utils.sound_speed_from_table`; this needs the
    polytropic index assumed below the first sample.

    Parameters
    ----------
    path : str
        Path to the ``.npz`` file.
    min_density : float, optional
        Points with density below this value are excluded.
    max_density : float, optional
        Points with density above this value are excluded.
    filter_zero_pressure : bool, optional
        If True (default), drop points with non-positive pressure.
    n_poly : float, optional
        Polytropic index of the low density extension, needed only if the
        table has no ``gm1`` column.

    Raises
    ------
    ValueError
        If the file does not exist.
    EOSConstructionError
        If columns are missing, have inconsistent lengths, are not
        monotonic, or no points remain after masking.

    Examples
    --------
    >>> table = SampleTable("sly.npz", min_density=1e-10, n_poly=1.0)
    >>> eos = table.to_eos(n_poly=1.0)
    """

    def __init__(
        self,
        path: str,
        min_density: Optional[float] = None,
        max_density: Optional[float] = None,
        filter_zero_pressure: bool = True,
        n_poly: Optional[float] = None,
    ):
        if not os.path.exists(path):
            raise ValueError(f"EOS table file not found: {path}")
        self._path = path

        with np.load(path) as raw:
            missing = [c for c in REQUIRED_COLUMNS if c not in raw.files]
            if missing:
                raise EOSConstructionError(
                    f"EOS table {path} lacks required columns {missing}"
                )
            columns = {
                name: np.asarray(raw[name], dtype=float)
                for name in REQUIRED_COLUMNS + OPTIONAL_COLUMNS
                if name in raw.files
            }

        self._columns = self._preprocess(
            columns, min_density, max_density, filter_zero_pressure
        )

        if "gm1" not in self._columns:
            if n_poly is None:
                raise EOSConstructionError(
                    f"EOS table {path} has no gm1 column; n_poly is needed to compute it"
                )
            self._columns["gm1"] = utils.pseudo_enthalpy_from_table(
                self.rho, self.eps, self.press, n_poly
            )
            logger.debug(f"Computed g-1 column for {path}")
        if "csnd" not in self._columns:
            self._columns["csnd"] = utils.sound_speed_from_table(
                self.eps, self.press, self.rho
            )
            logger.debug(f"Computed sound speed column for {path}")

        for arr in self._columns.values():
            arr.setflags(write=False)

    @property
    def path(self) -> str:
        return self._path

    @property
    def columns(self) -> dict[str, np.ndarray]:
        """All columns after masking, including computed ones."""
        return dict(self._columns)

    @property
    def rho(self) -> np.ndarray:
        return self._columns["rho"]

    @property
    def gm1(self) -> np.ndarray:
        return self._columns["gm1"]

    @property
    def eps(self) -> np.ndarray:
        return self._columns["eps"]

    @property
    def press(self) -> np.ndarray:
        return self._columns["press"]

    @property
    def csnd(self) -> np.ndarray:
        return self._columns["csnd"]

    @property
    def temp(self) -> Optional[np.ndarray]:
        return self._columns.get("temp")

    @property
    def efrac(self) -> Optional[np.ndarray]:
        return self._columns.get("efrac")

    @property
    def range_rho(self) -> Interval:
        """Density range covered by the table."""
        return Interval(self.rho[0], self.rho[-1])

    def get_data(
        self,
    ) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(gm1, rho, eps, press, csnd)`` for convenient unpacking."""
        return self.gm1, self.rho, self.eps, self.press, self.csnd

    def to_eos(
        self,
        n_poly: float,
        rg_rho: Optional[Interval] = None,
        isentropic: bool = True,
        units: Optional[Units] = None,
        pts_per_mag: int = 200,
    ) -> EOSBarotropic:
        """
        Build a spline EOS from the table.

        See :func:`~jesterEOS.eos.spline.make_eos_barotr_spline_from_samples`.
        """
        return make_eos_barotr_spline_from_samples(
            self.gm1,
            self.rho,
            self.eps,
            self.press,
            self.csnd,
            self.temp,
            self.efrac,
            n_poly=n_poly,
            isentropic=isentropic,
            rg_rho=rg_rho,
            units=units,
            pts_per_mag=pts_per_mag,
        )

    def __len__(self) -> int:
        return len(self.rho)

    def __repr__(self) -> str:
        return (
            f"SampleTable(path='{self._path}', n_points={len(self)}, "
            f"density_range=[{self.rho[0]:.4e}, {self.rho[-1]:.4e}])"
        )

    def _preprocess(
        self,
        columns: dict[str, np.ndarray],
        min_density: Optional[float],
        max_density: Optional[float],
        filter_zero_pressure: bool,
    ) -> dict[str, np.ndarray]:
        """
        Validate column shapes, then apply zero-pressure filter and density
        masking, in that order.
        """
        rho = columns["rho"]
        for name, arr in columns.items():
            if arr.ndim != 1 or arr.shape != rho.shape:
                raise EOSConstructionError(
                    f"Column '{name}' of {self._path} has shape {arr.shape}, "
                    f"expected {rho.shape}"
                )

        mask = np.ones(len(rho), dtype=bool)
        if filter_zero_pressure:
            mask &= columns["press"] > 0
        if min_density is not None:
            mask &= rho >= min_density
        if max_density is not None:
            mask &= rho <= max_density

        if not np.any(mask):
            raise EOSConstructionError(
                f"No table points remain after filtering. Please check density "
                f"units and range of the table file: {self._path}"
            )

        filtered = {name: arr[mask] for name, arr in columns.items()}

        if not np.all(np.diff(filtered["rho"]) > 0):
            raise EOSConstructionError(
                "Table density is not monotonically increasing after filtering"
            )
        return filtered
