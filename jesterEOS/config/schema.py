r"""Pydantic models for EOS configuration validation."""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from jesterEOS.units import Units


class UnitsConfig(BaseModel):
    """Unit system of the EOS.

    Attributes
    ----------
    system : Literal["geom_solar", "geom_meter", "geom_ulength", "si", "cgs"]
        Name of the unit system (default: geometric units with solar mass)
    ulength : float, optional
        Length unit in meters, only for ``system="geom_ulength"``
    """

    system: Literal["geom_solar", "geom_meter", "geom_ulength", "si", "cgs"] = (
        "geom_solar"
    )
    ulength: Optional[float] = None

    @model_validator(mode="after")
    def validate_ulength(self) -> "UnitsConfig":
        """Validate that a length unit is given exactly when needed."""
        if self.system == "geom_ulength":
            if self.ulength is None or self.ulength <= 0:
                raise ValueError("geom_ulength units need a positive ulength")
        elif self.ulength is not None:
            raise ValueError(f"ulength is only used with geom_ulength, not {self.system}")
        return self

    def to_units(self) -> Units:
        if self.system == "geom_ulength":
            return Units.geom_ulength(self.ulength)
        return getattr(Units, self.system)()


class PolytropeConfig(BaseModel):
    """Configuration for a (generalized) polytropic EOS.

    Either the polytropic density scale ``rmd_p`` or the polytropic constant
    ``K`` must be given.

    Attributes
    ----------
    type : Literal["polytrope"]
        EOS type identifier
    n : float
        Polytropic index
    rmd_p : float, optional
        Polytropic density scale
    K : float, optional
        Polytropic constant, converted to ``rmd_p = K**(-n)``
    eps_0 : float
        Specific energy at zero density (default: 0)
    rho_max : float
        Maximum density
    """

    type: Literal["polytrope"]
    n: float = Field(gt=0)
    rmd_p: Optional[float] = Field(default=None, gt=0)
    K: Optional[float] = Field(default=None, gt=0)
    eps_0: float = 0.0
    rho_max: float = Field(gt=0)

    @model_validator(mode="after")
    def validate_scale(self) -> "PolytropeConfig":
        """Validate that exactly one of rmd_p and K is specified."""
        if (self.rmd_p is None) == (self.K is None):
            raise ValueError("Specify exactly one of 'rmd_p' and 'K'")
        return self

    @property
    def density_scale(self) -> float:
        if self.rmd_p is not None:
            return self.rmd_p
        return self.K ** (-self.n)


class PiecewisePolytropeConfig(BaseModel):
    """Configuration for a piecewise polytropic EOS.

    Attributes
    ----------
    type : Literal["pwpoly"]
        EOS type identifier
    rmd_p : float
        Polytropic density scale of the first segment
    rho_bounds : list[float]
        Segment start densities, the first must be zero
    gammas : list[float]
        Adiabatic exponents of the segments
    rho_max : float
        Maximum density
    """

    type: Literal["pwpoly"]
    rmd_p: float = Field(gt=0)
    rho_bounds: list[float]
    gammas: list[float]
    rho_max: float = Field(gt=0)

    @field_validator("gammas")
    @classmethod
    def validate_gammas(cls, v: list[float], info) -> list[float]:
        """Validate one exponent per segment, all above one."""
        bounds = info.data.get("rho_bounds")
        if bounds is not None and len(bounds) != len(v):
            raise ValueError(
                f"Need one adiabatic exponent per segment: got {len(v)} "
                f"exponents for {len(bounds)} segments"
            )
        if any(g <= 1 for g in v):
            raise ValueError(f"Adiabatic exponents must exceed one, got: {v}")
        return v

    @field_validator("rho_bounds")
    @classmethod
    def validate_bounds(cls, v: list[float]) -> list[float]:
        if not v or v[0] != 0:
            raise ValueError("First segment must start at zero density")
        if any(b <= a for a, b in zip(v[:-1], v[1:])):
            raise ValueError(f"Segment boundaries must be increasing, got: {v}")
        return v


class SplineTableConfig(BaseModel):
    """Configuration for a spline EOS built from a sample table.

    Attributes
    ----------
    type : Literal["spline"]
        EOS type identifier
    table_file : str
        Path to ``.npz`` sample table, relative paths are resolved against the
        directory of the configuration file
    n_poly : float
        Polytropic index of the crust below the table
    rho_min : float, optional
        Lower density cut applied to the table; the crust is matched at the
        first remaining point
    rho_max : float, optional
        Upper density cut applied to the table
    pts_per_mag : int
        Resampling points per decade (default: 200)
    isentropic : bool
        Whether the table describes isentropic matter (default: True)
    """

    type: Literal["spline"]
    table_file: str
    n_poly: float = Field(gt=0)
    rho_min: Optional[float] = Field(default=None, gt=0)
    rho_max: Optional[float] = Field(default=None, gt=0)
    pts_per_mag: int = Field(default=200, ge=1)
    isentropic: bool = True

    @field_validator("table_file")
    @classmethod
    def validate_file_extension(cls, v: str) -> str:
        """Validate that the table file has .npz extension."""
        if not v.endswith(".npz"):
            raise ValueError(f"EOS table file must have .npz extension, got: {v}")
        return v

    @model_validator(mode="after")
    def validate_density_cuts(self) -> "SplineTableConfig":
        if (
            self.rho_min is not None
            and self.rho_max is not None
            and self.rho_min >= self.rho_max
        ):
            raise ValueError(
                f"rho_min ({self.rho_min}) must be below rho_max ({self.rho_max})"
            )
        return self


BarotropicConfig = Union[PolytropeConfig, PiecewisePolytropeConfig, SplineTableConfig]


class HybridConfig(BaseModel):
    """Configuration for the thermal hybrid EOS.

    Attributes
    ----------
    type : Literal["hybrid"]
        EOS type identifier
    gamma_th : float
        Thermal adiabatic index
    eps_max : float
        Maximum specific energy
    rho_max : float, optional
        Maximum density (default: that of the cold EOS)
    """

    type: Literal["hybrid"] = "hybrid"
    gamma_th: float = Field(gt=1)
    eps_max: float
    rho_max: Optional[float] = Field(default=None, gt=0)


class EOSConfig(BaseModel):
    """Top-level EOS configuration.

    Attributes
    ----------
    units : UnitsConfig
        Unit system of all EOS parameters and tables
    barotropic : BarotropicConfig
        Cold EOS configuration
    thermal : HybridConfig, optional
        Thermal extension of the cold EOS
    """

    units: UnitsConfig = Field(default_factory=UnitsConfig)
    barotropic: BarotropicConfig = Field(discriminator="type")
    thermal: Optional[HybridConfig] = None
