"""Configuration file parser and EOS builder."""

from pathlib import Path
from typing import Optional, Union

import yaml

from jesterEOS.eos.barotropic import EOSBarotropic
from jesterEOS.eos.hybrid import make_eos_hybrid
from jesterEOS.eos.polytrope import make_eos_barotr_gpoly
from jesterEOS.eos.pwpoly import make_eos_barotr_pwpoly
from jesterEOS.eos.table import SampleTable
from jesterEOS.eos.thermal import EOSThermal
from jesterEOS.logging_config import get_logger
from jesterEOS.units import Units

from .schema import (
    BarotropicConfig,
    EOSConfig,
    PiecewisePolytropeConfig,
    PolytropeConfig,
    SplineTableConfig,
)

logger = get_logger(__name__)


def load_config(config_path: Union[str, Path]) -> EOSConfig:
    """Load and validate EOS configuration from YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to YAML configuration file

    Returns
    -------
    EOSConfig
        Validated EOS configuration object

    Raises
    ------
    FileNotFoundError
        If config file does not exist
    yaml.YAMLError
        If YAML parsing fails
    ValueError
        If the file is empty or configuration validation fails

    Examples
    --------
    >>> config = load_config("eos.yaml")
    >>> print(config.barotropic.type)
    'spline'
    """
    config_path = Path(config_path).resolve()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(
                f"Error parsing YAML configuration file {config_path}: {e}"
            ) from e

    if config_dict is None:
        raise ValueError(f"Configuration file is empty: {config_path}")

    # Table paths are relative to the config file directory, not CWD
    barotropic = config_dict.get("barotropic")
    if isinstance(barotropic, dict) and "table_file" in barotropic:
        table_file = Path(barotropic["table_file"])
        if not table_file.is_absolute():
            barotropic["table_file"] = str((config_path.parent / table_file).resolve())

    try:
        config = EOSConfig(**config_dict)
    except Exception as e:
        raise ValueError(
            f"Error validating configuration from {config_path}: {e}"
        ) from e

    logger.debug(f"Loaded EOS configuration from {config_path}: {config}")
    return config


def build_barotropic(config: BarotropicConfig, units: Units) -> EOSBarotropic:
    """Create the cold EOS described by one barotropic configuration block."""
    if isinstance(config, PolytropeConfig):
        return make_eos_barotr_gpoly(
            config.n, config.density_scale, config.eps_0, config.rho_max, units
        )
    if isinstance(config, PiecewisePolytropeConfig):
        return make_eos_barotr_pwpoly(
            config.rmd_p, config.rho_bounds, config.gammas, config.rho_max, units
        )
    if isinstance(config, SplineTableConfig):
        table = SampleTable(
            config.table_file,
            min_density=config.rho_min,
            max_density=config.rho_max,
            n_poly=config.n_poly,
        )
        logger.info(f"Loaded {table}")
        return table.to_eos(
            n_poly=config.n_poly,
            isentropic=config.isentropic,
            units=units,
            pts_per_mag=config.pts_per_mag,
        )
    raise ValueError(f"Unknown barotropic EOS type: {type(config).__name__}")


def build_eos(config: EOSConfig) -> tuple[EOSBarotropic, Optional[EOSThermal]]:
    """Create the EOS objects described by a configuration.

    Returns
    -------
    tuple[EOSBarotropic, EOSThermal or None]
        The cold EOS and, if configured, the thermal EOS built on top of it
    """
    units = config.units.to_units()
    eos_c = build_barotropic(config.barotropic, units)

    eos_th = None
    if config.thermal is not None:
        eos_th = make_eos_hybrid(
            eos_c, config.thermal.gamma_th, config.thermal.eps_max, config.thermal.rho_max
        )
    return eos_c, eos_th
