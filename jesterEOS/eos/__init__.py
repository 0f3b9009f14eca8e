r"""Equation of state representations: handles, states and implementations."""

# Base classes
from .base import EOSBarotropicImpl, EOSThermalImpl

# Handles and states
from .barotropic import BarotropicState, EOSBarotropic
from .thermal import EOSThermal, ThermalState

# Barotropic implementations
from .polytrope import (
    GeneralizedPolytrope,
    make_eos_barotr_gpoly,
    make_eos_barotr_poly,
    rmd_p_from_K_n,
)
from .pwpoly import PiecewisePolytrope, make_eos_barotr_pwpoly
from .spline import (
    SplineBarotropic,
    make_eos_barotr_spline,
    make_eos_barotr_spline_from_samples,
    resample_eos_barotr,
)

# Thermal implementations
from .hybrid import HybridThermal, make_eos_hybrid

# Tables and persistence
from .table import SampleTable
from .io import load_eos_barotr, load_eos_thermal, save_eos_barotr, save_eos_thermal

__all__ = [
    # Base
    "EOSBarotropicImpl",
    "EOSThermalImpl",
    # Handles
    "EOSBarotropic",
    "BarotropicState",
    "EOSThermal",
    "ThermalState",
    # Polytropes
    "GeneralizedPolytrope",
    "make_eos_barotr_gpoly",
    "make_eos_barotr_poly",
    "rmd_p_from_K_n",
    "PiecewisePolytrope",
    "make_eos_barotr_pwpoly",
    # Spline
    "SplineBarotropic",
    "make_eos_barotr_spline",
    "make_eos_barotr_spline_from_samples",
    "resample_eos_barotr",
    # Hybrid
    "HybridThermal",
    "make_eos_hybrid",
    # Tables and persistence
    "SampleTable",
    "save_eos_barotr",
    "load_eos_barotr",
    "save_eos_thermal",
    "load_eos_thermal",
]
