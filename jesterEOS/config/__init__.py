"""Configuration module for jesterEOS."""

from .parser import build_barotropic, build_eos, load_config
from .schema import (
    EOSConfig,
    HybridConfig,
    PiecewisePolytropeConfig,
    PolytropeConfig,
    SplineTableConfig,
    UnitsConfig,
)

__all__ = [
    "load_config",
    "build_eos",
    "build_barotropic",
    "EOSConfig",
    "UnitsConfig",
    "PolytropeConfig",
    "PiecewisePolytropeConfig",
    "SplineTableConfig",
    "HybridConfig",
]
