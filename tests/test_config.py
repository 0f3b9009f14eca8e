"""Tests for configuration parsing and EOS building."""

import numpy as np
import pytest
import yaml
from pydantic import ValidationError

from jesterEOS.config import (
    EOSConfig,
    PiecewisePolytropeConfig,
    PolytropeConfig,
    UnitsConfig,
    build_eos,
    load_config,
)
from jesterEOS.eos import GeneralizedPolytrope, HybridThermal, SplineBarotropic
from jesterEOS.units import Units


def write_config(path, data):
    """Dump a configuration dict as YAML and return the path."""
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return path


class TestLoadConfig:
    """Loading YAML files into validated configurations."""

    def test_polytrope_with_hybrid(self, tmp_path) -> None:
        """Test a polytrope configuration with a thermal extension."""
        path = write_config(
            tmp_path / "eos.yaml",
            {
                "barotropic": {"type": "polytrope", "n": 1.0, "K": 100.0, "rho_max": 1e-2},
                "thermal": {"gamma_th": 1.8, "eps_max": 11.0},
            },
        )
        config = load_config(path)
        assert isinstance(config.barotropic, PolytropeConfig)
        assert config.barotropic.density_scale == pytest.approx(0.01)
        assert config.units.system == "geom_solar"

        eos_c, eos_th = build_eos(config)
        assert isinstance(eos_c.implementation, GeneralizedPolytrope)
        assert isinstance(eos_th.implementation, HybridThermal)
        assert eos_c.at_rho(1e-4).press == pytest.approx(1e-6, rel=1e-12)
        assert eos_th.range_rho.max == 1e-2
        assert eos_c.units_to_SI == Units.geom_solar()

    def test_piecewise_polytrope(self, tmp_path, ms1_params) -> None:
        """Test a piecewise polytrope configuration in meter units."""
        path = write_config(
            tmp_path / "ms1.yaml",
            {
                "units": {"system": "geom_meter"},
                "barotropic": {
                    "type": "pwpoly",
                    "rmd_p": ms1_params["rmd_p"],
                    "rho_bounds": ms1_params["rho_bounds"],
                    "gammas": ms1_params["gammas"],
                    "rho_max": ms1_params["rho_max"],
                },
            },
        )
        eos_c, eos_th = build_eos(load_config(path))
        assert eos_th is None
        assert eos_c.units_to_SI == Units.geom_meter()
        assert eos_c.range_rho.max == 5e-3

    def test_spline_table_relative_path(self, tmp_path, polytrope_columns) -> None:
        """Test that table paths resolve relative to the configuration file."""
        table_dir = tmp_path / "tables"
        table_dir.mkdir()
        cols = polytrope_columns(np.logspace(-10, -3, 100))
        np.savez(table_dir / "poly.npz", **cols)

        config_dir = tmp_path / "configs"
        config_dir.mkdir()
        path = write_config(
            config_dir / "spline.yaml",
            {
                "barotropic": {
                    "type": "spline",
                    "table_file": "../tables/poly.npz",
                    "n_poly": 1.0,
                    "rho_min": 1e-9,
                    "pts_per_mag": 50,
                },
            },
        )
        config = load_config(path)
        assert config.barotropic.table_file == str((table_dir / "poly.npz").resolve())

        eos_c, _ = build_eos(config)
        assert isinstance(eos_c.implementation, SplineBarotropic)
        assert eos_c.at_rho(1e-5).press == pytest.approx(1e-8, rel=1e-3)

    def test_missing_file(self, tmp_path) -> None:
        """Test that a missing file raises."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path) -> None:
        """Test that an empty file is rejected."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValueError, match="empty"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path) -> None:
        """Test that malformed YAML propagates the parser error."""
        path = tmp_path / "broken.yaml"
        path.write_text("barotropic: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_config(path)

    def test_unknown_type(self, tmp_path) -> None:
        """Test that an unknown EOS type fails validation."""
        path = write_config(
            tmp_path / "eos.yaml", {"barotropic": {"type": "tabulated"}}
        )
        with pytest.raises(ValueError, match="Error validating configuration"):
            load_config(path)


class TestSchema:
    """Validation rules of the configuration models."""

    def test_polytrope_needs_exactly_one_scale(self) -> None:
        """Test that exactly one of rmd_p and K is required."""
        with pytest.raises(ValidationError, match="exactly one"):
            PolytropeConfig(type="polytrope", n=1.0, rmd_p=0.01, K=100.0, rho_max=1.0)
        with pytest.raises(ValidationError, match="exactly one"):
            PolytropeConfig(type="polytrope", n=1.0, rho_max=1.0)

    def test_pwpoly_segment_mismatch(self) -> None:
        """Test that every segment needs an adiabatic exponent."""
        with pytest.raises(ValidationError, match="one adiabatic exponent per segment"):
            PiecewisePolytropeConfig(
                type="pwpoly", rmd_p=1.0, rho_bounds=[0.0, 1e-4], gammas=[2.0], rho_max=1e-3
            )

    def test_pwpoly_bounds(self) -> None:
        """Test that segment bounds start at zero and increase."""
        with pytest.raises(ValidationError, match="zero density"):
            PiecewisePolytropeConfig(
                type="pwpoly", rmd_p=1.0, rho_bounds=[1e-5], gammas=[2.0], rho_max=1e-3
            )
        with pytest.raises(ValidationError, match="increasing"):
            PiecewisePolytropeConfig(
                type="pwpoly",
                rmd_p=1.0,
                rho_bounds=[0.0, 1e-4, 1e-5],
                gammas=[2.0, 2.0, 2.0],
                rho_max=1e-3,
            )

    def test_spline_table_extension(self) -> None:
        """Test that spline tables must be .npz archives."""
        with pytest.raises(ValidationError, match=".npz"):
            EOSConfig(
                barotropic={"type": "spline", "table_file": "eos.csv", "n_poly": 1.0}
            )

    def test_spline_density_cuts(self) -> None:
        """Test that rho_min must be below rho_max."""
        with pytest.raises(ValidationError, match="must be below"):
            EOSConfig(
                barotropic={
                    "type": "spline",
                    "table_file": "eos.npz",
                    "n_poly": 1.0,
                    "rho_min": 1e-3,
                    "rho_max": 1e-5,
                }
            )

    def test_hybrid_gamma(self) -> None:
        """Test that the thermal exponent must exceed one."""
        with pytest.raises(ValidationError):
            EOSConfig(
                barotropic={"type": "polytrope", "n": 1.0, "K": 100.0, "rho_max": 1e-2},
                thermal={"gamma_th": 1.0, "eps_max": 11.0},
            )

    def test_units(self) -> None:
        """Test unit system selection."""
        assert UnitsConfig().to_units() == Units.geom_solar()
        assert UnitsConfig(system="cgs").to_units() == Units.cgs()
        assert UnitsConfig(system="geom_ulength", ulength=1e3).to_units() == (
            Units.geom_ulength(1e3)
        )
        with pytest.raises(ValidationError, match="positive ulength"):
            UnitsConfig(system="geom_ulength")
        with pytest.raises(ValidationError, match="only used with geom_ulength"):
            UnitsConfig(system="si", ulength=1.0)
