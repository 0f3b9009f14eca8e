r"""
Unit systems.

EOS objects compute in whatever unit system their input data uses. The
:class:`Units` descriptor attached to every EOS records that system as the
SI values of its base units so that callers can convert at the boundary.
Geometric systems set :math:`G = c = 1`.
"""

from typing import NamedTuple

from jesterEOS import utils


class Units(NamedTuple):
    """
    Unit system given by the SI values of its units of length, time and mass.

    Dividing two unit systems gives the conversion factors from the first to
    the second, e.g. ``(Units.geom_solar() / Units.si()).density`` converts a
    mass density from geometric solar units to kg/m^3.
    """

    length: float = 1.0  # [m]
    time: float = 1.0  # [s]
    mass: float = 1.0  # [kg]

    @classmethod
    def si(cls) -> "Units":
        """SI units."""
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def cgs(cls) -> "Units":
        """CGS units."""
        return cls(1e-2, 1.0, 1e-3)

    @classmethod
    def geom_ulength(cls, ulength: float) -> "Units":
        r"""Geometric units (:math:`G = c = 1`) with a given length unit [m]."""
        return cls(ulength, ulength / utils.c, ulength * utils.c**2 / utils.G)

    @classmethod
    def geom_meter(cls) -> "Units":
        """Geometric units with length unit of one meter."""
        return cls.geom_ulength(1.0)

    @classmethod
    def geom_solar(cls) -> "Units":
        r"""Geometric units with mass unit :math:`M_\odot`."""
        return cls.geom_ulength(utils.solar_mass_in_meter)

    # Derived units

    @property
    def velocity(self) -> float:
        return self.length / self.time

    @property
    def area(self) -> float:
        return self.length**2

    @property
    def volume(self) -> float:
        return self.length**3

    @property
    def frequency(self) -> float:
        return 1.0 / self.time

    @property
    def density(self) -> float:
        """Unit of mass density."""
        return self.mass / self.volume

    @property
    def energy(self) -> float:
        return self.mass * self.velocity**2

    @property
    def pressure(self) -> float:
        """Unit of pressure (equal to the unit of energy density)."""
        return self.energy / self.volume

    @property
    def force(self) -> float:
        return self.energy / self.length

    @property
    def c_si(self) -> float:
        """Speed of light in this unit system."""
        return utils.c / self.velocity

    @property
    def g_si(self) -> float:
        """Gravitational constant in this unit system."""
        return utils.G * self.mass * self.time**2 / self.length**3

    def __truediv__(self, other: "Units") -> "Units":
        if not isinstance(other, Units):
            return NotImplemented
        return Units(
            self.length / other.length,
            self.time / other.time,
            self.mass / other.mass,
        )
