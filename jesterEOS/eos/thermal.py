r"""
Handle and state types for thermal EOS.

A thermal EOS depends on mass density, an implementation-specific thermal
variable and electron fraction. States are created with
:meth:`EOSThermal.at_rho_eps_ye` or :meth:`EOSThermal.at_rho_temp_ye`. Points
outside the physically valid ranges give an invalid state which the caller
must check, e.g. to apply an atmosphere treatment. Misuse (an uninitialized
EOS, range queries for invalid density) raises.
"""

from typing import Optional

from jesterEOS.eos.base import EOSThermalImpl, invalid_thermal_impl
from jesterEOS.errors import EOSRangeError, InvalidStateError
from jesterEOS.interval import Interval
from jesterEOS.units import Units


class ThermalState:
    r"""
    Matter state of a thermal EOS.

    Stores density, thermal variable and electron fraction. Derived
    quantities are recomputed on each access and checked against basic
    physical bounds with assertions; a failing assertion points to a broken
    EOS table, not to a caller error.
    """

    __slots__ = ("_impl", "_rho", "_th", "_ye", "_valid")

    def __init__(
        self,
        impl: Optional[EOSThermalImpl] = None,
        rho: float = 0.0,
        th: float = 0.0,
        ye: float = 0.0,
    ):
        self._impl = impl
        self._rho = float(rho)
        self._th = float(th)
        self._ye = float(ye)
        self._valid = impl is not None

    @property
    def valid(self) -> bool:
        return self._valid

    def __bool__(self) -> bool:
        return self._valid

    def _eos(self) -> EOSThermalImpl:
        if not self._valid:
            raise InvalidStateError("eos_thermal called on invalid matter state")
        return self._impl

    @property
    def rho(self) -> float:
        self._eos()
        return self._rho

    @property
    def ye(self) -> float:
        self._eos()
        return self._ye

    @property
    def therm(self) -> float:
        """The implementation-specific thermal variable."""
        self._eos()
        return self._th

    @property
    def press(self) -> float:
        p = float(self._eos().press(self._rho, self._th, self._ye))
        assert p >= 0
        return p

    @property
    def csnd(self) -> float:
        cs = float(self._eos().csnd(self._rho, self._th, self._ye))
        assert cs < 1.0
        assert cs >= 0
        return cs

    @property
    def temp(self) -> float:
        t = float(self._eos().temp(self._rho, self._th, self._ye))
        assert t >= 0
        return t

    @property
    def eps(self) -> float:
        eps = float(self._eos().eps(self._rho, self._th, self._ye))
        assert eps >= -1
        return eps

    @property
    def sentr(self) -> float:
        return float(self._eos().sentr(self._rho, self._th, self._ye))

    @property
    def dpress_drho(self) -> float:
        return float(self._eos().dpress_drho(self._rho, self._th, self._ye))

    @property
    def dpress_deps(self) -> float:
        return float(self._eos().dpress_deps(self._rho, self._th, self._ye))

    def __repr__(self) -> str:
        if not self._valid:
            return "ThermalState(invalid)"
        return (
            f"ThermalState(rho={self._rho:.6g}, therm={self._th:.6g}, "
            f"ye={self._ye:.6g})"
        )


class EOSThermal:
    """
    Handle for thermal EOS.

    Same ownership model as :class:`~jesterEOS.eos.barotropic.EOSBarotropic`:
    copies share one immutable implementation, default construction aliases
    an invalid implementation.
    """

    __slots__ = ("_impl",)

    def __init__(self, impl: Optional[EOSThermalImpl] = None):
        self._impl = impl if impl is not None else invalid_thermal_impl()

    @property
    def implementation(self) -> EOSThermalImpl:
        return self._impl

    def __copy__(self) -> "EOSThermal":
        return type(self)(self._impl)

    def __deepcopy__(self, memo) -> "EOSThermal":
        return type(self)(self._impl)

    def at_rho_eps_ye(self, rho: float, eps: float, ye: float) -> ThermalState:
        """State from density, specific internal energy and electron fraction."""
        if not self.is_rho_eps_ye_valid(rho, eps, ye):
            return ThermalState()
        th = self._impl.therm_from_rho_eps_ye(rho, eps, ye)
        return ThermalState(self._impl, rho, th, ye)

    def at_rho_temp_ye(self, rho: float, temp: float, ye: float) -> ThermalState:
        """State from density, temperature and electron fraction."""
        if not self.is_rho_temp_ye_valid(rho, temp, ye):
            return ThermalState()
        th = self._impl.therm_from_rho_temp_ye(rho, temp, ye)
        return ThermalState(self._impl, rho, th, ye)

    @property
    def range_rho(self) -> Interval:
        return self._impl.range_rho

    @property
    def range_ye(self) -> Interval:
        return self._impl.range_ye

    def range_eps(self, rho: float, ye: float) -> Interval:
        """Valid specific energy range; raises for invalid density or composition."""
        if not self.is_rho_valid(rho):
            raise EOSRangeError(
                "eos_thermal: specific energy range for invalid density requested"
            )
        if not self.is_ye_valid(ye):
            raise EOSRangeError(
                "eos_thermal: specific energy range for invalid electron "
                "fraction requested"
            )
        return self._impl.range_eps(rho, ye)

    def range_temp(self, rho: float, ye: float) -> Interval:
        """Valid temperature range; raises for invalid density or composition."""
        if not self.is_rho_valid(rho):
            raise EOSRangeError(
                "eos_thermal: temperature range for invalid density requested"
            )
        if not self.is_ye_valid(ye):
            raise EOSRangeError(
                "eos_thermal: temperature range for invalid electron "
                "fraction requested"
            )
        return self._impl.range_temp(rho, ye)

    @property
    def minimal_h(self) -> float:
        h0 = self._impl.minimal_h
        assert h0 > 0
        return h0

    @property
    def units_to_SI(self) -> Units:
        return self._impl.units_to_SI

    def is_rho_valid(self, rho: float) -> bool:
        return self._impl.range_rho.contains(rho)

    def is_ye_valid(self, ye: float) -> bool:
        return self._impl.range_ye.contains(ye)

    def is_rho_ye_valid(self, rho: float, ye: float) -> bool:
        return self.is_rho_valid(rho) and self.is_ye_valid(ye)

    def is_rho_eps_ye_valid(self, rho: float, eps: float, ye: float) -> bool:
        return self.is_rho_ye_valid(rho, ye) and self._impl.range_eps(
            rho, ye
        ).contains(eps)

    def is_rho_temp_ye_valid(self, rho: float, temp: float, ye: float) -> bool:
        return self.is_rho_ye_valid(rho, ye) and self._impl.range_temp(
            rho, ye
        ).contains(temp)

    def __repr__(self) -> str:
        return f"EOSThermal({type(self._impl).__name__})"
