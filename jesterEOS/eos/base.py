r"""
Base classes for EOS implementations.

An EOS is represented by an immutable *implementation* object behind a
lightweight handle (:class:`~jesterEOS.eos.barotropic.EOSBarotropic` or
:class:`~jesterEOS.eos.thermal.EOSThermal`). This module defines the abstract
interfaces that all implementations must provide, and the invalid
implementations aliased by default-constructed handles.

All evaluation methods accept scalars or numpy arrays and must not be called
outside the ranges reported by the implementation; the handles take care of
that check.
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, NoReturn, Union

import numpy as np
from numpy.typing import ArrayLike

from jesterEOS.errors import EOSError, UninitializedEOSError
from jesterEOS.interval import Interval
from jesterEOS.units import Units

#: Result of an evaluation method: a float for scalar input, otherwise an
#: array of the input shape
FloatOrArray = Union[float, np.ndarray]


class EOSBarotropicImpl(ABC):
    r"""
    Interface for barotropic (cold, one-parameter) EOS implementations.

    The independent variable is the pseudo-enthalpy :math:`g - 1`. All
    quantities are in the unit system given by :attr:`units_to_SI`.
    """

    #: Name used by the save/load hooks to find the implementation class.
    kind: str = ""
    _kinds: dict[str, type] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.kind and cls.kind != "invalid":
            EOSBarotropicImpl._kinds[cls.kind] = cls

    @abstractmethod
    def gm1_from_rho(self, rho: ArrayLike) -> FloatOrArray:
        r"""Pseudo-enthalpy :math:`g - 1` from mass density."""

    @abstractmethod
    def rho(self, gm1: ArrayLike) -> FloatOrArray:
        """Mass density."""

    @abstractmethod
    def eps(self, gm1: ArrayLike) -> FloatOrArray:
        """Specific internal energy."""

    @abstractmethod
    def press(self, gm1: ArrayLike) -> FloatOrArray:
        """Pressure."""

    @abstractmethod
    def hm1(self, gm1: ArrayLike) -> FloatOrArray:
        r"""Specific enthalpy minus one, :math:`h - 1`."""

    @abstractmethod
    def csnd(self, gm1: ArrayLike) -> FloatOrArray:
        """Adiabatic sound speed."""

    @abstractmethod
    def temp(self, gm1: ArrayLike) -> FloatOrArray:
        """Temperature."""

    @abstractmethod
    def ye(self, gm1: ArrayLike) -> FloatOrArray:
        """Electron fraction."""

    @property
    @abstractmethod
    def range_rho(self) -> Interval:
        """Valid range of mass density."""

    @property
    @abstractmethod
    def range_gm1(self) -> Interval:
        r"""Valid range of :math:`g - 1`."""

    @property
    @abstractmethod
    def minimal_h(self) -> float:
        """Lower bound of the specific enthalpy over the valid range."""

    @property
    @abstractmethod
    def is_isentropic(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_zero_temp(self) -> bool:
        ...

    @property
    @abstractmethod
    def has_temp(self) -> bool:
        ...

    @property
    @abstractmethod
    def has_efrac(self) -> bool:
        ...

    @property
    @abstractmethod
    def units_to_SI(self) -> Units:
        ...

    def state_dict(self) -> dict[str, Any]:
        """Arrays and scalars needed to rebuild the implementation."""
        raise NotImplementedError(f"{type(self).__name__} cannot be saved")

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "EOSBarotropicImpl":
        """
        Rebuild an implementation from the output of :meth:`state_dict`.

        Called on the base class, dispatches on the stored ``kind``.
        """
        if cls is not EOSBarotropicImpl:
            raise NotImplementedError(f"{cls.__name__} cannot be loaded")
        return _lookup_kind(EOSBarotropicImpl._kinds, data).from_state_dict(data)


class EOSThermalImpl(ABC):
    r"""
    Interface for thermal (three-parameter) EOS implementations.

    States are described by mass density, a thermal variable that is specific
    to the implementation, and electron fraction.
    """

    kind: str = ""
    _kinds: dict[str, type] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.kind and cls.kind != "invalid":
            EOSThermalImpl._kinds[cls.kind] = cls

    @abstractmethod
    def therm_from_rho_eps_ye(
        self, rho: ArrayLike, eps: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        """Thermal variable from density, specific energy and electron fraction."""

    @abstractmethod
    def therm_from_rho_temp_ye(
        self, rho: ArrayLike, temp: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        """Thermal variable from density, temperature and electron fraction."""

    @abstractmethod
    def eps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Specific internal energy."""

    @abstractmethod
    def temp(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Temperature."""

    @abstractmethod
    def press(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Pressure."""

    @abstractmethod
    def csnd(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Adiabatic sound speed."""

    @abstractmethod
    def sentr(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Specific entropy."""

    @abstractmethod
    def dpress_drho(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Partial derivative of pressure by density at fixed specific energy."""

    @abstractmethod
    def dpress_deps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        """Partial derivative of pressure by specific energy at fixed density."""

    @property
    @abstractmethod
    def range_rho(self) -> Interval:
        ...

    @property
    @abstractmethod
    def range_ye(self) -> Interval:
        ...

    @abstractmethod
    def range_eps(self, rho: float, ye: float) -> Interval:
        """Valid range of specific energy for given density and composition."""

    @abstractmethod
    def range_temp(self, rho: float, ye: float) -> Interval:
        """Valid range of temperature for given density and composition."""

    @property
    @abstractmethod
    def minimal_h(self) -> float:
        ...

    @property
    @abstractmethod
    def units_to_SI(self) -> Units:
        ...

    def state_dict(self) -> dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} cannot be saved")

    @classmethod
    def from_state_dict(cls, data: dict[str, Any]) -> "EOSThermalImpl":
        if cls is not EOSThermalImpl:
            raise NotImplementedError(f"{cls.__name__} cannot be loaded")
        return _lookup_kind(EOSThermalImpl._kinds, data).from_state_dict(data)


def _lookup_kind(kinds: dict[str, type], data: dict[str, Any]) -> type:
    if "kind" not in data:
        raise EOSError("Stored EOS data has no 'kind' entry")
    kind = str(data["kind"])
    if kind not in kinds:
        raise EOSError(
            f"Unknown EOS kind '{kind}'. Available kinds: {sorted(kinds)}"
        )
    return kinds[kind]


def nest_state(data: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Prefix the keys of a component's state dict for storage in a parent."""
    return {f"{prefix}_{key}": value for key, value in data.items()}


def unnest_state(data: dict[str, Any], prefix: str) -> dict[str, Any]:
    """Inverse of :func:`nest_state`."""
    start = f"{prefix}_"
    return {
        key[len(start):]: value for key, value in data.items() if key.startswith(start)
    }


def _uninitialized(what: str) -> NoReturn:
    raise UninitializedEOSError(f"{what}: uninitialized use")


class _InvalidBarotropic(EOSBarotropicImpl):
    """Stand-in for default-constructed barotropic handles; every method raises."""

    kind = "invalid"

    def gm1_from_rho(self, rho: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def rho(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def eps(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def press(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def hm1(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def csnd(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def temp(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    def ye(self, gm1: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_barotr")

    @property
    def range_rho(self):
        _uninitialized("eos_barotr")

    @property
    def range_gm1(self):
        _uninitialized("eos_barotr")

    @property
    def minimal_h(self):
        _uninitialized("eos_barotr")

    @property
    def is_isentropic(self):
        _uninitialized("eos_barotr")

    @property
    def is_zero_temp(self):
        _uninitialized("eos_barotr")

    @property
    def has_temp(self):
        _uninitialized("eos_barotr")

    @property
    def has_efrac(self):
        _uninitialized("eos_barotr")

    @property
    def units_to_SI(self):
        _uninitialized("eos_barotr")

    def state_dict(self):
        _uninitialized("eos_barotr")


class _InvalidThermal(EOSThermalImpl):
    """Stand-in for default-constructed thermal handles; every method raises."""

    kind = "invalid"

    def therm_from_rho_eps_ye(
        self, rho: ArrayLike, eps: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def therm_from_rho_temp_ye(
        self, rho: ArrayLike, temp: ArrayLike, ye: ArrayLike
    ) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def eps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def temp(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def press(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def csnd(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def sentr(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def dpress_drho(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    def dpress_deps(self, rho: ArrayLike, th: ArrayLike, ye: ArrayLike) -> FloatOrArray:
        _uninitialized("eos_thermal")

    @property
    def range_rho(self):
        _uninitialized("eos_thermal")

    @property
    def range_ye(self):
        _uninitialized("eos_thermal")

    def range_eps(self, rho: float, ye: float) -> Interval:
        _uninitialized("eos_thermal")

    def range_temp(self, rho: float, ye: float) -> Interval:
        _uninitialized("eos_thermal")

    @property
    def minimal_h(self):
        _uninitialized("eos_thermal")

    @property
    def units_to_SI(self):
        _uninitialized("eos_thermal")

    def state_dict(self):
        _uninitialized("eos_thermal")


@lru_cache(maxsize=None)
def invalid_barotropic_impl() -> EOSBarotropicImpl:
    """The process-wide invalid barotropic implementation, created on first use."""
    return _InvalidBarotropic()


@lru_cache(maxsize=None)
def invalid_thermal_impl() -> EOSThermalImpl:
    """The process-wide invalid thermal implementation, created on first use."""
    return _InvalidThermal()
