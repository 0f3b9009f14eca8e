r"""
Handle and state types for barotropic EOS.

:class:`EOSBarotropic` is a cheap, copyable reference to an immutable
:class:`~jesterEOS.eos.base.EOSBarotropicImpl`. Matter states are obtained
from the factory methods :meth:`EOSBarotropic.at_rho` and
:meth:`EOSBarotropic.at_gm1`, which return an invalid state (instead of
raising) when the requested point lies outside the valid range.
"""

from typing import Optional

from jesterEOS.eos.base import EOSBarotropicImpl, invalid_barotropic_impl
from jesterEOS.errors import InvalidStateError
from jesterEOS.interval import Interval
from jesterEOS.units import Units


class BarotropicState:
    r"""
    Matter state of a barotropic EOS.

    Holds mass density and pseudo-enthalpy of one point; all other quantities
    are computed from the EOS on each access. Accessing any quantity of an
    invalid state raises :class:`~jesterEOS.errors.InvalidStateError`.
    """

    __slots__ = ("_impl", "_rho", "_gm1", "_valid")

    def __init__(
        self,
        impl: Optional[EOSBarotropicImpl] = None,
        rho: float = 0.0,
        gm1: float = 0.0,
    ):
        self._impl = impl
        self._rho = float(rho)
        self._gm1 = float(gm1)
        self._valid = impl is not None

    @property
    def valid(self) -> bool:
        """Whether the state lies inside the valid range of the EOS."""
        return self._valid

    def __bool__(self) -> bool:
        return self._valid

    def _eos(self) -> EOSBarotropicImpl:
        if not self._valid:
            raise InvalidStateError("eos_barotr called on invalid matter state")
        return self._impl

    @property
    def rho(self) -> float:
        """Mass density."""
        self._eos()
        return self._rho

    @property
    def gm1(self) -> float:
        r"""Pseudo-enthalpy :math:`g - 1`."""
        self._eos()
        return self._gm1

    @property
    def eps(self) -> float:
        """Specific internal energy."""
        eps = float(self._eos().eps(self._gm1))
        assert eps >= -1
        return eps

    @property
    def press(self) -> float:
        """Pressure."""
        p = float(self._eos().press(self._gm1))
        assert p >= 0
        return p

    @property
    def hm1(self) -> float:
        r"""Specific enthalpy minus one, :math:`h - 1`."""
        return float(self._eos().hm1(self._gm1))

    @property
    def csnd(self) -> float:
        """Adiabatic sound speed."""
        cs = float(self._eos().csnd(self._gm1))
        assert 0 <= cs < 1
        return cs

    @property
    def temp(self) -> float:
        """Temperature; raises if the EOS has no temperature information."""
        t = float(self._eos().temp(self._gm1))
        assert t >= 0
        return t

    @property
    def ye(self) -> float:
        """Electron fraction; raises if the EOS has no composition information."""
        return float(self._eos().ye(self._gm1))

    def __repr__(self) -> str:
        if not self._valid:
            return "BarotropicState(invalid)"
        return f"BarotropicState(rho={self._rho:.6g}, gm1={self._gm1:.6g})"


class EOSBarotropic:
    r"""
    Handle for barotropic EOS.

    Copies of a handle share the same immutable implementation. A
    default-constructed handle refers to a shared invalid implementation:
    holding it is safe, using it raises
    :class:`~jesterEOS.errors.UninitializedEOSError`.

    Examples
    --------
    >>> from jesterEOS.eos import make_eos_barotr_poly
    >>> eos = make_eos_barotr_poly(n=1.0, rmd_p=0.01, rho_max=1e-2)
    >>> s = eos.at_rho(1e-4)
    >>> s.valid
    True
    >>> EOSBarotropic().at_rho(1e-4)
    Traceback (most recent call last):
    ...
    jesterEOS.errors.UninitializedEOSError: eos_barotr: uninitialized use
    """

    __slots__ = ("_impl",)

    def __init__(self, impl: Optional[EOSBarotropicImpl] = None):
        self._impl = impl if impl is not None else invalid_barotropic_impl()

    @property
    def implementation(self) -> EOSBarotropicImpl:
        """The shared implementation object."""
        return self._impl

    def __copy__(self) -> "EOSBarotropic":
        return type(self)(self._impl)

    def __deepcopy__(self, memo) -> "EOSBarotropic":
        return type(self)(self._impl)

    # State factories

    def at_rho(self, rho: float) -> BarotropicState:
        """State at given mass density, invalid if outside :attr:`range_rho`."""
        if not self.is_rho_inrange(rho):
            return BarotropicState()
        return BarotropicState(self._impl, rho, self._impl.gm1_from_rho(rho))

    def at_gm1(self, gm1: float) -> BarotropicState:
        r"""State at given :math:`g - 1`, invalid if outside :attr:`range_gm1`."""
        if not self.is_gm1_inrange(gm1):
            return BarotropicState()
        return BarotropicState(self._impl, self._impl.rho(gm1), gm1)

    def is_rho_inrange(self, rho: float) -> bool:
        return self._impl.range_rho.contains(rho)

    def is_gm1_inrange(self, gm1: float) -> bool:
        return self._impl.range_gm1.contains(gm1)

    # Ranges and flags

    @property
    def range_rho(self) -> Interval:
        return self._impl.range_rho

    @property
    def range_gm1(self) -> Interval:
        return self._impl.range_gm1

    @property
    def minimal_h(self) -> float:
        h0 = self._impl.minimal_h
        assert h0 > 0
        return h0

    @property
    def is_isentropic(self) -> bool:
        return self._impl.is_isentropic

    @property
    def is_zero_temp(self) -> bool:
        return self._impl.is_zero_temp

    @property
    def has_temp(self) -> bool:
        return self._impl.has_temp

    @property
    def has_efrac(self) -> bool:
        return self._impl.has_efrac

    @property
    def units_to_SI(self) -> Units:
        return self._impl.units_to_SI

    def __repr__(self) -> str:
        return f"EOSBarotropic({type(self._impl).__name__})"
