r"""
Exception hierarchy for jesterEOS.

Three kinds of failure are kept apart:

- construction errors, raised while building an EOS from inconsistent or
  unphysical input (:class:`EOSConstructionError`);
- misuse errors, raised when an uninitialized EOS is queried or a quantity is
  requested that the EOS was never built with
  (:class:`UninitializedEOSError`, :class:`UnavailableQuantityError`,
  :class:`InvalidStateError`, :class:`EOSRangeError`);
- points outside the physical domain, which are *not* errors: the state
  factories return a state with ``valid == False`` instead.
"""


class EOSError(Exception):
    """Base class for all jesterEOS errors."""


class EOSConstructionError(EOSError, ValueError):
    """Raised when an EOS cannot be built from the given data."""


class EOSRangeError(EOSError, ValueError):
    """Raised when a range is requested for an invalid density or composition."""


class UninitializedEOSError(EOSError, RuntimeError):
    """Raised when a default-constructed EOS handle is used."""


class InvalidStateError(EOSError, RuntimeError):
    """Raised when a quantity is requested from an invalid matter state."""


class UnavailableQuantityError(EOSError, RuntimeError):
    """Raised when a quantity is requested that the EOS does not provide."""
