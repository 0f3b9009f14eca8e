r"""Closed numeric intervals used for validity bookkeeping."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Interval:
    r"""
    Closed interval :math:`[\mathrm{min}, \mathrm{max}]`.

    Intervals are immutable. Creating one with ``min > max`` raises
    ``ValueError``; a degenerate interval with ``min == max`` is allowed.

    Examples
    --------
    >>> rg = Interval(0.0, 1e-3)
    >>> rg.contains(5e-4)
    True
    >>> rg.contains(Interval(1e-5, 1e-4))
    True
    """

    min: float
    max: float

    def __post_init__(self):
        lo, hi = float(self.min), float(self.max)
        if not lo <= hi:
            raise ValueError(f"Invalid interval: min={lo} must not exceed max={hi}")
        object.__setattr__(self, "min", lo)
        object.__setattr__(self, "max", hi)

    def contains(self, x: Union[float, "Interval"]) -> bool:
        """Test whether a number or a whole interval lies inside."""
        if isinstance(x, Interval):
            return self.min <= x.min and x.max <= self.max
        return bool(self.min <= x <= self.max)

    def __contains__(self, x) -> bool:
        return self.contains(x)

    @property
    def length(self) -> float:
        return self.max - self.min

    def __iter__(self):
        yield self.min
        yield self.max

    def __repr__(self) -> str:
        return f"Interval({self.min!r}, {self.max!r})"


def intersect(first: Interval, *others: Interval) -> Interval:
    r"""
    Intersection of one or more intervals.

    Returns :math:`[\max(\mathrm{mins}), \min(\mathrm{maxs})]`.

    Raises
    ------
    ValueError
        If the intervals do not overlap.
    """
    lo = max([first.min] + [o.min for o in others])
    hi = min([first.max] + [o.max for o in others])
    if lo > hi:
        raise ValueError(f"Empty intersection: [{lo}, {hi}]")
    return Interval(lo, hi)
