"""Exceptions raised by isointerval.

All parse, format and construction failures derive from
:class:`IntervalError`, which is a :class:`ValueError`.
"""


class IntervalError(ValueError):
    """Base class for interval parse, format and construction failures."""


class InvalidFormat(IntervalError):
    """Text does not match the interval grammar, or a value cannot be written in it."""


class AmbiguousInterval(IntervalError):
    """Both parts of an interval are durations."""


class InvalidBounds(IntervalError):
    """The supplied fields do not determine a valid start and end."""


class UnknownShape(IntervalError):
    """An interval carries no recognized format tag."""
