from .core import Span
from .errors import (
    AmbiguousInterval,
    IntervalError,
    InvalidBounds,
    InvalidFormat,
    UnknownShape,
)
from .interval import (
    DurationAndTime,
    Interval,
    IntervalFormat,
    TimeAndDuration,
    TimeAndTime,
    format_interval,
    parse_interval,
)
from .repeating import Repeating, format_repeating, parse_repeating
from .util import DAY, HOUR, MINUTE, SECOND, WEEK

__all__ = [
    "Span",
    "Interval",
    "IntervalFormat",
    "TimeAndTime",
    "TimeAndDuration",
    "DurationAndTime",
    "Repeating",
    "parse_interval",
    "format_interval",
    "parse_repeating",
    "format_repeating",
    "IntervalError",
    "InvalidFormat",
    "AmbiguousInterval",
    "InvalidBounds",
    "UnknownShape",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "WEEK",
]
