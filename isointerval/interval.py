"""Single intervals and their ISO 8601 ``<part>/<part>`` notation.

An interval is built from one of three shapes, which record how it was
written so that formatting reproduces the same notation:

    >>> from isointerval import Interval
    >>> ivl = Interval.fromisoformat("2019-01-02T21:00:00Z/P1W")
    >>> ivl.format
    <IntervalFormat.TIME_AND_DURATION: 'time/duration'>
    >>> ivl.isoformat()
    '2019-01-02T21:00:00Z/P1W'
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, TypeAlias

from typing_extensions import override

from isointerval import duration as duration_codec
from isointerval import timestamp as timestamp_codec
from isointerval.core import Span
from isointerval.errors import (
    AmbiguousInterval,
    InvalidBounds,
    InvalidFormat,
    UnknownShape,
)
from isointerval.util import DURATION_MARKER, SEPARATOR


class IntervalFormat(Enum):
    """The notation an interval was written in."""

    TIME_AND_TIME = "time/time"
    TIME_AND_DURATION = "time/duration"
    DURATION_AND_TIME = "duration/time"


def _check_timestamp(name: str, value: Any) -> None:
    if not isinstance(value, datetime):
        raise TypeError(
            f"Interval {name} must be a datetime, got {type(value).__name__!r}"
        )
    if value.utcoffset() is None:
        raise TypeError(
            f"Interval {name} must be a timezone-aware datetime.\n"
            f"Got naive datetime: {value!r}\n"
            f"Hint: datetime(..., tzinfo=timezone.utc)"
        )


def _check_duration(value: Any) -> None:
    if not isinstance(value, timedelta):
        raise TypeError(
            f"Interval duration must be a timedelta, got {type(value).__name__!r}"
        )


@dataclass(frozen=True)
class TimeAndTime:
    """Both endpoints given explicitly."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        _check_timestamp("start", self.start)
        _check_timestamp("end", self.end)


@dataclass(frozen=True)
class TimeAndDuration:
    """Explicit start; the end is ``start + duration``."""

    start: datetime
    duration: timedelta

    def __post_init__(self) -> None:
        _check_timestamp("start", self.start)
        _check_duration(self.duration)


@dataclass(frozen=True)
class DurationAndTime:
    """Explicit end; the start is ``end - duration``."""

    duration: timedelta
    end: datetime

    def __post_init__(self) -> None:
        _check_duration(self.duration)
        _check_timestamp("end", self.end)


Shape: TypeAlias = TimeAndTime | TimeAndDuration | DurationAndTime

_FORMATS: dict[type, IntervalFormat] = {
    TimeAndTime: IntervalFormat.TIME_AND_TIME,
    TimeAndDuration: IntervalFormat.TIME_AND_DURATION,
    DurationAndTime: IntervalFormat.DURATION_AND_TIME,
}


@dataclass(frozen=True)
class Interval(Span):
    """A span of time bounded by a start and an end.

    Exactly one of the endpoints may be derived from the other plus a
    duration. Intervals written in different notations compare unequal but
    report the same ``start``, ``end`` and ``duration`` when they cover the
    same time.

    Attributes:
        shape: The fields the interval was built from
    """

    shape: Shape

    def __post_init__(self) -> None:
        if type(self.shape) not in _FORMATS:
            raise UnknownShape(
                f"Interval shape must be TimeAndTime, TimeAndDuration or "
                f"DurationAndTime, got {type(self.shape).__name__!r}"
            )
        try:
            start, end = self.start, self.end
        except OverflowError as exc:
            raise InvalidBounds(
                f"Derived bound of {self.shape!r} is out of range"
            ) from exc
        if end < start:
            raise InvalidBounds(
                f"Interval end ({timestamp_codec.encode(end)}) must not be "
                f"before start ({timestamp_codec.encode(start)})"
            )

    @classmethod
    def build(
        cls,
        start: datetime | None = None,
        end: datetime | None = None,
        duration: timedelta | None = None,
    ) -> "Interval":
        """Build an interval from whichever fields are known.

        Exactly one of these combinations is accepted: ``start`` and ``end``;
        ``start`` and ``duration``; ``end`` and ``duration``.

        Raises:
            InvalidBounds: If the fields do not determine both bounds, or
                over-determine them, or the end falls before the start.
        """
        if start is not None and end is not None:
            if duration is not None:
                raise InvalidBounds(
                    "Interval cannot have a duration alongside both start and end"
                )
            return cls(TimeAndTime(start, end))
        if duration is None:
            raise InvalidBounds(
                "Interval needs both start and end, or one of them and a duration.\n"
                "Examples:\n"
                "  Interval.build(start=s, end=e)\n"
                "  Interval.build(start=s, duration=timedelta(weeks=1))\n"
                "  Interval.build(end=e, duration=timedelta(weeks=1))"
            )
        if start is not None:
            return cls(TimeAndDuration(start, duration))
        if end is not None:
            return cls(DurationAndTime(duration, end))
        raise InvalidBounds("Interval needs a start or an end alongside its duration")

    @property
    def format(self) -> IntervalFormat:
        """The notation this interval was written in."""
        try:
            return _FORMATS[type(self.shape)]
        except KeyError:
            raise UnknownShape(f"Unrecognized interval shape {self.shape!r}") from None

    @property
    def start(self) -> datetime:
        shape = self.shape
        if isinstance(shape, DurationAndTime):
            return shape.end - shape.duration
        return shape.start

    @property
    def end(self) -> datetime:
        shape = self.shape
        if isinstance(shape, TimeAndDuration):
            return shape.start + shape.duration
        return shape.end

    @property
    def duration(self) -> timedelta:
        shape = self.shape
        if isinstance(shape, TimeAndTime):
            return shape.end - shape.start
        return shape.duration

    @property
    def start_derived(self) -> bool:
        """True if the start is computed from the end and the duration."""
        return isinstance(self.shape, DurationAndTime)

    @property
    def end_derived(self) -> bool:
        """True if the end is computed from the start and the duration."""
        return isinstance(self.shape, TimeAndDuration)

    @property
    @override
    def starts_at(self) -> datetime:
        return self.start

    @property
    @override
    def ends_at(self) -> datetime:
        return self.end

    @classmethod
    def fromisoformat(cls, text: str) -> "Interval":
        """Parse ``<part>/<part>`` notation. See :func:`parse_interval`."""
        return parse_interval(text)

    def isoformat(self) -> str:
        """Write the interval in the notation it was built from."""
        return format_interval(self)

    def to_json(self) -> str:
        """Encode as a JSON string holding the interval notation."""
        return json.dumps(self.isoformat())

    @classmethod
    def from_json(cls, data: str | bytes) -> "Interval":
        """Decode a JSON string holding the interval notation."""
        return parse_interval(_load_json_string(data))

    @override
    def __str__(self) -> str:
        """Human-friendly string showing range and duration."""
        start = timestamp_codec.encode(self.start)
        end = timestamp_codec.encode(self.end)
        return f"Interval({start}→{end}, {self.duration})"


def _load_json_string(data: str | bytes) -> str:
    try:
        value = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidFormat(f"Invalid JSON {data!r}: {exc}") from exc
    if not isinstance(value, str):
        raise InvalidFormat(
            f"Expected a JSON string, got {type(value).__name__!r}: {value!r}"
        )
    return value


def _is_duration(part: str) -> bool:
    if part.startswith(DURATION_MARKER):
        return True
    if timestamp_codec.matches(part):
        return False
    raise InvalidFormat(
        f"Unknown interval part {part!r}.\n"
        f"Expected a timestamp like '2019-01-02T21:00:00Z' "
        f"or a duration like 'P1W'"
    )


def parse_interval(text: str) -> Interval:
    """Parse ``Time/Time``, ``Time/Duration`` or ``Duration/Time`` notation.

    A timestamp before the separator is the start, one after it is the
    end. The duration, if any, supplies the missing endpoint.

    Raises:
        InvalidFormat: If the text does not have exactly two parts, or a
            part is neither a timestamp nor a duration.
        AmbiguousInterval: If both parts are durations.
        InvalidBounds: If the end falls before the start.
    """
    parts = text.split(SEPARATOR)
    if len(parts) != 2:
        raise InvalidFormat(
            f"Invalid interval format: {text!r}\n"
            f"Expected '<start>/<end>', '<start>/<duration>' or '<duration>/<end>'"
        )

    durations = [_is_duration(part) for part in parts]
    if all(durations):
        raise AmbiguousInterval(f"Interval cannot consist of two durations: {text!r}")

    fields: dict[str, Any] = {}
    for position, (part, is_duration) in enumerate(zip(parts, durations)):
        if is_duration:
            fields["duration"] = duration_codec.decode(part)
        elif position == 0:
            fields["start"] = timestamp_codec.decode(part)
        else:
            fields["end"] = timestamp_codec.decode(part)

    return Interval.build(**fields)


def format_interval(interval: Interval) -> str:
    """Write an interval in the notation recorded by its format tag.

    Raises:
        InvalidFormat: If the duration cannot be written with week/day units.
    """
    shape = interval.shape
    if isinstance(shape, TimeAndTime):
        start = timestamp_codec.encode(shape.start)
        end = timestamp_codec.encode(shape.end)
    elif isinstance(shape, TimeAndDuration):
        start = timestamp_codec.encode(shape.start)
        end = duration_codec.encode(shape.duration)
    elif isinstance(shape, DurationAndTime):
        start = duration_codec.encode(shape.duration)
        end = timestamp_codec.encode(shape.end)
    else:
        raise UnknownShape(f"Unrecognized interval shape {shape!r}")
    return f"{start}{SEPARATOR}{end}"
