"""Repeating intervals and their ``R[n]/<interval>`` notation.

A repeating interval is a series of back-to-back repetitions of an
interval's span. The series counts its repetitions from an anchor: the
wrapped interval's start when that start is explicit, otherwise its end.

    >>> from isointerval import Repeating
    >>> series = Repeating.fromisoformat("R10/P1W/2022-01-03T21:00:00Z")
    >>> series.repetitions, series.repeat_every
    (10, datetime.timedelta(days=7))
    >>> series.isoformat()
    'R10/P1W/2022-01-03T21:00:00Z'

Occurrences are generated with python-dateutil's rrule:

    >>> from itertools import islice
    >>> weekly = Repeating.fromisoformat("R/2025-01-06T09:00:00Z/P1W")
    >>> first_three = list(islice(weekly.occurrences(), 3))
"""

import json
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from dateutil.rrule import DAILY, HOURLY, MINUTELY, SECONDLY, WEEKLY, rrule
from typing_extensions import override

from isointerval import timestamp as timestamp_codec
from isointerval.core import Span, coerce_instant
from isointerval.errors import InvalidBounds, InvalidFormat
from isointerval.interval import (
    Interval,
    _load_json_string,
    format_interval,
    parse_interval,
)
from isointerval.util import (
    DAY,
    HOUR,
    MINUTE,
    REPEAT_MARKER,
    SECOND,
    SEPARATOR,
    WEEK,
)

# Coarsest first; the first unit dividing the step wins
_FREQ_UNITS = (
    (WEEK, WEEKLY),
    (DAY, DAILY),
    (HOUR, HOURLY),
    (MINUTE, MINUTELY),
    (SECOND, SECONDLY),
)


@dataclass(frozen=True)
class Repeating(Span):
    """A series of back-to-back repetitions of an interval.

    Attributes:
        interval: The interval whose span is repeated
        repetitions: Number of repetitions, or None for an unbounded series
    """

    interval: Interval
    repetitions: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.interval, Interval):
            raise TypeError(
                f"Repeating interval must wrap an Interval, "
                f"got {type(self.interval).__name__!r}"
            )
        if self.repetitions is not None:
            count = self.repetitions
            if isinstance(count, bool) or not isinstance(count, int):
                raise TypeError(
                    f"repetitions must be an int or None, "
                    f"got {type(count).__name__!r}"
                )
            if count < 0:
                raise InvalidBounds(f"repetitions must be non-negative, got {count}")
        try:
            _ = self.starts_at, self.ends_at
        except OverflowError as exc:
            raise InvalidBounds(
                f"{self.repetitions} repetitions of {self.repeat_every} "
                f"run out of range"
            ) from exc

    @property
    def repeat_every(self) -> timedelta:
        """The step between repetitions: the wrapped interval's duration."""
        return self.interval.duration

    @property
    def anchor(self) -> datetime:
        """The explicit endpoint repetitions are counted from."""
        if self.interval.start_derived:
            return self.interval.end
        return self.interval.start

    @property
    @override
    def starts_at(self) -> datetime | None:
        """Start of the series.

        Counted back from the anchor when the wrapped start is derived, and
        unbounded if there is also no repetition count.
        """
        if not self.interval.start_derived:
            return self.interval.start
        if self.repetitions is None:
            return None
        return self.interval.end - self.repetitions * self.repeat_every

    @property
    @override
    def ends_at(self) -> datetime | None:
        """End of the series.

        The wrapped end when the series is anchored there, otherwise counted
        forward from the start; unbounded if there is no repetition count.
        """
        if self.interval.start_derived:
            return self.interval.end
        if self.repetitions is None:
            return None
        return self.interval.start + self.repetitions * self.repeat_every

    @property
    def duration(self) -> timedelta | None:
        """Total span of the series, or None if it is unbounded."""
        starts_at, ends_at = self.starts_at, self.ends_at
        if starts_at is None or ends_at is None:
            return None
        return ends_at - starts_at

    def next(self, t: datetime | int) -> datetime | None:
        """Return the next step boundary strictly after ``t``.

        Returns the series start if ``t`` is before it, and None if the
        series has ended at ``t`` or the next boundary falls past its end.
        """
        t = coerce_instant(t)
        if not self.started(t):
            return self.starts_at
        step = self.repeat_every
        if self.ended(t) or not step:
            return None

        reference = self.starts_at if self.starts_at is not None else self.anchor
        offset = (t - reference) % step
        candidate = t + step if not offset else t + (step - offset)
        if self.ended(candidate):
            return None
        return candidate

    def occurrences(self, start: datetime | int | None = None) -> Iterator[Interval]:
        """Yield each repetition of the series as an Interval.

        Args:
            start: Skip repetitions that end before this instant. The
                repetition containing it is the first yielded. Required
                when the series has no lower bound.

        Raises:
            ValueError: If the series has no lower bound and no start was
                given, or the step is not a positive whole number of seconds.
        """
        step = self.repeat_every
        if step <= timedelta(0) or step % SECOND:
            raise ValueError(
                f"Occurrences need a positive whole-second step, got {step}"
            )

        first = self.starts_at
        if start is not None:
            start = coerce_instant(start)
            if first is None or start > first:
                first = start - (start - self.anchor) % step
        if first is None:
            raise ValueError(
                "Repeating interval without a lower bound requires a start.\n"
                "Fix: series.occurrences(start=datetime(..., tzinfo=timezone.utc))"
            )

        kwargs: dict[str, Any] = {}
        if self.ends_at is not None:
            count = (self.ends_at - first) // step
            if count <= 0:
                return
            kwargs["count"] = count

        # rrule drops microseconds from dtstart; carry them separately
        fraction = timedelta(microseconds=first.microsecond)
        dtstart = first - fraction
        for unit, freq in _FREQ_UNITS:
            if not step % unit:
                rules = rrule(freq, interval=step // unit, dtstart=dtstart, **kwargs)
                break

        for occurrence in rules:
            occurrence += fraction
            yield Interval.build(start=occurrence, end=occurrence + step)

    @classmethod
    def fromisoformat(cls, text: str) -> "Repeating":
        """Parse ``R[n]/<interval>`` notation. See :func:`parse_repeating`."""
        return parse_repeating(text)

    def isoformat(self) -> str:
        """Write the series in ``R[n]/<interval>`` notation."""
        return format_repeating(self)

    def to_json(self) -> str:
        """Encode as a JSON string holding the repeating interval notation."""
        return json.dumps(self.isoformat())

    @classmethod
    def from_json(cls, data: str | bytes) -> "Repeating":
        """Decode a JSON string holding the repeating interval notation."""
        return parse_repeating(_load_json_string(data))

    @override
    def __str__(self) -> str:
        """Human-friendly string showing the series bounds and step."""
        starts_at, ends_at = self.starts_at, self.ends_at
        start_str = "-∞" if starts_at is None else timestamp_codec.encode(starts_at)
        end_str = "+∞" if ends_at is None else timestamp_codec.encode(ends_at)
        times = "∞" if self.repetitions is None else str(self.repetitions)
        step = self.repeat_every
        return f"Repeating({start_str}→{end_str}, every {step}, ×{times})"


def parse_repeating(text: str) -> Repeating:
    """Parse ``R/<interval>`` or ``R<n>/<interval>`` notation.

    Raises:
        InvalidFormat: If the marker is missing, the count is not a run of
            digits, or the interval part is malformed.
        AmbiguousInterval: If the interval part consists of two durations.
        InvalidBounds: If the interval's end falls before its start.
    """
    if not text.startswith(REPEAT_MARKER):
        raise InvalidFormat(
            f"Invalid repeating interval format: {text!r}\n"
            f"Expected 'R/<interval>' or 'R<n>/<interval>', "
            f"e.g. 'R10/P1W/2022-01-03T21:00:00Z'"
        )

    prefix, separator, rest = text.partition(SEPARATOR)
    if not separator:
        raise InvalidFormat(f"Repeating interval {text!r} has no interval part")

    digits = prefix[len(REPEAT_MARKER) :]
    repetitions = None
    if digits:
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidFormat(
                f"Invalid repetition count {digits!r} in {text!r}; "
                f"expected a non-negative integer"
            )
        repetitions = int(digits)

    return Repeating(parse_interval(rest), repetitions)


def format_repeating(repeating: Repeating) -> str:
    """Write a series in ``R[n]/<interval>`` notation.

    Raises:
        InvalidFormat: If the interval's duration cannot be written with
            week/day units.
    """
    count = "" if repeating.repetitions is None else str(repeating.repetitions)
    return f"{REPEAT_MARKER}{count}{SEPARATOR}{format_interval(repeating.interval)}"
