"""Timestamp codec for strict RFC 3339 style date-times.

Only one shape is accepted: ``YYYY-MM-DDTHH:MM:SS[.fraction]`` followed by
``Z`` or a numeric ``+HH:MM``/``-HH:MM`` offset.
"""

import re
from datetime import datetime, timedelta

from dateutil.parser import isoparse

from isointerval.errors import InvalidFormat

_PATTERN = re.compile(
    r"[0-9]{4,}-[0-9]{2}-[0-9]{2}T([01][0-9]|2[0-3]):[0-9]{2}:[0-9]{2}(\.[0-9]+)?"
    r"(Z|[+-][0-9]{2}:[0-9]{2})"
)


def matches(text: str) -> bool:
    """Return True if ``text`` has the shape of a strict timestamp."""
    return _PATTERN.fullmatch(text) is not None


def decode(text: str) -> datetime:
    """Parse a strict timestamp into a timezone-aware datetime.

    Raises:
        InvalidFormat: If the text does not have the strict shape or names
            an impossible date or time.
    """
    if not matches(text):
        raise InvalidFormat(
            f"Invalid timestamp {text!r}.\n"
            f"Expected e.g. '2019-01-02T21:00:00Z' or '2019-01-02T21:00:00+02:00'"
        )
    try:
        return isoparse(text)
    except ValueError as exc:
        raise InvalidFormat(f"Invalid timestamp {text!r}: {exc}") from exc


def encode(value: datetime) -> str:
    """Write a timezone-aware datetime as a strict timestamp.

    Fractional seconds are written only when present. A zero offset is
    written as ``Z``.
    """
    offset = value.utcoffset()
    if offset is None:
        raise TypeError(
            f"Timestamp must be a timezone-aware datetime.\n"
            f"Got naive datetime: {value!r}\n"
            f"Hint: datetime(..., tzinfo=timezone.utc)"
        )

    text = f"{value.year:04d}-{value.month:02d}-{value.day:02d}T{value:%H:%M:%S}"
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")
    return text + _encode_offset(offset)


def _encode_offset(offset: timedelta) -> str:
    if not offset:
        return "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(offset) // timedelta(minutes=1)
    hours, minutes = divmod(minutes, 60)
    return f"{sign}{hours:02d}:{minutes:02d}"
