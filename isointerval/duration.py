"""Duration codec for the week/day subset of ISO 8601 durations.

Durations are written as a ``P`` followed by one or more ``<count><unit>``
groups where the unit is ``W`` (weeks) or ``D`` (days), e.g. ``P1W``,
``P10D`` or ``P1W3D``. A unit letter without a count counts once, so ``PW``
is one week.
"""

from datetime import timedelta

from isointerval.errors import InvalidFormat
from isointerval.util import DAY, DURATION_MARKER, DURATION_UNITS, WEEK


def decode(text: str) -> timedelta:
    """Parse a duration token into a :class:`~datetime.timedelta`.

    The token is swept once from left to right. Digits accumulate into a
    counter which is consumed by the next unit letter.

    Raises:
        InvalidFormat: If the marker is missing, a unit letter is not
            recognized, digits are not followed by a unit, or the token
            has no groups at all.
    """
    if not text.startswith(DURATION_MARKER):
        raise InvalidFormat(
            f"Duration must begin with '{DURATION_MARKER}', got {text!r}.\n"
            f"Examples: 'P1W', 'P10D', 'P2W3D'"
        )

    total = timedelta(0)
    accumulator = ""
    groups = 0
    for char in text[len(DURATION_MARKER) :]:
        if char in "0123456789":
            accumulator += char
            continue

        if char not in DURATION_UNITS:
            valid = ", ".join(DURATION_UNITS)
            raise InvalidFormat(
                f"Unexpected character {char!r} in duration {text!r}.\n"
                f"Valid units: {valid}"
            )

        count = int(accumulator) if accumulator else 1
        try:
            total += count * DURATION_UNITS[char]
        except OverflowError as exc:
            raise InvalidFormat(f"Duration {text!r} is out of range") from exc
        accumulator = ""
        groups += 1

    if accumulator:
        raise InvalidFormat(
            f"Missing unit designator after '{accumulator}' in duration {text!r}"
        )
    if not groups:
        raise InvalidFormat(f"Duration {text!r} has no '<count><unit>' groups")

    return total


def encode(value: timedelta) -> str:
    """Write a duration in its canonical form.

    Whole weeks are written as ``P<n>W`` and any other whole number of days
    as ``P<n>D``. Durations that are negative or not a whole number of days
    cannot be written in this grammar.

    Raises:
        InvalidFormat: If the duration cannot be represented.
    """
    if value < timedelta(0):
        raise InvalidFormat(f"Negative durations are not supported, got {value}")

    days, remainder = divmod(value, DAY)
    if remainder:
        raise InvalidFormat(
            f"Duration {value} is not a whole number of days.\n"
            f"Only week (W) and day (D) units are supported."
        )

    weeks, rest = divmod(value, WEEK)
    if weeks and not rest:
        return f"{DURATION_MARKER}{weeks}W"
    return f"{DURATION_MARKER}{days}D"
