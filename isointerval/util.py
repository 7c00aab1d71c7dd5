"""Utility constants for isointerval.

Time unit constants are :class:`datetime.timedelta` values; the grammar
constants name the characters of the interval notation.
"""

from datetime import timedelta

# Time unit constants
SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)

# Grammar
SEPARATOR = "/"
DURATION_MARKER = "P"
REPEAT_MARKER = "R"

# Duration unit letters, largest first
DURATION_UNITS: dict[str, timedelta] = {
    "W": WEEK,
    "D": DAY,
}
