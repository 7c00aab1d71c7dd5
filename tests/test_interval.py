"""Tests for single intervals and their notation."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from isointerval import (
    HOUR,
    MINUTE,
    WEEK,
    AmbiguousInterval,
    DurationAndTime,
    Interval,
    IntervalFormat,
    InvalidBounds,
    InvalidFormat,
    TimeAndDuration,
    TimeAndTime,
    UnknownShape,
    format_interval,
    parse_interval,
)

START = datetime(2019, 1, 2, 21, 0, 0, tzinfo=timezone.utc)
END = datetime(2022, 1, 3, 21, 0, 0, tzinfo=timezone.utc)

ROUND_TRIPS = [
    "2019-01-02T21:00:00Z/2022-01-03T21:00:00Z",
    "2019-01-02T21:00:00Z/P1W",
    "P1W/2022-01-03T21:00:00Z",
]


@pytest.mark.parametrize("text", ROUND_TRIPS)
def test_round_trip(text):
    """Test that parsing then formatting reproduces the original notation."""
    assert format_interval(parse_interval(text)) == text
    assert Interval.fromisoformat(text).isoformat() == text


def test_parse_time_and_time():
    """Test parsing two timestamps."""
    ivl = parse_interval("2019-01-02T21:00:00Z/2022-01-03T21:00:00Z")
    assert ivl == Interval(TimeAndTime(START, END))
    assert ivl.format is IntervalFormat.TIME_AND_TIME
    assert ivl.start == START
    assert ivl.end == END
    assert ivl.duration == END - START


def test_parse_time_and_duration():
    """Test that a trailing duration derives the end."""
    ivl = parse_interval("2019-01-02T21:00:00Z/P1W")
    assert ivl == Interval(TimeAndDuration(START, WEEK))
    assert ivl.format is IntervalFormat.TIME_AND_DURATION
    assert ivl.end == START + WEEK
    assert ivl.end_derived and not ivl.start_derived


def test_parse_duration_and_time():
    """Test that a leading duration derives the start."""
    ivl = parse_interval("P1W/2022-01-03T21:00:00Z")
    assert ivl == Interval(DurationAndTime(WEEK, END))
    assert ivl.format is IntervalFormat.DURATION_AND_TIME
    assert ivl.start == END - WEEK
    assert ivl.start_derived and not ivl.end_derived


def test_parse_rejects_two_durations():
    """Test that two durations cannot form an interval."""
    with pytest.raises(AmbiguousInterval, match="two durations"):
        parse_interval("P1W/P1W")


@pytest.mark.parametrize(
    "text",
    [
        "not-a-date/also-not",
        "2019-01-02T21:00:00Z/tomorrow",
        "2019-01-02/P1W",
    ],
)
def test_parse_rejects_unknown_parts(text):
    """Test that parts that are neither timestamps nor durations are rejected."""
    with pytest.raises(InvalidFormat):
        parse_interval(text)


@pytest.mark.parametrize(
    "text",
    [
        "2019-01-02T21:00:00Z",
        "2019-01-02T21:00:00Z/P1W/2022-01-03T21:00:00Z",
        "2019-01-02T21:00:00Z//P1W",
        "",
    ],
)
def test_parse_rejects_wrong_part_count(text):
    """Test that anything other than two parts is rejected."""
    with pytest.raises(InvalidFormat, match="Invalid interval format"):
        parse_interval(text)


def test_parse_rejects_end_before_start():
    """Test that construction errors propagate from the parser."""
    with pytest.raises(InvalidBounds, match="must not be before start"):
        parse_interval("2022-01-03T21:00:00Z/2019-01-02T21:00:00Z")


def test_parse_rejects_bad_duration():
    """Test that malformed durations surface as format errors."""
    with pytest.raises(InvalidFormat, match="Unexpected character"):
        parse_interval("2019-01-02T21:00:00Z/P1Y")


def test_format_rejects_partial_day_duration():
    """Test that durations outside week/day units cannot be formatted."""
    ivl = Interval.build(start=START, duration=15 * MINUTE)
    with pytest.raises(InvalidFormat, match="not a whole number of days"):
        ivl.isoformat()


def test_time_and_time_formats_any_length():
    """Test that explicit endpoints format regardless of their distance."""
    ivl = Interval.build(start=START, end=START + 15 * MINUTE)
    assert ivl.isoformat() == "2019-01-02T21:00:00Z/2019-01-02T21:15:00Z"


def test_derived_bounds_are_equivalent():
    """Test that start+duration and end+duration agree on their bounds."""
    start = datetime(2019, 1, 2, 20, 45, 0, tzinfo=timezone.utc)
    duration = 15 * MINUTE

    forward = Interval.build(start=start, duration=duration)
    backward = Interval.build(end=start + duration, duration=duration)

    assert forward.starts_at == backward.starts_at == start
    assert forward.ends_at == backward.ends_at == start + duration
    assert forward.duration == backward.duration == duration
    assert forward.format is not backward.format
    assert forward != backward


def test_build_rejects_insufficient_fields():
    """Test that both bounds must be determinable."""
    with pytest.raises(InvalidBounds, match="needs both start and end"):
        Interval.build()
    with pytest.raises(InvalidBounds, match="needs both start and end"):
        Interval.build(start=START)
    with pytest.raises(InvalidBounds, match="needs both start and end"):
        Interval.build(end=END)
    with pytest.raises(InvalidBounds, match="needs a start or an end"):
        Interval.build(duration=WEEK)


def test_build_rejects_overdetermined_fields():
    """Test that a duration cannot accompany two explicit endpoints."""
    with pytest.raises(InvalidBounds, match="alongside both start and end"):
        Interval.build(start=START, end=END, duration=WEEK)


def test_build_rejects_negative_duration():
    """Test that a negative duration puts the end before the start."""
    with pytest.raises(InvalidBounds):
        Interval.build(start=START, duration=-WEEK)
    with pytest.raises(InvalidBounds):
        Interval.build(end=END, duration=-WEEK)


def test_zero_length_interval():
    """Test that an interval may start and end at the same instant."""
    ivl = Interval.build(start=START, end=START)
    assert ivl.duration == timedelta(0)
    assert ivl.contains(START)


def test_build_rejects_naive_datetimes():
    """Test that endpoints must be timezone-aware."""
    with pytest.raises(TypeError, match="timezone-aware"):
        Interval.build(start=datetime(2019, 1, 2), duration=WEEK)


def test_build_rejects_non_timedelta_duration():
    """Test that durations must be timedeltas."""
    with pytest.raises(TypeError, match="must be a timedelta"):
        Interval.build(start=START, duration=3600)


def test_unknown_shape():
    """Test that an interval cannot wrap an unrecognized shape."""
    with pytest.raises(UnknownShape):
        Interval((START, END))  # type: ignore[arg-type]


def test_started():
    """Test that an interval has started from its start instant onwards."""
    now = datetime.now(timezone.utc)
    start, end = now - HOUR, now + 5 * HOUR
    ivl = Interval.build(start=start, end=end)

    assert ivl.started(start)
    assert not ivl.started(start - HOUR)
    assert ivl.started(end)


def test_ended():
    """Test that an interval ends strictly after its end instant."""
    now = datetime.now(timezone.utc)
    start, end = now - HOUR, now + 5 * HOUR
    ivl = Interval.build(start=start, end=end)

    assert not ivl.ended(start)
    assert not ivl.ended(start - HOUR)
    assert not ivl.ended(end)
    assert ivl.ended(end + HOUR)


def test_contains():
    """Test that an interval is active from start through end inclusive."""
    now = datetime.now(timezone.utc)
    start, end = now - HOUR, now + 5 * HOUR
    ivl = Interval.build(start=start, end=end)

    assert not ivl.contains(start - HOUR)
    assert ivl.contains(start)
    assert ivl.contains(now)
    assert ivl.contains(end)
    assert not ivl.contains(end + HOUR)
    assert now in ivl
    assert end + HOUR not in ivl


def test_queries_accept_unix_seconds():
    """Test that queries accept integer Unix timestamps."""
    ivl = Interval.build(start=START, duration=WEEK)
    assert ivl.contains(int(START.timestamp()))
    assert not ivl.started(int(START.timestamp()) - 1)


def test_queries_reject_naive_datetimes():
    """Test that query instants must be timezone-aware."""
    ivl = Interval.build(start=START, duration=WEEK)
    with pytest.raises(TypeError, match="timezone-aware"):
        ivl.started(datetime(2019, 1, 3))
    with pytest.raises(TypeError, match="datetime or int"):
        ivl.started("2019-01-03T00:00:00Z")


def test_offsets_compare_by_instant():
    """Test that endpoints in different offsets compare by instant."""
    plus_two = timezone(timedelta(hours=2))
    ivl = parse_interval("2019-01-02T23:00:00+02:00/P1W")
    assert ivl.start == START
    assert ivl.started(datetime(2019, 1, 2, 23, 0, 0, tzinfo=plus_two))
    assert ivl.isoformat() == "2019-01-02T23:00:00+02:00/P1W"


@pytest.mark.parametrize("text", ROUND_TRIPS)
def test_json_round_trip(text):
    """Test that intervals embed in JSON as their notation."""
    ivl = parse_interval(text)
    encoded = ivl.to_json()
    assert json.loads(encoded) == text
    assert Interval.from_json(encoded) == ivl


def test_from_json_requires_string():
    """Test that non-string JSON values are rejected."""
    with pytest.raises(InvalidFormat, match="Expected a JSON string"):
        Interval.from_json("42")


def test_str():
    """Test the human-friendly string form."""
    ivl = parse_interval("2019-01-02T21:00:00Z/P1W")
    assert str(ivl) == "Interval(2019-01-02T21:00:00Z→2019-01-09T21:00:00Z, 7 days, 0:00:00)"


def test_intervals_are_hashable():
    """Test that equal intervals hash equally."""
    a = parse_interval("2019-01-02T21:00:00Z/P1W")
    b = Interval.build(start=START, duration=WEEK)
    assert a == b
    assert len({a, b}) == 1


def test_parse_rejects_out_of_range_duration():
    """Test that an oversized duration surfaces as a format error."""
    with pytest.raises(InvalidFormat, match="out of range"):
        parse_interval("2019-01-02T21:00:00Z/P99999999999W")


def test_from_json_rejects_malformed_json():
    """Test that text that is not JSON is a format error."""
    with pytest.raises(InvalidFormat, match="Invalid JSON"):
        Interval.from_json("not json")
