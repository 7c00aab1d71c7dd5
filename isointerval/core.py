from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any


class Span(ABC):
    """A stretch of time with optional lower and upper bounds.

    Subclasses supply ``starts_at`` and ``ends_at``; ``None`` means the span
    is unbounded in that direction. The activity predicates are shared.
    """

    @property
    @abstractmethod
    def starts_at(self) -> datetime | None:
        """The effective lower bound, or None if unbounded."""
        pass

    @property
    @abstractmethod
    def ends_at(self) -> datetime | None:
        """The effective upper bound, or None if unbounded."""
        pass

    def started(self, t: datetime | int) -> bool:
        """True if the span has no lower bound or ``t`` is at or after it."""
        starts_at = self.starts_at
        return starts_at is None or coerce_instant(t) >= starts_at

    def ended(self, t: datetime | int) -> bool:
        """True if the span has an upper bound and ``t`` is strictly after it."""
        ends_at = self.ends_at
        return ends_at is not None and coerce_instant(t) > ends_at

    def contains(self, t: datetime | int) -> bool:
        """True if the span is active at ``t`` (started and not ended)."""
        return self.started(t) and not self.ended(t)

    def __contains__(self, t: datetime | int) -> bool:
        return self.contains(t)


def coerce_instant(t: Any) -> datetime:
    """Convert a query instant to a timezone-aware datetime.

    Accepts:
    - datetime: Must be timezone-aware, passed through
    - int: Unix timestamp in seconds, interpreted as UTC

    Raises:
        TypeError: If the instant is an unsupported type or naive datetime
    """
    if isinstance(t, datetime):
        if t.tzinfo is None or t.utcoffset() is None:
            raise TypeError(
                f"Query instant must be a timezone-aware datetime.\n"
                f"Got naive datetime: {t!r}\n"
                f"Hint: Add timezone info:\n"
                f"  dt = datetime(..., tzinfo=timezone.utc)"
            )
        return t
    if isinstance(t, int) and not isinstance(t, bool):
        return datetime.fromtimestamp(t, tz=timezone.utc)
    raise TypeError(
        f"Query instant must be a datetime or int.\n"
        f"Got {type(t).__name__!r}: {t!r}\n"
        f"Examples:\n"
        f"  span.started(1704067200)  # int (Unix seconds)\n"
        f"  span.started(datetime(2025, 1, 1, tzinfo=timezone.utc))"
    )
