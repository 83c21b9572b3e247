"""
Domain models for intervals of time and how two of them relate.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pendulum
from pendulum import DateTime, Duration

from .exceptions import InvalidIntervalError, MergePreconditionError


class OverlapRelation(Enum):
    """
    How an interval relates to another one.

    The relation is read from the point of view of the first interval:
    ``a.classify(b) is CONTAINS`` means ``b`` lies inside ``a``.
    """
    EQUALS = "equals"
    CONTAINS = "contains"
    IS_CONTAINED = "is_contained"
    STARTS_BEFORE_ENDS_WITHIN = "starts_before_ends_within"
    STARTS_WITHIN_ENDS_AFTER = "starts_within_ends_after"
    NO_OVERLAP = "no_overlap"


@dataclass(frozen=True)
class Interval:
    """
    Represents an immutable span of time with start and end datetime.

    Bounds are stored as pendulum DateTimes in UTC, so comparisons and
    durations count elapsed time even across daylight saving changes.

    Invariant: start must be strictly before end and both bounds must be
    timezone-aware.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidIntervalError(
                f"Interval bounds must be timezone-aware, got {self.start!r} and {self.end!r}"
            )
        object.__setattr__(self, "start", pendulum.instance(self.start).in_timezone("UTC"))
        object.__setattr__(self, "end", pendulum.instance(self.end).in_timezone("UTC"))

        if self.start >= self.end:
            raise InvalidIntervalError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str, timezone: str = "UTC") -> "Interval":
        """
        Build an interval from two ISO-8601 strings.

        Timestamps without an offset are interpreted in ``timezone``.
        """
        return cls(start=_parse_instant(start, timezone), end=_parse_instant(end, timezone))

    def duration(self) -> Duration:
        """Return the elapsed time between start and end."""
        return pendulum.duration(seconds=self.end.timestamp() - self.start.timestamp())

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int(self.duration().total_seconds() / 60)

    def contains(self, point: datetime) -> bool:
        """Check whether a point lies strictly inside the interval."""
        return self.start < point < self.end

    def classify(self, other: "Interval") -> OverlapRelation:
        """
        Classify how this interval relates to ``other``.

        The checks run in a fixed order and the first match wins, so the
        relations are mutually exclusive. Two intervals that only share an
        endpoint do not overlap.
        """
        if self.start == other.start and self.end == other.end:
            return OverlapRelation.EQUALS
        if self.start <= other.start and self.end >= other.end:
            return OverlapRelation.CONTAINS
        if other.start <= self.start and other.end >= self.end:
            return OverlapRelation.IS_CONTAINED
        if self.start <= other.start and other.start < self.end < other.end:
            return OverlapRelation.STARTS_BEFORE_ENDS_WITHIN
        if other.start < self.start < other.end and self.end >= other.end:
            return OverlapRelation.STARTS_WITHIN_ENDS_AFTER
        return OverlapRelation.NO_OVERLAP

    def overlaps(self, other: "Interval") -> bool:
        """Check if this interval overlaps with another."""
        return self.classify(other) is not OverlapRelation.NO_OVERLAP

    def clip(self, bounds: "Interval") -> "Interval | None":
        """
        Trim this interval to fit within bounds.
        Returns None if the interval lies completely outside bounds.
        """
        if not self.overlaps(bounds):
            return None
        return Interval(start=max(self.start, bounds.start), end=min(self.end, bounds.end))

    def format_display(self, timezone: str = "UTC") -> str:
        """
        Format the interval in a given timezone.
        Format: DD.MM.YYYY HH:mm - HH:mm
        """
        start = self.start.in_timezone(timezone)
        end = self.end.in_timezone(timezone)
        return f"{start.format('DD.MM.YYYY HH:mm')} - {end.format('HH:mm')}"

    def __str__(self) -> str:
        return self.format_display()


def merge(this: Interval, other: Interval) -> Interval:
    """
    Combine two overlapping intervals into the interval covering both.

    Raises:
        MergePreconditionError: If the intervals do not overlap
    """
    relation = this.classify(other)

    if relation is OverlapRelation.EQUALS or relation is OverlapRelation.CONTAINS:
        return this
    if relation is OverlapRelation.IS_CONTAINED:
        return other
    if relation is OverlapRelation.STARTS_BEFORE_ENDS_WITHIN:
        return Interval(start=this.start, end=other.end)
    if relation is OverlapRelation.STARTS_WITHIN_ENDS_AFTER:
        return Interval(start=other.start, end=this.end)
    if relation is OverlapRelation.NO_OVERLAP:
        raise MergePreconditionError(f"Cannot merge non-overlapping intervals {this} and {other}")
    raise AssertionError(f"Unhandled overlap relation: {relation}")


def _parse_instant(value: str, timezone: str) -> DateTime:
    try:
        parsed = pendulum.parse(value, tz=timezone)
    except (TypeError, ValueError) as exc:
        raise InvalidIntervalError(f"Invalid timestamp {value!r}: {exc}") from exc

    if not isinstance(parsed, DateTime):
        raise InvalidIntervalError(f"Invalid timestamp {value!r}: not a date and time")
    return parsed
