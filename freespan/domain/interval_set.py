"""
Disjoint collection of intervals with set-level union, subtraction and
intersection.
"""

from typing import Iterable, Iterator, List, Tuple

import pendulum
from pendulum import Duration

from .interval_ops import add, intersect, sort_key, subtract
from .models import Interval


class IntervalSet:
    """
    Immutable collection of pairwise non-overlapping intervals.

    Members are kept sorted by start. Every operation returns a new set; the
    underlying tuple is never handed out in mutable form.
    """

    __slots__ = ("_intervals",)

    def __init__(self, intervals: Iterable[Interval] = ()):
        members: Tuple[Interval, ...] = ()
        for interval in intervals:
            members = add(members, interval)
        self._intervals = members

    @classmethod
    def _from_disjoint(cls, intervals: Iterable[Interval]) -> "IntervalSet":
        instance = cls.__new__(cls)
        instance._intervals = tuple(sorted(intervals, key=sort_key))
        return instance

    @property
    def intervals(self) -> Tuple[Interval, ...]:
        return self._intervals

    def add(self, other: "Interval | IntervalSet") -> "IntervalSet":
        """Return the union of this set and an interval or another set."""
        members = self._intervals
        for interval in _as_intervals(other):
            members = add(members, interval)
        return IntervalSet._from_disjoint(members)

    def subtract(self, other: "Interval | IntervalSet") -> "IntervalSet":
        """Return this set with every portion covered by ``other`` removed."""
        members: List[Interval] = list(self._intervals)
        for removed in _as_intervals(other):
            fragments: List[Interval] = []
            for member in members:
                fragments.extend(subtract(member, [removed]))
            members = fragments
        return IntervalSet._from_disjoint(members)

    def intersect(self, *others: "IntervalSet") -> "IntervalSet":
        """
        Return the time covered by this set and by every set in ``others``.

        Each member is cut against every overlapping member of the next
        target; the result then becomes the input for the following target.
        Without targets the set is returned unchanged.
        """
        members: List[Interval] = list(self._intervals)
        for target in others:
            narrowed: List[Interval] = []
            for member in members:
                for candidate in target:
                    if not member.overlaps(candidate):
                        continue
                    shared = intersect(member, [candidate])
                    if shared is not None:
                        narrowed.append(shared)
            members = narrowed
        return IntervalSet._from_disjoint(members)

    def total_duration(self) -> Duration:
        """Return the summed length of all members."""
        return sum((interval.duration() for interval in self._intervals), pendulum.duration())

    def longest(self) -> Interval | None:
        """Return the longest member, or None for an empty set."""
        if not self._intervals:
            return None
        return max(self._intervals, key=lambda interval: interval.duration())

    def __or__(self, other: "Interval | IntervalSet") -> "IntervalSet":
        return self.add(other)

    def __sub__(self, other: "Interval | IntervalSet") -> "IntervalSet":
        return self.subtract(other)

    def __and__(self, other: "IntervalSet") -> "IntervalSet":
        return self.intersect(other)

    def __iter__(self) -> Iterator[Interval]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __bool__(self) -> bool:
        return bool(self._intervals)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __repr__(self) -> str:
        members = ", ".join(str(interval) for interval in self._intervals)
        return f"IntervalSet([{members}])"


def _as_intervals(value: "Interval | IntervalSet") -> Tuple[Interval, ...]:
    if isinstance(value, Interval):
        return (value,)
    return value.intervals
