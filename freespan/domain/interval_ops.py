"""
Set operations over intervals: union, subtraction and intersection.

All functions take their inputs by value and return new sequences. They loop
over explicit work lists instead of recursing, so the number of competing
intervals does not grow the call stack.
"""

from typing import List, Sequence, Tuple

from pendulum import DateTime

from .models import Interval, OverlapRelation, merge


def sort_key(interval: Interval) -> Tuple[DateTime, DateTime]:
    """Canonical ordering for interval sequences: by start, then end."""
    return interval.start, interval.end


def add(existing: Sequence[Interval], incoming: Interval) -> Tuple[Interval, ...]:
    """
    Fold an interval into a disjoint sequence, merging away every overlap.

    Members overlapping ``incoming`` are merged into it and dropped, then the
    search runs again against the grown interval until nothing overlaps.
    Merging only once per insertion can leave a grown interval overlapping a
    member that was not found on the first pass, so the search is repeated to
    a fixed point before inserting.

    Returns:
        New tuple sorted by start
    """
    members = list(existing)

    while True:
        overlapping = [member for member in members if incoming.overlaps(member)]
        if not overlapping:
            break

        for member in overlapping:
            incoming = merge(incoming, member)
        members = [member for member in members if member not in overlapping]

    members.append(incoming)
    return tuple(sorted(members, key=sort_key))


def subtract(this: Interval, others: Sequence[Interval]) -> List[Interval]:
    """
    Remove the portions of ``this`` covered by ``others``.

    ``others`` is consumed left to right: a fragment is cut by the first
    remaining member that overlaps it, and the pieces left over are cut by the
    members after that one. Zero-length pieces are never built.

    Example:
    Interval: 08:00 - 18:00
    Others: [08:00-15:15, 15:30-16:00, 16:00-17:30]
    Result: [15:15-15:30, 17:30-18:00]

    Returns:
        Disjoint fragments in left-to-right order, possibly empty
    """
    others = list(others)
    fragments: List[Interval] = []
    pending: List[Tuple[Interval, int]] = [(this, 0)]

    while pending:
        current, index = pending.pop()
        position = _first_overlap(current, others, index)

        if position is None:
            fragments.append(current)
            continue

        blocker = others[position]
        remaining = position + 1
        relation = current.classify(blocker)

        if relation is OverlapRelation.CONTAINS:
            pieces = [_span(current.start, blocker.start), _span(blocker.end, current.end)]
        elif relation is OverlapRelation.STARTS_BEFORE_ENDS_WITHIN:
            pieces = [_span(current.start, blocker.start)]
        elif relation is OverlapRelation.STARTS_WITHIN_ENDS_AFTER:
            pieces = [_span(blocker.end, current.end)]
        elif relation is OverlapRelation.EQUALS or relation is OverlapRelation.IS_CONTAINED:
            pieces = []
        else:
            raise AssertionError(f"Unexpected relation for overlapping intervals: {relation}")

        # Stack is LIFO: push the right-hand piece first so the left one is cut first
        for piece in reversed(pieces):
            if piece is not None:
                pending.append((piece, remaining))

    return fragments


def intersect(this: Interval, others: Sequence[Interval]) -> Interval | None:
    """
    Narrow ``this`` to the span it shares with every interval in ``others``.

    Returns None as soon as one of ``others`` does not overlap the narrowed
    interval. With no ``others`` the interval is returned unchanged.
    """
    current = this

    for other in others:
        relation = current.classify(other)

        if relation is OverlapRelation.STARTS_BEFORE_ENDS_WITHIN:
            current = Interval(start=other.start, end=current.end)
        elif relation is OverlapRelation.STARTS_WITHIN_ENDS_AFTER:
            current = Interval(start=current.start, end=other.end)
        elif relation is OverlapRelation.CONTAINS:
            current = other
        elif relation is OverlapRelation.EQUALS or relation is OverlapRelation.IS_CONTAINED:
            continue
        elif relation is OverlapRelation.NO_OVERLAP:
            return None
        else:
            raise AssertionError(f"Unhandled overlap relation: {relation}")

    return current


def _first_overlap(interval: Interval, others: Sequence[Interval], start: int) -> int | None:
    for position in range(start, len(others)):
        if interval.overlaps(others[position]):
            return position
    return None


def _span(start: DateTime, end: DateTime) -> Interval | None:
    if start >= end:
        return None
    return Interval(start=start, end=end)
