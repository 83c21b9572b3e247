"""
Tests for domain models.
"""

import itertools
from datetime import datetime

import pendulum
import pytest
from pendulum import DateTime

from freespan.domain.exceptions import InvalidIntervalError, MergePreconditionError
from freespan.domain.models import Interval, OverlapRelation, merge


def _at(clock: str) -> DateTime:
    return pendulum.parse(f"2024-11-25 {clock}", tz="UTC")


def _span(start: str, end: str) -> Interval:
    return Interval(start=_at(start), end=_at(end))


class TestInterval:
    """Tests for Interval construction and basic queries."""

    def test_create_valid_interval(self):
        """Test creating a valid interval."""
        interval = _span("09:00", "17:00")

        assert interval.start == _at("09:00")
        assert interval.end == _at("17:00")
        assert interval.duration() == pendulum.duration(hours=8)
        assert interval.duration_minutes() == 480

    def test_inverted_interval_raises_error(self):
        """Test that an interval ending before it starts is rejected."""
        with pytest.raises(InvalidIntervalError, match="Start time .* must be before end time"):
            _span("17:00", "09:00")

    def test_zero_length_interval_raises_error(self):
        """Test that a zero-length interval is rejected."""
        with pytest.raises(InvalidIntervalError):
            _span("09:00", "09:00")

    def test_invalid_interval_is_a_value_error(self):
        """Callers catching ValueError also see invalid intervals."""
        with pytest.raises(ValueError):
            _span("10:00", "09:00")

    def test_naive_bounds_are_rejected(self):
        """Test that bounds without timezone are rejected."""
        with pytest.raises(InvalidIntervalError, match="timezone-aware"):
            Interval(start=datetime(2024, 11, 25, 9), end=datetime(2024, 11, 25, 10))

    def test_equality_compares_both_bounds(self):
        """Intervals are equal only when both bounds match."""
        assert _span("09:00", "10:00") == _span("09:00", "10:00")
        assert _span("09:00", "10:00") != _span("09:00", "10:30")
        assert len({_span("09:00", "10:00"), _span("09:00", "10:00")}) == 1

    def test_contains_is_strict_on_both_ends(self):
        """Points on a boundary are not contained."""
        interval = _span("09:00", "10:00")

        assert not interval.contains(_at("09:00"))
        assert not interval.contains(_at("10:00"))
        assert interval.contains(_at("09:00:01"))
        assert interval.contains(_at("09:59"))
        assert not interval.contains(_at("08:59"))

    def test_from_strings_uses_timezone_for_naive_input(self):
        """Timestamps without offset are read in the given zone."""
        interval = Interval.from_strings("2024-11-25T09:00", "2024-11-25T10:00", "Europe/Berlin")

        assert interval.start == pendulum.parse("2024-11-25T08:00", tz="UTC")
        assert interval.start.timezone_name == "UTC"

    def test_from_strings_keeps_explicit_offset(self):
        """Explicit offsets win over the default zone."""
        interval = Interval.from_strings("2024-11-25T09:00+00:00", "2024-11-25T10:00+00:00", "Europe/Berlin")

        assert interval.start == _at("09:00")

    def test_from_strings_rejects_garbage(self):
        """Unparseable timestamps raise InvalidIntervalError."""
        with pytest.raises(InvalidIntervalError, match="Invalid timestamp"):
            Interval.from_strings("yesterday", "2024-11-25T10:00")

    def test_clip(self):
        """Test clipping to bounds."""
        bounds = _span("09:00", "17:00")

        assert _span("08:00", "10:00").clip(bounds) == _span("09:00", "10:00")
        assert _span("16:00", "18:00").clip(bounds) == _span("16:00", "17:00")
        assert _span("10:00", "11:00").clip(bounds) == _span("10:00", "11:00")
        assert _span("17:00", "18:00").clip(bounds) is None

    def test_str(self):
        """Test display formatting."""
        assert str(_span("15:15", "15:30")) == "25.11.2024 15:15 - 15:30"

    def test_format_display_in_timezone(self):
        """Bounds are shown as local wall-clock time."""
        assert _span("15:15", "15:30").format_display("Europe/Berlin") == "25.11.2024 16:15 - 16:30"


class TestDaylightSavingTime:
    """Durations count elapsed time when the wall clock jumps."""

    def test_spring_forward_day_loses_an_hour(self):
        interval = Interval.from_strings("2024-03-31T01:00", "2024-03-31T04:00", "Europe/Berlin")

        assert interval.duration() == pendulum.duration(hours=2)
        assert interval.duration_minutes() == 120

    def test_fall_back_day_gains_an_hour(self):
        interval = Interval.from_strings("2024-10-27T01:00", "2024-10-27T04:00", "Europe/Berlin")

        assert interval.duration() == pendulum.duration(hours=4)

    def test_bounds_in_different_zones_compare_by_instant(self):
        berlin = Interval.from_strings("2024-03-31T01:00", "2024-03-31T04:00", "Europe/Berlin")
        utc = Interval.from_strings("2024-03-31T00:00+00:00", "2024-03-31T02:00+00:00")

        assert berlin == utc
        assert berlin.classify(utc) is OverlapRelation.EQUALS


class TestClassify:
    """Tests for the overlap relation between two intervals."""

    @pytest.mark.parametrize(
        "this, other, expected",
        [
            (("08:00", "10:00"), ("08:00", "10:00"), OverlapRelation.EQUALS),
            (("08:00", "12:00"), ("09:00", "10:00"), OverlapRelation.CONTAINS),
            (("08:00", "12:00"), ("08:00", "10:00"), OverlapRelation.CONTAINS),
            (("08:00", "12:00"), ("10:00", "12:00"), OverlapRelation.CONTAINS),
            (("09:00", "10:00"), ("08:00", "12:00"), OverlapRelation.IS_CONTAINED),
            (("08:00", "10:00"), ("08:00", "12:00"), OverlapRelation.IS_CONTAINED),
            (("10:00", "12:00"), ("08:00", "12:00"), OverlapRelation.IS_CONTAINED),
            (("08:00", "10:00"), ("09:00", "12:00"), OverlapRelation.STARTS_BEFORE_ENDS_WITHIN),
            (("09:00", "12:00"), ("08:00", "10:00"), OverlapRelation.STARTS_WITHIN_ENDS_AFTER),
            (("08:00", "10:00"), ("10:00", "12:00"), OverlapRelation.NO_OVERLAP),
            (("10:00", "12:00"), ("08:00", "10:00"), OverlapRelation.NO_OVERLAP),
            (("08:00", "09:00"), ("11:00", "12:00"), OverlapRelation.NO_OVERLAP),
        ],
    )
    def test_classify(self, this, other, expected):
        """Each pair maps to exactly one relation."""
        assert _span(*this).classify(_span(*other)) is expected

    def test_touching_intervals_do_not_overlap(self):
        """Intervals sharing one endpoint are disjoint."""
        first = _span("15:30", "16:00")
        second = _span("16:00", "17:30")

        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_overlap_is_symmetric(self):
        """overlaps(a, b) == overlaps(b, a) for every pair."""
        clocks = ["08:00", "09:00", "10:00", "11:00", "12:00"]
        intervals = [_span(a, b) for a, b in itertools.combinations(clocks, 2)]

        for first, second in itertools.product(intervals, repeat=2):
            assert first.overlaps(second) == second.overlaps(first)

    def test_overlap_matches_shared_interior(self):
        """Overlap means the open interiors intersect."""
        clocks = ["08:00", "09:00", "10:00", "11:00"]
        intervals = [_span(a, b) for a, b in itertools.combinations(clocks, 2)]

        for first, second in itertools.product(intervals, repeat=2):
            shared = first.start < second.end and second.start < first.end
            assert first.overlaps(second) == shared


class TestMerge:
    """Tests for combining two overlapping intervals."""

    def test_merge_equal(self):
        interval = _span("08:00", "10:00")
        assert merge(interval, _span("08:00", "10:00")) == interval

    def test_merge_contains_keeps_this(self):
        assert merge(_span("08:00", "12:00"), _span("09:00", "10:00")) == _span("08:00", "12:00")

    def test_merge_is_contained_returns_other(self):
        assert merge(_span("09:00", "10:00"), _span("08:00", "12:00")) == _span("08:00", "12:00")

    def test_merge_starts_before_ends_within(self):
        assert merge(_span("08:00", "10:00"), _span("09:00", "12:00")) == _span("08:00", "12:00")

    def test_merge_starts_within_ends_after(self):
        assert merge(_span("09:00", "12:00"), _span("08:00", "10:00")) == _span("08:00", "12:00")

    def test_merge_without_overlap_fails(self):
        """Merging disjoint intervals is a programming error."""
        with pytest.raises(MergePreconditionError):
            merge(_span("08:00", "10:00"), _span("10:00", "12:00"))
