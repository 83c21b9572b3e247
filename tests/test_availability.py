"""
Tests for the availability splitter.
"""

import pendulum
from pendulum import DateTime

from freespan.domain.availability import AvailabilitySplitter
from freespan.domain.models import Interval


def _at(clock: str) -> DateTime:
    return pendulum.parse(f"2024-11-25 {clock}", tz="UTC")


def _span(start: str, end: str) -> Interval:
    return Interval(start=_at(start), end=_at(end))


class TestAvailabilitySplitter:
    """Tests for AvailabilitySplitter."""

    def test_free_spans_with_shifts(self):
        """Shifts through the day leave a 15 and a 30 minute gap."""
        splitter = AvailabilitySplitter()
        availability = _span("08:00", "18:00")
        commitments = [_span("08:00", "15:15"), _span("15:30", "16:00"), _span("16:00", "17:30")]

        fragments = splitter.free_spans(availability, commitments)

        assert fragments == [_span("15:15", "15:30"), _span("17:30", "18:00")]
        assert splitter.longest_free_span(availability, commitments) == pendulum.duration(minutes=30)

    def test_free_spans_independent_of_commitment_order(self):
        splitter = AvailabilitySplitter()
        availability = _span("08:00", "18:00")
        commitments = [_span("16:00", "17:30"), _span("08:00", "15:15"), _span("15:30", "16:00")]

        assert splitter.free_spans(availability, commitments) == [_span("15:15", "15:30"), _span("17:30", "18:00")]

    def test_no_commitments(self):
        splitter = AvailabilitySplitter()
        availability = _span("09:00", "17:00")

        assert splitter.free_spans(availability, []) == [availability]
        assert splitter.longest_free_span(availability, []) == pendulum.duration(hours=8)

    def test_fully_booked_has_zero_free_time(self):
        splitter = AvailabilitySplitter()
        availability = _span("09:00", "17:00")

        assert splitter.free_spans(availability, [_span("09:00", "17:00")]) == []
        assert splitter.longest_free_span(availability, [_span("08:00", "18:00")]) == pendulum.duration()

    def test_has_free_span_threshold_is_inclusive(self):
        splitter = AvailabilitySplitter()
        availability = _span("09:00", "10:00")
        commitments = [_span("09:30", "10:00")]

        assert splitter.has_free_span(availability, commitments, pendulum.duration(minutes=30))
        assert not splitter.has_free_span(availability, commitments, pendulum.duration(minutes=31))
