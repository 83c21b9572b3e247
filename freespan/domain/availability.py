"""
Splitting an availability window into the free time left around commitments.

Pure domain logic without any external dependencies (no storage, no I/O).
"""

import logging
from typing import List, Sequence

import pendulum
from pendulum import Duration

from .interval_ops import sort_key, subtract
from .models import Interval

logger = logging.getLogger(__name__)


class AvailabilitySplitter:
    """
    Calculates free sub-intervals of an availability window.

    Algorithm:
    1. Order the commitments by start time
    2. Subtract them from the availability window
    3. What remains is free time; the longest fragment is the longest
       uninterrupted stretch available
    """

    def free_spans(
        self,
        availability: Interval,
        commitments: Sequence[Interval]
    ) -> List[Interval]:
        """
        Return the fragments of ``availability`` not covered by commitments.

        Example:
        Availability: 08:00 - 18:00
        Commitments: [08:00-15:15, 15:30-16:00, 16:00-17:30]
        Result: [15:15-15:30, 17:30-18:00]
        """
        ordered = sorted(commitments, key=sort_key)
        fragments = subtract(availability, ordered)

        logger.debug(
            "Availability %s minus %d commitment(s) leaves %d free fragment(s)",
            availability,
            len(ordered),
            len(fragments),
        )
        return fragments

    def longest_free_span(
        self,
        availability: Interval,
        commitments: Sequence[Interval]
    ) -> Duration:
        """Return the length of the longest free fragment, or zero if none."""
        fragments = self.free_spans(availability, commitments)
        return max((fragment.duration() for fragment in fragments), default=pendulum.duration())

    def has_free_span(
        self,
        availability: Interval,
        commitments: Sequence[Interval],
        min_duration: Duration
    ) -> bool:
        """Check whether some free fragment lasts at least ``min_duration``."""
        return self.longest_free_span(availability, commitments) >= min_duration
