"""
Application service answering "who still has enough free time on this day?".

The service coordinates fetching availabilities and commitments via a
schedule store and delegates the free-time calculation to the domain-level
``AvailabilitySplitter``. The store dependency is a simple protocol so tests
and embedding applications can plug in their own storage.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

import pendulum
from pendulum import Duration

from ..domain.availability import AvailabilitySplitter
from ..domain.models import Interval

logger = logging.getLogger(__name__)

DEFAULT_COMMITMENT_PADDING = pendulum.duration(hours=12)


class ScheduleStoreProtocol(Protocol):
    """Protocol describing the read-only storage the service needs."""

    def fetch_availabilities(
        self,
        candidate_id: Optional[str],
        window: Interval,
    ) -> Sequence[Tuple[str, Interval]]:
        """Return (candidate, availability) pairs overlapping ``window``."""

    def fetch_commitments(
        self,
        candidate_id: str,
        window: Interval,
    ) -> Sequence[Interval]:
        """Return the candidate's commitments overlapping ``window``."""


class SchedulingQueryService:
    """
    Filters a population of candidates by their longest free stretch on a day.

    Candidates are evaluated independently and the service keeps no state
    between calls, so a caller may evaluate them concurrently as long as the
    store supports concurrent reads.
    """

    def __init__(
        self,
        store: ScheduleStoreProtocol,
        splitter: Optional[AvailabilitySplitter] = None,
        *,
        timezone: str = "UTC",
        commitment_padding: Duration = DEFAULT_COMMITMENT_PADDING,
    ) -> None:
        if commitment_padding < pendulum.duration():
            raise ValueError("commitment_padding must not be negative")

        self._store = store
        self._splitter = splitter or AvailabilitySplitter()
        self._timezone = pendulum.timezone(timezone)
        self._commitment_padding = commitment_padding

    def day_window(self, day: date) -> Interval:
        """Return ``[00:00, next day 00:00)`` for ``day`` in the service zone."""
        start = pendulum.datetime(day.year, day.month, day.day, tz=self._timezone).start_of("day")
        return Interval(start=start, end=start.add(days=1))

    def padded_window(self, day: date) -> Interval:
        """
        Return the day window widened by the commitment padding.

        Commitments are only fetched inside this window; anything further
        away cannot cut into an availability on ``day``.
        """
        window = self.day_window(day)
        return Interval(
            start=window.start - self._commitment_padding,
            end=window.end + self._commitment_padding,
        )

    def qualifying_candidates(
        self,
        min_duration: Duration,
        day: date,
        population: Optional[Iterable[str]] = None,
    ) -> Set[str]:
        """
        Return the candidates with an uninterrupted free span of at least
        ``min_duration`` inside one of their availabilities on ``day``.

        Args:
            min_duration: Required length of the free span, must be positive
            day: Calendar day, interpreted in the service timezone
            population: Candidates to consider; None means everyone the store
                has availability for on that day

        Returns:
            Unordered set of candidate identifiers
        """
        if min_duration <= pendulum.duration():
            raise ValueError(f"min_duration must be positive, got {min_duration}")

        availabilities = self.fetch_availabilities(day=day, population=population)
        padded = self.padded_window(day)

        qualifying: Set[str] = set()
        for candidate_id, windows in availabilities.items():
            commitments = list(self._store.fetch_commitments(candidate_id, padded))

            if any(
                self._splitter.has_free_span(window, commitments, min_duration)
                for window in _clip_all(windows, padded)
            ):
                qualifying.add(candidate_id)

        logger.info(
            "%d of %d candidate(s) have %s free on %s",
            len(qualifying),
            len(availabilities),
            min_duration,
            day.isoformat(),
        )
        return qualifying

    def candidate_free_spans(self, candidate_id: str, day: date) -> List[Interval]:
        """Return every free fragment of the candidate's availabilities on ``day``."""
        availabilities = self.fetch_availabilities(day=day, population=[candidate_id])
        windows = availabilities.get(candidate_id, [])
        if not windows:
            return []

        padded = self.padded_window(day)
        commitments = list(self._store.fetch_commitments(candidate_id, padded))

        free: List[Interval] = []
        for window in _clip_all(windows, padded):
            free.extend(self._splitter.free_spans(window, commitments))
        return sorted(free, key=lambda interval: interval.start)

    def fetch_availabilities(
        self,
        *,
        day: date,
        population: Optional[Iterable[str]] = None,
    ) -> Dict[str, List[Interval]]:
        """Fetch availabilities overlapping ``day``, grouped per candidate."""
        window = self.day_window(day)

        if population is None:
            records = list(self._store.fetch_availabilities(None, window))
        else:
            records = []
            for candidate_id in dict.fromkeys(population):
                records.extend(self._store.fetch_availabilities(candidate_id, window))

        grouped: Dict[str, List[Interval]] = {}
        for candidate_id, availability in records:
            grouped.setdefault(candidate_id, []).append(availability)

        logger.debug(
            "Fetched %d availability record(s) for %d candidate(s) on %s",
            len(records),
            len(grouped),
            day.isoformat(),
        )
        return grouped


def _clip_all(windows: Sequence[Interval], bounds: Interval) -> List[Interval]:
    # Commitments are only known inside bounds, so free time is only counted there
    clipped = (window.clip(bounds) for window in windows)
    return [window for window in clipped if window is not None]
