"""
Schedule stores supplying availabilities and commitments to the query service.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..domain.exceptions import InvalidIntervalError, ScheduleDataError
from ..domain.models import Interval

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_schedule.json"


class InMemoryScheduleStore:
    """
    Store holding availabilities and commitments in plain dictionaries.

    Useful for tests and for applications that already have the intervals
    loaded from their own storage.
    """

    def __init__(
        self,
        availabilities: Optional[Mapping[str, Iterable[Interval]]] = None,
        commitments: Optional[Mapping[str, Iterable[Interval]]] = None,
    ):
        self._availabilities: Dict[str, Tuple[Interval, ...]] = {
            candidate: tuple(intervals)
            for candidate, intervals in (availabilities or {}).items()
        }
        self._commitments: Dict[str, Tuple[Interval, ...]] = {
            candidate: tuple(intervals)
            for candidate, intervals in (commitments or {}).items()
        }

    def candidates(self) -> List[str]:
        """Return every candidate with at least one availability."""
        return sorted(self._availabilities)

    def fetch_availabilities(
        self,
        candidate_id: Optional[str],
        window: Interval
    ) -> List[Tuple[str, Interval]]:
        """
        Return (candidate, availability) pairs overlapping the window.

        Args:
            candidate_id: Restrict to one candidate, or None for all
            window: Requested time window

        Returns:
            List of pairs ordered by candidate and start time
        """
        if candidate_id is None:
            selected = sorted(self._availabilities)
        else:
            selected = [candidate_id]

        records: List[Tuple[str, Interval]] = []
        for candidate in selected:
            for availability in _overlapping(self._availabilities.get(candidate, ()), window):
                records.append((candidate, availability))
        return records

    def fetch_commitments(self, candidate_id: str, window: Interval) -> List[Interval]:
        """Return the candidate's commitments overlapping the window."""
        return _overlapping(self._commitments.get(candidate_id, ()), window)


class JsonScheduleStore(InMemoryScheduleStore):
    """
    Store that loads schedule data from a JSON document.

    Expected layout::

        {
          "availabilities": [{"candidate": "alice", "start": "...", "end": "..."}],
          "commitments": [{"candidate": "alice", "start": "...", "end": "..."}]
        }

    Timestamps are ISO-8601; those without an offset are read in
    ``timezone``. Invalid records are skipped with a warning.
    """

    def __init__(self, data_file: Path = SAMPLE_DATA_FILE, timezone: str = "UTC"):
        self.data_file = Path(data_file)
        self.timezone = timezone

        data = self._load_schedule_data()
        super().__init__(
            availabilities=self._parse_records(_section(data, "availabilities"), "availability"),
            commitments=self._parse_records(_section(data, "commitments"), "commitment"),
        )

    def _load_schedule_data(self) -> Dict[str, Any]:
        """Load schedule data from the JSON file."""
        if not self.data_file.exists():
            raise ScheduleDataError(f"Schedule data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ScheduleDataError(f"Could not read schedule data from {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleDataError("Schedule data file must contain a mapping at the root level.")
        return data

    def _parse_records(self, records: Sequence[Any], kind: str) -> Dict[str, List[Interval]]:
        parsed: Dict[str, List[Interval]] = {}

        for record in records:
            try:
                candidate = str(record["candidate"])
                interval = Interval.from_strings(record["start"], record["end"], self.timezone)
            except (KeyError, TypeError, InvalidIntervalError) as exc:
                logger.warning("Skipping invalid %s record %r: %s", kind, record, exc)
                continue

            parsed.setdefault(candidate, []).append(interval)

        return parsed


def _overlapping(intervals: Sequence[Interval], window: Interval) -> List[Interval]:
    return sorted(
        (interval for interval in intervals if interval.overlaps(window)),
        key=lambda interval: interval.start,
    )


def _section(data: Mapping[str, Any], name: str) -> List[Any]:
    records = data.get(name, [])
    if not isinstance(records, list):
        raise ScheduleDataError(f"'{name}' must be a list of records, got {type(records).__name__}")
    return records
