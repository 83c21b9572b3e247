"""
Domain layer - Pure interval algebra without external dependencies.
"""

from .availability import AvailabilitySplitter
from .exceptions import (
    FreespanError,
    InvalidIntervalError,
    MergePreconditionError,
    ScheduleDataError,
)
from .interval_ops import add, intersect, subtract
from .interval_set import IntervalSet
from .models import Interval, OverlapRelation, merge

__all__ = [
    "AvailabilitySplitter",
    "FreespanError",
    "InvalidIntervalError",
    "MergePreconditionError",
    "ScheduleDataError",
    "Interval",
    "IntervalSet",
    "OverlapRelation",
    "add",
    "intersect",
    "merge",
    "subtract",
]
