"""
Domain-specific exception hierarchy for freespan.
"""


class FreespanError(Exception):
    """Base class for all application-level errors."""


class InvalidIntervalError(FreespanError, ValueError):
    """Raised when an interval does not start strictly before it ends."""


class MergePreconditionError(FreespanError):
    """Raised when two intervals that do not overlap are merged."""


class ScheduleDataError(FreespanError):
    """Raised when availability or commitment data cannot be loaded."""
