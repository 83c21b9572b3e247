"""
Service layer helpers that orchestrate schedule stores and domain logic.
"""

from .scheduling_query import ScheduleStoreProtocol, SchedulingQueryService

__all__ = ["ScheduleStoreProtocol", "SchedulingQueryService"]
