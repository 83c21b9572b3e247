"""
Adapters layer - Schedule data sources.
"""

from .schedule_store import SAMPLE_DATA_FILE, InMemoryScheduleStore, JsonScheduleStore

__all__ = ["SAMPLE_DATA_FILE", "InMemoryScheduleStore", "JsonScheduleStore"]
