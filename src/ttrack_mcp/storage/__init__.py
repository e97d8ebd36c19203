"""Storage abstractions for ttrack."""

from .json_store import JsonStore, MemoryStore, StoreProtocol
from .models import GoalMap, SessionRecord, TaskMap, TaskRecord, TrackingState

__all__ = [
    "GoalMap",
    "JsonStore",
    "MemoryStore",
    "SessionRecord",
    "StoreProtocol",
    "TaskMap",
    "TaskRecord",
    "TrackingState",
]
