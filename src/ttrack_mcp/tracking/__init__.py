"""Task records and the tracking state machine."""

from .machine import TimeTracker, TrackingStatus
from .tasks import TaskStore, is_valid_task_name

__all__ = ["TaskStore", "TimeTracker", "TrackingStatus", "is_valid_task_name"]
