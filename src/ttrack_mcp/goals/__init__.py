"""Goal targets for tasks."""

from .registry import GoalChange, GoalRegistry

__all__ = ["GoalChange", "GoalRegistry"]
