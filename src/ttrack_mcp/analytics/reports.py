"""Report payloads produced by the analytics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..periods import Period
from ..storage import SessionRecord

_BREAKDOWN_KEYS = {
    Period.WEEKLY: "daily_breakdown",
    Period.MONTHLY: "weekly_breakdown",
    Period.YEARLY: "monthly_breakdown",
}


def _session_dict(session: SessionRecord) -> dict[str, Any]:
    return session.model_dump(mode="json")


@dataclass(slots=True)
class TaskBucket:
    """Sessions of one task inside an interval."""

    name: str
    total_time: int = 0
    sessions: list[SessionRecord] = field(default_factory=list)

    def to_dict(self, *, include_sessions: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "total_time": self.total_time}
        if include_sessions:
            payload["sessions"] = [_session_dict(session) for session in self.sessions]
        return payload


@dataclass(slots=True)
class Bucket:
    """A sub-interval of a report with its own total."""

    start: datetime
    end: datetime
    total_time: int
    tasks: list[TaskBucket]

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_time": self.total_time,
            "tasks": [task.to_dict(include_sessions=False) for task in self.tasks],
        }


@dataclass(slots=True)
class PeriodReport:
    period: Period
    label: str
    start: datetime
    end: datetime
    total_time: int
    tasks: list[TaskBucket]
    breakdown: list[Bucket] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "period": self.period.value,
            "label": self.label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "total_time": self.total_time,
            "tasks": [task.to_dict() for task in self.tasks],
        }
        key = _BREAKDOWN_KEYS.get(self.period)
        if key is not None:
            payload[key] = [bucket.to_dict() for bucket in self.breakdown]
        return payload


@dataclass(slots=True, frozen=True)
class SummaryEntry:
    name: str
    total_time: int
    percentage: int
    session_count: int


@dataclass(slots=True)
class TaskSummary:
    tasks: list[SummaryEntry]
    total_time_all_tasks: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": [
                {
                    "name": entry.name,
                    "total_time": entry.total_time,
                    "percentage": entry.percentage,
                    "session_count": entry.session_count,
                }
                for entry in self.tasks
            ],
            "total_time_all_tasks": self.total_time_all_tasks,
        }


@dataclass(slots=True, frozen=True)
class GoalProgress:
    period: Period
    goal_time: int
    actual_time: int
    percentage: int
    is_achieved: bool
    remaining_time: int
    over_time: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.value,
            "goal_time": self.goal_time,
            "actual_time": self.actual_time,
            "percentage": self.percentage,
            "is_achieved": self.is_achieved,
            "remaining_time": self.remaining_time,
            "over_time": self.over_time,
        }


@dataclass(slots=True)
class TaskGoalStatus:
    task_id: str
    goals: list[GoalProgress]

    def to_dict(self) -> dict[str, Any]:
        return {"task_id": self.task_id, "goals": [goal.to_dict() for goal in self.goals]}


@dataclass(slots=True, frozen=True)
class GoalStreak:
    period: Period
    current_streak: int = 0
    longest_streak: int = 0
    total_achieved: int = 0
    window: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.value,
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "total_achieved": self.total_achieved,
            "window": self.window,
        }


__all__ = [
    "Bucket",
    "GoalProgress",
    "GoalStreak",
    "PeriodReport",
    "SummaryEntry",
    "TaskBucket",
    "TaskGoalStatus",
    "TaskSummary",
]
