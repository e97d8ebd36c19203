"""Data models for persistent tracking."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, TypeAdapter, model_validator

from ..periods import Period


class SessionRecord(BaseModel):
    """One completed, pause-adjusted span of tracked time."""

    model_config = ConfigDict(frozen=True)

    task: str = Field(..., description="Identifier of the task the time belongs to.")
    start_time: datetime = Field(..., description="Start, shifted forward by any paused time.")
    end_time: datetime = Field(..., description="Moment tracking was stopped.")
    duration: int = Field(..., ge=0, description="Tracked milliseconds, pauses excluded.")


class TaskRecord(BaseModel):
    """A named task together with its completed sessions."""

    id: str = Field(..., description="Unique task name; immutable.")
    created: datetime = Field(..., description="Creation timestamp.")
    total_time: int = Field(default=0, ge=0, description="Sum of all session durations.")
    sessions: list[SessionRecord] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.id

    def with_session(self, session: SessionRecord) -> "TaskRecord":
        """Return a copy with ``session`` appended and the total kept in step."""

        return self.model_copy(
            update={
                "sessions": [*self.sessions, session],
                "total_time": self.total_time + session.duration,
            }
        )


class TrackingState(BaseModel):
    """The single in-flight tracking record.

    ``paused_at`` is present exactly when ``is_paused`` is true, and an idle
    state (no ``current_task``) carries no timestamps at all.
    """

    current_task: str | None = None
    start_time: datetime | None = None
    paused_at: datetime | None = None
    is_paused: bool = False

    @model_validator(mode="after")
    def _check_invariants(self) -> "TrackingState":
        if self.is_paused != (self.paused_at is not None):
            raise ValueError("paused_at must be set if and only if is_paused is true")
        if self.current_task is None:
            if self.start_time is not None or self.is_paused:
                raise ValueError("idle tracking state cannot carry timestamps")
        elif self.start_time is None:
            raise ValueError("active tracking state requires start_time")
        return self

    @property
    def is_active(self) -> bool:
        return self.current_task is not None

    @classmethod
    def idle(cls) -> "TrackingState":
        return cls()


TaskMap = dict[str, TaskRecord]
GoalMap = dict[str, dict[Period, PositiveInt]]

TASKS_ADAPTER: TypeAdapter[TaskMap] = TypeAdapter(TaskMap)
GOALS_ADAPTER: TypeAdapter[GoalMap] = TypeAdapter(GoalMap)


__all__ = [
    "GOALS_ADAPTER",
    "GoalMap",
    "SessionRecord",
    "TASKS_ADAPTER",
    "TaskMap",
    "TaskRecord",
    "TrackingState",
]
