"""Start/pause/resume/stop state machine for the single tracking session.

The transition functions are pure: they take the current ``TrackingState``
and the moment of the call, and return either the next state or an error
without touching storage. ``TimeTracker`` wraps them in a load-transition-save
cycle against a store.

Paused time is excluded by shifting ``start_time`` forward on resume, so an
active session's elapsed time is always ``now - start_time``. Stopping while
paused subtracts the still-open pause explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from ..durations import to_millis
from ..results import OperationResult, conflict, not_found
from ..storage import SessionRecord, StoreProtocol, TrackingState

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TrackingStatus:
    is_tracking: bool
    current_task: str | None
    start_time: datetime | None
    is_paused: bool
    elapsed: int

    def to_dict(self) -> dict[str, object]:
        return {
            "is_tracking": self.is_tracking,
            "current_task": self.current_task,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "is_paused": self.is_paused,
            "elapsed": self.elapsed,
        }


def _no_session(action: str) -> OperationResult:
    suffix = f" to {action}" if action else ""
    return conflict("not_tracking", f"No active tracking session{suffix}")


def begin(state: TrackingState, task_id: str, now: datetime) -> OperationResult[TrackingState]:
    if state.is_active:
        return conflict(
            "already_tracking",
            f'Already tracking "{state.current_task}". Stop current tracking first.',
        )
    return OperationResult.success(TrackingState(current_task=task_id, start_time=now))


def pause(state: TrackingState, now: datetime) -> OperationResult[TrackingState]:
    if not state.is_active:
        return _no_session("pause")
    if state.is_paused:
        return conflict("already_paused", "Tracking is already paused")
    return OperationResult.success(state.model_copy(update={"paused_at": now, "is_paused": True}))


def resume(state: TrackingState, now: datetime) -> OperationResult[TrackingState]:
    if not state.is_active:
        return _no_session("resume")
    if not state.is_paused:
        return conflict("not_paused", "No paused session to resume")

    paused_for = max(now - state.paused_at, timedelta(0))
    return OperationResult.success(
        state.model_copy(
            update={
                "start_time": state.start_time + paused_for,
                "paused_at": None,
                "is_paused": False,
            }
        )
    )


def finish(state: TrackingState, now: datetime) -> OperationResult[SessionRecord]:
    """Close the running session and return it; the caller resets the state."""

    if not state.is_active:
        return _no_session("")

    duration = to_millis(now - state.start_time)
    if state.is_paused:
        duration -= to_millis(now - state.paused_at)

    return OperationResult.success(
        SessionRecord(
            task=state.current_task,
            start_time=state.start_time,
            end_time=now,
            duration=max(0, duration),
        )
    )


def describe(state: TrackingState, now: datetime) -> TrackingStatus:
    if not state.is_active:
        return TrackingStatus(
            is_tracking=False,
            current_task=None,
            start_time=None,
            is_paused=False,
            elapsed=0,
        )

    until = state.paused_at if state.is_paused else now
    return TrackingStatus(
        is_tracking=True,
        current_task=state.current_task,
        start_time=state.start_time,
        is_paused=state.is_paused,
        elapsed=max(0, to_millis(until - state.start_time)),
    )


class TimeTracker:
    """Drive the tracking state machine against a persistent store."""

    def __init__(
        self,
        store: StoreProtocol,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or datetime.now

    def _apply(
        self,
        transition: Callable[[TrackingState, datetime], OperationResult[TrackingState]],
        verb: str,
    ) -> OperationResult[TrackingStatus]:
        now = self._clock()
        state = self._store.load_tracking()
        result = transition(state, now)
        if not result.ok:
            logger.debug("Rejected %s", verb, extra={"reason": result.error.reason})
            return result

        self._store.save_tracking(result.value)
        logger.info("Tracking %s", verb, extra={"task_id": result.value.current_task})
        return OperationResult.success(describe(result.value, now))

    def start(self, task_id: str) -> OperationResult[TrackingStatus]:
        if task_id not in self._store.load_tasks():
            return not_found("task_not_found", f'Task "{task_id}" does not exist')
        return self._apply(lambda state, now: begin(state, task_id, now), f"started for {task_id}")

    def pause(self) -> OperationResult[TrackingStatus]:
        return self._apply(pause, "paused")

    def resume(self) -> OperationResult[TrackingStatus]:
        return self._apply(resume, "resumed")

    def stop(self) -> OperationResult[SessionRecord]:
        now = self._clock()
        state = self._store.load_tracking()
        result = finish(state, now)
        if not result.ok:
            return result

        session = result.value
        tasks = self._store.load_tasks()
        task = tasks.get(session.task)
        if task is not None:
            tasks[session.task] = task.with_session(session)
            self._store.save_tasks(tasks)
        else:
            logger.warning("Tracked task vanished before stop", extra={"task_id": session.task})

        self._store.save_tracking(TrackingState.idle())
        logger.info(
            "Tracking stopped",
            extra={"task_id": session.task, "duration_ms": session.duration},
        )
        return OperationResult.success(session)

    def status(self) -> TrackingStatus:
        return describe(self._store.load_tracking(), self._clock())


__all__ = [
    "TimeTracker",
    "TrackingStatus",
    "begin",
    "describe",
    "finish",
    "pause",
    "resume",
]
