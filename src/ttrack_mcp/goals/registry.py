"""Per-task, per-period time targets."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..durations import format_duration
from ..periods import Period
from ..results import OperationResult, invalid, not_found
from ..storage import StoreProtocol, TaskRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class GoalChange:
    task_id: str
    period: Period
    target: int
    created: bool

    @property
    def message(self) -> str:
        verb = "set" if self.created else "updated"
        return (
            f'{self.period.value.capitalize()} goal {verb} for "{self.task_id}": '
            f"{format_duration(self.target)}"
        )


class GoalRegistry:
    def __init__(self, store: StoreProtocol) -> None:
        self._store = store

    def set_goal(self, task_id: str, period: str | Period, duration_ms: int) -> OperationResult[GoalChange]:
        try:
            parsed = Period.parse(period)
        except ValueError as exc:
            return invalid("invalid_period", str(exc))
        if isinstance(duration_ms, bool) or not isinstance(duration_ms, int) or duration_ms <= 0:
            return invalid("invalid_duration", "Goal duration must be a positive whole number of milliseconds")
        if task_id not in self._store.load_tasks():
            return not_found("task_not_found", f'Task "{task_id}" does not exist')

        goals = self._store.load_goals()
        entries = goals.setdefault(task_id, {})
        created = parsed not in entries
        entries[parsed] = duration_ms
        self._store.save_goals(goals)

        change = GoalChange(task_id=task_id, period=parsed, target=duration_ms, created=created)
        logger.info(
            "Goal saved",
            extra={"task_id": task_id, "period": parsed.value, "target_ms": duration_ms, "created": created},
        )
        return OperationResult.success(change)

    def remove_goal(self, task_id: str, period: str | Period | None = None) -> OperationResult[list[Period]]:
        """Drop one goal, or every goal of the task when ``period`` is omitted.

        The payload lists the periods that were removed.
        """

        goals = self._store.load_goals()
        entries = goals.get(task_id, {})

        if period is None:
            if not entries:
                return not_found("no_goals", f'No goals exist for "{task_id}"')
            removed = list(entries)
            del goals[task_id]
        else:
            try:
                parsed = Period.parse(period)
            except ValueError as exc:
                return invalid("invalid_period", str(exc))
            if parsed not in entries:
                return not_found("goal_not_found", f'No {parsed.value} goal exists for "{task_id}"')
            del entries[parsed]
            removed = [parsed]
            if not entries:
                del goals[task_id]

        self._store.save_goals(goals)
        logger.info("Goals removed", extra={"task_id": task_id, "periods": [p.value for p in removed]})
        return OperationResult.success(removed)

    def get_goals(self, task_id: str) -> dict[Period, int]:
        return dict(self._store.load_goals().get(task_id, {}))

    def all_goals(self) -> dict[str, dict[Period, int]]:
        return self._store.load_goals()

    def tasks_with_goals(self) -> list[TaskRecord]:
        tasks = self._store.load_tasks()
        return [tasks[task_id] for task_id, entries in self._store.load_goals().items() if entries and task_id in tasks]


__all__ = ["GoalChange", "GoalRegistry"]
