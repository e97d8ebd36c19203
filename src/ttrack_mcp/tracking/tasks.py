"""Task records: creation, lookup, listing and deletion."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable

from ..results import OperationResult, conflict, invalid, not_found
from ..storage import StoreProtocol, TaskRecord, TrackingState

logger = logging.getLogger(__name__)

_TASK_NAME = re.compile(r"[A-Za-z0-9_-]+")


def is_valid_task_name(name: object) -> bool:
    return isinstance(name, str) and _TASK_NAME.fullmatch(name) is not None


class TaskStore:
    """CRUD over the task collection; each call is one load-modify-save."""

    def __init__(
        self,
        store: StoreProtocol,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or datetime.now

    def create(self, name: str) -> OperationResult[TaskRecord]:
        if not isinstance(name, str) or not name.strip():
            return invalid("empty_name", "Task name cannot be empty")
        if not is_valid_task_name(name):
            return invalid(
                "invalid_name",
                "Task name can only contain letters, numbers, hyphens, and underscores",
            )

        tasks = self._store.load_tasks()
        if name in tasks:
            return conflict("task_exists", f'Task "{name}" already exists')

        task = TaskRecord(id=name, created=self._clock())
        tasks[name] = task
        self._store.save_tasks(tasks)
        logger.info("Created task", extra={"task_id": name})
        return OperationResult.success(task)

    def get(self, name: str) -> TaskRecord | None:
        return self._store.load_tasks().get(name)

    def exists(self, name: str) -> bool:
        return self.get(name) is not None

    def list(self) -> list[TaskRecord]:
        """All tasks, oldest first."""

        return sorted(self._store.load_tasks().values(), key=lambda task: task.created)

    def delete(self, name: str) -> OperationResult[TaskRecord]:
        """Remove a task along with its goals.

        Deleting the task that is currently being tracked also returns the
        tracker to idle.
        """

        tasks = self._store.load_tasks()
        task = tasks.pop(name, None)
        if task is None:
            return not_found("task_not_found", f'Task "{name}" does not exist')

        self._store.save_tasks(tasks)

        goals = self._store.load_goals()
        if goals.pop(name, None) is not None:
            self._store.save_goals(goals)

        tracking = self._store.load_tracking()
        if tracking.current_task == name:
            self._store.save_tracking(TrackingState.idle())
            logger.warning("Deleted task was being tracked; tracking reset", extra={"task_id": name})

        logger.info("Deleted task", extra={"task_id": name, "sessions": len(task.sessions)})
        return OperationResult.success(task)


__all__ = ["TaskStore", "is_valid_task_name"]
