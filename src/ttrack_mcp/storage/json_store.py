"""JSON-file persistence layer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from .models import GOALS_ADAPTER, TASKS_ADAPTER, GoalMap, TaskMap, TrackingState

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.json"
TRACKING_FILE = "tracking.json"
GOALS_FILE = "goals.json"

_TRACKING_ADAPTER: TypeAdapter[TrackingState] = TypeAdapter(TrackingState)


class StoreProtocol(Protocol):
    """Load/save contract for the three collections the tracker persists."""

    def load_tasks(self) -> TaskMap:
        ...

    def save_tasks(self, tasks: TaskMap) -> None:
        ...

    def load_tracking(self) -> TrackingState:
        ...

    def save_tracking(self, tracking: TrackingState) -> None:
        ...

    def load_goals(self) -> GoalMap:
        ...

    def save_goals(self, goals: GoalMap) -> None:
        ...


class JsonStore:
    """Persist tasks, tracking state and goals as JSON files in one directory.

    Unreadable or invalid files load as empty defaults so a corrupted file
    never locks the user out; the problem is logged instead.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_dir(self) -> Path:
        self._path.mkdir(parents=True, exist_ok=True)
        return self._path

    def _read(self, filename: str) -> bytes | None:
        path = self._ensure_dir() / filename
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Unable to read store file", extra={"path": str(path), "error": str(exc)})
            return None
        return raw if raw.strip() else None

    def _write(self, filename: str, payload: bytes) -> None:
        path = self._ensure_dir() / filename
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(payload)
        tmp.replace(path)

    def _load(self, filename: str, adapter: TypeAdapter, default):
        raw = self._read(filename)
        if raw is None:
            return default()
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Store file is corrupt; falling back to defaults",
                extra={"file": filename, "errors": exc.error_count()},
            )
            return default()

    def load_tasks(self) -> TaskMap:
        return self._load(TASKS_FILE, TASKS_ADAPTER, dict)

    def save_tasks(self, tasks: TaskMap) -> None:
        self._write(TASKS_FILE, TASKS_ADAPTER.dump_json(tasks, indent=2))

    def load_tracking(self) -> TrackingState:
        return self._load(TRACKING_FILE, _TRACKING_ADAPTER, TrackingState.idle)

    def save_tracking(self, tracking: TrackingState) -> None:
        self._write(TRACKING_FILE, _TRACKING_ADAPTER.dump_json(tracking, indent=2))

    def load_goals(self) -> GoalMap:
        return self._load(GOALS_FILE, GOALS_ADAPTER, dict)

    def save_goals(self, goals: GoalMap) -> None:
        self._write(GOALS_FILE, GOALS_ADAPTER.dump_json(goals, indent=2))


class MemoryStore:
    """Volatile store with the same contract, for embedding and tests."""

    def __init__(self) -> None:
        self.tasks: TaskMap = {}
        self.tracking = TrackingState.idle()
        self.goals: GoalMap = {}

    def load_tasks(self) -> TaskMap:
        return TASKS_ADAPTER.validate_python(TASKS_ADAPTER.dump_python(self.tasks))

    def save_tasks(self, tasks: TaskMap) -> None:
        self.tasks = dict(tasks)

    def load_tracking(self) -> TrackingState:
        return self.tracking.model_copy()

    def save_tracking(self, tracking: TrackingState) -> None:
        self.tracking = tracking

    def load_goals(self) -> GoalMap:
        return {task_id: dict(goals) for task_id, goals in self.goals.items()}

    def save_goals(self, goals: GoalMap) -> None:
        self.goals = {task_id: dict(entries) for task_id, entries in goals.items()}


__all__ = [
    "GOALS_FILE",
    "JsonStore",
    "MemoryStore",
    "StoreProtocol",
    "TASKS_FILE",
    "TRACKING_FILE",
]
