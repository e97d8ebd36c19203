from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from ttrack_mcp.storage import JsonStore, SessionRecord, TaskRecord

# Wednesday; the surrounding week runs Monday 2025-01-13 to Sunday 2025-01-19.
NOW = datetime(2025, 1, 15, 12, 0)
HOUR = 60 * 60 * 1000
MINUTE = 60 * 1000


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def store(tmp_path: Path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture
def seed(store: JsonStore):
    """Append a finished session of ``minutes`` starting at ``start`` to ``task_id``."""

    def _seed(task_id: str, start: datetime, minutes: int) -> None:
        tasks = store.load_tasks()
        task = tasks.get(task_id) or TaskRecord(id=task_id, created=datetime(2024, 1, 1) + timedelta(seconds=len(tasks)))
        session = SessionRecord(
            task=task_id,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            duration=minutes * MINUTE,
        )
        tasks[task_id] = task.with_session(session)
        store.save_tasks(tasks)

    return _seed
