"""Snapshot export of tasks, goals and the lifetime summary."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Literal

import yaml

from ..durations import format_duration
from ..storage import GoalMap, TaskMap
from .reports import TaskSummary

ExportFormat = Literal["json", "yaml", "markdown"]
EXPORT_FORMATS: tuple[str, ...] = ("json", "yaml", "markdown")


def build_snapshot(tasks: TaskMap, goals: GoalMap, summary: TaskSummary, now: datetime) -> dict[str, Any]:
    return {
        "exported_at": now.isoformat(),
        "tasks": [task.model_dump(mode="json") for task in tasks.values()],
        "goals": {
            task_id: {period.value: target for period, target in entries.items()}
            for task_id, entries in goals.items()
        },
        "summary": summary.to_dict(),
    }


def _markdown(snapshot: dict[str, Any]) -> str:
    lines = [f"# Time tracking export ({snapshot['exported_at']})", ""]
    summary = snapshot["summary"]
    lines.append(f"Total time across all tasks: {format_duration(summary['total_time_all_tasks'])}")
    lines.append("")
    lines.append("## Tasks")
    for entry in summary["tasks"]:
        lines.append(
            f"- {entry['name']}: {format_duration(entry['total_time'])} "
            f"({entry['percentage']}%, {entry['session_count']} sessions)"
        )
    if snapshot["goals"]:
        lines.append("")
        lines.append("## Goals")
        for task_id, entries in snapshot["goals"].items():
            targets = ", ".join(f"{period} {format_duration(target)}" for period, target in entries.items())
            lines.append(f"- {task_id}: {targets}")
    for task in snapshot["tasks"]:
        if not task["sessions"]:
            continue
        lines.append("")
        lines.append(f"## Sessions: {task['id']}")
        for session in task["sessions"]:
            lines.append(
                f"- {session['start_time']} -> {session['end_time']} "
                f"({format_duration(session['duration'])})"
            )
    return "\n".join(lines)


def render_snapshot(snapshot: dict[str, Any], fmt: str) -> str:
    """Render ``snapshot`` as ``json``, ``yaml`` or ``markdown``."""

    if fmt == "json":
        return json.dumps(snapshot, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(snapshot, sort_keys=False)
    if fmt == "markdown":
        return _markdown(snapshot)
    raise ValueError(f"Unsupported export format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}.")


__all__ = ["EXPORT_FORMATS", "ExportFormat", "build_snapshot", "render_snapshot"]
