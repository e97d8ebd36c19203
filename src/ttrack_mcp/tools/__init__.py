"""Tool registration for the ttrack MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal

from fastmcp import FastMCP

from ..analytics import EXPORT_FORMATS, AnalyticsEngine, build_snapshot, render_snapshot
from ..config import TrackerSettings
from ..durations import format_duration, parse_duration
from ..goals import GoalRegistry
from ..periods import Period
from ..results import OperationResult
from ..storage import StoreProtocol, TaskRecord
from ..tracking import TaskStore, TimeTracker

logger = logging.getLogger(__name__)

PeriodName = Literal["daily", "weekly", "monthly", "yearly"]
_DEFAULT_DATES = {"", "today", "now", "current"}


@dataclass(slots=True)
class ToolHandles:
    create_task: Any
    list_tasks: Any
    delete_task: Any
    start_tracking: Any
    pause_tracking: Any
    resume_tracking: Any
    stop_tracking: Any
    tracking_status: Any
    set_goal: Any
    remove_goal: Any
    task_goals: Any
    goal_status: Any
    goal_streak: Any
    tasks_with_goals: Any
    analytics: Any
    task_summary: Any
    export_data: Any
    tasks: TaskStore
    tracker: TimeTracker
    goals: GoalRegistry
    engine: AnalyticsEngine


def resolve_reference_date(value: str | None) -> datetime | None:
    """Translate a boundary date option into a concrete moment.

    ``None`` and keywords such as ``today`` select the default (the current
    moment, resolved by the core); anything else must be an ISO date or
    datetime.
    """

    if value is None or value.strip().lower() in _DEFAULT_DATES:
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD or an ISO timestamp.") from exc


def _task_summary(task: TaskRecord) -> dict[str, Any]:
    return {
        "task_id": task.id,
        "created": task.created.isoformat(),
        "total_time": task.total_time,
        "total_time_display": format_duration(task.total_time),
        "session_count": len(task.sessions),
    }


def _respond(result: OperationResult[Any], render: Callable[[Any], dict[str, Any]]) -> dict[str, Any]:
    if not result.ok:
        return {"ok": False, "error": result.error.to_dict()}
    return {"ok": True, **render(result.value)}


def register_tools(
    server: FastMCP,
    *,
    settings: TrackerSettings,
    store: StoreProtocol,
    clock: Callable[[], datetime] | None = None,
) -> ToolHandles:
    """Register ttrack's MCP tools on the server."""

    clock = clock or datetime.now
    tasks = TaskStore(store, clock=clock)
    tracker = TimeTracker(store, clock=clock)
    goals = GoalRegistry(store)
    engine = AnalyticsEngine(store, clock=clock, streak_window=settings.streak_window)

    def _create_task(task_id: str) -> dict[str, Any]:
        """Create a task without starting the timer."""

        return _respond(tasks.create(task_id), lambda task: {"task": _task_summary(task)})

    def _list_tasks() -> dict[str, Any]:
        """List tasks, oldest first."""

        records = tasks.list()
        logger.debug("Listing tasks", extra={"count": len(records)})
        return {"tasks": [_task_summary(task) for task in records]}

    def _delete_task(task_id: str) -> dict[str, Any]:
        return _respond(
            tasks.delete(task_id),
            lambda task: {"message": f'Task "{task.id}" deleted successfully', "task": _task_summary(task)},
        )

    tool_create = server.tool(
        name="create_task",
        description="Create a named task (letters, digits, '-' and '_') without starting the timer.",
    )(_create_task)

    tool_list = server.tool(
        name="list_tasks",
        description="List all tasks with their total tracked time, oldest first.",
    )(_list_tasks)

    tool_delete = server.tool(
        name="delete_task",
        description="Delete a task together with its sessions and goals.",
    )(_delete_task)

    def _start_tracking(task_id: str) -> dict[str, Any]:
        """Start tracking, creating the task first when it does not exist yet."""

        created = False
        if not tasks.exists(task_id):
            creation = tasks.create(task_id)
            if not creation.ok:
                return _respond(creation, lambda _: {})
            created = True

        return _respond(
            tracker.start(task_id),
            lambda status: {
                "message": f'Started tracking "{task_id}"',
                "created_task": created,
                "status": status.to_dict(),
            },
        )

    def _pause_tracking() -> dict[str, Any]:
        return _respond(
            tracker.pause(),
            lambda status: {"message": f'Paused tracking "{status.current_task}"', "status": status.to_dict()},
        )

    def _resume_tracking() -> dict[str, Any]:
        return _respond(
            tracker.resume(),
            lambda status: {"message": f'Resumed tracking "{status.current_task}"', "status": status.to_dict()},
        )

    def _stop_tracking() -> dict[str, Any]:
        return _respond(
            tracker.stop(),
            lambda session: {
                "message": f'Stopped tracking "{session.task}"',
                "duration": session.duration,
                "duration_display": format_duration(session.duration),
                "session": session.model_dump(mode="json"),
            },
        )

    def _tracking_status() -> dict[str, Any]:
        status = tracker.status()
        payload = status.to_dict()
        payload["elapsed_display"] = format_duration(status.elapsed)
        return payload

    tool_start = server.tool(
        name="start_tracking",
        description="Start tracking time for a task. Missing tasks are created first.",
    )(_start_tracking)

    tool_pause = server.tool(
        name="pause_tracking",
        description="Pause the active tracking session; paused time is not counted.",
    )(_pause_tracking)

    tool_resume = server.tool(
        name="resume_tracking",
        description="Resume a paused tracking session.",
    )(_resume_tracking)

    tool_stop = server.tool(
        name="stop_tracking",
        description="Stop tracking and record the session against its task.",
    )(_stop_tracking)

    tool_status = server.tool(
        name="tracking_status",
        description="Report whether tracking is active, the current task, and elapsed time.",
    )(_tracking_status)

    def _set_goal(task_id: str, duration: str, period: PeriodName = "daily") -> dict[str, Any]:
        """Set a goal; ``duration`` uses the ``1h30m`` notation."""

        duration_ms = parse_duration(duration)
        if duration_ms is None:
            raise ValueError('Invalid duration format. Use format like "2h", "30m", "1h30m"')
        return _respond(
            goals.set_goal(task_id, period, duration_ms),
            lambda change: {
                "message": change.message,
                "created": change.created,
                "period": change.period.value,
                "goal_time": change.target,
            },
        )

    def _remove_goal(task_id: str, period: PeriodName | None = None) -> dict[str, Any]:
        def _render(removed: list[Period]) -> dict[str, Any]:
            if period is None:
                message = f'All goals removed for "{task_id}"'
            else:
                message = f'{removed[0].value.capitalize()} goal removed for "{task_id}"'
            return {"message": message, "task_id": task_id, "removed": [p.value for p in removed]}

        return _respond(goals.remove_goal(task_id, period), _render)

    def _task_goals(task_id: str) -> dict[str, Any]:
        entries = goals.get_goals(task_id)
        return {"task_id": task_id, "goals": {period.value: target for period, target in entries.items()}}

    def _goal_status(
        task_id: str | None = None,
        period: PeriodName | None = None,
        date: str | None = None,
    ) -> dict[str, Any]:
        """Goal progress for one goal, one task, or every task with goals."""

        reference = resolve_reference_date(date)
        if task_id is None:
            return {"overview": [status.to_dict() for status in engine.goals_overview(reference)]}
        if period is None:
            return engine.task_goal_status(task_id, reference).to_dict()
        return _respond(
            engine.goal_progress(task_id, period, reference),
            lambda progress: {"task_id": task_id, "progress": progress.to_dict()},
        )

    def _goal_streak(task_id: str, period: PeriodName = "daily", date: str | None = None) -> dict[str, Any]:
        return _respond(
            engine.goal_streak(task_id, period, resolve_reference_date(date)),
            lambda streak: {"task_id": task_id, "streak": streak.to_dict()},
        )

    def _tasks_with_goals() -> dict[str, Any]:
        return {"tasks": [_task_summary(task) for task in goals.tasks_with_goals()]}

    tool_set_goal = server.tool(
        name="set_goal",
        description="Set or update a daily, weekly, monthly or yearly time goal for a task.",
    )(_set_goal)

    tool_remove_goal = server.tool(
        name="remove_goal",
        description="Remove one goal period for a task, or all of its goals when no period is given.",
    )(_remove_goal)

    tool_task_goals = server.tool(
        name="task_goals",
        description="Return the configured goal targets for a task.",
    )(_task_goals)

    tool_goal_status = server.tool(
        name="goal_status",
        description="Show goal progress for a task and period, a whole task, or every task with goals.",
    )(_goal_status)

    tool_goal_streak = server.tool(
        name="goal_streak",
        description="Compute current and longest goal streaks over recent periods.",
    )(_goal_streak)

    tool_tasks_with_goals = server.tool(
        name="tasks_with_goals",
        description="List tasks that have at least one goal.",
    )(_tasks_with_goals)

    def _analytics(period: PeriodName = "daily", date: str | None = None) -> dict[str, Any]:
        """Period report for the interval containing ``date`` (default: now)."""

        report = engine.report(Period.parse(period), resolve_reference_date(date))
        logger.debug("Analytics report", extra={"period": period, "total_time": report.total_time})
        return report.to_dict()

    def _summary() -> dict[str, Any]:
        return engine.task_summary().to_dict()

    def _export_data(format: Literal["json", "yaml", "markdown"] = "json") -> dict[str, Any]:
        """Export tasks, goals and the lifetime summary."""

        if format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format. Use one of: {', '.join(EXPORT_FORMATS)}.")
        snapshot = build_snapshot(store.load_tasks(), store.load_goals(), engine.task_summary(), clock())
        logger.info("Exported data", extra={"format": format, "tasks": len(snapshot["tasks"])})
        return {"format": format, "data": render_snapshot(snapshot, format)}

    tool_analytics = server.tool(
        name="analytics",
        description=(
            "Daily, weekly, monthly or yearly time report. Pass date=YYYY-MM-DD for a past "
            "period; omit it for the current one."
        ),
    )(_analytics)

    tool_summary = server.tool(
        name="task_summary",
        description="Rank all tasks by lifetime tracked time with percentages and session counts.",
    )(_summary)

    tool_export = server.tool(
        name="export_data",
        description="Export tasks, sessions, goals and the summary as JSON, YAML or Markdown.",
    )(_export_data)

    return ToolHandles(
        create_task=tool_create,
        list_tasks=tool_list,
        delete_task=tool_delete,
        start_tracking=tool_start,
        pause_tracking=tool_pause,
        resume_tracking=tool_resume,
        stop_tracking=tool_stop,
        tracking_status=tool_status,
        set_goal=tool_set_goal,
        remove_goal=tool_remove_goal,
        task_goals=tool_task_goals,
        goal_status=tool_goal_status,
        goal_streak=tool_goal_streak,
        tasks_with_goals=tool_tasks_with_goals,
        analytics=tool_analytics,
        task_summary=tool_summary,
        export_data=tool_export,
        tasks=tasks,
        tracker=tracker,
        goals=goals,
        engine=engine,
    )


__all__ = ["ToolHandles", "register_tools", "resolve_reference_date"]
