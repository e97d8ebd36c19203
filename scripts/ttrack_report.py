"""ttrack reporting CLI: print reports and goal progress as JSON."""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path

from ttrack_mcp.analytics import AnalyticsEngine, build_snapshot, render_snapshot
from ttrack_mcp.config import TrackerSettings
from ttrack_mcp.goals import GoalRegistry
from ttrack_mcp.periods import Period
from ttrack_mcp.storage import JsonStore
from ttrack_mcp.tools import resolve_reference_date
from ttrack_mcp.tracking import TaskStore, TimeTracker


def load_store(settings: TrackerSettings) -> JsonStore:
    return JsonStore(Path(settings.data_dir).expanduser())


def _engine(settings: TrackerSettings) -> AnalyticsEngine:
    return AnalyticsEngine(load_store(settings), streak_window=settings.streak_window)


def _reference(value: str | None) -> datetime | None:
    try:
        return resolve_reference_date(value)
    except ValueError as exc:
        print(str(exc))
        raise SystemExit(2)


def cmd_status(args: argparse.Namespace) -> None:
    tracker = TimeTracker(load_store(TrackerSettings()))
    print(json.dumps(tracker.status().to_dict(), indent=2))


def cmd_tasks(args: argparse.Namespace) -> None:
    tasks = TaskStore(load_store(TrackerSettings())).list()
    if args.json:
        print(json.dumps([task.model_dump(mode="json", exclude={"sessions"}) for task in tasks], indent=2))
    else:
        for task in tasks:
            print(f"{task.id} [{task.total_time} ms] -> {len(task.sessions)} sessions")


def cmd_report(args: argparse.Namespace) -> None:
    """Print one period report; ``--weekly`` alone means this week, ``--weekly DATE`` that week."""

    engine = _engine(TrackerSettings())
    for period in Period:
        flag = getattr(args, period.value)
        if flag is not None:
            report = engine.report(period, _reference(flag))
            break
    else:
        report = engine.daily()
    print(json.dumps(report.to_dict(), indent=2))


def cmd_summary(args: argparse.Namespace) -> None:
    print(json.dumps(_engine(TrackerSettings()).task_summary().to_dict(), indent=2))


def cmd_goals(args: argparse.Namespace) -> None:
    settings = TrackerSettings()
    engine = _engine(settings)
    reference = _reference(args.date)

    if args.task_id is None:
        payload = [status.to_dict() for status in engine.goals_overview(reference)]
    else:
        payload = engine.task_goal_status(args.task_id, reference).to_dict()
        if args.streaks:
            goals = GoalRegistry(load_store(settings)).get_goals(args.task_id)
            payload["streaks"] = [
                engine.goal_streak(args.task_id, period, reference).unwrap().to_dict()
                for period in Period
                if period in goals
            ]
    print(json.dumps(payload, indent=2))


def cmd_export(args: argparse.Namespace) -> None:
    settings = TrackerSettings()
    store = load_store(settings)
    snapshot = build_snapshot(
        store.load_tasks(),
        store.load_goals(),
        _engine(settings).task_summary(),
        datetime.now(),
    )
    print(render_snapshot(snapshot, args.format))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ttrack reports")
    sub = parser.add_subparsers(dest="cmd")

    p_status = sub.add_parser("status", help="Show the current tracking state")
    p_status.set_defaults(func=cmd_status)

    p_tasks = sub.add_parser("tasks", help="List tasks")
    p_tasks.add_argument("--json", action="store_true", help="Output JSON")
    p_tasks.set_defaults(func=cmd_tasks)

    p_report = sub.add_parser("report", help="Show a daily/weekly/monthly/yearly report")
    group = p_report.add_mutually_exclusive_group()
    for period in Period:
        group.add_argument(
            f"--{period.value}",
            nargs="?",
            const="today",
            default=None,
            metavar="DATE",
            help=f"{period.value.capitalize()} report, optionally for the period containing DATE",
        )
    p_report.set_defaults(func=cmd_report)

    p_summary = sub.add_parser("summary", help="Rank tasks by lifetime tracked time")
    p_summary.set_defaults(func=cmd_summary)

    p_goals = sub.add_parser("goals", help="Show goal progress")
    p_goals.add_argument("--task-id")
    p_goals.add_argument("--date", default=None, help="Evaluate goals for the periods containing DATE")
    p_goals.add_argument("--streaks", action="store_true", help="Include streaks (requires --task-id)")
    p_goals.set_defaults(func=cmd_goals)

    p_export = sub.add_parser("export", help="Export all data")
    p_export.add_argument("--format", choices=["json", "yaml", "markdown"], default="json")
    p_export.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
