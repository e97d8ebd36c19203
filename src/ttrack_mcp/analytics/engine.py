"""Period-based aggregation of completed sessions.

A session is counted in an interval when its start time falls inside the
interval, bounds included. Sub-interval buckets are computed from the
sessions already selected for the parent interval, so bucket totals always
add up to the report total.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from ..periods import (
    Interval,
    Period,
    days_of_week,
    interval_for,
    months_of_year,
    step_back,
    weeks_of_month,
)
from ..results import OperationResult, invalid, not_found
from ..storage import SessionRecord, StoreProtocol, TaskMap
from .reports import (
    Bucket,
    GoalProgress,
    GoalStreak,
    PeriodReport,
    SummaryEntry,
    TaskBucket,
    TaskGoalStatus,
    TaskSummary,
)

logger = logging.getLogger(__name__)

_SUB_INTERVALS: dict[Period, Callable[[datetime], list[Interval]]] = {
    Period.DAILY: lambda reference: [],
    Period.WEEKLY: days_of_week,
    Period.MONTHLY: weeks_of_month,
    Period.YEARLY: months_of_year,
}


def percent(part: int, whole: int) -> int:
    """``part / whole`` as a whole percentage, halves rounded up; 0 when ``whole`` is 0."""

    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def collect_sessions(tasks: TaskMap) -> list[SessionRecord]:
    sessions: list[SessionRecord] = []
    for task in tasks.values():
        sessions.extend(task.sessions)
    return sessions


def filter_sessions(sessions: Iterable[SessionRecord], interval: Interval) -> list[SessionRecord]:
    return [session for session in sessions if interval.contains(session.start_time)]


def group_by_task(sessions: Iterable[SessionRecord]) -> list[TaskBucket]:
    """Group sessions per task, largest total first; ties keep encounter order."""

    grouped: dict[str, TaskBucket] = {}
    for session in sessions:
        bucket = grouped.get(session.task)
        if bucket is None:
            bucket = grouped[session.task] = TaskBucket(name=session.task)
        bucket.total_time += session.duration
        bucket.sessions.append(session)
    return sorted(grouped.values(), key=lambda bucket: -bucket.total_time)


def _bucket(sessions: list[SessionRecord], interval: Interval) -> Bucket:
    selected = filter_sessions(sessions, interval)
    return Bucket(
        start=interval.start,
        end=interval.end,
        total_time=sum(session.duration for session in selected),
        tasks=group_by_task(selected),
    )


class AnalyticsEngine:
    """Reports, rankings and goal evaluation over the stored sessions."""

    def __init__(
        self,
        store: StoreProtocol,
        *,
        clock: Callable[[], datetime] | None = None,
        streak_window: int = 30,
    ) -> None:
        self._store = store
        self._clock = clock or datetime.now
        self._streak_window = streak_window

    def _label(self, period: Period, interval: Interval, now: datetime) -> str:
        current = interval.contains(now)
        start = interval.start
        if period is Period.DAILY:
            return "today" if current else start.strftime("%Y-%m-%d")
        if period is Period.WEEKLY:
            return "this week" if current else f"week of {start:%b} {start.day}, {start.year}"
        if period is Period.MONTHLY:
            return "this month" if current else start.strftime("%Y-%m")
        return "this year" if current else str(start.year)

    def report(self, period: Period | str, reference: datetime | None = None) -> PeriodReport:
        """Totals for the ``period`` instance containing ``reference`` (default: now)."""

        period = Period.parse(period)
        now = self._clock()
        reference = reference or now
        interval = interval_for(period, reference)

        selected = filter_sessions(collect_sessions(self._store.load_tasks()), interval)
        tasks = group_by_task(selected)
        breakdown = [_bucket(selected, sub) for sub in _SUB_INTERVALS[period](reference)]

        logger.debug(
            "Built report",
            extra={"period": period.value, "sessions": len(selected), "start": interval.start.isoformat()},
        )
        return PeriodReport(
            period=period,
            label=self._label(period, interval, now),
            start=interval.start,
            end=interval.end,
            total_time=sum(task.total_time for task in tasks),
            tasks=tasks,
            breakdown=breakdown,
        )

    def daily(self, reference: datetime | None = None) -> PeriodReport:
        return self.report(Period.DAILY, reference)

    def weekly(self, reference: datetime | None = None) -> PeriodReport:
        return self.report(Period.WEEKLY, reference)

    def monthly(self, reference: datetime | None = None) -> PeriodReport:
        return self.report(Period.MONTHLY, reference)

    def yearly(self, reference: datetime | None = None) -> PeriodReport:
        return self.report(Period.YEARLY, reference)

    def task_summary(self) -> TaskSummary:
        """Lifetime ranking of every task with its share of the grand total."""

        tasks = list(self._store.load_tasks().values())
        grand_total = sum(task.total_time for task in tasks)
        entries = [
            SummaryEntry(
                name=task.name,
                total_time=task.total_time,
                percentage=percent(task.total_time, grand_total),
                session_count=len(task.sessions),
            )
            for task in tasks
        ]
        entries.sort(key=lambda entry: -entry.total_time)
        return TaskSummary(tasks=entries, total_time_all_tasks=grand_total)

    def _actual_time(self, tasks: TaskMap, task_id: str, period: Period, reference: datetime) -> int:
        task = tasks.get(task_id)
        if task is None:
            return 0
        interval = interval_for(period, reference)
        return sum(session.duration for session in filter_sessions(task.sessions, interval))

    def actual_time(self, task_id: str, period: Period | str, reference: datetime | None = None) -> int:
        return self._actual_time(
            self._store.load_tasks(), task_id, Period.parse(period), reference or self._clock()
        )

    def goal_progress(
        self,
        task_id: str,
        period: Period | str,
        reference: datetime | None = None,
    ) -> OperationResult[GoalProgress]:
        try:
            period = Period.parse(period)
        except ValueError as exc:
            return invalid("invalid_period", str(exc))

        goal_time = self._store.load_goals().get(task_id, {}).get(period)
        if goal_time is None:
            return not_found("no_goal", f'No {period.value} goal set for "{task_id}"')

        actual = self._actual_time(self._store.load_tasks(), task_id, period, reference or self._clock())
        return OperationResult.success(
            GoalProgress(
                period=period,
                goal_time=goal_time,
                actual_time=actual,
                percentage=percent(actual, goal_time),
                is_achieved=actual >= goal_time,
                remaining_time=max(0, goal_time - actual),
                over_time=max(0, actual - goal_time),
            )
        )

    def task_goal_status(self, task_id: str, reference: datetime | None = None) -> TaskGoalStatus:
        goals = self._store.load_goals().get(task_id, {})
        progress = [self.goal_progress(task_id, period, reference) for period in Period if period in goals]
        return TaskGoalStatus(task_id=task_id, goals=[result.value for result in progress if result.ok])

    def goals_overview(self, reference: datetime | None = None) -> list[TaskGoalStatus]:
        return [self.task_goal_status(task_id, reference) for task_id in self._store.load_goals()]

    def goal_streak(
        self,
        task_id: str,
        period: Period | str,
        reference: datetime | None = None,
    ) -> OperationResult[GoalStreak]:
        """Achievement streaks over the most recent ``streak_window`` period instances.

        Instances are visited newest first. With no goal set every count is 0.
        """

        try:
            period = Period.parse(period)
        except ValueError as exc:
            return invalid("invalid_period", str(exc))

        goal_time = self._store.load_goals().get(task_id, {}).get(period)
        if goal_time is None:
            return OperationResult.success(GoalStreak(period=period, window=self._streak_window))

        tasks = self._store.load_tasks()
        reference = reference or self._clock()
        achieved = [
            self._actual_time(tasks, task_id, period, step_back(period, reference, steps)) >= goal_time
            for steps in range(self._streak_window)
        ]

        current = 0
        for hit in achieved:
            if not hit:
                break
            current += 1

        longest = run = 0
        for hit in achieved:
            run = run + 1 if hit else 0
            longest = max(longest, run)

        return OperationResult.success(
            GoalStreak(
                period=period,
                current_streak=current,
                longest_streak=longest,
                total_achieved=sum(achieved),
                window=self._streak_window,
            )
        )


__all__ = [
    "AnalyticsEngine",
    "collect_sessions",
    "filter_sessions",
    "group_by_task",
    "percent",
]
