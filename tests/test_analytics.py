from __future__ import annotations

from datetime import datetime

import pytest

from ttrack_mcp.analytics import AnalyticsEngine, percent
from ttrack_mcp.goals import GoalRegistry
from ttrack_mcp.periods import Period
from ttrack_mcp.results import ErrorKind
from ttrack_mcp.tracking import TaskStore

HOUR = 60 * 60 * 1000
MINUTE = 60 * 1000


@pytest.fixture
def engine(store, clock) -> AnalyticsEngine:
    return AnalyticsEngine(store, clock=clock)


def test_weekly_example(engine, seed) -> None:
    seed("coding", datetime(2025, 1, 13, 9), 120)
    seed("coding", datetime(2025, 1, 15, 9), 180)
    seed("coding", datetime(2025, 1, 17, 9), 60)

    report = engine.weekly()

    assert report.label == "this week"
    assert report.total_time == 6 * HOUR
    assert [day.total_time for day in report.breakdown] == [2 * HOUR, 0, 3 * HOUR, 0, 1 * HOUR, 0, 0]
    assert [task.name for task in report.tasks] == ["coding"]


def test_daily_groups_and_ranks_tasks(engine, seed) -> None:
    seed("coding", datetime(2025, 1, 15, 8), 60)
    seed("work", datetime(2025, 1, 15, 10), 120)
    seed("coding", datetime(2025, 1, 15, 14), 30)
    seed("work", datetime(2025, 1, 14, 10), 300)

    report = engine.daily()

    assert report.label == "today"
    assert report.total_time == 210 * MINUTE
    assert [(task.name, task.total_time) for task in report.tasks] == [
        ("work", 120 * MINUTE),
        ("coding", 90 * MINUTE),
    ]
    assert len(report.tasks[1].sessions) == 2
    assert report.breakdown == []


def test_ties_keep_encounter_order(engine, seed) -> None:
    seed("alpha", datetime(2025, 1, 15, 8), 30)
    seed("beta", datetime(2025, 1, 15, 9), 30)

    assert [task.name for task in engine.daily().tasks] == ["alpha", "beta"]


def test_interval_bounds_are_inclusive(engine, seed) -> None:
    seed("coding", datetime(2025, 1, 15, 0, 0), 10)
    seed("coding", datetime(2025, 1, 15, 23, 59, 59, 999000), 10)
    seed("coding", datetime(2025, 1, 16, 0, 0), 10)

    assert engine.daily().total_time == 20 * MINUTE


def test_past_day_label(engine, seed) -> None:
    seed("coding", datetime(2025, 1, 13, 9), 90)

    report = engine.daily(datetime(2025, 1, 13))

    assert report.label == "2025-01-13"
    assert report.total_time == 90 * MINUTE


def test_monthly_breakdown_is_additive(engine, seed) -> None:
    seed("coding", datetime(2024, 12, 31, 9), 600)  # same week, previous month
    seed("coding", datetime(2025, 1, 2, 9), 60)
    seed("coding", datetime(2025, 1, 14, 9), 30)
    seed("reading", datetime(2025, 1, 31, 20), 45)

    report = engine.monthly(datetime(2025, 1, 20))

    assert report.label == "this month"
    assert report.total_time == 135 * MINUTE
    assert [week.total_time for week in report.breakdown] == [60 * MINUTE, 0, 30 * MINUTE, 0, 45 * MINUTE]
    assert sum(week.total_time for week in report.breakdown) == report.total_time
    assert sum(task.total_time for task in report.tasks) == report.total_time


def test_yearly_breakdown(engine, seed) -> None:
    seed("coding", datetime(2024, 3, 3, 9), 60)
    seed("coding", datetime(2024, 3, 20, 9), 60)
    seed("coding", datetime(2024, 11, 5, 9), 30)
    seed("coding", datetime(2025, 1, 5, 9), 30)

    report = engine.yearly(datetime(2024, 6, 1))

    assert report.label == "2024"
    assert len(report.breakdown) == 12
    assert report.breakdown[2].total_time == 2 * HOUR
    assert report.breakdown[10].total_time == 30 * MINUTE
    assert sum(month.total_time for month in report.breakdown) == report.total_time == 150 * MINUTE


def test_labels_for_past_periods(engine) -> None:
    assert engine.weekly(datetime(2025, 1, 8)).label == "week of Jan 6, 2025"
    assert engine.monthly(datetime(2024, 11, 3)).label == "2024-11"
    assert engine.yearly().label == "this year"


def test_report_serializes_breakdown_key(engine, seed) -> None:
    seed("coding", datetime(2025, 1, 15, 9), 60)

    payload = engine.weekly().to_dict()

    assert len(payload["daily_breakdown"]) == 7
    assert payload["tasks"][0]["sessions"][0]["duration"] == HOUR
    assert "monthly_breakdown" in engine.yearly().to_dict()


def test_task_summary(engine, store, clock, seed) -> None:
    seed("coding", datetime(2025, 1, 10, 9), 180)
    seed("reading", datetime(2025, 1, 11, 9), 60)
    seed("coding", datetime(2025, 1, 12, 9), 0)
    TaskStore(store, clock=clock).create("idle")

    summary = engine.task_summary()

    assert summary.total_time_all_tasks == 4 * HOUR
    assert [(e.name, e.percentage, e.session_count) for e in summary.tasks] == [
        ("coding", 75, 2),
        ("reading", 25, 1),
        ("idle", 0, 0),
    ]


def test_task_summary_empty(engine, store, clock) -> None:
    assert engine.task_summary().tasks == []

    TaskStore(store, clock=clock).create("fresh")

    summary = engine.task_summary()
    assert summary.total_time_all_tasks == 0
    assert summary.tasks[0].percentage == 0


def test_percent_rounds_half_up() -> None:
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0


@pytest.fixture
def goals(store, clock) -> GoalRegistry:
    TaskStore(store, clock=clock).create("coding")
    return GoalRegistry(store)


def test_goal_progress_partial(engine, goals, seed) -> None:
    goals.set_goal("coding", "daily", 4 * HOUR)
    seed("coding", datetime(2025, 1, 15, 9), 60)

    progress = engine.goal_progress("coding", "daily").value

    assert progress.goal_time == 4 * HOUR
    assert progress.actual_time == HOUR
    assert progress.percentage == 25
    assert not progress.is_achieved
    assert progress.remaining_time == 3 * HOUR
    assert progress.over_time == 0


def test_goal_progress_exceeded(engine, goals, seed) -> None:
    goals.set_goal("coding", "daily", 2 * HOUR)
    seed("coding", datetime(2025, 1, 15, 8), 120)
    seed("coding", datetime(2025, 1, 15, 13), 60)

    progress = engine.goal_progress("coding", Period.DAILY).value

    assert progress.percentage == 150
    assert progress.is_achieved
    assert progress.remaining_time == 0
    assert progress.over_time == HOUR


def test_goal_progress_without_goal(engine, goals) -> None:
    result = engine.goal_progress("coding", "weekly")

    assert not result.ok
    assert result.error.reason == "no_goal"
    assert result.error.kind is ErrorKind.NOT_FOUND


def test_goal_progress_invalid_period(engine, goals) -> None:
    assert engine.goal_progress("coding", "fortnightly").error.reason == "invalid_period"


def test_goal_progress_for_reference_date(engine, goals, seed) -> None:
    goals.set_goal("coding", "weekly", 2 * HOUR)
    seed("coding", datetime(2025, 1, 7, 9), 150)

    assert engine.goal_progress("coding", "weekly").value.actual_time == 0
    assert engine.goal_progress("coding", "weekly", datetime(2025, 1, 9)).value.is_achieved


def test_actual_time_counts_only_the_task_and_interval(engine, goals, seed) -> None:
    seed("coding", datetime(2025, 1, 15, 9), 45)
    seed("coding", datetime(2025, 1, 13, 9), 30)
    seed("reading", datetime(2025, 1, 15, 10), 20)

    assert engine.actual_time("coding", "daily") == 45 * MINUTE
    assert engine.actual_time("coding", Period.WEEKLY) == 75 * MINUTE
    assert engine.actual_time("coding", "daily", datetime(2025, 1, 13)) == 30 * MINUTE
    assert engine.actual_time("ghost", "yearly") == 0


def test_task_goal_status_and_overview(engine, goals, seed) -> None:
    goals.set_goal("coding", "weekly", 10 * HOUR)
    goals.set_goal("coding", "daily", HOUR)
    seed("coding", datetime(2025, 1, 15, 9), 30)

    status = engine.task_goal_status("coding")

    assert [goal.period for goal in status.goals] == [Period.DAILY, Period.WEEKLY]
    assert status.goals[0].percentage == 50
    assert [entry.task_id for entry in engine.goals_overview()] == ["coding"]


def test_daily_streak(engine, goals, seed) -> None:
    goals.set_goal("coding", "daily", HOUR)
    for day in (15, 14, 13, 11, 10):
        seed("coding", datetime(2025, 1, day, 9), 60)
    seed("coding", datetime(2025, 1, 12, 9), 59)

    streak = engine.goal_streak("coding", "daily").value

    assert streak.current_streak == 3
    assert streak.longest_streak == 3
    assert streak.total_achieved == 5
    assert streak.window == 30


def test_streak_broken_today(engine, goals, seed) -> None:
    goals.set_goal("coding", "daily", HOUR)
    for day in (14, 13, 12, 11):
        seed("coding", datetime(2025, 1, day, 9), 60)

    streak = engine.goal_streak("coding", "daily").value

    assert streak.current_streak == 0
    assert streak.longest_streak == 4
    assert streak.total_achieved == 4


def test_streak_ignores_sessions_outside_window(store, clock, goals, seed) -> None:
    engine = AnalyticsEngine(store, clock=clock, streak_window=3)
    goals.set_goal("coding", "weekly", HOUR)
    seed("coding", datetime(2025, 1, 14, 9), 60)
    seed("coding", datetime(2024, 12, 2, 9), 60)

    streak = engine.goal_streak("coding", "weekly").value

    assert (streak.current_streak, streak.longest_streak, streak.total_achieved) == (1, 1, 1)


def test_monthly_streak_steps_by_calendar_month(store, goals, seed) -> None:
    engine = AnalyticsEngine(store, clock=lambda: datetime(2025, 3, 31, 18))
    goals.set_goal("coding", "monthly", HOUR)
    seed("coding", datetime(2025, 3, 5, 9), 60)
    seed("coding", datetime(2025, 2, 10, 9), 60)
    seed("coding", datetime(2025, 1, 20, 9), 60)

    streak = engine.goal_streak("coding", "monthly").value

    assert streak.current_streak == 3
    assert streak.total_achieved == 3


def test_streak_without_goal_is_zero(engine, goals) -> None:
    streak = engine.goal_streak("coding", "yearly").value

    assert (streak.current_streak, streak.longest_streak, streak.total_achieved) == (0, 0, 0)
