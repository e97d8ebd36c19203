"""Aggregation, goal evaluation and export."""

from .engine import AnalyticsEngine, filter_sessions, group_by_task, percent
from .export import EXPORT_FORMATS, build_snapshot, render_snapshot
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

__all__ = [
    "AnalyticsEngine",
    "Bucket",
    "EXPORT_FORMATS",
    "GoalProgress",
    "GoalStreak",
    "PeriodReport",
    "SummaryEntry",
    "TaskBucket",
    "TaskGoalStatus",
    "TaskSummary",
    "build_snapshot",
    "filter_sessions",
    "group_by_task",
    "percent",
    "render_snapshot",
]
