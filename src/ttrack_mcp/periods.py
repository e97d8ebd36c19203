"""Calendar periods and the intervals they map to.

Every period resolves a reference moment to a closed ``Interval``. Bounds are
inclusive on both ends; the end of an interval is the last representable
microsecond before the next one starts.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Callable


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: "str | Period") -> "Period":
        """Return the matching period, raising ``ValueError`` for anything else."""

        if isinstance(value, Period):
            return value
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError) as exc:
            valid = ", ".join(period.value for period in cls)
            raise ValueError(f"Invalid period '{value}'. Use: {valid}") from exc


@dataclass(slots=True, frozen=True)
class Interval:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


def start_of_day(moment: datetime | date) -> datetime:
    return datetime.combine(_as_date(moment), time.min)


def end_of_day(moment: datetime | date) -> datetime:
    return datetime.combine(_as_date(moment), time.max)


def _as_date(moment: datetime | date) -> date:
    return moment.date() if isinstance(moment, datetime) else moment


def day_interval(reference: datetime) -> Interval:
    return Interval(start_of_day(reference), end_of_day(reference))


def week_interval(reference: datetime) -> Interval:
    """Monday through Sunday of the week containing ``reference``."""

    monday = _as_date(reference) - timedelta(days=reference.weekday())
    return Interval(start_of_day(monday), end_of_day(monday + timedelta(days=6)))


def month_interval(reference: datetime) -> Interval:
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return Interval(
        start_of_day(date(reference.year, reference.month, 1)),
        end_of_day(date(reference.year, reference.month, last_day)),
    )


def year_interval(reference: datetime) -> Interval:
    return Interval(
        start_of_day(date(reference.year, 1, 1)),
        end_of_day(date(reference.year, 12, 31)),
    )


_INTERVALS: dict[Period, Callable[[datetime], Interval]] = {
    Period.DAILY: day_interval,
    Period.WEEKLY: week_interval,
    Period.MONTHLY: month_interval,
    Period.YEARLY: year_interval,
}


def interval_for(period: Period, reference: datetime) -> Interval:
    """Canonical interval of ``period`` that contains ``reference``."""

    return _INTERVALS[Period.parse(period)](reference)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift by whole calendar months, clamping the day to the target month's length."""

    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def step_back(period: Period, reference: datetime, steps: int) -> datetime:
    """Move ``reference`` back by ``steps`` units of ``period``."""

    period = Period.parse(period)
    if period is Period.DAILY:
        return reference - timedelta(days=steps)
    if period is Period.WEEKLY:
        return reference - timedelta(days=7 * steps)
    if period is Period.MONTHLY:
        return add_months(reference, -steps)
    return add_months(reference, -12 * steps)


def days_of_week(reference: datetime) -> list[Interval]:
    week = week_interval(reference)
    return [day_interval(week.start + timedelta(days=offset)) for offset in range(7)]


def weeks_of_month(reference: datetime) -> list[Interval]:
    """Monday-aligned weeks that overlap the month containing ``reference``."""

    month = month_interval(reference)
    weeks: list[Interval] = []
    cursor = week_interval(month.start).start
    while cursor <= month.end:
        weeks.append(week_interval(cursor))
        cursor += timedelta(days=7)
    return weeks


def months_of_year(reference: datetime) -> list[Interval]:
    return [month_interval(datetime(reference.year, month, 1)) for month in range(1, 13)]


__all__ = [
    "Interval",
    "Period",
    "add_months",
    "day_interval",
    "days_of_week",
    "end_of_day",
    "interval_for",
    "month_interval",
    "months_of_year",
    "start_of_day",
    "step_back",
    "week_interval",
    "weeks_of_month",
    "year_interval",
]
