"""Statistics derived from an attendance record set.

Every function here is pure and total: empty inputs produce zeros (or the
documented "no data" defaults) instead of raising. "Today" is always passed
in explicitly. Percentages are integers rounded half-up.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import round_half_up
from ..core.enums import MarkStatus
from .store import LocalAttendanceStore


@dataclass(frozen=True)
class DayCounts:
    work_date: Optional[date]
    present: int
    absent: int
    not_marked: int

    @property
    def total(self) -> int:
        return self.present + self.absent + self.not_marked

    @property
    def percentage(self) -> int:
        return percentage(self.present, self.total)


@dataclass(frozen=True)
class DayPercentage:
    """A day and its present-rate; ``work_date`` is None when there is no data."""

    work_date: Optional[date]
    percentage: int
    present: int = 0

    @property
    def has_data(self) -> bool:
        return self.work_date is not None


NO_BEST_DAY = DayPercentage(work_date=None, percentage=0)
NO_WORST_DAY = DayPercentage(work_date=None, percentage=100)


@dataclass(frozen=True)
class ChartRow:
    work_date: date
    present: int
    absent: int
    not_marked: int


@dataclass(frozen=True)
class WeeklySummary:
    total_subjects: int
    weekly_average: int
    best_day: DayPercentage
    worst_day: DayPercentage
    consistency_score: int
    day_percentages: tuple[DayPercentage, ...]
    chart_rows: tuple[ChartRow, ...]


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


def count_statuses(statuses: Iterable[MarkStatus], work_date: Optional[date] = None) -> DayCounts:
    """Count one cell per subject; leave and unmarked cells count as not marked."""
    present = absent = other = 0
    for s in statuses:
        if s == MarkStatus.PRESENT:
            present += 1
        elif s == MarkStatus.ABSENT:
            absent += 1
        else:
            other += 1
    return DayCounts(work_date=work_date, present=present, absent=absent, not_marked=other)


def day_counts(store: LocalAttendanceStore, subject_ids: Sequence[str], work_date: date) -> DayCounts:
    return count_statuses((store.mark_for(s, work_date) for s in subject_ids), work_date)


def cohort_day_counts(store: LocalAttendanceStore, subject_ids: Sequence[str], days: Iterable[date]) -> list[DayCounts]:
    return [day_counts(store, subject_ids, d) for d in days]


def relevant_days(counts: Sequence[DayCounts], today: date) -> list[DayCounts]:
    """Days up to and including today; later days have not happened yet."""
    return [c for c in counts if c.work_date is not None and c.work_date <= today]


def day_percentages(counts: Sequence[DayCounts], total_subjects: int) -> list[DayPercentage]:
    return [
        DayPercentage(work_date=c.work_date, percentage=percentage(c.present, total_subjects), present=c.present)
        for c in counts
    ]


def weekly_average(counts: Sequence[DayCounts], *, today: date, total_subjects: int) -> int:
    relevant = relevant_days(counts, today)
    total_present = sum(c.present for c in relevant)
    return percentage(total_present, len(relevant) * total_subjects)


def best_day(days: Sequence[DayPercentage]) -> DayPercentage:
    """Highest percentage; days are in date order and the earliest wins ties.

    The fold starts from `NO_BEST_DAY`, so a period where every day is at 0%
    reports no best day.
    """
    best = NO_BEST_DAY
    for d in days:
        if d.percentage > best.percentage:
            best = d
    return best


def worst_day(days: Sequence[DayPercentage]) -> DayPercentage:
    worst = NO_WORST_DAY
    for d in days:
        if d.percentage < worst.percentage:
            worst = d
    return worst


def consistency_score(days: Sequence[DayPercentage]) -> int:
    """100 minus the standard deviation of the daily percentages, floored at 0."""
    if not days:
        return 0
    values = [d.percentage for d in days]
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return max(0, round_half_up(100 - math.sqrt(variance)))


def subject_week_percentage(statuses: Iterable[MarkStatus]) -> int:
    """Present days over days with any recorded status."""
    marked = [s for s in statuses if s != MarkStatus.NOT_MARKED]
    present = sum(1 for s in marked if s == MarkStatus.PRESENT)
    return percentage(present, len(marked))


def chart_rows(counts: Sequence[DayCounts], *, today: date) -> list[ChartRow]:
    rows = []
    for c in counts:
        if c.work_date is None:
            continue
        rows.append(
            ChartRow(
                work_date=c.work_date,
                present=c.present,
                absent=c.absent,
                not_marked=0 if c.work_date > today else c.not_marked,
            )
        )
    return rows


def summarize_week(
    counts: Sequence[DayCounts],
    *,
    today: date,
    total_subjects: Optional[int] = None,
) -> WeeklySummary:
    if total_subjects is None:
        total_subjects = counts[0].total if counts else 0

    relevant = day_percentages(relevant_days(counts, today), total_subjects)
    return WeeklySummary(
        total_subjects=total_subjects,
        weekly_average=weekly_average(counts, today=today, total_subjects=total_subjects),
        best_day=best_day(relevant),
        worst_day=worst_day(relevant),
        consistency_score=consistency_score(relevant),
        day_percentages=tuple(day_percentages(counts, total_subjects)),
        chart_rows=tuple(chart_rows(counts, today=today)),
    )
