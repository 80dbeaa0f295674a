from datetime import date, timedelta

from src.school_attendance.school_attendance.attendance import aggregation
from src.school_attendance.school_attendance.attendance.aggregation import DayCounts, DayPercentage
from src.school_attendance.school_attendance.attendance.model import AttendancePeriod
from src.school_attendance.school_attendance.attendance.store import LocalAttendanceStore
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, MarkStatus

MON = date(2026, 2, 2)
TUE = date(2026, 2, 3)


def _seeded_week(make_record, rows):
    store = LocalAttendanceStore(AttendancePeriod.for_week(TUE))
    store.seed(make_record(s, d, st) for s, d, st in rows)
    return store


def test_percentage_rounds_half_up_and_handles_zero_total():
    assert aggregation.percentage(0, 0) == 0
    assert aggregation.percentage(1, 3) == 33
    assert aggregation.percentage(2, 3) == 67
    assert aggregation.percentage(1, 8) == 13
    assert aggregation.percentage(5, 8) == 63


def test_daily_counts_add_up_to_the_roster(make_record):
    store = _seeded_week(
        make_record,
        [
            ("s1", TUE, AttendanceStatus.PRESENT),
            ("s2", TUE, AttendanceStatus.ABSENT),
            ("s3", TUE, AttendanceStatus.LEAVE),
        ],
    )

    counts = aggregation.day_counts(store, ["s1", "s2", "s3", "s4"], TUE)

    assert (counts.present, counts.absent, counts.not_marked) == (1, 1, 2)
    assert counts.total == 4
    assert counts.percentage == 25


def test_weekly_summary_for_a_half_week(make_record):
    P, A = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT
    store = _seeded_week(
        make_record,
        [
            ("s1", MON, P), ("s2", MON, P), ("s3", MON, A), ("s4", MON, A),
            ("s1", TUE, P), ("s2", TUE, P), ("s3", TUE, P), ("s4", TUE, A),
        ],
    )
    roster = ["s1", "s2", "s3", "s4"]

    counts = aggregation.cohort_day_counts(store, roster, store.period.days())
    summary = aggregation.summarize_week(counts, today=TUE, total_subjects=len(roster))

    assert summary.weekly_average == 63
    assert (summary.best_day.work_date, summary.best_day.percentage) == (TUE, 75)
    assert (summary.worst_day.work_date, summary.worst_day.percentage) == (MON, 50)
    assert summary.consistency_score == 88
    assert [d.percentage for d in summary.day_percentages] == [50, 75, 0, 0, 0, 0, 0]


def test_future_days_do_not_drag_the_average_down():
    counts = [DayCounts(MON, 10, 0, 0), DayCounts(TUE, 9, 1, 0)] + [
        DayCounts(TUE + timedelta(days=i), 0, 0, 10) for i in range(1, 6)
    ]

    assert aggregation.weekly_average(counts, today=TUE, total_subjects=10) == 95


def test_chart_hides_not_marked_for_future_days():
    counts = [DayCounts(TUE, 2, 1, 1), DayCounts(TUE + timedelta(days=1), 0, 0, 4)]

    rows = aggregation.chart_rows(counts, today=TUE)

    assert rows[0].not_marked == 1
    assert rows[1].not_marked == 0


def test_best_day_keeps_the_earliest_on_ties():
    days = [DayPercentage(MON, 100), DayPercentage(TUE, 100)]

    assert aggregation.best_day(days).work_date == MON
    assert aggregation.worst_day([DayPercentage(MON, 40), DayPercentage(TUE, 40)]).work_date == MON


def test_flat_extremes_report_no_best_or_worst_day():
    assert aggregation.best_day([DayPercentage(MON, 0), DayPercentage(TUE, 0)]) == aggregation.NO_BEST_DAY
    assert not aggregation.worst_day([DayPercentage(MON, 100)]).has_data


def test_empty_inputs_fall_back_to_defaults():
    summary = aggregation.summarize_week([], today=TUE)

    assert summary.total_subjects == 0
    assert summary.weekly_average == 0
    assert summary.best_day == aggregation.NO_BEST_DAY
    assert summary.worst_day == aggregation.NO_WORST_DAY
    assert not summary.best_day.has_data
    assert summary.consistency_score == 0


def test_consistency_is_perfect_for_identical_days():
    days = [DayPercentage(MON, 80), DayPercentage(TUE, 80)]

    assert aggregation.consistency_score(days) == 100
    assert aggregation.consistency_score([DayPercentage(MON, 0), DayPercentage(TUE, 100)]) == 50


def test_subject_week_percentage_ignores_unmarked_days():
    P, A, N = MarkStatus.PRESENT, MarkStatus.ABSENT, MarkStatus.NOT_MARKED

    assert aggregation.subject_week_percentage([P]) == 100
    assert aggregation.subject_week_percentage([A]) == 0
    assert aggregation.subject_week_percentage([P, A, N]) == 50
    assert aggregation.subject_week_percentage([P, P, A]) == 67
    assert aggregation.subject_week_percentage([]) == 0
