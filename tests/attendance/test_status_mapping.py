from datetime import date

import pytest

from src.school_attendance.school_attendance.attendance.model import AttendanceRecord
from src.school_attendance.school_attendance.attendance.status_mapping import (
    is_working_mark,
    mark_of,
    persist_teacher_mark,
    resolve_mark,
    teacher_mark_of,
)
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, LeaveReason, MarkStatus, TeacherMark
from src.school_attendance.school_attendance.core.exceptions import ValidationError

DAY = date(2026, 2, 3)


@pytest.mark.parametrize(
    "mark, expected",
    [
        (TeacherMark.PRESENT, (AttendanceStatus.PRESENT, None)),
        (TeacherMark.ABSENT, (AttendanceStatus.ABSENT, None)),
        (TeacherMark.HOLIDAY, (AttendanceStatus.LEAVE, LeaveReason.HOLIDAY)),
        (TeacherMark.SICK, (AttendanceStatus.LEAVE, LeaveReason.SICK)),
        (TeacherMark.PERSONAL, (AttendanceStatus.LEAVE, LeaveReason.PERSONAL)),
    ],
)
def test_teacher_marks_collapse_to_persisted_statuses(mark, expected):
    assert persist_teacher_mark(mark) == expected


def test_teacher_leave_reads_back_through_its_reason():
    sick = AttendanceRecord("t1", DAY, AttendanceStatus.LEAVE, leave_reason=LeaveReason.SICK)
    legacy = AttendanceRecord("t1", DAY, AttendanceStatus.LEAVE)

    assert teacher_mark_of(sick) == TeacherMark.SICK
    assert teacher_mark_of(legacy) == TeacherMark.PERSONAL


def test_resolve_mark_accepts_strings_and_not_marked():
    assert resolve_mark("Present") == (AttendanceStatus.PRESENT, None)
    assert resolve_mark("holiday") == (AttendanceStatus.LEAVE, LeaveReason.HOLIDAY)
    assert resolve_mark(MarkStatus.NOT_MARKED) == (None, None)
    assert resolve_mark("not-marked") == (None, None)

    with pytest.raises(ValidationError):
        resolve_mark("late")


def test_missing_record_reads_as_not_marked():
    assert mark_of(None) == MarkStatus.NOT_MARKED
    assert mark_of(AttendanceRecord("s1", DAY, AttendanceStatus.LEAVE)) == MarkStatus.LEAVE


def test_only_present_and_absent_are_working_marks():
    assert is_working_mark(MarkStatus.PRESENT)
    assert is_working_mark("absent")
    assert not is_working_mark(MarkStatus.LEAVE)
    assert not is_working_mark(TeacherMark.HOLIDAY)
    assert not is_working_mark(MarkStatus.NOT_MARKED)


def test_resolve_mark_normalizes_case_and_whitespace():
    assert resolve_mark(" SICK ") == (AttendanceStatus.LEAVE, LeaveReason.SICK)
    assert resolve_mark("Absent") == (AttendanceStatus.ABSENT, None)

    with pytest.raises(ValidationError):
        resolve_mark("")
