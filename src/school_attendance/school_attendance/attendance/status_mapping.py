"""Mapping between the statuses offered on sheets and the persisted ones.

Teacher sheets offer five values; the backend stores three. The leave-like
values collapse to ``leave`` and keep their reason in ``leave_reason``.
"""
from __future__ import annotations

from typing import Optional, Union

from ..core.enums import AttendanceStatus, LeaveReason, MarkStatus, TeacherMark
from ..core.exceptions import ValidationError
from .model import AttendanceRecord

TEACHER_MARK_TO_PERSISTED: dict[TeacherMark, tuple[AttendanceStatus, Optional[LeaveReason]]] = {
    TeacherMark.PRESENT: (AttendanceStatus.PRESENT, None),
    TeacherMark.ABSENT: (AttendanceStatus.ABSENT, None),
    TeacherMark.HOLIDAY: (AttendanceStatus.LEAVE, LeaveReason.HOLIDAY),
    TeacherMark.SICK: (AttendanceStatus.LEAVE, LeaveReason.SICK),
    TeacherMark.PERSONAL: (AttendanceStatus.LEAVE, LeaveReason.PERSONAL),
}

LEAVE_REASON_TO_TEACHER_MARK: dict[LeaveReason, TeacherMark] = {
    LeaveReason.HOLIDAY: TeacherMark.HOLIDAY,
    LeaveReason.SICK: TeacherMark.SICK,
    LeaveReason.PERSONAL: TeacherMark.PERSONAL,
}

# Leave stored without a reason (older rows) reads back as personal leave.
DEFAULT_TEACHER_LEAVE_MARK = TeacherMark.PERSONAL

MARK_TO_PERSISTED: dict[MarkStatus, Optional[AttendanceStatus]] = {
    MarkStatus.PRESENT: AttendanceStatus.PRESENT,
    MarkStatus.ABSENT: AttendanceStatus.ABSENT,
    MarkStatus.LEAVE: AttendanceStatus.LEAVE,
    MarkStatus.NOT_MARKED: None,
}

SheetMark = Union[MarkStatus, TeacherMark]

_MARK_VALUES = frozenset(m.value for m in MarkStatus)
_TEACHER_MARK_VALUES = frozenset(m.value for m in TeacherMark)


def persist_teacher_mark(mark: TeacherMark) -> tuple[AttendanceStatus, Optional[LeaveReason]]:
    return TEACHER_MARK_TO_PERSISTED[TeacherMark(mark)]


def teacher_mark_of(record: AttendanceRecord) -> TeacherMark:
    if record.status == AttendanceStatus.PRESENT:
        return TeacherMark.PRESENT
    if record.status == AttendanceStatus.ABSENT:
        return TeacherMark.ABSENT
    if record.leave_reason is None:
        return DEFAULT_TEACHER_LEAVE_MARK
    return LEAVE_REASON_TO_TEACHER_MARK[record.leave_reason]


def mark_of(record: Optional[AttendanceRecord]) -> MarkStatus:
    if record is None:
        return MarkStatus.NOT_MARKED
    return MarkStatus(record.status.value)


def resolve_mark(mark: Union[SheetMark, str]) -> tuple[Optional[AttendanceStatus], Optional[LeaveReason]]:
    """Translate any sheet value into (persisted status, leave reason).

    A ``None`` status means "not marked": the cell should hold no record.
    """
    if isinstance(mark, TeacherMark):
        return persist_teacher_mark(mark)
    if isinstance(mark, MarkStatus):
        return MARK_TO_PERSISTED[mark], None

    raw = str(mark or "").strip().lower()
    if raw in _MARK_VALUES:
        return MARK_TO_PERSISTED[MarkStatus(raw)], None
    if raw in _TEACHER_MARK_VALUES:
        return persist_teacher_mark(TeacherMark(raw))
    raise ValidationError(f"Unknown attendance status: {mark!r}")


def is_working_mark(mark: Union[SheetMark, str]) -> bool:
    """Only present/absent may be set by the quick-mark and bulk buttons."""
    status, _ = resolve_mark(mark)
    return status in (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT)
