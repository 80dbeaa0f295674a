from __future__ import annotations

from enum import Enum


class SubjectKind(str, Enum):
    """Who an attendance sheet is taken for."""

    STUDENT = "student"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    """Attendance status as persisted by the backend."""

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"


class MarkStatus(str, Enum):
    """Status shown in a sheet cell.

    NOT_MARKED means no record exists yet; it is never stored or transmitted.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    NOT_MARKED = "not-marked"


class TeacherMark(str, Enum):
    """Statuses offered on teacher sheets."""

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"
    SICK = "sick"
    PERSONAL = "personal"


class LeaveReason(str, Enum):
    HOLIDAY = "holiday"
    SICK = "sick"
    PERSONAL = "personal"


class ViewMode(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class ClearScope(str, Enum):
    ALL = "all"
    EDITABLE_DATE = "editable-date"


class SaveState(str, Enum):
    """Lifecycle of a single save request."""

    IDLE = "idle"
    SAVING = "saving"
    SETTLED = "settled"
    ROLLED_BACK = "rolled_back"
