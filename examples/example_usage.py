"""Example: drive a weekly sheet through the HTTP API (no Flask involved).

Controllers stay thin; the sheet service owns store, edit window and saving.
"""

import importlib

from config import get_settings_module

from src.school_attendance.school_attendance.attendance.http_attendance_gateway import HttpAttendanceGateway
from src.school_attendance.school_attendance.attendance.model import RosterEntry
from src.school_attendance.school_attendance.attendance.service import AttendanceSheetService
from src.school_attendance.school_attendance.core.enums import MarkStatus, SubjectKind, ViewMode


def main():
    settings = importlib.import_module(get_settings_module())
    roster = [RosterEntry("s-1", "Asha Rao", "01"), RosterEntry("s-2", "Ben Cole", "02")]

    with HttpAttendanceGateway(settings.ATTENDANCE_API_URL, timeout=settings.HTTP_TIMEOUT_SECONDS) as gateway:
        sheet = AttendanceSheetService(
            gateway,
            kind=SubjectKind.STUDENT,
            mode=ViewMode.WEEKLY,
            roster=roster,
            cohort_id="class-7",
            actor_id="admin-1",
        )
        sheet.load()
        sheet.open_edit()
        sheet.mark_all(MarkStatus.PRESENT)
        print(sheet.save().message)
        print(sheet.weekly_summary())


if __name__ == "__main__":
    main()
