from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .attendance.gateway import AttendanceGateway
from .attendance.model import RosterEntry
from .attendance.mysql_attendance_gateway import MySQLAttendanceGateway
from .attendance.records_service import AttendanceRecordsService
from .attendance.service import AttendanceSheetService
from .core.enums import SubjectKind, ViewMode
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_gateway: AttendanceGateway

    attendance_records_service: AttendanceRecordsService

    def open_sheet(
        self,
        *,
        kind: SubjectKind,
        mode: ViewMode,
        roster: Sequence[RosterEntry],
        cohort_id: str,
        actor_id: str,
        sub_cohort_id: Optional[str] = None,
        displayed: Optional[date] = None,
    ) -> AttendanceSheetService:
        """A fresh sheet with its own store; callers then `load()` it."""
        return AttendanceSheetService(
            self.attendance_gateway,
            kind=kind,
            mode=mode,
            roster=roster,
            cohort_id=cohort_id,
            sub_cohort_id=sub_cohort_id,
            actor_id=actor_id,
            displayed=displayed,
        )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    attendance_gateway = MySQLAttendanceGateway(conn)
    attendance_records_service = AttendanceRecordsService(attendance_gateway)

    return Container(
        conn=conn,
        attendance_gateway=attendance_gateway,
        attendance_records_service=attendance_records_service,
    )
