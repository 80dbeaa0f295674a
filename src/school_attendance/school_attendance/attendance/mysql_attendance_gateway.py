from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, LeaveReason, SubjectKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, placeholders
from .gateway import AttendanceGateway
from .model import AttendanceRecord, FetchQuery, SubmitBatch, SubmitResult


@dataclass(frozen=True)
class _AttendanceTable:
    name: str
    subject_col: str


_TABLES = {
    SubjectKind.STUDENT: _AttendanceTable(name="student_attendance", subject_col="student_id"),
    SubjectKind.TEACHER: _AttendanceTable(name="teacher_attendance", subject_col="teacher_id"),
}

SAVED_MESSAGE = "Attendance records saved successfully"


def _to_record(r: dict[str, Any]) -> AttendanceRecord:
    leave_reason = r.get("leave_reason")
    return AttendanceRecord(
        subject_id=str(r["subject_id"]),
        work_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
        leave_reason=LeaveReason(leave_reason) if leave_reason else None,
        record_id=str(r["attendance_id"]),
        last_updated_by=r.get("updated_by"),
        last_updated_at=r.get("last_updated_at"),
    )


class MySQLAttendanceGateway(AttendanceGateway):
    """Stores sheets in `student_attendance` / `teacher_attendance`.

    One row per (subject, date); writes are upserts inside one transaction,
    so a batch is applied completely or not at all.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def fetch(self, query: FetchQuery) -> Sequence[AttendanceRecord]:
        table = _TABLES[query.kind]
        clauses = ["a.attendance_date BETWEEN %s AND %s"]
        params: list[object] = [query.start_date, query.end_date]
        join = ""

        # Teacher sheets cover the whole staff; only students belong to a class.
        if query.kind == SubjectKind.STUDENT:
            join = "JOIN students s ON s.student_id = a.student_id"
            clauses.append("s.class_id=%s")
            params.append(query.cohort_id)
            if query.sub_cohort_id:
                clauses.append("s.section_id=%s")
                params.append(query.sub_cohort_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.{table.subject_col} AS subject_id, a.attendance_date,
                    a.status, a.leave_reason, a.remarks, a.last_updated_at,
                    u.full_name AS updated_by
                FROM {table.name} a
                {join}
                LEFT JOIN users u ON u.user_id = a.marked_by
                WHERE {where}
                ORDER BY a.attendance_date ASC, a.{table.subject_col} ASC
                """,
                tuple(params),
            )
            return fetchall(cur, _to_record)

    def submit(self, batch: SubmitBatch) -> SubmitResult:
        table = _TABLES[batch.kind]
        if not batch.records:
            return SubmitResult(message=SAVED_MESSAGE)

        updated_at = now_local().replace(microsecond=0)
        keys = {r.key for r in batch.records}
        start = min(r.work_date for r in batch.records)
        end = max(r.work_date for r in batch.records)
        subject_ids = sorted({r.subject_id for r in batch.records})

        with db_cursor(self._conn_factory) as (_, cur):
            for r in batch.records:
                cur.execute(
                    f"""
                    INSERT INTO {table.name}
                        ({table.subject_col}, attendance_date, status, leave_reason, remarks, marked_by, last_updated_at)
                    VALUES (%s,%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status),
                        leave_reason=VALUES(leave_reason),
                        remarks=VALUES(remarks),
                        marked_by=VALUES(marked_by),
                        last_updated_at=VALUES(last_updated_at)
                    """,
                    (
                        r.subject_id,
                        r.work_date,
                        r.status.value,
                        r.leave_reason.value if r.leave_reason else None,
                        r.remarks,
                        batch.actor_id,
                        updated_at,
                    ),
                )

            cur.execute(
                f"""
                SELECT
                    a.attendance_id, a.{table.subject_col} AS subject_id, a.attendance_date,
                    a.status, a.leave_reason, a.remarks, a.last_updated_at,
                    u.full_name AS updated_by
                FROM {table.name} a
                LEFT JOIN users u ON u.user_id = a.marked_by
                WHERE a.attendance_date BETWEEN %s AND %s
                  AND a.{table.subject_col} IN ({placeholders(len(subject_ids))})
                """,
                (start, end, *subject_ids),
            )
            saved = [rec for rec in fetchall(cur, _to_record) if rec.key in keys]

        return SubmitResult(message=SAVED_MESSAGE, records=tuple(saved))

    def delete(self, *, kind: SubjectKind, subject_id: str, work_date: date) -> bool:
        table = _TABLES[SubjectKind(kind)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM {table.name} WHERE {table.subject_col}=%s AND attendance_date=%s",
                (subject_id, work_date),
            )
            return cur.rowcount > 0
