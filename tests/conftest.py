from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pytest

from src.school_attendance.school_attendance.attendance.model import (
    AttendanceRecord,
    FetchQuery,
    RosterEntry,
    SubmitBatch,
    SubmitResult,
)
from src.school_attendance.school_attendance.core.enums import AttendanceStatus, SubjectKind

# Tuesday; its week runs Monday 2026-02-02 .. Sunday 2026-02-08.
FIXED_NOW = datetime(2026, 2, 3, 8, 30, 0)


class InMemoryGateway:
    """Stands in for the attendance backend; records every call."""

    def __init__(self, records: Optional[dict[SubjectKind, list[AttendanceRecord]]] = None):
        self._rows: dict[SubjectKind, dict[tuple[str, date], AttendanceRecord]] = {}
        for kind, items in (records or {}).items():
            for r in items:
                self._rows.setdefault(kind, {})[r.key] = r
        self._next_id = 1
        self.fetch_calls: list[FetchQuery] = []
        self.submitted: list[SubmitBatch] = []
        self.fail_with: Optional[Exception] = None
        self.on_submit: Optional[Callable[[SubmitBatch], None]] = None

    def fetch(self, query: FetchQuery):
        self.fetch_calls.append(query)
        rows = self._rows.get(query.kind, {}).values()
        return [r for r in rows if query.start_date <= r.work_date <= query.end_date]

    def submit(self, batch: SubmitBatch) -> SubmitResult:
        self.submitted.append(batch)
        if self.on_submit:
            self.on_submit(batch)
        if self.fail_with:
            raise self.fail_with

        saved = []
        for r in batch.records:
            existing = self._rows.get(batch.kind, {}).get(r.key)
            record_id = existing.record_id if existing else f"db-{self._next_id}"
            if not existing:
                self._next_id += 1
            stored = r.with_changes(
                record_id=record_id,
                last_updated_by="Admin Demo",
                last_updated_at=FIXED_NOW,
                pending=False,
            )
            self._rows.setdefault(batch.kind, {})[r.key] = stored
            saved.append(stored)
        return SubmitResult(message="Attendance records saved successfully", records=tuple(saved))

    def delete(self, *, kind: SubjectKind, subject_id: str, work_date: date) -> bool:
        return self._rows.get(kind, {}).pop((subject_id, work_date), None) is not None

    def stored(self, kind: SubjectKind) -> dict[tuple[str, date], AttendanceRecord]:
        return dict(self._rows.get(kind, {}))


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def monday(today) -> date:
    return today - timedelta(days=1)


@pytest.fixture
def roster() -> list[RosterEntry]:
    return [
        RosterEntry("s1", "Asha Rao", "01"),
        RosterEntry("s2", "Ben Cole", "02"),
        RosterEntry("s3", "Chen Wei", "03"),
        RosterEntry("s4", "Dana Silva", "14"),
    ]


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def make_record():
    def _make(subject_id: str, work_date: date, status: AttendanceStatus = AttendanceStatus.PRESENT, **kwargs):
        return AttendanceRecord(subject_id=subject_id, work_date=work_date, status=status, **kwargs)

    return _make


@pytest.fixture
def make_gateway():
    return InMemoryGateway
