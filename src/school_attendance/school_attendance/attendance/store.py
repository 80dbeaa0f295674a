"""In-memory record set behind one attendance sheet.

`LocalAttendanceStore` holds the merge of the records fetched for the active
period and the edits that have not been saved yet, keyed by subject and date.

Notes:
    - A cell without a record reads as "not marked"; such cells are never
      materialized as records.
    - Records outside the active period are ignored.
    - The optional edit guard makes single-cell and clear operations no-ops
      for dates the current edit window does not allow. Callers are expected
      to check the window first and report the rejection to the user.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional

from ..core.enums import AttendanceStatus, ClearScope, LeaveReason, MarkStatus
from .model import AttendancePeriod, AttendanceRecord, LastUpdatedInfo
from .status_mapping import mark_of

EditGuard = Callable[[date], bool]
RecordMap = dict[str, dict[date, AttendanceRecord]]


@dataclass(frozen=True)
class StoreSnapshot:
    records: RecordMap
    last_updated: Optional[LastUpdatedInfo]


def _copy_records(records: RecordMap) -> RecordMap:
    # Records are frozen, copying the two dict levels is enough.
    return {subject_id: dict(by_date) for subject_id, by_date in records.items()}


def latest_update(records: Iterable[AttendanceRecord]) -> Optional[LastUpdatedInfo]:
    latest: Optional[LastUpdatedInfo] = None
    for r in records:
        if not r.last_updated_at or not r.last_updated_by:
            continue
        if latest is None or r.last_updated_at > latest.updated_at:
            latest = LastUpdatedInfo(updated_by=r.last_updated_by, updated_at=r.last_updated_at)
    return latest


class LocalAttendanceStore:
    def __init__(self, period: AttendancePeriod, *, guard: Optional[EditGuard] = None):
        self._period = period
        self._guard = guard
        self._records: RecordMap = {}
        self._last_updated: Optional[LastUpdatedInfo] = None

    # === properties ===

    @property
    def period(self) -> AttendancePeriod:
        return self._period

    @property
    def last_updated(self) -> Optional[LastUpdatedInfo]:
        return self._last_updated

    # === lifecycle ===

    def seed(self, records: Iterable[AttendanceRecord]) -> None:
        """Replace the whole record set with a freshly fetched one."""
        in_period = [r for r in records if self._period.contains(r.work_date)]
        self._records = {}
        self._put_all(in_period)
        self._last_updated = latest_update(in_period)

    def reset(self, period: AttendancePeriod) -> None:
        """Switch to another period; the previous records are dropped."""
        self._period = period
        self._records = {}
        self._last_updated = None

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(records=_copy_records(self._records), last_updated=self._last_updated)

    def restore(self, snapshot: StoreSnapshot) -> None:
        self._records = _copy_records(snapshot.records)
        self._last_updated = snapshot.last_updated

    # === mutation ===

    def set_status(
        self,
        subject_id: str,
        work_date: date,
        status: Optional[AttendanceStatus],
        *,
        remarks: Optional[str] = None,
        leave_reason: Optional[LeaveReason] = None,
    ) -> bool:
        """Upsert a single cell.

        A ``None`` status clears the cell back to "not marked". Existing
        remarks are kept unless new ones are given. Returns False when the
        date is outside the period or denied by the edit guard.
        """
        if not self._allows(work_date):
            return False

        if status is None:
            self._remove(subject_id, work_date)
            return True

        status = AttendanceStatus(status)
        current = self.record_for(subject_id, work_date)
        if current is None:
            record = AttendanceRecord(
                subject_id=subject_id,
                work_date=work_date,
                status=status,
                remarks=remarks,
                leave_reason=leave_reason if status == AttendanceStatus.LEAVE else None,
            )
        else:
            record = current.with_changes(
                status=status,
                remarks=remarks if remarks is not None else current.remarks,
                leave_reason=leave_reason if status == AttendanceStatus.LEAVE else None,
                pending=False,
            )
        self._put(record)
        return True

    def set_remarks(self, subject_id: str, work_date: date, remarks: Optional[str]) -> bool:
        current = self.record_for(subject_id, work_date)
        if current is None or not self._allows(work_date):
            return False
        self._put(current.with_changes(remarks=(remarks or "").strip() or None))
        return True

    def apply(self, records: Iterable[AttendanceRecord]) -> None:
        """Upsert many records without consulting the edit guard.

        Newer provenance on the incoming records moves `last_updated` forward.
        """
        in_period = [r for r in records if self._period.contains(r.work_date)]
        self._put_all(in_period)
        incoming = latest_update(in_period)
        if incoming and (self._last_updated is None or incoming.updated_at > self._last_updated.updated_at):
            self._last_updated = incoming

    def clear(self, scope: ClearScope, work_date: Optional[date] = None) -> int:
        """Remove cells the edit guard allows; returns how many were removed.

        ``EDITABLE_DATE`` only touches ``work_date``.
        """
        scope = ClearScope(scope)
        removed = 0
        for subject_id in list(self._records):
            by_date = self._records[subject_id]
            for day in list(by_date):
                if scope == ClearScope.EDITABLE_DATE and day != work_date:
                    continue
                if not self._allows(day):
                    continue
                del by_date[day]
                removed += 1
            if not by_date:
                del self._records[subject_id]
        return removed

    # === lookup ===

    def record_for(self, subject_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return self._records.get(subject_id, {}).get(work_date)

    def mark_for(self, subject_id: str, work_date: date) -> MarkStatus:
        return mark_of(self.record_for(subject_id, work_date))

    def daily_status_map(self, work_date: date) -> dict[str, MarkStatus]:
        """Flat subject -> status view for one date (marked cells only)."""
        return {
            subject_id: mark_of(by_date[work_date])
            for subject_id, by_date in self._records.items()
            if work_date in by_date
        }

    def subject_statuses(self, subject_id: str) -> dict[date, MarkStatus]:
        return {day: mark_of(r) for day, r in self._records.get(subject_id, {}).items()}

    def records(self, work_date: Optional[date] = None) -> list[AttendanceRecord]:
        out = [
            r
            for by_date in self._records.values()
            for r in by_date.values()
            if work_date is None or r.work_date == work_date
        ]
        out.sort(key=lambda r: (r.work_date, r.subject_id))
        return out

    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return sum(len(by_date) for by_date in self._records.values())

    # === internals ===

    def _allows(self, work_date: date) -> bool:
        if not self._period.contains(work_date):
            return False
        return self._guard is None or self._guard(work_date)

    def _put(self, record: AttendanceRecord) -> None:
        self._records.setdefault(record.subject_id, {})[record.work_date] = record

    def _put_all(self, records: Iterable[AttendanceRecord]) -> None:
        for r in records:
            self._put(r)

    def _remove(self, subject_id: str, work_date: date) -> None:
        by_date = self._records.get(subject_id)
        if not by_date:
            return
        by_date.pop(work_date, None)
        if not by_date:
            del self._records[subject_id]
