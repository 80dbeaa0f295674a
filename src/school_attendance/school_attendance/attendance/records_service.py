from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.validators import require_date_range, require_iso_date, require_non_empty
from ..core.constants import MAX_SUMMARY_DAYS
from ..core.enums import AttendanceStatus, LeaveReason, SubjectKind
from ..core.exceptions import ValidationError
from . import aggregation
from .gateway import AttendanceGateway
from .model import AttendancePeriod, AttendanceRecord, FetchQuery, SubmitBatch, SubmitResult
from .status_mapping import resolve_mark
from .store import LocalAttendanceStore


class AttendanceRecordsService:
    """Server-side use cases behind the attendance API.

    Validates incoming payloads and hands them to the gateway that owns the
    storage.
    """

    def __init__(self, gateway: AttendanceGateway):
        self._gateway = gateway

    def list_records(
        self,
        *,
        kind: SubjectKind,
        start_date: date,
        end_date: date,
        cohort_id: Optional[str],
        sub_cohort_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        kind = SubjectKind(kind)
        require_date_range(start_date, end_date)
        if kind == SubjectKind.STUDENT:
            cohort_id = require_non_empty(cohort_id, "class_id")
        query = FetchQuery(
            kind=kind,
            start_date=start_date,
            end_date=end_date,
            cohort_id=cohort_id or "",
            sub_cohort_id=sub_cohort_id or None,
        )
        return self._gateway.fetch(query)

    def parse_submission(self, *, kind: SubjectKind, payload: Any) -> SubmitBatch:
        kind = SubjectKind(kind)
        if not isinstance(payload, dict):
            raise ValidationError("Invalid request data")

        items = payload.get("records")
        if not isinstance(items, list):
            raise ValidationError("records must be a list")

        actor_id = require_non_empty(payload.get("actor_id"), "actor_id")
        cohort_id = payload.get("class_id")
        if kind == SubjectKind.STUDENT:
            cohort_id = require_non_empty(cohort_id, "class_id")

        # Daily sheets may send the date once at the top level.
        default_date = payload.get("date")

        by_key: dict[tuple[str, date], AttendanceRecord] = {}
        for item in items:
            record = self._parse_record(item, default_date=default_date)
            by_key[record.key] = record

        return SubmitBatch(
            kind=kind,
            records=tuple(by_key.values()),
            cohort_id=str(cohort_id or ""),
            sub_cohort_id=payload.get("section_id") or None,
            actor_id=actor_id,
        )

    def save_records(self, *, kind: SubjectKind, payload: Any) -> SubmitResult:
        batch = self.parse_submission(kind=kind, payload=payload)
        if not batch.records:
            raise ValidationError("No attendance data to save")
        return self._gateway.submit(batch)

    def delete_record(self, *, kind: SubjectKind, subject_id: Optional[str], work_date: Any) -> bool:
        subject_id = require_non_empty(subject_id, "subject_id")
        day = require_iso_date(work_date, "date")
        return self._gateway.delete(kind=SubjectKind(kind), subject_id=subject_id, work_date=day)

    def period_summary(
        self,
        *,
        kind: SubjectKind,
        start_date: date,
        end_date: date,
        today: date,
        cohort_id: Optional[str],
        sub_cohort_id: Optional[str] = None,
        subject_ids: Sequence[str] = (),
    ) -> aggregation.WeeklySummary:
        require_date_range(start_date, end_date)
        if (end_date - start_date).days + 1 > MAX_SUMMARY_DAYS:
            raise ValidationError(f"Summaries cover at most {MAX_SUMMARY_DAYS} days")
        records = self.list_records(
            kind=kind,
            start_date=start_date,
            end_date=end_date,
            cohort_id=cohort_id,
            sub_cohort_id=sub_cohort_id,
        )
        store = LocalAttendanceStore(AttendancePeriod(start=start_date, end=end_date))
        store.seed(records)

        roster = list(subject_ids) or sorted({r.subject_id for r in records})
        counts = aggregation.cohort_day_counts(store, roster, store.period.days())
        return aggregation.summarize_week(counts, today=today, total_subjects=len(roster))

    @staticmethod
    def _parse_record(item: Any, *, default_date: Any) -> AttendanceRecord:
        if not isinstance(item, dict):
            raise ValidationError("Invalid attendance record")

        subject_id = require_non_empty(item.get("subject_id"), "subject_id")
        work_date = require_iso_date(item.get("date") or default_date, "date")
        status, leave_reason = resolve_mark(require_non_empty(item.get("status"), "status"))
        if status is None:
            raise ValidationError("not-marked is not a status that can be saved")

        remarks = item.get("remarks")
        if remarks is not None and not isinstance(remarks, str):
            raise ValidationError("remarks must be text")

        explicit_reason = item.get("leave_reason")
        if explicit_reason:
            try:
                leave_reason = LeaveReason(explicit_reason)
            except ValueError:
                raise ValidationError(f"Unknown leave reason: {explicit_reason!r}")

        return AttendanceRecord(
            subject_id=subject_id,
            work_date=work_date,
            status=status,
            remarks=(remarks or "").strip() or None,
            leave_reason=leave_reason if status == AttendanceStatus.LEAVE else None,
        )
