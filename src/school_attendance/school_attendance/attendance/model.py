from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Optional

from ..common.datetime_utils import days_between, format_iso_date, parse_iso_date, week_bounds
from ..core.enums import AttendanceStatus, LeaveReason, SubjectKind


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        # Keep every timestamp naive UTC so they stay comparable.
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one subject's attendance for one calendar day."""

    subject_id: str
    work_date: date
    status: AttendanceStatus
    remarks: Optional[str] = None
    leave_reason: Optional[LeaveReason] = None
    record_id: Optional[str] = None
    last_updated_by: Optional[str] = None
    last_updated_at: Optional[datetime] = None
    pending: bool = False

    @property
    def key(self) -> tuple[str, date]:
        return self.subject_id, self.work_date

    def with_changes(self, **changes: Any) -> "AttendanceRecord":
        return replace(self, **changes)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "subject_id": self.subject_id,
            "date": format_iso_date(self.work_date),
            "status": self.status.value,
        }
        if self.remarks:
            payload["remarks"] = self.remarks
        if self.leave_reason is not None:
            payload["leave_reason"] = self.leave_reason.value
        return payload

    def to_dict(self) -> dict:
        data = self.to_payload()
        data["id"] = self.record_id
        data["last_updated_by"] = self.last_updated_by
        data["last_updated_at"] = self.last_updated_at.isoformat() if self.last_updated_at else None
        return data

    @classmethod
    def from_dict(cls, payload: dict) -> "AttendanceRecord":
        leave_reason = payload.get("leave_reason")
        record_id = payload.get("id")
        return cls(
            subject_id=str(payload["subject_id"]),
            work_date=parse_iso_date(str(payload["date"])),
            status=AttendanceStatus(payload["status"]),
            remarks=payload.get("remarks") or None,
            leave_reason=LeaveReason(leave_reason) if leave_reason else None,
            record_id=str(record_id) if record_id is not None else None,
            last_updated_by=payload.get("last_updated_by") or None,
            last_updated_at=_parse_timestamp(payload.get("last_updated_at")),
        )


@dataclass(frozen=True)
class LastUpdatedInfo:
    updated_by: str
    updated_at: datetime


@dataclass(frozen=True)
class AttendancePeriod:
    """Inclusive range of days currently requested from the backend."""

    start: date
    end: date

    @classmethod
    def for_day(cls, day: date) -> "AttendancePeriod":
        return cls(start=day, end=day)

    @classmethod
    def for_week(cls, day: date) -> "AttendancePeriod":
        start, end = week_bounds(day)
        return cls(start=start, end=end)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        return days_between(self.start, self.end)


@dataclass(frozen=True)
class FetchQuery:
    """Parameters of one fetch; equal queries address the same record set."""

    kind: SubjectKind
    start_date: date
    end_date: date
    cohort_id: str
    sub_cohort_id: Optional[str] = None

    @property
    def period(self) -> AttendancePeriod:
        return AttendancePeriod(start=self.start_date, end=self.end_date)

    def to_params(self) -> dict:
        params = {
            "start_date": format_iso_date(self.start_date),
            "end_date": format_iso_date(self.end_date),
            "class_id": self.cohort_id,
        }
        if self.sub_cohort_id:
            params["section_id"] = self.sub_cohort_id
        return params


@dataclass(frozen=True)
class SubmitBatch:
    kind: SubjectKind
    records: tuple[AttendanceRecord, ...]
    cohort_id: str
    actor_id: str
    sub_cohort_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self.records)

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {
            "records": [r.to_payload() for r in self.records],
            "class_id": self.cohort_id,
            "actor_id": self.actor_id,
        }
        if self.sub_cohort_id:
            payload["section_id"] = self.sub_cohort_id
        return payload


@dataclass(frozen=True)
class SubmitResult:
    message: str
    records: tuple[AttendanceRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RosterEntry:
    """A student or teacher listed on a sheet."""

    subject_id: str
    name: str
    roll_number: Optional[str] = None

    def matches(self, term: str) -> bool:
        needle = (term or "").strip().lower()
        if not needle:
            return True
        if needle in self.name.lower():
            return True
        return bool(self.roll_number) and needle in self.roll_number.lower()
