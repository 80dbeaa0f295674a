from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import SubjectKind
from .model import AttendanceRecord, FetchQuery, SubmitBatch, SubmitResult


class AttendanceGateway(Protocol):
    """Remote side of a sheet: where records are fetched from and saved to.

    Implementations raise `RemoteError` with a human-readable message when the
    backend refuses or fails a call.
    """

    def fetch(self, query: FetchQuery) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def submit(self, batch: SubmitBatch) -> SubmitResult:
        raise NotImplementedError

    def delete(self, *, kind: SubjectKind, subject_id: str, work_date: date) -> bool:
        raise NotImplementedError
