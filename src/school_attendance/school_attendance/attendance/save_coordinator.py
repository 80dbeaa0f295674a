from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_iso_date
from ..core.constants import (
    DEFAULT_SAVE_FAILED_MESSAGE,
    DEFAULT_SAVE_SUCCESS_MESSAGE,
    NOTHING_TO_SAVE_MESSAGE,
    PROVISIONAL_ID_PREFIX,
    SAVE_IN_PROGRESS_MESSAGE,
    UPDATING_MESSAGE,
)
from ..core.enums import SaveState, SubjectKind
from ..core.exceptions import NothingToSaveError, RemoteError, SaveInProgressError
from .gateway import AttendanceGateway
from .model import AttendanceRecord, SubmitBatch
from .store import LocalAttendanceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveOutcome:
    state: SaveState
    message: str
    records: tuple[AttendanceRecord, ...] = ()

    @property
    def success(self) -> bool:
        return self.state == SaveState.SETTLED


def provisional_id(record: AttendanceRecord) -> str:
    return f"{PROVISIONAL_ID_PREFIX}-{record.subject_id}-{format_iso_date(record.work_date)}"


class SaveCoordinator:
    """Optimistic save: snapshot, overlay, submit, then settle or roll back.

    The snapshot is taken after the user's edits and before the overlay, so a
    rollback keeps the edits and the user can simply retry.
    """

    def __init__(
        self,
        store: LocalAttendanceStore,
        gateway: AttendanceGateway,
        *,
        kind: SubjectKind,
        cohort_id: str,
        sub_cohort_id: Optional[str] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._kind = SubjectKind(kind)
        self._cohort_id = cohort_id
        self._sub_cohort_id = sub_cohort_id
        self._state = SaveState.IDLE
        self._notice: Optional[str] = None

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    @property
    def is_saving(self) -> bool:
        return self._state == SaveState.SAVING

    def build_batch(self, *, actor_id: str, work_date: Optional[date] = None) -> SubmitBatch:
        """Every held record of the scope; `work_date` narrows it to one day."""
        records = tuple(r.with_changes(pending=False) for r in self._store.records(work_date))
        return SubmitBatch(
            kind=self._kind,
            records=records,
            cohort_id=self._cohort_id,
            sub_cohort_id=self._sub_cohort_id,
            actor_id=actor_id,
        )

    def save(self, *, actor_id: str, work_date: Optional[date] = None) -> SaveOutcome:
        if self.is_saving:
            raise SaveInProgressError(SAVE_IN_PROGRESS_MESSAGE)

        batch = self.build_batch(actor_id=actor_id, work_date=work_date)
        if not batch.records:
            raise NothingToSaveError(NOTHING_TO_SAVE_MESSAGE)

        snapshot = self._store.snapshot()
        self._state = SaveState.SAVING
        self._notice = UPDATING_MESSAGE
        self._store.apply(r.with_changes(record_id=provisional_id(r), pending=True) for r in batch.records)
        logger.debug("saving %d %s attendance records for cohort %s", len(batch), self._kind.value, self._cohort_id)

        try:
            result = self._gateway.submit(batch)
        except Exception as exc:  # timeouts and transport errors roll back too
            self._store.restore(snapshot)
            self._state = SaveState.ROLLED_BACK
            if isinstance(exc, RemoteError) and exc.message:
                message = exc.message
            else:
                message = DEFAULT_SAVE_FAILED_MESSAGE
                logger.exception("unexpected error while saving attendance")
            self._notice = message
            logger.warning("attendance save rolled back: %s", message)
            return SaveOutcome(state=self._state, message=message)

        self._store.restore(snapshot)
        self._store.apply(result.records or batch.records)
        self._state = SaveState.SETTLED
        self._notice = result.message or DEFAULT_SAVE_SUCCESS_MESSAGE
        logger.debug("attendance save settled: %s", self._notice)
        return SaveOutcome(state=self._state, message=self._notice, records=result.records)
