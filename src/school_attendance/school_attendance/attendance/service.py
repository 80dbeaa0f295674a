from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence, Union

from ..common.datetime_utils import now_local
from ..core.constants import DAYS_IN_WEEK
from ..core.enums import ClearScope, MarkStatus, SaveState, SubjectKind, TeacherMark, ViewMode
from ..core.exceptions import EditWindowError, RemoteError, SaveInProgressError
from . import aggregation
from .factory import EditWindowFactory
from .gateway import AttendanceGateway
from .model import AttendancePeriod, AttendanceRecord, FetchQuery, LastUpdatedInfo, RosterEntry
from .policies.base import EditWindowPolicy
from .policies.weekly_policy import WeeklyEditWindow
from .save_coordinator import SaveCoordinator, SaveOutcome
from .status_mapping import SheetMark, resolve_mark, teacher_mark_of
from .store import LocalAttendanceStore

logger = logging.getLogger(__name__)


class AttendanceSheetService:
    """One open attendance sheet (a cohort on a day or a week).

    Owns its store, edit-window policy and save coordinator; nothing is shared
    between sheets.
    """

    def __init__(
        self,
        gateway: AttendanceGateway,
        *,
        kind: SubjectKind,
        mode: ViewMode,
        roster: Sequence[RosterEntry],
        cohort_id: str,
        actor_id: str,
        sub_cohort_id: Optional[str] = None,
        displayed: Optional[date] = None,
        policy_factory: Optional[EditWindowFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._gateway = gateway
        self._kind = SubjectKind(kind)
        self._mode = ViewMode(mode)
        self._roster = list(roster)
        self._cohort_id = cohort_id
        self._sub_cohort_id = sub_cohort_id
        self._actor_id = actor_id
        self._clock = clock
        self._search_term = ""

        self._displayed = displayed or self.today()
        self._policy: EditWindowPolicy = (policy_factory or EditWindowFactory()).for_view(
            self._mode, displayed=self._displayed
        )
        self._store = LocalAttendanceStore(self._period_for(self._displayed), guard=self._is_editable)
        self._coordinator = SaveCoordinator(
            self._store,
            gateway,
            kind=self._kind,
            cohort_id=cohort_id,
            sub_cohort_id=sub_cohort_id,
        )
        self._active_query: Optional[FetchQuery] = None

    # === properties ===

    @property
    def store(self) -> LocalAttendanceStore:
        return self._store

    @property
    def policy(self) -> EditWindowPolicy:
        return self._policy

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def displayed(self) -> date:
        return self._displayed

    @property
    def period(self) -> AttendancePeriod:
        return self._store.period

    @property
    def save_state(self) -> SaveState:
        return self._coordinator.state

    @property
    def notice(self) -> Optional[str]:
        return self._coordinator.notice

    @property
    def last_updated(self) -> Optional[LastUpdatedInfo]:
        return self._store.last_updated

    @property
    def active_query(self) -> Optional[FetchQuery]:
        return self._active_query

    def today(self) -> date:
        return self._clock().date()

    def days(self) -> list[date]:
        return self.period.days()

    def can_navigate(self) -> bool:
        return not self._coordinator.is_saving and self._policy.can_navigate()

    # === fetching ===

    def query(self) -> FetchQuery:
        return FetchQuery(
            kind=self._kind,
            start_date=self.period.start,
            end_date=self.period.end,
            cohort_id=self._cohort_id,
            sub_cohort_id=self._sub_cohort_id,
        )

    def begin_fetch(self) -> FetchQuery:
        """Mark the current period as the one whose response will be kept."""
        self._active_query = self.query()
        return self._active_query

    def receive(self, query: FetchQuery, records: Sequence[AttendanceRecord]) -> bool:
        """Seed the store from a fetch response unless it answers an older query."""
        if query != self._active_query:
            logger.debug("discarding stale attendance response for %s..%s", query.start_date, query.end_date)
            return False
        self._store.seed(records)
        return True

    def load(self) -> bool:
        query = self.begin_fetch()
        try:
            records = self._gateway.fetch(query)
        except RemoteError as e:
            logger.warning("attendance fetch failed for %s..%s: %s", query.start_date, query.end_date, e)
            raise
        return self.receive(query, records)

    # === navigation and edit toggles ===

    def navigate(self, step: int) -> FetchQuery:
        """Move by `step` days (daily) or weeks (weekly) and start a new fetch."""
        if self._coordinator.is_saving:
            raise SaveInProgressError("Wait for the save to finish before changing the period")
        self._policy.check_navigation()

        days = step * (DAYS_IN_WEEK if self._mode == ViewMode.WEEKLY else 1)
        self._displayed = self._displayed + timedelta(days=days)
        self._policy.move_to(self._displayed)
        self._store.reset(self._period_for(self._displayed))
        return self.begin_fetch()

    def open_edit(self, work_date: Optional[date] = None) -> None:
        weekly = self._weekly_policy()
        if weekly is not None:
            weekly.open(work_date or self.today(), today=self.today())

    def close_edit(self, work_date: Optional[date] = None) -> None:
        weekly = self._weekly_policy()
        if weekly is not None:
            weekly.close(work_date or self.today())

    def toggle_edit(self, work_date: Optional[date] = None) -> bool:
        weekly = self._weekly_policy()
        if weekly is None:
            return True
        return weekly.toggle(work_date or self.today(), today=self.today())

    # === edits ===

    def set_status(self, subject_id: str, work_date: date, mark: Union[SheetMark, str]) -> None:
        self._policy.check_editable(work_date, today=self.today())
        status, leave_reason = resolve_mark(mark)
        self._store.set_status(subject_id, work_date, status, leave_reason=leave_reason)

    def set_remarks(self, subject_id: str, work_date: date, remarks: Optional[str]) -> bool:
        self._policy.check_editable(work_date, today=self.today())
        return self._store.set_remarks(subject_id, work_date, remarks)

    def mark_all(self, mark: Union[SheetMark, str], work_date: Optional[date] = None) -> int:
        """Set the same working status for every subject matching the search."""
        target = work_date or self._edit_date()
        self._policy.check_bulk_mark(target, mark, today=self.today())
        status, _ = resolve_mark(mark)

        changed = 0
        for entry in self.filtered_roster():
            if self._store.set_status(entry.subject_id, target, status):
                changed += 1
        return changed

    def clear(self) -> int:
        target = self._edit_date()
        if not self._policy.is_editable(target, today=self.today()):
            raise EditWindowError("You can only clear attendance for the current day")
        scope = ClearScope.ALL if self._mode == ViewMode.DAILY else ClearScope.EDITABLE_DATE
        return self._store.clear(scope, target)

    def save(self) -> SaveOutcome:
        work_date = self._displayed if self._mode == ViewMode.DAILY else None
        outcome = self._coordinator.save(actor_id=self._actor_id, work_date=work_date)
        if outcome.success:
            for d in self._policy.open_dates():
                self.close_edit(d)
        return outcome

    # === roster ===

    def search(self, term: str) -> list[RosterEntry]:
        self._search_term = term or ""
        return self.filtered_roster()

    def filtered_roster(self) -> list[RosterEntry]:
        return [entry for entry in self._roster if entry.matches(self._search_term)]

    def subject_ids(self) -> list[str]:
        return [entry.subject_id for entry in self._roster]

    # === read model ===

    def mark_for(self, subject_id: str, work_date: date) -> MarkStatus:
        return self._store.mark_for(subject_id, work_date)

    def teacher_mark_for(self, subject_id: str, work_date: date) -> Union[TeacherMark, MarkStatus]:
        record = self._store.record_for(subject_id, work_date)
        if record is None:
            return MarkStatus.NOT_MARKED
        return teacher_mark_of(record)

    def daily_counts(self, work_date: Optional[date] = None) -> aggregation.DayCounts:
        return aggregation.day_counts(self._store, self.subject_ids(), work_date or self._displayed)

    def weekly_summary(self) -> aggregation.WeeklySummary:
        counts = aggregation.cohort_day_counts(self._store, self.subject_ids(), self.days())
        return aggregation.summarize_week(counts, today=self.today(), total_subjects=len(self._roster))

    def subject_week_percentage(self, subject_id: str) -> int:
        return aggregation.subject_week_percentage(self._store.subject_statuses(subject_id).values())

    def summary(self) -> Union[aggregation.DayCounts, aggregation.WeeklySummary]:
        if self._mode == ViewMode.WEEKLY:
            return self.weekly_summary()
        return self.daily_counts()

    # === internals ===

    def _period_for(self, day: date) -> AttendancePeriod:
        if self._mode == ViewMode.WEEKLY:
            return AttendancePeriod.for_week(day)
        return AttendancePeriod.for_day(day)

    def _is_editable(self, work_date: date) -> bool:
        return self._policy.is_editable(work_date, today=self.today())

    def _edit_date(self) -> date:
        return self._displayed if self._mode == ViewMode.DAILY else self.today()

    def _weekly_policy(self) -> Optional[WeeklyEditWindow]:
        return self._policy if isinstance(self._policy, WeeklyEditWindow) else None
