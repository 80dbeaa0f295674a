from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ...core.enums import ViewMode
from ...core.exceptions import EditWindowError
from ..status_mapping import SheetMark, is_working_mark


class EditWindowPolicy(ABC):
    """Strategy Pattern: decide which displayed dates may be mutated."""

    mode: ViewMode

    @abstractmethod
    def is_eligible(self, candidate: date, *, today: date) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_editable(self, candidate: date, *, today: date) -> bool:
        raise NotImplementedError

    @abstractmethod
    def move_to(self, day: date) -> None:
        """Point the policy at a newly displayed day/week."""
        raise NotImplementedError

    def open_dates(self) -> frozenset[date]:
        return frozenset()

    def can_navigate(self) -> bool:
        return not self.open_dates()

    def check_editable(self, candidate: date, *, today: date) -> None:
        if not self.is_editable(candidate, today=today):
            raise EditWindowError(f"Attendance for {candidate.isoformat()} cannot be edited")

    def check_bulk_mark(self, candidate: date, mark: SheetMark, *, today: date) -> None:
        if not self.is_editable(candidate, today=today):
            raise EditWindowError("You can only mark attendance for the current day")
        if not is_working_mark(mark):
            raise EditWindowError("Bulk actions can only mark present or absent")

    def check_navigation(self) -> None:
        if not self.can_navigate():
            raise EditWindowError("Finish or close the open edit before changing the period")
