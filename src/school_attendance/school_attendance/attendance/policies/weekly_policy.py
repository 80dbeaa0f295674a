from __future__ import annotations

from datetime import date

from ...common.datetime_utils import week_bounds
from ...core.enums import ViewMode
from ...core.exceptions import EditWindowError
from .base import EditWindowPolicy


class WeeklyEditWindow(EditWindowPolicy):
    """Weekly sheets: only today's column, and only after pressing "Edit".

    A date is eligible when it equals today and lies in the displayed
    Monday-Sunday week. It is editable when it is eligible and toggled open.
    """

    mode = ViewMode.WEEKLY

    def __init__(self, week_of: date):
        self._week_start, self._week_end = week_bounds(week_of)
        self._open: set[date] = set()

    @property
    def week_start(self) -> date:
        return self._week_start

    @property
    def week_end(self) -> date:
        return self._week_end

    def contains_today(self, today: date) -> bool:
        return self._week_start <= today <= self._week_end

    def is_eligible(self, candidate: date, *, today: date) -> bool:
        return candidate == today and self.contains_today(today)

    def is_editable(self, candidate: date, *, today: date) -> bool:
        return candidate in self._open and self.is_eligible(candidate, today=today)

    def open_dates(self) -> frozenset[date]:
        return frozenset(self._open)

    def is_open(self, candidate: date) -> bool:
        return candidate in self._open

    def open(self, candidate: date, *, today: date) -> None:
        if not self.is_eligible(candidate, today=today):
            raise EditWindowError("You can only edit attendance for the current day of the current week")
        self._open.add(candidate)

    def close(self, candidate: date) -> None:
        self._open.discard(candidate)

    def toggle(self, candidate: date, *, today: date) -> bool:
        """Open or close a date; returns whether it is open afterwards."""
        if candidate in self._open:
            self.close(candidate)
            return False
        self.open(candidate, today=today)
        return True

    def move_to(self, day: date) -> None:
        self.check_navigation()
        self._week_start, self._week_end = week_bounds(day)
