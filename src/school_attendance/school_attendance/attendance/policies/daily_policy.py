from __future__ import annotations

from datetime import date

from ...core.enums import ViewMode
from .base import EditWindowPolicy


class DailyEditWindow(EditWindowPolicy):
    """Daily sheets: the whole displayed day is editable.

    Navigation moves the entire view, so there is nothing to toggle open.
    """

    mode = ViewMode.DAILY

    def __init__(self, displayed: date):
        self._displayed = displayed

    @property
    def displayed(self) -> date:
        return self._displayed

    def is_eligible(self, candidate: date, *, today: date) -> bool:
        return candidate == self._displayed

    def is_editable(self, candidate: date, *, today: date) -> bool:
        return self.is_eligible(candidate, today=today)

    def move_to(self, day: date) -> None:
        self._displayed = day
