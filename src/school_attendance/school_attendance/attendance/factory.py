from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import ViewMode
from .policies.base import EditWindowPolicy
from .policies.daily_policy import DailyEditWindow
from .policies.weekly_policy import WeeklyEditWindow


@dataclass
class EditWindowFactory:
    """Factory Pattern: choose the edit-window policy for a sheet."""

    def for_view(self, mode: ViewMode, *, displayed: date) -> EditWindowPolicy:
        if ViewMode(mode) == ViewMode.WEEKLY:
            return WeeklyEditWindow(displayed)
        return DailyEditWindow(displayed)
