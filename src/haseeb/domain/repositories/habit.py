"""Log store protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitLog


class LogStore(Protocol):
    """Source of habits and logs the engine reads snapshots from."""

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_habits(self, include_inactive: bool = True) -> list[Habit]:
        """List habits, optionally hiding inactive ones."""
        ...

    def list_logs(
        self,
        *,
        habit_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitLog]:
        """Logs ordered by date, optionally filtered by habit and date range."""
        ...

    def upsert_log(self, log: HabitLog) -> HabitLog:
        """Insert or overwrite the log for a habit and date."""
        ...

    def delete_log(self, habit_id: str, log_date: date) -> None:
        """Delete a log (undo)."""
        ...

    def snapshot(self) -> tuple[list[Habit], list[HabitLog]]:
        """All habits and logs at this point in time."""
        ...
