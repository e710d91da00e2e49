"""Data-integrity problems the engine tolerates and reports."""

from __future__ import annotations

from datetime import date


class HaseebDataError(Exception):
    """Base class for problems found in a habit/log snapshot."""


class InvalidLogReference(HaseebDataError):
    """A log points at a habit id that is not in the habit list."""

    def __init__(self, habit_id: str, log_date: date):
        super().__init__(f"log on {log_date.isoformat()} references unknown habit {habit_id!r}")
        self.habit_id = habit_id
        self.log_date = log_date


class DuplicateLogError(HaseebDataError):
    """Two logs exist for the same habit on the same date."""

    def __init__(self, habit_id: str, log_date: date):
        super().__init__(f"duplicate logs for habit {habit_id!r} on {log_date.isoformat()}")
        self.habit_id = habit_id
        self.log_date = log_date


class MalformedLogError(HaseebDataError):
    """A log whose date or status cannot be read."""

    def __init__(self, habit_id: str, log_date: object, detail: str):
        super().__init__(f"unreadable log for habit {habit_id!r} on {log_date!s}: {detail}")
        self.habit_id = habit_id
        self.log_date = log_date
        self.detail = detail
