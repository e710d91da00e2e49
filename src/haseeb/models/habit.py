"""Habit tracking data structures."""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class HabitKind(str, enum.Enum):
    """How a habit's daily log is judged."""

    BINARY = "REGULAR"
    COUNTER = "COUNTER"
    GRADED = "PRAYER"


class LogStatus(str, enum.Enum):
    """Status recorded alongside a log value.

    ``SKIP`` is a deprecated state kept only so older rows still load; the
    engine ignores logs carrying it.
    """

    DONE = "DONE"
    FAIL = "FAIL"
    EXCUSED = "EXCUSED"
    SKIP = "SKIP"


class PrayerQuality(enum.IntEnum):
    """Ordinal quality scale for graded (prayer) habits."""

    MISSED = 0
    ON_TIME = 1
    JAMAA = 2
    TAKBIRAH = 3


class HabitCategory(str, enum.Enum):
    PRAYER = "prayer"
    QURAN = "quran"
    DHIKR = "dhikr"
    CHARITY = "charity"
    FASTING = "fasting"
    DUA = "dua"
    KNOWLEDGE = "knowledge"
    COMMUNITY = "community"
    HEALTH = "health"
    CUSTOM = "custom"


class HabitSchedule(str, enum.Enum):
    """Calendar condition deciding on which days a habit is due."""

    DAILY = "daily"
    MONDAYS = "mondays"
    THURSDAYS = "thursdays"
    WHITE_DAYS = "white_days"  # Hijri days 13, 14 and 15


class Habit(SQLModel, table=True):
    """A user-defined habit tracked once per calendar day."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(default="", max_length=80, index=True)
    kind: HabitKind = Field(default=HabitKind.BINARY, nullable=False)
    daily_target: Optional[int] = Field(default=None)
    scoring_eligible: bool = Field(default=True, nullable=False)
    start_date: Optional[date] = Field(default=None)
    category: HabitCategory = Field(default=HabitCategory.CUSTOM, nullable=False)
    schedule: HabitSchedule = Field(default=HabitSchedule.DAILY, nullable=False)
    preset_id: Optional[str] = Field(default=None, max_length=64)
    is_active: bool = Field(default=True, nullable=False)
    require_reason: bool = Field(default=False, nullable=False)

    @property
    def is_compound(self) -> bool:
        """True for twice-daily counters whose value packs AM/PM states."""

        return HabitKind(self.kind) is HabitKind.COUNTER and self.daily_target == 2


class HabitLog(SQLModel, table=True):
    """Outcome recorded for a habit on a calendar day."""

    __tablename__: ClassVar[str] = "habit_log"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=64)
    log_date: date = Field(primary_key=True, index=True)
    value: int = Field(default=0, nullable=False)
    status: LogStatus = Field(default=LogStatus.DONE, nullable=False)
    reason: Optional[str] = Field(default=None, max_length=255)
    recorded_at: Optional[datetime] = Field(default=None)
