"""SQLModel table exports."""

from .habit import (
    Habit,
    HabitCategory,
    HabitKind,
    HabitLog,
    HabitSchedule,
    LogStatus,
    PrayerQuality,
)

__all__ = [
    "Habit",
    "HabitCategory",
    "HabitKind",
    "HabitLog",
    "HabitSchedule",
    "LogStatus",
    "PrayerQuality",
]
