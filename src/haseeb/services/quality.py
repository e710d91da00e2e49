"""Quality model: what a single day's log means for its habit.

Every log classifies to exactly one :class:`LogOutcome`. The streak, score,
growth and obstacle services only ever look at outcomes, so the per-kind
rules live here and nowhere else.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from typing import Callable

from hijridate import Gregorian

from ..logging_config import get_logger
from ..models.habit import Habit, HabitKind, HabitLog, HabitSchedule, LogStatus, PrayerQuality

logger = get_logger(__name__)

WHITE_DAYS = frozenset({13, 14, 15})

# Presets created before habits carried an explicit schedule.
LEGACY_SCHEDULES = {
    "fasting_monday": HabitSchedule.MONDAYS,
    "fasting_thursday": HabitSchedule.THURSDAYS,
    "fasting_white_days": HabitSchedule.WHITE_DAYS,
}


class LogOutcome(str, enum.Enum):
    WIN = "win"
    LOSS = "loss"
    EXCUSED = "excused"
    PENDING = "pending"  # recorded but not complete yet
    IGNORED = "ignored"  # deprecated status

    @property
    def is_terminal(self) -> bool:
        """True for outcomes that count toward wins/losses."""

        return self in (LogOutcome.WIN, LogOutcome.LOSS)


class SessionState(enum.IntEnum):
    """State of one half (morning or evening) of a twice-daily counter."""

    PENDING = 0
    DONE = 1
    FAIL = 2


@dataclass(frozen=True, slots=True)
class CompoundValue:
    """Morning/evening outcome pair stored as ``am * 10 + pm``."""

    am: SessionState
    pm: SessionState

    @property
    def is_complete(self) -> bool:
        # The evening session closes the day, whatever happened in the morning.
        return self.pm is not SessionState.PENDING

    @property
    def is_win(self) -> bool:
        return self.am is SessionState.DONE and self.pm is SessionState.DONE

    def encode(self) -> int:
        return encode_compound(self.am, self.pm)


def decode_compound(value: int) -> CompoundValue:
    """Split a stored twice-daily value into its AM/PM states.

    Raises:
        ValueError: if ``value`` is not a two-digit code built from 0/1/2.
    """

    if value < 0 or value > 22:
        raise ValueError(f"compound value out of range: {value}")
    am, pm = divmod(value, 10)
    try:
        return CompoundValue(am=SessionState(am), pm=SessionState(pm))
    except ValueError as exc:
        raise ValueError(f"invalid compound value: {value}") from exc


def encode_compound(am: SessionState | int, pm: SessionState | int) -> int:
    """Pack AM/PM states into the storage integer."""

    return int(SessionState(am)) * 10 + int(SessionState(pm))


def _judge_binary(habit: Habit, log: HabitLog, status: LogStatus) -> LogOutcome:
    return LogOutcome.WIN if status is LogStatus.DONE else LogOutcome.LOSS


def _judge_counter(habit: Habit, log: HabitLog, status: LogStatus) -> LogOutcome:
    if habit.is_compound:
        try:
            compound = decode_compound(log.value)
        except ValueError:
            logger.warning(
                "Unreadable twice-daily value treated as pending",
                extra={"habit_id": habit.id, "log_date": log.log_date, "value": log.value},
            )
            return LogOutcome.PENDING
        if not compound.is_complete:
            return LogOutcome.PENDING
        return LogOutcome.WIN if compound.is_win else LogOutcome.LOSS

    target = habit.daily_target or 1
    if log.value >= target or status is LogStatus.DONE:
        return LogOutcome.WIN
    return LogOutcome.LOSS


def _judge_graded(habit: Habit, log: HabitLog, status: LogStatus) -> LogOutcome:
    # Every level below the top one is a logged loss, Missed included.
    return LogOutcome.WIN if log.value == PrayerQuality.TAKBIRAH else LogOutcome.LOSS


_JUDGES: dict[HabitKind, Callable[[Habit, HabitLog, LogStatus], LogOutcome]] = {
    HabitKind.BINARY: _judge_binary,
    HabitKind.COUNTER: _judge_counter,
    HabitKind.GRADED: _judge_graded,
}


def classify(habit: Habit, log: HabitLog) -> LogOutcome:
    """Return the outcome of ``log`` under ``habit``'s success rules."""

    status = LogStatus(log.status)
    if status is LogStatus.SKIP:
        return LogOutcome.IGNORED
    if status is LogStatus.EXCUSED:
        return LogOutcome.EXCUSED
    return _JUDGES[HabitKind(habit.kind)](habit, log, status)


def is_win(habit: Habit, log: HabitLog) -> bool:
    return classify(habit, log) is LogOutcome.WIN


def resolve_schedule(habit: Habit) -> HabitSchedule:
    """Return the habit's schedule, honouring legacy fasting presets."""

    schedule = HabitSchedule(habit.schedule or HabitSchedule.DAILY)
    if schedule is HabitSchedule.DAILY:
        for key in (habit.preset_id, habit.id):
            if key in LEGACY_SCHEDULES:
                return LEGACY_SCHEDULES[key]
    return schedule


def is_hijri_white_day(day: date) -> bool:
    """True when ``day`` falls on the 13th, 14th or 15th of a Hijri month."""

    try:
        hijri = Gregorian(day.year, day.month, day.day).to_hijri()
    except (OverflowError, ValueError):
        # Umm al-Qura tables only cover roughly 1924-2077.
        logger.debug("Hijri conversion unavailable for %s", day.isoformat())
        return False
    return hijri.day in WHITE_DAYS


def is_applicable(habit: Habit, day: date) -> bool:
    """Whether ``habit`` is due on ``day``.

    Days before the habit's start date and days outside a calendar-conditioned
    schedule are not applicable; a missing log there is not a gap.
    """

    if habit.start_date is not None and day < habit.start_date:
        return False

    schedule = resolve_schedule(habit)
    if schedule is HabitSchedule.MONDAYS:
        return day.weekday() == 0
    if schedule is HabitSchedule.THURSDAYS:
        return day.weekday() == 3
    if schedule is HabitSchedule.WHITE_DAYS:
        return is_hijri_white_day(day)
    return True


__all__ = [
    "CompoundValue",
    "LogOutcome",
    "SessionState",
    "classify",
    "decode_compound",
    "encode_compound",
    "is_applicable",
    "is_hijri_white_day",
    "is_win",
    "resolve_schedule",
]
