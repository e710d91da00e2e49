"""Habit service helpers for streaks."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, Mapping, Sequence

from ..config import DEFAULT_PRAYER_HABIT_IDS
from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog
from .quality import LogOutcome, classify, is_applicable
from .snapshot import Snapshot, build_snapshot

logger = get_logger(__name__)

STREAK_BADGE_MIN = 3
STREAK_FADE_START = 21
STREAK_FADE_END = 30


@dataclass(slots=True)
class StreakResult:
    """Current and best run of consecutive winning days."""

    current_streak: int = 0
    best_streak: int = 0


class DayOutcome(enum.Enum):
    WIN = "win"
    LOSS = "loss"
    BRIDGE = "bridge"


_SINGLE_DAY_OUTCOMES = {
    LogOutcome.WIN: DayOutcome.WIN,
    LogOutcome.LOSS: DayOutcome.LOSS,
    LogOutcome.EXCUSED: DayOutcome.BRIDGE,
}


def _days_between(start: date, end: date) -> Iterable[date]:
    """Dates strictly between ``start`` and ``end``."""

    cursor = start + timedelta(days=1)
    while cursor < end:
        yield cursor
        cursor += timedelta(days=1)


def _walk(
    days: Mapping[date, DayOutcome],
    *,
    is_bridge: Callable[[date], bool],
    today: date,
) -> StreakResult:
    """Sweep day outcomes in date order, tracking the running and best streak.

    A gap between two winning days keeps the run alive only when every day
    inside it is a bridge (excused, or the habit was not due).
    """

    run = 0
    best = 0
    last_counted: date | None = None

    for day in sorted(days):
        outcome = days[day]
        if outcome is DayOutcome.BRIDGE:
            continue
        if outcome is DayOutcome.WIN:
            if last_counted is not None and all(
                is_bridge(gap_day) for gap_day in _days_between(last_counted, day)
            ):
                run += 1
            else:
                run = 1
            last_counted = day
            best = max(best, run)
        else:
            run = 0
            last_counted = None

    # Today may still be unlogged; anything else between the last win and
    # today has to be a bridge for the run to still be current.
    current = 0
    if last_counted is not None and all(
        is_bridge(gap_day) for gap_day in _days_between(last_counted, today)
    ):
        current = run

    return StreakResult(current_streak=current, best_streak=best)


def _single_habit_days(
    habit: Habit, logs: Sequence[HabitLog], today: date
) -> dict[date, DayOutcome]:
    days: dict[date, DayOutcome] = {}
    for log in logs:
        if log.log_date > today:
            continue
        if habit.start_date is not None and log.log_date < habit.start_date:
            continue
        outcome = _SINGLE_DAY_OUTCOMES.get(classify(habit, log))
        if outcome is not None:
            days[log.log_date] = outcome
    return days


def _streak_from_snapshot(habit: Habit, snapshot: Snapshot, today: date) -> StreakResult:
    days = _single_habit_days(habit, snapshot.logs_for(habit.id), today)
    if not days:
        return StreakResult()

    def is_bridge(day: date) -> bool:
        return days.get(day) is DayOutcome.BRIDGE or not is_applicable(habit, day)

    return _walk(days, is_bridge=is_bridge, today=today)


def compute_streak(habit: Habit, logs: Iterable[HabitLog], *, today: date) -> StreakResult:
    """Return the current and best streak of one habit as of ``today``.

    ``logs`` may contain other habits' logs; only this habit's are used.
    """

    own_logs = [log for log in logs if log.habit_id == habit.id]
    snapshot = build_snapshot([habit], own_logs)
    return _streak_from_snapshot(snapshot.habits[habit.id], snapshot, today)


def _group_day(
    members: Sequence[Habit], by_habit: Mapping[str, Mapping[date, LogOutcome]], day: date
) -> DayOutcome | None:
    due = [habit for habit in members if is_applicable(habit, day)]
    if not due:
        return None

    outcomes = [by_habit[habit.id].get(day) for habit in due]
    if all(outcome is LogOutcome.EXCUSED for outcome in outcomes):
        return DayOutcome.BRIDGE
    if all(outcome is LogOutcome.WIN for outcome in outcomes):
        return DayOutcome.WIN
    if any(outcome is LogOutcome.LOSS for outcome in outcomes):
        return DayOutcome.LOSS
    if all(outcome in (LogOutcome.WIN, LogOutcome.EXCUSED) for outcome in outcomes):
        # Partial excusal earns no credit and breaks the run like a loss.
        return DayOutcome.LOSS
    # Some members still unlogged or pending: the day may yet become a bridge.
    return None


def compute_group_streak(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    today: date,
    habit_ids: Iterable[str] | None = None,
) -> StreakResult:
    """Streak of days on which every habit of a group won.

    ``habit_ids`` selects the group out of ``habits`` (all of them when
    omitted). Scoring-ineligible habits never take part in a joint streak.
    """

    snapshot = build_snapshot(habits, logs)
    wanted = set(habit_ids) if habit_ids is not None else set(snapshot.habits)
    members = [
        habit
        for habit_id, habit in snapshot.habits.items()
        if habit_id in wanted and habit.scoring_eligible
    ]
    if not members:
        logger.debug(
            "Joint streak requested for an empty group", extra={"habit_ids": sorted(wanted)}
        )
        return StreakResult()

    by_habit: dict[str, dict[date, LogOutcome]] = {habit.id: {} for habit in members}
    for habit in members:
        for log in snapshot.logs_for(habit.id):
            if log.log_date <= today:
                by_habit[habit.id][log.log_date] = classify(habit, log)

    all_days = sorted({day for outcomes in by_habit.values() for day in outcomes})
    days: dict[date, DayOutcome] = {}
    for day in all_days:
        outcome = _group_day(members, by_habit, day)
        if outcome is not None:
            days[day] = outcome
    if not days:
        return StreakResult()

    def is_bridge(day: date) -> bool:
        if days.get(day) is DayOutcome.BRIDGE:
            return True
        return not any(is_applicable(habit, day) for habit in members)

    return _walk(days, is_bridge=is_bridge, today=today)


def compute_prayer_streak(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    today: date,
    prayer_ids: Sequence[str] = DEFAULT_PRAYER_HABIT_IDS,
) -> StreakResult:
    """Joint streak of the five daily prayers all reaching the top quality."""

    return compute_group_streak(habits, logs, today=today, habit_ids=prayer_ids)


def compute_habit_streaks(
    habits: Iterable[Habit], logs: Iterable[HabitLog], *, today: date
) -> dict[str, StreakResult]:
    """Streaks for every scoring-eligible habit, keyed by habit id."""

    snapshot = build_snapshot(habits, logs)
    return {
        habit_id: _streak_from_snapshot(habit, snapshot, today)
        for habit_id, habit in snapshot.habits.items()
        if habit.scoring_eligible
    }


def worst_fail_streak(habit: Habit, logs: Iterable[HabitLog]) -> int:
    """Longest run of losses on consecutive calendar days."""

    snapshot = build_snapshot([habit], [log for log in logs if log.habit_id == habit.id])
    worst = 0
    run = 0
    previous: date | None = None
    for log in snapshot.logs_for(habit.id):
        if classify(habit, log) is not LogOutcome.LOSS:
            continue
        if previous is not None and log.log_date - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        previous = log.log_date
        worst = max(worst, run)
    return worst


def should_show_streak(streak: int) -> bool:
    """Badges only appear once a streak reaches three days."""

    return streak >= STREAK_BADGE_MIN


def streak_opacity(streak: int) -> float:
    """Badge opacity: solid up to three weeks, fading out by day thirty."""

    if streak < STREAK_BADGE_MIN:
        return 0.0
    if streak <= STREAK_FADE_START:
        return 1.0
    if streak >= STREAK_FADE_END:
        return 0.0
    faded = 1 - (streak - STREAK_FADE_START) / (STREAK_FADE_END - STREAK_FADE_START)
    return max(0.0, min(1.0, faded))


def completed_dates(
    habits: Iterable[Habit], logs: Iterable[HabitLog], dates: Iterable[date]
) -> list[date]:
    """Dates on which every due, active habit has some log recorded."""

    snapshot = build_snapshot(habits, logs)
    logged = {(log.habit_id, log.log_date) for log in snapshot.logs}
    active = [habit for habit in snapshot.habits.values() if habit.is_active]

    result = []
    for day in sorted(set(dates)):
        due = [habit for habit in active if is_applicable(habit, day)]
        if due and all((habit.id, day) in logged for habit in due):
            result.append(day)
    return result


__all__ = [
    "DayOutcome",
    "StreakResult",
    "completed_dates",
    "compute_group_streak",
    "compute_habit_streaks",
    "compute_prayer_streak",
    "compute_streak",
    "should_show_streak",
    "streak_opacity",
    "worst_fail_streak",
]
