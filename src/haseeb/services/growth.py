"""Period-over-period growth of a habit's win count."""

from __future__ import annotations

import calendar
import enum
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

from ..models.habit import Habit, HabitLog
from .quality import LogOutcome, classify
from .snapshot import Snapshot, build_snapshot


class Period(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(slots=True)
class GrowthResult:
    """Change in win count versus the preceding period.

    ``delta`` is ``None`` when either period has no logs at all, which is
    different from an unchanged count (``0``).
    """

    delta: int | None
    current_wins: int = 0
    previous_wins: int = 0


def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def period_bounds(period: Period | str, anchor: date) -> tuple[date, date]:
    """Inclusive calendar bounds of the period containing ``anchor``.

    Weeks follow ISO numbering and start on Monday.
    """

    period = Period(period)
    if period is Period.WEEK:
        start = anchor - timedelta(days=anchor.weekday())
        return start, start + timedelta(days=6)
    if period is Period.MONTH:
        return anchor.replace(day=1), _month_end(anchor.year, anchor.month)
    if period is Period.QUARTER:
        first_month = 3 * ((anchor.month - 1) // 3) + 1
        return date(anchor.year, first_month, 1), _month_end(anchor.year, first_month + 2)
    return date(anchor.year, 1, 1), date(anchor.year, 12, 31)


def previous_period_bounds(period: Period | str, anchor: date) -> tuple[date, date]:
    """Bounds of the period immediately before the one containing ``anchor``."""

    start, _ = period_bounds(period, anchor)
    return period_bounds(period, start - timedelta(days=1))


def _window_counts(habit: Habit, logs: list[HabitLog], start: date, end: date) -> tuple[int, int]:
    """Return (logs, wins) of ``habit`` dated within ``[start, end]``."""

    total = 0
    wins = 0
    for log in logs:
        if not start <= log.log_date <= end:
            continue
        outcome = classify(habit, log)
        if outcome is LogOutcome.IGNORED:
            continue
        total += 1
        if outcome is LogOutcome.WIN:
            wins += 1
    return total, wins


def _growth_from_snapshot(
    habit: Habit, snapshot: Snapshot, period: Period, today: date
) -> GrowthResult:
    logs = snapshot.logs_for(habit.id)
    curr_start, curr_end = period_bounds(period, today)
    curr_total, curr_wins = _window_counts(habit, logs, curr_start, min(curr_end, today))
    prev_total, prev_wins = _window_counts(habit, logs, *previous_period_bounds(period, today))

    if curr_total == 0 or prev_total == 0:
        return GrowthResult(delta=None, current_wins=curr_wins, previous_wins=prev_wins)
    return GrowthResult(
        delta=curr_wins - prev_wins, current_wins=curr_wins, previous_wins=prev_wins
    )


def compute_growth(
    habit: Habit, logs: Iterable[HabitLog], period: Period | str, *, today: date
) -> GrowthResult:
    """Compare win counts of the current and previous ``period``.

    The current period runs up to ``today``; logs dated later are left out.
    """

    own_logs = [log for log in logs if log.habit_id == habit.id]
    snapshot = build_snapshot([habit], own_logs)
    return _growth_from_snapshot(snapshot.habits[habit.id], snapshot, Period(period), today)


def compute_growth_table(
    habits: Iterable[Habit], logs: Iterable[HabitLog], *, today: date
) -> dict[str, dict[Period, GrowthResult]]:
    """Growth of every habit for each period granularity."""

    snapshot = build_snapshot(habits, logs)
    return {
        habit_id: {
            period: _growth_from_snapshot(habit, snapshot, period, today) for period in Period
        }
        for habit_id, habit in snapshot.habits.items()
    }


__all__ = [
    "GrowthResult",
    "Period",
    "compute_growth",
    "compute_growth_table",
    "period_bounds",
    "previous_period_bounds",
]
