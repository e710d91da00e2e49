"""Prayer quality breakdown and rolling trend series."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..config import DEFAULT_PRAYER_HABIT_IDS
from ..models.habit import Habit, HabitKind, HabitLog, PrayerQuality
from .snapshot import Snapshot, build_snapshot


@dataclass(slots=True)
class QualityBreakdown:
    """How graded logs spread over the quality levels."""

    counts: dict[PrayerQuality, int] = field(
        default_factory=lambda: {level: 0 for level in PrayerQuality}
    )

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def percentage(self, level: PrayerQuality) -> int:
        """Whole-percent share of ``level``; 0 when nothing was logged."""

        if not self.total:
            return 0
        return round(self.counts[level] / self.total * 100)

    @property
    def perfect_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.counts[PrayerQuality.TAKBIRAH] / self.total


@dataclass(slots=True)
class TrendPoint:
    """One day of the trend: rolling averages plus the raw daily counts."""

    day: date
    averages: dict[PrayerQuality, float]
    raw: dict[PrayerQuality, int]


def _graded_levels(
    snapshot: Snapshot, habit_ids: set[str] | None
) -> Iterable[tuple[HabitLog, PrayerQuality]]:
    for habit, log, outcome in snapshot.outcomes():
        if HabitKind(habit.kind) is not HabitKind.GRADED:
            continue
        if habit_ids is not None and habit.id not in habit_ids:
            continue
        if not outcome.is_terminal:
            continue
        try:
            level = PrayerQuality(log.value)
        except ValueError:
            continue
        yield log, level


def quality_breakdown(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    habit_ids: Iterable[str] | None = None,
) -> QualityBreakdown:
    """Count graded logs per quality level (excused logs are left out)."""

    snapshot = build_snapshot(habits, logs)
    breakdown = QualityBreakdown()
    wanted = set(habit_ids) if habit_ids is not None else None
    for _log, level in _graded_levels(snapshot, wanted):
        breakdown.counts[level] += 1
    return breakdown


def prayer_trends(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    today: date,
    habit_ids: Sequence[str] = DEFAULT_PRAYER_HABIT_IDS,
    days: int = 90,
    window: int = 7,
) -> list[TrendPoint]:
    """Daily quality counts over the last ``days`` days with trailing averages.

    Early days with less than ``window`` days of history average over what is
    available. Averages are rounded to one decimal.
    """

    if days < 1 or window < 1:
        raise ValueError("days and window must be positive")

    snapshot = build_snapshot(habits, logs)
    first_day = today - timedelta(days=days - 1)
    daily: dict[date, dict[PrayerQuality, int]] = {
        first_day + timedelta(days=offset): {level: 0 for level in PrayerQuality}
        for offset in range(days)
    }
    for log, level in _graded_levels(snapshot, set(habit_ids)):
        if log.log_date in daily:
            daily[log.log_date][level] += 1

    ordered = sorted(daily)
    points: list[TrendPoint] = []
    for index, day in enumerate(ordered):
        span = ordered[max(0, index - window + 1): index + 1]
        averages = {
            level: round(sum(daily[d][level] for d in span) / len(span), 1)
            for level in PrayerQuality
        }
        points.append(TrendPoint(day=day, averages=averages, raw=dict(daily[day])))
    return points


__all__ = ["QualityBreakdown", "TrendPoint", "prayer_trends", "quality_breakdown"]
