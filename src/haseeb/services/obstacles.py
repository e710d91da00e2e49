"""Ranking of the reasons given for missed habits."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from ..models.habit import Habit, HabitCategory, HabitLog
from .quality import LogOutcome
from .snapshot import Snapshot, build_snapshot


@dataclass(slots=True)
class ObstacleEntry:
    reason: str
    count: int
    percentage: float  # share of losses that carried a reason, 0.0-1.0


def _rank(
    snapshot: Snapshot,
    *,
    top_n: int,
    category: HabitCategory | None,
    habit_ids: set[str] | None,
) -> list[ObstacleEntry]:
    counts: Counter[str] = Counter()
    for habit, log, outcome in snapshot.outcomes():
        if outcome is not LogOutcome.LOSS:
            continue
        if category is not None and HabitCategory(habit.category) is not category:
            continue
        if habit_ids is not None and habit.id not in habit_ids:
            continue
        reason = (log.reason or "").strip()
        if reason:
            counts[reason] += 1

    total = sum(counts.values())
    if not total:
        return []

    # Counter keeps first-seen order and sorted() is stable, so ties stay in that order.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [
        ObstacleEntry(reason=reason, count=count, percentage=count / total)
        for reason, count in ranked[:top_n]
    ]


def rank_obstacles(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    top_n: int = 3,
    category: HabitCategory | str | None = None,
    habit_ids: Iterable[str] | None = None,
) -> list[ObstacleEntry]:
    """Most frequent reasons attached to lost days, best first.

    Percentages are relative to losses that carry a reason, not all losses.
    """

    if top_n < 1:
        raise ValueError("top_n must be at least 1")
    snapshot = build_snapshot(habits, logs)
    return _rank(
        snapshot,
        top_n=top_n,
        category=HabitCategory(category) if category is not None else None,
        habit_ids=set(habit_ids) if habit_ids is not None else None,
    )


def obstacles_by_category(
    habits: Iterable[Habit], logs: Iterable[HabitLog], *, top_n: int = 3
) -> dict[HabitCategory, list[ObstacleEntry]]:
    """Obstacle rankings per habit category; empty categories are omitted."""

    if top_n < 1:
        raise ValueError("top_n must be at least 1")
    snapshot = build_snapshot(habits, logs)
    categories = {HabitCategory(habit.category) for habit in snapshot.habits.values()}
    segmented = {}
    for category in sorted(categories, key=lambda item: item.value):
        entries = _rank(snapshot, top_n=top_n, category=category, habit_ids=None)
        if entries:
            segmented[category] = entries
    return segmented


__all__ = ["ObstacleEntry", "obstacles_by_category", "rank_obstacles"]
