"""CSV export helpers for Haseeb."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Iterable

from ..models.habit import Habit, HabitLog
from .growth import Period, compute_growth_table
from .habits import compute_streak, worst_fail_streak
from .snapshot import build_snapshot

SUMMARY_HEADERS = [
    "habit_id",
    "name",
    "kind",
    "scoring_eligible",
    "current_streak",
    "best_streak",
    "worst_fail_streak",
    *(f"growth_{period.value}" for period in Period),
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def build_summary_rows(
    habits: Iterable[Habit], logs: Iterable[HabitLog], *, today: date
) -> list[dict]:
    """One row per habit with its streaks and growth deltas."""

    snapshot = build_snapshot(habits, logs)
    growth = compute_growth_table(snapshot.habits.values(), snapshot.logs, today=today)

    rows: list[dict] = []
    for habit_id, habit in snapshot.habits.items():
        habit_logs = snapshot.logs_for(habit_id)
        streak = compute_streak(habit, habit_logs, today=today)
        row = {
            "habit_id": habit_id,
            "name": habit.name,
            "kind": habit.kind,
            "scoring_eligible": habit.scoring_eligible,
            "current_streak": streak.current_streak,
            "best_streak": streak.best_streak,
            "worst_fail_streak": worst_fail_streak(habit, habit_logs),
        }
        for period in Period:
            row[f"growth_{period.value}"] = growth[habit_id][period].delta
        rows.append(row)
    return rows


def export_summary_csv(
    *,
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    today: date,
    output_path: Path,
) -> Path:
    """Write the per-habit summary to CSV at `output_path`.

    Growth cells are empty when a period had no logs. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=SUMMARY_HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in build_summary_rows(habits, logs, today=today):
            writer.writerow({key: _serialize_value(value) for key, value in row.items()})

    return output_path


__all__ = ["SUMMARY_HEADERS", "build_summary_rows", "export_summary_csv"]
