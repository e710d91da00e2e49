"""CSV ingestion of habit and log snapshots."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from ..logging_config import get_logger
from ..models.habit import (
    Habit,
    HabitCategory,
    HabitKind,
    HabitLog,
    HabitSchedule,
    LogStatus,
)
from .snapshot import as_date

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}

# Accept both the enum names and their stored values ("BINARY" or "REGULAR").
_KIND_ALIASES = {kind.name: kind for kind in HabitKind} | {kind.value: kind for kind in HabitKind}


def _clean(value: Any) -> Any:
    """Map pandas' missing markers to None and strip strings."""

    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _as_bool(value: Any, default: bool) -> bool:
    value = _clean(value)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in _TRUE_VALUES


def _as_int(value: Any) -> int | None:
    value = _clean(value)
    if value is None:
        return None
    return int(float(value))


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=True)
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def _rows(frame: pd.DataFrame) -> list[dict]:
    return [{c: r[c] for c in frame.columns} for _, r in frame.iterrows()]


def parse_habit_rows(rows: Iterable[Mapping]) -> list[Habit]:
    """Build habits from dict-like rows; rows without an id or a known kind are skipped."""

    habits: list[Habit] = []
    for index, row in enumerate(rows):
        habit_id = _clean(row.get("id"))
        kind_raw = _clean(row.get("kind")) or HabitKind.BINARY.value
        kind = _KIND_ALIASES.get(str(kind_raw).upper())
        if habit_id is None or kind is None:
            logger.warning("Skipping habit row %d: missing id or unknown kind %r", index, kind_raw)
            continue

        start_raw = _clean(row.get("start_date"))
        try:
            habits.append(
                Habit(
                    id=str(habit_id),
                    name=_clean(row.get("name")) or str(habit_id),
                    kind=kind,
                    daily_target=_as_int(row.get("daily_target")),
                    scoring_eligible=_as_bool(row.get("scoring_eligible"), True),
                    start_date=as_date(start_raw) if start_raw else None,
                    category=HabitCategory(_clean(row.get("category")) or HabitCategory.CUSTOM.value),
                    schedule=HabitSchedule(_clean(row.get("schedule")) or HabitSchedule.DAILY.value),
                    preset_id=_clean(row.get("preset_id")),
                    is_active=_as_bool(row.get("is_active"), True),
                    require_reason=_as_bool(row.get("require_reason"), False),
                )
            )
        except ValueError as exc:
            logger.warning("Skipping habit row %d: %s", index, exc)
    return habits


def parse_log_rows(rows: Iterable[Mapping]) -> list[HabitLog]:
    """Build logs from dict-like rows; unparseable rows are skipped with a warning."""

    logs: list[HabitLog] = []
    for index, row in enumerate(rows):
        habit_id = _clean(row.get("habit_id"))
        date_raw = _clean(row.get("date")) or _clean(row.get("log_date"))
        if habit_id is None or date_raw is None:
            logger.warning("Skipping log row %d: missing habit_id or date", index)
            continue
        try:
            recorded_raw = _clean(row.get("recorded_at"))
            logs.append(
                HabitLog(
                    habit_id=str(habit_id),
                    log_date=as_date(date_raw),
                    value=_as_int(row.get("value")) or 0,
                    status=LogStatus(str(_clean(row.get("status")) or LogStatus.DONE.value).upper()),
                    reason=_clean(row.get("reason")),
                    recorded_at=datetime.fromisoformat(recorded_raw) if recorded_raw else None,
                )
            )
        except ValueError as exc:
            logger.warning("Skipping log row %d: %s", index, exc)
    return logs


def load_habits_csv(csv_path: Path) -> list[Habit]:
    """Read a habits CSV export."""

    return parse_habit_rows(_rows(normalize_frame(file_path=csv_path)))


def load_logs_csv(csv_path: Path) -> list[HabitLog]:
    """Read a logs CSV export."""

    return parse_log_rows(_rows(normalize_frame(file_path=csv_path)))


def load_snapshot_csv(*, habits_path: Path, logs_path: Path) -> tuple[list[Habit], list[HabitLog]]:
    """Read both CSV files; the engine builds its snapshot from the result."""

    habits = load_habits_csv(habits_path)
    logs = load_logs_csv(logs_path)
    logger.info(
        "Loaded CSV snapshot",
        extra={"habits": len(habits), "logs": len(logs), "logs_path": str(logs_path)},
    )
    return habits, logs


__all__ = [
    "load_habits_csv",
    "load_logs_csv",
    "load_snapshot_csv",
    "normalize_frame",
    "parse_habit_rows",
    "parse_log_rows",
]
