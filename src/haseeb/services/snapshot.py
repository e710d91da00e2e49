"""Point-in-time view over habits and logs handed to the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable, Mapping

from ..errors import DuplicateLogError, HaseebDataError, InvalidLogReference, MalformedLogError
from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog, LogStatus
from .quality import LogOutcome, classify

logger = get_logger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def as_date(value: date | datetime | str) -> date:
    """Accept ``date``/``datetime`` objects or ISO ``YYYY-MM-DD`` strings."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _normalized_log(log: HabitLog) -> HabitLog:
    """Coerce date and status to their types.

    Raises:
        ValueError: if either cannot be read.
    """

    log_date = as_date(log.log_date)
    status = LogStatus(log.status)
    if type(log.log_date) is date and type(log.status) is LogStatus:
        return log
    return HabitLog(**{**log.model_dump(), "log_date": log_date, "status": status})


def _normalized_habit(habit: Habit) -> Habit:
    if habit.start_date is None or type(habit.start_date) is date:
        return habit
    return Habit(**{**habit.model_dump(), "start_date": as_date(habit.start_date)})


def _recorded_key(log: HabitLog) -> datetime:
    """Comparable timestamp: missing sorts earliest, naive values are read as UTC."""

    recorded = log.recorded_at
    if recorded is None:
        return _EARLIEST
    if recorded.tzinfo is None:
        return recorded.replace(tzinfo=timezone.utc)
    return recorded.astimezone(timezone.utc)


@dataclass(frozen=True)
class Snapshot:
    """Validated habits and logs; at most one log per (habit, date)."""

    habits: Mapping[str, Habit]
    logs: tuple[HabitLog, ...]
    issues: tuple[HaseebDataError, ...] = field(default=())

    def habit(self, habit_id: str) -> Habit | None:
        return self.habits.get(habit_id)

    def logs_for(self, habit_id: str) -> list[HabitLog]:
        """Logs of one habit in ascending date order."""

        return sorted(
            (log for log in self.logs if log.habit_id == habit_id),
            key=lambda log: log.log_date,
        )

    def outcomes(self) -> Iterable[tuple[Habit, HabitLog, LogOutcome]]:
        """Yield every log with its habit and classified outcome."""

        for log in self.logs:
            habit = self.habits[log.habit_id]
            yield habit, log, classify(habit, log)

    @property
    def is_empty(self) -> bool:
        return not self.logs


def build_snapshot(
    habits: Iterable[Habit],
    logs: Iterable[HabitLog],
    *,
    strict: bool = False,
) -> Snapshot:
    """Index habits and clean up logs before any computation.

    Logs with an unreadable date or status, and logs referencing an unknown
    habit, are dropped. When two logs share a habit and date, the one with the
    latest ``recorded_at`` wins (later input order breaks ties). Each problem
    is logged and kept in ``Snapshot.issues``; ``strict=True`` raises the
    first one instead.
    """

    habit_map: dict[str, Habit] = {}
    for habit in habits:
        habit_map[habit.id] = _normalized_habit(habit)

    issues: list[HaseebDataError] = []
    kept: dict[tuple[str, date], tuple[int, HabitLog]] = {}

    for position, raw in enumerate(logs):
        try:
            log = _normalized_log(raw)
        except ValueError as exc:
            issue: HaseebDataError = MalformedLogError(raw.habit_id, raw.log_date, str(exc))
            if strict:
                raise issue from exc
            logger.warning(str(issue), extra={"habit_id": raw.habit_id})
            issues.append(issue)
            continue

        if log.habit_id not in habit_map:
            issue = InvalidLogReference(log.habit_id, log.log_date)
            if strict:
                raise issue
            logger.warning(str(issue), extra={"habit_id": log.habit_id})
            issues.append(issue)
            continue

        key = (log.habit_id, log.log_date)
        if key in kept:
            issue = DuplicateLogError(log.habit_id, log.log_date)
            if strict:
                raise issue
            logger.warning(str(issue), extra={"habit_id": log.habit_id})
            issues.append(issue)
            first_position, existing = kept[key]
            if _recorded_key(log) >= _recorded_key(existing):
                kept[key] = (first_position, log)
            continue

        kept[key] = (position, log)

    ordered = tuple(log for _, log in sorted(kept.values(), key=lambda item: item[0]))
    return Snapshot(habits=habit_map, logs=ordered, issues=tuple(issues))


__all__ = ["Snapshot", "as_date", "build_snapshot"]
