"""SQLModel implementation of the log store."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Habit, HabitLog

logger = get_logger(__name__)


class SQLModelLogStore:
    """SQLModel-based log store implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(select(Habit).where(Habit.id == habit_id)).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_habits(self, include_inactive: bool = True) -> list[Habit]:
        """List habits, optionally hiding inactive ones."""
        with self.session_factory() as session:
            statement = select(Habit).order_by(Habit.id)  # type: ignore
            if not include_inactive:
                statement = statement.where(Habit.is_active == True)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def add_habit(self, habit: Habit) -> Habit:
        """Create or replace a habit definition."""
        with self.session_factory() as session:
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def list_logs(
        self,
        *,
        habit_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitLog]:
        """Logs ordered by date, optionally filtered by habit and date range."""
        with self.session_factory() as session:
            statement = select(HabitLog)
            if habit_id is not None:
                statement = statement.where(HabitLog.habit_id == habit_id)
            if start_date is not None:
                statement = statement.where(HabitLog.log_date >= start_date)
            if end_date is not None:
                statement = statement.where(HabitLog.log_date <= end_date)
            statement = statement.order_by(HabitLog.log_date, HabitLog.habit_id)  # type: ignore

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert_log(self, log: HabitLog) -> HabitLog:
        """Insert or overwrite the log for a habit and date."""
        with self.session_factory() as session:
            if log.recorded_at is None:
                log.recorded_at = datetime.now(timezone.utc)
            existing = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == log.habit_id)
                .where(HabitLog.log_date == log.log_date)
            ).first()

            if existing:
                existing.value = log.value
                existing.status = log.status
                existing.reason = log.reason
                existing.recorded_at = log.recorded_at
                session.add(existing)
                session.commit()
                session.refresh(existing)
                session.expunge(existing)
                return existing

            session.add(log)
            session.commit()
            session.refresh(log)
            session.expunge(log)
            return log

    def delete_log(self, habit_id: str, log_date: date) -> None:
        """Delete a log (undo)."""
        with self.session_factory() as session:
            log = session.exec(
                select(HabitLog)
                .where(HabitLog.habit_id == habit_id)
                .where(HabitLog.log_date == log_date)
            ).first()

            if log:
                session.delete(log)
                session.commit()

    def snapshot(self) -> tuple[list[Habit], list[HabitLog]]:
        """All habits and logs at this point in time."""
        habits = self.list_habits()
        logs = self.list_logs()
        logger.debug("Loaded store snapshot", extra={"habits": len(habits), "logs": len(logs)})
        return habits, logs
