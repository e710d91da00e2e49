"""Pytest configuration and shared fixtures for Haseeb tests.

This module provides database fixtures and test data factories for exercising
the engine, the log store and the CLI without touching a real data directory.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from factories import PRAYER_IDS, make_habit, make_log
from haseeb.models import Habit, HabitCategory, HabitKind, HabitLog


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path, monkeypatch):
    """Point configuration at a throwaway data directory for every test."""

    data_dir = tmp_path / "data"
    monkeypatch.setenv("HASEEB_DATA_DIR", str(data_dir))
    monkeypatch.delenv("HASEEB_DATABASE_URL", raising=False)
    monkeypatch.delenv("HASEEB_PRAYER_HABIT_IDS", raising=False)
    return data_dir


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the Callable[[], Session] repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def prayer_habits() -> list[Habit]:
    """The five daily prayers as graded habits."""

    return [
        make_habit(pid, kind=HabitKind.GRADED, category=HabitCategory.PRAYER)
        for pid in PRAYER_IDS
    ]


@pytest.fixture
def habit_factory(db_session):
    """Factory for creating persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(habit_id: str = "quran", **kwargs) -> Habit:
        habit = make_habit(habit_id, **kwargs)
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def log_factory(db_session):
    """Factory for creating persisted logs."""

    def _create_log(habit_id: str, log_date: date, **kwargs) -> HabitLog:
        log = make_log(habit_id, log_date, **kwargs)
        db_session.add(log)
        db_session.commit()
        db_session.refresh(log)
        return log

    return _create_log
