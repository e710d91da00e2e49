"""Engine and session plumbing for the SQLite log store."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig


def create_db_engine(config: BaseConfig):
    """Engine for ``config.DATABASE_URL``; SQLite connections get the configured pragmas."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())

    if config.DATABASE_URL.startswith("sqlite"):

        @event.listens_for(engine, "connect")
        def _apply_pragmas(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            for name, value in config.SQLITE_PRAGMAS.items():
                cursor.execute(f"PRAGMA {name}={value}")
            cursor.close()

    return engine


def init_database(engine) -> None:
    """Create the habit and habit_log tables if missing."""
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine):
    """Return a context manager yielding a session that commits on success."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple:
    """Open the configured database with its schema in place.

    Returns ``(engine, session_factory)``.
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)
