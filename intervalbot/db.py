from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_settings


class Base(DeclarativeBase):
    """Declarative base for preset and user tables."""


_settings = get_settings()
engine = create_engine(_settings.database_url, future=True, echo=False)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
        # presets rely on ON DELETE CASCADE from users
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Runs blocking ORM callables off the event loop so timer jobs keep ticking."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def _run_sync(self, func: Callable[[Session], Any]) -> Any:
        with self._session_factory() as session:
            try:
                result = func(session)
                session.commit()
                return result
            except Exception:
                session.rollback()
                raise

    async def run(self, func: Callable[[Session], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._run_sync, func)


_db_instance: Optional[Database] = None


def get_db() -> Database:
    global _db_instance
    if _db_instance is None:
        _db_instance = Database(SessionLocal)
    return _db_instance


def create_schema() -> None:
    """Create missing tables; migrations in alembic/ remain the source of truth in production."""
    Base.metadata.create_all(engine)
