from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _prepare_sqlite_connection(dbapi_connection, connection_record) -> None:
    """Per-connection SQLite setup.

    Foreign keys are off unless enabled on every connection, and the
    built-in ``lower()`` folds ASCII only, so "Ñ" or "Á" would never match a
    lowercase search term.
    """

    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _make_engine() -> Engine:
    if not settings.is_sqlite:
        return create_engine(settings.database_url, echo=False, future=True, pool_pre_ping=True)

    eng = create_engine(settings.database_url, echo=False, future=True, connect_args={"check_same_thread": False})
    event.listen(eng, "connect", _prepare_sqlite_connection)
    return eng


engine = _make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
