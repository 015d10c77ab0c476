"""SQLAlchemy engine, session factory and declarative base."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..core.config import settings


def _sqlite_connect_args(url: str) -> dict[str, object]:
    # FastAPI runs sync handlers in a thread pool, so SQLite connections must be
    # shareable across threads.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE clauses unless the pragma is set per connection."""

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str) -> Engine:
    built = create_engine(url, connect_args=_sqlite_connect_args(url))
    enable_sqlite_foreign_keys(built)
    return built


engine = build_engine(settings.DB_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
