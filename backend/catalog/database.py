"""
Database engine ownership and session management for the item catalog.

Uses SQLAlchemy ORM with SQLite. A single Database object is created at
startup, handed to every component that needs storage, and disposed at
shutdown.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

# Base class for declarative models
Base = declarative_base()


def _ensure_sqlite_dir(url: str) -> None:
    """Create the directory holding a file-backed SQLite database."""
    if not url.startswith("sqlite:///") or url.endswith(":memory:"):
        return
    db_dir = os.path.dirname(url.replace("sqlite:///", "", 1))
    if db_dir and not os.path.exists(db_dir):
        os.makedirs(db_dir, exist_ok=True)


def _enable_foreign_keys(dbapi_conn, connection_record):
    """SQLite leaves foreign key enforcement off unless asked per connection."""
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def busy_timeout_ms(timeout: float) -> int:
    return max(0, int(timeout * 1000))


class Database:
    """Owns the engine and session factory for the catalog's relational store."""

    def __init__(self, url: str, echo: bool = False, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout
        self.is_sqlite = url.startswith("sqlite")
        connect_args = {}
        if self.is_sqlite:
            _ensure_sqlite_dir(url)
            connect_args["check_same_thread"] = False
            connect_args["timeout"] = timeout

        self.engine: Engine = create_engine(url, echo=echo, connect_args=connect_args)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_foreign_keys)
            event.listen(self.engine, "checkout", self._reset_busy_timeout)

        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )

    def _reset_busy_timeout(self, dbapi_conn, connection_record, connection_proxy):
        """Pooled connections start every checkout at the default busy timeout."""
        cursor = dbapi_conn.cursor()
        try:
            cursor.execute(f"PRAGMA busy_timeout = {busy_timeout_ms(self.timeout)}")
        finally:
            cursor.close()

    def create_all(self) -> None:
        """
        Initialize database by creating all tables.
        """
        # Import models to ensure they're registered
        from catalog.models import category, item  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self, timeout: Optional[float] = None) -> Iterator[Session]:
        """
        Context manager for a short-lived database session.
        Each core storage call runs in its own session.

        ``timeout`` is the caller's budget in seconds for waiting on a locked
        database; it replaces the default busy timeout for this session only.
        """
        db = self.SessionLocal()
        try:
            if timeout is not None and self.is_sqlite:
                db.connection().exec_driver_sql(
                    f"PRAGMA busy_timeout = {busy_timeout_ms(timeout)}"
                )
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def init_db(url: str, echo: bool = False, timeout: float = 5.0) -> Database:
    """
    Open the database and make sure the schema exists.
    """
    database = Database(url, echo=echo, timeout=timeout)
    database.create_all()
    return database
