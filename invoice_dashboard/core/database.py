# invoice_dashboard/core/database.py
"""
Database handles passed explicitly into repository construction.

`Database` owns a SQLAlchemy engine and session factory; `DbApiConnector`
owns a plain PEP 249 connect callable. Both hand out one connection per
call, wrapped in a transaction, and release it when the call ends.

Store failures leave these handles as DashboardError subclasses:

    connection lost / refused     -> StoreUnavailableError
    unique key duplicated         -> UniqueConstraintError
    other integrity failure       -> ForeignKeyViolationError
    any other rejected statement  -> StoreError
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.exc import InterfaceError as SAInterfaceError
from sqlalchemy.exc import OperationalError as SAOperationalError
from sqlalchemy.exc import StatementError as SAStatementError
from sqlalchemy.orm import Session, sessionmaker

from invoice_dashboard.core.config import Settings
from invoice_dashboard.core.errors import (
    DashboardError,
    ForeignKeyViolationError,
    StoreError,
    StoreUnavailableError,
    UniqueConstraintError,
)

logger = logging.getLogger(__name__)


def _unicode_lower(value):
    if isinstance(value, str):
        return value.lower()
    return value


def prepare_sqlite_connection(dbapi_connection, connection_record=None):
    """
    Enforces foreign keys and replaces SQLite's ASCII-only LOWER() with
    Python's str.lower, so in-store search folds case like SearchFilter.
    """
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def integrity_failure(detail: str) -> DashboardError:
    lowered = detail.lower()
    if "unique" in lowered or "duplicate" in lowered:
        return UniqueConstraintError("key")
    return ForeignKeyViolationError(detail)


def translate_sqlalchemy_error(exc: Exception) -> Optional[DashboardError]:
    """DashboardError for a failure raised through SQLAlchemy; None when it is not a store failure."""
    if isinstance(exc, (SAOperationalError, SAInterfaceError)):
        logger.error("Database unavailable: %s", exc)
        return StoreUnavailableError(str(exc))
    if isinstance(exc, SAIntegrityError):
        logger.error("Integrity violation: %s", exc.orig)
        return integrity_failure(str(exc.orig))
    # OverflowError: the driver cannot bind the value at all
    if isinstance(exc, (SAStatementError, OverflowError)):
        logger.error("Statement rejected by the store: %s", exc)
        return StoreError(str(exc))
    return None


def build_engine(settings: Settings) -> Engine:
    """Creates the engine for `settings.database_url`."""
    url = settings.database_url
    if url.startswith("sqlite"):
        engine = create_engine(url, pool_pre_ping=True, future=True)
        event.listen(engine, "connect", prepare_sqlite_connection)
    else:
        engine = create_engine(
            url,
            pool_pre_ping=True,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            future=True,
        )
    logger.info("Database engine created for dialect %s", engine.dialect.name)
    return engine


class Database:
    """SQLAlchemy engine plus session factory."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(build_engine(settings))

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.
        Commits on success, rolls back on any error, always closes.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception as exc:
            session.rollback()
            error = translate_sqlalchemy_error(exc)
            if error is None:
                raise
            raise error from exc
        finally:
            session.close()

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Core connection inside a transaction (engine.begin())."""
        try:
            with self.engine.begin() as conn:
                yield conn
        except Exception as exc:
            error = translate_sqlalchemy_error(exc)
            if error is None:
                raise
            raise error from exc

    def dispose(self) -> None:
        self.engine.dispose()


class DbApiConnector:
    """
    Opens PEP 249 connections through a driver's connect callable.

    Args:
        connect: zero-argument callable returning a new DB-API connection
        module: the driver module, read for its paramstyle and exception classes
        dialect_name: "mysql", "sqlite" or "postgresql"; selects the text cast
    """

    def __init__(self, connect: Callable[[], Any], module: Any, dialect_name: str):
        self._connect = connect
        self.module = module
        self.paramstyle = module.paramstyle
        self.dialect_name = dialect_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "DbApiConnector":
        url = make_url(settings.database_url)
        backend = url.get_backend_name()
        if backend == "mysql":
            import pymysql

            def connect():
                return pymysql.connect(
                    host=url.host or "localhost",
                    port=url.port or 3306,
                    user=url.username,
                    password=url.password or "",
                    database=url.database,
                    charset="utf8mb4",
                )

            return cls(connect, pymysql, "mysql")
        if backend == "sqlite":
            import sqlite3

            path = url.database or ":memory:"

            def connect():
                conn = sqlite3.connect(path)
                prepare_sqlite_connection(conn)
                return conn

            return cls(connect, sqlite3, "sqlite")
        raise ValueError(f"No DB-API driver configured for backend '{backend}'")

    def _translate(self, exc: Exception) -> Optional[DashboardError]:
        if isinstance(exc, (self.module.OperationalError, self.module.InterfaceError)):
            logger.error("Database unavailable: %s", exc)
            return StoreUnavailableError(str(exc))
        if isinstance(exc, self.module.IntegrityError):
            logger.error("Integrity violation: %s", exc)
            return integrity_failure(str(exc))
        if isinstance(exc, (self.module.Error, OverflowError)):
            logger.error("Statement rejected by the store: %s", exc)
            return StoreError(str(exc))
        return None

    @property
    def integrity_error(self) -> type:
        return self.module.IntegrityError

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """One connection per call: commit on success, rollback on error, close always."""
        try:
            conn = self._connect()
        except Exception as exc:
            error = self._translate(exc)
            if error is None:
                raise
            raise error from exc
        try:
            yield conn
            conn.commit()
        except Exception as exc:
            conn.rollback()
            error = self._translate(exc)
            if error is None:
                raise
            raise error from exc
        finally:
            conn.close()
