"""Database configuration and session management utilities."""
from __future__ import annotations

import contextlib
from typing import Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from weekly_planner.config import DATABASE_URL, SQLALCHEMY_ECHO

DATABASE_PRAGMA = "PRAGMA foreign_keys = ON"


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections get foreign keys and real SAVEPOINTs."""
    if not url.startswith("sqlite"):
        return create_engine(url, future=True, echo=echo, pool_pre_ping=True)

    engine = create_engine(
        url,
        future=True,
        echo=echo,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _configure_sqlite(dbapi_connection, connection_record) -> None:  # noqa: ARG001
        # Let SQLAlchemy emit BEGIN itself so nested transactions behave.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(DATABASE_PRAGMA)
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_sqlite(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    return engine


def create_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=bind,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


engine = create_db_engine(DATABASE_URL, echo=SQLALCHEMY_ECHO)
SessionLocal = create_session_factory(engine)

Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    """Create database tables for all registered models."""
    from weekly_planner.db import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextlib.contextmanager
def get_session(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "Base",
    "DATABASE_URL",
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "engine",
    "get_session",
    "init_db",
]
