"""
Database setup with SQLAlchemy 2.0.
Provides the engine, session management, and base model for the SQLite store.
"""
from typing import Optional
from contextlib import contextmanager
from pathlib import Path
from datetime import datetime

from sqlalchemy import MetaData, DateTime, Engine, Integer, create_engine, event, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from spare_parts.core.config import settings


# Naming convention for constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


class Base(DeclarativeBase):
    """Base class for all database models."""
    metadata = metadata

    # Common columns for all tables
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False
    )


# Global engine and session factory
engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker[Session]] = None


def _enable_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get referential integrity and write-ahead logging
    switched on as soon as they are opened.
    """
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        new_engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(new_engine, "connect", _enable_sqlite_pragmas)
        return new_engine
    return create_engine(database_url, pool_pre_ping=True, **kwargs)


def _ensure_sqlite_directory(database_url: str) -> None:
    # sqlite:///./data/spare-parts.db -> ./data
    prefix = "sqlite:///"
    if not database_url.startswith(prefix):
        return
    path = database_url[len(prefix):]
    if not path or path == ":memory:":
        return
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def get_engine() -> Engine:
    """Get or create the database engine."""
    global engine

    if engine is None:
        _ensure_sqlite_directory(settings.database_url)
        engine = create_db_engine(settings.database_url, echo=settings.db_echo)

    return engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory."""
    global SessionLocal

    if SessionLocal is None:
        SessionLocal = sessionmaker(
            bind=get_engine(),
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )

    return SessionLocal


@contextmanager
def get_db_context(session_factory: Optional[sessionmaker[Session]] = None):
    """
    Context manager for database sessions.

    Usage:
        with get_db_context() as db:
            parts = db.scalars(select(Part)).all()
    """
    factory = session_factory or get_session_factory()
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create tables and indexes that do not exist yet."""
    # Import all models to ensure they're registered
    from spare_parts import models  # noqa: F401

    Base.metadata.create_all(bind=bind or get_engine(), checkfirst=True)


def close_db() -> None:
    """Close database connections."""
    global engine, SessionLocal

    if engine is not None:
        engine.dispose()
        engine = None

    SessionLocal = None


def check_db_connection(bind: Optional[Engine] = None) -> bool:
    """Health check for database connection."""
    try:
        with (bind or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
