"""Database initialization and utilities."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shiftboard.logger import get_logger

from .models import Base

DEFAULT_DB_URL = "sqlite:///shiftboard.db"

log = get_logger("db")


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False):
    """Create SQLAlchemy engine.

    In-memory SQLite is pinned to a single shared connection so that the
    API's worker threads and the caller see the same database.
    """
    if db_url == "sqlite://" or (db_url.startswith("sqlite") and ":memory:" in db_url):
        return create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = DEFAULT_DB_URL):
    """Initialize database and create all tables. Returns the engine."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    log.info("Database initialized: %s", db_url)
    return engine


def get_session_factory(db_url: str = DEFAULT_DB_URL, engine=None) -> sessionmaker:
    """Get a session factory for the database."""
    engine = engine or create_db_engine(db_url)
    return sessionmaker(bind=engine, expire_on_commit=False)


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new database session."""
    SessionFactory = get_session_factory(db_url)
    return SessionFactory()


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Drop all tables and recreate (WARNING: deletes all data!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    log.warning("Database reset: %s", db_url)
