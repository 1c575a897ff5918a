"""
database.py — Database Engine & Session Management

Purpose:
- Create the SQLAlchemy engine for the configured `DATABASE_URL`.
- Provide a session factory and a transactional `session_scope()` helper used
  by the repositories.
- Hold the declarative `Base` shared by every ORM model.

Key Characteristics:
- Synchronous SQLAlchemy engine; the pipeline is single-threaded.
- SQLite by default, PostgreSQL via psycopg (v3) when a postgres URL is given.
- `init_db()` creates missing tables; there are no migrations.

This module does NOT:
- Define ORM models (see edgar_ingest/models/*).
- Perform any queries or business logic.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()

# -----------------------------------------------------------------------------
# Engine & Session Factory
# -----------------------------------------------------------------------------

def normalize_database_url(db_url: str) -> str:
    """
    Use the psycopg (v3) driver for plain postgresql:// URLs.
    """
    db_url = db_url.strip()
    if db_url.startswith("postgresql://") and "+" not in db_url.split("://")[0]:
        db_url = db_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return db_url


def create_db_engine(db_url: str) -> Engine:
    if not db_url or not db_url.strip():
        raise RuntimeError("Database is not configured. Please set DATABASE_URL.")

    return create_engine(
        normalize_database_url(db_url),
        pool_pre_ping=True  # Ensures connections are valid before use
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    # Objects stay usable after commit: report files travel from one session
    # (queue read) to another (parsed flag update).
    return sessionmaker(
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine) -> None:
    """Create all tables known to `Base` that do not exist yet."""
    # Imported for their side effect of registering tables on Base.metadata
    from edgar_ingest import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

# -----------------------------------------------------------------------------
# Transaction Helper
# -----------------------------------------------------------------------------

@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Open session → yield → commit, rolling back on any error.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
