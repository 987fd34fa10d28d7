from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from retail_credit.infra.db.config import database_url, pool_size

# Lazy initialization - only create engine/session when needed
_engine: Engine | None = None
_session_local: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Get or create the database engine (lazy initialization).

    Connection Pool Configuration:
    - pool_size: Base pool (DB_POOL_SIZE, default 10)
    - max_overflow: Twice the base pool on bursts
    - pool_pre_ping: Verify connection health before use
    - pool_recycle: Recycle connections after one hour

    Every engine operation runs in one short transaction, so the pool only has
    to cover concurrent tellers, not long-lived sessions.
    """
    global _engine
    if _engine is None:
        size = pool_size()
        _engine = create_engine(
            database_url(),
            pool_size=size,
            max_overflow=size * 2,
            pool_pre_ping=True,
            pool_recycle=3600,
            future=True,
        )
    return _engine


def get_session_local() -> sessionmaker[Session]:
    """Get or create the session factory (lazy initialization)."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(
            bind=get_engine(),
            class_=Session,
            expire_on_commit=False,
        )
    return _session_local


@contextmanager
def get_session() -> Iterator[Session]:
    """Get a database session with automatic commit/rollback (scripts, migrations helpers)."""
    session = get_session_local()()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
