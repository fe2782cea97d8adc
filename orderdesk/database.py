"""
Database engine, session factory and transaction helpers
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from orderdesk.config import settings
from orderdesk.exceptions import TransactionConflictError

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

# PostgreSQL error codes for serialization failure and deadlock
_CONFLICT_PGCODES = {"40001", "40P01"}


def _engine_kwargs(url: str) -> dict:
    # SQLite needs check_same_thread, Postgres must NOT have it
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url:
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, echo=settings.DB_ECHO, **_engine_kwargs(DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp used for history, ledger and order timestamps"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db() -> None:
    """Create tables for all registered models"""
    # register models on Base.metadata
    from orderdesk import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI dependency - provides a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _is_conflict(exc: DBAPIError) -> bool:
    return getattr(exc.orig, "pgcode", None) in _CONFLICT_PGCODES


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    All-or-nothing unit of work on an existing session.

    Commits when the block finishes, rolls back on any exception. Lost races
    (optimistic version mismatch, serialization failure, deadlock) are
    re-raised as TransactionConflictError so the caller can decide to retry.

    Usage:
        with transaction(db):
            db.add(order)
            db.execute(...)
    """
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning("Optimistic concurrency conflict: %s", e)
        raise TransactionConflictError("Record was modified concurrently, please retry") from e
    except DBAPIError as e:
        db.rollback()
        if _is_conflict(e):
            logger.warning("Transaction conflict: %s", e.orig)
            raise TransactionConflictError("Concurrent transaction conflict, please retry") from e
        raise
    except Exception:
        db.rollback()
        raise
