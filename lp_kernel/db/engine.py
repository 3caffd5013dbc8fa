"""
Module: lp_kernel.db.engine
Responsibility: Owns the process-wide SQLAlchemy engine and session factory
    and the ``session_scope()`` unit of work used by scripts.
Architecture position: Kernel > DB.  Imports db/base.py and logging only;
    create_tables() additionally imports lp_kernel.models so every table is
    registered on the metadata before DDL runs.

Invariants enforced:
    - PostgreSQL URLs get a pre-pinged QueuePool at READ COMMITTED.
    - SQLite URLs get a single shared connection (StaticPool), so an
      in-memory database lives as long as the engine.
    - session_scope() is the only place that commits; services only flush.

Failure modes:
    - RuntimeError from get_engine()/get_session() before
      init_engine_from_url().
    - Pool timeout when pool_size + max_overflow connections are checked out.
"""

import atexit
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from lp_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def _pool_options(
    database_url: str,
    pool_size: int,
    max_overflow: int,
    pool_pre_ping: bool,
    pool_timeout: int,
    pool_recycle: int,
) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "poolclass": QueuePool,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": pool_pre_ping,
        "pool_timeout": pool_timeout,
        "pool_recycle": pool_recycle,
        "isolation_level": "READ COMMITTED",
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine and session factory for ``database_url``.

    Calling it again replaces the previous engine (the old one is not
    disposed; use reset_engine() for that).  Pool arguments only apply to
    PostgreSQL.
    """
    global _engine, _session_factory

    _engine = create_engine(
        database_url,
        echo=echo,
        **_pool_options(
            database_url, pool_size, max_overflow, pool_pre_ping, pool_timeout, pool_recycle
        ),
    )
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={
            "dialect": _engine.dialect.name,
            "pool_class": type(_engine.pool).__name__,
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session() -> Session:
    """A new Session bound to the current engine."""
    if _session_factory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _session_factory()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Unit of work: commit on normal exit, roll back and re-raise on error.

    Usage:
        with session_scope() as session:
            LpTokenService(session).mint("user-1", 7, "100")
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Issue CREATE TABLE for every kernel model that does not exist yet."""
    import lp_kernel.models  # noqa: F401
    from lp_kernel.db.base import Base

    Base.metadata.create_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@atexit.register
def _dispose_on_exit() -> None:
    if _engine is not None:
        _engine.dispose()
