"""
Module: shopfloor_kernel.db.engine
Responsibility: SQLAlchemy engine initialization, session factory management
    and the transactional scope used by every import.
Architecture position: Kernel > DB.  May import from db/base.py.  Only
    create_tables() reaches into models/ (to register every table).

Backends:
    - PostgreSQL (production): QueuePool with pre-ping, READ COMMITTED.
    - SQLite (local files and tests): in-memory URLs share one connection via
      StaticPool so every session sees the same database.

Failure modes:
    - EngineNotInitializedError if get_engine/get_session/get_session_factory
      is called before init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from shopfloor_kernel.exceptions import EngineNotInitializedError
from shopfloor_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def build_engine(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> Engine:
    """
    Create an engine suited to the URL's dialect without registering it.

    SQLite in-memory databases live as long as their single connection, so
    they get a StaticPool.  Other SQLite URLs use the dialect defaults.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                url,
                echo=echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_engine(url, echo=echo)

    return create_engine(
        url,
        echo=echo,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        isolation_level="READ COMMITTED",
    )


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> Engine:
    """
    Initialize the module-level engine and session factory.

    A second call replaces the first; the old engine is disposed.

    Args:
        database_url: SQLAlchemy URL (``sqlite://``, ``postgresql+psycopg://...``).
        echo: If True, log all SQL statements.
        pool_size: Pool size for server backends.
        max_overflow: Connections allowed beyond pool_size.

    Returns:
        SQLAlchemy Engine instance.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    _engine = build_engine(
        database_url, echo=echo, pool_size=pool_size, max_overflow=max_overflow
    )
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={"dialect": _engine.dialect.name, "echo": echo},
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise EngineNotInitializedError()
    return _engine


def get_session() -> Session:
    """Get a new session bound to the current engine."""
    if _SessionFactory is None:
        raise EngineNotInitializedError()
    return _SessionFactory()


def get_session_factory() -> sessionmaker[Session]:
    """Get the session factory (one session per unit of work)."""
    if _SessionFactory is None:
        raise EngineNotInitializedError()
    return _SessionFactory


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Provide a transactional scope around a series of operations.

    Commits on normal exit; on exception rolls back, closes and re-raises.

    Usage:
        with session_scope() as session:
            session.add(work_order)
    """
    session = get_session()
    logger.debug("transaction_started")
    try:
        yield session
        session.commit()
        logger.debug("transaction_committed")
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables(engine: Engine | None = None) -> None:
    """
    Create every shop-floor table on the given (or current) engine.

    Importing shopfloor_kernel.models registers all mapped classes on
    Base.metadata before create_all runs.
    """
    from shopfloor_kernel.db.base import Base
    import shopfloor_kernel.models  # noqa: F401

    target = engine or get_engine()
    Base.metadata.create_all(target)
    logger.info(
        "tables_created",
        extra={"table_count": len(Base.metadata.tables)},
    )


def drop_tables(engine: Engine | None = None) -> None:
    """Drop all tables. Primarily for testing."""
    from shopfloor_kernel.db.base import Base
    import shopfloor_kernel.models  # noqa: F401

    Base.metadata.drop_all(engine or get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory (test cleanup)."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
        _engine = None

    _SessionFactory = None


def _atexit_dispose() -> None:
    if _engine is not None:
        _engine.dispose()


atexit.register(_atexit_dispose)
