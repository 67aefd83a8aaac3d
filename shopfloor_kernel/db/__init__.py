"""Database layer - engine, base classes and unit of work."""

from shopfloor_kernel.db.base import Base, TrackedBase
from shopfloor_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from shopfloor_kernel.db.unit_of_work import UnitOfWork

__all__ = [
    "Base",
    "TrackedBase",
    "init_engine_from_url",
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "UnitOfWork",
]
