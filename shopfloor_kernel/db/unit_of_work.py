"""
Module: shopfloor_kernel.db.unit_of_work
Responsibility: Explicit begin / stage / commit-or-rollback scope for one
    import.  Every entity of a conversion is staged here and becomes durable
    in a single commit.
Architecture position: Kernel > DB.

Invariants enforced:
    - All-or-nothing: leaving the scope without commit(), or with an
      exception, rolls back every staged change.
    - A failed commit is rolled back and surfaced as PersistenceError with the
      driver message; nothing is partially written.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopfloor_kernel.exceptions import PersistenceError
from shopfloor_kernel.logging_config import get_logger

logger = get_logger("db.unit_of_work")


class UnitOfWork:
    """
    Transaction scope around one session.

    Usage:
        with UnitOfWork(session_factory) as uow:
            uow.stage(work_order)
            ...
            uow.commit()
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory
        self._session: Session | None = None
        self._committed = False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise PersistenceError("Unit of work has not been entered")
        return self._session

    def __enter__(self) -> UnitOfWork:
        self._session = self._session_factory()
        self._committed = False
        logger.debug("unit_of_work_started")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        session = self.session
        try:
            if exc_type is not None or not self._committed:
                session.rollback()
                logger.warning(
                    "unit_of_work_rolled_back",
                    extra={
                        "reason": exc_type.__name__ if exc_type else "not_committed",
                    },
                )
        finally:
            session.close()
            self._session = None

    def stage(self, entity: Any) -> None:
        """Add one entity to the pending change set."""
        self.session.add(entity)

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("unit_of_work_commit_failed", exc_info=True)
            raise PersistenceError(str(exc)) from exc
        self._committed = True
        logger.debug("unit_of_work_committed")
