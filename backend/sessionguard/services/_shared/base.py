from __future__ import annotations

import logging

from sessionguard.services._shared.outcome import ErrorKind, Outcome
from sessionguard.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize the logging of storage faults turned into outcomes.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services must never touch the global session directly; always use a
    Unit of Work.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work."""
        return SQLAlchemyReadOnlyUnitOfWork()

    # -------------------------- Error handling ------------------------------

    def storage_failure(self, operation: str, exc: BaseException) -> Outcome:
        """
        Log a storage fault with its traceback and return the generic outcome.

        :param operation: Short name of the step that failed.
        :param exc: The underlying exception (kept out of the outcome).
        :returns: ``Outcome`` carrying :attr:`ErrorKind.STORAGE_ERROR`.
        """
        log.error(
            "storage.fault operation=%s",
            operation,
            exc_info=exc,
            extra={"operation": operation},
        )
        return Outcome.failure(ErrorKind.STORAGE_ERROR)
