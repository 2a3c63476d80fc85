"""BaseService — shared foundation for the governance services.

Every service receives a :class:`Ledger` at construction time and owns
its transaction boundaries via ``self._ledger.transaction()`` (writes)
or ``self._ledger.snapshot()`` (reads).

Storage exceptions never leave a service. Constraint violations that
carry domain meaning are translated by the concrete service; everything
else becomes ``STORAGE_FAILURE`` here. Nothing is retried.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from coopvote.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from coopvote.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)


def violated_constraint(exc: IntegrityError, name: str, *columns: str) -> bool:
    """Whether *exc* was raised by constraint *name*.

    PostgreSQL reports the constraint name; SQLite reports the columns
    as ``table.col, table.col``. Either form is accepted.
    """
    message = str(exc.orig)
    if name in message:
        return True
    return bool(columns) and ", ".join(columns) in message


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "foreign key" in message


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ProposalService(BaseService):
            def close(self, proposal_id: int) -> ServiceResult:
                with self._ledger.transaction() as conn:
                    ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    @staticmethod
    def _storage_failure(op: str, exc: SQLAlchemyError) -> ServiceResult:
        """Translate an unclassified storage exception into a result."""
        logger.warning("Storage failure during %s: %s", op, exc, exc_info=True)
        return ServiceResult.failure(
            op,
            ErrorCode.STORAGE_FAILURE,
            f"Storage backend error during {op}",
            reason=str(getattr(exc, "orig", None) or exc),
            error_type=type(exc).__name__,
        )
