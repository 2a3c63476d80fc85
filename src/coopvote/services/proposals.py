"""ProposalService — proposal identity and the open → closed transition.

Close is a compare-and-set: a single ``UPDATE … WHERE status = 'open'``
whose row count says whether *this* caller performed the transition.
Two concurrent closers can never both succeed.
"""

from __future__ import annotations

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from coopvote.domain.lifecycle import PROPOSAL_TRANSITIONS, ProposalStatus, is_valid_transition
from coopvote.domain.records import Proposal
from coopvote.infrastructure.database.schema import proposals
from coopvote.services._helpers import now_iso
from coopvote.services.base import BaseService
from coopvote.services.result import ErrorCode, ServiceResult
from coopvote.services.telemetry import traced

logger = logging.getLogger(__name__)


def _not_found(op: str, proposal_id: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"No proposal found with ID: {proposal_id}",
        proposal_id=proposal_id,
    )


class ProposalService(BaseService):
    """Create, read, list, and close proposals."""

    @traced
    def create(self, title: str, body: str = "") -> ServiceResult:
        op = "create_proposal"
        if not title or not title.strip():
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "title required")

        try:
            with self._ledger.transaction() as conn:
                result = conn.execute(
                    insert(proposals).values(
                        title=title,
                        body=body or "",
                        status=ProposalStatus.OPEN.value,
                        created_at=now_iso(),
                    )
                )
                new_id = result.inserted_primary_key[0]
                row = conn.execute(select(proposals).where(proposals.c.id == new_id)).one()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        proposal = Proposal.from_row(row)
        logger.info("Created proposal %s", proposal.id)
        return ServiceResult.success(op, proposal.to_wire())

    @traced
    def get(self, proposal_id: int) -> ServiceResult:
        op = "get_proposal"
        try:
            with self._ledger.snapshot() as conn:
                row = conn.execute(select(proposals).where(proposals.c.id == proposal_id)).first()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        if row is None:
            return _not_found(op, proposal_id)
        return ServiceResult.success(op, Proposal.from_row(row).to_wire())

    @traced
    def list_proposals(self) -> ServiceResult:
        """All proposals, newest first. Each call is a fresh read."""
        op = "list_proposals"
        try:
            with self._ledger.snapshot() as conn:
                rows = conn.execute(select(proposals).order_by(proposals.c.id.desc())).fetchall()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        items = [Proposal.from_row(r).to_wire() for r in rows]
        return ServiceResult.success(op, {"items": items, "count": len(items)})

    @traced
    def close(self, proposal_id: int) -> ServiceResult:
        """Transition ``open`` → ``closed`` exactly once.

        The UPDATE matches only rows whose status may transition to
        ``closed``; a miss is then diagnosed as ``NOT_FOUND`` (no row) or
        ``ALREADY_CLOSED``.
        """
        op = "close_proposal"
        target = ProposalStatus.CLOSED.value
        sources = [s for s in PROPOSAL_TRANSITIONS if is_valid_transition(s, target)]
        try:
            with self._ledger.transaction() as conn:
                matched = conn.execute(
                    update(proposals)
                    .where(
                        proposals.c.id == proposal_id,
                        proposals.c.status.in_(sources),
                    )
                    .values(status=target)
                ).rowcount
                row = conn.execute(select(proposals).where(proposals.c.id == proposal_id)).first()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        if row is None:
            return _not_found(op, proposal_id)
        if matched != 1:
            return ServiceResult.failure(
                op,
                ErrorCode.ALREADY_CLOSED,
                f"Proposal {proposal_id} is not open (status: {row.status})",
                proposal_id=proposal_id,
                status=row.status,
                allowed=PROPOSAL_TRANSITIONS.get(row.status, []),
            )

        logger.info("Closed proposal %s", proposal_id)
        return ServiceResult.success(op, Proposal.from_row(row).to_wire())
