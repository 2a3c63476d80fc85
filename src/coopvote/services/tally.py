"""TallyService — live quorum and outcome for a proposal.

Reads run on a snapshot connection and take no locks; a tally racing a
vote write sees either the old or the new counts, never a mix. The
arithmetic lives in :mod:`coopvote.domain.tally`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from coopvote.domain.tally import build_tally, count_choices
from coopvote.infrastructure.database.schema import proposals, votes
from coopvote.services.base import BaseService
from coopvote.services.result import ErrorCode, ServiceResult
from coopvote.services.roster import RosterProvider, roster_from_settings
from coopvote.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from coopvote.infrastructure.ledger import Ledger

logger = logging.getLogger(__name__)


class TallyService(BaseService):
    """Derives a :class:`~coopvote.domain.records.Tally` on every read."""

    def __init__(self, ledger: Ledger, roster: RosterProvider | None = None) -> None:
        super().__init__(ledger)
        self._roster = roster if roster is not None else roster_from_settings(ledger)

    @traced
    def get_tally(self, proposal_id: int) -> ServiceResult:
        op = "get_tally"
        try:
            with self._ledger.snapshot() as conn:
                status = conn.execute(
                    select(proposals.c.status).where(proposals.c.id == proposal_id)
                ).scalar_one_or_none()
                if status is None:
                    return ServiceResult.failure(
                        op,
                        ErrorCode.NOT_FOUND,
                        f"No proposal found with ID: {proposal_id}",
                        proposal_id=proposal_id,
                    )
                with trace_span("count_votes"):
                    grouped = conn.execute(
                        select(votes.c.choice, func.count())
                        .where(votes.c.proposal_id == proposal_id)
                        .group_by(votes.c.choice)
                    ).all()
            with trace_span("roster"):
                total_eligible = self._roster.eligible_count()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        results = count_choices((choice, count) for choice, count in grouped)
        tally = build_tally(proposal_id, status, results, total_eligible)
        span = get_current_span()
        if span is not None:
            span.annotate("votes_cast", tally.votes_cast)
            span.annotate("total_eligible", total_eligible)
        logger.debug(
            "Tally for proposal %s: cast=%s eligible=%s outcome=%s",
            proposal_id,
            tally.votes_cast,
            total_eligible,
            tally.outcome,
        )
        return ServiceResult.success(op, tally.to_wire())
