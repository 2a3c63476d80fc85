"""VoteService — one vote per (proposal, member), writable only while open.

Source of truth for uniqueness is the ``uq_votes_proposal_member``
constraint. The existence pre-check in :meth:`VoteService.cast` exists
only so the common case gets a clean ``ALREADY_VOTED`` without a
round-trip through an IntegrityError; when two requests race past it,
the constraint rejects the loser and the error is translated to the
same code.

Proposal openness is re-checked *inside* the write statement itself:

- cast: ``INSERT INTO votes … SELECT … FROM proposals WHERE status='open'``
- change: ``UPDATE votes … WHERE EXISTS (open proposal)``

A proposal that closes between the pre-check and the write therefore
matches zero rows and the request fails with ``PROPOSAL_CLOSED``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import exists, insert, literal, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from coopvote.domain.lifecycle import ProposalStatus, accepts_votes
from coopvote.domain.records import Vote
from coopvote.domain.types import Choice, parse_choice
from coopvote.infrastructure.database.schema import VOTE_UNIQUE_CONSTRAINT, proposals, votes
from coopvote.services._helpers import now_iso
from coopvote.services.base import BaseService, is_foreign_key_violation, violated_constraint
from coopvote.services.result import ErrorCode, ServiceResult
from coopvote.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row

logger = logging.getLogger(__name__)

_CHOICES = ", ".join(f"'{c.value}'" for c in Choice)


def _invalid_choice(op: str, choice: str) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.INVALID_INPUT,
        f"choice must be one of {_CHOICES}",
        choice=choice,
    )


def _proposal_not_found(op: str, proposal_id: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"No proposal found with ID: {proposal_id}",
        proposal_id=proposal_id,
    )


def _proposal_closed(op: str, proposal_id: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.PROPOSAL_CLOSED,
        f"Proposal {proposal_id} is closed",
        proposal_id=proposal_id,
    )


def _already_voted(op: str, proposal_id: int, member_id: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.ALREADY_VOTED,
        "member already voted on this proposal",
        proposal_id=proposal_id,
        member_id=member_id,
    )


def _vote_not_found(op: str, proposal_id: int, member_id: int) -> ServiceResult:
    return ServiceResult.failure(
        op,
        ErrorCode.NOT_FOUND,
        f"No vote by member {member_id} on proposal {proposal_id}",
        proposal_id=proposal_id,
        member_id=member_id,
    )


def _open_proposal(proposal_id: int) -> Any:
    """WHERE clause matching *proposal_id* only while it is open."""
    return (proposals.c.id == proposal_id) & (proposals.c.status == ProposalStatus.OPEN.value)


class VoteService(BaseService):
    """Cast, change, read, and list votes."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def cast(
        self,
        proposal_id: int,
        member_id: int,
        choice: str,
        notes: str = "",
    ) -> ServiceResult:
        """Record *member_id*'s first and only vote on *proposal_id*."""
        op = "cast_vote"
        parsed = parse_choice(choice)
        if parsed is None:
            return _invalid_choice(op, choice)

        try:
            with self._ledger.transaction() as conn:
                status = self._proposal_status(conn, proposal_id)
                if status is None:
                    return _proposal_not_found(op, proposal_id)
                if not accepts_votes(status):
                    return _proposal_closed(op, proposal_id)

                if self._find_vote(conn, proposal_id, member_id) is not None:
                    return _already_voted(op, proposal_id, member_id)

                with trace_span("insert_vote"):
                    inserted = conn.execute(
                        insert(votes).from_select(
                            ["proposal_id", "member_id", "choice", "notes", "created_at"],
                            select(
                                proposals.c.id,
                                literal(member_id),
                                literal(parsed.value),
                                literal(notes or ""),
                                literal(now_iso()),
                            ).where(_open_proposal(proposal_id)),
                        )
                    ).rowcount
                if inserted == 0:
                    return _proposal_closed(op, proposal_id)

                row = self._load_vote(conn, proposal_id, member_id)
        except IntegrityError as exc:
            if violated_constraint(
                exc, VOTE_UNIQUE_CONSTRAINT, "votes.proposal_id", "votes.member_id"
            ):
                logger.info(
                    "Duplicate vote rejected by constraint: proposal=%s member=%s",
                    proposal_id,
                    member_id,
                )
                return _already_voted(op, proposal_id, member_id)
            if is_foreign_key_violation(exc):
                return _proposal_not_found(op, proposal_id)
            return self._storage_failure(op, exc)
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        vote = Vote.from_row(row)
        logger.info("Vote %s cast on proposal %s", vote.id, proposal_id)
        return ServiceResult.success(op, vote.to_wire())

    @traced
    def change(
        self,
        proposal_id: int,
        member_id: int,
        choice: str,
        notes: str = "",
    ) -> ServiceResult:
        """Overwrite choice and notes of an existing vote while the proposal is open.

        Identifier and ``created_at`` are preserved.
        """
        op = "change_vote"
        parsed = parse_choice(choice)
        if parsed is None:
            return _invalid_choice(op, choice)

        try:
            with self._ledger.transaction() as conn:
                status = self._proposal_status(conn, proposal_id)
                if status is None:
                    return _proposal_not_found(op, proposal_id)
                if not accepts_votes(status):
                    return _proposal_closed(op, proposal_id)

                with trace_span("update_vote"):
                    matched = conn.execute(
                        update(votes)
                        .where(
                            votes.c.proposal_id == proposal_id,
                            votes.c.member_id == member_id,
                            exists(select(proposals.c.id).where(_open_proposal(proposal_id))),
                        )
                        .values(choice=parsed.value, notes=notes or "")
                    ).rowcount

                if matched == 0:
                    # Either no such vote, or the proposal closed under us.
                    status = self._proposal_status(conn, proposal_id)
                    if status is not None and not accepts_votes(status):
                        return _proposal_closed(op, proposal_id)
                    return _vote_not_found(op, proposal_id, member_id)

                row = self._load_vote(conn, proposal_id, member_id)
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        return ServiceResult.success(op, Vote.from_row(row).to_wire())

    @traced
    def get(self, proposal_id: int, member_id: int) -> ServiceResult:
        op = "get_vote"
        try:
            with self._ledger.snapshot() as conn:
                row = self._find_vote(conn, proposal_id, member_id)
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        if row is None:
            return _vote_not_found(op, proposal_id, member_id)
        return ServiceResult.success(op, Vote.from_row(row).to_wire())

    @traced
    def list_votes(
        self,
        proposal_id: int,
        *,
        limit: int | None = None,
        offset: int = 0,
    ) -> ServiceResult:
        """Votes on *proposal_id* in casting order, optionally paginated.

        ``limit=None`` means no limit. A positive limit above
        ``votes.max_page_size`` is capped, with a warning.
        """
        op = "list_votes"
        warnings: list[str] = []

        if limit is not None and limit <= 0:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, "limit must be a positive integer", limit=limit
            )
        if offset < 0:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, "offset must be zero or positive", offset=offset
            )

        max_page = self._ledger.settings.votes.max_page_size
        if limit is not None and limit > max_page:
            warnings.append(f"limit capped at {max_page}")
            limit = max_page

        query = (
            select(votes)
            .where(votes.c.proposal_id == proposal_id)
            .order_by(votes.c.created_at.asc(), votes.c.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        if offset:
            query = query.offset(offset)

        try:
            with self._ledger.snapshot() as conn:
                if self._proposal_status(conn, proposal_id) is None:
                    return _proposal_not_found(op, proposal_id)
                rows = conn.execute(query).fetchall()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        items = [Vote.from_row(r).to_wire() for r in rows]
        span = get_current_span()
        if span is not None:
            span.annotate("rows", len(items))
        return ServiceResult.success(
            op,
            {
                "proposal_id": proposal_id,
                "items": items,
                "count": len(items),
                "limit": limit,
                "offset": offset,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _proposal_status(conn: Connection, proposal_id: int) -> str | None:
        return conn.execute(
            select(proposals.c.status).where(proposals.c.id == proposal_id)
        ).scalar_one_or_none()

    @staticmethod
    def _find_vote(conn: Connection, proposal_id: int, member_id: int) -> Row[Any] | None:
        return conn.execute(
            select(votes).where(
                votes.c.proposal_id == proposal_id,
                votes.c.member_id == member_id,
            )
        ).first()

    @staticmethod
    def _load_vote(conn: Connection, proposal_id: int, member_id: int) -> Row[Any]:
        return conn.execute(
            select(votes).where(
                votes.c.proposal_id == proposal_id,
                votes.c.member_id == member_id,
            )
        ).one()
