"""Frozen pydantic records exchanged with the boundary layer.

Wire shapes:

- Proposal: ``{id, title, body, status, created_at}``
- Vote: ``{id, proposal_id, member_id, choice, notes, created_at}``
- Tally: ``{proposal_id, status, total_eligible, votes_cast, quorum_met,
  results: {for, against, abstain}, outcome}``

Records are snapshots. Nothing here talks to storage; the service layer
builds them from database rows via :meth:`from_row`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

from coopvote.domain.lifecycle import ProposalStatus
from coopvote.domain.types import Choice, Outcome


class _Record(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_row(cls, row: Any) -> Self:
        """Build a record from a SQLAlchemy ``Row`` (or any mapping)."""
        mapping = row if isinstance(row, Mapping) else row._mapping
        return cls.model_validate(dict(mapping))

    def to_wire(self) -> dict[str, Any]:
        """JSON-safe dict in the boundary representation."""
        return self.model_dump(mode="json", by_alias=True)


class Proposal(_Record):
    """A governance item with a two-state lifecycle."""

    id: int
    title: str = Field(min_length=1)
    body: str = ""
    status: ProposalStatus
    created_at: datetime


class Vote(_Record):
    """One member's recorded choice on one proposal."""

    id: int
    proposal_id: int
    member_id: int
    choice: Choice
    notes: str = ""
    created_at: datetime


class Member(_Record):
    """A roster entry. Only counted for quorum; never authenticated here."""

    id: int
    email: str
    display_name: str = ""
    role: str = "member"
    created_at: datetime


class TallyResults(_Record):
    """Per-choice vote counts. ``for`` is a keyword, hence the alias."""

    for_: int = Field(default=0, ge=0, alias="for")
    against: int = Field(default=0, ge=0)
    abstain: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.for_ + self.against + self.abstain


class Tally(_Record):
    """Derived summary for a proposal. Recomputed on every read."""

    proposal_id: int
    status: ProposalStatus
    total_eligible: int = Field(ge=0)
    votes_cast: int = Field(ge=0)
    quorum_met: bool
    results: TallyResults
    outcome: Outcome

    @model_validator(mode="after")
    def _votes_cast_matches_results(self) -> Tally:
        if self.votes_cast != self.results.total:
            msg = (
                f"votes_cast ({self.votes_cast}) does not match "
                f"the sum of results ({self.results.total})"
            )
            raise ValueError(msg)
        return self
