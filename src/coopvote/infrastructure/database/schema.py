"""SQLAlchemy Core table definitions for the coopvote database.

The one-vote-per-member rule lives here as a named unique constraint.
Service-layer pre-checks only produce tidier errors; this constraint is
what actually rejects a second vote.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

VOTE_UNIQUE_CONSTRAINT = "uq_votes_proposal_member"
MEMBER_EMAIL_CONSTRAINT = "uq_members_email"

metadata = MetaData()

proposals = Table(
    "proposals",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("body", Text, nullable=False, default="", server_default=""),
    Column("status", Text, nullable=False, default="open", server_default="open"),
    Column("created_at", Text, nullable=False),  # ISO 8601, UTC
    CheckConstraint("status IN ('open', 'closed')", name="ck_proposals_status"),
    CheckConstraint("length(title) > 0", name="ck_proposals_title"),
)

votes = Table(
    "votes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("proposal_id", Integer, ForeignKey("proposals.id"), nullable=False),
    Column("member_id", Integer, nullable=False),
    Column("choice", Text, nullable=False),
    Column("notes", Text, nullable=False, default="", server_default=""),
    Column("created_at", Text, nullable=False),
    UniqueConstraint("proposal_id", "member_id", name=VOTE_UNIQUE_CONSTRAINT),
    CheckConstraint("choice IN ('for', 'against', 'abstain')", name="ck_votes_choice"),
)

members = Table(
    "members",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text, nullable=False),
    Column("display_name", Text, nullable=False, default="", server_default=""),
    Column("role", Text, nullable=False, default="member", server_default="member"),
    Column("created_at", Text, nullable=False),
    UniqueConstraint("email", name=MEMBER_EMAIL_CONSTRAINT),
)

Index("ix_proposals_status", proposals.c.status)
Index("ix_votes_proposal_created", votes.c.proposal_id, votes.c.created_at)
