"""Baseline schema: proposals and votes.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "proposals",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("body", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.Text, nullable=False, server_default="open"),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.CheckConstraint("status IN ('open', 'closed')", name="ck_proposals_status"),
        sa.CheckConstraint("length(title) > 0", name="ck_proposals_title"),
    )
    op.create_index("ix_proposals_status", "proposals", ["status"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("proposal_id", sa.Integer, sa.ForeignKey("proposals.id"), nullable=False),
        sa.Column("member_id", sa.Integer, nullable=False),
        sa.Column("choice", sa.Text, nullable=False),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.Text, nullable=False),
        sa.UniqueConstraint("proposal_id", "member_id", name="uq_votes_proposal_member"),
        sa.CheckConstraint("choice IN ('for', 'against', 'abstain')", name="ck_votes_choice"),
    )
    op.create_index("ix_votes_proposal_created", "votes", ["proposal_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_votes_proposal_created", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_proposals_status", table_name="proposals")
    op.drop_table("proposals")
