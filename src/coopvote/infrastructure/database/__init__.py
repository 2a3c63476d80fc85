"""SQL storage via SQLAlchemy Core: schema, engine, migrations."""

from coopvote.infrastructure.database.engine import create_db_engine, init_database
from coopvote.infrastructure.database.schema import (
    MEMBER_EMAIL_CONSTRAINT,
    VOTE_UNIQUE_CONSTRAINT,
    members,
    metadata,
    proposals,
    votes,
)

__all__ = [
    "MEMBER_EMAIL_CONSTRAINT",
    "VOTE_UNIQUE_CONSTRAINT",
    "create_db_engine",
    "init_database",
    "members",
    "metadata",
    "proposals",
    "votes",
]
