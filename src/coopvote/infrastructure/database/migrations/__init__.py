"""Alembic migration infrastructure for coopvote.

Configuration is built in code — there is no alembic.ini. The migration
scripts live alongside this module.
"""

from __future__ import annotations

from pathlib import Path

from alembic.config import Config


def build_config(db_url: str) -> Config:
    """Build an Alembic Config pointing at our migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def stamp_head(db_url: str) -> None:
    """Mark a freshly created database as being at the head revision."""
    from alembic import command

    command.stamp(build_config(db_url), "head")
