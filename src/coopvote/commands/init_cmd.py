"""Command: database initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopCommand

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext


@click.command(
    "init",
    cls=CoopCommand,
    examples="""\
  coopvote init
  coopvote -c ./coopvote.toml init
  COOPVOTE_DATABASE__PATH=/srv/coop/votes.db coopvote init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database and mark it at the latest schema revision."""
    from coopvote.services.upgrade import UpgradeService

    app.emit(UpgradeService(app.ledger).stamp_current())
