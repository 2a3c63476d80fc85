"""Command: proposal tally."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopCommand

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext


@click.command(
    cls=CoopCommand,
    examples="""\
  coopvote tally 1
  coopvote -q tally 1
  coopvote --json tally 1""",
)
@click.argument("proposal_id", type=int)
@click.pass_obj
def tally(app: AppContext, proposal_id: int) -> None:
    """Count votes, check quorum, and report the outcome."""
    from coopvote.services.roster import roster_from_settings
    from coopvote.services.tally import TallyService

    svc = TallyService(app.ledger, roster_from_settings(app.ledger))
    app.emit(svc.get_tally(proposal_id))
