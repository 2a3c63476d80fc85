"""Command group: votes (cast, change, show, list).

The acting member comes from ``--member`` or ``COOPVOTE_MEMBER_ID``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopGroup, member_option
from coopvote.domain.types import Choice
from coopvote.services.votes import VoteService

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext

_CHOICE_METAVAR = "[" + "|".join(c.value for c in Choice) + "]"


@click.group(
    cls=CoopGroup,
    examples="""\
  coopvote vote cast 1 for --member 7
  COOPVOTE_MEMBER_ID=7 coopvote vote change 1 against --notes "Changed my mind"
  coopvote vote list 1 --limit 20 --offset 40""",
)
def vote() -> None:
    """Cast and inspect votes on proposals."""


@vote.command(
    examples="""\
  coopvote vote cast 1 for --member 7
  coopvote vote cast 1 abstain --member 7 --notes "Conflict of interest"
  coopvote --json vote cast 1 against --member 8""",
)
@click.argument("proposal_id", type=int)
@click.argument("choice", metavar=_CHOICE_METAVAR)
@click.option("--notes", default="", help="Free-text notes stored with the vote.")
@member_option
@click.pass_obj
def cast(app: AppContext, proposal_id: int, choice: str, notes: str, member_id: int) -> None:
    """Cast a vote on an open proposal (once per member)."""
    app.emit(VoteService(app.ledger).cast(proposal_id, member_id, choice, notes))


@vote.command(
    examples="""\
  coopvote vote change 1 against --member 7
  coopvote vote change 1 for --member 7 --notes 'Convinced by the budget'""",
)
@click.argument("proposal_id", type=int)
@click.argument("choice", metavar=_CHOICE_METAVAR)
@click.option("--notes", default="", help="Replacement notes.")
@member_option
@click.pass_obj
def change(app: AppContext, proposal_id: int, choice: str, notes: str, member_id: int) -> None:
    """Change an existing vote while the proposal is open."""
    app.emit(VoteService(app.ledger).change(proposal_id, member_id, choice, notes))


@vote.command(
    examples="""\
  coopvote vote show 1 --member 7
  coopvote --json vote show 1 --member 7""",
)
@click.argument("proposal_id", type=int)
@member_option
@click.pass_obj
def show(app: AppContext, proposal_id: int, member_id: int) -> None:
    """Show a member's vote on a proposal."""
    app.emit(VoteService(app.ledger).get(proposal_id, member_id))


@vote.command(
    "list",
    examples="""\
  coopvote vote list 1
  coopvote vote list 1 --limit 10
  coopvote --json vote list 1 --limit 10 --offset 10""",
)
@click.argument("proposal_id", type=int)
@click.option("--limit", type=int, default=None, help="Page size (capped by votes.max_page_size).")
@click.option("--offset", type=int, default=0, show_default=True, help="Rows to skip.")
@click.pass_obj
def list_cmd(app: AppContext, proposal_id: int, limit: int | None, offset: int) -> None:
    """List votes on a proposal in casting order."""
    app.emit(VoteService(app.ledger).list_votes(proposal_id, limit=limit, offset=offset))
