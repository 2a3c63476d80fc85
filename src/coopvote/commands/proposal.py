"""Command group: proposals (create, show, list, close)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopGroup

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext


@click.group(
    cls=CoopGroup,
    examples="""\
  coopvote proposal create "Adopt a four-day week" --body "Pilot for one quarter."
  coopvote proposal list
  coopvote proposal show 3
  coopvote proposal close 3""",
)
def proposal() -> None:
    """Create, inspect, and close proposals."""


@proposal.command(
    examples="""\
  coopvote proposal create "Buy a new roaster"
  coopvote --json proposal create "Budget 2027" --body "See attached draft."
  coopvote -q proposal create Rename-the-coop""",
)
@click.argument("title")
@click.option("--body", default="", help="Proposal text.")
@click.pass_obj
def create(app: AppContext, title: str, body: str) -> None:
    """Create a new open proposal."""
    from coopvote.services.proposals import ProposalService

    app.emit(ProposalService(app.ledger).create(title, body))


@proposal.command(
    examples="""\
  coopvote proposal show 1
  coopvote --json proposal show 1""",
)
@click.argument("proposal_id", type=int)
@click.pass_obj
def show(app: AppContext, proposal_id: int) -> None:
    """Show a single proposal."""
    from coopvote.services.proposals import ProposalService

    app.emit(ProposalService(app.ledger).get(proposal_id))


@proposal.command(
    "list",
    examples="""\
  coopvote proposal list
  coopvote -q proposal list
  coopvote --json proposal list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all proposals, newest first."""
    from coopvote.services.proposals import ProposalService

    app.emit(ProposalService(app.ledger).list_proposals())


@proposal.command(
    examples="""\
  coopvote proposal close 1
  coopvote --json proposal close 1""",
)
@click.argument("proposal_id", type=int)
@click.pass_obj
def close(app: AppContext, proposal_id: int) -> None:
    """Close voting on a proposal. Irreversible."""
    from coopvote.services.proposals import ProposalService

    app.emit(ProposalService(app.ledger).close(proposal_id))
