"""Command group: member roster."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopGroup

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext


@click.group(
    cls=CoopGroup,
    examples="""\
  coopvote member add ana@coop.example --name "Ana"
  coopvote member list""",
)
def member() -> None:
    """Manage the member roster."""


@member.command(
    examples="""\
  coopvote member add ana@coop.example
  coopvote member add bo@coop.example --name "Bo" --role steward""",
)
@click.argument("email")
@click.option("--name", "display_name", default="", help="Display name.")
@click.option("--role", default="member", show_default=True, help="Member role.")
@click.pass_obj
def add(app: AppContext, email: str, display_name: str, role: str) -> None:
    """Register a new member."""
    from coopvote.services.members import MemberService

    app.emit(MemberService(app.ledger).register(email, display_name, role))


@member.command(
    "list",
    examples="""\
  coopvote member list
  coopvote --json member list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List registered members."""
    from coopvote.services.members import MemberService

    app.emit(MemberService(app.ledger).list_members())
