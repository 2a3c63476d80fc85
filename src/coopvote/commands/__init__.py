"""Subcommand modules for coopvote.

:func:`register_commands` imports lazily so ``coopvote --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach command groups and standalone commands to the root group."""
    from coopvote.commands.member import member
    from coopvote.commands.proposal import proposal
    from coopvote.commands.vote import vote

    cli.add_command(proposal)
    cli.add_command(vote)
    cli.add_command(member)

    from coopvote.commands.init_cmd import init_cmd
    from coopvote.commands.tally import tally
    from coopvote.commands.upgrade import upgrade

    cli.add_command(tally)
    cli.add_command(init_cmd)
    cli.add_command(upgrade)
