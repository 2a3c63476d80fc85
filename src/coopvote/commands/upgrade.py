"""``coopvote upgrade``: bring the ledger schema up to the latest revision."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.commands._base import CoopCommand

if TYPE_CHECKING:
    from coopvote.commands._context import AppContext


@click.command(
    cls=CoopCommand,
    examples="""\
  coopvote upgrade
  coopvote upgrade --check
  coopvote --json upgrade --check""",
)
@click.option(
    "--check",
    "check_only",
    is_flag=True,
    help="List revisions the ledger is behind by; change nothing.",
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Migrate the proposals and votes ledger to the newest schema.

    The database file is copied aside before any revision runs. A ledger
    created by an older coopvote without version tracking is stamped
    instead of migrated.
    """
    from coopvote.services.upgrade import UpgradeService

    svc = UpgradeService(app.ledger)
    result = svc.check_pending() if check_only else svc.apply()
    app.emit(result)
