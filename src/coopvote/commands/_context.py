"""AppContext — shared Click context for all commands.

Created once by the root group and passed down with ``@click.pass_obj``.
The Ledger is opened lazily so ``--help`` never touches the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from coopvote.config.logging import configure_logging
from coopvote.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from coopvote.config.settings import CoopSettings
    from coopvote.infrastructure.ledger import Ledger
    from coopvote.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: CoopSettings) -> None:
        self.settings = settings
        self._ledger: Ledger | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            from coopvote.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def ledger(self) -> Ledger:
        """The storage handle (opened on first access)."""
        if self._ledger is None:
            from coopvote.infrastructure.ledger import Ledger

            self._ledger = Ledger(self.settings)
        return self._ledger

    def close(self) -> None:
        if self._ledger is not None:
            self._ledger.close()
            self._ledger = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 on failure.

        Success goes to stdout, with warnings on stderr outside JSON mode.
        Failures go to stderr.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
