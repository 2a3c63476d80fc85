"""Root CLI group for coopvote with global flags and command registration."""

from __future__ import annotations

import click

from coopvote import __version__
from coopvote.commands import register_commands
from coopvote.commands._context import AppContext
from coopvote.config.logging import bind_command
from coopvote.config.settings import CoopSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="coopvote")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """coopvote — cooperative proposal and voting CLI."""
    settings = CoopSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    bind_command(ctx.invoked_subcommand)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
