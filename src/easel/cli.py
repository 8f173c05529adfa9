"""Root CLI group for easel with global flags and command registration."""

from __future__ import annotations

import click

from easel import __version__
from easel.commands import register_commands
from easel.commands._context import AppContext
from easel.config.settings import EaselSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="easel")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging from the runtime.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """easel: load extensions into a runtime and drive it from the shell."""
    settings = EaselSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
