"""Root CLI group for cmdsrv with global flags and command registration."""

from __future__ import annotations

import click

from cmdsrv import __version__
from cmdsrv.commands import register_commands
from cmdsrv.commands._base import CmdsrvGroup
from cmdsrv.commands._context import AppContext
from cmdsrv.config.settings import CmdsrvSettings


@click.group(
    cls=CmdsrvGroup,
    invoke_without_command=True,
    examples="""\
  # Start the server with debug logging on stderr and in server.log
  cmdsrv --debug --log-file server.log serve

  # Ask a running server for the time
  cmdsrv send time""",
)
@click.version_option(version=__version__, prog_name="cmdsrv")
@click.option("-d", "--debug", is_flag=True, help="Verbose logging and timing spans.")
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Log destination.  [default: default.log]",
)
@click.option("--log-json", is_flag=True, help="Structured JSON log lines.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    log_file: str | None,
    log_json: bool,
    config_path: str | None,
) -> None:
    """cmdsrv — JSON command server over TCP."""
    settings = CmdsrvSettings.from_cli(
        config_path=config_path,
        # unset flags stay None so env vars and cmdsrv.toml still apply
        debug=debug or None,
        log_file=log_file,
        log_json=log_json or None,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
