"""serve — run the TCP command server until interrupted."""

from __future__ import annotations

import asyncio

import click
import structlog

from cmdsrv.commands._base import CmdsrvCommand

log = structlog.get_logger(__name__)


@click.command(
    cls=CmdsrvCommand,
    examples="""\
  # Listen on the default address (127.0.0.1:7878)
  cmdsrv serve

  # All interfaces, custom port, verbose logs to a file
  cmdsrv -d -l server.log serve --host 0.0.0.0 --port 9000""",
)
@click.option("--host", default=None, help="Bind address.  [default: 127.0.0.1]")
@click.option(
    "--port", default=None, type=click.IntRange(0, 65535), help="Listen port.  [default: 7878]"
)
@click.pass_obj
def serve(app: object, host: str | None, port: int | None) -> None:
    """Run the TCP command server."""
    from cmdsrv.commands._context import AppContext
    from cmdsrv.server.connection import CommandServer

    assert isinstance(app, AppContext)
    cfg = app.settings.server
    server = CommandServer(
        app.dispatcher,
        host=host or cfg.host,
        port=cfg.port if port is None else port,
        max_message_bytes=cfg.max_message_bytes,
        read_timeout=cfg.read_timeout,
        require_uuid=app.settings.protocol.require_uuid,
        telemetry=app.settings.debug,
    )

    try:
        asyncio.run(server.serve_forever())
    except OSError as exc:
        msg = f"Couldn't start the server: {exc}"
        raise click.ClickException(msg) from exc
    except KeyboardInterrupt:
        log.info("server.interrupted")
