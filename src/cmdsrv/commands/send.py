"""send — send one request to a running server and print the response."""

from __future__ import annotations

import asyncio
import json

import click

from cmdsrv.commands._base import CmdsrvCommand


def _parse_payload(_ctx: click.Context, _param: click.Parameter, value: str | None) -> object:
    from cmdsrv.server.client import NO_PAYLOAD

    if value is None:
        return NO_PAYLOAD
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        msg = f"not valid JSON: {exc}"
        raise click.BadParameter(msg) from exc


@click.command(
    cls=CmdsrvCommand,
    examples="""\
  # Liveness check
  cmdsrv send ping

  # Arithmetic
  cmdsrv send calculate --payload '{"operation": "divide", "a": 22, "b": 7}'

  # Two commands in one round trip, raw JSON output
  cmdsrv send batch --json --payload '[{"request_id": "a", "command": "ping"},
                                        {"request_id": "b", "command": "time"}]'""",
)
@click.argument("command")
@click.option(
    "--payload", default=None, callback=_parse_payload, help="Payload as a JSON document."
)
@click.option("--request-id", default=None, help="Correlation id (default: random UUID).")
@click.option("--host", default=None, help="Server address.  [default: 127.0.0.1]")
@click.option(
    "--port", default=None, type=click.IntRange(1, 65535), help="Server port.  [default: 7878]"
)
@click.option("--timeout", default=10.0, type=float, show_default=True, help="Seconds to wait.")
@click.option("--json", "json_output", is_flag=True, help="Print the response envelope as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the result value.")
@click.pass_obj
def send(
    app: object,
    command: str,
    payload: object,
    request_id: str | None,
    host: str | None,
    port: int | None,
    timeout: float,
    json_output: bool,
    quiet: bool,
) -> None:
    """Send COMMAND to a running server and print the response."""
    from cmdsrv.commands._context import AppContext
    from cmdsrv.server.client import build_request, send_request

    assert isinstance(app, AppContext)
    cfg = app.settings.server
    request = build_request(command, payload, request_id=request_id)

    try:
        envelope = asyncio.run(
            send_request(
                request,
                host=host or cfg.host,
                port=port or cfg.port,
                timeout=timeout,
            )
        )
    except TimeoutError as exc:
        msg = f"No response within {timeout}s"
        raise click.ClickException(msg) from exc
    except OSError as exc:
        msg = f"Couldn't reach the server: {exc}"
        raise click.ClickException(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Server sent an invalid response: {exc}"
        raise click.ClickException(msg) from exc

    app.emit(envelope, json_output=json_output, quiet=quiet)
