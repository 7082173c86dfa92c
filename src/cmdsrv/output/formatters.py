"""Rich/JSON output helpers for ``cmdsrv send``.

A response envelope is rendered for humans (Rich, status colors, a table
for batch results) or for machines (--json, the envelope verbatim).
"""

from __future__ import annotations

import json as _json
from typing import Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from cmdsrv.output.console import create_console, get_output, style_for_status


class OutputSettings(BaseModel):
    """How ``format_response`` should render."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False


def format_response(envelope: dict[str, Any], *, settings: OutputSettings | None = None) -> str:
    """Format a wire response envelope for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return _json.dumps(envelope, indent=2, ensure_ascii=False)
    if settings.quiet:
        return _render_quiet(envelope)
    return _render_human(envelope)


def _compact(value: Any) -> str:
    if isinstance(value, str):
        return value
    return _json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _is_batch(value: Any) -> bool:
    return (
        isinstance(value, list)
        and bool(value)
        and all(isinstance(item, dict) and "status" in item for item in value)
    )


def _render_quiet(envelope: dict[str, Any]) -> str:
    if envelope.get("status") == "ok":
        return _compact(envelope.get("response"))
    return f"ERROR: {envelope.get('error', 'unknown error')}"


def _status_line(envelope: dict[str, Any]) -> Text:
    status = str(envelope.get("status", "error"))
    line = Text(status.upper(), style=style_for_status(status))
    line.append(" ")
    line.append(str(envelope.get("request_id")), style="cmdsrv.id")
    return line


def _render_human(envelope: dict[str, Any]) -> str:
    console = create_console()
    console.print(_status_line(envelope))

    if envelope.get("status") != "ok":
        console.print(Text(f"  {envelope.get('error', 'unknown error')}"))
        return get_output(console).rstrip("\n")

    value = envelope.get("response")
    if _is_batch(value):
        console.print(_batch_table(value))
    else:
        console.print(Text(f"  {_compact(value)}"))
    return get_output(console).rstrip("\n")


def _batch_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, header_style="cmdsrv.key", box=None, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("request_id")
    table.add_column("status")
    table.add_column("result")
    for index, item in enumerate(items):
        status = str(item.get("status"))
        result = item.get("response") if status == "ok" else item.get("error")
        table.add_row(
            str(index),
            Text(str(item.get("request_id")), style="cmdsrv.id"),
            Text(status, style=style_for_status(status)),
            Text(_compact(result)),
        )
    return table
