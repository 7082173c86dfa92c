"""Minimal client: one connection, one request, one response."""

from __future__ import annotations

import asyncio
import contextlib
import json
import uuid
from typing import Any

from cmdsrv.server.connection import DEFAULT_PORT

# Sentinel for "leave `payload` out"; None means an explicit JSON null.
NO_PAYLOAD: Any = object()


def build_request(
    command: str,
    payload: Any = NO_PAYLOAD,
    *,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Build a request envelope, generating a UUID4 ``request_id`` if none is given.

    ``payload`` is omitted from the envelope entirely when not passed.
    """
    request: dict[str, Any] = {
        "request_id": request_id or str(uuid.uuid4()),
        "command": command,
    }
    if payload is not NO_PAYLOAD:
        request["payload"] = payload
    return request


async def exchange(
    message: bytes,
    *,
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
    timeout: float | None = 10.0,
) -> bytes:
    """Send raw *message*, half-close, and return everything the server sends back."""
    async with asyncio.timeout(timeout):
        reader, writer = await asyncio.open_connection(host, port)
        try:
            writer.write(message)
            await writer.drain()
            writer.write_eof()
            return await reader.read()
        finally:
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()


async def send_request(
    request: dict[str, Any],
    *,
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
    timeout: float | None = 10.0,
) -> dict[str, Any]:
    """Send a request envelope and return the decoded response envelope."""
    raw = await exchange(
        json.dumps(request).encode("utf-8"), host=host, port=port, timeout=timeout
    )
    return json.loads(raw)
