"""Asyncio TCP connection handler.

One message per connection: the client writes a JSON document and
half-closes; the server reads to EOF, answers with one JSON document and
closes. Each connection runs in its own task and shares only the
stateless dispatcher, so there is nothing to lock.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Self

import structlog

from cmdsrv.protocol.codec import decode, encode, error_response
from cmdsrv.protocol.envelope import Response
from cmdsrv.protocol.errors import EnvelopeError, MessageTooLarge
from cmdsrv.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from types import TracebackType

    from cmdsrv.services.dispatcher import Dispatcher

log = structlog.get_logger(__name__)

DEFAULT_PORT = 7878
_CHUNK_SIZE = 64 * 1024
INTERNAL_ERROR_MESSAGE = "internal server error"


class CommandServer:
    """TCP front end for a :class:`Dispatcher`.

    Usage::

        async with CommandServer(Dispatcher(), port=0) as server:
            print(server.port)
            await server.serve_forever()
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        *,
        host: str = "127.0.0.1",
        port: int = DEFAULT_PORT,
        max_message_bytes: int = 1024 * 1024,
        read_timeout: float | None = 30.0,
        require_uuid: bool = True,
        telemetry: bool = False,
    ) -> None:
        self._dispatcher = dispatcher
        self._host = host
        self._port = port
        self._max_message_bytes = max_message_bytes
        self._read_timeout = read_timeout
        self._require_uuid = require_uuid
        self._telemetry = telemetry
        self._server: asyncio.Server | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle_client, self._host, self._port)
        log.info("server.listening", host=self._host, port=self.port)

    @property
    def port(self) -> int:
        """Bound port (resolves ``port=0`` to the ephemeral port chosen)."""
        if self._server is None or not self._server.sockets:
            return self._port
        return self._server.sockets[0].getsockname()[1]

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        log.info("server.closed")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Per-message processing
    # ------------------------------------------------------------------

    def process(self, data: bytes) -> Response:
        """Decode, dispatch, and answer one raw message.

        Decode failures are answered in kind, with the salvaged
        ``request_id`` or ``null`` when none could be recovered.
        """
        try:
            request = decode(data, require_uuid=self._require_uuid)
        except EnvelopeError as exc:
            log.info(
                "request.rejected", code=exc.code, request_id=exc.request_id, error=exc.message
            )
            return error_response(exc)
        except Exception:
            log.exception("request.crashed", stage="decode")
            return Response.failure(None, INTERNAL_ERROR_MESSAGE)

        log.info("request.received", request_id=request.request_id, command=request.command)
        try:
            return self._dispatcher.handle(request)
        except Exception:
            log.exception("request.crashed", stage="dispatch", request_id=request.request_id)
            return Response.failure(request.request_id, INTERNAL_ERROR_MESSAGE)

    def _encode_or_fail(self, response: Response) -> bytes:
        """Encode *response*; if that fails, encode an internal error in its place."""
        try:
            return encode(response)
        except (TypeError, ValueError, RecursionError):
            log.exception("response.unencodable", request_id=response.request_id)
            return encode(Response.failure(response.request_id, INTERNAL_ERROR_MESSAGE))

    async def _read_message(self, reader: asyncio.StreamReader) -> bytes:
        """Read to EOF. Oversized input is drained and discarded, then rejected."""
        buf = bytearray()
        received = 0
        while chunk := await reader.read(_CHUNK_SIZE):
            received += len(chunk)
            if received <= self._max_message_bytes:
                buf += chunk
        if received > self._max_message_bytes:
            msg = f"message exceeds {self._max_message_bytes} bytes"
            raise MessageTooLarge(msg)
        return bytes(buf)

    async def _handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        if self._telemetry:
            enable_telemetry()
        peer = writer.get_extra_info("peername")
        with structlog.contextvars.bound_contextvars(peer=str(peer)):
            log.debug("connection.opened")
            try:
                try:
                    async with asyncio.timeout(self._read_timeout):
                        data = await self._read_message(reader)
                except MessageTooLarge as exc:
                    log.warning("request.rejected", code=exc.code, error=exc.message)
                    response = error_response(exc)
                else:
                    response = self.process(data)

                writer.write(self._encode_or_fail(response))
                await writer.drain()
                log.info(
                    "response.sent",
                    request_id=response.request_id,
                    status=response.status.value,
                )
            except TimeoutError:
                log.warning("connection.timeout", timeout=self._read_timeout)
            except ConnectionError as exc:
                log.warning("connection.failed", error=str(exc))
            finally:
                writer.close()
                with contextlib.suppress(ConnectionError):
                    await writer.wait_closed()
                log.debug("connection.closed")
