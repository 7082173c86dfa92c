"""Dispatcher — route a command name to its handler.

The registry is static: the ``Command`` enum plus the handler table built
in ``Dispatcher.__init__``. Lookup is an exact, case-sensitive match on
the command string. ``batch`` recurses back into :meth:`Dispatcher.handle`
with an explicit depth counter.

INVARIANT: dispatch never raises. Every outcome, including a handler
bug, comes back as a ServiceResult.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import Any

import structlog

from cmdsrv.domain.types import Command
from cmdsrv.protocol.envelope import Request, Response
from cmdsrv.services import handlers
from cmdsrv.services._helpers import now_rfc3339
from cmdsrv.services.batch import DEFAULT_MAX_DEPTH, BatchExecutor
from cmdsrv.services.result import ServiceResult
from cmdsrv.services.telemetry import traced

log = structlog.get_logger(__name__)


class Dispatcher:
    """Stateless command router shared by every connection.

    Args:
        max_batch_depth: Number of nested ``batch`` levels allowed.
        clock: Source of the RFC 3339 timestamp returned by ``time``.
    """

    def __init__(
        self,
        *,
        max_batch_depth: int = DEFAULT_MAX_DEPTH,
        clock: Callable[[], str] = now_rfc3339,
    ) -> None:
        self._handlers: dict[Command, handlers.Handler] = {
            Command.PING: handlers.ping,
            Command.ECHO: handlers.echo,
            Command.TIME: partial(handlers.time, clock=clock),
            Command.CALCULATE: handlers.calculate,
        }
        self._batch = BatchExecutor(self, max_depth=max_batch_depth)

    @property
    def commands(self) -> frozenset[str]:
        """Names this dispatcher accepts."""
        return frozenset(Command)

    @traced
    def dispatch(self, command: str, payload: Any = None, *, depth: int = 0) -> ServiceResult:
        """Run *command* with *payload* and return its outcome.

        *depth* counts the ``batch`` commands enclosing this call.
        """
        try:
            cmd = Command(command)
        except ValueError:
            log.debug("command.unknown", command=command, depth=depth)
            return ServiceResult.failure(
                command, "UNKNOWN_COMMAND", f"unknown command: {command}", command=command
            )

        try:
            if cmd is Command.BATCH:
                return self._batch.run(payload, depth=depth)
            return self._handlers[cmd](payload)
        except Exception:
            log.exception("command.crashed", command=command, depth=depth)
            return ServiceResult.failure(
                command, "INTERNAL_ERROR", f"internal error while processing {command}"
            )

    def handle(self, request: Request, *, depth: int = 0) -> Response:
        """Dispatch a decoded request and build its correlated Response."""
        result = self.dispatch(request.command, request.payload, depth=depth)
        if result.meta and "telemetry" in result.meta:
            log.debug(
                "request.trace",
                request_id=request.request_id,
                command=request.command,
                trace=result.meta["telemetry"],
            )
        if result.ok:
            return Response.success(request.request_id, result.data)
        message = result.error.message if result.error else "unknown error"
        log.debug(
            "command.failed",
            request_id=request.request_id,
            command=request.command,
            code=result.error.code if result.error else None,
            depth=depth,
        )
        return Response.failure(request.request_id, message)
