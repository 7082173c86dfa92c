"""BatchExecutor — run an array of sub-requests through the dispatcher.

Elements run sequentially, in input order, and each gets its own
Response. A failing element (bad envelope, unknown command, handler
error, too deep) becomes an error entry; it never fails the batch.
The batch itself only fails when its payload is not an array or when it
sits deeper than ``max_depth``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from cmdsrv.domain.types import Command
from cmdsrv.protocol.codec import decode_value, error_response
from cmdsrv.protocol.errors import EnvelopeError
from cmdsrv.services.payloads import PayloadError, validate_batch
from cmdsrv.services.result import ServiceResult
from cmdsrv.services.telemetry import get_current_span

if TYPE_CHECKING:
    from cmdsrv.protocol.envelope import Response
    from cmdsrv.services.dispatcher import Dispatcher

log = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 8


class BatchExecutor:
    """Executes ``batch`` payloads by recursing into the owning dispatcher."""

    def __init__(self, dispatcher: Dispatcher, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._dispatcher = dispatcher
        self._max_depth = max_depth

    def run(self, payload: Any, *, depth: int = 0) -> ServiceResult:
        """Execute every element of *payload* and collect the responses.

        *depth* is the number of batches enclosing this one; the top-level
        batch runs at depth 0 and its elements are dispatched at depth 1.
        """
        op = Command.BATCH
        if depth >= self._max_depth:
            return ServiceResult.failure(
                op,
                "BATCH_DEPTH_EXCEEDED",
                f"batch nesting exceeds the maximum depth of {self._max_depth}",
                depth=depth,
            )
        try:
            elements = validate_batch(payload)
        except PayloadError as exc:
            return ServiceResult.failure(op, exc.code, exc.message)

        span = get_current_span()
        if span is not None:
            span.annotate("elements", len(elements))

        responses = [
            self._run_element(index, element, depth + 1) for index, element in enumerate(elements)
        ]
        failed = sum(1 for r in responses if not r.ok)
        log.debug("batch.complete", depth=depth, elements=len(responses), failed=failed)
        return ServiceResult(ok=True, op=op, data=[r.to_wire() for r in responses])

    def _run_element(self, index: int, element: Any, depth: int) -> Response:
        try:
            request = decode_value(element, require_uuid=False)
        except EnvelopeError as exc:
            log.debug("batch.element_invalid", index=index, depth=depth, code=exc.code)
            return error_response(exc)
        return self._dispatcher.handle(request, depth=depth)
