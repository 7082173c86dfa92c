"""Leaf command handlers: ping, echo, time, calculate.

Each handler takes the raw payload and returns a ServiceResult. None of
them performs I/O apart from the clock read in ``time``.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from cmdsrv.domain.types import Command, Operation
from cmdsrv.services._helpers import now_rfc3339
from cmdsrv.services.payloads import PayloadError, validate_calculation
from cmdsrv.services.result import ServiceResult

Handler = Callable[[Any], ServiceResult]


def ping(payload: Any = None) -> ServiceResult:
    """Liveness check. The payload is ignored."""
    return ServiceResult(ok=True, op=Command.PING, data="pong")


def echo(payload: Any = None) -> ServiceResult:
    """Return the payload unchanged (``None`` when absent)."""
    return ServiceResult(ok=True, op=Command.ECHO, data=payload)


def time(payload: Any = None, *, clock: Callable[[], str] = now_rfc3339) -> ServiceResult:
    """Current UTC wall-clock time. The payload is ignored."""
    return ServiceResult(ok=True, op=Command.TIME, data={"time": clock()})


def calculate(payload: Any = None) -> ServiceResult:
    """Apply ``operation`` to ``a`` and ``b``; the result is always a float."""
    op = Command.CALCULATE
    try:
        calc = validate_calculation(payload)
    except PayloadError as exc:
        return ServiceResult.failure(op, exc.code, exc.message)

    match calc.operation:
        case Operation.ADD:
            result = calc.a + calc.b
        case Operation.SUBTRACT:
            result = calc.a - calc.b
        case Operation.MULTIPLY:
            result = calc.a * calc.b
        case Operation.DIVIDE:
            if calc.b == 0:
                return ServiceResult.failure(op, "DIVISION_BY_ZERO", "division by zero")
            result = calc.a / calc.b

    if not math.isfinite(result):
        return ServiceResult.failure(
            op,
            "NON_FINITE_RESULT",
            f"result of {calc.operation} is not a finite number",
        )
    return ServiceResult(ok=True, op=op, data={"result": float(result)})
