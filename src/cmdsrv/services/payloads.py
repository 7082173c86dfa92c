"""Typed payload contracts for commands that need one.

Payloads arrive as untyped JSON values. Each validator narrows the value
into a pydantic model (or a plain list for ``batch``) and raises
:class:`PayloadError` with a message naming the expected shape when the
value does not fit. ``validate_calculation`` is the template for any
future typed command.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cmdsrv.domain.types import Operation
from cmdsrv.protocol.codec import json_type

CALCULATION_SHAPE = "expected object with operation, a, b"
BATCH_SHAPE = "expected array of request objects"


class PayloadError(Exception):
    """A payload did not match the shape its command requires."""

    def __init__(self, message: str, *, code: str = "VALIDATION_FAILED") -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class CalculationPayload(BaseModel):
    """Operands and operation for ``calculate``. Extra keys are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    operation: Operation
    a: float
    b: float

    @field_validator("a", "b", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> float:
        # bool is an int subclass; JSON true/false are not operands.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            msg = "must be a number"
            raise ValueError(msg)
        try:
            number = float(value)
        except OverflowError as exc:
            msg = "number is too large"
            raise ValueError(msg) from exc
        if not math.isfinite(number):
            msg = "must be a finite number"
            raise ValueError(msg)
        return number


def validate_calculation(payload: Any) -> CalculationPayload:
    """Narrow a ``calculate`` payload into :class:`CalculationPayload`.

    Raises:
        PayloadError: payload missing, not an object, missing a key, or
            carrying a key of the wrong type.
    """
    if payload is None:
        raise PayloadError(f"missing `payload` field, {CALCULATION_SHAPE}")
    if not isinstance(payload, dict):
        raise PayloadError(f"invalid payload type {json_type(payload)}, {CALCULATION_SHAPE}")
    try:
        return CalculationPayload.model_validate(payload)
    except ValidationError as exc:
        raise PayloadError(f"invalid payload, {CALCULATION_SHAPE}: {_first_problem(exc)}") from exc


def validate_batch(payload: Any) -> list[Any]:
    """Return the batch element list, or raise if the payload is not an array."""
    if not isinstance(payload, list):
        raise PayloadError(
            f"invalid payload type {json_type(payload)}, {BATCH_SHAPE}",
            code="BATCH_PAYLOAD_NOT_ARRAY",
        )
    return payload


def _first_problem(exc: ValidationError) -> str:
    err = exc.errors()[0]
    location = ".".join(str(part) for part in err["loc"]) or "payload"
    if err["type"] == "missing":
        return f"missing field `{location}`"
    # pydantic prefixes ValueError messages raised in validators
    message = err["msg"].removeprefix("Value error, ")
    return f"`{location}` {message}" if err["type"] == "value_error" else f"`{location}`: {message}"
