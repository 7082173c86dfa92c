"""Request and Response envelopes.

INVARIANT: A Response carries exactly one of ``response`` (status ok) or
``error`` (status error). Construction that breaks this raises, so the
codec can serialize any Response without checking again.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, model_validator

from cmdsrv.domain.types import Status


class Request(BaseModel):
    """A decoded request envelope.

    Attributes:
        request_id: Opaque correlation token, echoed back verbatim.
        command: Command name, matched case-sensitively by the dispatcher.
        payload: Untyped JSON value; ``None`` when absent or ``null``.
    """

    model_config = {"frozen": True}

    request_id: str
    command: str
    payload: Any = None


class Response(BaseModel):
    """A response envelope correlated to one request."""

    model_config = {"frozen": True}

    request_id: str | None
    status: Status
    response: Any = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> Self:
        if self.status is Status.OK and self.error is not None:
            msg = "ok response must not carry an error"
            raise ValueError(msg)
        if self.status is Status.ERROR:
            if self.error is None:
                msg = "error response requires an error message"
                raise ValueError(msg)
            if "response" in self.model_fields_set:
                msg = "error response must not carry a response value"
                raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: str | None, value: Any) -> Response:
        return cls(request_id=request_id, status=Status.OK, response=value)

    @classmethod
    def failure(cls, request_id: str | None, message: str) -> Response:
        return cls(request_id=request_id, status=Status.ERROR, error=message)

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    def to_wire(self) -> dict[str, Any]:
        """Plain dict in wire shape (``response`` may legitimately be null)."""
        wire: dict[str, Any] = {"request_id": self.request_id, "status": self.status.value}
        if self.status is Status.OK:
            wire["response"] = self.response
        else:
            wire["error"] = self.error
        return wire
