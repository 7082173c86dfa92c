"""ServiceResult and ServiceError — the dispatch contract.

INVARIANT: Every handler and the dispatcher return ServiceResult.
Only the dispatcher turns a ServiceResult into a wire Response.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one command execution.

    Attributes:
        ok: Whether the command succeeded.
        op: Name of the command (e.g. ``"calculate"``).
        data: The JSON result value on success; ``None`` is a valid result.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans). Never sent on the wire.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: Any = None
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for an error result."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
