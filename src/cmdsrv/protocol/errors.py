"""Envelope-level errors raised by the codec before dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(eq=False)
class EnvelopeError(Exception):
    """Base class for failures that happen while decoding a request.

    ``request_id`` holds the correlation token when one could be salvaged
    from the document, so the failure can still be answered in kind.
    """

    message: str
    request_id: str | None = None

    code: ClassVar[str] = "INVALID_ENVELOPE"

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidEnvelope(EnvelopeError):
    code = "INVALID_ENVELOPE"


class MalformedJson(EnvelopeError):
    code = "MALFORMED_JSON"


class MissingField(EnvelopeError):
    code = "MISSING_FIELD"


class InvalidRequestId(EnvelopeError):
    code = "INVALID_REQUEST_ID"


class MessageTooLarge(EnvelopeError):
    code = "MESSAGE_TOO_LARGE"
