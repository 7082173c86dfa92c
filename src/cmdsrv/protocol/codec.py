"""Envelope codec — bytes to Request, Response to bytes.

Pure functions, no I/O. Decoding validates the envelope only: whether a
payload is required is up to the handler for the named command.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from cmdsrv.protocol.envelope import Request, Response
from cmdsrv.protocol.errors import (
    EnvelopeError,
    InvalidEnvelope,
    InvalidRequestId,
    MalformedJson,
    MissingField,
)

__all__ = ["decode", "decode_value", "encode", "error_response", "json_type"]


def decode(data: bytes, *, require_uuid: bool = True) -> Request:
    """Decode one raw message into a :class:`Request`.

    Raises:
        MalformedJson: *data* is not UTF-8 encoded JSON, or nests too deeply.
        InvalidEnvelope: the document is not an object, or a field has the wrong type.
        MissingField: ``request_id`` or ``command`` is absent.
        InvalidRequestId: ``request_id`` is not a UUID (only with *require_uuid*).
    """
    try:
        value = json.loads(data, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedJson(f"request is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedJson("request is nested too deeply to decode") from exc
    return decode_value(value, require_uuid=require_uuid)


def decode_value(value: Any, *, require_uuid: bool = False) -> Request:
    """Validate an already-parsed JSON value as a request envelope.

    Batch elements arrive pre-parsed and go through here directly, so the
    same required-field rules apply to them as to top-level messages.
    """
    if not isinstance(value, dict):
        msg = f"request must be a JSON object, got {json_type(value)}"
        raise InvalidEnvelope(msg)

    raw_id = value.get("request_id")
    salvaged = raw_id if isinstance(raw_id, str) else None

    if raw_id is None:
        raise MissingField("missing field `request_id`")
    if salvaged is None:
        msg = f"`request_id` must be a string, got {json_type(raw_id)}"
        raise InvalidEnvelope(msg)
    if not salvaged:
        raise InvalidEnvelope("`request_id` must not be empty")
    if require_uuid and not _is_uuid(salvaged):
        raise InvalidRequestId(f"`request_id` is not a valid UUID: {salvaged!r}", salvaged)

    command = value.get("command")
    if command is None:
        raise MissingField("missing field `command`", salvaged)
    if not isinstance(command, str) or not command:
        msg = "`command` must be a non-empty string"
        raise InvalidEnvelope(msg, salvaged)

    return Request(request_id=salvaged, command=command, payload=value.get("payload"))


def encode(response: Response) -> bytes:
    """Serialize a Response to compact UTF-8 JSON."""
    return json.dumps(
        response.to_wire(),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def error_response(exc: EnvelopeError) -> Response:
    """Answer a decode failure, echoing the salvaged id when there is one."""
    return Response.failure(exc.request_id, exc.message)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON and encode() runs with allow_nan=False.
    msg = f"non-standard constant {name}"
    raise ValueError(msg)


def _is_uuid(candidate: str) -> bool:
    try:
        uuid.UUID(candidate)
    except ValueError:
        return False
    return True


def json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"
