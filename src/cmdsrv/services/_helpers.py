"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_rfc3339() -> str:
    """Current UTC time as RFC 3339 with second precision and a ``Z`` suffix.

    Examples:
        ``2026-10-18T09:30:00Z``
    """
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
