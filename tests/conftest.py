"""Shared pytest fixtures and test helpers for cmdsrv tests."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from cmdsrv.services.dispatcher import Dispatcher
from cmdsrv.services.telemetry import _current_span, disable_telemetry

FIXED_TIME = "2026-10-18T09:30:00Z"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Run every test from an empty temp dir with no config or leaked state.

    Keeps ``default.log`` and ``cmdsrv.toml`` discovery out of the repo,
    and restores logging/telemetry that a CLI invocation may have changed.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("CMDSRV_CONFIG", "CMDSRV_DEBUG", "CMDSRV_LOG_FILE", "CMDSRV_SERVER__PORT"):
        monkeypatch.delenv(var, raising=False)

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def dispatcher() -> Dispatcher:
    """Dispatcher with a frozen clock."""
    return Dispatcher(clock=lambda: FIXED_TIME)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_request(command: str, payload: Any = None, **extra: Any) -> dict[str, Any]:
    """Wire-shaped request dict with a fresh UUID ``request_id``."""
    request: dict[str, Any] = {"request_id": str(uuid.uuid4()), "command": command}
    if payload is not None:
        request["payload"] = payload
    request.update(extra)
    return request


def assert_exclusive(envelope: dict[str, Any]) -> None:
    """Exactly one of ``response`` / ``error``, matching ``status``."""
    assert envelope["status"] in ("ok", "error")
    if envelope["status"] == "ok":
        assert "response" in envelope
        assert "error" not in envelope
    else:
        assert "error" in envelope
        assert "response" not in envelope
        assert isinstance(envelope["error"], str)
