"""Tests for the leaf command handlers."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from cmdsrv.services import handlers


class TestPing:
    @pytest.mark.parametrize("payload", [None, {"x": 1}, [1], "anything"])
    def test_always_pong(self, payload: object) -> None:
        result = handlers.ping(payload)
        assert result.ok
        assert result.op == "ping"
        assert result.data == "pong"


class TestEcho:
    @pytest.mark.parametrize(
        "payload",
        [None, {"key": "value"}, [1, "two", None], "hello", 3.25, 0, False, {"nested": {"a": [1]}}],
    )
    def test_round_trip(self, payload: object) -> None:
        result = handlers.echo(payload)
        assert result.ok
        assert result.data == payload


class TestTime:
    def test_uses_clock(self) -> None:
        result = handlers.time(clock=lambda: "2026-01-01T00:00:00Z")
        assert result.data == {"time": "2026-01-01T00:00:00Z"}

    def test_real_clock_is_rfc3339_utc_and_current(self) -> None:
        before = datetime.now(UTC).replace(microsecond=0)
        result = handlers.time()
        stamp = result.data["time"]
        assert stamp.endswith("Z")
        parsed = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        assert parsed.tzinfo is not None
        assert 0 <= (parsed - before).total_seconds() < 2


class TestCalculate:
    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"operation": "add", "a": 5, "b": 3}, 8.0),
            ({"operation": "add", "a": 0.1, "b": 0.2}, 0.1 + 0.2),
            ({"operation": "subtract", "a": 21, "b": 9}, 12.0),
            ({"operation": "multiply", "a": 6.0, "b": -8}, -48.0),
            ({"operation": "divide", "a": 22, "b": 7}, 22 / 7),
            ({"operation": "divide", "a": 3.5, "b": -1.05}, 3.5 / -1.05),
        ],
    )
    def test_operations(self, payload: dict, expected: float) -> None:
        result = handlers.calculate(payload)
        assert result.ok, result.error
        assert result.data == {"result": expected}
        assert isinstance(result.data["result"], float)

    def test_division_by_zero(self) -> None:
        result = handlers.calculate({"operation": "divide", "a": 5, "b": 0})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DIVISION_BY_ZERO"
        assert "division by zero" in result.error.message

    def test_overflow_is_an_error(self) -> None:
        result = handlers.calculate({"operation": "multiply", "a": 1e308, "b": 10})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NON_FINITE_RESULT"

    @pytest.mark.parametrize("payload", [None, "bad", {"operation": "add", "a": 1}])
    def test_validation_failure(self, payload: object) -> None:
        result = handlers.calculate(payload)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "VALIDATION_FAILED"
