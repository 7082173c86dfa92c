"""Tests for cmdsrv send."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cmdsrv.cli import cli

PONG = {"request_id": "r1", "status": "ok", "response": "pong"}
FAILED = {"request_id": "r1", "status": "error", "error": "unknown command: nope"}


def _invoke(cli_runner: CliRunner, args: list[str], reply: Any) -> tuple[Any, AsyncMock]:
    mock = reply if isinstance(reply, AsyncMock) else AsyncMock(return_value=reply)
    with patch("cmdsrv.server.client.send_request", new=mock):
        result = cli_runner.invoke(cli, args)
    return result, mock


class TestSendCommand:
    def test_ping_human_output(self, cli_runner: CliRunner) -> None:
        result, mock = _invoke(cli_runner, ["send", "ping", "--request-id", "r1"], PONG)
        assert result.exit_code == 0, result.output
        assert "OK r1" in result.output
        assert "pong" in result.output
        request = mock.call_args.args[0]
        assert request == {"request_id": "r1", "command": "ping"}

    def test_payload_parsed_as_json(self, cli_runner: CliRunner) -> None:
        args = ["send", "calculate", "--payload", '{"operation": "add", "a": 5, "b": 3}']
        reply = {"request_id": "r1", "status": "ok", "response": {"result": 8.0}}
        result, mock = _invoke(cli_runner, args, reply)
        assert result.exit_code == 0
        assert mock.call_args.args[0]["payload"] == {"operation": "add", "a": 5, "b": 3}

    def test_explicit_null_payload_sent(self, cli_runner: CliRunner) -> None:
        _, mock = _invoke(cli_runner, ["send", "echo", "--payload", "null"], PONG)
        request = mock.call_args.args[0]
        assert "payload" in request
        assert request["payload"] is None

    def test_payload_omitted_when_not_given(self, cli_runner: CliRunner) -> None:
        _, mock = _invoke(cli_runner, ["send", "echo"], PONG)
        assert "payload" not in mock.call_args.args[0]

    def test_invalid_payload_json(self, cli_runner: CliRunner) -> None:
        result, mock = _invoke(cli_runner, ["send", "echo", "--payload", "{nope"], PONG)
        assert result.exit_code == 2
        assert "not valid JSON" in result.output
        mock.assert_not_called()

    def test_host_and_port_forwarded(self, cli_runner: CliRunner) -> None:
        args = ["send", "ping", "--host", "10.0.0.5", "--port", "9000", "--timeout", "3"]
        _, mock = _invoke(cli_runner, args, PONG)
        kwargs = mock.call_args.kwargs
        assert kwargs == {"host": "10.0.0.5", "port": 9000, "timeout": 3.0}

    def test_defaults_come_from_settings(self, cli_runner: CliRunner, tmp_path) -> None:
        (tmp_path / "cmdsrv.toml").write_text("[server]\nport = 9100\n")
        _, mock = _invoke(cli_runner, ["send", "ping"], PONG)
        assert mock.call_args.kwargs["port"] == 9100
        assert mock.call_args.kwargs["host"] == "127.0.0.1"

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result, _ = _invoke(cli_runner, ["send", "ping", "--json"], PONG)
        assert json.loads(result.output) == PONG

    def test_quiet_output(self, cli_runner: CliRunner) -> None:
        result, _ = _invoke(cli_runner, ["send", "ping", "-q"], PONG)
        assert result.output.strip() == "pong"

    def test_error_response_exits_1(self, cli_runner: CliRunner) -> None:
        result, _ = _invoke(cli_runner, ["send", "nope"], FAILED)
        assert result.exit_code == 1
        assert "unknown command: nope" in result.output

    @pytest.mark.parametrize(
        ("exc", "message"),
        [
            (ConnectionRefusedError("refused"), "Couldn't reach the server"),
            (TimeoutError(), "No response within"),
            (json.JSONDecodeError("bad", "", 0), "invalid response"),
        ],
    )
    def test_transport_failures(
        self, cli_runner: CliRunner, exc: Exception, message: str
    ) -> None:
        result, _ = _invoke(cli_runner, ["send", "ping"], AsyncMock(side_effect=exc))
        assert result.exit_code == 1
        assert message in result.output
