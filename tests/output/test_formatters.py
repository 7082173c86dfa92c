"""Tests for format_response and OutputSettings."""

import json

from cmdsrv.output.formatters import OutputSettings, format_response

OK = {"request_id": "r1", "status": "ok", "response": {"result": 8.0}}
ERR = {"request_id": "r2", "status": "error", "error": "division by zero"}
BATCH = {
    "request_id": "r3",
    "status": "ok",
    "response": [
        {"request_id": "id1", "status": "ok", "response": "pong"},
        {"request_id": "id3", "status": "error", "error": "invalid payload"},
    ],
}


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False


class TestJsonMode:
    def test_round_trips_envelope(self) -> None:
        output = format_response(OK, settings=OutputSettings(json_output=True))
        assert json.loads(output) == OK


class TestQuietMode:
    def test_ok_prints_value_only(self) -> None:
        output = format_response(OK, settings=OutputSettings(quiet=True))
        assert output == '{"result":8.0}'

    def test_string_value_unquoted(self) -> None:
        envelope = {"request_id": "r", "status": "ok", "response": "pong"}
        assert format_response(envelope, settings=OutputSettings(quiet=True)) == "pong"

    def test_error(self) -> None:
        output = format_response(ERR, settings=OutputSettings(quiet=True))
        assert output == "ERROR: division by zero"


class TestHumanMode:
    def test_ok(self) -> None:
        output = format_response(OK)
        assert output.splitlines()[0] == "OK r1"
        assert '{"result":8.0}' in output

    def test_error(self) -> None:
        output = format_response(ERR)
        assert output.startswith("ERROR r2")
        assert "division by zero" in output

    def test_batch_renders_table(self) -> None:
        output = format_response(BATCH)
        assert "request_id" in output
        assert "id1" in output
        assert "pong" in output
        assert "id3" in output
        assert "invalid payload" in output

    def test_markup_in_values_is_literal(self) -> None:
        envelope = {"request_id": "r", "status": "ok", "response": "[bold]x[/bold]"}
        assert "[bold]x[/bold]" in format_response(envelope)

    def test_null_id(self) -> None:
        envelope = {"request_id": None, "status": "error", "error": "not JSON"}
        assert format_response(envelope).startswith("ERROR None")
