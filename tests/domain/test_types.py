"""Tests for domain enums."""

import pytest

from cmdsrv.domain.types import Command, Operation, Status


def test_command_values() -> None:
    assert [c.value for c in Command] == ["ping", "echo", "time", "calculate", "batch"]


def test_command_lookup_is_case_sensitive() -> None:
    assert Command("ping") is Command.PING
    with pytest.raises(ValueError):
        Command("Ping")


def test_status_values() -> None:
    assert {s.value for s in Status} == {"ok", "error"}


def test_operation_values() -> None:
    assert {o.value for o in Operation} == {"add", "subtract", "multiply", "divide"}


def test_str_enum_compares_to_str() -> None:
    assert Command.BATCH == "batch"
    assert f"{Operation.DIVIDE}" == "divide"
