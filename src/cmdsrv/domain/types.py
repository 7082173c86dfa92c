"""Command registry names and wire enums.

The set of ``Command`` members is the static dispatch registry: adding a
command means adding a member here and a handler in the dispatcher.
"""

from __future__ import annotations

from enum import StrEnum


class Command(StrEnum):
    """Commands the dispatcher knows about (matched case-sensitively)."""

    PING = "ping"
    ECHO = "echo"
    TIME = "time"
    CALCULATE = "calculate"
    BATCH = "batch"


class Status(StrEnum):
    """Response envelope status."""

    OK = "ok"
    ERROR = "error"


class Operation(StrEnum):
    """Arithmetic operations accepted by ``calculate``."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
