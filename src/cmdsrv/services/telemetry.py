"""Dispatch timing spans, collected only when ``--debug`` is on.

``@traced`` wraps :meth:`Dispatcher.dispatch`. A batch dispatches its
elements from inside its own span, so a request produces a tree: one
root span per top-level command, one child per batch element. Every
finished span is logged as ``span.complete``; the root's tree is handed
back in ``ServiceResult.meta["telemetry"]`` for the dispatcher to log
next to the request it belongs to. It never reaches the wire.

Spans live in context variables, and each connection runs in its own
task, so concurrent requests keep separate trees.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from cmdsrv.services.result import ServiceResult

log = structlog.get_logger(__name__)

_telemetry_enabled: ContextVar[bool] = ContextVar("cmdsrv_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("cmdsrv_span", default=None)


@dataclass
class Span:
    """One timed dispatch and the dispatches it made."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 3)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time each call of *func* as a span under whatever span is active.

    The outermost call attaches the finished tree to the returned
    ServiceResult's ``meta``.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _telemetry_enabled.get():
            return func(*args, **kwargs)

        parent = _current_span.get()
        span = Span(name=func.__qualname__)
        if parent is not None:
            parent.children.append(span)

        token = _current_span.set(span)
        ok = False
        try:
            result = func(*args, **kwargs)
            if isinstance(result, ServiceResult):
                ok = result.ok
                span.annotate("op", result.op)
            else:
                ok = True
        finally:
            span.end()
            _current_span.reset(token)
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 3),
                ok=ok,
                children=len(span.children),
                **span.annotations,
            )

        if parent is None and isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context."""
    _telemetry_enabled.set(True)


def disable_telemetry() -> None:
    _telemetry_enabled.set(False)


def get_current_span() -> Span | None:
    """The span of the dispatch in progress, or None when telemetry is off."""
    if not _telemetry_enabled.get():
        return None
    return _current_span.get()
