"""Timing spans for the bridge pipeline, surfaced with ``--verbose``.

``@traced`` opens a root span around a service entry point and
``trace_span`` opens child spans for its stages (listing documents,
collecting aliases, building the table, rewriting bodies). The finished
tree is attached to ``ServiceResult.meta["telemetry"]``.

With telemetry off, both reduce to a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from obridge.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("obridge_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("obridge_active_span", default=None)

_log = structlog.get_logger("obridge.telemetry")


@dataclass
class Span:
    """One timed stage, with nested stages and free-form annotations."""

    name: str
    children: list[Span] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def child(self, name: str) -> Span:
        """Open a nested span under this one."""
        span = Span(name=name)
        self.children.append(span)
        return span

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = self.annotations
        if self.children:
            tree["children"] = [c.to_dict() for c in self.children]
        return tree


def _close(span: Span, token: Token[Span | None]) -> None:
    span.end()
    _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage of the running ``@traced`` call.

    Yields None when telemetry is off or no traced call is running, so
    callers guard annotations with ``if span:``.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = parent.child(name)
    token = _active.set(span)
    try:
        yield span
    finally:
        _close(span, token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:
    """Time a service method and attach its span tree to the result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        token = _active.set(root)
        try:
            result = func(*args, **kwargs)
        except Exception:
            _close(root, token)
            _log.debug("span.complete", span_name=root.name, ok=False)
            raise
        _close(root, token)

        ok = result.ok if isinstance(result, ServiceResult) else True
        _log.debug(
            "span.complete",
            span_name=root.name,
            duration_ms=round(root.duration_ms, 2),
            stages=len(root.children),
            ok=ok,
        )
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Collect spans for the rest of this context (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
