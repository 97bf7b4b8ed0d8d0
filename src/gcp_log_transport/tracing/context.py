"""
gcp_log_transport.tracing.context

Implicit trace context carried through asyncio via contextvars.

Responsibilities:
- Hold the active `TraceSnapshot` for the current logical task.
- Open nested scopes ("spans") that shadow the parent only while they run.
- Render outbound trace headers and the logger mixin payload.

Tasks created inside a scope copy the context at creation time, so children
inherit the snapshot while concurrently running siblings never see it.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import Any

from gcp_log_transport.constants import SPAN_ID_KEY, TRACE_KEY, TRACE_SAMPLED_KEY
from gcp_log_transport.tracing.headers import (
    TRACEPARENT_HEADER_KEY,
    X_HEADER_KEY,
    format_cloud_trace_context,
    format_traceparent,
    normalize_flags,
)
from gcp_log_transport.tracing.ids import create_span_id, create_trace_id


@dataclass(frozen=True, slots=True)
class TraceSnapshot:
    """
    Active trace fields for one scope. Never mutated; child spans get a copy.
    """

    trace_id: str
    span_id: str | None = None
    flags: int = 0

    @property
    def sampled(self) -> bool:
        return bool(self.flags & 1)

    def child(self, flags: int | None = None) -> TraceSnapshot:
        # Same trace, fresh span, flags inherited unless overridden.
        return replace(
            self,
            span_id=create_span_id(),
            flags=self.flags if flags is None else normalize_flags(flags),
        )


_current: ContextVar[TraceSnapshot | None] = ContextVar("gcp_log_transport_trace", default=None)


def current_trace() -> TraceSnapshot | None:
    return _current.get()


def get_trace_id() -> str | None:
    snapshot = _current.get()
    return snapshot.trace_id if snapshot else None


def get_span_id() -> str | None:
    snapshot = _current.get()
    return snapshot.span_id if snapshot else None


def get_tracing_flags() -> int | None:
    snapshot = _current.get()
    return snapshot.flags if snapshot else None


@contextmanager
def trace_scope(snapshot: TraceSnapshot) -> Iterator[TraceSnapshot]:
    """
    Activate `snapshot` for the enclosed block, restoring the previous one on exit.
    """

    token = _current.set(snapshot)
    try:
        yield snapshot
    finally:
        _current.reset(token)


async def run(snapshot: TraceSnapshot, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Run `fn` (sync or async) inside a scope for `snapshot` and return its result.

    Exceptions propagate after the scope has been torn down.
    """

    with trace_scope(snapshot):
        result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result


class SpanContext:
    """
    A unit of work about to start.

    Ids left unset are resolved lazily from the active scope, or minted when
    no scope is active. Once resolved they are reused by later calls.
    """

    def __init__(
        self,
        trace_id: str | None = None,
        span_id: str | None = None,
        flags: int | None = None,
    ) -> None:
        self.trace_id = trace_id
        self.span_id = span_id
        self.flags = None if flags is None else normalize_flags(flags)

    def __repr__(self) -> str:
        return f"SpanContext(trace_id={self.trace_id!r}, span_id={self.span_id!r}, flags={self.flags!r})"

    def _resolve_trace_id(self) -> str:
        if not self.trace_id:
            self.trace_id = get_trace_id() or create_trace_id()
        return self.trace_id

    def _resolve_flags(self) -> int:
        if self.flags is not None:
            return self.flags
        return get_tracing_flags() or 0

    def snapshot(self) -> TraceSnapshot:
        if not self.span_id:
            self.span_id = create_span_id()
        return TraceSnapshot(
            trace_id=self._resolve_trace_id(),
            span_id=self.span_id,
            flags=self._resolve_flags(),
        )

    async def run_in_new_span(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        # Each call gets its own span id under the same trace.
        snapshot = TraceSnapshot(
            trace_id=self._resolve_trace_id(),
            span_id=create_span_id(),
            flags=self._resolve_flags(),
        )
        return await run(snapshot, fn, *args, **kwargs)

    async def run_in_current_span(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await run(self.snapshot(), fn, *args, **kwargs)


def enter_child_span(override_flags: int | None = None) -> SpanContext:
    """
    Capture the next unit of work: current trace (or a new one) with a fresh span id.
    """

    parent = _current.get()
    if parent is None:
        flags = 0 if override_flags is None else normalize_flags(override_flags)
        return SpanContext(create_trace_id(), create_span_id(), flags)
    child = parent.child(override_flags)
    return SpanContext(child.trace_id, child.span_id, child.flags)


async def attach_trace_handler(
    handler: Callable[..., Any],
    trace_id: str | None = None,
    span_id: str | None = None,
    flags: int = 0,
) -> Any:
    """
    Seed tracing outside an HTTP request, e.g. for a queue consumer or background job.
    """

    snapshot = TraceSnapshot(
        trace_id=trace_id or create_trace_id(),
        span_id=span_id or create_span_id(),
        flags=normalize_flags(flags),
    )
    return await run(snapshot, handler)


def get_trace_headers(flags: int | None = None) -> dict[str, str]:
    """
    Trace headers to forward downstream; empty outside a trace scope.

    `flags=None` forwards the active scope's flags (1 = sampled).
    """

    snapshot = _current.get()
    if snapshot is None:
        return {}
    flags = snapshot.flags if flags is None else normalize_flags(flags)
    span_id = snapshot.span_id or create_span_id()
    return {
        X_HEADER_KEY: format_cloud_trace_context(snapshot.trace_id, span_id, flags),
        TRACEPARENT_HEADER_KEY: format_traceparent(snapshot.trace_id, span_id, flags),
    }


def get_log_trace(project_id: Any) -> dict[str, Any] | None:
    """
    Logger mixin payload; requires a project id to build the trace resource name.
    """

    if not isinstance(project_id, str):
        return None
    snapshot = _current.get()
    if snapshot is None or not snapshot.trace_id:
        return None

    fields: dict[str, Any] = {TRACE_KEY: f"projects/{project_id.strip()}/traces/{snapshot.trace_id}"}
    if snapshot.span_id:
        fields[SPAN_ID_KEY] = snapshot.span_id
    fields[TRACE_SAMPLED_KEY] = snapshot.sampled
    return fields


# --- Module Notes -----------------------------------------------------------
# `ContextVar.reset` restores the exact parent value even when scopes nest,
# which is what keeps a parent span visible again after a child unwinds.
