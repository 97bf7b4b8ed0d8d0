"""
gcp_log_transport.tracing.extract

Inbound trace extraction.

Responsibilities:
- Decide which trace header wins for an inbound request.
- Always mint a fresh local span id; the caller's span becomes the parent.
"""

from __future__ import annotations

from dataclasses import dataclass

from gcp_log_transport.tracing.context import TraceSnapshot
from gcp_log_transport.tracing.headers import (
    TRACEPARENT_HEADER_KEY,
    X_HEADER_KEY,
    HeadersLike,
    get_header,
    parse_cloud_trace_context,
    parse_traceparent,
)
from gcp_log_transport.tracing.ids import create_span_id, create_trace_id

SYNTHESIZED = "synthesized"


@dataclass(frozen=True, slots=True)
class InboundTrace:
    trace_id: str
    span_id: str
    flags: int
    source_header: str
    parent_span_id: str | None = None
    header_value: str | None = None

    def snapshot(self) -> TraceSnapshot:
        return TraceSnapshot(trace_id=self.trace_id, span_id=self.span_id, flags=self.flags)


def extract(headers: HeadersLike | None) -> InboundTrace:
    """
    Inbound trace for a request: `traceparent` first, then the legacy header,
    otherwise a brand-new trace.
    """

    span_id = create_span_id()

    for key, parse in (
        (TRACEPARENT_HEADER_KEY, parse_traceparent),
        (X_HEADER_KEY, parse_cloud_trace_context),
    ):
        value = get_header(headers, key)
        if not value:
            continue
        parsed = parse(value)
        if not parsed.trace_id:
            # Header present but unusable, e.g. "00" or "/span".
            continue
        return InboundTrace(
            trace_id=parsed.trace_id,
            span_id=span_id,
            flags=parsed.flags,
            source_header=key,
            parent_span_id=parsed.span_id,
            header_value=value,
        )

    return InboundTrace(trace_id=create_trace_id(), span_id=span_id, flags=0, source_header=SYNTHESIZED)
