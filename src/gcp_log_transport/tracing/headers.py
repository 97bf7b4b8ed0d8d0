"""
gcp_log_transport.tracing.headers

Trace header codec.

Responsibilities:
- Parse `traceparent` ("00-<trace>-<span>-<ff>") and the legacy
  `x-cloud-trace-context` ("<trace>/<span>;op=<n>") headers.
- Format both headers for outbound calls.
- Case-insensitive, first-value-wins header lookup.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from gcp_log_transport.tracing.ids import create_span_id, create_trace_id

# Recommended trace header in format "00-traceid-spanid-01".
TRACEPARENT_HEADER_KEY = "traceparent"

# Legacy header in format "traceid/spanid;op=0".
X_HEADER_KEY = "x-cloud-trace-context"

HeadersLike = Union[Mapping[Any, Any], Iterable[tuple[Any, Any]]]


@dataclass(frozen=True, slots=True)
class ParsedTraceHeader:
    """
    Header fields as sent by the caller.

    `span_id` is the upstream span; it becomes the parent of the local span.
    """

    trace_id: str | None
    span_id: str | None
    flags: int = 0


def normalize_flags(flags: Any) -> int:
    """
    Coerce tracing flags to an int in [0, 255]; anything else becomes 0.

    Decimal strings are accepted ("17" -> 17). Booleans are not numbers here.
    """

    if isinstance(flags, bool):
        return 0
    if isinstance(flags, str):
        try:
            flags = int(flags.strip(), 10)
        except ValueError:
            return 0
    if isinstance(flags, float) and flags.is_integer():
        flags = int(flags)
    if not isinstance(flags, int) or not 0 <= flags <= 255:
        return 0
    return flags


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return value.decode("latin-1")
    return str(value)


def get_header(headers: HeadersLike | None, name: str) -> str | None:
    """
    Case-insensitive header lookup returning the first value.

    Accepts plain mappings (values may be lists for repeated headers),
    Starlette `Headers` and raw ASGI-style `(name, value)` pairs.
    """

    if not headers:
        return None
    wanted = name.lower()

    if isinstance(headers, Mapping):
        getlist = getattr(headers, "getlist", None)
        if callable(getlist):
            # Starlette Headers / multidicts already fold case.
            values = getlist(wanted)
            return _text(values[0]) if values else None
        items: Iterable[tuple[Any, Any]] = headers.items()
    else:
        items = headers

    for key, value in items:
        if _text(key).lower() != wanted:
            continue
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        return _text(value)
    return None


def _parse_int(value: str | None, base: int) -> int:
    if not value:
        return 0
    try:
        return int(value.strip(), base)
    except ValueError:
        return 0


def parse_traceparent(value: str | None) -> ParsedTraceHeader:
    # Missing segments stay None; no format validation beyond splitting.
    parts = (value or "").split("-")
    trace_id = parts[1] if len(parts) > 1 and parts[1] else None
    span_id = parts[2] if len(parts) > 2 and parts[2] else None
    flags = _parse_int(parts[3], 16) if len(parts) > 3 else 0
    return ParsedTraceHeader(trace_id=trace_id, span_id=span_id, flags=normalize_flags(flags))


def parse_cloud_trace_context(value: str | None) -> ParsedTraceHeader:
    trace_id, _, rest = (value or "").partition("/")
    span_id, _, op = rest.partition(";op=")
    return ParsedTraceHeader(
        trace_id=trace_id or None,
        span_id=span_id or None,
        # The legacy `op` field is decimal, unlike the hex flags of traceparent.
        flags=normalize_flags(_parse_int(op, 10)),
    )


def format_traceparent(
    trace_id: str | None = None, span_id: str | None = None, flags: Any = None
) -> str:
    trace_id = trace_id or create_trace_id()
    span_id = span_id or create_span_id()
    return f"00-{trace_id}-{span_id}-{normalize_flags(flags):02x}"


def format_cloud_trace_context(trace_id: str, span_id: str | None, flags: Any = None) -> str:
    # Only the sampled bit is meaningful to the legacy header.
    op = 1 if normalize_flags(flags) & 1 else 0
    return f"{trace_id}/{span_id};op={op}"


# --- Module Notes -----------------------------------------------------------
# Parsers never raise: malformed headers degrade to None ids and flags 0 so the
# caller falls back to a freshly synthesized trace instead of failing a request.
