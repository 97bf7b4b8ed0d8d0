"""
tests.test_headers

Trace header codec tests.

Responsibilities:
- Flag normalization and traceparent formatting.
- Parsing of traceparent and the legacy x-cloud-trace-context header.
- Case-insensitive, first-value-wins header lookup.
"""

from __future__ import annotations

import re

import pytest
from starlette.datastructures import Headers

from gcp_log_transport.tracing.headers import (
    ParsedTraceHeader,
    format_cloud_trace_context,
    format_traceparent,
    get_header,
    normalize_flags,
    parse_cloud_trace_context,
    parse_traceparent,
)


@pytest.mark.parametrize("flags", [0, 1, 16, 17, 128, 255])
def test_normalize_flags_keeps_byte_values(flags: int) -> None:
    assert normalize_flags(flags) == flags


@pytest.mark.parametrize("flags", [256, -1, 1000, None, "tracingflags", True, 1.5, object()])
def test_normalize_flags_out_of_range_or_non_numeric_is_zero(flags: object) -> None:
    assert normalize_flags(flags) == 0


def test_normalize_flags_accepts_decimal_strings() -> None:
    assert normalize_flags("17") == 17
    assert normalize_flags(1.0) == 1


def test_format_traceparent() -> None:
    assert re.match(r"^00-traceid-[0-9a-f]{16}-00$", format_traceparent("traceid"))
    assert format_traceparent("traceid", "spanid") == "00-traceid-spanid-00"
    assert format_traceparent("traceid", "spanid", "tracingflags") == "00-traceid-spanid-00"
    assert format_traceparent("traceid", "spanid", 1) == "00-traceid-spanid-01"
    assert format_traceparent("traceid", "spanid", 17) == "00-traceid-spanid-11"
    assert format_traceparent("traceid", "spanid", "17") == "00-traceid-spanid-11"
    assert format_traceparent("traceid", "spanid", 256) == "00-traceid-spanid-00"
    assert re.match(r"^00-traceid-\w+-00$", format_traceparent("traceid", None, 0))
    assert re.match(r"^00-[0-9a-f]{32}-spanid-00$", format_traceparent(None, "spanid", 0))


@pytest.mark.parametrize("flags", [0, 1, 17, 255, 256, -3, "x", None])
def test_traceparent_round_trip(flags: object) -> None:
    header = format_traceparent("4bf92f3577b34da6a3ce929d0e0e4736", "00f067aa0ba902b7", flags)
    assert parse_traceparent(header) == ParsedTraceHeader(
        trace_id="4bf92f3577b34da6a3ce929d0e0e4736",
        span_id="00f067aa0ba902b7",
        flags=normalize_flags(flags),
    )


def test_parse_traceparent_flags_are_hex() -> None:
    assert parse_traceparent("00-traceid-spanid-11").flags == 17
    assert parse_traceparent("00-traceid-spanid-ff").flags == 255


def test_parse_traceparent_malformed_never_raises() -> None:
    assert parse_traceparent("00") == ParsedTraceHeader(trace_id=None, span_id=None, flags=0)
    assert parse_traceparent("") == ParsedTraceHeader(trace_id=None, span_id=None, flags=0)
    assert parse_traceparent(None) == ParsedTraceHeader(trace_id=None, span_id=None, flags=0)
    assert parse_traceparent("00-traceid-spanid-zz").flags == 0
    assert parse_traceparent("00-traceid-spanid-fff").flags == 0
    assert parse_traceparent("00-traceid").trace_id == "traceid"


def test_parse_cloud_trace_context() -> None:
    assert parse_cloud_trace_context("traceid/spanid;op=1") == ParsedTraceHeader("traceid", "spanid", 1)
    assert parse_cloud_trace_context("traceid/spanid;op=0") == ParsedTraceHeader("traceid", "spanid", 0)
    assert parse_cloud_trace_context("traceid/spanid") == ParsedTraceHeader("traceid", "spanid", 0)


def test_parse_cloud_trace_context_op_is_decimal() -> None:
    # "11" would be 17 as hex; the legacy header uses decimal.
    assert parse_cloud_trace_context("traceid/spanid;op=11").flags == 11


def test_parse_cloud_trace_context_malformed_flags_are_zero() -> None:
    assert parse_cloud_trace_context("traceid/spanid;op=malformed").flags == 0
    assert parse_cloud_trace_context("traceid/spanid;pop=malformed").flags == 0
    assert parse_cloud_trace_context("traceid/spanid;op=256").flags == 0
    assert parse_cloud_trace_context("traceid").trace_id == "traceid"


def test_format_cloud_trace_context_uses_sampled_bit() -> None:
    assert format_cloud_trace_context("traceid", "spanid", 1) == "traceid/spanid;op=1"
    assert format_cloud_trace_context("traceid", "spanid", 17) == "traceid/spanid;op=1"
    assert format_cloud_trace_context("traceid", "spanid", 2) == "traceid/spanid;op=0"
    assert format_cloud_trace_context("traceid", "spanid") == "traceid/spanid;op=0"


def test_get_header_is_case_insensitive() -> None:
    assert get_header({"TraceParent": "00-a-b-01"}, "traceparent") == "00-a-b-01"
    assert get_header({"traceparent": "00-a-b-01"}, "TRACEPARENT") == "00-a-b-01"


def test_get_header_first_value_wins() -> None:
    assert get_header({"traceparent": ["first", "second"]}, "traceparent") == "first"
    pairs = [(b"traceparent", b"first"), (b"TraceParent", b"second")]
    assert get_header(pairs, "traceparent") == "first"
    raw = Headers(raw=[(b"traceparent", b"first"), (b"traceparent", b"second")])
    assert get_header(raw, "TraceParent") == "first"


def test_get_header_missing() -> None:
    assert get_header(None, "traceparent") is None
    assert get_header({}, "traceparent") is None
    assert get_header({"x-other": "1"}, "traceparent") is None
    assert get_header({"traceparent": []}, "traceparent") is None


# --- Module Notes -----------------------------------------------------------
# Header parsing is exercised end-to-end through the middleware in test_middleware.
