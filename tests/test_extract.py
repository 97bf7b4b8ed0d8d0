"""
tests.test_extract

Inbound trace extraction tests.

Responsibilities:
- Header precedence (traceparent over legacy) and flag parsing.
- Synthesized traces when no usable header is present.
"""

from __future__ import annotations

import re

from gcp_log_transport.tracing.extract import SYNTHESIZED, extract
from gcp_log_transport.tracing.headers import TRACEPARENT_HEADER_KEY, X_HEADER_KEY

HEX16 = re.compile(r"^[0-9a-f]{16}$")


def test_legacy_header() -> None:
    inbound = extract({"x-cloud-trace-context": "traceid/spanid;op=1"})
    assert inbound.trace_id == "traceid"
    assert inbound.flags == 1
    assert inbound.source_header == X_HEADER_KEY
    assert inbound.parent_span_id == "spanid"
    assert inbound.header_value == "traceid/spanid;op=1"
    # The caller's span is the parent, never reused as the local span.
    assert inbound.span_id != "spanid"
    assert HEX16.match(inbound.span_id)


def test_traceparent_header() -> None:
    inbound = extract({"traceparent": "00-traceid-spanid-01"})
    assert inbound.trace_id == "traceid"
    assert inbound.flags == 1
    assert inbound.source_header == TRACEPARENT_HEADER_KEY
    assert inbound.parent_span_id == "spanid"
    assert HEX16.match(inbound.span_id)


def test_traceparent_wins_over_legacy() -> None:
    inbound = extract(
        {
            "X-Cloud-Trace-Context": "legacytrace/spanid;op=1",
            "TraceParent": "00-parenttrace-spanid-00",
        }
    )
    assert inbound.trace_id == "parenttrace"
    assert inbound.flags == 0
    assert inbound.source_header == TRACEPARENT_HEADER_KEY


def test_no_headers_synthesizes_trace() -> None:
    for headers in (None, {}, {"accept": "*/*"}):
        inbound = extract(headers)
        assert re.match(r"^[0-9a-f]{32}$", inbound.trace_id)
        assert HEX16.match(inbound.span_id)
        assert inbound.flags == 0
        assert inbound.source_header == SYNTHESIZED
        assert inbound.parent_span_id is None


def test_unusable_traceparent_falls_back_to_legacy() -> None:
    inbound = extract({"traceparent": "garbage", "x-cloud-trace-context": "legacytrace/spanid"})
    assert inbound.trace_id == "legacytrace"
    assert inbound.source_header == X_HEADER_KEY


def test_each_extraction_mints_new_span() -> None:
    headers = {"traceparent": "00-traceid-spanid-00"}
    assert extract(headers).span_id != extract(headers).span_id


def test_snapshot() -> None:
    inbound = extract({"traceparent": "00-traceid-spanid-01"})
    snapshot = inbound.snapshot()
    assert (snapshot.trace_id, snapshot.span_id, snapshot.flags) == ("traceid", inbound.span_id, 1)
