"""
gcp_log_transport.transport.transform

Log line -> Cloud Logging structured record.

Responsibilities:
- Decode textual lines (JSON) and map level/time/msg onto the schema.
- Extract `httpRequest` from `req` and source location from `err` stacks.
- Pass remaining properties through, minus ignored keys and None values.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from numbers import Real
from typing import Any

from gcp_log_transport.constants import PY_FRAME_PATTERN, STACK_PATTERN
from gcp_log_transport.exceptions import RecordParseError
from gcp_log_transport.transport.records import (
    DEFAULT_CONFIG,
    HttpRequest,
    SourceLocation,
    StructuredLogRecord,
    Timestamp,
    TransformConfig,
)
from gcp_log_transport.transport.severity import to_severity


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not allowed")


def parse_line(line: str | bytes | bytearray | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(line, Mapping):
        return line
    try:
        record = json.loads(line, parse_constant=_reject_constant)
    except ValueError as exc:
        raise RecordParseError(f"log line is not valid JSON: {exc}", line=line) from exc
    if not isinstance(record, dict):
        raise RecordParseError("log line is not a JSON object", line=line)
    return record


def _lookup(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    return getattr(value, key, None)


def http_request_from(req: Any) -> HttpRequest:
    headers = _lookup(req, "headers") or {}
    if not isinstance(headers, Mapping):
        headers = {}
    return HttpRequest(
        request_method=_lookup(req, "method"),
        request_url=_lookup(req, "url"),
        user_agent=headers.get("user-agent"),
        protocol=headers.get("x-forwarded-proto"),
    )


def source_location_from(stack: str) -> SourceLocation | None:
    """
    First V8-style "at" frame; failing that, the innermost Python traceback frame.
    """

    match = STACK_PATTERN.search(stack)
    if match is None:
        frames = list(PY_FRAME_PATTERN.finditer(stack))
        match = frames[-1] if frames else None
    if match is None:
        return None
    return SourceLocation(
        file=match.group("file"),
        line=int(match.group("line")),
        function=match.group("function"),
    )


def _stack_text(err: Any) -> str | None:
    if isinstance(err, str):
        return err
    stack = _lookup(err, "stack")
    return stack if isinstance(stack, str) else None


def transform(
    line: str | bytes | bytearray | Mapping[str, Any],
    config: TransformConfig = DEFAULT_CONFIG,
) -> StructuredLogRecord:
    """
    Convert one log line. Raises `RecordParseError` for undecodable text.
    """

    record = parse_line(line)
    ignore = config.ignore_keys

    message = record.get("msg")
    http_request: HttpRequest | None = None
    source_location: SourceLocation | None = None
    text_payload: str | None = None
    extra: dict[str, Any] = {}

    for key, value in record.items():
        if value is None:
            continue
        if key == "req":
            http_request = http_request_from(value)
            if message is None:
                message = f"{http_request.request_method} {http_request.request_url}"
            continue
        if key == "err":
            # Derived fields survive even when `err` itself is ignored.
            text_payload = _stack_text(value)
            if text_payload is not None:
                source_location = source_location_from(text_payload)
        if key in ignore:
            continue
        extra[key] = value

    time = record.get("time")
    timestamp = None
    if isinstance(time, Real) and not isinstance(time, bool) and math.isfinite(time):
        timestamp = Timestamp.from_millis(time)

    return StructuredLogRecord(
        severity=to_severity(record.get("level")),
        message=message,
        timestamp=timestamp,
        http_request=http_request,
        source_location=source_location,
        text_payload=text_payload,
        extra=extra,
    )


# --- Module Notes -----------------------------------------------------------
# `transform` is pure: configuration is passed in, never stored on a shared stage.
