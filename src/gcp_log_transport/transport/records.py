"""
gcp_log_transport.transport.records

Record types for the transformation pipeline.

Responsibilities:
- Define the immutable transform configuration.
- Define the structured output record and its wire rendering.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from gcp_log_transport.constants import DEFAULT_IGNORE_KEYS, SOURCE_LOCATION_KEY


@dataclass(frozen=True, slots=True)
class TransformConfig:
    """
    Captured once per transport; safe to share across concurrent transforms.
    """

    ignore_keys: frozenset[str] = frozenset(DEFAULT_IGNORE_KEYS)

    @classmethod
    def from_keys(cls, ignore_keys: Iterable[str] | None) -> TransformConfig:
        if ignore_keys is None:
            return cls()
        return cls(ignore_keys=frozenset(ignore_keys))


DEFAULT_CONFIG = TransformConfig()


@dataclass(frozen=True, slots=True)
class Timestamp:
    seconds: int
    nanos: int

    @classmethod
    def from_millis(cls, millis: int | float) -> Timestamp:
        """
        Split epoch milliseconds into whole seconds (floored) and nanos in [0, 1e9).
        """

        if isinstance(millis, int):
            seconds, rest = divmod(millis, 1000)
            return cls(seconds=seconds, nanos=rest * 1_000_000)
        seconds = math.floor(millis / 1000)
        nanos = round((millis - seconds * 1000) * 1_000_000)
        if nanos >= 1_000_000_000:
            seconds, nanos = seconds + 1, nanos - 1_000_000_000
        return cls(seconds=int(seconds), nanos=int(nanos))

    def to_dict(self) -> dict[str, int]:
        return {"seconds": self.seconds, "nanos": self.nanos}


@dataclass(frozen=True, slots=True)
class HttpRequest:
    request_method: str | None = None
    request_url: str | None = None
    user_agent: str | None = None
    protocol: str | None = None

    def to_dict(self) -> dict[str, str]:
        rendered = {
            "requestMethod": self.request_method,
            "requestUrl": self.request_url,
            "userAgent": self.user_agent,
            "protocol": self.protocol,
        }
        return {k: v for k, v in rendered.items() if v is not None}


@dataclass(frozen=True, slots=True)
class SourceLocation:
    file: str
    line: int
    function: str | None = None

    def to_dict(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"file": self.file, "line": self.line}
        if self.function is not None:
            rendered["function"] = self.function
        return rendered


@dataclass(frozen=True, slots=True)
class StructuredLogRecord:
    """
    Fixed Cloud Logging fields plus passthrough properties in `extra`.
    """

    severity: str
    message: Any = None
    timestamp: Timestamp | None = None
    http_request: HttpRequest | None = None
    source_location: SourceLocation | None = None
    text_payload: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.message is not None:
            out["message"] = self.message
        out.update(self.extra)
        if self.http_request is not None:
            out["httpRequest"] = self.http_request.to_dict()
        if self.source_location is not None:
            out[SOURCE_LOCATION_KEY] = self.source_location.to_dict()
        if self.text_payload is not None:
            out["textPayload"] = self.text_payload
        if self.timestamp is not None:
            out["timestamp"] = self.timestamp.to_dict()
        out["severity"] = self.severity
        return out


# --- Module Notes -----------------------------------------------------------
# Key order of `to_dict` carries no meaning; consumers compare structurally.
