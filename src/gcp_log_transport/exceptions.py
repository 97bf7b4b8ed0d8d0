"""
gcp_log_transport.exceptions

Error types raised by the transformation pipeline.
"""

from __future__ import annotations


class GcpLogTransportError(Exception):
    """Base class for errors raised by this package."""


class RecordParseError(GcpLogTransportError, ValueError):
    """A textual log line could not be decoded into a JSON object."""

    def __init__(self, message: str, *, line: str | bytes) -> None:
        super().__init__(message)
        self.line = line


class TransportClosedError(GcpLogTransportError):
    """Write attempted on a transport that was closed or failed earlier."""
