"""
gcp_log_transport.tracing.ids

Random trace and span identifiers.
"""

from __future__ import annotations

import secrets


def create_trace_id() -> str:
    # 16 bytes from the OS CSPRNG -> 32 lowercase hex chars.
    return secrets.token_hex(16)


def create_span_id() -> str:
    return secrets.token_hex(8)
