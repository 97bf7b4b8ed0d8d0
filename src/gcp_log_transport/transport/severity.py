"""
gcp_log_transport.transport.severity

Numeric log level -> Cloud Logging severity.
"""

from __future__ import annotations

from numbers import Real
from typing import Any

from gcp_log_transport.constants import (
    SEVERITY_CRITICAL,
    SEVERITY_DEBUG,
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
)

# Lower bounds, highest first (10=trace, 20=debug, 30=info, ... 60=fatal).
_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (60, SEVERITY_CRITICAL),
    (50, SEVERITY_ERROR),
    (40, SEVERITY_WARNING),
    (30, SEVERITY_INFO),
)


def to_severity(level: Any) -> str:
    # NOTICE, ALERT and EMERGENCY are never produced here; callers set them explicitly.
    if isinstance(level, bool) or not isinstance(level, Real):
        return SEVERITY_DEBUG
    for threshold, severity in _THRESHOLDS:
        if level >= threshold:
            return severity
    return SEVERITY_DEBUG
