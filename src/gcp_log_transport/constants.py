"""
gcp_log_transport.constants

Cloud Logging severities, special JSON keys and shared patterns.
"""

from __future__ import annotations

import re

# Severity names accepted by Cloud Logging's LogSeverity enum.
SEVERITY_DEBUG = "DEBUG"  # Debug or trace information.
SEVERITY_INFO = "INFO"  # Routine information, such as ongoing status or performance.
SEVERITY_NOTICE = "NOTICE"  # Normal but significant events (start up, shut down, config change).
SEVERITY_WARNING = "WARNING"  # Warning events might cause problems.
SEVERITY_ERROR = "ERROR"  # Error events are likely to cause problems.
SEVERITY_CRITICAL = "CRITICAL"  # Critical events cause more severe problems or outages.
SEVERITY_ALERT = "ALERT"  # A person must take an action immediately.
SEVERITY_EMERGENCY = "EMERGENCY"  # One or more systems are unusable.

# Special payload fields lifted into the LogEntry by the logging agent.
SOURCE_LOCATION_KEY = "logging.googleapis.com/sourceLocation"
SPAN_ID_KEY = "logging.googleapis.com/spanId"
TRACE_KEY = "logging.googleapis.com/trace"
TRACE_SAMPLED_KEY = "logging.googleapis.com/trace_sampled"

# Bookkeeping keys of the input record that never reach the output verbatim.
DEFAULT_IGNORE_KEYS: tuple[str, ...] = ("hostname", "pid", "level", "time", "msg")

# V8-style frame: "    at fn [as alias] (file:line:col)" or "    at file:line:col".
STACK_PATTERN = re.compile(
    r"^\s*at ((?P<function>(?!file:)[\w.<>]+) )?(?:\[.+?\] )?\(?"
    r"(?P<file>.+):(?P<line>\d+):(?P<col>\d+)\)?$",
    re.MULTILINE,
)

# Python traceback frame: '  File "/app/x.py", line 10, in handler'.
PY_FRAME_PATTERN = re.compile(
    r'^\s*File "(?P<file>[^"]+)", line (?P<line>\d+)(?:, in (?P<function>\S+))?\s*$',
    re.MULTILINE,
)
