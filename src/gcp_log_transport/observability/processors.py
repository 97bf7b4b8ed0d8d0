"""
gcp_log_transport.observability.processors

structlog processors that shape events into transport input records.

Responsibilities:
- Merge the active trace into each event (the logger mixin).
- Emit numeric `level` and epoch-millisecond `time`.
- Serialize exceptions into `err` and Starlette requests into `req`.
"""

from __future__ import annotations

import sys
import time
import traceback
from collections.abc import Callable
from types import TracebackType
from typing import Any

from starlette.requests import Request

from gcp_log_transport.tracing.context import get_log_trace

EventDict = dict[str, Any]
Processor = Callable[[Any, str, EventDict], EventDict]

# Numeric scale understood by `transport.severity`.
LEVEL_NUMBERS: dict[str, int] = {
    "trace": 10,
    "debug": 20,
    "info": 30,
    "msg": 30,
    "warn": 40,
    "warning": 40,
    "err": 50,
    "error": 50,
    "exception": 50,
    "critical": 60,
    "fatal": 60,
}

ExcInfo = tuple[type[BaseException], BaseException, TracebackType | None]


def trace_mixin(project_id: str | None) -> Processor:
    # Adds logging.googleapis.com/{trace,spanId,trace_sampled} inside a trace scope.
    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        fields = get_log_trace(project_id)
        if fields:
            event_dict.update(fields)
        return event_dict

    return processor


def add_numeric_level(_: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["level"] = LEVEL_NUMBERS.get(method_name, 30)
    return event_dict


def add_epoch_millis(_: Any, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("time", time.time_ns() // 1_000_000)
    return event_dict


def add_service_context(service_name: str) -> Processor:
    # Error Reporting groups entries by serviceContext.service.
    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("serviceContext", {"service": service_name})
        return event_dict

    return processor


def drop_empty_msg(_: Any, __: str, event_dict: EventDict) -> EventDict:
    # An empty event leaves `msg` unset so the transport can derive a message.
    if not event_dict.get("msg"):
        event_dict.pop("msg", None)
    return event_dict


def format_request(_: Any, __: str, event_dict: EventDict) -> EventDict:
    req = event_dict.get("req")
    if isinstance(req, Request):
        url = req.url.path
        if req.url.query:
            url = f"{url}?{req.url.query}"
        event_dict["req"] = {"method": req.method, "url": url, "headers": dict(req.headers)}
    return event_dict


def _exc_info(value: Any) -> ExcInfo | None:
    if isinstance(value, BaseException):
        return type(value), value, value.__traceback__
    if isinstance(value, tuple):
        return value if value[1] is not None else None
    if value:
        info = sys.exc_info()
        return info if info[1] is not None else None  # type: ignore[return-value]
    return None


def error_to_dict(exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None) -> EventDict:
    return {
        "type": exc_type.__name__,
        "message": str(exc),
        "stack": "".join(traceback.format_exception(exc_type, exc, tb)),
    }


def format_err(_: Any, __: str, event_dict: EventDict) -> EventDict:
    """
    `exc_info` / exception-valued `err` -> {"type", "message", "stack"} under `err`.

    Fills `msg` from the exception message when the event has none.
    """

    info = _exc_info(event_dict.pop("exc_info", None))
    err = event_dict.get("err")
    if isinstance(err, BaseException):
        event_dict["err"] = error_to_dict(type(err), err, err.__traceback__)
    elif info is not None and err is None:
        event_dict["err"] = error_to_dict(*info)

    err = event_dict.get("err")
    if not event_dict.get("msg") and isinstance(err, dict) and err.get("message"):
        event_dict["msg"] = err["message"]
    return event_dict


# --- Module Notes -----------------------------------------------------------
# These processors produce the input shape expected by `transport.transform`;
# they run before `JSONRenderer` in `observability.logging.configure_logging`.
