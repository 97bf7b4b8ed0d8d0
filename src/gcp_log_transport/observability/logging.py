"""
gcp_log_transport.observability.logging

Structured logging configuration.

Responsibilities:
- Configure `structlog` to render transport input records (numeric level,
  epoch-ms time, msg, err, req) and hand each line to a `Transport`.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from gcp_log_transport.observability.processors import (
    add_epoch_millis,
    add_numeric_level,
    add_service_context,
    drop_empty_msg,
    format_err,
    format_request,
    trace_mixin,
)
from gcp_log_transport.transport.pipeline import Transport, compose


class TransportLogger:
    """
    structlog output logger feeding rendered JSON lines into a transport.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def __repr__(self) -> str:
        return f"<TransportLogger(transport={self._transport!r})>"

    def msg(self, message: str) -> None:
        self._transport.write(message)

    log = debug = info = warn = warning = msg
    err = error = critical = exception = fatal = msg


class TransportLoggerFactory:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def __call__(self, *args: Any) -> TransportLogger:
        return TransportLogger(self._transport)


def configure_logging(
    *,
    project_id: str | None = None,
    level: str = "INFO",
    service_name: str | None = None,
    transport: Transport | None = None,
    cache_logger_on_first_use: bool = True,
    **options: Any,
) -> Transport:
    """
    Cloud Logging JSON on stdout (or the given destination) with trace correlation.

    Extra keyword options go to `compose` when no transport is passed in.
    """

    transport = transport or compose(**options)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        trace_mixin(project_id),
        add_numeric_level,
        add_epoch_millis,
    ]
    if service_name:
        processors.append(add_service_context(service_name))
    # structlog processors run on each log event; keep this list focused and stable.
    processors += [
        format_request,
        structlog.processors.EventRenamer("msg"),
        drop_empty_msg,
        format_err,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=TransportLoggerFactory(transport),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        cache_logger_on_first_use=cache_logger_on_first_use,
    )
    return transport


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped trace fields come from `tracing.context`; other request metadata
# can still be bound through structlog contextvars.
