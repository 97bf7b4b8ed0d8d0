"""
gcp_log_transport.tracing.outbound

Outbound trace propagation for httpx clients.

Responsibilities:
- Add `traceparent` and `x-cloud-trace-context` to every outgoing request.
- Provide a preconfigured `httpx.AsyncClient` factory.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from gcp_log_transport.tracing.context import get_trace_headers


def _inject(request: httpx.Request, flags: int | None) -> None:
    for name, value in get_trace_headers(flags).items():
        # Explicit headers set by the caller win.
        request.headers.setdefault(name, value)


def trace_headers_hook(flags: int | None = None) -> Callable[[httpx.Request], None]:
    """
    Request event hook for a sync `httpx.Client`.
    """

    def hook(request: httpx.Request) -> None:
        _inject(request, flags)

    return hook


def async_trace_headers_hook(
    flags: int | None = None,
) -> Callable[[httpx.Request], Awaitable[None]]:
    """
    Request event hook for `httpx.AsyncClient`; runs in the calling task's context.
    """

    async def hook(request: httpx.Request) -> None:
        _inject(request, flags)

    return hook


def create_traced_client(*, flags: int | None = None, **kwargs: Any) -> httpx.AsyncClient:
    event_hooks = dict(kwargs.pop("event_hooks", None) or {})
    event_hooks["request"] = [*event_hooks.get("request", []), async_trace_headers_hook(flags)]
    return httpx.AsyncClient(event_hooks=event_hooks, **kwargs)


# --- Module Notes -----------------------------------------------------------
# Outside a trace scope the hooks add nothing; downstream services then start
# their own trace.
