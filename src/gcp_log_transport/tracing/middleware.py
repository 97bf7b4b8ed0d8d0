"""
gcp_log_transport.tracing.middleware

HTTP middleware for request-scoped trace context.

Responsibilities:
- Extract the inbound trace from `traceparent` / `x-cloud-trace-context`.
- Run the rest of request handling inside a trace scope.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from gcp_log_transport.tracing.context import trace_scope
from gcp_log_transport.tracing.extract import extract

CallNext = Callable[[Request], Awaitable[Response]]


async def _dispatch_in_trace(request: Request, call_next: CallNext) -> Response:
    inbound = extract(request.headers)
    # call_next runs the app in a new task, which copies the context set here.
    with trace_scope(inbound.snapshot()):
        request.state.trace = inbound
        return await call_next(request)


class TraceContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request runs inside a trace scope
    - Continues the caller's trace when a trace header is present
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        return await _dispatch_in_trace(request, call_next)


def tracing_hook() -> Callable[[Request, CallNext], Awaitable[Response]]:
    """
    Function-style hook for `app.middleware("http")`.
    """

    async def tracing_middleware(request: Request, call_next: CallNext) -> Response:
        return await _dispatch_in_trace(request, call_next)

    return tracing_middleware


# --- Module Notes -----------------------------------------------------------
# The scope is reset when dispatch returns, so concurrent requests served by the
# same event loop never observe each other's trace ids.
