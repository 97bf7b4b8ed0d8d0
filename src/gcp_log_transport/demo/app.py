"""
gcp_log_transport.demo.app

FastAPI app factory for the demo service.

Responsibilities:
- Register the trace-context middleware.
- Configure structlog to write Cloud Logging records through a transport.
- Forward trace headers on downstream httpx calls.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from gcp_log_transport.observability.logging import configure_logging, get_logger
from gcp_log_transport.settings import Settings
from gcp_log_transport.tracing.context import get_trace_headers
from gcp_log_transport.tracing.middleware import TraceContextMiddleware
from gcp_log_transport.transport.pipeline import Transport


def create_app(
    *,
    settings: Settings,
    transport: Transport | None = None,
    downstream: httpx.AsyncClient | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    transport = configure_logging(
        project_id=settings.project_id,
        level=settings.log_level,
        service_name=settings.service_name,
        transport=transport,
        **settings.transport_options(),
    )
    log = get_logger(__name__)
    owns_client = downstream is None
    client = downstream or httpx.AsyncClient(timeout=10.0)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        try:
            yield
        finally:
            log.info("shutdown")
            if owns_client:
                await client.aclose()
            transport.flush()

    app = FastAPI(title="gcp-log-transport demo", version="0.1.0", lifespan=lifespan)
    app.add_middleware(TraceContextMiddleware)
    app.state.transport = transport

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/downstream")
    async def call_downstream(flags: int | None = None) -> dict[str, int]:
        log.debug("calling downstream", url=settings.downstream_url)
        r = await client.get(settings.downstream_url, headers=get_trace_headers(flags))
        return {"status": r.status_code}

    @app.api_route("/log/request", methods=["GET", "POST"])
    async def log_request(request: Request) -> dict[str, str]:
        # No event text: the record message is derived from the request.
        log.info("", req=request)
        return {}

    @app.get("/log/error")
    async def log_error(message: str = "expected") -> dict[str, str]:
        try:
            raise RuntimeError(message)
        except RuntimeError as err:
            log.error(str(err), err=err)
        return {}

    return app


# --- Module Notes -----------------------------------------------------------
# Mirrors how a real service would adopt the library: middleware in, headers out,
# and every log line correlated with the request's trace.
