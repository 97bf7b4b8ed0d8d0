"""
gcp_log_transport.tracing

Trace-context propagation package.

Responsibilities:
- Generate trace/span identifiers.
- Parse and format `traceparent` / `x-cloud-trace-context` headers.
- Carry the active trace snapshot across asyncio tasks via contextvars.
- Integrate with Starlette/FastAPI (inbound) and httpx (outbound).
"""

# Package marker.
