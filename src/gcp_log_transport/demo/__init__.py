"""
gcp_log_transport.demo

Example FastAPI service wiring tracing middleware, structlog and the transport.
"""

# Package marker.
