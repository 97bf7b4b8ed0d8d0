"""
gcp_log_transport.observability

Logging integration package.

Responsibilities:
- structlog processors producing transport input records.
- Logging configuration wiring structlog into a `Transport`.
"""

# Package marker.
