"""
gcp_log_transport

Structured Google Cloud Logging records and trace-context propagation.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal; import from `tracing`, `transport` and `observability` directly.
