"""
gcp_log_transport.transport

Log record transformation pipeline.

Responsibilities:
- Map structured log lines onto the Cloud Logging JSON schema.
- Serialize records and hand them to a sink in arrival order.
"""

# Package marker.
