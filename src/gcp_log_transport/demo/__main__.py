"""
gcp_log_transport.demo.__main__

Serve the demo app: `python -m gcp_log_transport.demo`.

Point `GCP_LOG_DOWNSTREAM_URL` at a second instance to watch one trace id
cross both services' Cloud Logging records.
"""

from __future__ import annotations

import uvicorn

from gcp_log_transport.demo.app import create_app
from gcp_log_transport.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # Records go through the transport; uvicorn's own handlers stay off.
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Request records come from the app's `/log/*` routes, not from uvicorn's
# access logger.
