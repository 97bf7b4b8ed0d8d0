"""
tests.test_smoke

Minimal smoke tests to validate the demo service can boot and serve.

Responsibilities:
- Ensure the FastAPI app starts and the health endpoint works in test mode.
"""

from __future__ import annotations

import httpx
import pytest

from gcp_log_transport.demo.app import create_app
from gcp_log_transport.settings import Settings
from gcp_log_transport.transport.pipeline import compose
from tests.conftest import ListDestination


@pytest.mark.asyncio
async def test_health_endpoint() -> None:
    logs = ListDestination()
    app = create_app(settings=Settings(env="test"), transport=compose(destination=logs))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    # No log call happens on the health path.
    assert logs.items == []


# --- Module Notes -----------------------------------------------------------
# Lifespan events are not driven by ASGITransport; startup logging is not asserted here.
