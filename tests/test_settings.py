"""
tests.test_settings

Settings tests.

Responsibilities:
- Env-driven values and transport option rendering.
"""

from __future__ import annotations

import pytest

from gcp_log_transport.constants import DEFAULT_IGNORE_KEYS
from gcp_log_transport.settings import Settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.project_id is None
    assert settings.destination == 1
    assert settings.transport_options() == {
        "destination": 1,
        "append": True,
        "sync": False,
        "mkdir": False,
        "ignore_keys": list(DEFAULT_IGNORE_KEYS),
    }


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GCP_LOG_PROJECT_ID", "my-project")
    monkeypatch.setenv("GCP_LOG_DESTINATION", "2")
    monkeypatch.setenv("GCP_LOG_IGNORE_KEYS", '["pid", "hostname"]')

    settings = Settings()
    assert settings.project_id == "my-project"
    assert settings.destination == 2
    assert settings.ignore_keys == ["pid", "hostname"]


def test_path_destination() -> None:
    assert Settings(destination="./logs/dev.log").destination == "./logs/dev.log"
