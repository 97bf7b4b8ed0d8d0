"""
gcp_log_transport.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the transport, the logger mixin and the demo service.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gcp_log_transport.constants import DEFAULT_IGNORE_KEYS


class Settings(BaseSettings):
    """
    - Env-driven configuration (GCP_LOG_* variables)
    - Defaults write NDJSON to stdout without trace correlation
    """

    model_config = SettingsConfigDict(env_prefix="GCP_LOG_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "gcp-log-transport"
    log_level: str = "INFO"

    # Trace correlation: without a project id the mixin adds nothing.
    project_id: str | None = None

    # Transport destination: fd number or file path.
    destination: int | str = 1
    append: bool = True
    sync: bool = False
    mkdir: bool = False
    ignore_keys: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_KEYS))

    # Demo service
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    downstream_url: str = "https://example.local"

    @field_validator("destination", mode="before")
    @classmethod
    def _fd_from_digits(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    def transport_options(self) -> dict[str, Any]:
        return {
            "destination": self.destination,
            "append": self.append,
            "sync": self.sync,
            "mkdir": self.mkdir,
            "ignore_keys": list(self.ignore_keys),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The library functions never read settings implicitly; callers pass values in.
