"""
tests.conftest

Shared fixtures.

Responsibilities:
- Provide an in-memory object destination for transports.
- Reset structlog configuration between tests.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
import structlog


class ListDestination:
    """Object destination collecting record dicts in write order."""

    def __init__(self) -> None:
        self.items: list[dict[str, Any]] = []

    def write(self, chunk: dict[str, Any]) -> None:
        self.items.append(chunk)


@pytest.fixture
def destination() -> ListDestination:
    return ListDestination()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
