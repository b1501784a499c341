"""Shared pytest fixtures for the editor dashboard tests.

Fixture summary
---------------
clear_settings_cache - Autouse; resets the ``get_settings`` singleton around each test.
settings             - ``Settings`` with no retries, no courtesy sleep and no backoff.
fake_clock           - Manually advanced monotonic clock for ``TTLCache``.

All tests run without network access; HTTP is mocked with respx.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from editor_dashboard.config.settings import Settings, get_settings


class FakeClock:
    """Callable monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        default_username="Example Editor",
        min_request_interval_seconds=0.0,
        retry_backoff_seconds=0.0,
        max_retries=1,
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
