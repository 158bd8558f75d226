"""Shared test fixtures for the TVL price feed."""

from unittest.mock import AsyncMock

import pytest

from tvl_feed.config import AppSettings, FeedSettings, PollerSettings
from tvl_feed.price_feed.defipulse import DefiPulseTvlPriceFeed

TEST_API_KEY = "test-api-key"


class FakeClock:
    """Settable clock returning integer Unix seconds."""

    def __init__(self, now: int = 1000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1000)


@pytest.fixture
def networker() -> AsyncMock:
    """Mock Networker returning a 5000.0 TVL response."""
    mock = AsyncMock()
    mock.get_json = AsyncMock(
        return_value={"data": {"result": {"All": {"total": 5_000_000_000_000}}}}
    )
    return mock


@pytest.fixture
def feed(networker: AsyncMock, clock: FakeClock) -> DefiPulseTvlPriceFeed:
    """Feed with lookback=500, min interval=60, 18 decimals."""
    return DefiPulseTvlPriceFeed(
        api_key=TEST_API_KEY,
        lookback=500,
        networker=networker,
        min_time_between_updates=60,
        get_time=clock,
    )


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (dummy API key, API disabled)."""
    return AppSettings(
        log_level="DEBUG",
        feed=FeedSettings(
            api_key=TEST_API_KEY,  # type: ignore[arg-type]
            lookback=500,
            min_time_between_updates=60,
        ),
        poller=PollerSettings(interval=0.01),
    )
