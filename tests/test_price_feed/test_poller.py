"""Tests for PriceFeedPoller.

Uses a mocked PriceFeed; no network or real sleeping beyond a few ms.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from tvl_feed.exceptions import FetchError
from tvl_feed.price_feed.poller import PriceFeedPoller


@pytest.fixture
def mock_feed() -> AsyncMock:
    feed = AsyncMock()
    feed.update = AsyncMock(return_value=None)
    return feed


@pytest.fixture
def poller(mock_feed: AsyncMock) -> PriceFeedPoller:
    return PriceFeedPoller(mock_feed, interval=0.01)


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_success_returns_true(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        assert await poller.poll_once() is True
        mock_feed.update.assert_awaited_once()
        assert poller.consecutive_failures == 0

    @pytest.mark.asyncio
    async def test_fetch_error_logged_not_raised(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        mock_feed.update.side_effect = FetchError("bad response", url="http://x")

        assert await poller.poll_once() is False
        assert await poller.poll_once() is False
        assert poller.consecutive_failures == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_logged_not_raised(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        mock_feed.update.side_effect = RuntimeError("boom")
        assert await poller.poll_once() is False
        assert poller.consecutive_failures == 1

    @pytest.mark.asyncio
    async def test_success_resets_failure_count(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        mock_feed.update.side_effect = [FetchError("x", url="http://x"), None]
        await poller.poll_once()
        await poller.poll_once()
        assert poller.consecutive_failures == 0

    @pytest.mark.asyncio
    async def test_cancellation_propagates(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        mock_feed.update.side_effect = asyncio.CancelledError()
        with pytest.raises(asyncio.CancelledError):
            await poller.poll_once()


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_polls_repeatedly_and_stop(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        await poller.start()
        assert poller.running is True
        await asyncio.sleep(0.05)
        await poller.stop()

        assert poller.running is False
        assert mock_feed.update.await_count >= 2

    @pytest.mark.asyncio
    async def test_loop_survives_failures(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        mock_feed.update.side_effect = FetchError("down", url="http://x")
        await poller.start()
        await asyncio.sleep(0.05)
        await poller.stop()

        assert mock_feed.update.await_count >= 2

    @pytest.mark.asyncio
    async def test_double_start_is_noop(
        self, poller: PriceFeedPoller, mock_feed: AsyncMock
    ) -> None:
        await poller.start()
        first_task = poller._task
        await poller.start()
        assert poller._task is first_task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, poller: PriceFeedPoller) -> None:
        await poller.stop()
        assert poller.running is False
