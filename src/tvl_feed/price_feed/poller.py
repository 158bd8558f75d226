"""Background update loop for a price feed.

Calls ``feed.update()`` at a fixed interval with at most one call in flight.
The feed's own throttle still applies, so the interval can be shorter than
``min_time_between_updates`` without over-polling the upstream API.
"""

import asyncio

from tvl_feed.exceptions import FetchError
from tvl_feed.logging import get_logger
from tvl_feed.price_feed.interface import PriceFeed

logger = get_logger(__name__)


class PriceFeedPoller:
    """Drives a PriceFeed's update cycle in a background task.

    Failed updates are logged and the loop keeps going; there is no backoff,
    the next attempt happens after the normal interval.
    """

    def __init__(self, feed: PriceFeed, interval: float = 60.0) -> None:
        self._feed = feed
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self._consecutive_failures = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    async def start(self) -> None:
        """Begin polling in the background."""
        if self._running:
            logger.warning("price_feed_poller_already_running")
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("price_feed_poller_started", interval=self._interval)

    async def stop(self) -> None:
        """Stop polling and wait for the background task to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("price_feed_poller_stopped")

    async def poll_once(self) -> bool:
        """Run one update cycle. Returns True if it completed without error."""
        try:
            await self._feed.update()
        except asyncio.CancelledError:
            raise
        except FetchError as e:
            self._consecutive_failures += 1
            logger.warning(
                "price_feed_update_failed",
                error=str(e),
                consecutive_failures=self._consecutive_failures,
            )
            return False
        except Exception:
            self._consecutive_failures += 1
            logger.warning(
                "price_feed_update_error",
                consecutive_failures=self._consecutive_failures,
                exc_info=True,
            )
            return False

        self._consecutive_failures = 0
        return True

    async def _poll_loop(self) -> None:
        while self._running:
            await self.poll_once()
            if self._running:
                await asyncio.sleep(self._interval)
