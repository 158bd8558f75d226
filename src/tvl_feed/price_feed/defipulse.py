"""DeFi Pulse total-value-locked (TVL_ALL) price feed.

Polls the DeFi Pulse Data API MarketData endpoint, reads the aggregate TVL
across all tracked protocols, and stores it as a fixed-point int with a
lookback-bounded history for historical queries.

Response shape used (one path for both the presence check and the read):

    {"data": {"result": {"All": {"total": <number>}}}}

``total`` is in raw units. It is divided by 10**9 and rounded to 6 places
before fixed-point conversion.
"""

import asyncio
import json
import time
from collections.abc import Callable
from decimal import Decimal
from typing import Any

from tvl_feed.exceptions import FetchError
from tvl_feed.fixed_point import MAX_UINT256, parse_fixed, shift_and_round
from tvl_feed.logging import get_logger
from tvl_feed.models import Observation
from tvl_feed.network.client import Networker
from tvl_feed.price_feed.interface import PriceFeed

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://data-api.defipulse.com"
MARKET_DATA_PATH = "/api/v1/defipulse/api/MarketData"

TOTAL_SHIFT = 9  # raw total is reported in units of 10**-9
TOTAL_PLACES = 6


def _wall_clock() -> int:
    return int(time.time())


def _extract_total(response: Any) -> Any:
    """Return ``data.result.All.total`` from the response, or None if absent."""
    try:
        return response["data"]["result"]["All"]["total"]
    except (KeyError, TypeError, IndexError):
        return None


class DefiPulseTvlPriceFeed(PriceFeed):
    """Price feed for DeFi Pulse aggregate TVL.

    update() is throttled: calls made less than ``min_time_between_updates``
    seconds after the last successful update are no-ops. Overlapping update()
    calls are serialized by an internal lock.

    Args:
        api_key: DeFi Pulse Data API key. Keys are rate-limited upstream.
        lookback: Seconds of history available to get_historical_price().
        networker: Used to send the API request. Owns the request timeout.
        min_time_between_updates: Minimum seconds between successful updates.
        decimals: Fixed-point precision of stored prices.
        get_time: Returns the current Unix time in seconds.
        base_url: API host, without trailing slash.
    """

    def __init__(
        self,
        api_key: str,
        lookback: int,
        networker: Networker,
        min_time_between_updates: int,
        decimals: int = 18,
        get_time: Callable[[], int] = _wall_clock,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        if lookback <= 0:
            raise ValueError(f"lookback must be positive, got {lookback}")
        if min_time_between_updates < 0:
            raise ValueError(
                f"min_time_between_updates must be non-negative, got {min_time_between_updates}"
            )
        if decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {decimals}")

        self._api_key = api_key
        self._lookback = lookback
        self._networker = networker
        self._min_time_between_updates = min_time_between_updates
        self._decimals = decimals
        self._get_time = get_time
        self._base_url = base_url.rstrip("/")

        self._current_price: int | None = None
        self._last_update_time: int | None = None
        self._history: list[Observation] = []
        self._lock = asyncio.Lock()

    @property
    def url(self) -> str:
        return f"{self._base_url}{MARKET_DATA_PATH}?api-key={self._api_key}"

    @property
    def history(self) -> tuple[Observation, ...]:
        """Retained observations in insertion order."""
        return tuple(self._history)

    def get_current_price(self) -> int | None:
        return self._current_price

    def get_last_update_time(self) -> int | None:
        return self._last_update_time

    def get_lookback(self) -> int:
        return self._lookback

    def get_price_feed_decimals(self) -> int:
        return self._decimals

    def get_historical_price(self, time: int) -> int | None:
        """Return the value of the latest observation strictly before ``time``.

        Returns None if the feed has never updated, or if no retained
        observation is older than ``time``.
        """
        if self._last_update_time is None:
            return None

        closest: Observation | None = None
        for observation in self._history:
            if observation.timestamp < time and (
                closest is None or observation.timestamp > closest.timestamp
            ):
                closest = observation

        return closest.value if closest is not None else None

    async def update(self) -> None:
        """Fetch the current TVL and record it, unless throttled.

        Raises:
            FetchError: If the request fails or the response lacks the total.
        """
        async with self._lock:
            current_time = self._get_time()

            if (
                self._last_update_time is not None
                and self._last_update_time + self._min_time_between_updates > current_time
            ):
                logger.debug(
                    "price_feed_update_skipped",
                    current_time=current_time,
                    last_update_time=self._last_update_time,
                    time_remaining=self._last_update_time
                    + self._min_time_between_updates
                    - current_time,
                )
                return

            logger.debug(
                "price_feed_updating",
                current_time=current_time,
                last_update_time=self._last_update_time,
            )

            url = self.url
            response = await self._networker.get_json(url)
            new_price = self._parse_price(url, response)

            self._current_price = new_price
            self._last_update_time = current_time
            self._history.append(Observation(timestamp=current_time, value=new_price))
            self._remove_values_older_than_lookback(current_time)

            logger.debug(
                "price_feed_updated",
                price=str(new_price),
                timestamp=current_time,
                history_size=len(self._history),
            )

    def _parse_price(self, url: str, response: Any) -> int:
        total = _extract_total(response)
        if total is None or isinstance(total, bool):
            raise FetchError(
                f"Could not parse price result from url {url}: "
                f"{json.dumps(response, default=str)}",
                url=url,
                response=response,
            )

        try:
            scaled: Decimal = shift_and_round(total, TOTAL_SHIFT, TOTAL_PLACES)
            price = parse_fixed(scaled, self._decimals)
            if not 0 <= price <= MAX_UINT256:
                raise ValueError(f"Price {price} does not fit in uint256")
            return price
        except ValueError as e:
            raise FetchError(
                f"Could not convert price result from url {url}: "
                f"{json.dumps(response, default=str)}",
                url=url,
                response=response,
            ) from e

    def _remove_values_older_than_lookback(self, current_time: int) -> None:
        horizon = current_time - self._lookback
        self._history = [obs for obs in self._history if obs.timestamp > horizon]
