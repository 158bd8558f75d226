"""Abstract price feed interface.

Defines the contract every price source implements. The poller and the JSON
API depend only on this interface.
"""

from abc import ABC, abstractmethod

from tvl_feed.models import Observation


class PriceFeed(ABC):
    """Abstract base class for polled price sources.

    Prices are fixed-point ints scaled by ``10**get_price_feed_decimals()``.
    Accessors return None until the first successful ``update()``.
    """

    @abstractmethod
    async def update(self) -> None:
        """Fetch and store a new price, unless throttled."""
        ...

    @abstractmethod
    def get_current_price(self) -> int | None:
        """Return the most recent price, or None if never updated."""
        ...

    @abstractmethod
    def get_historical_price(self, time: int) -> int | None:
        """Return the latest price observed strictly before ``time``."""
        ...

    @abstractmethod
    def get_last_update_time(self) -> int | None:
        """Return the Unix time of the last successful update."""
        ...

    @property
    @abstractmethod
    def history(self) -> tuple[Observation, ...]:
        """Retained observations, oldest first."""
        ...

    @abstractmethod
    def get_lookback(self) -> int:
        """Return how many seconds of history are retained."""
        ...

    @abstractmethod
    def get_price_feed_decimals(self) -> int:
        """Return the number of decimals prices are scaled by."""
        ...
