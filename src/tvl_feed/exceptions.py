"""Exceptions raised by the price feed and its network layer."""

from typing import Any


class PriceFeedError(Exception):
    """Base exception for all price feed errors."""


class FetchError(PriceFeedError):
    """Raised when a fetch fails or its response lacks the expected data.

    Attributes:
        url: The request URL.
        response: The raw response (parsed JSON or body text), if any was received.
    """

    def __init__(self, message: str, url: str, response: Any = None) -> None:
        super().__init__(message)
        self.url = url
        self.response = response
