"""Abstract network client interface.

The price feed depends only on this contract, so tests and alternative
transports can be swapped in without touching feed logic.
"""

from abc import ABC, abstractmethod
from typing import Any


class Networker(ABC):
    """Fetches JSON documents over the network."""

    @abstractmethod
    async def get_json(self, url: str) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises:
            FetchError: If the request fails or the body is not valid JSON.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release any underlying connections."""
        ...
