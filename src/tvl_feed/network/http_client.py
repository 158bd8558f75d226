"""httpx-backed Networker implementation.

Owns the request timeout. Performs exactly one request per call: retry and
backoff are left to whoever schedules the calls.
"""

from __future__ import annotations

from typing import Any

import httpx

from tvl_feed.exceptions import FetchError
from tvl_feed.logging import get_logger
from tvl_feed.network.client import Networker

logger = get_logger(__name__)

_USER_AGENT = "tvl-feed/0.1"


class HttpNetworker(Networker):
    """Async JSON-over-HTTP client.

    Use via ``async with HttpNetworker(...) as networker:`` or call
    ``close()`` explicitly on shutdown.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def __aenter__(self) -> HttpNetworker:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get_json(self, url: str) -> Any:
        """GET ``url`` and decode its JSON body.

        Raises:
            FetchError: On transport errors, non-2xx status, or an undecodable body.
        """
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning("http_request_failed", error=type(e).__name__)
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        if not response.is_success:
            logger.warning("http_bad_status", status_code=response.status_code)
            raise FetchError(
                f"HTTP {response.status_code} from {url}: {response.text}",
                url=url,
                response=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                f"Invalid JSON from {url}: {response.text}",
                url=url,
                response=response.text,
            ) from e
