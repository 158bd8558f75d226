"""Network layer -- JSON fetching over HTTP via httpx."""

from tvl_feed.network.client import Networker
from tvl_feed.network.http_client import HttpNetworker

__all__ = ["HttpNetworker", "Networker"]
