"""FastAPI application factory for the price feed JSON API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from tvl_feed.api import routes
from tvl_feed.price_feed.interface import PriceFeed


def create_app(feed: PriceFeed, lifespan: Any = None) -> FastAPI:
    """Create the API application serving lookups from ``feed``.

    Args:
        feed: The price feed whose state the routes read.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to run the poller alongside the server.
    """
    app = FastAPI(
        title="DeFi Pulse TVL Price Feed",
        lifespan=lifespan,
    )
    app.state.price_feed = feed
    app.include_router(routes.router, prefix="/api")
    return app
