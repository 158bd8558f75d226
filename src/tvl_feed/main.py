"""Entry point for the DeFi Pulse TVL price feed service.

Wires all components together and runs the update poller, optionally
alongside the JSON API. With the API enabled (default) the poller and the
server share one asyncio event loop via uvicorn's programmatic API and
FastAPI's lifespan context manager.

Component wiring order (in build_components):
1. HttpNetworker (HTTP transport with request timeout)
2. DefiPulseTvlPriceFeed (fetch, convert, cache)
3. PriceFeedPoller (single-flight update loop)
"""

import asyncio
import signal
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from tvl_feed.config import AppSettings
from tvl_feed.logging import get_logger, setup_logging
from tvl_feed.network.http_client import HttpNetworker
from tvl_feed.price_feed.defipulse import DefiPulseTvlPriceFeed
from tvl_feed.price_feed.poller import PriceFeedPoller


def build_components(settings: AppSettings) -> dict[str, Any]:
    """Build networker, feed, and poller from settings.

    Raises:
        ValueError: If DEFIPULSE_API_KEY is not configured.
    """
    api_key = settings.feed.api_key.get_secret_value()
    if not api_key:
        raise ValueError("api_key is required (set DEFIPULSE_API_KEY)")

    networker = HttpNetworker(timeout=settings.feed.request_timeout)

    feed = DefiPulseTvlPriceFeed(
        api_key=api_key,
        lookback=settings.feed.lookback,
        networker=networker,
        min_time_between_updates=settings.feed.min_time_between_updates,
        decimals=settings.feed.decimals,
        base_url=settings.feed.base_url,
    )

    poller = PriceFeedPoller(feed, interval=settings.poller.interval)

    return {
        "networker": networker,
        "price_feed": feed,
        "poller": poller,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the poller with the server; stop it and close the networker on shutdown."""
    logger = get_logger("tvl_feed.main")
    components = app.state.components

    await components["poller"].start()
    logger.info("lifespan_started")

    yield

    await components["poller"].stop()
    await components["networker"].close()
    logger.info("tvl_feed_stopped")


async def _run_headless(components: dict[str, Any]) -> None:
    """Poll until SIGINT/SIGTERM, without a web server."""
    logger = get_logger("tvl_feed.main")
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)

    try:
        await components["poller"].start()
        await stop_event.wait()
    finally:
        await components["poller"].stop()
        await components["networker"].close()
        logger.info("tvl_feed_stopped")


async def run() -> None:
    """Run the price feed service."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("tvl_feed.main")

    components = build_components(settings)

    if settings.api.enabled:
        from tvl_feed.api.app import create_app

        app = create_app(components["price_feed"], lifespan=lifespan)
        app.state.components = components

        logger.info(
            "starting_with_api",
            host=settings.api.host,
            port=settings.api.port,
            poll_interval=settings.poller.interval,
        )

        config = uvicorn.Config(
            app,
            host=settings.api.host,
            port=settings.api.port,
            log_level="warning",
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        logger.info(
            "starting_without_api",
            poll_interval=settings.poller.interval,
            lookback=settings.feed.lookback,
        )
        await _run_headless(components)


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
