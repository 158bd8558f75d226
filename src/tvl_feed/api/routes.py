"""Read-only JSON endpoints over the price feed state.

Fixed-point prices are returned as strings: 18-decimal values overflow the
integer range JSON consumers can represent exactly.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from tvl_feed.fixed_point import format_fixed
from tvl_feed.logging import get_logger
from tvl_feed.price_feed.interface import PriceFeed

log = get_logger(__name__)

router = APIRouter()


def _price_fields(price: int | None, decimals: int) -> dict[str, str | None]:
    if price is None:
        return {"price": None, "price_decimal": None}
    return {"price": str(price), "price_decimal": format_fixed(price, decimals)}


@router.get("/price")
async def get_price(request: Request) -> JSONResponse:
    """Current price. 503 until the first successful update."""
    feed: PriceFeed = request.app.state.price_feed
    decimals = feed.get_price_feed_decimals()
    price = feed.get_current_price()

    content = {
        **_price_fields(price, decimals),
        "decimals": decimals,
        "last_update_time": feed.get_last_update_time(),
    }
    return JSONResponse(content=content, status_code=200 if price is not None else 503)


@router.get("/price/historical")
async def get_historical_price(
    request: Request,
    time: int = Query(..., description="Unix seconds; returns the latest price strictly before it"),
) -> JSONResponse:
    """Price in effect just before ``time``. 404 if none is retained."""
    feed: PriceFeed = request.app.state.price_feed
    price = feed.get_historical_price(time)

    if price is None:
        log.debug("historical_price_unavailable", time=time)

    content = {"time": time, **_price_fields(price, feed.get_price_feed_decimals())}
    return JSONResponse(content=content, status_code=200 if price is not None else 404)


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Feed readiness and configuration summary."""
    feed: PriceFeed = request.app.state.price_feed
    last_update_time = feed.get_last_update_time()

    return JSONResponse(content={
        "ready": last_update_time is not None,
        "last_update_time": last_update_time,
        "lookback": feed.get_lookback(),
        "decimals": feed.get_price_feed_decimals(),
        "history_size": len(feed.history),
    })
