"""Price feed layer -- DeFi Pulse TVL source, feed contract, and update loop."""

from tvl_feed.price_feed.defipulse import DefiPulseTvlPriceFeed
from tvl_feed.price_feed.interface import PriceFeed
from tvl_feed.price_feed.poller import PriceFeedPoller

__all__ = ["DefiPulseTvlPriceFeed", "PriceFeed", "PriceFeedPoller"]
