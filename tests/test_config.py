"""Tests for settings loading and component wiring."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tvl_feed.config import AppSettings, FeedSettings, PollerSettings
from tvl_feed.main import build_components
from tvl_feed.network.http_client import HttpNetworker
from tvl_feed.price_feed.defipulse import DefiPulseTvlPriceFeed
from tvl_feed.price_feed.poller import PriceFeedPoller


class TestFeedSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in (
            "DEFIPULSE_API_KEY",
            "DEFIPULSE_LOOKBACK",
            "DEFIPULSE_DECIMALS",
            "DEFIPULSE_MIN_TIME_BETWEEN_UPDATES",
        ):
            monkeypatch.delenv(var, raising=False)

        settings = FeedSettings()
        assert settings.api_key.get_secret_value() == ""
        assert settings.base_url == "https://data-api.defipulse.com"
        assert settings.lookback == 7200
        assert settings.min_time_between_updates == 60
        assert settings.decimals == 18

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFIPULSE_API_KEY", "secret")
        monkeypatch.setenv("DEFIPULSE_LOOKBACK", "3600")
        monkeypatch.setenv("DEFIPULSE_DECIMALS", "8")

        settings = FeedSettings()
        assert settings.api_key.get_secret_value() == "secret"
        assert settings.lookback == 3600
        assert settings.decimals == 8

    def test_api_key_hidden_in_repr(self) -> None:
        settings = FeedSettings(api_key="secret")  # type: ignore[arg-type]
        assert "secret" not in repr(settings)

    def test_rejects_non_positive_lookback(self) -> None:
        with pytest.raises(ValidationError):
            FeedSettings(lookback=0)

    def test_rejects_negative_decimals(self) -> None:
        with pytest.raises(ValidationError):
            FeedSettings(decimals=-1)


class TestPollerSettings:
    def test_rejects_zero_interval(self) -> None:
        with pytest.raises(ValidationError):
            PollerSettings(interval=0)


class TestBuildComponents:
    @pytest.mark.asyncio
    async def test_wires_feed_from_settings(self, mock_settings: AppSettings) -> None:
        components = build_components(mock_settings)

        feed = components["price_feed"]
        assert isinstance(feed, DefiPulseTvlPriceFeed)
        assert isinstance(components["networker"], HttpNetworker)
        assert isinstance(components["poller"], PriceFeedPoller)
        assert feed.get_lookback() == 500
        assert feed.url.endswith("?api-key=test-api-key")

        await components["networker"].close()

    def test_missing_api_key_raises_before_opening_client(self) -> None:
        settings = AppSettings(feed=FeedSettings(api_key=""))  # type: ignore[arg-type]
        with patch("tvl_feed.main.HttpNetworker") as networker_cls:
            with pytest.raises(ValueError, match="api_key"):
                build_components(settings)

        networker_cls.assert_not_called()
