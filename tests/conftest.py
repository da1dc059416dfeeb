"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta
from typing import List, Optional, Sequence

import pytest

from market_tools.core.config import Settings
from market_tools.schemas.market import (
    ForecastPeriod,
    Interval,
    NewsArticle,
    PriceBar,
    Quote,
    WeatherAlert,
)
from market_tools.services.base import ProviderError
from market_tools.services.data_ingestion.interface import HistoricalDataProvider
from market_tools.services.indicators.engine import IndicatorEngine
from market_tools.services.indicators.service import IndicatorService
from market_tools.server.tools import MarketTools

BASE_DATE = date(2024, 1, 1)


def make_bars(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
    start: date = BASE_DATE,
) -> List[PriceBar]:
    """One bar per calendar day starting at ``start``."""
    if volumes is None:
        volumes = [1_000_000.0] * len(closes)
    return [
        PriceBar(
            date=start + timedelta(days=i),
            open=close,
            high=close + 1.0,
            low=max(close - 1.0, 0.0),
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


class FakeProvider(HistoricalDataProvider):
    """In-memory provider recording every fetch."""

    def __init__(
        self,
        bars: Optional[List[PriceBar]] = None,
        quote: Optional[Quote] = None,
        error: Optional[Exception] = None,
    ):
        self.bars = bars or []
        self.quote = quote
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return "Fake"

    async def fetch(self, symbol, start_date, end_date, interval=Interval.D1):
        self.calls.append((symbol, start_date, end_date, interval))
        if self.error:
            raise self.error
        return list(self.bars)

    async def get_quote(self, symbol):
        if self.error:
            raise self.error
        if self.quote is None:
            raise ProviderError(self.name, f"No quote data for {symbol}")
        return self.quote


class FakeNewsService:
    def __init__(self, articles=None, error=None):
        self.articles = articles or []
        self.error = error
        self.requests = []
        self.closed = False

    async def search(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return list(self.articles)

    async def close(self):
        self.closed = True


class FakeWeatherService:
    def __init__(self, alerts=None, periods=None):
        self.alerts = alerts or []
        self.periods = periods
        self.closed = False

    async def get_alerts(self, state):
        return list(self.alerts)

    async def get_forecast(self, latitude, longitude):
        return self.periods

    async def close(self):
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(news_api_key="test-key", _env_file=None)


@pytest.fixture
def rising_closes() -> List[float]:
    """250 closes climbing by 0.5 from 100."""
    return [100.0 + i * 0.5 for i in range(250)]


@pytest.fixture
def noisy_closes() -> List[float]:
    """250 rising closes with a small period-4 wobble that cancels over any 4 bars."""
    return [100.0 + i * 0.5 + 0.3 * ((i % 4) - 1.5) for i in range(250)]


@pytest.fixture
def sample_closes() -> List[float]:
    """120 trending closes with a repeating wobble."""
    return [100.0 + i * 0.1 + ((i % 5) - 2) for i in range(120)]


@pytest.fixture
def engine() -> IndicatorEngine:
    return IndicatorEngine()


@pytest.fixture
def make_tools(settings):
    """Factory for MarketTools wired to fakes."""

    def _make(
        provider: Optional[FakeProvider] = None,
        news: Optional[FakeNewsService] = None,
        weather: Optional[FakeWeatherService] = None,
    ) -> MarketTools:
        provider = provider or FakeProvider()
        return MarketTools(
            provider=provider,
            indicator_service=IndicatorService(provider, IndicatorEngine(), settings),
            news_service=news or FakeNewsService(),
            weather_service=weather or FakeWeatherService(),
            settings=settings,
        )

    return _make


@pytest.fixture
def sample_alert() -> WeatherAlert:
    return WeatherAlert(
        event="Flood Warning",
        area_desc="Sacramento County",
        severity="Severe",
        headline="Flood Warning issued for Sacramento County",
    )


@pytest.fixture
def sample_periods() -> List[ForecastPeriod]:
    return [
        ForecastPeriod(
            name="Tonight",
            temperature=54,
            temperature_unit="F",
            short_forecast="Mostly Clear",
            wind_speed="5 mph",
            wind_direction="NW",
        ),
    ]


@pytest.fixture
def sample_articles() -> List[NewsArticle]:
    return [
        NewsArticle(title=f"Headline {i}", url=f"https://example.com/{i}", source="Wire")
        for i in range(7)
    ]
