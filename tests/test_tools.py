"""Tests for the tool handlers and their text output."""

import pytest

from market_tools.schemas.market import Quote
from market_tools.services.base import ProviderError

from tests.conftest import FakeNewsService, FakeProvider, FakeWeatherService, make_bars


class TestWeatherTools:
    @pytest.mark.asyncio
    async def test_alerts(self, make_tools, sample_alert):
        tools = make_tools(weather=FakeWeatherService(alerts=[sample_alert]))

        text = await tools.get_alerts("ca")

        assert text.startswith("Active Alerts for CA:")
        assert "🚨 Flood Warning" in text
        assert "⚠️ Severity: Severe" in text
        assert text.rstrip().endswith("---")

    @pytest.mark.asyncio
    async def test_no_alerts(self, make_tools):
        assert await make_tools().get_alerts("ny") == "✅ No active alerts for NY"

    @pytest.mark.asyncio
    async def test_forecast(self, make_tools, sample_periods):
        tools = make_tools(weather=FakeWeatherService(periods=sample_periods))

        text = await tools.get_forecast(38.58, -121.49)

        assert "Forecast for (38.58, -121.49)" in text
        assert "📅 Tonight: 54°F, Mostly Clear, 🌬️ 5 mph NW" in text

    @pytest.mark.asyncio
    async def test_forecast_unavailable(self, make_tools):
        text = await make_tools().get_forecast(10.0, 10.0)

        assert text == "🚫 No forecast data available for 10.0, 10.0."

    @pytest.mark.asyncio
    async def test_forecast_without_periods(self, make_tools):
        tools = make_tools(weather=FakeWeatherService(periods=[]))

        assert await tools.get_forecast(10.0, 10.0) == "🚫 No forecast periods available."


class TestStockTools:
    @pytest.mark.asyncio
    async def test_stock_price(self, make_tools):
        tools = make_tools(FakeProvider(quote=Quote(symbol="AAPL", price=189.456)))

        assert await tools.get_stock_price("AAPL") == "💹 AAPL is currently at $189.46."

    @pytest.mark.asyncio
    async def test_stock_price_failure(self, make_tools):
        text = await make_tools().get_stock_price("NOPE")

        assert text == "🚫 Failed to fetch stock price for NOPE."

    @pytest.mark.asyncio
    async def test_historical_data(self, make_tools):
        tools = make_tools(FakeProvider(make_bars([10.0, 11.5])))

        text = await tools.get_historical_data("AAPL", "2024-01-01", "2024-01-02")

        assert text.startswith("📊 Historical Data for AAPL:")
        assert "📅 2024-01-01: Close at $10.00" in text
        assert "📅 2024-01-02: Close at $11.50" in text

    @pytest.mark.asyncio
    async def test_historical_data_empty(self, make_tools):
        text = await make_tools().get_historical_data("AAPL", "2024-01-01", "2024-01-02")

        assert text == "🚫 No historical data for AAPL in this range."

    @pytest.mark.asyncio
    async def test_historical_data_bad_dates(self, make_tools):
        provider = FakeProvider()
        text = await make_tools(provider).get_historical_data("AAPL", "2024-02-01", "2024-01-01")

        assert text.startswith("🚫 Invalid request:")
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_historical_data_failure(self, make_tools):
        tools = make_tools(FakeProvider(error=ProviderError("Fake", "down")))

        text = await tools.get_historical_data("AAPL", "2024-01-01", "2024-01-02")

        assert text == "🚫 Failed to fetch historical data."


class TestNewsTool:
    @pytest.mark.asyncio
    async def test_top_five(self, make_tools, sample_articles):
        news = FakeNewsService(articles=sample_articles)

        text = await make_tools(news=news).get_news("Apple", "2024-01-01", "2024-01-07")

        assert text.startswith("📰 Top News for Apple:")
        assert "📌 Headline 4" in text
        assert "Headline 5" not in text
        assert news.requests[0].stock_name == "Apple"

    @pytest.mark.asyncio
    async def test_no_news(self, make_tools):
        text = await make_tools().get_news("Apple", "2024-01-01", "2024-01-07")

        assert text == "📰 No news found for Apple between 2024-01-01 and 2024-01-07."

    @pytest.mark.asyncio
    async def test_news_failure(self, make_tools):
        news = FakeNewsService(error=ProviderError("NewsService", "quota"))

        text = await make_tools(news=news).get_news("Apple", "2024-01-01", "2024-01-07")

        assert text == "🚫 Failed to fetch news."


class TestTechnicalIndicatorsTool:
    @pytest.mark.asyncio
    async def test_sma_shows_last_ten(self, make_tools, rising_closes):
        tools = make_tools(FakeProvider(make_bars(rising_closes)))

        text = await tools.get_technical_indicators("AAPL", "sma", "2024-01-01", "2024-09-06", 20)

        assert text.startswith("📈 SMA(20) for AAPL:")
        assert text.count("📅") == 10
        assert "📅 2024-09-06: SMA = $219.75" in text
        assert "(Showing the last 10 data points. Request covered 250 trading days.)" in text

    @pytest.mark.asyncio
    async def test_rsi_marks_overbought(self, make_tools, rising_closes):
        tools = make_tools(FakeProvider(make_bars(rising_closes)))

        text = await tools.get_technical_indicators("AAPL", "rsi", "2024-01-01", "2024-09-06")

        assert "RSI = 100.00 ⚠️ Potentially Overbought" in text

    @pytest.mark.asyncio
    async def test_not_enough_data(self, make_tools):
        tools = make_tools(FakeProvider(make_bars([100.0] * 5)))

        text = await tools.get_technical_indicators("AAPL", "sma", "2024-01-01", "2024-01-05", 20)

        assert text == "🚫 Not enough data to calculate SMA(20) for AAPL (5 trading days in range)."

    @pytest.mark.asyncio
    async def test_no_data(self, make_tools):
        text = await make_tools().get_technical_indicators("AAPL", "ema", "2024-01-01", "2024-01-05")

        assert text == "🚫 No historical data available for AAPL in the specified range."

    @pytest.mark.asyncio
    async def test_unknown_indicator(self, make_tools):
        text = await make_tools().get_technical_indicators("AAPL", "vwap", "2024-01-01", "2024-01-05")

        assert text.startswith("🚫 Invalid request:")

    @pytest.mark.asyncio
    async def test_period_out_of_range(self, make_tools):
        text = await make_tools().get_technical_indicators("AAPL", "sma", "2024-01-01", "2024-01-05", 500)

        assert text.startswith("🚫 Invalid request:")

    @pytest.mark.asyncio
    async def test_provider_failure(self, make_tools):
        tools = make_tools(FakeProvider(error=ProviderError("Fake", "down")))

        text = await tools.get_technical_indicators("AAPL", "sma", "2024-01-01", "2024-01-05")

        assert text == "🚫 Failed to fetch historical data for AAPL."


class TestTechnicalAnalysisTool:
    @pytest.mark.asyncio
    async def test_report_sections(self, make_tools, rising_closes):
        tools = make_tools(FakeProvider(make_bars(rising_closes)))

        text = await tools.get_technical_analysis("AAPL", "2024-01-01", "2024-09-06")

        assert text.startswith("🔍 Technical Analysis for AAPL")
        assert "Current Price: $224.50" in text
        assert "Daily Change: 0.22%" in text
        assert "• SMA(20): $219.75" in text
        assert "• RSI(14): 100.00" in text
        assert "Support & Resistance:" not in text
        assert "• 📈 Price is above SMA(20) and SMA(50), suggesting a positive trend." in text
        assert "• ⚠️ RSI(14) is above 70, suggesting the stock may be overbought." in text

    @pytest.mark.asyncio
    async def test_levels_section(self, make_tools):
        from tests.test_levels import ALTERNATING

        tools = make_tools(FakeProvider(make_bars([float(p) for p in ALTERNATING])))

        text = await tools.get_technical_analysis("AAPL", "2024-01-01", "2024-01-30")

        assert "• Resistance: $38.00, $37.00" in text
        assert "• Support: $12.00, $11.00" in text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, make_tools):
        tools = make_tools(FakeProvider(error=RuntimeError("boom")))

        text = await tools.get_technical_analysis("AAPL", "2024-01-01", "2024-01-30")

        assert text == "🚫 Failed to generate technical analysis for AAPL."

    @pytest.mark.asyncio
    async def test_aclose_closes_services(self, make_tools):
        news, weather = FakeNewsService(), FakeWeatherService()
        tools = make_tools(news=news, weather=weather)

        await tools.aclose()

        assert news.closed and weather.closed
