"""
Tool handlers

Every handler validates its arguments into a request model, calls one service
and renders text. Failures end the request with a message and never escape to
the transport.
"""

import logging
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from market_tools.core.config import Settings
from market_tools.schemas.market import HistoricalDataRequest, NewsRequest
from market_tools.schemas.indicators import (
    AnalysisRequest,
    IndicatorRequest,
    NoDataResult,
)
from market_tools.services.base import InvalidParameter, ProviderError
from market_tools.services.data_ingestion.interface import HistoricalDataProvider
from market_tools.services.indicators.interface import IndicatorServiceInterface
from market_tools.services.news.service import NewsService
from market_tools.services.weather.service import WeatherService
from market_tools.server import formatting

logger = logging.getLogger(__name__)


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item.get("loc", ())) or "request"
        parts.append(f"{field}: {item.get('msg')}")
    return "; ".join(parts)


def _parse(model, **fields):
    """Build a request model, turning validation failures into InvalidParameter."""
    try:
        return model(**fields)
    except ValidationError as e:
        raise InvalidParameter(model.__name__, _describe_validation_error(e)) from e


def _rejected(error: InvalidParameter) -> str:
    return f"🚫 Invalid request: {error.message}"


class MarketTools:
    """Handlers behind the MCP tools. One instance per server."""

    def __init__(
        self,
        provider: HistoricalDataProvider,
        indicator_service: IndicatorServiceInterface,
        news_service: NewsService,
        weather_service: WeatherService,
        settings: Settings,
    ):
        self.provider = provider
        self.indicator_service = indicator_service
        self.news_service = news_service
        self.weather_service = weather_service
        self.settings = settings

    async def aclose(self) -> None:
        """Release HTTP sessions held by the network services."""
        await self.news_service.close()
        await self.weather_service.close()

    # -------------------------------------------------------------------------
    # Weather
    # -------------------------------------------------------------------------

    async def get_alerts(self, state: str) -> str:
        alerts = await self.weather_service.get_alerts(state)
        return formatting.format_alerts(state, alerts)

    async def get_forecast(self, latitude: float, longitude: float) -> str:
        periods = await self.weather_service.get_forecast(latitude, longitude)
        return formatting.format_forecast(latitude, longitude, periods)

    # -------------------------------------------------------------------------
    # Stocks
    # -------------------------------------------------------------------------

    async def get_stock_price(self, symbol: str) -> str:
        try:
            quote = await self.provider.get_quote(symbol)
        except ProviderError as e:
            logger.error(f"Error fetching stock price for {symbol}: {e}")
            return f"🚫 Failed to fetch stock price for {symbol}."
        return formatting.format_quote(quote)

    async def get_historical_data(
        self, symbol: str, start_date: str, end_date: str, interval: str = "1d"
    ) -> str:
        try:
            request = _parse(
                HistoricalDataRequest,
                symbol=symbol,
                start_date=start_date,
                end_date=end_date,
                interval=interval,
            )
            bars = await self.provider.fetch(
                request.symbol, request.start_date, request.end_date, request.interval
            )
        except InvalidParameter as e:
            return _rejected(e)
        except ProviderError as e:
            logger.error(f"Error fetching historical data for {symbol}: {e}")
            return "🚫 Failed to fetch historical data."
        return formatting.format_history(request.symbol, bars)

    async def get_news(self, stock_name: str, start_date: str, end_date: str) -> str:
        try:
            request = _parse(
                NewsRequest, stock_name=stock_name, start_date=start_date, end_date=end_date
            )
            articles = await self.news_service.search(request)
        except InvalidParameter as e:
            return _rejected(e)
        except ProviderError as e:
            logger.error(f"Error fetching news for {stock_name}: {e}")
            return "🚫 Failed to fetch news."
        return formatting.format_news(
            stock_name, start_date, end_date, articles, limit=self.settings.news_page_size
        )

    async def get_technical_indicators(
        self,
        symbol: str,
        indicator: str,
        start_date: str,
        end_date: str,
        period: int = 14,
    ) -> str:
        try:
            request = _parse(
                IndicatorRequest,
                symbol=symbol,
                indicator=indicator,
                period=period,
                start_date=start_date,
                end_date=end_date,
            )
            result = await self.indicator_service.execute(request)
        except InvalidParameter as e:
            return _rejected(e)
        except ProviderError as e:
            logger.error(f"Error fetching data for {symbol}: {e}")
            return f"🚫 Failed to fetch historical data for {symbol}."
        except Exception as e:
            logger.error(f"Error calculating technical indicators for {symbol}: {e}", exc_info=True)
            return f"🚫 Failed to calculate {indicator} for {symbol}."

        if isinstance(result, NoDataResult):
            return formatting.format_no_data(result)
        return formatting.format_indicator_report(result, tail=self.settings.report_tail_size)

    async def get_technical_analysis(self, symbol: str, start_date: str, end_date: str) -> str:
        try:
            request = _parse(
                AnalysisRequest, symbol=symbol, start_date=start_date, end_date=end_date
            )
            result = await self.indicator_service.analyze(request)
        except InvalidParameter as e:
            return _rejected(e)
        except ProviderError as e:
            logger.error(f"Error fetching data for {symbol}: {e}")
            return f"🚫 Failed to fetch historical data for {symbol}."
        except Exception as e:
            logger.error(f"Error generating technical analysis for {symbol}: {e}", exc_info=True)
            return f"🚫 Failed to generate technical analysis for {symbol}."

        if isinstance(result, NoDataResult):
            return formatting.format_no_data(result)
        return formatting.format_analysis_report(result)


def register_tools(mcp: FastMCP, tools: MarketTools) -> None:
    """
    Attach every tool to ``mcp``.

    Parameter names here are the argument names clients send (``startDate``,
    ``endDate``, ``stockName``), so they stay camelCase.
    """

    @mcp.tool(name="get-alerts", description="Get weather alerts for a state")
    async def get_alerts(
        state: Annotated[str, Field(min_length=2, max_length=2, description="Two-letter state code (e.g., CA, NY)")],
    ) -> str:
        return await tools.get_alerts(state)

    @mcp.tool(name="get-forecast", description="Get weather forecast for a location")
    async def get_forecast(
        latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude of the location")],
        longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude of the location")],
    ) -> str:
        return await tools.get_forecast(latitude, longitude)

    @mcp.tool(name="get-stock-price", description="Fetch the current price of a stock")
    async def get_stock_price(
        symbol: Annotated[str, Field(description="Stock ticker symbol (e.g., AAPL, TSLA)")],
    ) -> str:
        return await tools.get_stock_price(symbol)

    @mcp.tool(name="get-historical-data", description="Fetch historical stock data")
    async def get_historical_data(
        symbol: str,
        startDate: Annotated[str, Field(description="Start date (YYYY-MM-DD)")],
        endDate: Annotated[str, Field(description="End date (YYYY-MM-DD)")],
        interval: Literal["1d", "1wk", "1mo"] = "1d",
    ) -> str:
        return await tools.get_historical_data(symbol, startDate, endDate, interval)

    @mcp.tool(name="get-news", description="Fetch stock-related news")
    async def get_news(
        stockName: Annotated[str, Field(description="Company or stock name to search for")],
        startDate: Annotated[str, Field(description="Start date (YYYY-MM-DD)")],
        endDate: Annotated[str, Field(description="End date (YYYY-MM-DD)")],
    ) -> str:
        return await tools.get_news(stockName, startDate, endDate)

    @mcp.tool(name="get-technical-indicators", description="Calculate technical indicators for a stock")
    async def get_technical_indicators(
        symbol: Annotated[str, Field(description="Stock ticker symbol (e.g., AAPL, TSLA)")],
        indicator: Literal["sma", "ema", "rsi", "macd", "bollinger"],
        startDate: Annotated[str, Field(description="Start date (YYYY-MM-DD)")],
        endDate: Annotated[str, Field(description="End date (YYYY-MM-DD)")],
        period: Annotated[int, Field(ge=1, le=200, description="Period for the indicator")] = 14,
    ) -> str:
        return await tools.get_technical_indicators(symbol, indicator, startDate, endDate, period)

    @mcp.tool(name="get-technical-analysis", description="Get comprehensive technical analysis for a stock")
    async def get_technical_analysis(
        symbol: Annotated[str, Field(description="Stock ticker symbol (e.g., AAPL, TSLA)")],
        startDate: Annotated[str, Field(description="Start date (YYYY-MM-DD)")],
        endDate: Annotated[str, Field(description="End date (YYYY-MM-DD)")],
    ) -> str:
        return await tools.get_technical_analysis(symbol, startDate, endDate)
