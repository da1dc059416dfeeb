"""
MCP server construction.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from market_tools.core.config import Settings, get_settings
from market_tools.services.data_ingestion import get_historical_data_provider
from market_tools.services.indicators import IndicatorService, get_indicator_engine
from market_tools.services.news import NewsService
from market_tools.services.weather import WeatherService
from market_tools.server.tools import MarketTools, register_tools

logger = logging.getLogger(__name__)


def build_market_tools(settings: Optional[Settings] = None) -> MarketTools:
    """Wire the production services behind the tool handlers."""
    settings = settings or get_settings()
    provider = get_historical_data_provider()
    return MarketTools(
        provider=provider,
        indicator_service=IndicatorService(provider, get_indicator_engine(), settings),
        news_service=NewsService(settings),
        weather_service=WeatherService(settings),
        settings=settings,
    )


def create_server(
    settings: Optional[Settings] = None,
    tools: Optional[MarketTools] = None,
) -> FastMCP:
    """Create a FastMCP server with every tool registered."""
    settings = settings or get_settings()
    tools = tools or build_market_tools(settings)

    mcp = FastMCP(
        settings.app_name,
        host=settings.host,
        port=settings.port,
        stateless_http=settings.stateless_http,
        log_level=settings.log_level.upper(),
    )
    register_tools(mcp, tools)

    logger.info(f"Created MCP server '{settings.app_name}' v{settings.app_version}")
    return mcp
