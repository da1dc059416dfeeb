"""Tests for the HTTP application and MCP server wiring."""

import pytest
from fastapi.testclient import TestClient

from market_tools.main import create_app
from market_tools.server.factory import create_server
from market_tools.server.sessions import SessionRegistry

from tests.conftest import FakeNewsService, FakeProvider, FakeWeatherService, make_bars

TOOL_NAMES = {
    "get-alerts",
    "get-forecast",
    "get-stock-price",
    "get-historical-data",
    "get-news",
    "get-technical-indicators",
    "get-technical-analysis",
}


@pytest.fixture
def app(settings, make_tools):
    return create_app(settings, tools=make_tools())


class TestHealthEndpoints:
    def test_health(self, app, settings):
        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app"] == settings.app_name
        assert data["sessions"] == 0

    def test_mcp_health(self, app):
        with TestClient(app) as client:
            response = client.get("/.well-known/mcp/health")

        assert response.json() == {"jsonrpc": "2.0", "result": {"status": "ok"}, "id": None}

    def test_registry_on_app_state(self, app):
        assert isinstance(app.state.sessions, SessionRegistry)

    def test_shutdown_clears_sessions_and_closes_tools(self, settings, make_tools):
        news, weather = FakeNewsService(), FakeWeatherService()
        app = create_app(settings, tools=make_tools(news=news, weather=weather))

        with TestClient(app):
            app.state.sessions.open("leftover")

        assert len(app.state.sessions) == 0
        assert news.closed and weather.closed

    def test_each_app_has_its_own_registry(self, settings, make_tools):
        first = create_app(settings, tools=make_tools())
        second = create_app(settings, tools=make_tools())

        assert first.state.sessions is not second.state.sessions


class TestServerTools:
    @pytest.mark.asyncio
    async def test_registers_every_tool(self, settings, make_tools):
        mcp = create_server(settings, make_tools())

        tools = await mcp.list_tools()

        assert {tool.name for tool in tools} == TOOL_NAMES

    @pytest.mark.asyncio
    async def test_indicator_schema(self, settings, make_tools):
        mcp = create_server(settings, make_tools())

        tools = {tool.name: tool for tool in await mcp.list_tools()}
        schema = tools["get-technical-indicators"].inputSchema

        assert set(schema["required"]) == {"symbol", "indicator", "startDate", "endDate"}
        assert schema["properties"]["period"]["maximum"] == 200
        assert schema["properties"]["indicator"]["enum"] == ["sma", "ema", "rsi", "macd", "bollinger"]

    @pytest.mark.asyncio
    async def test_dated_tools_use_camel_case_arguments(self, settings, make_tools):
        mcp = create_server(settings, make_tools())

        tools = {tool.name: tool for tool in await mcp.list_tools()}

        assert set(tools["get-news"].inputSchema["required"]) == {"stockName", "startDate", "endDate"}
        assert set(tools["get-historical-data"].inputSchema["required"]) == {"symbol", "startDate", "endDate"}
        assert set(tools["get-technical-analysis"].inputSchema["required"]) == {"symbol", "startDate", "endDate"}

    @pytest.mark.asyncio
    async def test_call_indicator_tool(self, settings, make_tools, rising_closes):
        mcp = create_server(settings, make_tools(FakeProvider(make_bars(rising_closes))))

        result = await mcp.call_tool(
            "get-technical-indicators",
            {
                "symbol": "AAPL",
                "indicator": "sma",
                "period": 20,
                "startDate": "2024-01-01",
                "endDate": "2024-09-06",
            },
        )

        assert _text(result).startswith("📈 SMA(20) for AAPL:")

    @pytest.mark.asyncio
    async def test_call_news_tool(self, settings, make_tools, sample_articles):
        news = FakeNewsService(articles=sample_articles)
        mcp = create_server(settings, make_tools(news=news))

        result = await mcp.call_tool(
            "get-news",
            {"stockName": "Apple", "startDate": "2024-01-01", "endDate": "2024-01-07"},
        )

        assert _text(result).startswith("📰 Top News for Apple:")
        assert news.requests[0].stock_name == "Apple"


def _text(result) -> str:
    # Newer SDKs return (content, structured); older ones return the content list
    content = result[0] if isinstance(result, tuple) else result
    return content[0].text
