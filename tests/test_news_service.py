"""Tests for the NewsAPI client."""

from datetime import date

import pytest

from market_tools.core.config import Settings
from market_tools.schemas.market import NewsRequest
from market_tools.services.base import ProviderError
from market_tools.services.news.service import NewsService


class _FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._payload = payload

    async def json(self, content_type=None):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class _FakeSession:
    closed = False

    def __init__(self, status, payload):
        self.response = _FakeResponse(status, payload)
        self.calls = []

    def get(self, url, params=None, headers=None):
        self.calls.append((url, params, headers))
        return self.response


def _service(settings, status, payload):
    service = NewsService(settings)
    service._session = _FakeSession(status, payload)
    return service


REQUEST = NewsRequest(stock_name="Apple", start_date=date(2024, 1, 1), end_date=date(2024, 1, 7))


class TestNewsService:
    @pytest.mark.asyncio
    async def test_parses_articles(self, settings):
        payload = {
            "status": "ok",
            "articles": [
                {"title": "Apple up", "url": "https://example.com/a", "source": {"name": "Wire"}},
                {"title": None, "url": "https://example.com/b"},
            ],
        }
        service = _service(settings, 200, payload)

        articles = await service.search(REQUEST)

        assert [a.title for a in articles] == ["Apple up"]
        assert articles[0].source == "Wire"
        url, params, headers = service._session.calls[0]
        assert url.endswith("/everything")
        assert params["q"] == "Apple"
        assert params["from"] == "2024-01-01"
        assert headers == {"X-Api-Key": "test-key"}

    @pytest.mark.asyncio
    async def test_error_payload(self, settings):
        service = _service(settings, 429, {"status": "error", "code": "rateLimited"})

        with pytest.raises(ProviderError) as exc_info:
            await service.search(REQUEST)

        assert exc_info.value.details == {"code": "rateLimited"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, [], ["unexpected"], "text"])
    async def test_non_object_body(self, settings, payload):
        service = _service(settings, 200, payload)

        with pytest.raises(ProviderError, match="unexpected payload"):
            await service.search(REQUEST)

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = NewsService(Settings(news_api_key=None, _env_file=None))

        with pytest.raises(ProviderError, match="NEWS_API_KEY"):
            await service.search(REQUEST)
