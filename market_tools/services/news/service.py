"""
News Service

Fetches company/stock news from NewsAPI (https://newsapi.org).
"""

import logging
from typing import Optional, List

import aiohttp

from market_tools.core.config import Settings, get_settings
from market_tools.schemas.market import NewsArticle, NewsRequest
from market_tools.services.base import ProviderError

logger = logging.getLogger(__name__)


class NewsService:
    """
    Service for fetching news articles.

    Source:
    - NewsAPI ``/everything`` endpoint (requires NEWS_API_KEY)
    """

    name = "NewsService"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.http_timeout_seconds),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def search(self, request: NewsRequest) -> List[NewsArticle]:
        """
        Search English-language articles about ``request.stock_name``, most
        relevant first.

        Raises:
            ProviderError: missing API key, HTTP error, an error payload or a
                body that is not a JSON object
        """
        if not self.settings.news_api_key:
            raise ProviderError(self.name, "NEWS_API_KEY is not configured")

        session = await self._ensure_session()
        params = {
            "q": request.stock_name,
            "from": request.start_date.isoformat(),
            "to": request.end_date.isoformat(),
            "language": "en",
            "sortBy": "relevancy",
            "pageSize": str(self.settings.news_page_size),
        }
        headers = {"X-Api-Key": self.settings.news_api_key}

        try:
            async with session.get(
                f"{self.settings.news_api_base_url}/everything", params=params, headers=headers
            ) as response:
                payload = await response.json(content_type=None)
                if not isinstance(payload, dict):
                    raise ProviderError(
                        self.name,
                        f"NewsAPI returned an unexpected payload (status {response.status})",
                    )
                if response.status != 200 or payload.get("status") == "error":
                    logger.warning(f"NewsAPI returned status {response.status}: {payload.get('message')}")
                    raise ProviderError(
                        self.name,
                        f"NewsAPI request failed with status {response.status}",
                        details={"code": payload.get("code")},
                    )
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error fetching news for {request.stock_name}: {e}")
            raise ProviderError(self.name, "NewsAPI request failed") from e

        articles = []
        for item in payload.get("articles") or []:
            if not item.get("title") or not item.get("url"):
                continue
            articles.append(
                NewsArticle(
                    title=item["title"],
                    url=item["url"],
                    source=(item.get("source") or {}).get("name"),
                    published_at=item.get("publishedAt"),
                )
            )
        return articles
