"""
News Integration Service

Fetches news articles for a company or stock.
"""

from market_tools.services.news.service import NewsService

__all__ = [
    "NewsService",
]
