"""
Market Data Service

CONTRACT:
    Input:  symbol + inclusive date range + interval
    Output: list[PriceBar]

RESPONSIBILITIES:
    - Fetch historical OHLCV bars
    - Fetch the latest quote
    - Raise ProviderError on upstream failure; an empty range is not an error
"""

from market_tools.services.data_ingestion.interface import HistoricalDataProvider
from market_tools.services.data_ingestion.yahoo_adapter import (
    YahooFinanceProvider,
    get_historical_data_provider,
)

__all__ = [
    "HistoricalDataProvider",
    "YahooFinanceProvider",
    "get_historical_data_provider",
]
