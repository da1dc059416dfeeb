"""
Yahoo Finance Data Adapter

Fetches historical bars and quotes from Yahoo Finance.
yfinance is synchronous, so calls run in the default executor.
"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

import pandas as pd
import yfinance as yf

from market_tools.schemas.market import Interval, PriceBar, Quote
from market_tools.services.base import ProviderError
from market_tools.services.data_ingestion.interface import HistoricalDataProvider

logger = logging.getLogger(__name__)


def _or_close(value, close: float) -> float:
    return close if value is None or pd.isna(value) else float(value)


def _frame_to_bars(hist: pd.DataFrame) -> list[PriceBar]:
    """Convert a yfinance history frame to PriceBars, skipping rows without a close."""
    hist = hist.dropna(subset=["Close"])

    bars = []
    for idx, row in hist.iterrows():
        close = float(row["Close"])
        volume = row.get("Volume", 0)
        bars.append(
            PriceBar(
                date=idx.date(),
                open=_or_close(row.get("Open"), close),
                high=_or_close(row.get("High"), close),
                low=_or_close(row.get("Low"), close),
                close=close,
                volume=0.0 if pd.isna(volume) else float(volume),
            )
        )
    return bars


class YahooFinanceProvider(HistoricalDataProvider):
    """HistoricalDataProvider backed by yfinance."""

    @property
    def name(self) -> str:
        return "YahooFinance"

    async def fetch(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
        interval: Interval = Interval.D1,
    ) -> list[PriceBar]:
        symbol = symbol.upper().strip()
        logger.info(f"Fetching {symbol} {interval.value} bars {start_date}..{end_date} from Yahoo Finance")

        def _history() -> pd.DataFrame:
            # yfinance treats ``end`` as exclusive
            return yf.Ticker(symbol).history(
                start=start_date.isoformat(),
                end=(end_date + timedelta(days=1)).isoformat(),
                interval=interval.value,
                auto_adjust=False,
            )

        try:
            loop = asyncio.get_event_loop()
            hist = await loop.run_in_executor(None, _history)
        except Exception as e:
            logger.error(f"Error fetching {symbol} from Yahoo Finance: {e}")
            raise ProviderError(self.name, f"Could not fetch history for {symbol}") from e

        if hist is None or hist.empty:
            logger.warning(f"No data returned for {symbol}")
            return []

        return _frame_to_bars(hist)

    async def get_quote(self, symbol: str) -> Quote:
        symbol = symbol.upper().strip()

        def _info() -> dict:
            return yf.Ticker(symbol).info

        try:
            loop = asyncio.get_event_loop()
            info = await loop.run_in_executor(None, _info)
        except Exception as e:
            logger.error(f"Error getting quote for {symbol}: {e}")
            raise ProviderError(self.name, f"Could not fetch quote for {symbol}") from e

        price: Optional[float] = info.get("regularMarketPrice") or info.get("currentPrice")
        if price is None:
            raise ProviderError(self.name, f"No quote data for {symbol}")

        return Quote(symbol=symbol, price=float(price), currency=info.get("currency"))


# Singleton instance
_provider_instance: Optional[YahooFinanceProvider] = None


def get_historical_data_provider() -> YahooFinanceProvider:
    """Get or create the Yahoo Finance provider."""
    global _provider_instance
    if _provider_instance is None:
        _provider_instance = YahooFinanceProvider()
    return _provider_instance
