"""
Historical Data Provider Interface

Defines the contract for the market data layer.
"""

from abc import ABC, abstractmethod
from datetime import date

from market_tools.schemas.market import Interval, PriceBar, Quote


class HistoricalDataProvider(ABC):
    """
    Historical Data Provider Contract.

    fetch:
        INPUT: symbol, start_date, end_date (inclusive), interval
        OUTPUT: list[PriceBar] ordered by date; [] when the range has no bars

    get_quote:
        INPUT: symbol
        OUTPUT: Quote

    Both raise ProviderError when the upstream source fails.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def fetch(
        self,
        symbol: str,
        start_date: date,
        end_date: date,
        interval: Interval = Interval.D1,
    ) -> list[PriceBar]:
        """Fetch OHLCV bars for an inclusive date range."""
        pass

    @abstractmethod
    async def get_quote(self, symbol: str) -> Quote:
        """Get the latest quote for a symbol."""
        pass
