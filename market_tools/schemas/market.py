"""
CONTRACT 1: Market Data

Input: HistoricalDataRequest
Output: list[PriceBar]

Shapes exchanged with the historical data provider, the news service and the
weather service.
"""

from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Interval(str, Enum):
    D1 = "1d"
    W1 = "1wk"
    MO1 = "1mo"


# =============================================================================
# INPUT: HistoricalDataRequest
# =============================================================================


class DateRange(BaseModel):
    """Inclusive calendar date range shared by every dated request."""

    start_date: date = Field(..., description="First calendar day (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last calendar day (YYYY-MM-DD)")

    @model_validator(mode="after")
    def _check_order(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class HistoricalDataRequest(DateRange):
    """
    Request for historical bars.
    Sent by: Tool layer / Indicator Service
    Received by: HistoricalDataProvider
    """

    symbol: str = Field(..., min_length=1, description="Ticker, e.g. AAPL")
    interval: Interval = Interval.D1


# =============================================================================
# OUTPUT: PriceBar
# =============================================================================


class PriceBar(BaseModel):
    """Single OHLCV bar for one trading session."""

    model_config = ConfigDict(frozen=True)

    date: date
    open: float = Field(..., ge=0)
    high: float = Field(..., ge=0)
    low: float = Field(..., ge=0)
    close: float = Field(..., ge=0)
    volume: float = Field(..., ge=0)


class Quote(BaseModel):
    """Latest quote for a symbol."""

    symbol: str
    price: float
    currency: Optional[str] = None


# =============================================================================
# NEWS
# =============================================================================


class NewsRequest(DateRange):
    stock_name: str = Field(..., min_length=1)


class NewsArticle(BaseModel):
    title: str
    url: str
    source: Optional[str] = None
    published_at: Optional[str] = None


# =============================================================================
# WEATHER
# =============================================================================


class WeatherAlert(BaseModel):
    """One active alert feature from api.weather.gov."""

    event: Optional[str] = None
    area_desc: Optional[str] = None
    severity: Optional[str] = None
    headline: Optional[str] = None


class ForecastPeriod(BaseModel):
    name: str
    temperature: Optional[float] = None
    temperature_unit: str = "F"
    short_forecast: str = ""
    wind_speed: str = ""
    wind_direction: str = ""
