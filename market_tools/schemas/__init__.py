"""
Market Tools Schema Contracts

This module defines the contracts between the provider, the indicator pipeline
and the tool layer.
"""

from market_tools.schemas.market import (
    DateRange,
    Interval,
    HistoricalDataRequest,
    PriceBar,
    Quote,
    NewsRequest,
    NewsArticle,
    WeatherAlert,
    ForecastPeriod,
)
from market_tools.schemas.indicators import (
    IndicatorKind,
    IndicatorParams,
    IndicatorRequest,
    AnalysisRequest,
    IndicatorReport,
    SMAReport,
    EMAReport,
    RSIReport,
    MACDReport,
    BollingerReport,
    NoDataResult,
    Levels,
    TrendSignal,
    TrendObservation,
    LatestIndicators,
    TechnicalAnalysisReport,
)

__all__ = [
    # Market
    "DateRange",
    "Interval",
    "HistoricalDataRequest",
    "PriceBar",
    "Quote",
    "NewsRequest",
    "NewsArticle",
    "WeatherAlert",
    "ForecastPeriod",
    # Indicators
    "IndicatorKind",
    "IndicatorParams",
    "IndicatorRequest",
    "AnalysisRequest",
    "IndicatorReport",
    "SMAReport",
    "EMAReport",
    "RSIReport",
    "MACDReport",
    "BollingerReport",
    "NoDataResult",
    "Levels",
    "TrendSignal",
    "TrendObservation",
    "LatestIndicators",
    "TechnicalAnalysisReport",
]
