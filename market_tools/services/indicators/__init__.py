"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest / AnalysisRequest (bars from the data provider)
    Output: IndicatorReport / TechnicalAnalysisReport / NoDataResult

RESPONSIBILITIES:
    - Calculate SMA, EMA, RSI, MACD and Bollinger Bands
    - Align every output value to the date of its close
    - Detect support/resistance levels
    - Derive trend observations from the latest values and volume

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from market_tools.services.indicators.interface import IndicatorServiceInterface
from market_tools.services.indicators.engine import (
    IndicatorEngine,
    Indicator,
    get_indicator_engine,
)
from market_tools.services.indicators.alignment import AlignedPoint, align
from market_tools.services.indicators.service import IndicatorService

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorEngine",
    "Indicator",
    "get_indicator_engine",
    "AlignedPoint",
    "align",
    "IndicatorService",
]
