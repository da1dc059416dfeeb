"""
CONTRACT 2: Indicator Engine

Input: IndicatorRequest / AnalysisRequest (plus PriceBars from the provider)
Output: IndicatorReport / TechnicalAnalysisReport / NoDataResult

Reports are a tagged union discriminated by ``indicator`` so every kind carries
its own typed points.
"""

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from market_tools.schemas.market import DateRange


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    SMA = "sma"
    EMA = "ema"
    RSI = "rsi"
    MACD = "macd"
    BOLLINGER = "bollinger"


class TrendSignal(str, Enum):
    POSITIVE_TREND = "POSITIVE_TREND"
    NEGATIVE_TREND = "NEGATIVE_TREND"
    GOLDEN_CROSS = "GOLDEN_CROSS"
    DEATH_CROSS = "DEATH_CROSS"
    RSI_OVERBOUGHT = "RSI_OVERBOUGHT"
    RSI_OVERSOLD = "RSI_OVERSOLD"
    RSI_NEUTRAL = "RSI_NEUTRAL"
    MACD_BULLISH = "MACD_BULLISH"
    MACD_BEARISH = "MACD_BEARISH"
    ABOVE_UPPER_BAND = "ABOVE_UPPER_BAND"
    BELOW_LOWER_BAND = "BELOW_LOWER_BAND"
    BANDS_CONTRACTING = "BANDS_CONTRACTING"
    HIGH_VOLUME = "HIGH_VOLUME"
    LOW_VOLUME = "LOW_VOLUME"


# =============================================================================
# INPUT: IndicatorRequest / AnalysisRequest
# =============================================================================


class IndicatorParams(BaseModel):
    """Parameters for a single indicator computation."""

    model_config = ConfigDict(frozen=True)

    period: int = Field(default=14, ge=1)
    fast_period: int = Field(default=12, ge=1)
    slow_period: int = Field(default=26, ge=1)
    signal_period: int = Field(default=9, ge=1)
    std_dev: float = Field(default=2.0, ge=0)


class IndicatorRequest(DateRange):
    """
    Request for a single indicator series.
    Sent by: get-technical-indicators tool
    Received by: Indicator Service
    """

    symbol: str = Field(..., min_length=1)
    indicator: IndicatorKind
    period: int = Field(default=14, ge=1, le=200)

    def to_params(self) -> IndicatorParams:
        # MACD keeps the standard 12/26/9; Bollinger uses a 2 sigma band.
        return IndicatorParams(period=self.period)


class AnalysisRequest(DateRange):
    """Request for the composite multi-indicator analysis."""

    symbol: str = Field(..., min_length=1)


# =============================================================================
# OUTPUT: Aligned points
# =============================================================================


class ValuePoint(BaseModel):
    date: date
    value: float


class MACDPoint(BaseModel):
    date: date
    macd: float
    signal: float
    histogram: float


class BollingerPoint(BaseModel):
    date: date
    upper: float
    middle: float
    lower: float
    price: float


# =============================================================================
# OUTPUT: IndicatorReport (tagged union)
# =============================================================================


class _ReportBase(BaseModel):
    symbol: str
    trading_days: int = Field(..., ge=0, description="Bars covered by the request")


class SMAReport(_ReportBase):
    indicator: Literal[IndicatorKind.SMA] = IndicatorKind.SMA
    period: int
    points: list[ValuePoint]


class EMAReport(_ReportBase):
    indicator: Literal[IndicatorKind.EMA] = IndicatorKind.EMA
    period: int
    points: list[ValuePoint]


class RSIReport(_ReportBase):
    indicator: Literal[IndicatorKind.RSI] = IndicatorKind.RSI
    period: int
    points: list[ValuePoint]


class MACDReport(_ReportBase):
    indicator: Literal[IndicatorKind.MACD] = IndicatorKind.MACD
    fast_period: int
    slow_period: int
    signal_period: int
    points: list[MACDPoint]


class BollingerReport(_ReportBase):
    indicator: Literal[IndicatorKind.BOLLINGER] = IndicatorKind.BOLLINGER
    period: int
    std_dev: float
    points: list[BollingerPoint]


IndicatorReport = Annotated[
    Union[SMAReport, EMAReport, RSIReport, MACDReport, BollingerReport],
    Field(discriminator="indicator"),
]


class NoDataResult(BaseModel):
    """Provider returned zero bars for the requested range. Informational."""

    symbol: str
    start_date: date
    end_date: date


# =============================================================================
# OUTPUT: TechnicalAnalysisReport
# =============================================================================


class Levels(BaseModel):
    """Support/resistance price levels."""

    support: list[float] = Field(default_factory=list)
    resistance: list[float] = Field(default_factory=list)


class TrendObservation(BaseModel):
    """One qualitative statement from the trend analyzer."""

    model_config = ConfigDict(frozen=True)

    signal: TrendSignal
    text: str


class LatestIndicators(BaseModel):
    """Latest value of every indicator the analysis uses. None when undefined."""

    sma_20: Optional[float] = None
    sma_50: Optional[float] = None
    sma_200: Optional[float] = None
    ema_12: Optional[float] = None
    ema_26: Optional[float] = None
    rsi_14: Optional[float] = None
    macd: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_histogram: Optional[float] = None
    bollinger_upper: Optional[float] = None
    bollinger_middle: Optional[float] = None
    bollinger_lower: Optional[float] = None


class TechnicalAnalysisReport(BaseModel):
    symbol: str
    latest_price: float
    previous_price: Optional[float] = None
    daily_change_percent: Optional[float] = None
    indicators: LatestIndicators
    levels: Levels
    observations: list[TrendObservation]
