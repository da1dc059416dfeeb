"""
Indicator Service Implementation

Fetches bars through the HistoricalDataProvider, runs them through the engine,
aligns the output to calendar dates and builds typed reports.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from market_tools.core.config import Settings, get_settings
from market_tools.schemas.market import Interval, PriceBar
from market_tools.schemas.indicators import (
    AnalysisRequest,
    BollingerPoint,
    BollingerReport,
    EMAReport,
    IndicatorKind,
    IndicatorParams,
    IndicatorReport,
    IndicatorRequest,
    LatestIndicators,
    Levels,
    MACDPoint,
    MACDReport,
    NoDataResult,
    RSIReport,
    SMAReport,
    TechnicalAnalysisReport,
    ValuePoint,
)
from market_tools.services.data_ingestion.interface import HistoricalDataProvider
from market_tools.services.indicators.interface import IndicatorServiceInterface
from market_tools.services.indicators.alignment import AlignedPoint, align
from market_tools.services.indicators.calculations import find_support_resistance
from market_tools.services.indicators.engine import (
    IndicatorEngine,
    get_indicator_engine,
)
from market_tools.services.indicators.trend import analyze_trend

logger = logging.getLogger(__name__)

# Parameters behind each value of the composite analysis
SMA_20 = IndicatorParams(period=20)
SMA_50 = IndicatorParams(period=50)
SMA_200 = IndicatorParams(period=200)
EMA_12 = IndicatorParams(period=12)
EMA_26 = IndicatorParams(period=26)
RSI_14 = IndicatorParams(period=14)
MACD_STANDARD = IndicatorParams(fast_period=12, slow_period=26, signal_period=9)
BOLLINGER_20 = IndicatorParams(period=20, std_dev=2.0)


def _closes(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.close for bar in bars], dtype=float)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Service.

    Holds only collaborators; every report is built from the bars of a single
    request.
    """

    def __init__(
        self,
        provider: HistoricalDataProvider,
        engine: Optional[IndicatorEngine] = None,
        settings: Optional[Settings] = None,
    ):
        self.provider = provider
        self.engine = engine or get_indicator_engine()
        self.settings = settings or get_settings()

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(
        self, input_data: IndicatorRequest
    ) -> Union[IndicatorReport, NoDataResult]:
        """Compute and align one indicator for a symbol."""
        bars = await self.provider.fetch(
            input_data.symbol, input_data.start_date, input_data.end_date, Interval.D1
        )
        if not bars:
            logger.info(f"No bars for {input_data.symbol} {input_data.start_date}..{input_data.end_date}")
            return NoDataResult(
                symbol=input_data.symbol,
                start_date=input_data.start_date,
                end_date=input_data.end_date,
            )

        return self.build_indicator_report(
            input_data.symbol, bars, input_data.indicator, input_data.to_params()
        )

    async def analyze(
        self, input_data: AnalysisRequest
    ) -> Union[TechnicalAnalysisReport, NoDataResult]:
        """Run the composite analysis for a symbol."""
        bars = await self.provider.fetch(
            input_data.symbol, input_data.start_date, input_data.end_date, Interval.D1
        )
        if not bars:
            logger.info(f"No bars for {input_data.symbol} {input_data.start_date}..{input_data.end_date}")
            return NoDataResult(
                symbol=input_data.symbol,
                start_date=input_data.start_date,
                end_date=input_data.end_date,
            )

        return self.build_analysis(input_data.symbol, bars)

    # =========================================================================
    # SINGLE INDICATOR
    # =========================================================================

    def align_indicator(
        self,
        bars: Sequence[PriceBar],
        kind: IndicatorKind,
        params: IndicatorParams,
    ) -> list[AlignedPoint]:
        """
        Compute ``kind`` over the closes of ``bars`` and pair it with bar dates.

        Returns an empty list when there are too few bars for one value.
        """
        if len(bars) < self.engine.min_length(kind, params):
            return []

        series = self.engine.compute(kind, _closes(bars), params)
        return align([bar.date for bar in bars], series, self.engine.warmup(kind, params))

    def build_indicator_report(
        self,
        symbol: str,
        bars: Sequence[PriceBar],
        kind: IndicatorKind,
        params: IndicatorParams,
    ) -> IndicatorReport:
        kind = IndicatorKind(kind)
        aligned = self.align_indicator(bars, kind, params)
        trading_days = len(bars)
        logger.debug(f"{kind.value} for {symbol}: {len(aligned)} points over {trading_days} bars")

        if kind == IndicatorKind.SMA:
            return SMAReport(
                symbol=symbol,
                trading_days=trading_days,
                period=params.period,
                points=[ValuePoint(date=p.date, value=p.value) for p in aligned],
            )

        if kind == IndicatorKind.EMA:
            return EMAReport(
                symbol=symbol,
                trading_days=trading_days,
                period=params.period,
                points=[ValuePoint(date=p.date, value=p.value) for p in aligned],
            )

        if kind == IndicatorKind.RSI:
            return RSIReport(
                symbol=symbol,
                trading_days=trading_days,
                period=params.period,
                points=[ValuePoint(date=p.date, value=p.value) for p in aligned],
            )

        if kind == IndicatorKind.MACD:
            return MACDReport(
                symbol=symbol,
                trading_days=trading_days,
                fast_period=params.fast_period,
                slow_period=params.slow_period,
                signal_period=params.signal_period,
                points=[
                    MACDPoint(
                        date=p.date,
                        macd=p.value.macd,
                        signal=p.value.signal,
                        histogram=p.value.histogram,
                    )
                    for p in aligned
                ],
            )

        # Bollinger
        warmup = self.engine.warmup(kind, params)
        return BollingerReport(
            symbol=symbol,
            trading_days=trading_days,
            period=params.period,
            std_dev=params.std_dev,
            points=[
                BollingerPoint(
                    date=p.date,
                    upper=p.value.upper,
                    middle=p.value.middle,
                    lower=p.value.lower,
                    price=bars[warmup + j].close,
                )
                for j, p in enumerate(aligned)
            ],
        )

    # =========================================================================
    # COMPOSITE ANALYSIS
    # =========================================================================

    def _latest(self, kind: IndicatorKind, closes: np.ndarray, params: IndicatorParams):
        """Last value of an indicator, or None when the closes are too few."""
        if len(closes) < self.engine.min_length(kind, params):
            return None
        series = self.engine.compute(kind, closes, params)
        if len(series) == 0:
            return None
        return series[len(series) - 1]

    def latest_indicators(self, closes: np.ndarray) -> LatestIndicators:
        macd_value = self._latest(IndicatorKind.MACD, closes, MACD_STANDARD)
        bands = self._latest(IndicatorKind.BOLLINGER, closes, BOLLINGER_20)

        def _float(value) -> Optional[float]:
            return float(value) if value is not None else None

        return LatestIndicators(
            sma_20=_float(self._latest(IndicatorKind.SMA, closes, SMA_20)),
            sma_50=_float(self._latest(IndicatorKind.SMA, closes, SMA_50)),
            sma_200=_float(self._latest(IndicatorKind.SMA, closes, SMA_200)),
            ema_12=_float(self._latest(IndicatorKind.EMA, closes, EMA_12)),
            ema_26=_float(self._latest(IndicatorKind.EMA, closes, EMA_26)),
            rsi_14=_float(self._latest(IndicatorKind.RSI, closes, RSI_14)),
            macd=macd_value.macd if macd_value else None,
            macd_signal=macd_value.signal if macd_value else None,
            macd_histogram=macd_value.histogram if macd_value else None,
            bollinger_upper=bands.upper if bands else None,
            bollinger_middle=bands.middle if bands else None,
            bollinger_lower=bands.lower if bands else None,
        )

    def build_analysis(self, symbol: str, bars: Sequence[PriceBar]) -> TechnicalAnalysisReport:
        closes = _closes(bars)
        latest_price = float(closes[-1])
        previous_price = float(closes[-2]) if len(closes) > 1 else None

        daily_change = None
        if previous_price:
            daily_change = (latest_price - previous_price) / previous_price * 100

        latest = self.latest_indicators(closes)

        support, resistance = find_support_resistance(
            closes,
            lookback=self.settings.levels_lookback,
            margin=self.settings.levels_margin,
        )

        observations = analyze_trend(
            bars,
            closes,
            latest,
            bandwidth_threshold=self.settings.bandwidth_threshold,
            volume_lookback=self.settings.volume_lookback,
        )

        return TechnicalAnalysisReport(
            symbol=symbol,
            latest_price=latest_price,
            previous_price=previous_price,
            daily_change_percent=daily_change,
            indicators=latest,
            levels=Levels(support=support, resistance=resistance),
            observations=observations,
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True
