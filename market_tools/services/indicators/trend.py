"""
Trend Analyzer

Turns the latest indicator values and recent volume into an ordered list of
qualitative observations. Rules run in a fixed order and are independent of
each other.

Rules 2-5 treat an undefined indicator as 0 before comparing, so e.g. a series
too short for RSI(14) reads as "oversold".
"""

from typing import Optional, Sequence

import numpy as np

from market_tools.schemas.indicators import (
    LatestIndicators,
    TrendObservation,
    TrendSignal,
)
from market_tools.schemas.market import PriceBar

OVERBOUGHT_RSI = 70
OVERSOLD_RSI = 30
HIGH_VOLUME_RATIO = 1.5
LOW_VOLUME_RATIO = 0.5


def _or_zero(value: Optional[float]) -> float:
    return value if value is not None else 0.0


def _moving_average_alignment(
    price: float, latest: LatestIndicators
) -> Optional[TrendObservation]:
    sma_20, sma_50 = latest.sma_20, latest.sma_50
    if sma_20 is None or sma_50 is None:
        return None
    if price > sma_20 > sma_50:
        return TrendObservation(
            signal=TrendSignal.POSITIVE_TREND,
            text="Price is above SMA(20) and SMA(50), suggesting a positive trend.",
        )
    if price < sma_20 < sma_50:
        return TrendObservation(
            signal=TrendSignal.NEGATIVE_TREND,
            text="Price is below SMA(20) and SMA(50), suggesting a negative trend.",
        )
    return None


def _long_term_cross(latest: LatestIndicators) -> Optional[TrendObservation]:
    sma_50, sma_200 = _or_zero(latest.sma_50), _or_zero(latest.sma_200)
    if sma_50 > sma_200:
        return TrendObservation(
            signal=TrendSignal.GOLDEN_CROSS,
            text="SMA(50) is above SMA(200), indicating a long-term uptrend (Golden Cross pattern).",
        )
    if sma_50 < sma_200:
        return TrendObservation(
            signal=TrendSignal.DEATH_CROSS,
            text="SMA(50) is below SMA(200), indicating a long-term downtrend (Death Cross pattern).",
        )
    return None


def _rsi_band(latest: LatestIndicators) -> TrendObservation:
    value = _or_zero(latest.rsi_14)
    if value > OVERBOUGHT_RSI:
        return TrendObservation(
            signal=TrendSignal.RSI_OVERBOUGHT,
            text="RSI(14) is above 70, suggesting the stock may be overbought.",
        )
    if value < OVERSOLD_RSI:
        return TrendObservation(
            signal=TrendSignal.RSI_OVERSOLD,
            text="RSI(14) is below 30, suggesting the stock may be oversold.",
        )
    return TrendObservation(
        signal=TrendSignal.RSI_NEUTRAL,
        text=f"RSI(14) is at {value:.2f}, indicating neutral momentum.",
    )


def _macd_momentum(latest: LatestIndicators) -> TrendObservation:
    if _or_zero(latest.macd) > _or_zero(latest.macd_signal):
        return TrendObservation(
            signal=TrendSignal.MACD_BULLISH,
            text="MACD is above signal line, suggesting bullish momentum.",
        )
    return TrendObservation(
        signal=TrendSignal.MACD_BEARISH,
        text="MACD is below signal line, suggesting bearish momentum.",
    )


def _bollinger_position(
    price: float, latest: LatestIndicators, bandwidth_threshold: float
) -> Optional[TrendObservation]:
    upper, lower = _or_zero(latest.bollinger_upper), _or_zero(latest.bollinger_lower)
    if price > upper:
        return TrendObservation(
            signal=TrendSignal.ABOVE_UPPER_BAND,
            text="Price is above the upper Bollinger Band, potentially indicating overbought conditions.",
        )
    if price < lower:
        return TrendObservation(
            signal=TrendSignal.BELOW_LOWER_BAND,
            text="Price is below the lower Bollinger Band, potentially indicating oversold conditions.",
        )
    # Absolute price units, not normalised by price level
    if upper - lower < bandwidth_threshold:
        return TrendObservation(
            signal=TrendSignal.BANDS_CONTRACTING,
            text="Bollinger Bands are contracting, suggesting a potential upcoming volatility increase.",
        )
    return None


def _volume_interest(
    bars: Sequence[PriceBar], volume_lookback: int
) -> Optional[TrendObservation]:
    volumes = [bar.volume for bar in bars]
    # Divides by the lookback even when fewer bars are available
    avg_volume = sum(volumes[-volume_lookback:]) / volume_lookback
    latest_volume = volumes[-1]

    if latest_volume > avg_volume * HIGH_VOLUME_RATIO:
        return TrendObservation(
            signal=TrendSignal.HIGH_VOLUME,
            text="Trading volume is significantly higher than average, suggesting strong market interest.",
        )
    if latest_volume < avg_volume * LOW_VOLUME_RATIO:
        return TrendObservation(
            signal=TrendSignal.LOW_VOLUME,
            text="Trading volume is significantly lower than average, suggesting weak market interest.",
        )
    return None


def analyze_trend(
    bars: Sequence[PriceBar],
    closes: Sequence[float],
    latest: LatestIndicators,
    bandwidth_threshold: float = 10.0,
    volume_lookback: int = 10,
) -> list[TrendObservation]:
    """
    Evaluate every trend rule against the latest values.

    Args:
        bars: Price bars, oldest first (non-empty)
        closes: Closing prices of ``bars``
        latest: Latest value of each indicator, None where undefined
        bandwidth_threshold: Band width below which bands count as contracting
        volume_lookback: Bars in the trailing average volume

    Returns:
        Observations in rule order
    """
    if len(bars) == 0:
        return []

    price = float(np.asarray(closes, dtype=float)[-1])

    candidates = [
        _moving_average_alignment(price, latest),
        _long_term_cross(latest),
        _rsi_band(latest),
        _macd_momentum(latest),
        _bollinger_position(price, latest, bandwidth_threshold),
        _volume_interest(bars, volume_lookback),
    ]
    return [observation for observation in candidates if observation is not None]
