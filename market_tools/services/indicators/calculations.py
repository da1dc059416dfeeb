"""
Technical Indicator Calculations

Pure NumPy implementations of technical indicators.
All math is deterministic.

Every function returns only defined values: the output starts at the first input
index where the indicator has consumed its warm-up, so output[j] corresponds to
input[warmup + j].
"""

import numpy as np
from typing import Optional, Sequence

from market_tools.services.base import InvalidParameter

_SERVICE = "IndicatorCalculations"


def _check_period(name: str, period: int, available: Optional[int] = None) -> None:
    if period < 1:
        raise InvalidParameter(_SERVICE, f"{name} period must be >= 1, got {period}")
    if available is not None and period > available:
        raise InvalidParameter(
            _SERVICE,
            f"{name} period {period} exceeds the {available} values available",
            details={"period": period, "available": available},
        )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: Sequence[float], period: int) -> np.ndarray:
    """Simple Moving Average. Length len(data) - period + 1."""
    data = np.asarray(data, dtype=float)
    _check_period("SMA", period, len(data))

    result = np.empty(len(data) - period + 1)
    for i in range(len(result)):
        result[i] = np.mean(data[i : i + period])
    return result


def ema(data: Sequence[float], period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the first SMA value."""
    data = np.asarray(data, dtype=float)
    _check_period("EMA", period, len(data))

    result = np.empty(len(data) - period + 1)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[0] = np.mean(data[:period])

    for i in range(1, len(result)):
        result[i] = (data[period - 1 + i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: Sequence[float], period: int = 14) -> np.ndarray:
    """
    Relative Strength Index with Wilder smoothing.

    Length len(closes) - period; empty when fewer than period + 1 closes.
    """
    closes = np.asarray(closes, dtype=float)
    _check_period("RSI", period)
    if len(closes) < period + 1:
        return np.empty(0)

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.empty(len(closes) - period)
    result[0] = _rsi_value(avg_gain, avg_loss)

    # Subsequent values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i - period + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def macd(
    closes: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram), all of length
    len(closes) - (slow_period + signal_period - 2). Steps before the signal line
    is defined are dropped from all three arrays, so index j means the same bar
    in each of them.
    """
    closes = np.asarray(closes, dtype=float)
    _check_period("MACD fast", fast_period)
    _check_period("MACD slow", slow_period)
    _check_period("MACD signal", signal_period)
    if fast_period >= slow_period:
        raise InvalidParameter(
            _SERVICE,
            f"MACD fast period ({fast_period}) must be shorter than slow period ({slow_period})",
        )

    if len(closes) <= slow_period + signal_period - 2:
        return np.empty(0), np.empty(0), np.empty(0)

    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    # Both EMAs end on the last close; trim the fast one to the slow one's start
    macd_line = fast_ema[slow_period - fast_period :] - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)
    macd_line = macd_line[signal_period - 1 :]

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: Sequence[float], period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands using the population standard deviation of each window.

    Returns: (upper, middle, lower)
    """
    closes = np.asarray(closes, dtype=float)
    if std_dev < 0:
        raise InvalidParameter(_SERVICE, f"Bollinger std_dev must be >= 0, got {std_dev}")

    middle = sma(closes, period)

    std = np.empty(len(middle))
    for i in range(len(middle)):
        std[i] = np.std(closes[i : i + period])

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def _has_similar(levels: list[float], candidate: float, tolerance: float) -> bool:
    if candidate == 0:
        return False
    return any(abs(level - candidate) / candidate < tolerance for level in levels)


def find_support_resistance(
    prices: Sequence[float],
    lookback: int = 30,
    margin: int = 10,
    tolerance: float = 0.01,
    max_levels: int = 2,
) -> tuple[list[float], list[float]]:
    """
    Find support and resistance levels using strict local minima/maxima.

    Scans the trailing ``lookback`` prices from index ``margin`` to the
    second-to-last one. A candidate within ``tolerance`` (relative) of a level
    already recorded for the same side is discarded.

    Both lists are sorted descending. Resistance keeps the first ``max_levels``
    (highest); support keeps the last ``max_levels`` (lowest).

    Returns: (support_levels, resistance_levels)
    """
    if margin < 1:
        raise InvalidParameter(_SERVICE, f"support/resistance margin must be >= 1, got {margin}")

    recent = [float(p) for p in prices][-lookback:]

    resistance: list[float] = []
    support: list[float] = []

    for i in range(margin, len(recent) - 1):
        price = recent[i]
        if price > recent[i - 1] and price > recent[i + 1]:
            if not _has_similar(resistance, price, tolerance):
                resistance.append(price)

        if price < recent[i - 1] and price < recent[i + 1]:
            if not _has_similar(support, price, tolerance):
                support.append(price)

    resistance.sort(reverse=True)
    support.sort(reverse=True)

    return support[max(len(support) - max_levels, 0) :], resistance[:max_levels]
