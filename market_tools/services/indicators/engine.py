"""
Indicator Engine

Puts every indicator behind one capability:

    engine.compute(kind, closes, params) -> IndicatorSeries
    engine.warmup(kind, params)          -> int

Each kind is an ``Indicator`` strategy registered with the engine. The warm-up of
a strategy is a fixed formula of its parameters, never inferred from its output,
so callers can align results without inspecting them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Sequence, Union

import numpy as np

from market_tools.schemas.indicators import IndicatorKind, IndicatorParams
from market_tools.services.base import InvalidParameter
from market_tools.services.indicators.calculations import (
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
)


# =============================================================================
# SERIES TYPES
# =============================================================================


class MACDValue(NamedTuple):
    macd: float
    signal: float
    histogram: float


class BandValue(NamedTuple):
    upper: float
    middle: float
    lower: float


@dataclass(frozen=True)
class MACDSeries:
    """MACD line, signal line and histogram; index-aligned."""

    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray

    def __len__(self) -> int:
        return len(self.macd)

    def __getitem__(self, index: int) -> MACDValue:
        return MACDValue(
            float(self.macd[index]),
            float(self.signal[index]),
            float(self.histogram[index]),
        )


@dataclass(frozen=True)
class BandSeries:
    """Upper, middle and lower Bollinger bands; index-aligned."""

    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray

    def __len__(self) -> int:
        return len(self.middle)

    def __getitem__(self, index: int) -> BandValue:
        return BandValue(
            float(self.upper[index]),
            float(self.middle[index]),
            float(self.lower[index]),
        )


IndicatorSeries = Union[np.ndarray, MACDSeries, BandSeries]


# =============================================================================
# STRATEGIES
# =============================================================================


class Indicator(ABC):
    """One indicator kind: how much warm-up it needs and how to compute it."""

    kind: IndicatorKind

    @abstractmethod
    def warmup(self, params: IndicatorParams) -> int:
        """Leading closes consumed before the first defined output."""
        pass

    @abstractmethod
    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> IndicatorSeries:
        pass

    def min_length(self, params: IndicatorParams) -> int:
        """Fewest closes that produce at least one output value."""
        return self.warmup(params) + 1


class SMAIndicator(Indicator):
    kind = IndicatorKind.SMA

    def warmup(self, params: IndicatorParams) -> int:
        return params.period - 1

    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> np.ndarray:
        return sma(closes, params.period)


class EMAIndicator(Indicator):
    kind = IndicatorKind.EMA

    def warmup(self, params: IndicatorParams) -> int:
        return params.period - 1

    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> np.ndarray:
        return ema(closes, params.period)


class RSIIndicator(Indicator):
    kind = IndicatorKind.RSI

    def warmup(self, params: IndicatorParams) -> int:
        return params.period

    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> np.ndarray:
        return rsi(closes, params.period)


class MACDIndicator(Indicator):
    kind = IndicatorKind.MACD

    def warmup(self, params: IndicatorParams) -> int:
        return params.slow_period + params.signal_period - 2

    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> MACDSeries:
        line, signal, histogram = macd(
            closes, params.fast_period, params.slow_period, params.signal_period
        )
        return MACDSeries(macd=line, signal=signal, histogram=histogram)


class BollingerIndicator(Indicator):
    kind = IndicatorKind.BOLLINGER

    def warmup(self, params: IndicatorParams) -> int:
        return params.period - 1

    def calculate(self, closes: np.ndarray, params: IndicatorParams) -> BandSeries:
        upper, middle, lower = bollinger_bands(closes, params.period, params.std_dev)
        return BandSeries(upper=upper, middle=middle, lower=lower)


def default_indicators() -> list[Indicator]:
    return [
        SMAIndicator(),
        EMAIndicator(),
        RSIIndicator(),
        MACDIndicator(),
        BollingerIndicator(),
    ]


# =============================================================================
# ENGINE
# =============================================================================


class IndicatorEngine:
    """Registry of indicator strategies keyed by kind. Holds no per-call state."""

    def __init__(self, indicators: Optional[Iterable[Indicator]] = None):
        self._registry: dict[IndicatorKind, Indicator] = {}
        for indicator in indicators if indicators is not None else default_indicators():
            self.register(indicator)

    def register(self, indicator: Indicator) -> None:
        """Add or replace the strategy backing ``indicator.kind``."""
        self._registry[IndicatorKind(indicator.kind)] = indicator

    @property
    def kinds(self) -> list[IndicatorKind]:
        return list(self._registry)

    def get(self, kind: Union[IndicatorKind, str]) -> Indicator:
        try:
            return self._registry[IndicatorKind(kind)]
        except (KeyError, ValueError):
            raise InvalidParameter(
                "IndicatorEngine",
                f"Unknown indicator: {kind}",
                details={"supported": [k.value for k in self._registry]},
            )

    def warmup(self, kind: Union[IndicatorKind, str], params: IndicatorParams) -> int:
        return self.get(kind).warmup(params)

    def min_length(self, kind: Union[IndicatorKind, str], params: IndicatorParams) -> int:
        return self.get(kind).min_length(params)

    def compute(
        self,
        kind: Union[IndicatorKind, str],
        closes: Sequence[float],
        params: IndicatorParams,
    ) -> IndicatorSeries:
        """Compute one indicator over a closing-price sequence."""
        return self.get(kind).calculate(np.asarray(closes, dtype=float), params)


# Default engine; strategies are stateless so one instance serves every request
_engine_instance: Optional[IndicatorEngine] = None


def get_indicator_engine() -> IndicatorEngine:
    """Get or create the default indicator engine."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = IndicatorEngine()
    return _engine_instance
