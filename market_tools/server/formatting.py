"""
Text rendering for tool results.
"""

from typing import Callable, Optional, Sequence

from market_tools.schemas.market import (
    ForecastPeriod,
    NewsArticle,
    PriceBar,
    Quote,
    WeatherAlert,
)
from market_tools.schemas.indicators import (
    BollingerReport,
    EMAReport,
    IndicatorKind,
    IndicatorReport,
    MACDReport,
    NoDataResult,
    RSIReport,
    SMAReport,
    TechnicalAnalysisReport,
    TrendSignal,
)

SIGNAL_ICONS = {
    TrendSignal.POSITIVE_TREND: "📈",
    TrendSignal.NEGATIVE_TREND: "📉",
    TrendSignal.GOLDEN_CROSS: "📈",
    TrendSignal.DEATH_CROSS: "📉",
    TrendSignal.RSI_OVERBOUGHT: "⚠️",
    TrendSignal.RSI_OVERSOLD: "⚠️",
    TrendSignal.RSI_NEUTRAL: "✅",
    TrendSignal.MACD_BULLISH: "📈",
    TrendSignal.MACD_BEARISH: "📉",
    TrendSignal.ABOVE_UPPER_BAND: "⚠️",
    TrendSignal.BELOW_LOWER_BAND: "⚠️",
    TrendSignal.BANDS_CONTRACTING: "📊",
    TrendSignal.HIGH_VOLUME: "📊",
    TrendSignal.LOW_VOLUME: "📊",
}


def _money(value: Optional[float]) -> str:
    return f"${(value or 0):.2f}"


def _number(value: Optional[float]) -> str:
    return f"{(value or 0):.2f}"


# =============================================================================
# WEATHER
# =============================================================================


def format_alert(alert: WeatherAlert) -> str:
    return "\n".join([
        f"🚨 {alert.event or 'Unknown'}",
        f"📍 {alert.area_desc or 'Unknown'}",
        f"⚠️ Severity: {alert.severity or 'Unknown'}",
        f"📰 {alert.headline or 'No headline'}",
        "---",
    ])


def format_alerts(state: str, alerts: Sequence[WeatherAlert]) -> str:
    state = state.upper()
    if not alerts:
        return f"✅ No active alerts for {state}"
    body = "\n".join(format_alert(a) for a in alerts)
    return f"Active Alerts for {state}:\n\n{body}"


def _temperature(period: ForecastPeriod) -> str:
    return "?" if period.temperature is None else f"{period.temperature:g}"


def format_forecast(latitude: float, longitude: float, periods: Optional[Sequence[ForecastPeriod]]) -> str:
    if periods is None:
        return f"🚫 No forecast data available for {latitude}, {longitude}."
    if not periods:
        return "🚫 No forecast periods available."

    lines = [
        f"📅 {p.name}: {_temperature(p)}°{p.temperature_unit}, "
        f"{p.short_forecast}, 🌬️ {p.wind_speed} {p.wind_direction}".rstrip()
        for p in periods
    ]
    return f"🌤 Forecast for ({latitude}, {longitude}):\n\n" + "\n".join(lines)


# =============================================================================
# QUOTES, HISTORY, NEWS
# =============================================================================


def format_quote(quote: Quote) -> str:
    return f"💹 {quote.symbol} is currently at ${quote.price:.2f}."


def format_history(symbol: str, bars: Sequence[PriceBar]) -> str:
    if not bars:
        return f"🚫 No historical data for {symbol} in this range."
    lines = [f"📅 {bar.date.isoformat()}: Close at ${bar.close:.2f}" for bar in bars]
    return f"📊 Historical Data for {symbol}:\n\n" + "\n".join(lines)


def format_news(stock_name: str, start_date: str, end_date: str, articles: Sequence[NewsArticle], limit: int = 5) -> str:
    if not articles:
        return f"📰 No news found for {stock_name} between {start_date} and {end_date}."
    blocks = [f"📌 {a.title}\n🔗 {a.url}" for a in articles[:limit]]
    return f"📰 Top News for {stock_name}:\n\n" + "\n\n".join(blocks)


def format_no_data(result: NoDataResult) -> str:
    return f"🚫 No historical data available for {result.symbol} in the specified range."


# =============================================================================
# SINGLE INDICATOR
# =============================================================================


def _sma_lines(report: SMAReport, start: int) -> list[str]:
    return [f"📅 {p.date}: SMA = ${p.value:.2f}" for p in report.points[start:]]


def _ema_lines(report: EMAReport, start: int) -> list[str]:
    return [f"📅 {p.date}: EMA = ${p.value:.2f}" for p in report.points[start:]]


def _rsi_lines(report: RSIReport, start: int) -> list[str]:
    lines = []
    for p in report.points[start:]:
        level = ""
        if p.value > 70:
            level = " ⚠️ Potentially Overbought"
        elif p.value < 30:
            level = " ⚠️ Potentially Oversold"
        lines.append(f"📅 {p.date}: RSI = {p.value:.2f}{level}")
    return lines


def _macd_lines(report: MACDReport, start: int) -> list[str]:
    lines = []
    for i in range(start, len(report.points)):
        p = report.points[i]
        previous = report.points[i - 1].histogram if i > 0 else None
        signal = ""
        # Histogram expanding away from zero
        if previous is not None and p.histogram > 0 and p.histogram > previous:
            signal = " 📈 Bullish"
        elif previous is not None and p.histogram < 0 and p.histogram < previous:
            signal = " 📉 Bearish"
        lines.append(
            f"📅 {p.date}: MACD = {p.macd:.2f}, Signal = {p.signal:.2f}, "
            f"Histogram = {p.histogram:.2f}{signal}"
        )
    return lines


def _bollinger_lines(report: BollingerReport, start: int) -> list[str]:
    lines = []
    for p in report.points[start:]:
        position = ""
        if p.price > p.upper:
            position = " ⚠️ Above Upper Band"
        elif p.price < p.lower:
            position = " ⚠️ Below Lower Band"
        lines.append(
            f"📅 {p.date}: Upper = ${p.upper:.2f}, Middle = ${p.middle:.2f}, "
            f"Lower = ${p.lower:.2f}, Price = ${p.price:.2f}{position}"
        )
    return lines


def _indicator_title(report: IndicatorReport) -> str:
    if isinstance(report, SMAReport):
        return f"📈 SMA({report.period})"
    if isinstance(report, EMAReport):
        return f"📉 EMA({report.period})"
    if isinstance(report, RSIReport):
        return f"🔍 RSI({report.period})"
    if isinstance(report, MACDReport):
        return f"📊 MACD({report.fast_period},{report.slow_period},{report.signal_period})"
    return f"🎯 Bollinger Bands({report.period}, {report.std_dev:g}σ)"


_LINE_RENDERERS: dict[IndicatorKind, Callable] = {
    IndicatorKind.SMA: _sma_lines,
    IndicatorKind.EMA: _ema_lines,
    IndicatorKind.RSI: _rsi_lines,
    IndicatorKind.MACD: _macd_lines,
    IndicatorKind.BOLLINGER: _bollinger_lines,
}


def format_indicator_report(report: IndicatorReport, tail: int = 10) -> str:
    """Render the last ``tail`` points of an indicator report."""
    title = _indicator_title(report)
    if not report.points:
        return (
            f"🚫 Not enough data to calculate {title.split(' ', 1)[1]} for {report.symbol} "
            f"({report.trading_days} trading days in range)."
        )

    start = max(len(report.points) - tail, 0)
    lines = _LINE_RENDERERS[report.indicator](report, start)
    return (
        f"{title} for {report.symbol}:\n\n" + "\n".join(lines)
        + f"\n\n(Showing the last {len(lines)} data points. "
        f"Request covered {report.trading_days} trading days.)"
    )


# =============================================================================
# COMPOSITE ANALYSIS
# =============================================================================


def format_analysis_report(report: TechnicalAnalysisReport) -> str:
    ind = report.indicators
    change = "N/A" if report.daily_change_percent is None else f"{report.daily_change_percent:.2f}%"
    signal = "N/A" if ind.macd_signal is None else f"{ind.macd_signal:.2f}"

    lines = [
        f"🔍 Technical Analysis for {report.symbol}",
        "",
        f"Current Price: {_money(report.latest_price)}",
        f"Daily Change: {change}",
        "",
        "Key Indicators:",
        f"• SMA(20): {_money(ind.sma_20)}",
        f"• SMA(50): {_money(ind.sma_50)}",
        f"• SMA(200): {_money(ind.sma_200)}",
        f"• EMA(12): {_money(ind.ema_12)}",
        f"• EMA(26): {_money(ind.ema_26)}",
        f"• RSI(14): {_number(ind.rsi_14)}",
        f"• MACD: {_number(ind.macd)}",
        f"• MACD Signal: {signal}",
        f"• MACD Histogram: {_number(ind.macd_histogram)}",
        f"• Bollinger Upper: {_money(ind.bollinger_upper)}",
        f"• Bollinger Middle: {_money(ind.bollinger_middle)}",
        f"• Bollinger Lower: {_money(ind.bollinger_lower)}",
        "",
    ]

    levels = report.levels
    if levels.resistance or levels.support:
        lines.append("Support & Resistance:")
        if levels.resistance:
            lines.append("• Resistance: " + ", ".join(_money(v) for v in levels.resistance))
        if levels.support:
            lines.append("• Support: " + ", ".join(_money(v) for v in levels.support))
        lines.append("")

    lines.append("Analysis Summary:")
    for observation in report.observations:
        lines.append(f"• {SIGNAL_ICONS[observation.signal]} {observation.text}")

    return "\n".join(lines) + "\n"
