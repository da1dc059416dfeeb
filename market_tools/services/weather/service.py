"""
Weather Service

Active alerts and forecasts from the US National Weather Service
(https://api.weather.gov). Failed requests are logged and read as "no data".
"""

import logging
from typing import Any, Optional

import aiohttp

from market_tools.core.config import Settings, get_settings
from market_tools.schemas.market import ForecastPeriod, WeatherAlert

logger = logging.getLogger(__name__)


class WeatherService:
    """Client for api.weather.gov."""

    name = "WeatherService"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.http_timeout_seconds),
                headers={
                    "User-Agent": self.settings.nws_user_agent,
                    "Accept": "application/geo+json",
                },
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_data(self, url: str, params: Optional[dict] = None) -> Optional[dict[str, Any]]:
        """GET a JSON document, or None on any failure."""
        session = await self._ensure_session()
        try:
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json(content_type=None)
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error fetching data from {url}: {e}")
            return None

    async def get_alerts(self, state: str) -> list[WeatherAlert]:
        """Active alerts for a two-letter state code."""
        data = await self.fetch_data(
            f"{self.settings.nws_api_base}/alerts", params={"area": state.upper()}
        )
        if not data:
            return []

        alerts = []
        for feature in data.get("features") or []:
            props = feature.get("properties") or {}
            alerts.append(
                WeatherAlert(
                    event=props.get("event"),
                    area_desc=props.get("areaDesc"),
                    severity=props.get("severity"),
                    headline=props.get("headline"),
                )
            )
        return alerts

    async def get_forecast(self, latitude: float, longitude: float) -> Optional[list[ForecastPeriod]]:
        """
        Forecast periods for a point.

        Returns:
            None when the point has no forecast office, otherwise the periods
            (possibly empty)
        """
        points = await self.fetch_data(
            f"{self.settings.nws_api_base}/points/{latitude:.4f},{longitude:.4f}"
        )
        forecast_url = ((points or {}).get("properties") or {}).get("forecast")
        if not forecast_url:
            return None

        forecast = await self.fetch_data(forecast_url)
        periods = ((forecast or {}).get("properties") or {}).get("periods") or []

        return [
            ForecastPeriod(
                name=p.get("name", ""),
                temperature=p.get("temperature"),
                temperature_unit=p.get("temperatureUnit") or "F",
                short_forecast=p.get("shortForecast") or "",
                wind_speed=p.get("windSpeed") or "",
                wind_direction=p.get("windDirection") or "",
            )
            for p in periods
        ]
