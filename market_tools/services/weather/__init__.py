"""
Weather Service

National Weather Service alerts and forecasts.
"""

from market_tools.services.weather.service import WeatherService

__all__ = [
    "WeatherService",
]
