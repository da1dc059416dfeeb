"""
Application Configuration

All settings loaded from environment variables.
"""

import logging
import sys
from functools import lru_cache
from typing import Literal, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "weather-stock"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "0.0.0.0"
    port: int = 3333
    stateless_http: bool = False

    # News API
    news_api_key: Optional[str] = None
    news_api_base_url: str = "https://newsapi.org/v2"
    news_page_size: int = 5

    # National Weather Service
    nws_api_base: str = "https://api.weather.gov"
    nws_user_agent: str = "weather-app/1.0"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Technical analysis
    report_tail_size: int = 10
    levels_lookback: int = 30
    levels_margin: int = 10
    volume_lookback: int = 10
    bandwidth_threshold: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging. Output goes to stderr so stdio transport keeps stdout clean."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


settings = get_settings()
