"""
MCP Server

Tool registration, text rendering and HTTP session tracking.
"""

from market_tools.server.factory import build_market_tools, create_server
from market_tools.server.sessions import (
    SessionInfo,
    SessionRegistry,
    SessionTrackingMiddleware,
)
from market_tools.server.tools import MarketTools, register_tools

__all__ = [
    "build_market_tools",
    "create_server",
    "SessionInfo",
    "SessionRegistry",
    "SessionTrackingMiddleware",
    "MarketTools",
    "register_tools",
]
