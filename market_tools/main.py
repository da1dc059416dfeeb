"""
Market Tools - MCP Server Application

Serves the weather and stock-market tools over stdio or streamable HTTP.
"""

import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from market_tools.core.config import Settings, get_settings, setup_logging
from market_tools.server.factory import build_market_tools, create_server
from market_tools.server.sessions import SessionRegistry, SessionTrackingMiddleware
from market_tools.server.tools import MarketTools

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    tools: Optional[MarketTools] = None,
) -> FastAPI:
    """Build the HTTP application hosting the MCP streamable-HTTP endpoint."""
    settings = settings or get_settings()
    tools = tools or build_market_tools(settings)
    mcp = create_server(settings, tools)
    sessions = SessionRegistry()

    # Must be built before session_manager is available
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")
        logger.info(f"Environment: {settings.environment}")

        async with mcp.session_manager.run():
            yield

        logger.info("Shutting down...")
        sessions.clear()
        await tools.aclose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Weather and stock-market tools over the Model Context Protocol.",
        lifespan=lifespan,
    )
    app.state.sessions = sessions
    app.state.mcp = mcp

    app.add_middleware(SessionTrackingMiddleware, registry=sessions)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "sessions": len(sessions),
        }

    @app.get("/.well-known/mcp/health")
    async def mcp_health_check():
        return {"jsonrpc": "2.0", "result": {"status": "ok"}, "id": None}

    app.mount("/", mcp_app)
    return app


async def serve_stdio(settings: Optional[Settings] = None) -> None:
    """Serve over stdin/stdout until the client disconnects."""
    settings = settings or get_settings()
    tools = build_market_tools(settings)
    mcp = create_server(settings, tools)
    logger.info(f"Serving {settings.app_name} over stdio")
    try:
        await mcp.run_stdio_async()
    finally:
        await tools.aclose()


def run(argv: Optional[list] = None) -> None:
    """Console entry point."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Weather and stock-market MCP server")
    parser.add_argument("--transport", choices=["stdio", "http"], default=settings.transport)
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    setup_logging()

    if args.transport == "stdio":
        asyncio.run(serve_stdio(settings))
        return

    settings = settings.model_copy(update={"host": args.host, "port": args.port})
    logger.info(f"MCP server listening on http://{args.host}:{args.port}/mcp")
    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
