"""Application entrypoint for the FactorFive scoring MCP server."""

from __future__ import annotations

import asyncio
import logging
import os

from mcp.server.fastmcp import FastMCP
from starlette.responses import JSONResponse, Response

from factorfive_mcp.config.settings import get_settings
from factorfive_mcp.providers.finnhub import FinnhubProvider
from factorfive_mcp.schemas.models import PeerMetrics
from factorfive_mcp.tools.score_tools import register_score_tools
from factorfive_mcp.utils.cache import TTLCache
from factorfive_mcp.utils.http import HttpClient
from factorfive_mcp.utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)


def resolve_transport_mode(configured_mode: str) -> str:
    """Resolve effective transport mode for local vs hosted environments."""

    # Hosted web services must bind an HTTP port.
    if os.getenv("RENDER") and configured_mode == "stdio":
        return "http"
    if configured_mode in {"stdio", "http"}:
        return configured_mode
    if os.getenv("RENDER") or os.getenv("PORT"):
        return "http"
    return "stdio"


def resolve_http_transport(configured_transport: str) -> str:
    """Resolve effective HTTP transport mode for MCP over HTTP."""

    if configured_transport in {"sse", "streamable"}:
        return configured_transport
    return "sse"


async def run() -> None:
    """Initialize services and run MCP server."""

    settings = get_settings()
    configure_logging(settings.log_level)

    http_client = HttpClient(
        timeout_seconds=settings.request_timeout_seconds,
        retry_config=settings.retry,
    )
    provider = FinnhubProvider(settings.finnhub_api_key, http_client)
    peer_cache: TTLCache[PeerMetrics] = TTLCache(settings.peer_cache_ttl_seconds)

    mcp = FastMCP(
        name=settings.app_name,
        log_level=settings.log_level,
        host=settings.host,
        port=settings.port,
        streamable_http_path=settings.mcp_path,
    )
    register_score_tools(mcp, provider, settings, peer_cache)

    resolved_mode = resolve_transport_mode(settings.transport_mode)
    resolved_http_transport = resolve_http_transport(settings.http_transport)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health_check(_: object) -> Response:
        return JSONResponse({"status": "ok", "service": settings.app_name, "mode": resolved_mode})

    LOGGER.info(
        "Starting MCP server",
        extra={"transport_mode": resolved_mode, "http_transport": resolved_http_transport},
    )
    try:
        if resolved_mode == "stdio":
            await mcp.run_stdio_async()
        elif resolved_http_transport == "streamable":
            await mcp.run_streamable_http_async()
        else:
            await mcp.run_sse_async()
    finally:
        await http_client.close()


def main() -> None:
    """Synchronous entrypoint."""

    asyncio.run(run())


if __name__ == "__main__":
    main()
