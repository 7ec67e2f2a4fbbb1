# =============================================================================
# tools/transport.py  —  SSE Web App + Path Routing
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the ASGI application main.py serves.  FastMCP provides the
#   Server-Sent Events transport; PathRouter sits in front of it and decides
#   which requests reach it.
#
# ROUTING TABLE:
#   /sse, /sse/...   → MCP event stream (handshake + stream)
#   /messages/...    → MCP client-to-server messages (FastMCP's default path)
#   lifespan events  → MCP app (it starts its session manager there)
#   anything else    → 404, plain text, naming the available path
# =============================================================================

import logging
from typing import Optional

from fastmcp import FastMCP
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

SSE_PATH = "/sse"
MESSAGE_PATH = "/messages/"

NOT_FOUND_TEXT = (
    "NCI PDC MCP Server - Path not found.\n"
    "Available MCP paths:\n"
    f"- {SSE_PATH} (for Server-Sent Events transport)"
)


def is_mcp_path(path: str) -> bool:
    """True for paths that belong to the SSE transport."""
    return path == SSE_PATH or path.startswith(SSE_PATH + "/") or path.startswith(MESSAGE_PATH)


class PathRouter:
    """ASGI wrapper: MCP paths pass through, every other HTTP path gets a 404."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or is_mcp_path(scope["path"]):
            await self.app(scope, receive, send)
            return

        logging.warning(
            f"NCI PDC MCP Server. Requested path {scope['path']} not found. "
            f"Listening for SSE on {SSE_PATH}."
        )
        response = PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
        await response(scope, receive, send)


def create_app(server: Optional[FastMCP] = None) -> PathRouter:
    """Build the routed SSE application for `server` (default: the PDC server)."""
    if server is None:
        from tools.mcp_server import mcp as server

    return PathRouter(server.http_app(path=SSE_PATH, transport="sse"))
