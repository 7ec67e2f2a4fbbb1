# =============================================================================
# main.py  —  Entry Point for the NCI PDC MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads environment variables from .env (if there is one)
#   2. Builds the FastMCP server with the pdc_graphql_query tool
#   3. Wraps it in the SSE web app (tools/transport.py)
#   4. Serves it with uvicorn on MCP_HOST:MCP_PORT
#
# ENVIRONMENT:
#   MCP_HOST               Bind address (default 0.0.0.0)
#   MCP_PORT               Bind port (default 8787)
#   PDC_GRAPHQL_ENDPOINT   Upstream GraphQL URL (default: the public PDC API)
#
# MCP clients connect to http://<host>:<port>/sse.
# =============================================================================

import logging
import os

from dotenv import load_dotenv

# Must happen BEFORE importing the server: tools.mcp_server reads
# PDC_GRAPHQL_ENDPOINT when it builds the module-level server.
load_dotenv()

import uvicorn

from tools.transport import SSE_PATH, create_app

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8787


def get_bind_address() -> tuple[str, int]:
    """Read MCP_HOST / MCP_PORT, falling back to the defaults."""
    host = os.environ.get("MCP_HOST") or DEFAULT_HOST
    port = os.environ.get("MCP_PORT") or str(DEFAULT_PORT)
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"MCP_PORT must be an integer, got {port!r}") from None


def run_server() -> None:
    host, port = get_bind_address()
    app = create_app()
    logging.info(f"NCI PDC MCP Server listening on http://{host}:{port}{SSE_PATH}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
