# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (NCI PDC GraphQL)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers the single MCP tool this server offers, `pdc_graphql_query`.
#   The tool is a thin wrapper around core/forwarder.py: it logs the call,
#   forwards the query, and returns the Result Envelope as pretty-printed
#   JSON text.
#
# HOW IT WORKS (the flow):
#   1. The agent calls "pdc_graphql_query" with a query (and maybe variables)
#   2. FastMCP validates the arguments against the tool's input schema
#   3. The tool hands them to a QueryForwarder
#   4. The forwarder POSTs to PDC and classifies the answer
#   5. The envelope goes back as one text content block
#
# COMPOSITION, NOT INHERITANCE:
#   create_server() builds a fresh FastMCP instance and registers the tool
#   around whatever forwarder it is given.  Tests pass a forwarder pointed at
#   a local fake PDC; production uses the module-level `mcp` below.
#
# RUNNING THIS SERVER:
#   a) Over SSE (the normal deployment):  python main.py
#   b) Over stdio, for local MCP clients:  python -m tools.mcp_server
# =============================================================================

import json
import logging
import os
import sys
from typing import Annotated, Any, Optional

from fastmcp import FastMCP
from pydantic import Field

from core.forwarder import QueryForwarder
from core.models import PDC_GRAPHQL_ENDPOINT, ForwarderSettings

# =============================================================================
# Logging Setup
# =============================================================================
# Everything goes to STDERR.  Under the stdio transport STDOUT carries the
# MCP JSON stream, and a stray log line there corrupts it.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for response JSON
#     - YELLOW for intermediate status/progress messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

# Log previews of agent input and PDC output are cut to these lengths.
_QUERY_PREVIEW = 200
_VARIABLES_PREVIEW = 150
_RESPONSE_PREVIEW = 500

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log a preview of the tool response as compact JSON in GREEN, then return it."""
    compact = json.dumps(result, separators=(",", ":"))
    if len(compact) > _RESPONSE_PREVIEW:
        compact = compact[:_RESPONSE_PREVIEW] + "..."
    logging.info(f"{_GREEN}  ← {tool_name} response: {compact}{_RESET}")
    return result


# =============================================================================
# Server identity and tool contract
# =============================================================================
# The agent reads TOOL_DESCRIPTION to decide WHEN and HOW to call the tool.
# PDC has two habits an agent will not guess on its own: most detail queries
# need `acceptDUA: true` inside the query text, and studies are versioned.
# =============================================================================
SERVER_NAME = "NciPdcExplorer"
SERVER_VERSION = "0.1.0"
SERVER_INSTRUCTIONS = (
    "MCP Server for querying the NCI Proteomic Data Commons (PDC) GraphQL API. "
    "PDC provides access to publicly available cancer-related proteomic datasets "
    "and associated metadata."
)

TOOL_NAME = "pdc_graphql_query"
TOOL_DESCRIPTION = (
    "Executes a GraphQL query against the NCI Proteomic Data Commons (PDC) API "
    f"({PDC_GRAPHQL_ENDPOINT}). "
    "PDC provides access to publicly available cancer-related proteomic datasets and "
    "associated metadata (biospecimen, clinical, etc.). "
    "Many queries require `acceptDUA: true` as an argument within the query string itself "
    "(e.g., `case(..., acceptDUA: true)` or `fileMetadata(..., acceptDUA: true)`). "
    "PDC studies can have multiple versions. By default, queries by PDC study ID "
    "(e.g., PDC000121) return data for the latest version. Queries by UUID-based study ID "
    "target specific versions. "
    "For example, to find information about a case: "
    "'{ case(case_submitter_id: \"01BR001\" acceptDUA: true) "
    "{ case_submitter_id project_submitter_id disease_type } }'. "
    "To find metadata for a file: "
    "'{ fileMetadata(file_id: \"00046804-1b57-11e9-9ac1-005056921935\" acceptDUA: true) "
    "{ file_name file_size md5sum data_category } }'. "
    "Use GraphQL introspection for schema discovery: "
    "'{ __schema { queryType { name } types { name kind description "
    "fields { name args { name type { name ofType { name } } } } } } }'. "
    "Refer to the PDC GraphQL API documentation (schema available via introspection or "
    "the PDC website) for more examples and details. If a query fails, check the syntax, "
    "required arguments like `acceptDUA`, and retry."
)

QUERY_DESCRIPTION = (
    "The GraphQL query string to execute against the NCI PDC GraphQL API. "
    "Example: '{ case(case_submitter_id: \"01BR001\" acceptDUA: true) "
    "{ project_submitter_id disease_type } }'. "
    "Use introspection queries like '{ __schema { queryType { name } types { name kind } } }' "
    "to discover the schema."
)

VARIABLES_DESCRIPTION = (
    "Optional dictionary of variables for the GraphQL query. "
    "Example: { \"caseId\": \"01BR001\" }"
)


def format_envelope(result: dict) -> str:
    """Pretty-print a Result Envelope for the text content block."""
    return json.dumps(result, indent=2, ensure_ascii=False)


# =============================================================================
# Server factory
# =============================================================================
def create_server(forwarder: Optional[QueryForwarder] = None) -> FastMCP:
    """Build a FastMCP server exposing `pdc_graphql_query` over `forwarder`.

    Args:
        forwarder: The QueryForwarder the tool calls.  Defaults to one aimed
            at the public PDC endpoint.

    Returns:
        A FastMCP server with the tool registered, ready for any transport.
    """
    forwarder = forwarder or QueryForwarder()
    server = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS, version=SERVER_VERSION)

    @server.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    def pdc_graphql_query(
        query: Annotated[str, Field(description=QUERY_DESCRIPTION)],
        variables: Annotated[Optional[dict[str, Any]], Field(description=VARIABLES_DESCRIPTION)] = None,
    ) -> str:
        _log_request(TOOL_NAME, query=query[:_QUERY_PREVIEW])
        if variables is not None:
            _log_status(f"With variables: {json.dumps(variables)[:_VARIABLES_PREVIEW]}")

        result = forwarder.forward(query, variables)

        if isinstance(result, dict) and "errors" in result:
            _log_status(f"{len(result['errors'])} error(s) in result")
        return format_envelope(_log_response(TOOL_NAME, result))

    logging.info("NCI PDC MCP Server initialized.")
    return server


def _settings_from_env() -> ForwarderSettings:
    """Forwarder settings, with PDC_GRAPHQL_ENDPOINT overriding the upstream URL."""
    return ForwarderSettings(endpoint=os.environ.get("PDC_GRAPHQL_ENDPOINT") or PDC_GRAPHQL_ENDPOINT)


# The server instance main.py serves and `python -m tools.mcp_server` runs.
mcp = create_server(QueryForwarder(_settings_from_env()))


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    mcp.run()
