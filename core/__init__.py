# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the query forwarding logic for the NCI PDC server.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Starlette, uvicorn or any other
#   server framework.  Every module here is plain Python plus the standard
#   library: you can call forward_query() from a bare REPL and it will talk
#   to PDC directly.
#
# The MCP wiring lives in tools/; this package is what it wires up.
# =============================================================================
