# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the MCP-facing layer of the NCI PDC server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between MCP clients and core/:
#     - mcp_server.py registers the pdc_graphql_query tool on a FastMCP
#       server and turns each Result Envelope into pretty-printed JSON text
#     - transport.py builds the SSE web app and answers every other path
#       with a plain-text 404
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk HTTP to PDC (that's core/forwarder.py)
#   - They do NOT inspect or validate GraphQL (nobody does; PDC decides)
#   - They do NOT catch errors (the forwarder never raises)
# =============================================================================
