# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every value that flows through a
# single forwarded query.  Nothing here outlives one call: a request is built,
# an upstream response comes back, an envelope is returned, and all of it is
# dropped.
#
# THE THREE NOUNS:
#   - GraphQLRequest   → what the agent asked for (query + optional variables)
#   - UpstreamResponse → what the PDC server answered (status, type, bytes)
#   - Result Envelope  → what the agent gets back (a plain dict, see below)
#
# ForwarderSettings is the odd one out: it is configuration, built once and
# handed to the forwarder at construction time.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional


# The public PDC GraphQL endpoint and the identity we present to it.
PDC_GRAPHQL_ENDPOINT = "https://pdc.cancer.gov/graphql"
USER_AGENT = "MCPNciPdcServer/0.1.0 (ModelContextProtocol; +https://modelcontextprotocol.io)"


# -----------------------------------------------------------------------------
# ForwarderSettings — where to send queries and how to introduce ourselves
# -----------------------------------------------------------------------------
# Tests point `endpoint` at a local server; production uses the PDC default.
# timeout=None means the forwarder enforces no timeout of its own and the
# socket layer's default applies.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ForwarderSettings:
    """Construction-time configuration for a QueryForwarder."""

    endpoint: str = PDC_GRAPHQL_ENDPOINT
    user_agent: str = USER_AGENT
    timeout: Optional[float] = None

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }


# -----------------------------------------------------------------------------
# GraphQLRequest — the agent's query, forwarded verbatim
# -----------------------------------------------------------------------------
# The query string is NEVER parsed here.  PDC-specific arguments such as
# `acceptDUA: true` live inside the query text and are the caller's business.
# -----------------------------------------------------------------------------
@dataclass
class GraphQLRequest:
    """A single GraphQL operation to send upstream."""

    query: str
    variables: Optional[dict[str, Any]] = None

    def to_body(self) -> dict[str, Any]:
        """Build the JSON request body; `variables` is omitted when absent."""
        body: dict[str, Any] = {"query": self.query}
        if self.variables is not None:
            body["variables"] = self.variables
        return body


# -----------------------------------------------------------------------------
# UpstreamResponse — the raw HTTP answer, before classification
# -----------------------------------------------------------------------------
@dataclass
class UpstreamResponse:
    """Status code, content-type header and body bytes from the upstream."""

    status: int
    content_type: Optional[str]
    body: bytes = field(default=b"", repr=False)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def declares_json(self) -> bool:
        return bool(self.content_type) and "application/json" in self.content_type

    def charset(self) -> str:
        """Charset from the content-type header, UTF-8 when not declared."""
        for param in (self.content_type or "").split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    def text(self) -> str:
        """Decoded body, with a leading byte-order mark removed."""
        try:
            text = self.body.decode(self.charset(), errors="replace")
        except LookupError:
            # Unknown charset name in the header
            text = self.body.decode("utf-8", errors="replace")
        return text.removeprefix("\ufeff")


# -----------------------------------------------------------------------------
# Result Envelope
# -----------------------------------------------------------------------------
# Envelopes are plain dicts, not dataclasses: a successful envelope is
# whatever JSON PDC returned, untouched, and a synthesized one must look
# exactly like a native GraphQL error response so the agent handles both the
# same way.  Only the `extensions` mapping tells them apart.
# -----------------------------------------------------------------------------
def error_envelope(message: str, extensions: dict[str, Any]) -> dict[str, Any]:
    """Build a GraphQL-shaped error response with a single error entry."""
    return {"errors": [{"message": message, "extensions": extensions}]}
