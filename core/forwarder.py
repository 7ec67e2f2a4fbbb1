# =============================================================================
# core/forwarder.py  —  PDC GraphQL Query Forwarder
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends one GraphQL query to the NCI Proteomic Data Commons (PDC) API and
#   turns whatever comes back into a Result Envelope, a JSON object the agent
#   can always read.
#
# HOW IT WORKS (the flow):
#   1. Build the JSON body {query, variables?}
#   2. POST it to the PDC endpoint (urllib, no auth, static User-Agent)
#   3. Check the content type:
#        JSON declared  → parse it (or report that it didn't parse)
#        anything else  → report a non-JSON response
#   4. Non-2xx status   → wrap the parsed body in an "API Error <status>"
#   5. 2xx status       → hand the parsed body back UNTOUCHED
#   6. The network call blew up → report it as a client error
#
# THE ONE RULE:
#   forward() never raises.  Every failure becomes {"errors": [...]}, shaped
#   like a native GraphQL error, so the tool layer has nothing to catch.
#
# NO RETRIES, NO TIMEOUT, NO CACHE:
#   One attempt per call.  A failure surfaces immediately.  Each call owns
#   its own request/response values, so concurrent calls need no locking.
# =============================================================================

import json
import logging
import urllib.error
import urllib.request
from typing import Any, Optional

from core.models import (
    ForwarderSettings,
    GraphQLRequest,
    UpstreamResponse,
    error_envelope,
)

logger = logging.getLogger(__name__)

# Raw response text embedded in an envelope is capped at this many characters.
RESPONSE_TEXT_LIMIT = 1000

# Raw bodies in log lines are capped shorter still.
_LOG_BODY_LIMIT = 500


class _PostRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Follows 307/308 redirects for POST, resending the same body.

    Stock urllib refuses to redirect a POST on these codes; 301/302/303 keep
    the default behavior.
    """

    # Python 3.10 has no 308 handler of its own
    http_error_308 = urllib.request.HTTPRedirectHandler.http_error_302

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        if code not in (307, 308) or req.get_method() != "POST":
            return super().redirect_request(req, fp, code, msg, headers, newurl)

        # Host and Content-Length are recomputed for the new target
        kept = {
            name: value
            for name, value in req.header_items()
            if name.lower() not in ("host", "content-length")
        }
        return urllib.request.Request(
            newurl.replace(" ", "%20"),
            data=req.data,
            headers=kept,
            origin_req_host=req.origin_req_host,
            unverifiable=True,
            method="POST",
        )


_opener = urllib.request.build_opener(_PostRedirectHandler)


def _reject_constant(name: str) -> None:
    # NaN and Infinity are not JSON, and could not be serialized back as JSON
    raise ValueError(f"Invalid JSON constant: {name}")


class QueryForwarder:
    """Forwards GraphQL queries to a single upstream endpoint.

    The forwarder holds only its settings; it is safe to share one instance
    between concurrent tool calls.
    """

    def __init__(self, settings: Optional[ForwarderSettings] = None):
        self.settings = settings or ForwarderSettings()

    @property
    def endpoint(self) -> str:
        return self.settings.endpoint

    def forward(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Execute `query` upstream and return a Result Envelope.

        Args:
            query: GraphQL text, sent verbatim.
            variables: Optional variable mapping, sent as-is when present.

        Returns:
            The upstream JSON on a 2xx JSON reply, otherwise a synthesized
            {"errors": [{"message": ..., "extensions": {...}}]} object.
        """
        request = GraphQLRequest(query=query, variables=variables)
        try:
            response = self._send(request)
        except Exception as e:
            message = _describe(e)
            logger.error(f"Client-side error during NCI PDC GraphQL request: {message}")
            return error_envelope(message, {"clientError": True})

        logger.info(f"NCI PDC API response status: {response.status}")
        return classify_response(response)

    def _send(self, request: GraphQLRequest) -> UpstreamResponse:
        """POST the request and collect the raw response.

        HTTP error statuses come back as responses, not exceptions; only
        transport failures propagate out of here.
        """
        data = json.dumps(request.to_body()).encode("utf-8")
        req = urllib.request.Request(
            self.endpoint,
            data=data,
            headers=self.settings.headers(),
            method="POST",
        )

        kwargs = {}
        if self.settings.timeout is not None:
            kwargs["timeout"] = self.settings.timeout

        logger.info(f"Making GraphQL request to: {self.endpoint}")
        try:
            with _opener.open(req, **kwargs) as response:
                return UpstreamResponse(
                    status=response.status,
                    content_type=response.headers.get("Content-Type"),
                    body=response.read(),
                )
        except urllib.error.HTTPError as e:
            # urllib raises for 4xx/5xx, but PDC's error body is still the answer
            try:
                return UpstreamResponse(
                    status=e.code,
                    content_type=e.headers.get("Content-Type") if e.headers else None,
                    body=e.read() if e.fp is not None else b"",
                )
            finally:
                e.close()


def classify_response(response: UpstreamResponse) -> dict[str, Any]:
    """Turn a raw upstream response into a Result Envelope (steps 3-5)."""
    status = response.status

    if not response.declares_json:
        text = response.text()
        logger.error(
            f"NCI PDC API response is not JSON. Status: {status}, "
            f"Content-Type: {response.content_type}, Body: {text[:_LOG_BODY_LIMIT]}"
        )
        return error_envelope(
            f"API Error {status}: Non-JSON response received.",
            {
                "statusCode": status,
                "contentType": response.content_type,
                "responseText": text[:RESPONSE_TEXT_LIMIT],
            },
        )

    text = response.text()
    try:
        body = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        logger.error(
            f"NCI PDC API response indicates JSON but failed to parse. "
            f"Status: {status}, Body: {text[:_LOG_BODY_LIMIT]}"
        )
        return error_envelope(
            f"API Error {status}: Failed to parse JSON response.",
            {"statusCode": status, "responseText": text[:RESPONSE_TEXT_LIMIT]},
        )

    if not response.ok:
        logger.error(f"NCI PDC API HTTP Error {status}: {json.dumps(body)[:_LOG_BODY_LIMIT]}")
        return error_envelope(
            f"API Error {status}",
            {"statusCode": status, "responseBody": body},
        )

    # data and/or errors from PDC are passed through as-is
    return body


def _describe(exc: BaseException) -> str:
    """Human-readable description of a transport failure."""
    # URLError wraps the underlying socket/DNS/TLS error in `reason`
    reason = getattr(exc, "reason", None)
    message = str(reason) if reason else str(exc)
    return message or exc.__class__.__name__


_default_forwarder = QueryForwarder()


def forward_query(query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Forward a query to the public PDC endpoint with default settings."""
    return _default_forwarder.forward(query, variables)
