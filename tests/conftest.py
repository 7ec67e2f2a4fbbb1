"""
Pytest configuration and shared fixtures.

The fake PDC is a real HTTP server on 127.0.0.1, so the forwarder is tested
through its actual urllib code path rather than a mocked one.
"""
import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from core.forwarder import QueryForwarder
from core.models import ForwarderSettings


class FakePdc:
    """Scripted upstream: records each request, replays one canned response."""

    def __init__(self):
        self.url = None
        self.requests = []
        self.redirects = {}
        self.respond(200, {"data": {}})

    def respond(self, status=200, body=None, content_type="application/json"):
        """Set the response for subsequent requests.

        dict/list bodies are JSON-encoded; content_type=None omits the header.
        """
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status = status
        self.body = body or b""
        self.content_type = content_type

    def redirect(self, path, status, location):
        """Answer POSTs to `path` with a redirect to `location`."""
        self.redirects[path] = (status, location)

    @property
    def last_body(self):
        return json.loads(self.requests[-1]["body"])

    @property
    def last_headers(self):
        return self.requests[-1]["headers"]


@pytest.fixture(autouse=True)
def no_proxy_for_localhost(monkeypatch):
    """Keep urllib from routing 127.0.0.1 through a proxy set in the environment."""
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")


@pytest.fixture
def fake_pdc():
    """Run a FakePdc on an ephemeral port for the duration of one test."""
    state = FakePdc()

    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            length = int(self.headers.get("Content-Length", 0))
            state.requests.append({
                "path": self.path,
                "headers": self.headers,
                "body": self.rfile.read(length),
            })
            if self.path in state.redirects:
                status, location = state.redirects[self.path]
                self.send_response(status)
                self.send_header("Location", location)
                self.send_header("Content-Length", "0")
                self.end_headers()
                return
            self.send_response(state.status)
            if state.content_type is not None:
                self.send_header("Content-Type", state.content_type)
            self.send_header("Content-Length", str(len(state.body)))
            self.end_headers()
            self.wfile.write(state.body)

        def log_message(self, format, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    state.url = f"http://127.0.0.1:{server.server_port}/graphql"

    yield state

    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def forwarder(fake_pdc):
    """A QueryForwarder aimed at the fake PDC."""
    return QueryForwarder(ForwarderSettings(endpoint=fake_pdc.url))


@pytest.fixture
def closed_port_url():
    """URL of a local port nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/graphql"
