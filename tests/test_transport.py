"""
Tests for the SSE app's path routing.
"""
import pytest
from starlette.testclient import TestClient

from tools.mcp_server import create_server
from tools.transport import NOT_FOUND_TEXT, PathRouter, create_app, is_mcp_path


@pytest.fixture
def client(forwarder):
    # No `with`: lifespan is not started, so the SSE stream is never opened
    return TestClient(create_app(create_server(forwarder)))


class TestIsMcpPath:

    @pytest.mark.parametrize("path", ["/sse", "/sse/", "/sse/extra", "/messages/", "/messages/?session_id=1"])
    def test_mcp_paths(self, path):
        assert is_mcp_path(path)

    @pytest.mark.parametrize("path", ["/", "/ssex", "/mcp", "/graphql", "/messages"])
    def test_other_paths(self, path):
        assert not is_mcp_path(path)


class TestNotFound:

    @pytest.mark.parametrize("path", ["/", "/mcp", "/favicon.ico"])
    def test_unknown_path_returns_404(self, client, path):
        response = client.get(path)

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == NOT_FOUND_TEXT

    def test_not_found_text_names_sse_path(self):
        assert "- /sse (for Server-Sent Events transport)" in NOT_FOUND_TEXT

    def test_post_to_unknown_path(self, client):
        assert client.post("/graphql", json={"query": "{ x }"}).status_code == 404


class TestPassThrough:

    @pytest.mark.asyncio
    async def test_mcp_path_reaches_wrapped_app(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(scope["path"])

        router = PathRouter(app)
        await router({"type": "http", "path": "/sse"}, None, None)

        assert seen == ["/sse"]

    @pytest.mark.asyncio
    async def test_lifespan_reaches_wrapped_app(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(scope["type"])

        await PathRouter(app)({"type": "lifespan"}, None, None)

        assert seen == ["lifespan"]
