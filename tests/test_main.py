"""
Tests for the entry point's environment handling.
"""
import pytest

from main import DEFAULT_HOST, DEFAULT_PORT, get_bind_address


def test_defaults(monkeypatch):
    monkeypatch.delenv("MCP_HOST", raising=False)
    monkeypatch.delenv("MCP_PORT", raising=False)
    assert get_bind_address() == (DEFAULT_HOST, DEFAULT_PORT)


def test_from_env(monkeypatch):
    monkeypatch.setenv("MCP_HOST", "127.0.0.1")
    monkeypatch.setenv("MCP_PORT", "9000")
    assert get_bind_address() == ("127.0.0.1", 9000)


def test_bad_port(monkeypatch):
    monkeypatch.setenv("MCP_PORT", "eighty")
    with pytest.raises(ValueError, match="MCP_PORT"):
        get_bind_address()
