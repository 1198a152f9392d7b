"""Root conftest — shared test configuration."""

import os

import pytest

from gtasks_mcp.config import get_settings

# Ensure tests never pick up real Google credentials or tokens
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("MCP_TOKEN", "t" * 48)
os.environ.setdefault("TOKEN_PATH", "/nonexistent/gtasks-mcp-test/token.json")


@pytest.fixture(autouse=True)
def _fresh_settings():
    """get_settings() is lru_cached; every test starts from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
