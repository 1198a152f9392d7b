"""Service test fixtures — fake provider and dispatchers under both policies."""

import pytest

from gtasks_mcp.core.domain_types import AccessPolicy
from gtasks_mcp.services.tool_dispatch import ToolDispatch
from tests.services.fake_tasks import CountingProvider, StaticAuthUrls


@pytest.fixture
def provider():
    return CountingProvider()


@pytest.fixture
def auth_urls():
    return StaticAuthUrls()


@pytest.fixture
def full_access(provider, auth_urls):
    return ToolDispatch(AccessPolicy(read_only_mode=False), provider, auth_urls)


@pytest.fixture
def read_only(provider, auth_urls):
    return ToolDispatch(AccessPolicy(read_only_mode=True), provider, auth_urls)
