"""Lazy Client Cell — single construction under concurrency, no failure caching."""

import asyncio

import pytest

from gtasks_mcp.core.errors import AuthRequiredError
from gtasks_mcp.infrastructure.client_cell import LazyClientCell


class _Factory:
    def __init__(self, failures: int = 0):
        self.calls = 0
        self.failures = failures

    async def __call__(self):
        self.calls += 1
        await asyncio.sleep(0.01)
        if self.calls <= self.failures:
            raise AuthRequiredError()
        return object()


@pytest.mark.asyncio
async def test_concurrent_first_calls_construct_once():
    factory = _Factory()
    cell = LazyClientCell(factory)
    clients = await asyncio.gather(*(cell.get_client() for _ in range(50)))
    assert factory.calls == 1
    assert all(c is clients[0] for c in clients)


@pytest.mark.asyncio
async def test_later_calls_reuse_client():
    factory = _Factory()
    cell = LazyClientCell(factory)
    first = await cell.get_client()
    second = await cell.get_client()
    assert first is second
    assert factory.calls == 1
    assert cell.initialized


@pytest.mark.asyncio
async def test_failure_is_not_cached():
    factory = _Factory(failures=1)
    cell = LazyClientCell(factory)
    with pytest.raises(AuthRequiredError):
        await cell.get_client()
    assert not cell.initialized
    client = await cell.get_client()
    assert client is not None
    assert factory.calls == 2
