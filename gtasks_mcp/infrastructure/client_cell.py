"""Lazy Client Cell — builds the authenticated Tasks client once, on first use.

Invariants:
    - factory() runs at most once per successful construction, even when many
      coroutines ask for the client before it exists
    - A failed construction is NOT cached: the next call retries the factory
    - Reads after construction take no lock

Design Decisions:
    - asyncio.Lock with double-checked read: both transports share one event loop
    - Injected into ToolDispatch instead of a module-level global, so tests
      substitute a fake provider
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from gtasks_mcp.core.client_protocols import TasksClient

logger = logging.getLogger(__name__)


class LazyClientCell:
    """Once-initialized holder for the shared TasksClient."""

    def __init__(self, factory: Callable[[], Awaitable[TasksClient]]):
        self._factory = factory
        self._client: TasksClient | None = None
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._client is not None

    async def get_client(self) -> TasksClient:
        client = self._client
        if client is not None:
            return client
        async with self._lock:
            if self._client is None:
                self._client = await self._factory()
                logger.info("Google Tasks client initialized")
            return self._client
