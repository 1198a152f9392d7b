"""Per-IP Rate Limiting — fixed-window counter plus ASGI middleware.

Invariants:
    - At most max_requests per client IP per window; request max_requests+1 → 429
    - A window starts at the first request from an IP and resets after window_seconds
    - Every protected response carries RateLimit-Limit / -Remaining / -Reset
    - Expired windows pruned so the table stays bounded by active clients

Design Decisions:
    - In-memory dict, no lock: all hits happen on the single event loop
    - Injectable clock: tests advance time without sleeping
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gtasks_mcp.api.security import client_ip, is_protected

logger = logging.getLogger(__name__)

_PRUNE_THRESHOLD = 10_000


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_seconds: int

    def headers(self) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_seconds),
        }


class FixedWindowRateLimiter:
    """Counts hits per key within fixed windows."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[key] = (started, count)
        if len(self._windows) > _PRUNE_THRESHOLD:
            self._prune(now)
        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_seconds=max(0, math.ceil(started + self.window_seconds - now)),
        )

    def _prune(self, now: float) -> None:
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware:
    """Applies the limiter to protected paths, keyed by client IP."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: FixedWindowRateLimiter,
        protected_prefix: str = "/mcp",
    ):
        self.app = app
        self.limiter = limiter
        self.protected_prefix = protected_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not is_protected(scope, self.protected_prefix):
            await self.app(scope, receive, send)
            return

        ip = client_ip(scope)
        decision = self.limiter.hit(ip)
        if not decision.allowed:
            logger.warning("Rate limit exceeded", extra={"client_ip": ip})
            response = JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests from this IP, please try again later.",
                },
                headers={
                    **decision.headers(),
                    "Retry-After": str(decision.reset_seconds),
                },
            )
            await response(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in decision.headers().items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)
