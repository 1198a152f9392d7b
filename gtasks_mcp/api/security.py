"""HTTP Security Middleware — bearer-token auth, body size limit, security headers.

Invariants:
    - Bearer token compared in constant time (hmac.compare_digest)
    - An empty configured token rejects every protected request
    - Bodies over the limit on protected paths → 413 before the app sees them
    - Security headers added to every HTTP response, including 401/413/429

Design Decisions:
    - Pure ASGI classes instead of @app.middleware("http"): the SSE stream and
      the MCP message endpoint talk raw ASGI, and BaseHTTPMiddleware would wrap
      their send/receive
    - Path-prefix scoping so /health stays public
"""

import hmac
import logging
import re

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; connect-src 'self'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def client_ip(scope: Scope) -> str:
    client = scope.get("client")
    return client[0] if client else "unknown"


def is_protected(scope: Scope, prefix: str) -> bool:
    path = scope.get("path", "")
    return scope["type"] == "http" and (
        path == prefix or path.startswith(prefix + "/")
    )


class BearerTokenMiddleware:
    """401 unless Authorization carries the configured token."""

    def __init__(self, app: ASGIApp, token: str, protected_prefix: str = "/mcp"):
        self.app = app
        self._token = token.encode("utf-8")
        self.protected_prefix = protected_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not is_protected(scope, self.protected_prefix):
            await self.app(scope, receive, send)
            return
        if self._authorized(Headers(scope=scope).get("authorization", "")):
            await self.app(scope, receive, send)
            return
        logger.warning(
            "Rejected request with invalid or missing bearer token",
            extra={"client_ip": client_ip(scope)},
        )
        response = JSONResponse(
            status_code=401,
            content={
                "error": "Unauthorized",
                "message": "Invalid or missing bearer token",
            },
        )
        await response(scope, receive, send)

    def _authorized(self, header: str) -> bool:
        presented = _BEARER_PREFIX.sub("", header).encode("utf-8")
        if not self._token or not presented:
            return False
        return hmac.compare_digest(presented, self._token)


class _BodyTooLarge(Exception):
    pass


class BodySizeLimitMiddleware:
    """413 for request bodies over max_bytes (declared or streamed)."""

    def __init__(
        self,
        app: ASGIApp,
        max_bytes: int = MAX_BODY_BYTES,
        protected_prefix: str = "/mcp",
    ):
        self.app = app
        self.max_bytes = max_bytes
        self.protected_prefix = protected_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not is_protected(scope, self.protected_prefix):
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared and declared.isdigit() and int(declared) > self.max_bytes:
            await self._reject(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise _BodyTooLarge()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except _BodyTooLarge:
            if response_started:
                raise
            await self._reject(scope, receive, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        logger.warning(
            "Rejected oversized request body",
            extra={"client_ip": client_ip(scope)},
        )
        response = JSONResponse(
            status_code=413,
            content={
                "error": "Payload Too Large",
                "message": f"Request body exceeds {self.max_bytes} bytes",
            },
        )
        await response(scope, receive, send)


class SecurityHeadersMiddleware:
    """Adds CSP, HSTS, nosniff, frame and referrer headers to every response."""

    def __init__(self, app: ASGIApp, headers: dict[str, str] | None = None):
        self.app = app
        self.headers = headers or SECURITY_HEADERS

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_headers)
