"""Google Tasks MCP HTTP Server — FastAPI application factory and uvicorn entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - /health is public; everything under /mcp passes rate limit, body limit, bearer auth
    - Server refuses to start without a strong MCP_TOKEN and Google client credentials
    - CORS configured from settings (NGROK_DOMAIN), not hardcoded

Design Decisions:
    - create_app(settings) factory over a module-level app: tests build apps
      with their own settings and dispatcher
    - Lifespan over @app.on_event: FastAPI recommended pattern
    - Middleware added innermost first: auth → body limit → rate limit → CORS → security headers
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gtasks_mcp.api.error_handlers import register_error_handlers
from gtasks_mcp.api.mcp_protocol import HTTP_SERVER_NAME, build_mcp_server
from gtasks_mcp.api.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from gtasks_mcp.api.routes import health, mcp_sse
from gtasks_mcp.api.security import (
    MAX_BODY_BYTES,
    BearerTokenMiddleware,
    BodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from gtasks_mcp.bootstrap import build_tool_dispatch
from gtasks_mcp.config import APP_VERSION, Settings, get_settings, validate_http_settings
from gtasks_mcp.core.errors import ConfigurationError
from gtasks_mcp.infrastructure.observability import setup_logging
from gtasks_mcp.services.tool_dispatch import ToolDispatch

logger = logging.getLogger(__name__)

MCP_PREFIX = "/mcp"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    window_minutes = settings.rate_limit_window_ms / 60_000
    logger.info(
        f"Google Tasks MCP HTTP server listening on http://{settings.host}:{settings.port}"
        f" (mode: {'read-only' if settings.read_only else 'full access'},"
        f" rate limit: {settings.rate_limit_max} requests per {window_minutes:g} minutes)",
        extra={"transport": "sse"},
    )
    if settings.ngrok_domain:
        logger.info(f"CORS restricted to {settings.ngrok_domain}")
    else:
        logger.warning("NGROK_DOMAIN not set - CORS is unrestricted")
    yield
    logger.info("Google Tasks MCP HTTP server shutting down")


def create_app(
    settings: Settings | None = None, dispatch: ToolDispatch | None = None,
) -> FastAPI:
    """Build the HTTP transport around one shared dispatcher."""
    settings = settings or get_settings()
    dispatch = dispatch or build_tool_dispatch(settings)

    app = FastAPI(
        title="Google Tasks MCP",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.dispatch = dispatch

    # Routes: explicit registration
    app.include_router(health.router)
    mcp_sse.register_mcp_routes(app, build_mcp_server(dispatch, HTTP_SERVER_NAME))

    register_error_handlers(app)

    app.add_middleware(
        BearerTokenMiddleware,
        token=settings.mcp_token or "",
        protected_prefix=MCP_PREFIX,
    )
    app.add_middleware(
        BodySizeLimitMiddleware,
        max_bytes=MAX_BODY_BYTES,
        protected_prefix=MCP_PREFIX,
    )
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            settings.rate_limit_max, settings.rate_limit_window_ms / 1000,
        ),
        protected_prefix=MCP_PREFIX,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    return app


def run() -> None:
    """Console entry point: validate settings, then serve with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    problems = validate_http_settings(settings)
    if problems:
        error = ConfigurationError(problems)
        logger.critical(error.message, extra={"error_code": error.code.value})
        sys.exit(1)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
