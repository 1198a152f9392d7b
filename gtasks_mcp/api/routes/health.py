"""Health Probe — unauthenticated liveness endpoint.

Invariants:
    - GET /health always returns 200 if the process is up
    - Never touches Google: safe to poll without credentials
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

from gtasks_mcp.config import APP_VERSION

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness probe with the active access mode."""
    settings = request.app.state.settings
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return {
        "status": "ok",
        "version": APP_VERSION,
        "readOnly": settings.read_only,
        "timestamp": timestamp.replace("+00:00", "Z"),
    }
