"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Read once by the entry points; the core receives values (AccessPolicy), never env

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - READ_ONLY defaults to true: write access is an explicit opt-in
    - HTTP-only requirements checked by validate_http_settings, so stdio and the
      CLIs run without MCP_TOKEN
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gtasks_mcp.core.domain_types import AccessPolicy

APP_VERSION = "0.1.0"
MIN_MCP_TOKEN_LENGTH = 32


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "http://localhost"
    token_path: Path = Path("token.json")

    @field_validator("token_path", mode="after")
    @classmethod
    def resolve_token_path(cls, v: Path) -> Path:
        return v.expanduser().resolve()

    # Google Tasks API
    google_http_timeout_seconds: float = 30
    google_num_retries: int = 2

    # Access policy
    read_only: bool = True

    # HTTP transport
    mcp_token: str | None = None
    host: str = "127.0.0.1"
    port: int = 3000
    rate_limit_max: int = 100
    rate_limit_window_ms: int = 15 * 60 * 1000
    ngrok_domain: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def access_policy(self) -> AccessPolicy:
        return AccessPolicy(read_only_mode=self.read_only)

    def cors_origins(self) -> list[str]:
        """Exact origins when tunnelled through ngrok, otherwise any origin."""
        if self.ngrok_domain:
            return [f"https://{self.ngrok_domain}", f"http://{self.ngrok_domain}"]
        return ["*"]


def validate_http_settings(settings: Settings) -> list[str]:
    """Problems that prevent the HTTP transport from starting (empty = ok)."""
    problems = []
    if not settings.mcp_token:
        problems.append("MCP_TOKEN environment variable is required")
    elif len(settings.mcp_token) < MIN_MCP_TOKEN_LENGTH:
        problems.append(
            f"MCP_TOKEN must be at least {MIN_MCP_TOKEN_LENGTH} characters long"
        )
    if not settings.google_client_id or not settings.google_client_secret:
        problems.append(
            "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET environment variables are required"
        )
    return problems


@lru_cache
def get_settings() -> Settings:
    return Settings()
