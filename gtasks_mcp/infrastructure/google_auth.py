"""Google OAuth Manager — consent URL, code exchange, token persistence, and refresh.

Invariants:
    - Token file written atomically (temp file + os.replace) with mode 0600
    - Refresh keeps the stored refresh_token when Google omits it in the response
    - Every refresh is written back, including refreshes done by the Tasks client
    - Missing/unreadable token → AuthRequiredError; rejected exchange/refresh → AuthFailedError
    - Token file format matches the Node.js googleapis layout
      (access_token, refresh_token, scope, token_type, expiry_date in ms)

Design Decisions:
    - No PKCE verifier on the consent URL: the MCP server hands out the URL and
      the setup CLI exchanges the code in another process
    - Blocking by design (google-auth is sync); async callers use asyncio.to_thread
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from gtasks_mcp.core.errors import AuthFailedError, AuthRequiredError

logger = logging.getLogger(__name__)

TASKS_SCOPE = "https://www.googleapis.com/auth/tasks"
_AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
_TOKEN_URI = "https://oauth2.googleapis.com/token"
_EXPIRY_SKEW_MS = 60_000


class GoogleAuthManager:
    """OAuth2 configuration and token management for the Google Tasks API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str = "http://localhost",
        token_path: str | Path = "token.json",
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_path = Path(token_path)

    # ─── OAuth flow ─────────────────────────────────────────────

    def _new_flow(self) -> Flow:
        client_config = {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": _AUTH_URI,
                "token_uri": _TOKEN_URI,
                "redirect_uris": [self.redirect_uri],
            },
        }
        return Flow.from_client_config(
            client_config,
            scopes=[TASKS_SCOPE],
            redirect_uri=self.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def get_auth_url(self) -> str:
        """Consent URL requesting offline access (refresh token)."""
        url, _state = self._new_flow().authorization_url(
            access_type="offline", prompt="consent",
        )
        return url

    def authenticate(self, code: str) -> Credentials:
        """Exchange an authorization code for tokens and persist them."""
        flow = self._new_flow()
        try:
            flow.fetch_token(code=code.strip())
        except OAuth2Error as exc:
            raise AuthFailedError(exc.description or str(exc)) from exc
        credentials = flow.credentials
        self._save_token(_token_from_credentials(credentials, {}))
        logger.info("OAuth code exchanged, token saved to %s", self.token_path)
        return credentials

    # ─── Credentials ────────────────────────────────────────────

    def get_credentials(self) -> Credentials:
        """Load the stored token, refreshing (and persisting) it when expired."""
        token = self._load_token()
        credentials = self._credentials_from_token(token)
        if credentials.valid:
            return credentials
        if not credentials.refresh_token:
            raise AuthRequiredError(
                "Stored token expired and has no refresh token. "
                "Run the setup-auth command again."
            )
        self._refresh(credentials)
        self._save_token(_token_from_credentials(credentials, token))
        logger.info("Access token refreshed")
        return credentials

    def has_valid_token(self) -> bool:
        """True when the stored token is fresh (60s skew) or silently refreshable."""
        try:
            token = self._load_token()
        except AuthRequiredError:
            return False
        expiry_ms = token.get("expiry_date") or 0
        if expiry_ms and expiry_ms - _EXPIRY_SKEW_MS > time.time() * 1000:
            return True
        try:
            self.get_credentials()
        except (AuthRequiredError, AuthFailedError):
            return False
        return True

    def save_credentials(self, credentials: Credentials) -> None:
        """Merge credentials refreshed elsewhere into the token file."""
        try:
            previous = self._load_token()
        except AuthRequiredError:
            previous = {}
        self._save_token(_token_from_credentials(credentials, previous))
        logger.info("Refreshed access token saved to %s", self.token_path)

    def _refresh(self, credentials: Credentials) -> None:
        try:
            credentials.refresh(Request())
        except RefreshError as exc:
            raise AuthFailedError(str(exc)) from exc
        except TransportError as exc:
            raise AuthFailedError(f"token endpoint unreachable: {exc}") from exc

    def _credentials_from_token(self, token: dict) -> Credentials:
        scope = token.get("scope")
        return Credentials(
            token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            token_uri=_TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=scope.split() if scope else [TASKS_SCOPE],
            expiry=_expiry_from_ms(token.get("expiry_date")),
        )

    # ─── Token file ─────────────────────────────────────────────

    def _load_token(self) -> dict:
        logger.debug("Loading token from %s", self.token_path)
        try:
            with open(self.token_path, encoding="utf-8") as f:
                token = json.load(f)
        except FileNotFoundError as exc:
            raise AuthRequiredError() from exc
        except (OSError, ValueError) as exc:
            logger.error(f"Token file unreadable ({self.token_path}): {exc}")
            raise AuthRequiredError(
                f"Token file {self.token_path} is unreadable. "
                "Run the setup-auth command again."
            ) from exc
        if not isinstance(token, dict):
            raise AuthRequiredError(
                f"Token file {self.token_path} is not a JSON object."
            )
        return token

    def _save_token(self, token: dict) -> None:
        """Atomic write with owner-only permissions."""
        path = self.token_path
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(token, f, indent=2)
        os.chmod(tmp, 0o600)
        os.replace(tmp, path)


def _expiry_from_ms(expiry_ms: int | float | None) -> datetime | None:
    """google-auth wants naive UTC datetimes."""
    if not expiry_ms:
        return None
    aware = datetime.fromtimestamp(expiry_ms / 1000, tz=timezone.utc)
    return aware.replace(tzinfo=None)


def _token_from_credentials(credentials: Credentials, previous: dict) -> dict:
    """Merge fresh credentials over the stored token (keeps refresh_token)."""
    token = dict(previous)
    token["access_token"] = credentials.token
    token["refresh_token"] = credentials.refresh_token or previous.get("refresh_token")
    token["scope"] = " ".join(credentials.scopes or [TASKS_SCOPE])
    token["token_type"] = "Bearer"
    if credentials.expiry:
        expiry = credentials.expiry.replace(tzinfo=timezone.utc)
        token["expiry_date"] = int(expiry.timestamp() * 1000)
    return token
