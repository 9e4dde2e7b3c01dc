"""Google OAuth consent flow for Drive backups.

The access token lives on an explicit ``DriveCredential`` object with a
visible lifecycle (unset -> pending -> valid -> expired) instead of a global
variable. Login is split at the consent step:

- ``begin_login()`` returns the consent URL (the suspend point);
- ``complete_login(code=..., state=...)`` is fed by the OAuth redirect;
- ``login(on_consent)`` wraps both into one awaitable for interactive callers.

Refreshing is out of scope: once a token expires every Drive call fails until
the user logs in again.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from lingua_spark.core.config import GoogleDriveSettings, settings
from lingua_spark.core.logging import get_logger

logger = get_logger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"


class AuthenticationError(Exception):
    """Identity config missing, login rejected, or no usable token."""

    pass


class CredentialState(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    VALID = "valid"
    EXPIRED = "expired"


class AuthStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    AUTHENTICATED = "authenticated"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DriveCredential:
    access_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    pending: bool = False

    @property
    def state(self) -> CredentialState:
        if self.access_token:
            if self.expires_at is not None and _now_utc() >= self.expires_at:
                return CredentialState.EXPIRED
            return CredentialState.VALID
        if self.pending:
            return CredentialState.PENDING
        return CredentialState.UNSET

    def set_token(self, token: str, expires_at: Optional[datetime] = None) -> None:
        if expires_at is not None and expires_at.tzinfo is None:
            # google-auth reports naive UTC expiry
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        self.access_token = token
        self.expires_at = expires_at
        self.pending = False

    def clear(self) -> None:
        self.access_token = None
        self.expires_at = None
        self.pending = False

    def bearer(self) -> str:
        """Token for the Authorization header; never refreshes."""
        state = self.state
        if state == CredentialState.VALID:
            return self.access_token  # type: ignore[return-value]
        if state == CredentialState.EXPIRED:
            raise AuthenticationError("Access token expired. Please log in again.")
        raise AuthenticationError("No access token available")


FlowFactory = Callable[[dict, list[str], str], Any]


def _oauthlib_flow(client_config: dict, scopes: list[str], redirect_uri: str) -> Any:
    """Build a google-auth-oauthlib web flow (lazy import)."""
    from google_auth_oauthlib.flow import Flow

    return Flow.from_client_config(
        client_config, scopes=scopes, redirect_uri=redirect_uri
    )


class GoogleAuthSession:
    def __init__(
        self,
        *,
        drive_settings: Optional[GoogleDriveSettings] = None,
        credential: Optional[DriveCredential] = None,
        flow_factory: Optional[FlowFactory] = None,
        config_loader: Optional[Callable[[], Optional[dict]]] = None,
    ) -> None:
        self.settings = drive_settings or settings.drive
        self.credential = credential or DriveCredential()
        self._flow_factory = flow_factory or _oauthlib_flow
        self._config_loader = config_loader or self._load_client_config
        self._client_config: Optional[dict] = None
        self._flow: Any = None
        self._oauth_state: Optional[str] = None
        self._waiter: Optional[asyncio.Future[str]] = None

    @property
    def status(self) -> AuthStatus:
        if self.credential.state == CredentialState.VALID:
            return AuthStatus.AUTHENTICATED
        if self._client_config is not None:
            return AuthStatus.READY
        return AuthStatus.UNINITIALIZED

    def _load_client_config(self) -> Optional[dict]:
        s = self.settings
        if s.client_id and s.client_secret:
            return {
                "web": {
                    "client_id": s.client_id,
                    "client_secret": s.client_secret,
                    "auth_uri": AUTH_URI,
                    "token_uri": TOKEN_URI,
                    "redirect_uris": [s.redirect_uri],
                }
            }
        if s.client_secrets_file:
            path = Path(s.client_secrets_file)
            if path.is_file():
                return json.loads(path.read_text(encoding="utf-8"))
        return None

    async def initialize(self) -> None:
        """Wait for the OAuth client config, polling a bounded number of times."""
        if self._client_config is not None:
            return
        attempts = max(1, int(self.settings.init_attempts))
        for attempt in range(attempts):
            try:
                config = self._config_loader()
            except (OSError, ValueError) as e:
                logger.error(f"Could not read Google client config: {e}")
                raise AuthenticationError(
                    "Google identity client configuration failed to load."
                ) from e
            if config:
                self._client_config = config
                logger.info("Google identity client ready")
                return
            if attempt < attempts - 1:
                await asyncio.sleep(self.settings.init_interval_sec)
        raise AuthenticationError(
            "Google identity client configuration failed to load."
        )

    async def begin_login(self) -> str:
        """Start a consent flow and return the URL the user must visit."""
        await self.initialize()
        try:
            flow = self._flow_factory(
                self._client_config,  # type: ignore[arg-type]
                [self.settings.scope],
                self.settings.redirect_uri,
            )
            # Always ask for consent so a fresh token is issued
            url, state = flow.authorization_url(
                prompt="consent", include_granted_scopes="true"
            )
        except Exception as e:
            logger.error(f"Could not start Google login: {e}")
            raise AuthenticationError("Google Service not initialized") from e
        # Only one consent flow at a time; an earlier waiter fails
        self._settle(error=AuthenticationError("Login superseded"))
        self._flow = flow
        self._oauth_state = state
        self.credential.pending = True
        return url

    async def complete_login(
        self,
        *,
        code: Optional[str] = None,
        state: Optional[str] = None,
        error: Optional[str] = None,
    ) -> str:
        """Finish the consent flow started by ``begin_login``."""
        try:
            token = await self._exchange(code=code, state=state, error=error)
        except AuthenticationError as e:
            self.credential.pending = False
            self._settle(error=e)
            raise
        finally:
            self._flow = None
            self._oauth_state = None
        self._settle(token=token)
        return token

    async def _exchange(
        self, *, code: Optional[str], state: Optional[str], error: Optional[str]
    ) -> str:
        if self._flow is None:
            raise AuthenticationError("No login in progress")
        if error:
            logger.error(f"Auth Error: {error}")
            raise AuthenticationError(f"Login rejected: {error}")
        if state != self._oauth_state:
            raise AuthenticationError("OAuth state mismatch")
        if not code:
            raise AuthenticationError("Missing authorization code")
        try:
            # requests-oauthlib is blocking
            await asyncio.to_thread(self._flow.fetch_token, code=code)
        except Exception as e:
            logger.error(f"Token exchange failed: {e}")
            raise AuthenticationError("Token exchange failed") from e
        creds = self._flow.credentials
        self.credential.set_token(creds.token, getattr(creds, "expiry", None))
        logger.info("Google login completed")
        return creds.token

    def _settle(
        self, *, token: Optional[str] = None, error: Optional[Exception] = None
    ) -> None:
        waiter, self._waiter = self._waiter, None
        if waiter is None or waiter.done():
            return
        if error is not None:
            waiter.set_exception(error)
        else:
            waiter.set_result(token)  # type: ignore[arg-type]

    async def login(self, on_consent: Optional[Callable[[str], None]] = None) -> str:
        """Run the whole consent flow and return the access token."""
        url = await self.begin_login()
        waiter: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._waiter = waiter
        if on_consent is not None:
            on_consent(url)
        return await waiter

    def logout(self) -> None:
        self.credential.clear()
