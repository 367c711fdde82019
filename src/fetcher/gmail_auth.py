"""Gmail API authentication helper."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from src.config import ReportConfig

from .exceptions import (
    AuthorizationFlowError,
    NonInteractiveAuthError,
    ScopeMismatchError,
    SecretsNotFoundError,
)

logger = logging.getLogger(__name__)

CLIENT_TYPES = ("installed", "web")

# Same keys google_auth_oauthlib.helpers requires of a client section
REQUIRED_CLIENT_KEYS = ("client_id", "client_secret", "auth_uri", "token_uri")


def load_client_secrets(path: Path) -> dict[str, Any]:
    """Read and validate an OAuth client-secret descriptor.

    Args:
        path: Path to credentials.json as downloaded from Google Cloud Console

    Returns:
        The parsed client config, suitable for InstalledAppFlow.from_client_config

    Raises:
        SecretsNotFoundError: If the file is missing, not JSON, or lacks
            an "installed"/"web" section with client_id, client_secret,
            auth_uri and token_uri
    """
    if not path.is_file():
        raise SecretsNotFoundError(path)
    try:
        with open(path) as secrets_file:
            config = json.load(secrets_file)
    except (OSError, ValueError) as e:
        raise SecretsNotFoundError(path, f"unreadable ({e})") from e

    if not isinstance(config, dict):
        raise SecretsNotFoundError(path, "expected a JSON object")
    client_type = next((t for t in CLIENT_TYPES if t in config), None)
    if client_type is None:
        raise SecretsNotFoundError(path, "no 'installed' or 'web' client section")
    section = config[client_type]
    if not isinstance(section, dict):
        raise SecretsNotFoundError(path, f"'{client_type}' section is not an object")
    missing = [k for k in REQUIRED_CLIENT_KEYS if not section.get(k)]
    if missing:
        raise SecretsNotFoundError(path, f"missing {', '.join(missing)}")
    return config


class TokenCache:
    """File-backed token store, one JSON file per user label."""

    def __init__(self, token_dir: Path, user_label: str = "user"):
        self._token_dir = token_dir
        self._user_label = user_label

    @classmethod
    def for_config(cls, config: ReportConfig) -> "TokenCache":
        """Token store for the configured directory and user label."""
        return cls(config.token_dir, config.user_label)

    @property
    def path(self) -> Path:
        return self._token_dir / f"{self._user_label}.json"

    def load(self, scopes: list[str]) -> Optional[Credentials]:
        """Load cached credentials, or None if absent or unparseable."""
        if not self.path.exists():
            return None
        try:
            return Credentials.from_authorized_user_file(str(self.path), scopes)
        except ValueError as e:
            # Covers malformed JSON and missing refresh_token/client fields
            logger.warning("Ignoring unusable token cache %s: %s", self.path, e)
            return None

    def save(self, creds: Credentials) -> None:
        self._token_dir.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as token_file:
            token_file.write(creds.to_json())
        logger.debug("Saved token for '%s' to %s", self._user_label, self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class GmailAuthenticator:
    """Obtains Gmail API credentials, reusing a cached token where possible.

    The client-secret descriptor is always validated first, so a missing
    credentials.json fails before any network traffic. After that the
    cached token is used as-is, refreshed, or replaced by running the
    installed-app flow on a fixed local callback port.
    """

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        """Initialize the authenticator.

        Args:
            config: Run configuration. Defaults to ReportConfig.from_env().
            token_cache: Token store. Defaults to a TokenCache under
                config.token_dir keyed by config.user_label.
        """
        self._config = config or ReportConfig.from_env()
        self._scopes = list(self._config.scopes)
        self._cache = token_cache or TokenCache.for_config(self._config)
        self._interactive = self._config.interactive
        self._credentials: Optional[Credentials] = None

    def _validate_token_scopes(self, creds: Credentials) -> bool:
        """Check if token has all required scopes.

        Uses granted_scopes (the scopes actually stored in the token file)
        rather than scopes (the requested scopes passed at load time),
        so that mismatches between the token and the requested scopes are
        properly detected.
        """
        granted = creds.granted_scopes or creds.scopes
        if not granted:
            return False
        return all(scope in granted for scope in self._scopes)

    def _run_authorization_flow(self, client_config: dict[str, Any]) -> Credentials:
        """Run the browser-based flow and return fresh credentials.

        run_local_server binds the callback port, waits at most
        auth_timeout_seconds for the redirect and closes the listener on
        every exit path.
        """
        flow = InstalledAppFlow.from_client_config(client_config, self._scopes)
        port = self._config.callback_port
        timeout = self._config.auth_timeout_seconds
        logger.info("Starting OAuth authorization flow on port %d", port)
        try:
            return flow.run_local_server(
                port=port,
                open_browser=self._config.open_browser,
                timeout_seconds=timeout,
                access_type="offline",
            )
        except AttributeError as e:
            # No redirect arrived before the timeout, so there is no
            # authorization response for the flow to parse
            raise AuthorizationFlowError(
                f"No authorization response received within {timeout} seconds"
            ) from e
        except OSError as e:
            raise AuthorizationFlowError(
                f"Could not listen for the OAuth callback on port {port}: {e}"
            ) from e
        except (OAuth2Error, GoogleAuthError, ValueError) as e:
            raise AuthorizationFlowError(f"Authorization failed: {e}") from e

    def obtain_credentials(self) -> Credentials:
        """Load existing credentials or create new ones.

        Returns:
            Valid credentials object

        Raises:
            SecretsNotFoundError: If credentials.json is missing or malformed
            ScopeMismatchError: If token scopes don't match and non-interactive
            NonInteractiveAuthError: If re-auth needed but in non-interactive mode
            AuthorizationFlowError: If the interactive flow fails
        """
        client_config = load_client_secrets(self._config.credentials_path)

        creds = self._cache.load(self._scopes)

        # Validate scopes match what we need
        if creds and not self._validate_token_scopes(creds):
            if not self._interactive:
                raise ScopeMismatchError(
                    required_scopes=self._scopes,
                    token_scopes=list(creds.scopes) if creds.scopes else [],
                )
            # In interactive mode, delete token and re-auth
            logger.info("Cached token lacks required scopes, re-authorizing")
            self._cache.clear()
            creds = None

        if creds and creds.valid:
            self._credentials = creds
            return creds

        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except RefreshError as e:
                if not self._interactive:
                    raise NonInteractiveAuthError(f"Token refresh failed: {e}") from e
                logger.warning("Token refresh failed, re-authorizing: %s", e)
                creds = None

        if not creds or not creds.valid:
            if not self._interactive:
                reason = "No valid token exists" if not creds else "Token expired without refresh token"
                raise NonInteractiveAuthError(reason)
            creds = self._run_authorization_flow(client_config)

        # Save token for future runs
        self._cache.save(creds)
        self._credentials = creds
        return creds

    @property
    def credentials(self) -> Optional[Credentials]:
        """Access the current credentials (after obtain_credentials)."""
        return self._credentials
