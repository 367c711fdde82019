"""Immutable run configuration for the subject reporter."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).parent.parent

GMAIL_READONLY_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"


class ConfigError(ValueError):
    """Raised when a configuration value is out of range or unparseable."""

    pass


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one reporting run.

    Attributes:
        application_name: Name sent to the Gmail API as the client identifier
        scopes: OAuth scopes requested for the token
        credentials_path: OAuth client-secret descriptor (credentials.json)
        token_dir: Directory holding cached tokens, one file per user label
        user_label: Key under which the token is cached
        callback_port: Local port for the OAuth redirect listener
        auth_timeout_seconds: How long to wait for the browser redirect
        open_browser: Whether to launch a browser for the authorization URL
        interactive: If False, never start the authorization flow
        owner: Mailbox owner for API calls ("me" is the authenticated account)
        max_results: Cap on the number of messages listed
        case_sensitive_headers: Exact-case match on header names
    """

    application_name: str = "APIPROJECT App"
    scopes: tuple[str, ...] = (GMAIL_READONLY_SCOPE,)
    credentials_path: Path = field(
        default_factory=lambda: PROJECT_ROOT / "config" / "credentials.json"
    )
    token_dir: Path = field(default_factory=lambda: PROJECT_ROOT / "config" / "tokens")
    user_label: str = "user"
    callback_port: int = 8888
    auth_timeout_seconds: int = 300
    open_browser: bool = True
    interactive: bool = True
    owner: str = "me"
    max_results: int = 10
    case_sensitive_headers: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_results, bool) or not isinstance(self.max_results, int):
            raise ConfigError("max_results must be an integer")
        if self.max_results < 1:
            raise ConfigError(f"max_results must be positive, got {self.max_results}")
        if not 0 <= self.callback_port <= 65535:
            raise ConfigError(f"callback_port out of range: {self.callback_port}")
        if self.auth_timeout_seconds <= 0:
            raise ConfigError("auth_timeout_seconds must be positive")
        if not self.owner:
            raise ConfigError("owner must not be empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> "ReportConfig":
        """Build a config from GMAIL_* environment variables.

        Keyword overrides take precedence over the environment; overrides
        whose value is None are ignored so CLI defaults can pass through.

        Environment variables:
            GMAIL_CREDENTIALS_PATH: Client-secret descriptor path
            GMAIL_TOKEN_DIR: Token cache directory
            GMAIL_NON_INTERACTIVE: Any non-empty value disables the browser flow
            GMAIL_CALLBACK_PORT: OAuth redirect port
            GMAIL_AUTH_TIMEOUT: Seconds to wait for the redirect
            GMAIL_OWNER: Mailbox owner
            GMAIL_MAX_RESULTS: Message cap
        """
        values: dict[str, Any] = {}

        if os.environ.get("GMAIL_CREDENTIALS_PATH"):
            values["credentials_path"] = Path(os.environ["GMAIL_CREDENTIALS_PATH"])
        if os.environ.get("GMAIL_TOKEN_DIR"):
            values["token_dir"] = Path(os.environ["GMAIL_TOKEN_DIR"])
        if os.environ.get("GMAIL_NON_INTERACTIVE"):
            values["interactive"] = False
        if os.environ.get("GMAIL_OWNER"):
            values["owner"] = os.environ["GMAIL_OWNER"]

        for key, env_name in (
            ("callback_port", "GMAIL_CALLBACK_PORT"),
            ("auth_timeout_seconds", "GMAIL_AUTH_TIMEOUT"),
            ("max_results", "GMAIL_MAX_RESULTS"),
        ):
            parsed = _env_int(env_name)
            if parsed is not None:
                values[key] = parsed

        values.update({k: v for k, v in overrides.items() if v is not None})
        for key in ("credentials_path", "token_dir"):
            if key in values:
                values[key] = Path(values[key])
        if "scopes" in values:
            values["scopes"] = tuple(values["scopes"])

        return cls(**values)

    def with_overrides(self, **changes: Any) -> "ReportConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
