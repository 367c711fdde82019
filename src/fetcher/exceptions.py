"""Exceptions for Gmail fetcher module."""

from pathlib import Path


class FetcherError(Exception):
    """Base exception for all fetcher errors."""

    pass


class AuthenticationError(FetcherError):
    """Raised when Gmail authentication fails."""

    pass


class SecretsNotFoundError(AuthenticationError):
    """Raised when the OAuth client-secret descriptor is missing or unreadable.

    This is the one failure the service factory does not convert into a
    result: without client secrets no API call can ever succeed.
    """

    def __init__(self, path: Path, reason: str = "file not found"):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Client secrets unusable at {path}: {reason}. "
            "Please download OAuth credentials from Google Cloud Console."
        )


class AuthorizationFlowError(AuthenticationError):
    """Raised when the interactive OAuth flow fails.

    Covers user denial, network failures during the code exchange, a busy
    callback port, and the user never completing the browser step.
    """

    pass


class ScopeMismatchError(AuthenticationError):
    """Raised when token scopes don't match required scopes.

    This typically happens when the code requests different scopes
    than what the existing token was authorized for.
    """

    def __init__(self, required_scopes: list[str], token_scopes: list[str]):
        self.required_scopes = required_scopes
        self.token_scopes = token_scopes
        missing = set(required_scopes) - set(token_scopes)
        super().__init__(
            f"Token scopes mismatch. Missing scopes: {missing}. "
            f"Required: {required_scopes}, Token has: {token_scopes}. "
            "Delete the token file and re-authenticate with correct scopes."
        )


class NonInteractiveAuthError(AuthenticationError):
    """Raised when authentication requires user interaction but running in non-interactive mode."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            f"Authentication requires user interaction but GMAIL_NON_INTERACTIVE=1 is set. "
            f"Reason: {reason}. "
            "Either run locally to re-authenticate, or update the stored token."
        )
