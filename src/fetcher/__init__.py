"""Gmail access layer.

Public API:
    - GmailAuthenticator: Credential provider with token caching
    - TokenCache: File-backed token store keyed by user label
    - build_client / ServiceHandle: Authorized Gmail service construction
    - list_messages / fetch_message: Message listing and retrieval
    - extract_subject / find_header: Header lookup
    - MessageRef, Message, Payload, Header: Message data models
    - FetchResult, FailureKind: Explicit success/failure result type
    - AuthenticationError and subclasses: Credential failures
"""

from .client import ServiceHandle, build_client
from .exceptions import (
    AuthenticationError,
    AuthorizationFlowError,
    FetcherError,
    NonInteractiveAuthError,
    ScopeMismatchError,
    SecretsNotFoundError,
)
from .gmail_auth import GmailAuthenticator, TokenCache, load_client_secrets
from .headers import extract_subject, find_header
from .message_fetcher import fetch_message, list_messages
from .models import FailureKind, FetchResult, Header, Message, MessageRef, Payload

__all__ = [
    "GmailAuthenticator",
    "TokenCache",
    "load_client_secrets",
    "ServiceHandle",
    "build_client",
    "list_messages",
    "fetch_message",
    "extract_subject",
    "find_header",
    "MessageRef",
    "Message",
    "Payload",
    "Header",
    "FetchResult",
    "FailureKind",
    "FetcherError",
    "AuthenticationError",
    "AuthorizationFlowError",
    "SecretsNotFoundError",
    "ScopeMismatchError",
    "NonInteractiveAuthError",
]
