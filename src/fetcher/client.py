"""Gmail service handle construction."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import google.auth.exceptions
import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError
from googleapiclient.http import set_user_agent

from src.config import ReportConfig

from .exceptions import AuthenticationError, SecretsNotFoundError
from .gmail_auth import GmailAuthenticator
from .models import FailureKind, FetchResult

logger = logging.getLogger(__name__)

# Failures of the network or the API itself, as opposed to programming errors
TRANSPORT_ERRORS = (
    HttpError,
    httplib2.HttpLib2Error,
    google.auth.exceptions.TransportError,
    OSError,
)


@dataclass(frozen=True)
class ServiceHandle:
    """Authorized Gmail API resource plus the credentials behind it."""

    service: Resource
    credentials: Credentials
    application_name: str

    def messages(self) -> Any:
        """Shortcut for service.users().messages()."""
        return self.service.users().messages()


def _authorized_http(credentials: Credentials, application_name: str) -> Any:
    http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
    return set_user_agent(http, application_name)


def build_client(
    config: ReportConfig,
    authenticator: Optional[GmailAuthenticator] = None,
    builder: Callable[..., Resource] = build,
) -> FetchResult[ServiceHandle]:
    """Authenticate and build a Gmail service handle.

    Authentication and transport failures are logged and returned as a
    failed result. A missing or malformed client-secret descriptor is
    raised instead, since no later step can recover from it.

    Args:
        config: Run configuration
        authenticator: Credential provider. Defaults to one built from config.
        builder: Discovery builder, injectable for tests

    Returns:
        FetchResult holding a ServiceHandle, or an AUTH/TRANSPORT failure

    Raises:
        SecretsNotFoundError: If credentials.json is missing or unusable
    """
    auth = authenticator or GmailAuthenticator(config)
    try:
        credentials = auth.obtain_credentials()
        service = builder(
            "gmail",
            "v1",
            http=_authorized_http(credentials, config.application_name),
            cache_discovery=False,
        )
    except SecretsNotFoundError:
        raise
    except (AuthenticationError, google.auth.exceptions.RefreshError) as e:
        logger.error("Authentication failed while obtaining Gmail API handle: %s", e)
        return FetchResult.failed(FailureKind.AUTH, str(e))
    except TRANSPORT_ERRORS as e:
        logger.error("Transport error while obtaining Gmail API handle: %s", e)
        return FetchResult.failed(FailureKind.TRANSPORT, str(e))

    logger.debug("Built Gmail API handle for %s", config.application_name)
    return FetchResult.success(
        ServiceHandle(
            service=service,
            credentials=credentials,
            application_name=config.application_name,
        )
    )
