"""Listing and retrieval of Gmail messages."""

import logging

from googleapiclient.errors import HttpError

from .client import TRANSPORT_ERRORS, ServiceHandle
from .models import FailureKind, FetchResult, Message, MessageRef

logger = logging.getLogger(__name__)


def _status_of(error: Exception) -> int | None:
    if isinstance(error, HttpError):
        return error.resp.status
    return None


def list_messages(
    handle: ServiceHandle, owner: str, limit: int
) -> FetchResult[tuple[MessageRef, ...]]:
    """List up to ``limit`` message references for a mailbox.

    Only the first page returned by the API is used. The service may
    return fewer than ``limit`` messages; it never yields more.

    Args:
        handle: Authorized Gmail service handle
        owner: Mailbox owner ("me" for the authenticated account)
        limit: Maximum number of messages to return, must be positive

    Returns:
        FetchResult holding a tuple of MessageRef. An empty tuple means the
        mailbox reported no messages; a TRANSPORT failure means the call failed.

    Raises:
        ValueError: If limit is not a positive integer
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    try:
        response = handle.messages().list(userId=owner, maxResults=limit).execute()
    except TRANSPORT_ERRORS as e:
        logger.error("Listing messages for '%s' failed: %s", owner, e)
        return FetchResult.failed(FailureKind.TRANSPORT, str(e))

    raw_messages = response.get("messages") or []
    if not raw_messages:
        logger.info("No messages received for '%s'", owner)
        return FetchResult.success(())

    refs = tuple(MessageRef.from_api(m) for m in raw_messages[:limit])
    logger.debug("Listed %d message(s) for '%s'", len(refs), owner)
    return FetchResult.success(refs)


def fetch_message(
    handle: ServiceHandle, owner: str, message_id: str
) -> FetchResult[Message]:
    """Fetch one full message (headers and payload structure).

    Args:
        handle: Authorized Gmail service handle
        owner: Mailbox owner
        message_id: Gmail message ID from a MessageRef

    Returns:
        FetchResult holding the Message, a NOT_FOUND failure on HTTP 404,
        or a TRANSPORT failure for any other API or network error
    """
    try:
        data = (
            handle.messages()
            .get(userId=owner, id=message_id, format="full")
            .execute()
        )
    except TRANSPORT_ERRORS as e:
        logger.error("Fetching message %s failed: %s", message_id, e)
        if _status_of(e) == 404:
            return FetchResult.failed(FailureKind.NOT_FOUND, str(e))
        return FetchResult.failed(FailureKind.TRANSPORT, str(e))

    message = Message.from_api(data)
    logger.debug("Fetched message %s: %s", message_id, message.to_dict())
    return FetchResult.success(message)
