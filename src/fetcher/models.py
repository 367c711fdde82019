"""Message data models and the fetch result type."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class MessageRef:
    """Identifier-only reference returned by a message listing.

    Attributes:
        id: Gmail message ID, enough to fetch the full message
        thread_id: Gmail thread ID (shared by messages in same thread)
    """

    id: str
    thread_id: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "MessageRef":
        """Build from one entry of a messages.list response."""
        return cls(id=data["id"], thread_id=data.get("threadId", ""))


@dataclass(frozen=True)
class Header:
    """A single name/value header on a message part."""

    name: str
    value: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Header":
        return cls(name=data.get("name", ""), value=data.get("value", ""))


@dataclass(frozen=True)
class Payload:
    """Structural body of a message: ordered headers plus nested parts.

    Nested parts are kept for completeness but nothing in the reporter
    descends into them.
    """

    headers: tuple[Header, ...] = ()
    mime_type: str = ""
    parts: tuple["Payload", ...] = ()

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Payload":
        return cls(
            headers=tuple(Header.from_api(h) for h in data.get("headers") or []),
            mime_type=data.get("mimeType", ""),
            parts=tuple(cls.from_api(p) for p in data.get("parts") or []),
        )


@dataclass(frozen=True)
class Message:
    """Full Gmail message as returned by messages.get.

    Attributes:
        id: Gmail message ID
        thread_id: Gmail thread ID
        payload: Top-level payload, or None if the API omitted it
        snippet: Gmail's preview snippet
        labels: Gmail label IDs
    """

    id: str
    thread_id: str = ""
    payload: Optional[Payload] = None
    snippet: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Message":
        """Build from a messages.get response (format='full')."""
        payload = data.get("payload")
        return cls(
            id=data["id"],
            thread_id=data.get("threadId", ""),
            payload=Payload.from_api(payload) if payload is not None else None,
            snippet=data.get("snippet", ""),
            labels=tuple(data.get("labelIds", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the message for logging or debugging output."""
        headers = self.payload.headers if self.payload else ()
        return {
            "id": self.id,
            "thread_id": self.thread_id,
            "headers": [{"name": h.name, "value": h.value} for h in headers],
            "snippet": self.snippet,
            "labels": list(self.labels),
        }


class FailureKind(Enum):
    """Why a fetch operation produced no value."""

    AUTH = "auth"
    TRANSPORT = "transport"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Either a value or a named failure.

    An empty value with no failure is a success: listing an empty mailbox
    returns ``FetchResult(value=())``, while a failed listing carries a
    ``failure`` kind and ``error`` text.
    """

    value: Optional[T] = None
    failure: Optional[FailureKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "FetchResult[T]":
        return cls(failure=kind, error=error)
