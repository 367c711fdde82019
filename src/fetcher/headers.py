"""Header lookup helpers."""

from typing import Iterable, Optional

from .models import Header, Message

SUBJECT_HEADER = "Subject"


def find_header(
    headers: Iterable[Header], name: str, case_sensitive: bool = True
) -> Optional[Header]:
    """Return the first header called ``name``, in header order.

    Matching is exact by default. Mail header names are case-insensitive
    by RFC 5322; pass ``case_sensitive=False`` to match them that way.
    """
    if case_sensitive:
        for header in headers:
            if header.name == name:
                return header
        return None

    wanted = name.lower()
    for header in headers:
        if header.name.lower() == wanted:
            return header
    return None


def extract_subject(message: Message, case_sensitive: bool = True) -> str:
    """Return the trimmed Subject of a message's top-level payload.

    Nested parts are not searched. Returns "" when the payload is missing
    or carries no Subject header.
    """
    if message.payload is None:
        return ""
    header = find_header(message.payload.headers, SUBJECT_HEADER, case_sensitive)
    if header is None:
        return ""
    return header.value.strip()
