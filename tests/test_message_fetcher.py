"""Unit tests for message models, header lookup, listing and fetching."""

import logging
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from src.fetcher import (
    FailureKind,
    FetchResult,
    Header,
    Message,
    MessageRef,
    Payload,
    ServiceHandle,
    extract_subject,
    fetch_message,
    find_header,
    list_messages,
)


def _http_error(status: int, content: bytes = b"error") -> HttpError:
    resp = MagicMock()
    resp.status = status
    return HttpError(resp=resp, content=content)


def _message(headers: list[tuple[str, str]] | None, msg_id: str = "msg1") -> Message:
    if headers is None:
        return Message(id=msg_id, payload=None)
    return Message(
        id=msg_id,
        payload=Payload(headers=tuple(Header(n, v) for n, v in headers)),
    )


@pytest.fixture
def mock_service():
    """Create a mock Gmail service."""
    return MagicMock()


@pytest.fixture
def handle(mock_service):
    return ServiceHandle(
        service=mock_service, credentials=MagicMock(), application_name="Test App"
    )


@pytest.fixture
def sample_message():
    """Create a sample Gmail message response."""
    return {
        "id": "msg123",
        "threadId": "thread456",
        "snippet": "This is the email body...",
        "labelIds": ["INBOX", "UNREAD"],
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "From", "value": "John Doe <john@example.com>"},
                {"name": "Subject", "value": "  Test Email Subject  "},
                {"name": "Date", "value": "Mon, 15 Jan 2024 10:30:00 +0000"},
            ],
            "parts": [
                {
                    "mimeType": "text/plain",
                    "headers": [{"name": "Subject", "value": "Nested"}],
                },
            ],
        },
    }


class TestMessageModels:
    """Tests for building models from Gmail API responses."""

    def test_message_ref_from_api(self):
        ref = MessageRef.from_api({"id": "a1", "threadId": "t1"})
        assert ref == MessageRef(id="a1", thread_id="t1")

    def test_message_ref_without_thread(self):
        assert MessageRef.from_api({"id": "a1"}).thread_id == ""

    def test_message_from_api(self, sample_message):
        message = Message.from_api(sample_message)
        assert message.id == "msg123"
        assert message.thread_id == "thread456"
        assert message.labels == ("INBOX", "UNREAD")
        assert message.payload.mime_type == "multipart/alternative"
        assert [h.name for h in message.payload.headers] == ["From", "Subject", "Date"]
        assert message.payload.parts[0].headers[0].value == "Nested"

    def test_message_without_payload(self):
        message = Message.from_api({"id": "msg1"})
        assert message.payload is None

    def test_payload_with_null_headers(self):
        payload = Payload.from_api({"mimeType": "text/plain", "headers": None})
        assert payload.headers == ()

    def test_models_are_immutable(self, sample_message):
        message = Message.from_api(sample_message)
        with pytest.raises(AttributeError):
            message.id = "other"

    def test_to_dict(self, sample_message):
        data = Message.from_api(sample_message).to_dict()
        assert data["id"] == "msg123"
        assert data["headers"][1] == {
            "name": "Subject",
            "value": "  Test Email Subject  ",
        }


class TestFetchResult:
    def test_success(self):
        result = FetchResult.success(("a",))
        assert result.ok
        assert result.value == ("a",)
        assert result.failure is None

    def test_empty_success_is_ok(self):
        result = FetchResult.success(())
        assert result.ok
        assert result.value == ()

    def test_failed(self):
        result = FetchResult.failed(FailureKind.TRANSPORT, "boom")
        assert not result.ok
        assert result.value is None
        assert result.error == "boom"


class TestExtractSubject:
    """Tests for subject extraction from the top-level header list."""

    def test_returns_trimmed_subject(self):
        assert extract_subject(_message([("Subject", "  Hello  ")])) == "Hello"

    def test_first_subject_wins(self):
        message = _message([("Subject", "First"), ("Subject", "Second")])
        assert extract_subject(message) == "First"

    def test_no_subject_header(self):
        assert extract_subject(_message([("From", "a@example.com")])) == ""

    def test_empty_header_list(self):
        assert extract_subject(_message([])) == ""

    def test_missing_payload(self):
        assert extract_subject(_message(None)) == ""

    def test_match_is_case_sensitive_by_default(self):
        message = _message([("subject", "lower"), ("SUBJECT", "upper")])
        assert extract_subject(message) == ""

    def test_case_insensitive_opt_in(self):
        message = _message([("subject", "lower"), ("Subject", "exact")])
        assert extract_subject(message, case_sensitive=False) == "lower"

    def test_nested_parts_not_searched(self, sample_message):
        sample_message["payload"]["headers"] = []
        message = Message.from_api(sample_message)
        assert extract_subject(message) == ""

    def test_idempotent(self, sample_message):
        message = Message.from_api(sample_message)
        first = extract_subject(message)
        assert extract_subject(message) == first == "Test Email Subject"
        assert message.payload.headers[1].value == "  Test Email Subject  "


class TestFindHeader:
    def test_returns_header(self):
        headers = (Header("From", "a@example.com"), Header("To", "b@example.com"))
        assert find_header(headers, "To") == Header("To", "b@example.com")

    def test_missing(self):
        assert find_header((Header("From", "x"),), "To") is None

    def test_works_with_generators(self):
        headers = (Header(n, n.lower()) for n in ("From", "Date", "Subject"))
        assert find_header(headers, "Date").value == "date"


class TestListMessages:
    """Tests for list_messages with a mocked Gmail service."""

    def test_returns_refs_in_order(self, handle, mock_service):
        mock_service.users().messages().list().execute.return_value = {
            "messages": [
                {"id": "a1", "threadId": "t1"},
                {"id": "a2", "threadId": "t2"},
            ]
        }

        result = list_messages(handle, "me", 10)

        assert result.ok
        assert [r.id for r in result.value] == ["a1", "a2"]
        assert result.value[1].thread_id == "t2"

    def test_passes_owner_and_limit(self, handle, mock_service):
        mock_service.users().messages().list().execute.return_value = {"messages": []}

        list_messages(handle, "someone@example.com", 5)

        call_args = mock_service.users().messages().list.call_args
        assert call_args.kwargs == {"userId": "someone@example.com", "maxResults": 5}

    def test_empty_mailbox(self, handle, mock_service):
        mock_service.users().messages().list().execute.return_value = {
            "resultSizeEstimate": 0
        }

        result = list_messages(handle, "me", 10)

        assert result.ok
        assert result.value == ()

    def test_never_returns_more_than_limit(self, handle, mock_service):
        mock_service.users().messages().list().execute.return_value = {
            "messages": [{"id": f"m{i}"} for i in range(5)]
        }

        result = list_messages(handle, "me", 3)

        assert [r.id for r in result.value] == ["m0", "m1", "m2"]

    def test_single_page_only(self, handle, mock_service):
        mock_service.users().messages().list().execute.return_value = {
            "messages": [{"id": "a1"}],
            "nextPageToken": "page2",
        }

        result = list_messages(handle, "me", 10)

        assert len(result.value) == 1
        mock_service.users().messages().list_next.assert_not_called()

    def test_http_error_is_transport_failure(self, handle, mock_service):
        mock_service.users().messages().list().execute.side_effect = _http_error(500)

        result = list_messages(handle, "me", 10)

        assert not result.ok
        assert result.failure is FailureKind.TRANSPORT
        assert result.value is None

    def test_network_error_is_transport_failure(self, handle, mock_service):
        mock_service.users().messages().list().execute.side_effect = (
            httplib2.ServerNotFoundError("Unable to find the server")
        )

        result = list_messages(handle, "me", 10)

        assert result.failure is FailureKind.TRANSPORT

    @pytest.mark.parametrize("limit", [0, -1, True, 2.5])
    def test_rejects_invalid_limit(self, handle, mock_service, limit):
        with pytest.raises(ValueError):
            list_messages(handle, "me", limit)
        mock_service.users().messages().list().execute.assert_not_called()


class TestFetchMessage:
    """Tests for fetch_message with a mocked Gmail service."""

    def test_returns_message(self, handle, mock_service, sample_message):
        mock_service.users().messages().get().execute.return_value = sample_message

        result = fetch_message(handle, "me", "msg123")

        assert result.ok
        assert result.value.id == "msg123"
        call_args = mock_service.users().messages().get.call_args
        assert call_args.kwargs == {"userId": "me", "id": "msg123", "format": "full"}

    def test_not_found(self, handle, mock_service):
        mock_service.users().messages().get().execute.side_effect = _http_error(
            404, b"Not Found"
        )

        result = fetch_message(handle, "me", "gone")

        assert not result.ok
        assert result.failure is FailureKind.NOT_FOUND

    def test_server_error_is_transport_failure(self, handle, mock_service):
        mock_service.users().messages().get().execute.side_effect = _http_error(503)

        result = fetch_message(handle, "me", "msg1")

        assert result.failure is FailureKind.TRANSPORT

    def test_socket_error_is_transport_failure(self, handle, mock_service):
        mock_service.users().messages().get().execute.side_effect = TimeoutError(
            "timed out"
        )

        result = fetch_message(handle, "me", "msg1")

        assert result.failure is FailureKind.TRANSPORT
        assert "timed out" in result.error

    def test_logs_fetched_message_at_debug(
        self, handle, mock_service, sample_message, caplog
    ):
        mock_service.users().messages().get().execute.return_value = sample_message

        with caplog.at_level(logging.DEBUG, logger="src.fetcher.message_fetcher"):
            fetch_message(handle, "me", "msg123")

        assert "Fetched message msg123" in caplog.text
        assert "'labels': ['INBOX', 'UNREAD']" in caplog.text

    def test_programming_errors_propagate(self, handle, mock_service):
        mock_service.users().messages().get().execute.return_value = {"no_id": True}

        with pytest.raises(KeyError):
            fetch_message(handle, "me", "msg1")
