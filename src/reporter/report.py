"""SubjectReporter - lists a mailbox and prints each message's subject."""

import logging
import sys
import time
from typing import Callable, Optional, TextIO

from src.config import ReportConfig
from src.fetcher import (
    FetchResult,
    ServiceHandle,
    build_client,
    extract_subject,
    fetch_message,
    list_messages,
)

from .models import ReportResult, RunStatus, SkippedMessage, SubjectLine

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ReportConfig], FetchResult[ServiceHandle]]


class SubjectReporter:
    """Prints the subject of each of the first few messages in a mailbox.

    The run is strictly sequential: build the client, list up to
    ``config.max_results`` messages, then fetch each one in listing order.
    A message that cannot be fetched is reported and skipped; the loop
    always runs to the end.

    Example:
        result = SubjectReporter(ReportConfig.from_env()).run()
        sys.exit(result.exit_code)
    """

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        client_factory: Optional[ClientFactory] = None,
        output: Optional[TextIO] = None,
    ):
        self._config = config or ReportConfig.from_env()
        self._client_factory = client_factory or build_client
        self._output = output

    def _emit(self, line: str) -> None:
        print(line, file=self._output or sys.stdout)

    def run(self) -> ReportResult:
        """Execute one reporting run.

        Returns:
            ReportResult describing what was printed and skipped.

        Raises:
            SecretsNotFoundError: If the client-secret descriptor is unusable;
                raised before any network call.
        """
        start = time.monotonic()
        result = self._run()
        result.duration_seconds = round(time.monotonic() - start, 2)
        return result

    def _run(self) -> ReportResult:
        config = self._config

        client = self._client_factory(config)
        if not client.ok:
            self._emit("Gmail API not accessible")
            return ReportResult(status=RunStatus.CLIENT_UNAVAILABLE, error=client.error)
        handle = client.value

        listing = list_messages(handle, config.owner, config.max_results)
        if not listing.ok:
            self._emit(f"Listing messages failed: {listing.error}")
            return ReportResult(status=RunStatus.LISTING_FAILED, error=listing.error)

        refs = listing.value
        if not refs:
            self._emit("No messages received")
            return ReportResult(status=RunStatus.NO_MESSAGES)

        self._emit(f"Number of messages: {len(refs)}")
        result = ReportResult(status=RunStatus.COMPLETED, listed=len(refs))

        for ref in refs:
            fetched = fetch_message(handle, config.owner, ref.id)
            if not fetched.ok:
                self._emit(f"Message data not retrieved for Msg ID {ref.id}")
                result.skipped.append(
                    SkippedMessage(
                        message_id=ref.id, failure=fetched.failure, error=fetched.error
                    )
                )
                continue

            subject = extract_subject(
                fetched.value, case_sensitive=config.case_sensitive_headers
            )
            self._emit(f"Email Subject: {subject}")
            result.subjects.append(SubjectLine(message_id=ref.id, subject=subject))

        self._emit(
            f"Processed {len(result.subjects)} message(s), {len(result.skipped)} failed"
        )
        logger.info(
            "Reported %d subject(s), skipped %d of %d listed",
            len(result.subjects),
            len(result.skipped),
            result.listed,
        )
        return result
