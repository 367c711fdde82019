"""Data models for reporting run results."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from src.fetcher import FailureKind


class ExitCode(IntEnum):
    """Process exit codes for a reporting run."""

    OK = 0
    CLIENT_UNAVAILABLE = 1
    SECRETS_NOT_FOUND = 2
    LISTING_FAILED = 3
    INVALID_CONFIG = 4


class RunStatus(Enum):
    """How far a run got."""

    COMPLETED = "completed"
    NO_MESSAGES = "no_messages"
    CLIENT_UNAVAILABLE = "client_unavailable"
    LISTING_FAILED = "listing_failed"


_EXIT_CODES = {
    RunStatus.COMPLETED: ExitCode.OK,
    RunStatus.NO_MESSAGES: ExitCode.OK,
    RunStatus.CLIENT_UNAVAILABLE: ExitCode.CLIENT_UNAVAILABLE,
    RunStatus.LISTING_FAILED: ExitCode.LISTING_FAILED,
}


@dataclass(frozen=True)
class SubjectLine:
    """Subject reported for one message."""

    message_id: str
    subject: str


@dataclass(frozen=True)
class SkippedMessage:
    """A listed message whose full record could not be retrieved."""

    message_id: str
    failure: FailureKind
    error: str | None = None


@dataclass
class ReportResult:
    """Aggregate result of a reporting run."""

    status: RunStatus
    listed: int = 0
    subjects: list[SubjectLine] = field(default_factory=list)
    skipped: list[SkippedMessage] = field(default_factory=list)
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def exit_code(self) -> ExitCode:
        return _EXIT_CODES[self.status]

    @property
    def success(self) -> bool:
        return self.exit_code == ExitCode.OK
