"""Subject reporter for the authenticated Gmail mailbox.

Wires client construction, message listing, per-message fetching and
subject extraction into a single sequential run.
"""

from .models import ExitCode, ReportResult, RunStatus, SkippedMessage, SubjectLine
from .report import SubjectReporter

__all__ = [
    "SubjectReporter",
    "ReportResult",
    "RunStatus",
    "ExitCode",
    "SubjectLine",
    "SkippedMessage",
]
