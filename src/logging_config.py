"""Logging setup for the subject reporter.

Report lines are printed to stdout; log records always go to a separate
stream (stderr by default) so the two never interleave in a pipe.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import TextIO

NOISY_LOGGERS = ("googleapiclient", "google.auth", "google_auth_httplib2", "urllib3")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line with timestamp, level, logger and message."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(
    level_override: str | None = None, stream: TextIO | None = None
) -> None:
    """Install a single root handler.

    Args:
        level_override: Takes precedence over the LOG_LEVEL env var.
        stream: Destination for log records. Defaults to sys.stderr.

    Environment variables:
        LOG_LEVEL: DEBUG, INFO, WARNING or ERROR. Unknown values mean INFO.
        LOG_FORMAT: "json" for JSON lines, anything else for text.
    """
    level_name = (level_override or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    if os.getenv("LOG_FORMAT", "text").lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Discovery and token refresh chatter is only useful when debugging them
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
